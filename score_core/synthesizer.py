# score_core/synthesizer.py

import math
import logging
from typing import List, Sequence

from .schema import Question

logger = logging.getLogger(__name__)


# ============================
# Input errors
# ============================

class SynthesisError(ValueError):
    """Input that cannot be turned into an answer vector. Not retryable."""


class InvalidScore(SynthesisError):
    def __init__(self, value):
        super().__init__(f"Target score must be a number between 0 and 100, got {value!r}")
        self.value = value


class EmptyTestDefinition(SynthesisError):
    def __init__(self):
        super().__init__("Test has no questions to answer")


# ============================
# Rounding & correct count
# ============================

def round_half_away_from_zero(x: float) -> int:
    """
    2.5 -> 3, -2.5 -> -3. Python's round() would give 2 (banker's rounding).
    Compares the fraction instead of adding 0.5: 0.49999999999999994 + 0.5
    is 1.0 in floating point.
    """
    a = abs(x)
    f = math.floor(a)
    r = f + 1 if a - f >= 0.5 else f
    return int(math.copysign(r, x))


def validate_target_percentage(target_percentage) -> float:
    """Return the target as float or raise InvalidScore (NaN, bool and out-of-range included)."""
    if isinstance(target_percentage, bool):
        raise InvalidScore(target_percentage)
    try:
        value = float(target_percentage)
    except (TypeError, ValueError):
        raise InvalidScore(target_percentage) from None
    if math.isnan(value) or not (0.0 <= value <= 100.0):
        raise InvalidScore(target_percentage)
    return value


def correct_count_for(target_percentage: float, question_count: int) -> int:
    """Number of questions that must be answered correctly to hit the target."""
    # (t / 100) * n, same operation order as the stored historical results
    return round_half_away_from_zero((target_percentage / 100) * question_count)


def wrong_option_for(question: Question) -> int:
    """Lowest option index that is not the correct one: 0, or 1 when 0 is correct."""
    return 1 if question.correct_option_index == 0 else 0


# ============================
# Answer synthesis
# ============================

def synthesize_answers(target_percentage: float, questions: Sequence[Question]) -> List[int]:
    """
    Build an answer vector that grades to target_percentage.

    The first correct_count questions (in test order) get their correct
    option, every remaining question gets wrong_option_for(question).
    Wrong answers are deterministic and never spread across distractors.

    Raises:
        InvalidScore: target not a number in [0, 100]
        EmptyTestDefinition: no questions
    """
    target = validate_target_percentage(target_percentage)
    if not questions:
        raise EmptyTestDefinition()

    n = len(questions)
    correct_count = correct_count_for(target, n)

    answers = [
        q.correct_option_index if i < correct_count else wrong_option_for(q)
        for i, q in enumerate(questions)
    ]
    logger.debug(f"Synthesized {correct_count}/{n} correct for target {target}%")
    return answers
