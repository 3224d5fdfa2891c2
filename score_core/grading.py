# score_core/grading.py

from dataclasses import dataclass
from typing import List, Sequence, Tuple

from .schema import DEFAULT_PASS_PERCENTAGE, Question, TestDefinition
from .synthesizer import synthesize_answers


class AnswerLengthMismatch(ValueError):
    """Answer vector and question list differ in length."""


@dataclass(frozen=True)
class GradeReport:
    correct_count: int
    total: int
    score: float  # percentage 0..100
    passed: bool

    def summary(self) -> str:
        """Short form shown to the operator, e.g. '70% (7/10 correct)'."""
        return f"{self.score:g}% ({self.correct_count}/{self.total} correct)"


def grade_answers(
    questions: Sequence[Question],
    answers: Sequence[int],
    pass_percentage: float = DEFAULT_PASS_PERCENTAGE,
) -> GradeReport:
    """Compare each selected option with the correct one; passed means score >= pass mark."""
    if len(questions) != len(answers):
        raise AnswerLengthMismatch(f"{len(answers)} answers for {len(questions)} questions")
    if not questions:
        return GradeReport(correct_count=0, total=0, score=0.0, passed=False)

    correct = sum(1 for q, a in zip(questions, answers) if a == q.correct_option_index)
    score = round(correct / len(questions) * 100, 2)
    return GradeReport(
        correct_count=correct,
        total=len(questions),
        score=score,
        passed=score >= pass_percentage,
    )


def preview_injection(target_percentage: float, test: TestDefinition) -> Tuple[List[int], GradeReport]:
    """Synthesize answers for a test and grade them against the program pass mark."""
    answers = synthesize_answers(target_percentage, test.questions)
    return answers, grade_answers(test.questions, answers, test.pass_percentage)
