# score_core/__init__.py

"""
Core module for the training score console

Contents:
- Question / TestDefinition / ParticipantRecord / ScoredResult schema
- Score-to-answer synthesizer used by the super-admin test injection
- Grading of an answer vector against a program pass mark

Common exports:
    Question, TestDefinition, ParticipantRecord, ScoredResult
    synthesize_answers, correct_count_for, InvalidScore, EmptyTestDefinition
    grade_answers, preview_injection, GradeReport
"""

# Schema models
from .schema import (
    Question,
    TestDefinition,
    ParticipantRecord,
    ScoredResult,
    InvalidQuestion,
    TEST_TYPES,
)

# Answer synthesis
from .synthesizer import (
    synthesize_answers,
    correct_count_for,
    round_half_away_from_zero,
    validate_target_percentage,
    wrong_option_for,
    SynthesisError,
    InvalidScore,
    EmptyTestDefinition,
)

# Grading
from .grading import (
    grade_answers,
    preview_injection,
    GradeReport,
    AnswerLengthMismatch,
)


__all__ = [
    # Schema
    "Question",
    "TestDefinition",
    "ParticipantRecord",
    "ScoredResult",
    "InvalidQuestion",
    "TEST_TYPES",

    # Synthesis
    "synthesize_answers",
    "correct_count_for",
    "round_half_away_from_zero",
    "validate_target_percentage",
    "wrong_option_for",
    "SynthesisError",
    "InvalidScore",
    "EmptyTestDefinition",

    # Grading
    "grade_answers",
    "preview_injection",
    "GradeReport",
    "AnswerLengthMismatch",
]
