# tests/test_grading.py

import pytest

from score_core.grading import grade_answers, preview_injection, AnswerLengthMismatch
from score_core.schema import Question, TestDefinition


def make_test(correct_indices, pass_percentage=70.0):
    return TestDefinition(
        id="t1",
        test_type="post",
        questions=[Question(correct_option_index=c) for c in correct_indices],
        pass_percentage=pass_percentage,
    )


def test_grade_counts_matches():
    test = make_test([0, 1, 2, 3])
    report = grade_answers(test.questions, [0, 1, 0, 0])

    assert report.correct_count == 2
    assert report.total == 4
    assert report.score == 50.0
    assert not report.passed


def test_pass_mark_is_inclusive():
    test = make_test([2] * 10)
    report = grade_answers(test.questions, [2] * 7 + [0] * 3, pass_percentage=70)
    assert report.passed, "70% must pass a 70% pass mark"


def test_score_rounded_to_two_decimals():
    test = make_test([1, 1, 1])
    report = grade_answers(test.questions, [1, 0, 0])
    assert report.score == 33.33


def test_length_mismatch():
    test = make_test([1, 2])
    with pytest.raises(AnswerLengthMismatch):
        grade_answers(test.questions, [1])


def test_summary_text():
    test = make_test([2] * 10)
    report = grade_answers(test.questions, [2] * 7 + [0] * 3)
    assert report.summary() == "70% (7/10 correct)"


def test_preview_uses_program_pass_mark():
    test = make_test([3] * 10, pass_percentage=80)
    answers, report = preview_injection(75, test)

    # 7.5 -> 8 correct
    assert answers == [3] * 8 + [0] * 2
    assert report.correct_count == 8
    assert report.passed


def test_preview_failing_target():
    test = make_test([1] * 4, pass_percentage=70)
    _, report = preview_injection(50, test)
    assert report.score == 50.0
    assert not report.passed
