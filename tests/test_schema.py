# tests/test_schema.py

import pytest

from score_core.schema import (
    Question,
    TestDefinition,
    ParticipantRecord,
    ScoredResult,
    InvalidQuestion,
)


def test_question_from_payload_uses_option_list():
    q = Question.from_payload({
        "id": 7,
        "question": "Minimum tyre tread depth?",
        "options": ["1mm", "1.6mm", "2mm"],
        "correct_answer": 1,
    })
    assert q.id == "7"
    assert q.option_count == 3
    assert q.correct_option_index == 1
    assert q.text.startswith("Minimum")


def test_question_without_options_defaults_to_four():
    q = Question.from_payload({"correct_answer": 3})
    assert q.option_count == 4
    assert q.id is None


@pytest.mark.parametrize("payload", [
    {"options": ["a", "b"], "correct_answer": 2},
    {"correct_answer": -1},
    {"options": ["only"], "correct_answer": 0},
    {"options": ["a", "b"]},
    {"correct_answer": "x"},
])
def test_question_invalid_payload(payload):
    with pytest.raises(InvalidQuestion):
        Question.from_payload(payload)


def test_test_definition_from_payload():
    test = TestDefinition.from_payload(
        {
            "id": "abc",
            "program_id": 12,
            "test_type": "pre",
            "questions": [{"correct_answer": 0}, {"correct_answer": 2}],
        },
        pass_percentage=60,
    )
    assert test.id == "abc"
    assert test.program_id == "12"
    assert test.question_count == 2
    assert test.pass_percentage == 60.0


def test_test_definition_default_pass_mark():
    test = TestDefinition.from_payload({"id": 1, "test_type": "post", "questions": []})
    assert test.pass_percentage == 70.0
    assert test.questions == []


def test_participant_from_nested_user():
    p = ParticipantRecord.from_payload({
        "id": "enrolment-1",
        "user": {"id": "u-9", "full_name": "Aina Rahman", "email": "aina@example.com"},
    })
    assert p == ParticipantRecord(id="u-9", name="Aina Rahman", email="aina@example.com")


def test_participant_from_bare_user():
    p = ParticipantRecord.from_payload({"id": 42, "name": "Tan Wei"})
    assert p.id == "42"
    assert p.name == "Tan Wei"
    assert p.email == ""


def test_participant_without_id():
    with pytest.raises(ValueError):
        ParticipantRecord.from_payload({"user": {"name": "nobody"}})


def test_scored_result_from_payload():
    r = ScoredResult.from_payload({
        "id": "r1", "test_id": "t1", "session_id": "s1",
        "participant_id": "u1", "score": 80, "passed": True, "test_type": "post",
    })
    assert r.score == 80.0
    assert r.passed
    assert r.test_type == "post"


def test_scored_result_with_null_score():
    r = ScoredResult.from_payload({"session_id": "s1", "test_type": "pre", "score": None, "passed": None})
    assert r.score == 0.0
    assert not r.passed
