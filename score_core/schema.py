# score_core/schema.py

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

DEFAULT_OPTION_COUNT = 4
DEFAULT_PASS_PERCENTAGE = 70.0
TEST_TYPES = ("pre", "post")


class InvalidQuestion(ValueError):
    """Question payload whose correct option falls outside its options."""


@dataclass(frozen=True)
class Question:
    """
    One multiple-choice question of a pre-/post-test.
    - options: option texts, may be empty when the backend only sends the key
    - correct_option_index: 0-based index into the options
    """
    correct_option_index: int
    option_count: int = DEFAULT_OPTION_COUNT
    id: Optional[str] = None
    text: str = ""
    options: List[str] = field(default_factory=list)

    def __post_init__(self):
        if self.option_count < 2:
            raise InvalidQuestion(f"Question {self.id!r} needs at least 2 options, got {self.option_count}")
        if not (0 <= self.correct_option_index < self.option_count):
            raise InvalidQuestion(
                f"Question {self.id!r}: correct option {self.correct_option_index} "
                f"out of range 0..{self.option_count - 1}"
            )

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> "Question":
        options = [str(o) for o in data.get("options") or []]
        try:
            correct = int(data["correct_answer"])
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidQuestion(f"Question payload without a usable correct_answer: {data!r}") from e
        qid = data.get("id")
        return cls(
            correct_option_index=correct,
            option_count=len(options) or DEFAULT_OPTION_COUNT,
            id=str(qid) if qid is not None else None,
            text=data.get("question", ""),
            options=options,
        )


@dataclass
class TestDefinition:
    """A program's pre- or post-test together with the program pass mark."""
    id: str
    test_type: str  # pre | post
    questions: List[Question]
    program_id: Optional[str] = None
    pass_percentage: float = DEFAULT_PASS_PERCENTAGE

    __test__ = False  # not a pytest class

    @property
    def question_count(self) -> int:
        return len(self.questions)

    @classmethod
    def from_payload(cls, data: Dict[str, Any], pass_percentage: Optional[float] = None) -> "TestDefinition":
        return cls(
            id=str(data["id"]),
            test_type=data.get("test_type", ""),
            questions=[Question.from_payload(q) for q in data.get("questions") or []],
            program_id=str(data["program_id"]) if data.get("program_id") is not None else None,
            pass_percentage=DEFAULT_PASS_PERCENTAGE if pass_percentage is None else float(pass_percentage),
        )


@dataclass(frozen=True)
class ParticipantRecord:
    """
    Participant identity resolved once at the fetch boundary.
    The backend returns either the user itself or an enrolment row with
    the user nested under "user".
    """
    id: str
    name: str = ""
    email: str = ""

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> "ParticipantRecord":
        user = data.get("user") or data
        if user.get("id") is None:
            raise ValueError(f"Participant payload without id: {data!r}")
        return cls(
            id=str(user["id"]),
            name=user.get("full_name") or user.get("name") or "",
            email=user.get("email") or "",
        )


@dataclass
class ScoredResult:
    """Result row stored by the backend after a submission."""
    test_id: str
    session_id: str
    participant_id: str
    score: float
    passed: bool
    id: Optional[str] = None
    test_type: Optional[str] = None

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> "ScoredResult":
        return cls(
            test_id=str(data.get("test_id", "")),
            session_id=str(data.get("session_id", "")),
            participant_id=str(data.get("participant_id", "")),
            score=float(data.get("score") or 0.0),
            passed=bool(data.get("passed")),
            id=str(data["id"]) if data.get("id") is not None else None,
            test_type=data.get("test_type"),
        )
