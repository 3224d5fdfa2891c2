"""
admin_console/injector.py
-----------------------------------
Super-admin test injection: record a pre-/post-test for a participant as if
they had taken it, at an operator-chosen score.

Flow: session -> program -> test of the requested type -> synthesized
answers -> POST /tests/super-admin-submit.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional

from tqdm import tqdm

from score_core.grading import GradeReport, preview_injection
from score_core.schema import TEST_TYPES, ScoredResult
from score_core.synthesizer import validate_target_percentage
from .api_client import ApiClientError, TrainingApiClient

logger = logging.getLogger(__name__)


class TestNotFound(LookupError):
    """The session's program has no test of the requested type."""

    __test__ = False

    def __init__(self, program_id: str, test_type: str):
        super().__init__(f"No {test_type}-test found for program {program_id}")
        self.program_id = program_id
        self.test_type = test_type


@dataclass
class InjectionResult:
    participant_id: str
    test_type: str
    target_percentage: float
    expected: Optional[GradeReport] = None
    result: Optional[ScoredResult] = None
    skipped: bool = False
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.result is not None


# ============================
# Active session filter
# ============================

def _parse_date(value: Any) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value:
        return None
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00")).date()
    except ValueError:
        return None


def is_session_active(session: Dict[str, Any], today: Optional[date] = None) -> bool:
    """Active = not yet ended, or explicitly marked active by the backend."""
    if session.get("status") == "active":
        return True
    end = _parse_date(session.get("end_date"))
    return end is not None and end >= (today or date.today())


def active_sessions(sessions: Iterable[Dict[str, Any]], today: Optional[date] = None) -> List[Dict[str, Any]]:
    return [s for s in sessions if is_session_active(s, today)]


# ============================
# Injector
# ============================

class TestScoreInjector:
    __test__ = False

    def __init__(self, client: TrainingApiClient, show_progress: bool = True):
        self.client = client
        self.show_progress = show_progress

    def _resolve_test(self, session_id: str, test_type: str):
        session = self.client.get_session(session_id)
        program_id = str(session["program_id"])
        test = self.client.fetch_test_for_program_and_type(program_id, test_type)
        if test is None:
            raise TestNotFound(program_id, test_type)
        return test

    @staticmethod
    def _check_inputs(test_type: str, target_percentage) -> float:
        if test_type not in TEST_TYPES:
            raise ValueError(f"test_type must be one of {TEST_TYPES}, got {test_type!r}")
        return validate_target_percentage(target_percentage)

    def inject(self, session_id: str, participant_id: str, test_type: str, target_percentage: float) -> InjectionResult:
        """
        Submit a synthesized test for one participant.
        Raises InvalidScore, ValueError (test type), TestNotFound, EmptyTestDefinition, ApiClientError.
        """
        target = self._check_inputs(test_type, target_percentage)
        test = self._resolve_test(session_id, test_type)
        return self._submit(test, session_id, participant_id, target)

    def _submit(self, test, session_id: str, participant_id: str, target: float) -> InjectionResult:
        answers, expected = preview_injection(target, test)
        result = self.client.submit_answers(test.id, session_id, participant_id, answers)
        logger.info(
            f"{test.test_type}-test submitted for participant {participant_id} "
            f"in session {session_id}: {expected.summary()}"
        )
        return InjectionResult(
            participant_id=participant_id,
            test_type=test.test_type,
            target_percentage=target,
            expected=expected,
            result=result,
        )

    def _has_result(self, participant_id: str, session_id: str, test_type: str) -> bool:
        results = self.client.list_participant_results(participant_id)
        return any(r.session_id == str(session_id) and r.test_type == test_type for r in results)

    def inject_session(
        self,
        session_id: str,
        test_type: str,
        target_percentage: float,
        skip_completed: bool = True,
    ) -> List[InjectionResult]:
        """
        Inject the same target score for every participant of a session.
        A failing participant is recorded in its InjectionResult and the batch continues.
        """
        target = self._check_inputs(test_type, target_percentage)
        test = self._resolve_test(session_id, test_type)
        participants = self.client.list_session_participants(session_id)

        results: List[InjectionResult] = []
        for p in tqdm(participants, desc=f"Injecting {test_type}-test", ncols=80, disable=not self.show_progress):
            try:
                if skip_completed and self._has_result(p.id, session_id, test_type):
                    logger.info(f"Participant {p.id} already has a {test_type}-test result, skipped")
                    results.append(InjectionResult(p.id, test_type, target, skipped=True))
                    continue
                results.append(self._submit(test, session_id, p.id, target))
            except ApiClientError as e:
                logger.error(f"Injection failed for participant {p.id}: {e}")
                results.append(InjectionResult(p.id, test_type, target, error=str(e)))

        done = sum(1 for r in results if r.ok)
        logger.info(f"Session {session_id}: {done}/{len(participants)} {test_type}-tests injected")
        return results
