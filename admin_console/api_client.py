"""
admin_console/api_client.py
-----------------------------------
REST client for the training backend used by the super-admin console.

Highlights:
- One httpx.Client per console (base URL, bearer token, timeout)
- Minimum spacing between calls, shared across threads
- Retry with exponential backoff + jitter on 429 / 5xx / timeouts
- Honours Retry-After on 429
- 4xx other than 429 fail immediately (not retryable)
- Payloads become dataclasses at this boundary (ParticipantRecord, TestDefinition, ...)
"""

import time
import random
import logging
from threading import Lock
from typing import Any, Callable, Dict, List, Optional, Sequence

import httpx

from score_core.schema import ParticipantRecord, ScoredResult, TestDefinition
from .config import ConsoleSettings

logger = logging.getLogger(__name__)

RETRYABLE_STATUS = {429, 500, 502, 503, 504}


# ==============================
# Exceptions
# ==============================
class ApiClientError(Exception):
    """Request failed: not retryable, or retries exhausted."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        last_exception: Optional[BaseException] = None,
        attempts: int = 0,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.last_exception = last_exception
        self.attempts = attempts


# ==============================
# TrainingApiClient
# ==============================
class TrainingApiClient:
    def __init__(
        self,
        settings: ConsoleSettings,
        transport: Optional[httpx.BaseTransport] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Args:
            settings: base URL, token, timeout and retry limits
            transport: custom httpx transport (tests use httpx.MockTransport)
            sleep: waiting function, replaced in tests
        """
        self.settings = settings
        self.min_interval = settings.min_interval
        self.max_retries = max(1, settings.max_retries)
        self.max_wait = settings.max_wait
        self._sleep = sleep

        headers = {"Accept": "application/json"}
        if settings.api_token:
            headers["Authorization"] = f"Bearer {settings.api_token}"
        self._http = httpx.Client(
            base_url=settings.api_base_url,
            headers=headers,
            timeout=settings.timeout,
            transport=transport,
        )

        self._lock = Lock()
        self._last_call = 0.0

    def close(self):
        self._http.close()

    def __enter__(self) -> "TrainingApiClient":
        return self

    def __exit__(self, *exc):
        self.close()

    # ------------------------------
    # Request spacing
    # ------------------------------
    def _wait_for_slot(self):
        if self.min_interval <= 0:
            return
        with self._lock:
            elapsed = time.monotonic() - self._last_call
            if elapsed < self.min_interval:
                wait = self.min_interval - elapsed
                logger.debug(f"Waiting {wait:.2f}s before next API call")
                self._sleep(wait)
            self._last_call = time.monotonic()

    def _compute_backoff(self, attempt: int, retry_after: Optional[float]) -> float:
        if retry_after is not None:
            return min(self.max_wait, max(0.0, retry_after))
        return min(self.max_wait, 2 ** attempt + random.uniform(0.5, 2.0))

    @staticmethod
    def _get_retry_after(response: httpx.Response) -> Optional[float]:
        value = response.headers.get("Retry-After")
        if not value:
            return None
        try:
            return float(value)
        except ValueError:
            return None

    # ------------------------------
    # Main entry: request with retry
    # ------------------------------
    def _request(self, method: str, path: str, retry: bool = True, **kwargs) -> Any:
        """
        Send a request and return the decoded JSON body.
        Raises ApiClientError when the call cannot succeed.

        retry=False is for non-idempotent calls: only a failed connect
        (request never left the client) is retried, anything else raises
        on the first attempt.
        """
        last_exc: Optional[BaseException] = None
        last_status: Optional[int] = None

        for attempt in range(1, self.max_retries + 1):
            self._wait_for_slot()

            try:
                response = self._http.request(method, path, **kwargs)
            except httpx.ConnectError as e:
                wait_time = self._compute_backoff(attempt, None)
                logger.warning(f"Cannot connect for {method} {path}: {e}. Retrying in {wait_time:.1f}s ({attempt}/{self.max_retries})")
                last_exc = e
                if attempt < self.max_retries:
                    self._sleep(wait_time)
                continue
            except httpx.TimeoutException as e:
                if not retry:
                    logger.error(f"⏱️ Timeout on {method} {path}, not retried")
                    raise ApiClientError(f"{method} {path} timed out", last_exception=e, attempts=attempt) from e
                wait_time = self._compute_backoff(attempt, None)
                logger.warning(f"⏱️ Timeout on {method} {path}. Retrying in {wait_time:.1f}s ({attempt}/{self.max_retries})")
                last_exc = e
                if attempt < self.max_retries:
                    self._sleep(wait_time)
                continue
            except httpx.TransportError as e:
                if not retry:
                    logger.error(f"Network error on {method} {path}, not retried: {e}")
                    raise ApiClientError(f"{method} {path} failed: {e}", last_exception=e, attempts=attempt) from e
                wait_time = self._compute_backoff(attempt, None)
                logger.warning(f"Network error on {method} {path}: {e}. Retrying in {wait_time:.1f}s ({attempt}/{self.max_retries})")
                last_exc = e
                if attempt < self.max_retries:
                    self._sleep(wait_time)
                continue

            status = response.status_code
            if status in RETRYABLE_STATUS and retry:
                retry_after = self._get_retry_after(response) if status == 429 else None
                wait_time = self._compute_backoff(attempt, retry_after)
                logger.warning(f"⚠️ HTTP {status} on {method} {path}. Retrying in {wait_time:.1f}s ({attempt}/{self.max_retries})")
                last_status = status
                last_exc = None
                if attempt < self.max_retries:
                    self._sleep(wait_time)
                continue

            if status >= 400:
                detail = _error_detail(response)
                logger.error(f"🚫 {method} {path} failed with HTTP {status}: {detail}")
                raise ApiClientError(f"{method} {path} failed ({status}): {detail}", status_code=status, attempts=attempt)

            if not response.content:
                return None
            try:
                return response.json()
            except ValueError as e:
                logger.error(f"🚫 {method} {path} returned a non-JSON body: {response.text[:80]!r}")
                raise ApiClientError(
                    f"{method} {path} returned a non-JSON response", status_code=status, last_exception=e, attempts=attempt
                ) from e

        raise ApiClientError(
            f"{method} {path} failed after {self.max_retries} attempts",
            status_code=last_status,
            last_exception=last_exc,
            attempts=self.max_retries,
        )

    # ------------------------------
    # Sessions & participants
    # ------------------------------
    def list_sessions(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/sessions") or []

    def get_session(self, session_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/sessions/{session_id}")

    def list_session_participants(self, session_id: str) -> List[ParticipantRecord]:
        rows = self._request("GET", f"/sessions/{session_id}/participants") or []
        return _parse_rows(ParticipantRecord.from_payload, rows, f"/sessions/{session_id}/participants")

    # ------------------------------
    # Programs & tests
    # ------------------------------
    def list_programs(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/programs") or []

    def get_pass_percentage(self, program_id: str) -> Optional[float]:
        """Program pass mark, or None when the program is not listed."""
        for program in self.list_programs():
            if str(program.get("id")) == str(program_id) and program.get("pass_percentage") is not None:
                return float(program["pass_percentage"])
        return None

    def fetch_test_for_program_and_type(self, program_id: str, test_type: str) -> Optional[TestDefinition]:
        """The program's pre- or post-test, or None when the program has none of that type."""
        tests = self._request("GET", f"/tests/program/{program_id}") or []
        match = next((t for t in tests if t.get("test_type") == test_type), None)
        if match is None:
            return None
        return TestDefinition.from_payload(match, pass_percentage=self.get_pass_percentage(program_id))

    def list_participant_results(self, participant_id: str) -> List[ScoredResult]:
        path = f"/tests/results/participant/{participant_id}"
        rows = self._request("GET", path) or []
        return _parse_rows(ScoredResult.from_payload, rows, path)

    def submit_answers(
        self,
        test_id: str,
        session_id: str,
        participant_id: str,
        answers: Sequence[int],
    ) -> ScoredResult:
        payload = {
            "test_id": test_id,
            "session_id": session_id,
            "participant_id": participant_id,
            "answers": list(answers),
        }
        # not idempotent: a resent submission stores a second result
        data = self._request("POST", "/tests/super-admin-submit", retry=False, json=payload) or {}
        if not isinstance(data, dict):
            raise ApiClientError(f"Unexpected payload from /tests/super-admin-submit: {data!r}"[:200])
        return _parse_rows(ScoredResult.from_payload, [{**payload, **data}], "/tests/super-admin-submit")[0]


def _parse_rows(parse: Callable[[Dict[str, Any]], Any], rows: List[Any], path: str) -> List[Any]:
    """Convert payload rows to dataclasses; a malformed row becomes ApiClientError."""
    try:
        return [parse(row) for row in rows]
    except (TypeError, ValueError, AttributeError) as e:
        logger.error(f"🚫 Unexpected payload from {path}: {e}")
        raise ApiClientError(f"Unexpected payload from {path}: {e}", last_exception=e) from e


def _error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text[:200]
    if isinstance(body, dict) and "detail" in body:
        return str(body["detail"])
    return str(body)[:200]
