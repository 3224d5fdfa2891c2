"""
admin_console
-----------------------------------
Super-admin tooling on top of score_core: backend REST client, settings,
and the test score injection workflow.
"""

from .config import ConsoleSettings
from .api_client import ApiClientError, TrainingApiClient
from .injector import (
    InjectionResult,
    TestNotFound,
    TestScoreInjector,
    active_sessions,
    is_session_active,
)

__all__ = [
    "ConsoleSettings",
    "ApiClientError",
    "TrainingApiClient",
    "InjectionResult",
    "TestNotFound",
    "TestScoreInjector",
    "active_sessions",
    "is_session_active",
]
