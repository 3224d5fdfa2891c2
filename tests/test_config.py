# tests/test_config.py

import pytest

from admin_console.config import ConsoleSettings

ENV_VARS = [
    "TRAINING_API_URL",
    "TRAINING_API_TOKEN",
    "TRAINING_API_TIMEOUT",
    "TRAINING_API_MAX_RETRIES",
    "TRAINING_API_MIN_INTERVAL",
    "TRAINING_API_MAX_WAIT",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_reads_dotenv_file(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text(
        "TRAINING_API_URL=https://training.example.com/api/\n"
        "TRAINING_API_TOKEN=abc123\n"
        "TRAINING_API_MAX_RETRIES=5\n",
        encoding="utf-8",
    )

    settings = ConsoleSettings.from_env(str(env_file))

    assert settings.api_base_url == "https://training.example.com/api"
    assert settings.api_token == "abc123"
    assert settings.max_retries == 5
    assert settings.timeout == 15.0


def test_environment_wins_over_dotenv(tmp_path, monkeypatch):
    env_file = tmp_path / ".env"
    env_file.write_text("TRAINING_API_URL=https://from-file\n", encoding="utf-8")
    monkeypatch.setenv("TRAINING_API_URL", "https://from-env")

    assert ConsoleSettings.from_env(str(env_file)).api_base_url == "https://from-env"


def test_missing_url(tmp_path):
    with pytest.raises(ValueError, match="TRAINING_API_URL"):
        ConsoleSettings.from_env(str(tmp_path / "missing.env"))


def test_bad_number(tmp_path, monkeypatch):
    monkeypatch.setenv("TRAINING_API_URL", "https://x")
    monkeypatch.setenv("TRAINING_API_TIMEOUT", "fast")
    with pytest.raises(ValueError, match="TRAINING_API_TIMEOUT"):
        ConsoleSettings.from_env(str(tmp_path / "missing.env"))
