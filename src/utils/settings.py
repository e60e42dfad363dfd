"""Runtime settings for the registration data source."""
import os
from dataclasses import dataclass
from pathlib import Path
from threading import Lock
from typing import Optional


SOURCE_REMOTE = "remote"
SOURCE_FIXTURE = "fixture"
VALID_SOURCES = (SOURCE_REMOTE, SOURCE_FIXTURE)

ENV_KEYS = {
    "REGISTRATION_SOURCE",
    "REGISTRATION_API_URL",
    "REGISTRATION_API_PATH",
    "REGISTRATION_API_TIMEOUT",
    "REGISTRATION_FIXTURE_PATH",
    "REGISTRATION_FIXTURE_LATENCY",
}

_ENV_LOADED = False
_ENV_LOCK = Lock()


@dataclass(frozen=True)
class Settings:
    """Where and how registrations are fetched."""

    source: str = SOURCE_FIXTURE
    api_url: str = "http://localhost:5000"
    api_path: str = "/api/registrations"
    api_timeout: float = 10.0
    fixture_path: Optional[str] = None
    fixture_latency: float = 0.0

    def __post_init__(self):
        """Validate settings after initialization."""
        if self.source not in VALID_SOURCES:
            raise ValueError(f"Registration source must be one of {list(VALID_SOURCES)}, got: {self.source}")

        if self.api_timeout <= 0:
            raise ValueError("API timeout must be positive")

        if self.fixture_latency < 0:
            raise ValueError("Fixture latency cannot be negative")

        if not self.api_path.startswith("/"):
            raise ValueError(f"API path must start with '/': {self.api_path}")


def _load_env_file(env_path: Path = Path(".env")) -> None:
    """Load registration settings from .env file if present."""
    global _ENV_LOADED

    if _ENV_LOADED:
        return

    with _ENV_LOCK:
        if _ENV_LOADED:
            return

        if env_path.exists():
            for raw_line in env_path.read_text(encoding="utf-8").splitlines():
                line = raw_line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue

                key, value = line.split("=", 1)
                key = key.strip()
                value = value.strip().strip('"\'')

                if key in ENV_KEYS and key not in os.environ:
                    os.environ[key] = value

        _ENV_LOADED = True


def _read_float(key: str, default: float) -> float:
    raw = os.getenv(key)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ValueError(f"{key} must be a number, got: {raw}") from e


def get_settings() -> Settings:
    """
    Build settings from environment variables.

    Returns:
        Settings instance

    Behavior:
        - Loads .env once per process; existing environment variables win
        - Falls back to the built-in demo fixture when nothing is configured

    Raises:
        ValueError: If any configured value is invalid
    """
    _load_env_file()

    fixture_path = os.getenv("REGISTRATION_FIXTURE_PATH", "").strip() or None

    return Settings(
        source=os.getenv("REGISTRATION_SOURCE", SOURCE_FIXTURE).strip().lower(),
        api_url=os.getenv("REGISTRATION_API_URL", "http://localhost:5000").strip().rstrip("/"),
        api_path=os.getenv("REGISTRATION_API_PATH", "/api/registrations").strip(),
        api_timeout=_read_float("REGISTRATION_API_TIMEOUT", 10.0),
        fixture_path=fixture_path,
        fixture_latency=_read_float("REGISTRATION_FIXTURE_LATENCY", 0.0),
    )
