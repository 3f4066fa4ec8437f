import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


@dataclass
class Settings:
    """Runtime knobs, overridable through POWSIM_* environment variables."""
    report_interval_ms: int = 2000
    yield_every: int = 500
    log_limit: int = 10
    default_data: str = "Simulated Block Data"
    default_difficulty: int = 4
    port: int = 5000
    log_level: str = "INFO"

    @property
    def report_interval(self) -> float:
        return self.report_interval_ms / 1000.0

    @classmethod
    def from_env(cls) -> "Settings":
        base = cls()
        return cls(
            report_interval_ms=_env_int("POWSIM_REPORT_INTERVAL_MS", base.report_interval_ms),
            yield_every=_env_int("POWSIM_YIELD_EVERY", base.yield_every),
            log_limit=_env_int("POWSIM_LOG_LIMIT", base.log_limit),
            default_data=os.getenv("POWSIM_DEFAULT_DATA", base.default_data),
            default_difficulty=_env_int("POWSIM_DEFAULT_DIFFICULTY", base.default_difficulty),
            port=_env_int("POWSIM_PORT", base.port),
            log_level=os.getenv("POWSIM_LOG_LEVEL", base.log_level),
        )
