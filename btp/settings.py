"""Runtime settings loaded from environment variables with defaults."""

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

from .schemas import EstimatorOptions

load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes")


def _env_int(name: str, default: int) -> int:
    """Integer env var; missing or malformed values give the default."""
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


@dataclass
class Settings:
    """Application settings."""

    log_level: str = field(default_factory=lambda: os.getenv("BTP_LOG_LEVEL", "INFO"))
    log_json: bool = field(default_factory=lambda: _env_bool("BTP_LOG_JSON", "false"))

    currency: str = field(default_factory=lambda: os.getenv("BTP_CURRENCY", "XOF"))
    schedule_lead_days: int = field(
        default_factory=lambda: _env_int("BTP_SCHEDULE_LEAD_DAYS", 30)
    )

    # "simple" or "rich"
    estimator_variant: str = field(
        default_factory=lambda: os.getenv("BTP_ESTIMATOR_VARIANT", "rich")
    )
    assistant_name: str = field(
        default_factory=lambda: os.getenv("BTP_ASSISTANT_NAME", "Marydahh")
    )
    seed_samples: bool = field(default_factory=lambda: _env_bool("BTP_SEED_SAMPLES", "true"))

    def estimator_options(self) -> EstimatorOptions:
        """Options matching the configured variant; unknown values mean simple."""
        if self.estimator_variant.strip().lower() == "rich":
            return EstimatorOptions.rich()
        return EstimatorOptions.simple()


settings = Settings()
