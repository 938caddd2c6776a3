"""
Application configuration management.
"""
import logging
import os
from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional


def _default_data_dir() -> Path:
    env_dir = os.getenv("DATA_DIR")
    if env_dir:
        return Path(env_dir)
    return Path("./data")


@dataclass
class AppConfig:
    """Application configuration with environment overrides."""

    # Paths
    data_dir: Path = field(default_factory=_default_data_dir)

    # Environment
    app_env: str = field(default_factory=lambda: os.getenv("APP_ENV", "dev"))
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))

    # Cache settings
    cache_ttl_seconds: int = field(default_factory=lambda: int(os.getenv("CACHE_TTL_SECONDS", "300")))

    # Calendar dates (closing week, current month, created today) are taken in this zone
    timezone: str = field(default_factory=lambda: os.getenv("APP_TIMEZONE", "America/Bogota"))

    @property
    def snapshot_dir(self) -> Path:
        return self.data_dir / "snapshots"

    @property
    def is_prod(self) -> bool:
        return self.app_env.lower() == "prod"


# Global config instance
config = AppConfig()


def configure_logging(level: Optional[str] = None):
    """Configure root logging for the app and scripts."""
    logging.basicConfig(
        level=(level or config.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# Stage standard-mapping tags
STAGE_TAG_WON = "Ganado"
STAGE_TAG_LOST = "Perdido"

# Deal statuses
STATUS_WON = "won"
STATUS_LOST = "lost"
STATUS_OPEN = "open"

# Fallback labels
UNKNOWN_SECTOR = "No especificado"
UNKNOWN_OWNER = "Desconocido"

# Win/loss dataset labels
WIN_LABEL = "Ganadas"
LOSS_LABEL = "Perdidas"

TRAILING_WEEKS = 8


# Snapshot file names (exports of the backend tables)
TABLE_FILES = {
    "deals": "deals",
    "stages": "stages",
    "users": "users",
    "accounts": "accounts",
    "goals": "goals",
    "pipelines": "pipelines",
}

# Full column set per table; coerced frames always carry these
MODEL_COLUMNS = {
    "deals": [
        "id",
        "title",
        "stage_id",
        "pipeline_id",
        "value",
        "created_at",
        "closed_at",
        "owner_id",
        "account_id",
        "status",
        "probability",
        "expected_close_date",
        "pain",
        "source",
        "next_steps",
    ],
    "stages": ["id", "pipeline_id", "name", "order", "std_map", "created_at"],
    "users": ["id", "name", "avatar"],
    "accounts": ["id", "name", "sector"],
    "goals": ["year", "months"],
    "pipelines": ["id", "name"],
}

# Required columns (hard fail if missing)
REQUIRED_COLUMNS = {
    "deals": ["id", "stage_id", "value", "created_at", "closed_at"],
    "stages": ["id", "name", "order", "std_map"],
    "users": ["id", "name"],
    "accounts": ["id", "sector"],
    "goals": ["year", "months"],
    "pipelines": ["id", "name"],
}

# Optional columns (soft warn if missing)
OPTIONAL_COLUMNS = {
    "deals": [
        "pipeline_id",
        "owner_id",
        "account_id",
        "probability",
        "expected_close_date",
    ],
    "stages": ["pipeline_id"],
}

# Tables the dashboard cannot run without
CORE_TABLES = ["deals", "stages"]

# Formatting constants
CURRENCY_SYMBOL = "$"
FORMAT_PERCENT = "{:.0f}%"
FORMAT_DAYS = "{:.0f}d"
