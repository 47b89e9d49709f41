"""Environment-variable-based configuration for the plan engine."""

from __future__ import annotations

import logging
import os
from pathlib import Path

_catalog_path = os.environ.get("PLAN_ENGINE_CATALOG_PATH", "")
CATALOG_PATH: Path | None = Path(_catalog_path).expanduser() if _catalog_path else None
DEFAULT_MINUTES_PER_SESSION: int = int(
    os.environ.get("PLAN_ENGINE_DEFAULT_MINUTES_PER_SESSION", "60")
)
LOG_LEVEL: str = os.environ.get("PLAN_ENGINE_LOG_LEVEL", "INFO")


def configure_logging(level: str | None = None) -> None:
    """Configure root logging for scripts embedding the engine."""
    logging.basicConfig(
        level=(level or LOG_LEVEL).upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
