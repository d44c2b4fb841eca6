from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from strictpdb.core.errors import ErrorLevel, StrictnessLevel, resolve_level

_env_path = Path(__file__).resolve().parents[1] / ".env"
if _env_path.is_file():
    load_dotenv(_env_path, override=False)


@dataclass
class StrictPDBSettings:
    """Configuration loaded from STRICTPDB_* environment variables.

      STRICTPDB_STRICTNESS=medium     (strict | medium | loose | an ErrorLevel name)
      STRICTPDB_LOG_LEVEL=INFO
    """

    strictness: ErrorLevel = ErrorLevel(int(StrictnessLevel.MEDIUM))
    log_level: str = "INFO"


def load_settings() -> StrictPDBSettings:
    """Load settings from environment variables."""
    raw_level = os.environ.get("STRICTPDB_STRICTNESS", "medium")
    try:
        strictness = resolve_level(raw_level)
    except ValueError as e:
        raise ValueError(f"STRICTPDB_STRICTNESS: {e}") from e

    log_level = os.environ.get("STRICTPDB_LOG_LEVEL", "INFO").upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise ValueError(f"STRICTPDB_LOG_LEVEL: unknown logging level {log_level!r}")

    return StrictPDBSettings(strictness=strictness, log_level=log_level)
