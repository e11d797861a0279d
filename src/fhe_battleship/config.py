# Area: Shared
"""
fhe_battleship.config — Runtime configuration
=============================================

Loads settings from an optional JSON file, then applies environment
overrides. A ``.env`` file in the working directory is honoured.

Environment variables:
    BATTLESHIP_LOG_FILE      log file path ("" disables file logging)
    BATTLESHIP_LOG_LEVEL     DEBUG, INFO, WARNING, ERROR
    BATTLESHIP_DB_PATH       SQLite file for the game-created feed ("" disables recording)
    BATTLESHIP_SIGNATURE_DAYS  validity of decryption authorizations
    DEMO_MODE                true/1/yes to run the demo match
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

logger = logging.getLogger("fhe_battleship.config")

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

ENV_MAPPINGS = {
    "BATTLESHIP_LOG_FILE": "log_file",
    "BATTLESHIP_LOG_LEVEL": "log_level",
    "BATTLESHIP_DB_PATH": "db_path",
    "BATTLESHIP_SIGNATURE_DAYS": "signature_duration_days",
    "DEMO_MODE": "demo_mode",
}


class BattleshipConfig(BaseModel):
    """Validated runtime settings."""

    model_config = ConfigDict(extra="ignore")

    log_file: str = "fhe_battleship.log"
    log_level: str = "INFO"
    db_path: str = "battleship_games.db"
    signature_duration_days: int = Field(default=1, ge=1, le=365)
    demo_mode: bool = False

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        value = value.upper()
        if value not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return value


def validate_config(config: Dict[str, Any]) -> BattleshipConfig:
    """
    Validate a configuration dict.

    Raises:
        ValueError: If a value is missing its expected type or range
    """
    try:
        return BattleshipConfig(**config)
    except ValidationError as e:
        problems = [f"{'.'.join(map(str, err['loc']))}: {err['msg']}" for err in e.errors()]
        raise ValueError(f"Invalid configuration: {problems}") from None


def load_config(config_path: Optional[str] = None) -> BattleshipConfig:
    """Load config from file and environment."""
    load_dotenv()
    config: Dict[str, Any] = {}

    if config_path:
        path = Path(config_path)
        if path.exists():
            with open(path, encoding="utf-8") as f:
                config = json.load(f)
            if not isinstance(config, dict):
                raise ValueError(
                    f"Invalid configuration: {config_path} must hold a JSON object, "
                    f"not {type(config).__name__}"
                )
        else:
            logger.warning(f"Config file not found: {config_path}")

    for env_key, config_key in ENV_MAPPINGS.items():
        if env_key in os.environ:
            value: Any = os.environ[env_key]
            if config_key == "demo_mode":
                value = value.lower() in ("true", "1", "yes")
            config[config_key] = value

    return validate_config(config)
