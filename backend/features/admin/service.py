"""
System configuration and admin audit log.

The config is loaded once (from SYSTEM_CONFIG_PATH when set) with defaults
filled in at load time. Admin replacements are validated as a whole and
recorded in a bounded audit log.
"""

import json
import logging
from collections import deque
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Deque, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError

from backend.core.config import settings
from backend.core.errors import ValidationError
from backend.models.system_config import CONFIG_VERSION, SystemConfig

logger = logging.getLogger("compoundverse")

AUDIT_LOG_LIMIT = 100


def load_system_config(path: Optional[str] = None) -> SystemConfig:
    """
    Read the system config from a JSON file, or return built-in defaults.

    Raises:
        ValueError: file unreadable, not JSON, or fails validation
    """
    if not path:
        return SystemConfig()

    try:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ValueError(f"Cannot read system config at {path}: {exc}") from exc

    try:
        config = SystemConfig.model_validate(raw)
    except PydanticValidationError as exc:
        raise ValueError(f"Invalid system config at {path}: {exc.error_count()} error(s)") from exc

    if config.version != CONFIG_VERSION:
        raise ValueError(f"Unsupported system config version {config.version} (expected {CONFIG_VERSION})")

    logger.info("config.loaded", extra={"event_type": "config.loaded"})
    return config


class SystemConfigService:
    """Holds the active SystemConfig and the admin change log."""

    def __init__(self, config: Optional[SystemConfig] = None):
        self._config = config
        self._log: Deque[Dict[str, Any]] = deque(maxlen=AUDIT_LOG_LIMIT)

    def get_config(self) -> SystemConfig:
        if self._config is None:
            self._config = load_system_config(settings.SYSTEM_CONFIG_PATH)
        return self._config

    def replace_config(self, data: Dict[str, Any], actor: str = "admin") -> SystemConfig:
        """Validate and swap in a complete config. Raises ValidationError (400)."""
        try:
            config = SystemConfig.model_validate(data)
        except PydanticValidationError as exc:
            raise ValidationError(f"Invalid system config: {exc.error_count()} error(s)") from exc
        if config.version != CONFIG_VERSION:
            raise ValidationError(f"Unsupported config version {config.version}")

        self._config = config
        self.log_change("config_update", config.model_dump(), actor=actor)
        return config

    def log_change(self, action: str, data: Any, actor: str = "admin") -> None:
        self._log.append(
            {
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "action": action,
                "actor": actor,
                "data": data,
            }
        )
        logger.info("admin.change", extra={"event_type": f"admin.{action}"})

    def get_log(self) -> List[Dict[str, Any]]:
        return list(self._log)

    def clear_log(self) -> None:
        self._log.clear()

    def reset(self) -> None:
        """FOR TESTING ONLY."""
        self._config = None
        self._log.clear()


# Singleton service used by routes
config_service = SystemConfigService()
