"""Engine configuration and logging setup."""

import json
import logging
import os
from typing import Optional, Mapping
from dataclasses import dataclass, asdict, fields, replace

ENV_SETTINGS = "HIERARCHY_SETTINGS"
ENV_LOG_LEVEL = "HIERARCHY_LOG_LEVEL"
ENV_ANNOUNCE_NOOP = "HIERARCHY_ANNOUNCE_NOOP"

DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)


@dataclass
class EngineSettings:
    """Settings for a hierarchy engine."""
    announce_noop_moves: bool = True
    log_level: str = "WARNING"
    log_format: str = DEFAULT_LOG_FORMAT

    def to_json(self) -> str:
        return json.dumps(asdict(self), sort_keys=True)

    @classmethod
    def from_json(cls, data: Optional[str]) -> "EngineSettings":
        """Parse a JSON object of settings; unknown keys are dropped."""
        if not data:
            return cls()
        try:
            values = json.loads(data)
        except json.JSONDecodeError:
            logger.warning("Ignoring malformed engine settings JSON")
            return cls()
        if not isinstance(values, dict):
            return cls()
        names = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in values.items() if key in names})

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None,
                 base: Optional["EngineSettings"] = None) -> "EngineSettings":
        """Build settings from the environment.

        Starts from a copy of `base`, or from the JSON in HIERARCHY_SETTINGS,
        then applies the single-value overrides. `base` itself is not changed.
        """
        environ = os.environ if environ is None else environ
        if base is not None:
            settings = replace(base)
        else:
            settings = cls.from_json(environ.get(ENV_SETTINGS))
        level = environ.get(ENV_LOG_LEVEL)
        if level:
            settings.log_level = level.strip().upper()
        announce = environ.get(ENV_ANNOUNCE_NOOP)
        if announce is not None:
            settings.announce_noop_moves = announce.strip().lower() not in ("0", "false", "no", "off")
        return settings

    @property
    def level(self) -> int:
        value = logging.getLevelName(str(self.log_level).upper())
        return value if isinstance(value, int) else logging.WARNING


def configure_logging(settings: Optional[EngineSettings] = None):
    """Set up root logging for a host application embedding the engine."""
    settings = settings or EngineSettings.from_env()
    logging.basicConfig(level=settings.level, format=settings.log_format)
    logging.getLogger("hierarchy").setLevel(settings.level)
    logger.debug(f"Engine settings: {settings.to_json()}")
