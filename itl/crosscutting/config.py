import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

from dotenv import dotenv_values

DEFAULT_LIBRARY_PATH = Path.home() / 'Music' / 'iTunes' / 'iTunes Music Library.xml'
_LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


class ConfigError(Exception):
    """Configuration error."""
    pass


@dataclass(frozen=True)
class Settings:
    """Reader settings resolved from the environment."""

    library_path: Path = DEFAULT_LIBRARY_PATH
    log_level: str = 'INFO'
    log_file: Optional[str] = None

    def as_dict(self) -> Dict[str, Optional[str]]:
        """Get settings summary."""
        return {
            'library_path': str(self.library_path),
            'log_level': self.log_level,
            'log_file': self.log_file,
        }


def _read_env(env_file: Optional[str]) -> Dict[str, str]:
    """Merge values from an optional .env file under the process environment."""
    values: Dict[str, str] = {}
    if env_file:
        path = Path(env_file)
        if not path.exists():
            raise ConfigError(f"Env file not found: {path}")
        values.update({k: v for k, v in dotenv_values(path).items() if v is not None})
    values.update(os.environ)
    return values


def load_settings(env_file: Optional[str] = None) -> Settings:
    """Load settings from ``ITL_*`` variables.

    Variables already present in the process environment take precedence over
    the ones read from ``env_file``.
    """
    env = _read_env(env_file)

    log_level = env.get('ITL_LOG_LEVEL', 'INFO').strip().upper()
    if log_level not in _LOG_LEVELS:
        raise ConfigError(f"Invalid ITL_LOG_LEVEL: {log_level!r}")

    library_path = env.get('ITL_LIBRARY_PATH')
    log_file = env.get('ITL_LOG_FILE') or None

    settings = Settings(
        library_path=Path(library_path).expanduser() if library_path else DEFAULT_LIBRARY_PATH,
        log_level=log_level,
        log_file=log_file,
    )
    logging.getLogger(__name__).debug(f"Loaded settings: {settings.as_dict()}")
    return settings


# Global instance, created on first use
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get global settings instance."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def setup_config(env_file: Optional[str] = None) -> Settings:
    """Setup configuration from a custom .env file."""
    global _settings
    _settings = load_settings(env_file)
    return _settings
