"""
Context Compactor — Configuration Loader

Loads and validates optimizer settings from environment variables and .env files.
"""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import ValidationError

from ..errors import ConfigurationError
from .schemas import OptimizerSettings

logger = logging.getLogger(__name__)

_settings_instance: OptimizerSettings | None = None


def load_settings(
    env_file: str | None = None,
    reload: bool = False,
) -> OptimizerSettings:
    """
    Load optimizer settings from environment variables and .env file.

    Args:
        env_file: Path to .env file (default: .env in the working directory)
        reload: Force reload even if settings already loaded

    Returns:
        Validated OptimizerSettings instance

    Raises:
        ConfigurationError: If settings are invalid
    """
    global _settings_instance

    if _settings_instance is not None and not reload:
        return _settings_instance

    env_path = Path(env_file) if env_file else Path.cwd() / ".env"

    if env_path.exists():
        logger.info(f"Loading environment from {env_path}")
        try:
            load_dotenv(env_path, override=True)
        except Exception as e:
            logger.error(
                f"Failed to load .env file from {env_path}: {e}",
                extra={"path": str(env_path), "error": str(e)},
                exc_info=True,
            )
            raise ConfigurationError(
                f"Failed to load environment file: {e}",
                details={"path": str(env_path), "error": str(e)},
            ) from e
    else:
        logger.debug("No .env file found, using environment variables only")

    disabled = [s.strip() for s in os.getenv("COMPACTOR_DISABLED_STRATEGIES", "").split(",") if s.strip()]

    try:
        settings_dict = {
            "chars_per_token": float(os.getenv("COMPACTOR_CHARS_PER_TOKEN", "4.0")),
            "code_chars_per_token": float(os.getenv("COMPACTOR_CODE_CHARS_PER_TOKEN", "3.5")),
            "strategies": {name: {"enabled": False} for name in disabled},
            "log_level": os.getenv("COMPACTOR_LOG_LEVEL", "INFO").upper(),
        }
    except ValueError as e:
        raise ConfigurationError(
            f"Invalid numeric setting in environment: {e}",
            details={"error": str(e)},
        ) from e

    try:
        _settings_instance = OptimizerSettings(**settings_dict)  # type: ignore[arg-type]
        logger.info(
            "Optimizer settings loaded",
            extra={"disabled_strategies": disabled, "chars_per_token": _settings_instance.chars_per_token},
        )
        return _settings_instance
    except ValidationError as e:
        logger.error(
            f"Settings validation failed: {e}",
            extra={"validation_errors": e.errors()},
        )
        raise ConfigurationError(
            "Settings validation failed. Check your COMPACTOR_* environment variables.",
            details={"validation_errors": e.errors()},
        ) from e


def get_settings() -> OptimizerSettings:
    """
    Get the current settings instance, loading it on first access.

    Returns:
        Current OptimizerSettings instance
    """
    if _settings_instance is None:
        return load_settings()

    return _settings_instance


def reload_settings(env_file: str | None = None) -> OptimizerSettings:
    """
    Force reload settings.

    Args:
        env_file: Optional path to .env file

    Returns:
        Reloaded OptimizerSettings instance
    """
    return load_settings(env_file=env_file, reload=True)
