"""Configuration for the assembler.

Settings are read from a TOML file:

    [assembler]
    delay_ms = 100
    verify_crc = true

The file is located via the APNG_ECS_CONFIG environment variable, an explicit
path, or apng_ecs.toml in the current or home directory. When none exists the
defaults apply.
"""

from __future__ import annotations

import logging
import os
from typing import Any, cast

from pydantic import BaseModel, Field, ValidationError

# TOML loading for Python 3.11+ and older
try:
    import tomllib  # type: ignore[import-not-found, unused-ignore]
except ImportError:
    import tomli as tomllib  # type: ignore[import-not-found, no-redef, unused-ignore]

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "APNG_ECS_CONFIG"
CONFIG_FILENAME = "apng_ecs.toml"
DEFAULT_DELAY_MS = 100


class AssemblerConfig(BaseModel):
    """Assembler settings.

    Attributes:
        delay_ms: Default frame delay in milliseconds
        verify_crc: Whether a CRC mismatch in an input chunk is an error
    """

    model_config = {"extra": "forbid"}

    delay_ms: int = Field(default=DEFAULT_DELAY_MS, ge=0, le=0xFFFF)
    verify_crc: bool = True


def _resolve_config_path(config_path: str | None) -> str | None:
    """Resolve configuration path from env, explicit path, or defaults."""
    env_config = os.environ.get(CONFIG_ENV_VAR)
    if env_config:
        return env_config
    if config_path:
        return config_path
    candidates = [
        CONFIG_FILENAME,
        os.path.expanduser(f"~/{CONFIG_FILENAME}"),
    ]
    for candidate in candidates:
        if os.path.exists(candidate):
            return candidate
    return None


def load_config(config_path: str | None = None) -> AssemblerConfig:
    """Load assembler settings.

    Args:
        config_path: Path to apng_ecs.toml (auto-detected if None)

    Returns:
        Validated settings; defaults when no config file is found

    Raises:
        FileNotFoundError: If an explicitly named file does not exist
        ValueError: If the file is not valid TOML or holds invalid values
    """
    resolved_path = _resolve_config_path(config_path)
    if resolved_path is None:
        return AssemblerConfig()
    if not os.path.exists(resolved_path):
        raise FileNotFoundError(
            f"Config file not found at {resolved_path}. "
            f"Set {CONFIG_ENV_VAR} or create {CONFIG_FILENAME}"
        )

    with open(resolved_path, "rb") as f:
        try:
            config = cast(dict[str, Any], tomllib.load(f))
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Invalid TOML in {resolved_path}: {e}") from e

    try:
        settings = AssemblerConfig(**config.get("assembler", {}))
    except (ValidationError, TypeError) as e:
        raise ValueError(f"Invalid [assembler] settings in {resolved_path}: {e}") from e

    logger.debug("Loaded config from %s: %s", resolved_path, settings)
    return settings
