"""Server settings model and environment loading.

Settings come from three layers, lowest priority first:
1. Model defaults
2. Environment (PORT), optionally seeded from a .env file
3. Explicit overrides (CLI options)

Usage:
    from configvault.core.settings import load_settings

    settings = load_settings(port=8080)
    print(settings.config_path)
"""

import logging
import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from configvault.core.exceptions import SettingsError

logger = logging.getLogger(__name__)

PORT_ENV: str = "PORT"
ENV_FILE_NAME: str = ".env"

DEFAULT_HOST: str = "127.0.0.1"
DEFAULT_PORT: int = 3000
DEFAULT_CONFIG_NAME: str = "config.json"
DEFAULT_BACKUP_DIR_NAME: str = "backups"


class Settings(BaseModel):
    """Resolved server settings.

    Attributes:
        host: Address the HTTP server binds to.
        port: Port the HTTP server listens on.
        config_path: Path to the canonical config document.
        backup_dir: Directory holding snapshot files.
        static_dir: Optional directory served at / for an admin UI.

    """

    model_config = ConfigDict(frozen=True)

    host: str = DEFAULT_HOST
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535)
    config_path: Path = Field(default_factory=lambda: Path.cwd() / DEFAULT_CONFIG_NAME)
    backup_dir: Path = Field(default_factory=lambda: Path.cwd() / DEFAULT_BACKUP_DIR_NAME)
    static_dir: Path | None = None


def load_env_file(directory: Path | None = None) -> bool:
    """Load a .env file from directory (default: cwd).

    Existing environment variables are never overridden.

    Returns:
        True if a .env file was found and loaded.

    """
    env_path = (directory or Path.cwd()) / ENV_FILE_NAME
    if not env_path.is_file():
        return False
    load_dotenv(env_path, override=False)
    logger.debug("Loaded environment from %s", env_path)
    return True


def load_settings(*, use_env_file: bool = True, **overrides: Any) -> Settings:
    """Build Settings from environment and explicit overrides.

    Overrides whose value is None are ignored so CLI options left unset
    fall through to the environment or defaults.

    Args:
        use_env_file: Whether to load .env from the working directory first.
        **overrides: Field values taking precedence over everything else.

    Returns:
        Validated, frozen Settings instance.

    Raises:
        SettingsError: If PORT or any override fails validation.

    """
    if use_env_file:
        load_env_file()

    values: dict[str, Any] = {}
    env_port = os.environ.get(PORT_ENV)
    if env_port:
        values["port"] = env_port.strip()

    values.update({k: v for k, v in overrides.items() if v is not None})

    try:
        settings = Settings.model_validate(values)
    except ValidationError as e:
        details = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise SettingsError(f"Invalid settings: {details}") from e

    logger.debug("Resolved settings: %s", settings)
    return settings
