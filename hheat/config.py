"""Config file and token cache for hheat"""

import os
import tomllib
from pathlib import Path
from typing import Optional

from .exceptions import ConfigMalformedError, ConfigMissingError, TokenStoreError
from .models import Credentials

HOME_ENV = "HHEAT_HOME"
CONFIG_FILE_NAME = "conf.toml"
TOKEN_FILE_NAME = "token"


def get_config_dir() -> Path:
    """Return the hheat directory, $HHEAT_HOME or ~/.hheat."""
    override = os.environ.get(HOME_ENV)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".hheat"


def load_credentials(path: Optional[Path] = None) -> Credentials:
    """
    Read username and password from the TOML config file.

    Args:
        path: Config file to read (default: conf.toml in the hheat directory)

    Returns:
        Credentials from the file

    Raises:
        ConfigMissingError: If the file does not exist
        ConfigMalformedError: If the file is not TOML or lacks either credential
    """
    path = path or get_config_dir() / CONFIG_FILE_NAME

    try:
        text = path.read_text(encoding="utf-8")
    except (FileNotFoundError, IsADirectoryError) as e:
        raise ConfigMissingError(f"Failed to open {path}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigMalformedError(f"Failed to read {path}: {e}") from e

    try:
        settings = tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise ConfigMalformedError(f"Invalid TOML in {path}: {e}") from e

    values = {}
    for key in ("username", "password"):
        value = settings.get(key)
        if not isinstance(value, str):
            raise ConfigMalformedError(f"{path} must set {key} as a string")
        values[key] = value

    return Credentials(**values)


class TokenStore:
    """Reads and writes the cached session token."""

    def __init__(self, path: Optional[Path] = None):
        self.path = path or get_config_dir() / TOKEN_FILE_NAME

    def load(self) -> Optional[str]:
        """
        Read the cached token.

        Returns:
            The token, or None if nothing usable is cached

        Raises:
            TokenStoreError: If the file exists but cannot be read
        """
        try:
            token = self.path.read_text(encoding="utf-8")
        except (FileNotFoundError, UnicodeDecodeError):
            return None
        except OSError as e:
            raise TokenStoreError(f"Failed to read {self.path}: {e}") from e

        return token or None

    def save(self, token: str):
        """
        Overwrite the cached token.

        Args:
            token: Token returned by login

        Raises:
            TokenStoreError: If the file cannot be written
        """
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                # An existing file keeps its old mode through os.open
                self.path.chmod(0o600)
                f.write(token)
        except OSError as e:
            raise TokenStoreError(f"Failed to write to {self.path}: {e}") from e
