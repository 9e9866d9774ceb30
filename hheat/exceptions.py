"""Exceptions raised by hheat"""

from typing import Any, Optional


class HHeatError(Exception):
    """Base exception for all hheat errors."""


class ConfigError(HHeatError):
    """Exception raised when the config file cannot be used."""


class ConfigMissingError(ConfigError):
    """Exception raised when the config file does not exist."""


class ConfigMalformedError(ConfigError):
    """Exception raised when the config file is not valid TOML or lacks credentials."""


class TokenStoreError(HHeatError):
    """Exception raised when the cached token file cannot be read or written."""


class HiveAPIError(HHeatError):
    """
    Base exception for failed requests to the Hive API.

    Attributes:
        status_code: HTTP status of the response, if one was received
    """

    def __init__(self, message: str = "", status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class LoginError(HiveAPIError):
    """Exception raised when login fails or returns no token."""


class AuthExpiredError(HiveAPIError):
    """Exception raised when the product listing is refused for the current token."""


class MutationError(HiveAPIError):
    """
    Exception raised when a heating update request fails.

    Attributes:
        device_id: ID of the heating node the update was sent to
    """

    def __init__(self, message: str = "", status_code: Optional[int] = None, device_id: Optional[str] = None):
        super().__init__(message, status_code)
        self.device_id = device_id


class DeviceError(HHeatError):
    """Exception raised when the heating device record is unusable."""


class DeviceNotFoundError(DeviceError):
    """Exception raised when the account has no heating device."""


class InvalidCommandError(HHeatError):
    """
    Exception raised for a command argument that is neither a mode nor a number.

    Attributes:
        value: The rejected argument
    """

    def __init__(self, message: str = "", value: Any = None):
        super().__init__(message)
        self.value = value
