"""Hive Beekeeper API Client"""

import sys
from typing import Any, Dict, List, Optional

import requests

from .exceptions import AuthExpiredError, InvalidCommandError, LoginError, MutationError
from .models import MODE_MANUAL, MODES, HeatingDevice

PROD_URL = "https://beekeeper.hivehome.com/1.0/"

# Ask the login endpoint to include everything in its responses
LOGIN_FLAGS = {"devices": True, "products": True, "actions": True, "homes": True}


def _error_of(data: Any) -> Optional[Any]:
    if isinstance(data, dict) and "error" in data:
        return data["error"]
    return None


class HiveAPI:
    """
    Hive API client for reading and controlling the heating node.

    The client holds no session state; every authenticated call takes the
    token to send. See AuthSession for obtaining and caching one.

    Example usage as a library:
        from hheat import HiveAPI, find_heating_device

        api = HiveAPI()
        token = api.login("email@example.com", "password")
        device = find_heating_device(api.get_products(token))
        api.set_target_temperature(token, device, 20.5)
    """

    def __init__(self, base_url: str = PROD_URL, quiet: bool = True):
        """
        Initialize the API client.

        Args:
            base_url: API root, ending in a slash
            quiet: If True, suppress log output (default for library use)
        """
        self.base_url = base_url
        self.quiet = quiet

    def _log(self, msg: str):
        if not self.quiet:
            print(msg, file=sys.stderr)

    def _get_headers(self, token: Optional[str] = None) -> Dict[str, str]:
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if token:
            headers["Authorization"] = token
        return headers

    def login(self, username: str, password: str) -> str:
        """
        Authenticate with the Hive API.

        Args:
            username: Hive account username
            password: Hive account password

        Returns:
            The session token

        Raises:
            LoginError: If the request fails or the response carries no token
        """
        url = f"{self.base_url}global/login"
        payload = {"username": username, "password": password, **LOGIN_FLAGS}
        self._log(f"[*] Logging in as {username}...")

        try:
            response = requests.post(url, json=payload, headers=self._get_headers())
        except requests.RequestException as e:
            raise LoginError(f"Login request failed: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            raise LoginError(f"Failed to parse login response ({response.status_code})", response.status_code) from e

        token = data.get("token") if isinstance(data, dict) else None
        if not isinstance(token, str) or not token:
            raise LoginError(f"Failed to get login token: {data}", response.status_code)

        self._log("[+] Login successful!")
        return token

    def get_products(self, token: str) -> List[Dict[str, Any]]:
        """
        Fetch the product listing for the account.

        Any failure is reported as AuthExpiredError, since a rejected token is
        the usual cause and the caller recovers by logging in again.

        Args:
            token: Session token

        Returns:
            List of product records

        Raises:
            AuthExpiredError: On a network error, non-2xx status, unparseable
                body, or an error object in the response
        """
        url = f"{self.base_url}products?after="
        self._log("[*] Fetching products...")

        try:
            response = requests.get(url, headers=self._get_headers(token))
        except requests.RequestException as e:
            raise AuthExpiredError(f"Products request failed: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            raise AuthExpiredError(
                f"Failed to parse products response ({response.status_code})", response.status_code
            ) from e

        error = _error_of(data)
        if error is not None:
            raise AuthExpiredError(f"Error getting products: {error}", response.status_code)
        if not response.ok:
            raise AuthExpiredError(f"Products request failed: {response.status_code}", response.status_code)
        if not isinstance(data, list):
            raise AuthExpiredError(f"Unexpected products response: {data}", response.status_code)

        self._log(f"[+] Found {len(data)} products")
        return data

    def update_heating(self, token: str, device_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Send a state change to a heating node.

        Args:
            token: Session token
            device_id: ID of the heating node
            payload: Fields to change, e.g. {"target": 20.0}

        Returns:
            The decoded response body, or an empty dict if it was not JSON

        Raises:
            MutationError: If the request fails or the server reports an error
        """
        url = f"{self.base_url}nodes/heating/{device_id}"
        self._log(f"[*] Sending: {payload}")

        try:
            response = requests.post(url, json=payload, headers=self._get_headers(token))
        except requests.RequestException as e:
            raise MutationError(f"Update request failed: {e}", device_id=device_id) from e

        try:
            data = response.json()
        except ValueError:
            data = {}

        error = _error_of(data)
        if error is not None:
            raise MutationError(f"Update rejected: {error}", response.status_code, device_id)
        if not response.ok:
            raise MutationError(f"Update request failed: {response.status_code}", response.status_code, device_id)

        self._log("[+] Update sent!")
        return data if isinstance(data, dict) else {}

    def set_mode(self, token: str, device: HeatingDevice, mode: str) -> Dict[str, Any]:
        """
        Set the heating mode.

        Args:
            token: Session token
            device: Heating node
            mode: "OFF", "MANUAL" or "SCHEDULE"

        Returns:
            The decoded response body
        """
        if mode not in MODES:
            raise InvalidCommandError(f"Invalid mode. Use: {', '.join(MODES)}", mode)
        self._log(f"[*] Setting mode to {mode}...")
        return self.update_heating(token, device.device_id, {"mode": mode})

    def set_target_temperature(self, token: str, device: HeatingDevice, target: float) -> Dict[str, Any]:
        """
        Set the target temperature.

        If the heating is off it is switched to manual in the same request.

        Args:
            token: Session token
            device: Heating node
            target: Target temperature in Celsius

        Returns:
            The decoded response body
        """
        payload: Dict[str, Any] = {"target": target}
        if device.is_off:
            payload["mode"] = MODE_MANUAL
        self._log(f"[*] Setting target to {target}°...")
        return self.update_heating(token, device.device_id, payload)
