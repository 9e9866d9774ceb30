"""Session token lifecycle for the Hive API"""

from typing import Any, Dict, List, Optional

from .api import HiveAPI
from .config import TokenStore
from .exceptions import AuthExpiredError
from .models import Credentials


class AuthSession:
    """
    Holds the session token for one run.

    Hive rate-limits logins, so a cached token is tried first and a login
    happens only when there is none or the server refuses it.
    """

    def __init__(self, api: HiveAPI, credentials: Credentials, token_store: TokenStore):
        """
        Initialize the session.

        Args:
            api: Client used for login and the product listing; its quiet
                flag also controls this session's log output
            credentials: Account credentials for login
            token_store: Cache the token is read from and saved to
        """
        self.api = api
        self.credentials = credentials
        self.token_store = token_store
        self.token: Optional[str] = None

    def login(self) -> str:
        """
        Log in, cache the new token and adopt it.

        Returns:
            The new token

        Raises:
            LoginError: If login fails
            TokenStoreError: If the token cannot be cached
        """
        token = self.api.login(self.credentials.username, self.credentials.password)
        self.token_store.save(token)
        self.token = token
        return token

    def fetch_products(self) -> List[Dict[str, Any]]:
        """
        Fetch the product listing, logging in as needed.

        Logs in first if no token is cached. If the listing request fails,
        the session logs in again and retries exactly once.

        Returns:
            List of product records

        Raises:
            AuthExpiredError: If the retry after re-login also fails
            LoginError: If login fails
            TokenStoreError: If the token cache cannot be read or written
        """
        if self.token is None:
            self.token = self.token_store.load()

        if self.token is None:
            self.api._log("[*] No cached token")
            self.login()

        try:
            return self.api.get_products(self.token)
        except AuthExpiredError as e:
            self.api._log(f"[-] Token rejected: {e}")

        self.login()
        return self.api.get_products(self.token)
