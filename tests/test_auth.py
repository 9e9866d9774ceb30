"""Tests for the session token lifecycle."""

from pathlib import Path
from typing import Any, Dict
from unittest.mock import MagicMock, patch

import pytest

from hheat.api import HiveAPI
from hheat.auth import AuthSession
from hheat.config import TokenStore
from hheat.exceptions import AuthExpiredError, LoginError, TokenStoreError
from hheat.models import Credentials


@pytest.fixture
def api() -> MagicMock:
    return MagicMock(spec=HiveAPI)


@pytest.fixture
def store(tmp_path: Path) -> TokenStore:
    return TokenStore(tmp_path / "token")


class TestCachedToken:
    """Test sessions that start with a cached token."""

    def test_accepted_token_skips_login(
        self, api: MagicMock, store: TokenStore, credentials: Credentials, heating_product: Dict[str, Any]
    ) -> None:
        store.save("cached")
        api.get_products.return_value = [heating_product]

        session = AuthSession(api, credentials, store)
        products = session.fetch_products()

        assert products == [heating_product]
        api.login.assert_not_called()
        api.get_products.assert_called_once_with("cached")
        assert session.token == "cached"

    def test_rejected_token_logs_in_once_and_retries(
        self, api: MagicMock, store: TokenStore, credentials: Credentials, heating_product: Dict[str, Any]
    ) -> None:
        store.save("stale")
        api.login.return_value = "fresh"
        api.get_products.side_effect = [AuthExpiredError("expired"), [heating_product]]

        session = AuthSession(api, credentials, store)
        products = session.fetch_products()

        assert products == [heating_product]
        api.login.assert_called_once_with("user@example.com", "password123")
        assert [c.args[0] for c in api.get_products.call_args_list] == ["stale", "fresh"]
        assert session.token == "fresh"
        assert store.load() == "fresh"

    def test_retry_failure_is_fatal(self, api: MagicMock, store: TokenStore, credentials: Credentials) -> None:
        store.save("stale")
        api.login.return_value = "fresh"
        api.get_products.side_effect = [AuthExpiredError("expired"), AuthExpiredError("still bad")]

        session = AuthSession(api, credentials, store)
        with pytest.raises(AuthExpiredError, match="still bad"):
            session.fetch_products()

        assert api.login.call_count == 1
        assert api.get_products.call_count == 2

    def test_relogin_failure_is_fatal(self, api: MagicMock, store: TokenStore, credentials: Credentials) -> None:
        store.save("stale")
        api.get_products.side_effect = AuthExpiredError("expired")
        api.login.side_effect = LoginError("bad password")

        session = AuthSession(api, credentials, store)
        with pytest.raises(LoginError):
            session.fetch_products()

        assert api.get_products.call_count == 1
        assert store.load() == "stale"


class TestNoCachedToken:
    """Test sessions that start without a cached token."""

    def test_logs_in_before_fetching(
        self, api: MagicMock, store: TokenStore, credentials: Credentials, heating_product: Dict[str, Any]
    ) -> None:
        api.login.return_value = "fresh"
        api.get_products.return_value = [heating_product]

        session = AuthSession(api, credentials, store)
        session.fetch_products()

        api.login.assert_called_once()
        api.get_products.assert_called_once_with("fresh")
        assert store.load() == "fresh"

    def test_failure_after_first_login_logs_in_again(
        self, api: MagicMock, store: TokenStore, credentials: Credentials, heating_product: Dict[str, Any]
    ) -> None:
        api.login.side_effect = ["fresh1", "fresh2"]
        api.get_products.side_effect = [AuthExpiredError("transient"), [heating_product]]

        session = AuthSession(api, credentials, store)
        products = session.fetch_products()

        assert products == [heating_product]
        assert api.login.call_count == 2
        assert [c.args[0] for c in api.get_products.call_args_list] == ["fresh1", "fresh2"]
        assert session.token == "fresh2"
        assert store.load() == "fresh2"

    def test_second_failure_is_fatal(self, api: MagicMock, store: TokenStore, credentials: Credentials) -> None:
        api.login.side_effect = ["fresh1", "fresh2"]
        api.get_products.side_effect = [AuthExpiredError("refused"), AuthExpiredError("still refused")]

        session = AuthSession(api, credentials, store)
        with pytest.raises(AuthExpiredError, match="still refused"):
            session.fetch_products()

        assert api.login.call_count == 2
        assert api.get_products.call_count == 2

    def test_save_failure_is_fatal(self, api: MagicMock, credentials: Credentials, tmp_path: Path) -> None:
        blocker = tmp_path / "file"
        blocker.write_text("")
        api.login.return_value = "fresh"

        session = AuthSession(api, credentials, TokenStore(blocker / "token"))
        with pytest.raises(TokenStoreError):
            session.fetch_products()

        api.get_products.assert_not_called()


class TestSessionLogging:
    """Test progress output."""

    def test_reports_rejected_token_through_api(
        self, api: MagicMock, store: TokenStore, credentials: Credentials, heating_product: Dict[str, Any]
    ) -> None:
        store.save("stale")
        api.login.return_value = "fresh"
        api.get_products.side_effect = [AuthExpiredError("expired"), [heating_product]]

        AuthSession(api, credentials, store).fetch_products()

        api._log.assert_called_once_with("[-] Token rejected: expired")

    def test_verbose_api_logs_to_stderr(
        self, store: TokenStore, credentials: Credentials, heating_product: Dict[str, Any], capsys: pytest.CaptureFixture
    ) -> None:
        api = HiveAPI(quiet=False)
        with patch.object(api, "login", return_value="fresh"), \
                patch.object(api, "get_products", return_value=[heating_product]):
            AuthSession(api, credentials, store).fetch_products()

        assert "[*] No cached token" in capsys.readouterr().err
