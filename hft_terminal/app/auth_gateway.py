from loguru import logger

from hft_terminal.app.session_store import SessionStore
from hft_terminal.backend.account_client import AccountApiError, AccountRejected
from hft_terminal.config import settings
from hft_terminal.domain.dto import AuthResult
from hft_terminal.domain.interfaces import AccountPort
from hft_terminal.domain.models import AuthMode

CONNECTION_FAILED = "Connection failed"


class AuthError(Exception):
    """Logowanie/rejestracja odrzucone albo brak połączenia. `status` idzie na pasek statusu."""

    def __init__(self, status: str):
        super().__init__(status)
        self.status = status


class AuthGateway:
    def __init__(self, api: AccountPort, store: SessionStore, password: str | None = None, email: str | None = None):
        self.api = api
        self.store = store
        self.password = settings.AUTH_PASSWORD if password is None else password
        self.email = settings.AUTH_EMAIL if email is None else email

    def authenticate(self, username: str, mode: AuthMode = AuthMode.LOGIN) -> AuthResult:
        mode = AuthMode(mode)
        if not username:
            raise AuthError("Username required")
        try:
            data = self.api.authenticate(mode, username, self.password, self.email)
        except AccountRejected as e:
            logger.info("{} odrzucony dla {}: {}", mode.value, username, e.message)
            raise AuthError(e.message) from e
        except AccountApiError as e:
            logger.warning("{} nieudany dla {}: {}", mode.value, username, e)
            raise AuthError(CONNECTION_FAILED) from e

        result = AuthResult(identity=username, server_user_id=data.get("user_id"))
        self.store.set(result.identity)
        logger.info("{} OK: {} (user_id={})", mode.value, username, result.server_user_id)
        return result
