"""Authenticated session holding the RevenueCat bearer token"""

import logging
from typing import Optional, Protocol


class CredentialProvider(Protocol):
    """Set/read/clear access to a bearer token, e.g. backed by a keychain"""

    @property
    def token(self) -> Optional[str]: ...

    def set_token(self, token: str) -> None: ...

    def clear(self) -> None: ...


class Session:
    """
    Bearer credential for one signed-in account.

    Created empty, set after login, read on every dispatched call and cleared
    on sign-out (or by the caller after a 401). Token storage across process
    restarts belongs to the caller; pass a stored token in to resume.
    """

    def __init__(self, token: Optional[str] = None):
        self._token = token

    @property
    def token(self) -> Optional[str]:
        return self._token

    @property
    def is_authenticated(self) -> bool:
        return bool(self._token)

    def set_token(self, token: str) -> None:
        if not token:
            raise ValueError("Bearer token must not be empty")
        self._token = token
        logging.info("Session authenticated", extra={"step": "session_set"})

    def clear(self) -> None:
        self._token = None
        logging.info("Session cleared", extra={"step": "session_clear"})
