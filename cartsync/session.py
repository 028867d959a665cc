"""Authentication session: who is signed in, and who wants to know when that changes."""

import asyncio
from typing import Awaitable, Callable, List, Optional

from cartsync.logging import get_logger, sanitize_id_for_logging

logger = get_logger(__name__)

AuthListener = Callable[[bool], Awaitable[None]]


class AuthSession:
    """
    Holds the current token and user id.

    Listeners are awaited on every login/logout with the new authentication
    state. A failing listener is logged and does not stop the others.
    """

    def __init__(self, token: Optional[str] = None, user_id: Optional[str] = None):
        self.token = token
        self.user_id = user_id
        self._listeners: List[AuthListener] = []

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def current_user_id(self) -> Optional[str]:
        """Identity used to tag persisted guest records (None for guests)."""
        return self.user_id if self.is_authenticated else None

    def subscribe(self, listener: AuthListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def login(self, token: str, user_id: Optional[str] = None) -> None:
        was_authenticated = self.is_authenticated
        self.token = token
        self.user_id = user_id
        logger.info("Session authenticated for user %s", sanitize_id_for_logging(user_id))
        if not was_authenticated:
            await self._notify(True)

    async def logout(self) -> None:
        was_authenticated = self.is_authenticated
        self.token = None
        self.user_id = None
        if was_authenticated:
            logger.info("Session signed out")
            await self._notify(False)

    async def _notify(self, is_authenticated: bool) -> None:
        results = await asyncio.gather(
            *(listener(is_authenticated) for listener in list(self._listeners)),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, Exception):
                logger.error("Auth listener failed: %s", result, exc_info=result)
