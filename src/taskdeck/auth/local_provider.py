# src/taskdeck/auth/local_provider.py

from __future__ import annotations

import logging
import uuid
from collections.abc import Awaitable, Callable

from ..board.models import Session
from ..errors import AuthenticationError

logger = logging.getLogger(__name__)

Prompt = Callable[[str], Awaitable[str]]

# Fixed namespace so the same display name maps to the same user id across runs.
_USER_NAMESPACE = uuid.uuid5(uuid.NAMESPACE_URL, "https://taskdeck.local/users")


def user_id_for(display_name: str) -> str:
    return uuid.uuid5(_USER_NAMESPACE, display_name.strip().casefold()).hex


class LocalIdentityProvider:
    """
    Identity provider for local/console use.

    Sign-in asks for a display name through `prompt` (an async callable, the
    console passes a thread-backed input()). If `default_name` is configured
    the prompt is skipped. An empty answer or EOF counts as a cancelled sign-in.
    """

    def __init__(self, *, prompt: Prompt | None = None, default_name: str = "") -> None:
        self._prompt = prompt
        self._default_name = (default_name or "").strip()

    async def interactive_sign_in(self) -> Session:
        name = self._default_name
        if not name:
            if self._prompt is None:
                raise AuthenticationError("no display name configured and no interactive prompt")
            try:
                name = (await self._prompt("Display name: ")).strip()
            except EOFError as e:
                raise AuthenticationError("sign-in cancelled") from e

        if not name:
            raise AuthenticationError("sign-in cancelled")

        session = Session(display_name=name, user_id=user_id_for(name))
        logger.debug("Local sign-in name=%s user_id=%s", name, session.user_id)
        return session

    async def sign_out(self) -> None:
        # Nothing to revoke locally.
        return
