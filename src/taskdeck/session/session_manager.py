# src/taskdeck/session/session_manager.py

from __future__ import annotations

import logging

from ..board.board_state import BoardStateContainer, SessionEnded, SessionStarted
from ..board.models import Session
from ..board.project_store import ProjectTaskStore
from ..core.ports import IdentityProvider
from ..errors import AuthenticationError

logger = logging.getLogger(__name__)


class SessionManager:
    """
    Sign-in/sign-out against the identity provider.

    The session itself lives in the board state container; this class only
    drives the transitions. Nothing is persisted: every start is signed out.
    """

    def __init__(
            self,
            identity: IdentityProvider,
            board: BoardStateContainer,
            projects: ProjectTaskStore,
    ) -> None:
        self._identity = identity
        self._board = board
        self._projects = projects

    @property
    def session(self) -> Session | None:
        return self._board.state.session

    async def sign_in(self) -> Session | None:
        try:
            session = await self._identity.interactive_sign_in()
        except AuthenticationError as e:
            logger.info("Sign-in denied or cancelled: %s", e)
            return None
        except Exception:
            logger.exception("Sign-in failed")
            return None

        self._board.dispatch(SessionStarted(session))
        logger.info("Signed in as %s (user_id=%s)", session.display_name, session.user_id)

        # Initial load; a failure here is logged by the store and leaves an empty list.
        await self._projects.fetch_projects_for_user(session.user_id)
        return session

    async def sign_out(self) -> bool:
        try:
            await self._identity.sign_out()
        except Exception:
            logger.exception("Sign-out failed")
            return False

        self._board.dispatch(SessionEnded())
        logger.info("Signed out")
        return True
