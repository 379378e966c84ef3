"""
Session validation for the web panel.

The settings API only needs :class:`SessionValidator`: given the
``X-Session-Authenticator`` token and a guild, either return the session or
raise :class:`SessionError`. :class:`SessionService` is the SQLite-backed
implementation used by the server.

This backend only validates sessions. Rows in ``sessions`` are written by
the OAuth login flow, which calls :meth:`SessionService.create_session` after
Discord confirms the user and the guilds they manage, and
:meth:`SessionService.revoke` on logout. Until that flow has run, every
request is answered with "Invalid session!".
"""

from __future__ import annotations

import secrets
from datetime import datetime, timedelta
from typing import Iterable, Protocol

from guildpanel.database.db_connection import ConnectionManager
from guildpanel.datatypes.discord_datatypes import GuildID, UserID
from guildpanel.errors import SessionError
from guildpanel.settings.repositories import SessionRepository, SessionRow
from guildpanel.util.logger import get_logger

logger = get_logger("session_service")

DEFAULT_SESSION_LIFETIME = timedelta(days=7)


class SessionValidator(Protocol):
    async def retrieve_guild(self, session_identifier: str | None, guild_id: GuildID) -> SessionRow:
        ...


class SessionService:
    """Creates panel sessions and checks them against a guild."""

    def __init__(self, connection: ConnectionManager, repository: SessionRepository | None = None) -> None:
        self._connection = connection
        self._repo = repository or SessionRepository()

    async def create_session(
        self,
        user_id: UserID,
        guild_ids: Iterable[GuildID],
        lifetime: timedelta = DEFAULT_SESSION_LIFETIME,
    ) -> SessionRow:
        """Open a session for ``user_id`` allowed to manage ``guild_ids``."""
        session = SessionRow(
            identifier=secrets.token_urlsafe(32),
            user_id=user_id,
            expires_at=datetime.now() + lifetime,
            guild_ids=set(guild_ids),
        )
        async with self._connection.transaction() as conn:
            await self._repo.upsert(conn, session)
        logger.info("[SESSION SERVICE] Opened session for user %s (%d guilds)", user_id, len(session.guild_ids))
        return session

    async def retrieve_session(self, session_identifier: str | None) -> SessionRow:
        """
        Return a live session.

        Raises:
            SessionError: If the token is missing, unknown or expired.
        """
        if not session_identifier:
            raise SessionError("Missing session authenticator!")

        async with self._connection.read() as conn:
            session = await self._repo.get(conn, session_identifier)

        if session is None:
            raise SessionError("Invalid session!")
        if session.is_expired():
            raise SessionError("Session expired!")
        return session

    async def retrieve_guild(self, session_identifier: str | None, guild_id: GuildID) -> SessionRow:
        """
        Return the session if it may manage ``guild_id``.

        Raises:
            SessionError: If the session is invalid or not bound to the guild.
        """
        session = await self.retrieve_session(session_identifier)
        if guild_id not in session.guild_ids:
            raise SessionError("You do not have access to this guild!")
        return session

    async def revoke(self, session_identifier: str) -> None:
        async with self._connection.transaction() as conn:
            await self._repo.delete(conn, session_identifier)

    async def purge_expired(self) -> int:
        """Delete expired sessions and return how many were removed."""
        async with self._connection.transaction() as conn:
            removed = await self._repo.delete_expired(conn, datetime.now())
        if removed:
            logger.info("[SESSION SERVICE] Purged %d expired sessions", removed)
        return removed
