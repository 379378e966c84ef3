"""
Repository for the sessions and session_guilds tables.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Set

import aiosqlite

from guildpanel.datatypes.discord_datatypes import GuildID, UserID


@dataclass
class SessionRow:
    """A panel login session and the guilds it may manage."""
    identifier: str
    user_id: UserID
    expires_at: datetime
    guild_ids: Set[GuildID] = field(default_factory=set)

    def is_expired(self, now: datetime | None = None) -> bool:
        return (now or datetime.now()) >= self.expires_at


class SessionRepository:
    """CRUD for sessions and their guild bindings."""

    async def get(self, conn: aiosqlite.Connection, identifier: str) -> SessionRow | None:
        async with conn.execute(
            "SELECT identifier, user_id, expires_at FROM sessions WHERE identifier = ?",
            (identifier,),
        ) as cursor:
            row = await cursor.fetchone()

        if row is None:
            return None

        async with conn.execute(
            "SELECT guild_id FROM session_guilds WHERE identifier = ?",
            (identifier,),
        ) as cursor:
            guild_rows = await cursor.fetchall()

        return SessionRow(
            identifier=row[0],
            user_id=UserID.from_int(row[1]),
            expires_at=datetime.fromisoformat(row[2]),
            guild_ids={GuildID.from_int(g[0]) for g in guild_rows},
        )

    async def upsert(self, conn: aiosqlite.Connection, session: SessionRow) -> None:
        """Store a session, replacing its guild bindings."""
        await conn.execute(
            """
            INSERT INTO sessions (identifier, user_id, expires_at) VALUES (?, ?, ?)
            ON CONFLICT(identifier) DO UPDATE SET
                user_id    = excluded.user_id,
                expires_at = excluded.expires_at
            """,
            (session.identifier, session.user_id.to_int(), session.expires_at.isoformat()),
        )
        await self.replace_guilds(conn, session.identifier, session.guild_ids)

    async def replace_guilds(
        self, conn: aiosqlite.Connection, identifier: str, guild_ids: Iterable[GuildID]
    ) -> None:
        await conn.execute("DELETE FROM session_guilds WHERE identifier = ?", (identifier,))
        await conn.executemany(
            "INSERT INTO session_guilds (identifier, guild_id) VALUES (?, ?)",
            [(identifier, guild_id.to_int()) for guild_id in guild_ids],
        )

    async def delete(self, conn: aiosqlite.Connection, identifier: str) -> None:
        """Delete a session (CASCADE removes its guild bindings)."""
        await conn.execute("DELETE FROM sessions WHERE identifier = ?", (identifier,))

    async def delete_expired(self, conn: aiosqlite.Connection, now: datetime) -> int:
        cursor = await conn.execute(
            "DELETE FROM sessions WHERE expires_at <= ?",
            (now.isoformat(),),
        )
        removed = cursor.rowcount
        await cursor.close()
        return removed
