"""
Repository for the settings table.

Handles only SQL for ``settings``; transactions are owned by the caller.
"""

from __future__ import annotations

from typing import List

import aiosqlite

from guildpanel.datatypes.discord_datatypes import GuildID
from guildpanel.datatypes.setting import Setting


def _row_to_setting(row) -> Setting:
    return Setting(guild_id=GuildID.from_int(row[0]), name=row[1], value=row[2] or "")


class SettingRepository:
    """CRUD for the settings table."""

    async def get_by_guild(self, conn: aiosqlite.Connection, guild_id: GuildID) -> List[Setting]:
        """Fetch every setting of a guild, ordered by name."""
        async with conn.execute(
            "SELECT guild_id, name, value FROM settings WHERE guild_id = ? ORDER BY name",
            (guild_id.to_int(),),
        ) as cursor:
            rows = await cursor.fetchall()
        return [_row_to_setting(row) for row in rows]

    async def get(self, conn: aiosqlite.Connection, guild_id: GuildID, name: str) -> Setting | None:
        async with conn.execute(
            "SELECT guild_id, name, value FROM settings WHERE guild_id = ? AND name = ?",
            (guild_id.to_int(), name),
        ) as cursor:
            row = await cursor.fetchone()
        return None if row is None else _row_to_setting(row)

    async def upsert(self, conn: aiosqlite.Connection, setting: Setting) -> None:
        """Insert a setting or overwrite the value of an existing one."""
        await conn.execute(
            """
            INSERT INTO settings (guild_id, name, value) VALUES (?, ?, ?)
            ON CONFLICT(guild_id, name) DO UPDATE SET
                value      = excluded.value,
                updated_at = CURRENT_TIMESTAMP
            """,
            (setting.guild_id.to_int(), setting.name, setting.value),
        )

    async def delete(self, conn: aiosqlite.Connection, guild_id: GuildID, name: str) -> bool:
        """Delete a setting; returns False if there was nothing to delete."""
        cursor = await conn.execute(
            "DELETE FROM settings WHERE guild_id = ? AND name = ?",
            (guild_id.to_int(), name),
        )
        deleted = cursor.rowcount > 0
        await cursor.close()
        return deleted
