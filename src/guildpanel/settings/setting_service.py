"""
SettingService: settings reads and writes on top of the shared connection.

No SQL here; the service picks read or write access, calls the repository
and turns missing rows into :class:`SettingNotFoundError`.
"""

from __future__ import annotations

from typing import List

from guildpanel.database.db_connection import ConnectionManager
from guildpanel.datatypes.discord_datatypes import GuildID
from guildpanel.datatypes.setting import Setting
from guildpanel.errors import SettingNotFoundError
from guildpanel.settings.repositories import SettingRepository
from guildpanel.util.logger import get_logger

logger = get_logger("setting_service")


class SettingService:
    """Retrieve, update and delete a guild's settings."""

    def __init__(self, connection: ConnectionManager, repository: SettingRepository | None = None) -> None:
        self._connection = connection
        self._repo = repository or SettingRepository()

    async def list_settings(self, guild_id: GuildID) -> List[Setting]:
        """Return all settings of ``guild_id``; an empty list is not an error."""
        async with self._connection.read() as conn:
            return await self._repo.get_by_guild(conn, guild_id)

    async def get_setting(self, guild_id: GuildID, name: str) -> Setting:
        """
        Return one setting.

        Raises:
            SettingNotFoundError: If the guild has no setting called ``name``.
        """
        async with self._connection.read() as conn:
            setting = await self._repo.get(conn, guild_id, name)
        if setting is None:
            raise SettingNotFoundError(guild_id, name)
        return setting

    async def update_setting(self, guild_id: GuildID, name: str, value: str) -> Setting:
        """Set ``name`` to ``value``, creating the setting on its first update."""
        async with self._connection.transaction() as conn:
            existing = await self._repo.get(conn, guild_id, name)
            setting = existing or Setting(guild_id=guild_id, name=name)
            setting.value = value
            await self._repo.upsert(conn, setting)

        if existing is None:
            logger.info("[SETTING SERVICE] Created setting %s for guild %s", name, guild_id)
        else:
            logger.debug("[SETTING SERVICE] Updated setting %s for guild %s", name, guild_id)
        return setting

    async def delete_setting(self, guild_id: GuildID, name: str) -> None:
        """
        Remove a setting.

        Raises:
            SettingNotFoundError: If there was no such setting.
        """
        async with self._connection.transaction() as conn:
            deleted = await self._repo.delete(conn, guild_id, name)
        if not deleted:
            raise SettingNotFoundError(guild_id, name)
        logger.info("[SETTING SERVICE] Deleted setting %s for guild %s", name, guild_id)
