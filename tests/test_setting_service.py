import sqlite3

import pytest

from guildpanel.datatypes.discord_datatypes import GuildID
from guildpanel.errors import SettingNotFoundError
from guildpanel.settings.setting_service import SettingService

GUILD = GuildID(805149597052354580)
OTHER_GUILD = GuildID(42)


@pytest.mark.asyncio
async def test_list_settings_empty_guild(connection):
    service = SettingService(connection)

    assert await service.list_settings(GUILD) == []


@pytest.mark.asyncio
async def test_update_creates_missing_setting(connection):
    service = SettingService(connection)

    setting = await service.update_setting(GUILD, "chatprefix", "ree!")

    assert setting.guild_id == GUILD
    assert setting.value == "ree!"
    fetched = await service.get_setting(GUILD, "chatprefix")
    assert fetched.value == "ree!"


@pytest.mark.asyncio
async def test_update_overwrites_value(connection):
    service = SettingService(connection)
    await service.update_setting(GUILD, "chatprefix", "ree!")

    await service.update_setting(GUILD, "chatprefix", "?")

    settings = await service.list_settings(GUILD)
    assert [(s.name, s.value) for s in settings] == [("chatprefix", "?")]


@pytest.mark.asyncio
async def test_settings_are_scoped_per_guild(connection):
    service = SettingService(connection)
    await service.update_setting(GUILD, "b_setting", "1")
    await service.update_setting(GUILD, "a_setting", "2")
    await service.update_setting(OTHER_GUILD, "a_setting", "other")

    names = [s.name for s in await service.list_settings(GUILD)]

    assert names == ["a_setting", "b_setting"]
    assert (await service.get_setting(OTHER_GUILD, "a_setting")).value == "other"


@pytest.mark.asyncio
async def test_get_missing_setting_raises(connection):
    service = SettingService(connection)

    with pytest.raises(SettingNotFoundError) as exc_info:
        await service.get_setting(GUILD, "nope")

    assert str(exc_info.value) == "Setting not found!"
    assert exc_info.value.name == "nope"


@pytest.mark.asyncio
async def test_delete_removes_row(connection, tmp_path):
    service = SettingService(connection)
    await service.update_setting(GUILD, "chatprefix", "ree!")

    await service.delete_setting(GUILD, "chatprefix")

    conn = sqlite3.connect(tmp_path / "storage" / "test.db")
    rows = conn.execute("SELECT * FROM settings WHERE guild_id = ?", (GUILD.to_int(),)).fetchall()
    conn.close()
    assert rows == []


@pytest.mark.asyncio
async def test_delete_missing_setting_raises(connection):
    service = SettingService(connection)

    with pytest.raises(SettingNotFoundError):
        await service.delete_setting(GUILD, "nope")
