"""
Settings endpoints of the panel API.

Every handler validates the ``X-Session-Authenticator`` session against the
guild in the path, then delegates to :class:`SettingService`. Any failure is
answered with HTTP 200 and a failed ``{success, data, message}`` envelope;
no exception reaches the transport.
"""

from __future__ import annotations

from typing import Awaitable, Callable

from aiohttp import web

from guildpanel.api.keys import SESSION_VALIDATOR_KEY, SETTING_SERVICE_KEY
from guildpanel.datatypes.api_response import ApiResponse
from guildpanel.datatypes.discord_datatypes import GuildID
from guildpanel.errors import GuildPanelError, SessionError
from guildpanel.util.logger import get_logger

logger = get_logger("settings_routes")

SESSION_HEADER = "X-Session-Authenticator"

routes = web.RouteTableDef()

Action = Callable[[GuildID], Awaitable[ApiResponse]]


def _parse_guild_id(raw: str) -> GuildID:
    try:
        return GuildID(raw)
    except ValueError:
        raise GuildPanelError("Invalid guild id!") from None


async def _respond(request: web.Request, action: Action) -> web.Response:
    """Validate the session for the path's guild, run ``action`` and wrap the result."""
    try:
        guild_id = _parse_guild_id(request.match_info["guildId"])
        await request.app[SESSION_VALIDATOR_KEY].retrieve_guild(request.headers.get(SESSION_HEADER), guild_id)
        response = await action(guild_id)
    except SessionError as exc:
        logger.info("[SETTINGS API] Rejected %s %s: %s", request.method, request.path, exc)
        response = ApiResponse.failure(exc)
    except Exception as exc:
        # Expected errors get one line; anything else keeps its traceback in the log
        logger.warning(
            "[SETTINGS API] %s %s failed: %s",
            request.method,
            request.path,
            exc,
            exc_info=not isinstance(exc, GuildPanelError),
        )
        response = ApiResponse.failure(exc)
    return web.json_response(response.to_dict())


@routes.get("/settings/{guildId}/")
async def retrieve_settings(request: web.Request) -> web.Response:
    async def action(guild_id: GuildID) -> ApiResponse:
        settings = await request.app[SETTING_SERVICE_KEY].list_settings(guild_id)
        return ApiResponse.ok(settings, "Settings retrieved!")

    return await _respond(request, action)


@routes.get("/settings/{guildId}/{settingName}")
async def retrieve_setting(request: web.Request) -> web.Response:
    name = request.match_info["settingName"]

    async def action(guild_id: GuildID) -> ApiResponse:
        setting = await request.app[SETTING_SERVICE_KEY].get_setting(guild_id, name)
        return ApiResponse.ok(setting, "Setting retrieved!")

    return await _respond(request, action)


@routes.get("/settings/{guildId}/{settingName}/update")
async def update_setting(request: web.Request) -> web.Response:
    name = request.match_info["settingName"]

    async def action(guild_id: GuildID) -> ApiResponse:
        value = await request.text()
        setting = await request.app[SETTING_SERVICE_KEY].update_setting(guild_id, name, value)
        return ApiResponse.ok(setting, "Setting updated!")

    return await _respond(request, action)


@routes.get("/settings/{guildId}/{settingName}/delete")
async def delete_setting(request: web.Request) -> web.Response:
    name = request.match_info["settingName"]

    async def action(guild_id: GuildID) -> ApiResponse:
        await request.app[SETTING_SERVICE_KEY].delete_setting(guild_id, name)
        return ApiResponse.ok(None, "Setting deleted!")

    return await _respond(request, action)
