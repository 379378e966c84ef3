"""aiohttp application factory for the panel API."""

from __future__ import annotations

from aiohttp import web

from guildpanel.api.keys import SESSION_VALIDATOR_KEY, SETTING_SERVICE_KEY
from guildpanel.api.middleware import cors_middleware
from guildpanel.api.settings_routes import routes as settings_routes
from guildpanel.settings.session_service import SessionValidator
from guildpanel.settings.setting_service import SettingService


def create_app(setting_service: SettingService, session_validator: SessionValidator) -> web.Application:
    """Build the application with its collaborators injected.

    Nothing here opens files or connections; the caller owns their lifecycle.
    """
    app = web.Application(middlewares=[cors_middleware])
    app[SETTING_SERVICE_KEY] = setting_service
    app[SESSION_VALIDATOR_KEY] = session_validator
    app.add_routes(settings_routes)
    return app
