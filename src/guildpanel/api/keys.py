"""Typed keys for objects stored on the aiohttp application."""

from aiohttp import web

from guildpanel.settings.session_service import SessionValidator
from guildpanel.settings.setting_service import SettingService

SETTING_SERVICE_KEY = web.AppKey("setting_service", SettingService)
SESSION_VALIDATOR_KEY = web.AppKey("session_validator", SessionValidator)
