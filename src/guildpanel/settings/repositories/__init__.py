"""Repository layer for settings and session database access."""
from guildpanel.settings.repositories.setting_repo import SettingRepository
from guildpanel.settings.repositories.session_repo import SessionRepository, SessionRow

__all__ = [
    "SettingRepository",
    "SessionRepository",
    "SessionRow",
]
