"""Exceptions raised by the settings service and session validation.

The HTTP handlers turn any of these into a failed envelope carrying
``str(exc)`` as the message, so messages are written for panel users.
"""


class GuildPanelError(Exception):
    """Base class for errors surfaced to panel users."""


class SessionError(GuildPanelError):
    """The session is missing, unknown, expired, or not bound to the guild."""


class SettingNotFoundError(GuildPanelError):
    """No setting with the requested name exists for the guild."""

    def __init__(self, guild_id: object, name: str) -> None:
        super().__init__("Setting not found!")
        self.guild_id = guild_id
        self.name = name
