"""Per-guild key/value setting records."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

from guildpanel.datatypes.discord_datatypes import GuildID


@dataclass(slots=True)
class Setting:
    """A single named setting of a guild.

    A setting is identified by ``(guild_id, name)`` and always holds a string
    value; the bot decides how to interpret it.
    """

    guild_id: GuildID
    name: str
    value: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """Return the JSON shape used by the web panel."""
        return {
            "guildId": str(self.guild_id),
            "name": self.name,
            "value": self.value,
        }
