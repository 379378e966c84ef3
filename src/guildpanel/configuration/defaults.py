"""Default ``config.yml`` contents written on first start."""

from __future__ import annotations

import time
from typing import Any, Dict

from guildpanel.configuration.version import CURRENT_VERSION

CONFIG_HEADER = """\
################################
#                              #
# Ree6 Config File             #
# by Presti                    #
#                              #
################################
"""

# Comment lines written above a section, keyed by dotted path
BLOCK_COMMENTS: Dict[str, str] = {
    "config": "Do not change this!",
    "hikari": "HikariCP Configuration",
    "hikari.sql": "SQL Configuration",
    "hikari.misc": "Misc Configuration",
    "twitch": "Twitch Application Configuration, used for the StreamTools and Twitch Notifications.",
    "discord": "Discord Application Configuration, used for OAuth and Bot Authentication.",
    "discord.bot": "Bot Configuration",
    "discord.client": "OAuth Configuration",
    "webinterface": "Basic Configurations for the Webinterface",
}

# Trailing comments on leaf keys
SIDE_COMMENTS: Dict[str, str] = {
    "hikari.misc.storage": "Either use sqlite or mariadb.",
    "discord.bot.tokens.release": "Token used when set to release build.",
    "discord.bot.tokens.beta": "Token used when set to beta build.",
    "discord.bot.tokens.dev": "Token used when set to dev build.",
    "discord.client.id": "Client ID of the Discord Application.",
    "discord.client.secret": "Client Secret of the Discord Application.",
    "webinterface.hostname": "Hostname of the Webinterface.",
    "webinterface.usingSSL": "Whether you are using SSL or not.",
    "webinterface.discordRedirect": "Redirect URL for Discord OAuth.",
    "webinterface.twitchRedirect": "Redirect URL for Twitch OAuth.",
}


def build_default_document(creation: int | None = None) -> Dict[str, Any]:
    """Return a new default document stamped with the current schema version.

    Args:
        creation: Creation timestamp in epoch milliseconds; now if omitted.
    """
    if creation is None:
        creation = int(time.time() * 1000)

    return {
        "config": {
            "version": CURRENT_VERSION,
            "creation": creation,
        },
        "hikari": {
            "sql": {
                "user": "root",
                "db": "root",
                "pw": "yourpw",
                "host": "localhost",
                "port": 3306,
            },
            "misc": {
                "storage": "sqlite",
                "storageFile": "storage/Ree6.db",
                "poolSize": 10,
            },
        },
        "twitch": {
            "client": {
                "id": "yourtwitchclientidhere",
                "secret": "yourtwitchclientsecrethere",
            },
        },
        "discord": {
            "bot": {
                "tokens": {
                    "release": "ReleaseTokenhere",
                    "beta": "BetaTokenhere",
                    "dev": "DevTokenhere",
                },
            },
            "client": {
                "id": 0,
                "secret": "yourDiscordClientSecrethere",
            },
        },
        "webinterface": {
            "hostname": "cp.ree6.de",
            "usingSSL": True,
            "discordRedirect": "https://cp.ree6.de/auth/discord/callback",
            "twitchRedirect": "https://cp.ree6.de/auth/twitch/callback",
        },
    }
