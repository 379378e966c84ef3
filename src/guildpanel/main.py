"""
Guild Panel Backend
===================

HTTP backend for the bot's web panel. On startup it prepares ``config.yml``
(creating or migrating it), opens the SQLite store named there, and serves
the settings API until interrupted.
"""

import asyncio
import os
import sys
from dataclasses import dataclass
from pathlib import Path

from aiohttp import web
from dotenv import load_dotenv

from guildpanel.api.app import create_app
from guildpanel.configuration.app_configuration import CONFIG_PATH, AppConfig
from guildpanel.database.db_connection import db_connection
from guildpanel.settings.session_service import SessionService
from guildpanel.settings.setting_service import SettingService
from guildpanel.util.logger import get_logger, handle_exception


logger = get_logger("main")

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8888


def resolve_base_dir() -> Path:
    """Determine the base directory that holds ``config.yml`` and ``storage/``.

    Resolution order:
    1. GUILDPANEL_HOME environment variable, if set.
    2. If running in a frozen/compiled context, use the executable's directory.
    3. Otherwise, assume running from source and use the grandparent of this file's directory.
    """
    if env_home := os.getenv("GUILDPANEL_HOME"):
        return Path(env_home).resolve()

    if getattr(sys, "frozen", False) or getattr(sys, "compiled", False):
        return Path(sys.argv[0]).resolve().parent

    return Path(__file__).resolve().parents[2]


@dataclass(frozen=True)
class ServerOptions:
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT


def load_environment(base_dir: Path) -> ServerOptions:
    """Load ``.env`` and return the listen address.

    Raises
    ------
    SystemExit
        If ``GUILDPANEL_PORT`` is not a number.
    """
    load_dotenv(dotenv_path=base_dir / ".env")
    host = os.getenv("GUILDPANEL_HOST", DEFAULT_HOST)
    raw_port = os.getenv("GUILDPANEL_PORT", str(DEFAULT_PORT))
    try:
        port = int(raw_port)
    except ValueError:
        logger.critical("GUILDPANEL_PORT must be a number, got %r", raw_port)
        sys.exit(1)
    return ServerOptions(host=host, port=port)


def bootstrap_config(base_dir: Path) -> AppConfig:
    """Create or load ``config.yml`` before anything else runs.

    A failed create or load is logged and startup continues with whatever
    was loaded, so a read-only directory does not keep the backend down.
    """
    config = AppConfig(base_dir / CONFIG_PATH)
    result = config.init()
    if result.ok:
        logger.info("Configuration ready (%s, version %s).", result.action, config.version)
    else:
        logger.warning(
            "Configuration %s failed: %s. Continuing with defaults where missing.",
            result.action,
            result.reason,
        )

    if config.storage_engine != "sqlite":
        logger.warning(
            "Storage engine %r is not supported by the panel backend; using SQLite at %s.",
            config.storage_engine,
            config.storage_file,
        )

    logger.info("Panel origin %s", config.webinterface_origin)
    logger.info("OAuth redirects: discord=%s twitch=%s", config.discord_redirect, config.twitch_redirect)
    return config


async def serve(app: web.Application, options: ServerOptions) -> None:
    """Run ``app`` until the task is cancelled."""
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, options.host, options.port)
    await site.start()
    logger.info("Serving settings API on http://%s:%d", options.host, options.port)
    try:
        await asyncio.Event().wait()
    finally:
        await runner.cleanup()
        logger.info("HTTP server stopped.")


async def async_main(base_dir: Path) -> int:
    """Bootstrap configuration, database and HTTP server, returning an exit code."""
    options = load_environment(base_dir)
    config = bootstrap_config(base_dir)

    try:
        await db_connection.open(config.storage_file)
    except Exception as exc:
        logger.critical("Failed to open database %s: %s", config.storage_file, exc)
        return 1

    session_service = SessionService(db_connection)
    setting_service = SettingService(db_connection)

    try:
        await session_service.purge_expired()
        await serve(create_app(setting_service, session_service), options)
    except asyncio.CancelledError:
        logger.info("Server task cancelled; shutting down")
    except OSError as exc:
        logger.critical("Could not start HTTP server: %s", exc)
        return 1
    finally:
        await db_connection.close()

    return 0


def main() -> int:
    """Entrypoint that runs the async runtime and returns the process exit code."""
    sys.excepthook = handle_exception
    base_dir = resolve_base_dir()
    os.chdir(base_dir)

    logger.info("Starting guild panel backend in %s…", base_dir)
    try:
        return asyncio.run(async_main(base_dir))
    except KeyboardInterrupt:
        logger.info("Shutdown requested by user.")
        return 0


if __name__ == "__main__":
    sys.exit(main())
