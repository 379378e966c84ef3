"""
guildpanel - backend for a Discord bot's web panel

Core Components:

- **Configuration**: ``config.yml`` bootstrap. Writes a default file on the
  first run, loads it afterwards and migrates layouts older than the current
  schema version (backing the old file up as ``config-old.yml``)
- **Settings API**: aiohttp endpoints to list, read, update and delete a
  guild's key/value settings, each guarded by a panel session bound to the
  guild and answered with a ``{success, data, message}`` envelope
- **Storage**: a single aiosqlite connection with repositories for settings
  and sessions

Usage:
    from guildpanel.main import main
    main()  # Prepares config.yml, opens the database and serves the API
"""
