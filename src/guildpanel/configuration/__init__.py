"""
Configuration management for guildpanel.

- **app_configuration.py**: the ``config.yml`` accessor. Creates the file with
  defaults on first start, loads it afterwards and migrates older layouts.
  Every file operation reports a :class:`ConfigResult` instead of raising.
- **migration.py**: the ordered table of key rewrites applied to old files.
- **version.py**: ``major.minor.patch`` comparison.
"""

from guildpanel.configuration.app_configuration import AppConfig, ConfigResult
from guildpanel.configuration.version import CURRENT_VERSION, compare_version

__all__ = ["AppConfig", "ConfigResult", "CURRENT_VERSION", "compare_version"]
