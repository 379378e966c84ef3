from pathlib import Path

import pytest
import yaml

from guildpanel.configuration.app_configuration import AppConfig, ConfigResult, render_document
from guildpanel.configuration.version import CURRENT_VERSION


LEGACY_CONFIG = """\
config:
  version: 3.0.0
  creation: 123
mysql:
  user: alice
  pw: hunter2
  port: 3307
discord:
  bot:
    tokens:
      rel: X
      beta: B
raygun:
  apikey: secret
webinterface:
  hostname: panel.example.org
"""


@pytest.fixture()
def config_path(tmp_path: Path) -> Path:
    return tmp_path / "config.yml"


def test_init_creates_default_file(config_path: Path) -> None:
    config = AppConfig(config_path)

    result = config.init()

    assert result.ok is True
    assert result.action == "create"
    assert config_path.exists()
    assert (config_path.parent / "storage").is_dir()

    text = config_path.read_text(encoding="utf-8")
    assert text.startswith("################################")
    assert "# Do not change this!" in text
    assert "# HikariCP Configuration" in text

    loaded = yaml.safe_load(text)
    assert loaded["config"]["version"] == CURRENT_VERSION
    assert isinstance(loaded["config"]["creation"], int)
    assert loaded["hikari"]["sql"]["port"] == 3306
    assert loaded["hikari"]["misc"]["storage"] == "sqlite"
    assert loaded["discord"]["bot"]["tokens"]["release"] == "ReleaseTokenhere"
    assert loaded["discord"]["client"]["id"] == 0
    assert loaded["webinterface"]["usingSSL"] is True


def test_init_twice_leaves_fresh_file_untouched(config_path: Path) -> None:
    first = AppConfig(config_path)
    first.init()
    before = config_path.read_bytes()

    second = AppConfig(config_path)
    result = second.init()

    assert result.ok is True
    assert result.action == "migrate"
    assert config_path.read_bytes() == before
    assert second.version == CURRENT_VERSION
    assert second.get("config.creation") == first.get("config.creation")


def test_current_version_is_not_migrated(config_path: Path) -> None:
    original = "config:\n  version: 3.1.0\n  creation: 1\nmysql:\n  user: alice   # kept as written\n"
    config_path.write_text(original, encoding="utf-8")

    config = AppConfig(config_path)
    result = config.init()

    assert result.ok is True
    assert config_path.read_text(encoding="utf-8") == original
    assert config.get("mysql.user") == "alice"
    assert not (config_path.parent / "config-old.yml").exists()


def test_legacy_config_is_migrated(config_path: Path) -> None:
    config_path.write_text(LEGACY_CONFIG, encoding="utf-8")

    config = AppConfig(config_path)
    result = config.init()

    assert result.ok is True
    assert result.action == "migrate"
    assert config.version == CURRENT_VERSION

    reloaded = AppConfig(config_path)
    assert reloaded.init().ok is True
    assert reloaded.get("hikari.sql.user") == "alice"
    assert reloaded.get("hikari.sql.pw") == "hunter2"
    assert reloaded.get("hikari.sql.port") == 3307
    assert reloaded.get("hikari.sql.host") == "localhost"
    assert reloaded.get("mysql") is None
    assert reloaded.get("discord.bot.tokens.release") == "X"
    assert reloaded.get("discord.bot.tokens.rel") is None
    assert reloaded.get("discord.bot.tokens.beta") == "B"
    assert reloaded.get("raygun") is None
    assert reloaded.get("webinterface.hostname") == "panel.example.org"


def test_migration_keeps_fresh_config_namespace(config_path: Path) -> None:
    config_path.write_text(LEGACY_CONFIG, encoding="utf-8")

    config = AppConfig(config_path)
    config.init()

    assert config.get("config.version") == CURRENT_VERSION
    assert config.get("config.creation") != 123


def test_migration_backs_up_old_file(config_path: Path) -> None:
    config_path.write_text(LEGACY_CONFIG, encoding="utf-8")

    AppConfig(config_path).init()

    backup = config_path.parent / "config-old.yml"
    assert backup.read_text(encoding="utf-8") == LEGACY_CONFIG


def test_existing_backup_is_not_overwritten(config_path: Path) -> None:
    backup = config_path.parent / "config-old.yml"
    backup.write_text("older: true\n", encoding="utf-8")
    config_path.write_text(LEGACY_CONFIG, encoding="utf-8")

    result = AppConfig(config_path).init()

    assert result.ok is True
    assert backup.read_text(encoding="utf-8") == "older: true\n"


def test_unversioned_config_is_treated_as_300(config_path: Path) -> None:
    config_path.write_text("mysql:\n  host: db.internal\n", encoding="utf-8")

    config = AppConfig(config_path)
    config.init()

    assert config.version == CURRENT_VERSION
    assert config.get("hikari.sql.host") == "db.internal"


def test_renames_skipped_from_306(config_path: Path) -> None:
    config_path.write_text(
        "config:\n  version: 3.0.6\nmysql:\n  user: alice\nhikari:\n  sql:\n    user: bob\n",
        encoding="utf-8",
    )

    config = AppConfig(config_path)
    config.init()

    assert config.get("mysql.user") == "alice"
    assert config.get("hikari.sql.user") == "bob"


def test_malformed_version_propagates(config_path: Path) -> None:
    config_path.write_text("config:\n  version: not-a-version\n", encoding="utf-8")

    with pytest.raises(ValueError):
        AppConfig(config_path).init()


def test_invalid_yaml_reports_load_failure(config_path: Path) -> None:
    config_path.write_text("config: [unclosed\n", encoding="utf-8")

    config = AppConfig(config_path)
    result = config.init()

    assert result.ok is False
    assert result.action == "load"
    assert result.reason
    assert config.data == {}


def test_unwritable_location_reports_create_failure(tmp_path: Path) -> None:
    config = AppConfig(tmp_path / "missing" / "config.yml", storage_dir=tmp_path / "storage")

    result = config.init()

    assert result.ok is False
    assert result.action == "create"
    assert config.version == CURRENT_VERSION


def test_shortcut_properties(config_path: Path) -> None:
    config = AppConfig(config_path)
    config.init()

    assert config.storage_engine == "sqlite"
    assert config.storage_file == config_path.parent / "storage" / "Ree6.db"
    assert config.webinterface_origin == "https://cp.ree6.de"
    assert config.discord_redirect.endswith("/auth/discord/callback")
    assert config.twitch_redirect.endswith("/auth/twitch/callback")


def test_values_are_flattened(config_path: Path) -> None:
    config = AppConfig(config_path)
    config.init()

    keys = [key for key, _ in config.values()]

    assert keys[:2] == ["config.version", "config.creation"]
    assert "hikari.sql.user" in keys
    assert "hikari" not in keys


def test_render_document_round_trips() -> None:
    document = {"config": {"version": "3.1.0"}, "custom": {"flag": False}}

    assert yaml.safe_load(render_document(document)) == document


def test_default_file_documents_every_section(config_path: Path) -> None:
    AppConfig(config_path).init()

    lines = config_path.read_text(encoding="utf-8").splitlines()

    assert "  # SQL Configuration" in lines
    assert "  # Misc Configuration" in lines
    assert "  # Bot Configuration" in lines
    assert "  # OAuth Configuration" in lines
    assert "    storage: sqlite  # Either use sqlite or mariadb." in lines
    assert "      release: ReleaseTokenhere  # Token used when set to release build." in lines
    assert "    id: 0  # Client ID of the Discord Application." in lines
    assert "  usingSSL: true  # Whether you are using SSL or not." in lines


def test_migrated_file_keeps_comments(config_path: Path) -> None:
    config_path.write_text(LEGACY_CONFIG, encoding="utf-8")

    AppConfig(config_path).init()

    text = config_path.read_text(encoding="utf-8")
    assert "    user: alice\n" in text
    assert "      release: X  # Token used when set to release build.\n" in text


def test_render_document_quotes_awkward_keys() -> None:
    document = {"odd: key": {"list": [1, 2], "empty": {}}}

    assert yaml.safe_load(render_document(document)) == document


def test_failed_backup_does_not_stop_migration(tmp_path: Path) -> None:
    config_path = tmp_path / "config.yml"
    config_path.write_text(LEGACY_CONFIG, encoding="utf-8")
    backup_path = tmp_path / "missing-dir" / "config-old.yml"

    config = AppConfig(config_path, backup_path=backup_path)
    result = config.init()

    assert result.ok is True
    assert result.action == "migrate"
    assert not backup_path.exists()
    assert config.get("hikari.sql.user") == "alice"


def test_storage_dir_failure_is_not_fatal(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")

    config = AppConfig(tmp_path / "config.yml", storage_dir=blocker / "storage")
    result = config.init()

    assert result.ok is True
    assert result.action == "create"
    assert (tmp_path / "config.yml").exists()
    assert blocker.is_file()


def test_failed_save_after_migration_is_reported(config_path: Path, monkeypatch) -> None:
    config_path.write_text(LEGACY_CONFIG, encoding="utf-8")
    config = AppConfig(config_path)
    original_save = config.save
    calls = []

    def save_fails_second_time() -> ConfigResult:
        calls.append(None)
        if len(calls) > 1:
            return ConfigResult.failed("save", "disk full")
        return original_save()

    monkeypatch.setattr(config, "save", save_fails_second_time)

    result = config.init()

    assert result == ConfigResult(False, "migrate", "disk full")
    assert len(calls) == 2
