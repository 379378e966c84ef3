import pytest

from guildpanel import main


def test_resolve_base_dir_env_overrides(tmp_path, monkeypatch):
    monkeypatch.setenv("GUILDPANEL_HOME", str(tmp_path))

    assert main.resolve_base_dir() == tmp_path.resolve()


def test_load_environment_reads_port(tmp_path, monkeypatch):
    monkeypatch.delenv("GUILDPANEL_HOST", raising=False)
    monkeypatch.setenv("GUILDPANEL_PORT", "9000")

    options = main.load_environment(tmp_path)

    assert options == main.ServerOptions(host="0.0.0.0", port=9000)


def test_load_environment_rejects_bad_port(tmp_path, monkeypatch):
    monkeypatch.setenv("GUILDPANEL_PORT", "eighty")

    with pytest.raises(SystemExit):
        main.load_environment(tmp_path)


def test_bootstrap_config_logs_panel_origin_and_redirects(tmp_path, monkeypatch):
    messages = []

    def fake_info(msg, *args, **kwargs):
        messages.append(msg % args)

    monkeypatch.setattr(main.logger, "info", fake_info)

    config = main.bootstrap_config(tmp_path)

    assert (tmp_path / "config.yml").exists()
    assert config.storage_file == tmp_path / "storage" / "Ree6.db"
    assert "Panel origin https://cp.ree6.de" in messages
    assert any("discord=https://cp.ree6.de/auth/discord/callback" in m for m in messages)
    assert any("twitch=https://cp.ree6.de/auth/twitch/callback" in m for m in messages)


def test_bootstrap_config_warns_on_unsupported_engine(tmp_path, monkeypatch):
    (tmp_path / "config.yml").write_text(
        "config:\n  version: 3.1.0\nhikari:\n  misc:\n    storage: mariadb\n", encoding="utf-8"
    )
    warnings = []
    monkeypatch.setattr(main.logger, "warning", lambda msg, *args, **kwargs: warnings.append(msg % args))

    config = main.bootstrap_config(tmp_path)

    assert config.storage_engine == "mariadb"
    assert any("'mariadb' is not supported" in w for w in warnings)
