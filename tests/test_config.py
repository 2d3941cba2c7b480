"""Tests for configuration loading."""

from taskboard.config import get_config, load_config


def test_defaults_without_file(tmp_path):
    config = load_config(str(tmp_path / "missing.yml"))
    assert config.database.backend == "sqlite"
    assert config.logging.level == "info"
    assert config.board.strict_references is False


def test_loads_yaml(tmp_path):
    path = tmp_path / "config.yml"
    path.write_text(
        "database:\n"
        "  backend: memory\n"
        "logging:\n"
        "  level: debug\n"
        "board:\n"
        "  strict_references: true\n"
    )

    config = load_config(str(path))

    assert config.database.backend == "memory"
    assert config.logging.level == "debug"
    assert config.board.strict_references is True


def test_environment_overrides(tmp_path, monkeypatch):
    monkeypatch.setenv("TASKBOARD_DB_PATH", str(tmp_path / "env.db"))
    monkeypatch.setenv("TASKBOARD_DB_BACKEND", "MEMORY")
    monkeypatch.setenv("TASKBOARD_STRICT_REFERENCES", "true")

    config = load_config(str(tmp_path / "missing.yml"))

    assert config.database.path == str(tmp_path / "env.db")
    assert config.database.backend == "memory"
    assert config.board.strict_references is True


def test_config_path_from_environment(tmp_path, monkeypatch):
    path = tmp_path / "custom.yml"
    path.write_text("server:\n  port: 9123\n")
    monkeypatch.setenv("TASKBOARD_CONFIG", str(path))

    assert get_config().server.port == 9123


def test_config_is_cached(tmp_path):
    first = load_config(str(tmp_path / "missing.yml"))
    assert get_config() is first
