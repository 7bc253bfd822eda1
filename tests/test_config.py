from tutor.config import DEFAULT_MODEL, Settings


def test_defaults_without_environment(monkeypatch):
    for name in ["DATABASE_URL", "DEFAULT_MODEL", "INFERENCE_BACKEND", "INFERENCE_TIMEOUT", "GRAPHITE_HOST_PORT"]:
        monkeypatch.delenv(name, raising=False)

    settings = Settings.from_env()
    assert settings.default_model == DEFAULT_MODEL
    assert settings.inference_backend == "workers-ai"
    assert settings.database_url == "sqlite:///study_sessions.db"
    assert settings.inference_timeout == 60.0
    assert settings.graphite_host_port == 8125


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "postgresql://tutor@db/tutor")
    monkeypatch.setenv("DEFAULT_MODEL", "@cf/qwen/qwq-32b")
    monkeypatch.setenv("INFERENCE_BACKEND", "Ollama")
    monkeypatch.setenv("INFERENCE_TIMEOUT", "12.5")
    monkeypatch.setenv("GRAPHITE_HOST_PORT", "9125")

    settings = Settings.from_env()
    assert settings.database_url == "postgresql://tutor@db/tutor"
    assert settings.default_model == "@cf/qwen/qwq-32b"
    assert settings.inference_backend == "ollama"
    assert settings.inference_timeout == 12.5
    assert settings.graphite_host_port == 9125


def test_configure_logging_sets_root_level():
    import logging
    from tutor.log import configure_logging

    root = logging.getLogger()
    previous = root.level
    try:
        configure_logging("debug")
        assert root.level == logging.DEBUG
    finally:
        root.setLevel(previous)
