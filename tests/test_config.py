import importlib

import pytest

import bazaarbuddy.config as config_module


def _reload(monkeypatch, env):
    for key, value in env.items():
        if value is None:
            monkeypatch.delenv(key, raising=False)
        else:
            monkeypatch.setenv(key, value)
    return importlib.reload(config_module)


@pytest.fixture(autouse=True)
def _restore_config():
    yield
    importlib.reload(config_module)


def test_testing_config_uses_memory_db(monkeypatch):
    cfg = _reload(monkeypatch, {"APP_ENV": "testing", "TEST_DATABASE_URL": None}).get_config_class()
    assert cfg.TESTING is True
    assert cfg.SQLALCHEMY_DATABASE_URI == "sqlite:///:memory:"
    assert cfg.RATELIMIT_ENABLED is False


def test_development_defaults(monkeypatch):
    cfg = _reload(monkeypatch, {"APP_ENV": "development", "DATABASE_URL": None}).get_config_class()
    assert cfg.DEBUG is True
    assert cfg.SQLALCHEMY_DATABASE_URI == "sqlite:///dev.db"
    assert cfg.ORDER_LIMIT_PER_IP == "20 per hour"


def test_production_requires_secrets(monkeypatch):
    module = _reload(monkeypatch, {
        "APP_ENV": "production",
        "SECRET_KEY": None,
        "JWT_SECRET": None,
        "DATABASE_URL": None,
    })
    with pytest.raises(RuntimeError) as exc:
        module.get_config_class()
    assert "SECRET_KEY" in str(exc.value)


def test_production_with_secrets(monkeypatch):
    module = _reload(monkeypatch, {
        "APP_ENV": "production",
        "SECRET_KEY": "s",
        "JWT_SECRET": "j",
        "DATABASE_URL": "postgresql://db/bazaar",
    })
    cfg = module.get_config_class()
    assert cfg is module.ProductionConfig
    assert cfg.SQLALCHEMY_DATABASE_URI == "postgresql://db/bazaar"
