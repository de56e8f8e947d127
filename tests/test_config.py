from ecat_quiz import database
from ecat_quiz.config import Settings
from ecat_quiz.stores import MemoryEntityStore, SqlEntityStore, build_store


def test_defaults(monkeypatch):
    for name in ("DATABASE_URL", "STORE_BACKEND", "SEED_TEST_DATA"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings(_env_file=None)
    assert settings.DATABASE_URL == "sqlite:///./ecat_quiz.db"
    assert settings.STORE_BACKEND == "sql"
    assert settings.SEED_TEST_DATA is True
    assert settings.SECRET_KEY


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite://")
    monkeypatch.setenv("STORE_BACKEND", "memory")
    monkeypatch.setenv("SEED_TEST_DATA", "false")

    settings = Settings(_env_file=None)
    assert settings.DATABASE_URL == "sqlite://"
    assert settings.STORE_BACKEND == "memory"
    assert settings.SEED_TEST_DATA is False


def test_build_store_memory_backend():
    store = build_store(Settings(_env_file=None, STORE_BACKEND="memory"))
    assert isinstance(store, MemoryEntityStore)


def test_build_store_reuses_configured_engine():
    url = str(database.engine.url)
    store = build_store(Settings(_env_file=None, DATABASE_URL=url))
    assert isinstance(store, SqlEntityStore)
    assert store.engine is database.engine


def test_build_store_other_url_gets_its_own_engine():
    store = build_store(Settings(_env_file=None, DATABASE_URL="sqlite://"))
    assert isinstance(store, SqlEntityStore)
    assert store.engine is not database.engine
    store.initialize()
    assert store.count_users() == 0
