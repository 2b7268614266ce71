from wisdom_insights.config import Settings
from wisdom_insights.data_access import factory
from wisdom_insights.data_access.json_dal import JsonDal


def test_database_url_built_from_parts(monkeypatch):
    monkeypatch.delenv("DB_HOST_OVERRIDE", raising=False)
    s = Settings(
        POSTGRES_USER="wisdom",
        POSTGRES_PASSWORD="p@ss#word",
        POSTGRES_HOST="db",
        POSTGRES_DB="insights",
    )
    assert s.DATABASE_URL == "postgresql://wisdom:p%40ss%23word@db:5432/insights"


def test_host_override(monkeypatch):
    monkeypatch.setenv("DB_HOST_OVERRIDE", "127.0.0.1")
    s = Settings(POSTGRES_USER="u", POSTGRES_PASSWORD="p", POSTGRES_HOST="db", POSTGRES_DB="d")
    assert s.DATABASE_URL == "postgresql://u:p@127.0.0.1:5432/d"


def test_explicit_database_url_is_kept(monkeypatch):
    for var in ("POSTGRES_USER", "POSTGRES_PASSWORD", "POSTGRES_HOST", "POSTGRES_DB"):
        monkeypatch.delenv(var, raising=False)
    s = Settings(DATABASE_URL="postgresql://x@y/z")
    assert s.DATABASE_URL == "postgresql://x@y/z"


def test_paths_follow_project_root(tmp_path):
    s = Settings(PROJECT_ROOT=tmp_path)
    assert s.log_path == tmp_path / "summaries/logs/insights_history.log"
    assert s.data_path == tmp_path / "knowledge/data"


def test_factory_uses_json_outside_production(monkeypatch):
    monkeypatch.setattr(factory.settings, "ENVIRONMENT", "development")
    assert isinstance(factory.build_dal(), JsonDal)


def test_factory_falls_back_to_json_when_postgres_fails(monkeypatch):
    monkeypatch.setattr(factory.settings, "ENVIRONMENT", "production")
    monkeypatch.setattr(factory.settings, "DATABASE_URL", "postgresql://nobody@127.0.0.1:1/none")

    import wisdom_insights.data_access.postgres_dal as postgres_dal

    def refuse(*args, **kwargs):
        raise OSError("connection refused")

    monkeypatch.setattr(postgres_dal, "ConnectionPool", refuse)
    assert isinstance(factory.build_dal(), JsonDal)
