import pytest

from wisdom_insights.config import settings


@pytest.fixture(autouse=True)
def project_root(tmp_path, monkeypatch):
    # Keep logs and JSON tables out of the working tree
    monkeypatch.setattr(settings, "PROJECT_ROOT", tmp_path)
    return tmp_path
