# trending/tests/conftest.py
import pytest

@pytest.fixture()
def temp_repo(tmp_path):
    # Store em arquivo temporário, já aberto
    from trending.storage.repository import NewsRepository
    repo = NewsRepository(str(tmp_path / "data" / "news.json"), lock_timeout=2)
    repo.open()
    yield repo
    repo.close()

@pytest.fixture()
def app(monkeypatch, tmp_path):
    from trending.api import main as api_main
    from trending.storage.repository import NewsRepository

    # 1) repositório apontando para arquivo temporário (aberto pelo lifespan)
    repo = NewsRepository(str(tmp_path / "api" / "news.json"), lock_timeout=2)
    monkeypatch.setattr(api_main, "repository", repo, raising=True)

    # 2) scheduler.start/shutdown: no-op
    class DummyScheduler:
        def add_job(self, *a, **k): pass
        def start(self): pass
        def shutdown(self, wait=False): pass
    monkeypatch.setattr(api_main, "scheduler", DummyScheduler(), raising=True)

    return api_main.app

@pytest.fixture()
def client(app):
    from fastapi.testclient import TestClient
    # Usa contexto para garantir lifespan mas com patches aplicados
    with TestClient(app) as c:
        yield c
