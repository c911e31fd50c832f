import numpy as np
import pytest

from engine.config import EngineSettings, get_engine_settings
from database.config import get_database_settings


@pytest.fixture
def rng():
    """Seeded uniform source for reproducible Monte Carlo runs."""
    return np.random.default_rng(42)


@pytest.fixture
def engine_settings():
    return EngineSettings(random_seed=42, simulations=5000, pool_size=50)


@pytest.fixture
def random_history():
    """30 values drawn uniformly from [1, 15]."""
    return [round(v, 2) for v in np.random.default_rng(2024).uniform(1, 15, 30)]


@pytest.fixture
def client(tmp_path, monkeypatch):
    """API client backed by a throwaway SQLite database."""
    from fastapi.testclient import TestClient

    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    monkeypatch.setenv("FORECAST_RANDOM_SEED", "7")
    get_database_settings.cache_clear()
    get_engine_settings.cache_clear()

    import engine.routes
    engine.routes._analyzer = None

    from main import app

    with TestClient(app) as test_client:
        yield test_client

    engine.routes._analyzer = None
    get_database_settings.cache_clear()
    get_engine_settings.cache_clear()
