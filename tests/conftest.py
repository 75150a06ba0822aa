from pathlib import Path

import pandas as pd
import pytest
from fastapi.testclient import TestClient

from chartsmith.api.app import app
import chartsmith.viz  # noqa: F401 ensures renderers registered

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture(scope="session")
def client() -> TestClient:
    return TestClient(app)


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES


@pytest.fixture
def users_frame() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "date": pd.to_datetime(["2023-01-01", "2023-01-02"]),
            "users": [100, 150],
            "channel": ["organic", "direct"],
        }
    )
