import pytest
from fastapi.testclient import TestClient

from payofflab.config import Settings
from payofflab.main import create_app


@pytest.fixture()
def client():
    app = create_app(Settings())
    return TestClient(app)
