import pytest
from fastapi.testclient import TestClient
from app.main import app
from app.tests.fixtures.contact import *
from app.tests.fixtures.functions import *


@pytest.fixture(scope="function")
def client():
    """Fixture providing a TestClient with the app lifespan running."""
    with TestClient(app) as c:
        yield c
