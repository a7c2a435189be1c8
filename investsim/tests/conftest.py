import pytest
from flask.testing import FlaskClient

from investsim.app import create_app
from investsim.core.config import Settings


@pytest.fixture()
def app():
    return create_app(Settings(LOG_LEVEL="WARNING"))


@pytest.fixture()
def client(app) -> FlaskClient:
    with app.test_client() as test_client:
        yield test_client
