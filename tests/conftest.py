import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from evoting.config import Settings
from evoting.database import MongoConnector
from evoting.main import create_app
from evoting.security import TokenService
from evoting.storage import CandidateLedger, UserStore

from .helpers import auth, signup


@pytest.fixture
def settings():
    return Settings(mongo_db="voting_test", secret_key="test-secret", access_token_expire_minutes=60)


@pytest.fixture
def mongo_client():
    return AsyncMongoMockClient()


@pytest.fixture
def client(settings, mongo_client):
    app = create_app(settings, mongo_client=mongo_client)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def connector(settings, mongo_client):
    return MongoConnector(settings, client=mongo_client)


@pytest.fixture
def users(connector):
    return UserStore(connector.users_collection)


@pytest.fixture
def ledger(connector):
    return CandidateLedger(connector.candidates_collection)


@pytest.fixture
def tokens(settings):
    return TokenService(settings)


@pytest.fixture
def admin_token(client):
    return signup(client, national_id="999999999999", role="admin", name="Admin")["token"]


@pytest.fixture
def voter_token(client):
    return signup(client)["token"]


@pytest.fixture
def candidate_id(client, admin_token):
    r = client.post(
        "/api/candidates",
        json={"name": "Alice Johnson", "party": "Democratic Party", "age": 45},
        headers=auth(admin_token),
    )
    assert r.status_code == 200, r.text
    return r.json()["candidate"]["id"]
