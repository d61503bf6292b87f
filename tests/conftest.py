"""Shared fixtures: settings, in-memory MongoDB, application and tokens."""

from typing import Dict, Iterator

import pytest
from bson import ObjectId
from fastapi import FastAPI
from fastapi.testclient import TestClient

from api.src.config import Settings
from api.src.database import MongoConnection
from api.src.main import create_app
from api.src.services.token_service import TokenService
from tests.doubles import FakeCollection, FakeMongoClient

TEST_SECRET = "test-secret-key-do-not-use-in-production"

SERVICES = [
    {
        "_id": ObjectId("6325b1a7f8f2c4a1b0e4d001"),
        "title": "Engine Oil Change",
        "description": "Full synthetic oil and filter replacement",
        "price": 40,
    },
    {
        "_id": ObjectId("6325b1a7f8f2c4a1b0e4d002"),
        "title": "Brake Repair",
        "description": "Pads, rotors and brake fluid check",
        "price": 120,
    },
    {
        "_id": ObjectId("6325b1a7f8f2c4a1b0e4d003"),
        "title": "Transmission Service",
        "description": "Transmission oil flush",
        "price": 90,
    },
    {
        "_id": ObjectId("6325b1a7f8f2c4a1b0e4d004"),
        "title": "Wheel Alignment",
        "description": "Four wheel laser alignment",
        "price": 60,
    },
]


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the developer's environment and .env file."""
    return Settings(
        _env_file=None,
        access_token_secret=TEST_SECRET,
        mongodb_url="mongodb://localhost:27017",
        database_name="deltaCarTest",
        environment="development",
        log_format="text",
        log_level="WARNING",
    )


@pytest.fixture
def token_service(settings: Settings) -> TokenService:
    return TokenService(settings)


@pytest.fixture
def mongo_client() -> FakeMongoClient:
    client = FakeMongoClient()
    client["deltaCarTest"].collections["services"] = FakeCollection("services", SERVICES)
    return client


@pytest.fixture
def services_collection(mongo_client: FakeMongoClient) -> FakeCollection:
    return mongo_client["deltaCarTest"]["services"]


@pytest.fixture
def orders_collection(mongo_client: FakeMongoClient) -> FakeCollection:
    return mongo_client["deltaCarTest"]["orders"]


@pytest.fixture
def app(settings: Settings, mongo_client: FakeMongoClient) -> FastAPI:
    return create_app(settings, MongoConnection(settings, client=mongo_client))


@pytest.fixture
def client(app: FastAPI) -> Iterator[TestClient]:
    """Test client with the lifespan running; server errors become 500 responses."""
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


@pytest.fixture
def auth_headers(token_service: TokenService):
    """Build an Authorization header for a token carrying ``email``."""

    def _headers(email: str = "a@x.com") -> Dict[str, str]:
        return {"Authorization": f"Bearer {token_service.issue({'email': email})}"}

    return _headers
