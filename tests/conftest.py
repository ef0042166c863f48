from __future__ import annotations

from pathlib import Path
import sys

import pytest
from sqlalchemy.pool import StaticPool

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from storefront import create_app
from storefront.config import Config
from storefront.extensions import db
from storefront.shop.catalog import parse_catalog


class TestingConfig(Config):
    """Configuration tuned for isolated unit tests."""

    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_ENGINE_OPTIONS = {
        "connect_args": {"check_same_thread": False},
        "poolclass": StaticPool,
    }
    CATALOG_PATH = None


SAMPLE_CATALOG = {
    "fruits": [
        {"name": "Apple", "price": "1.50", "image": "a.png"},
        {"name": "Banana", "price": "0.50", "image": "b.png"},
    ],
    "drinks": [
        {"name": "Water", "price": "1.00", "image": "w.png"},
    ],
}


@pytest.fixture()
def sample_catalog():
    """Return the small two-category catalog used across pipeline tests."""

    return parse_catalog(SAMPLE_CATALOG)


@pytest.fixture()
def app():
    """Create a Flask app instance backed by an in-memory database."""

    application = create_app(TestingConfig)
    application.extensions["catalog"] = parse_catalog(SAMPLE_CATALOG)
    yield application
    with application.app_context():
        db.drop_all()
        db.session.remove()


@pytest.fixture()
def client(app):
    """Provide a Flask test client for request assertions."""

    return app.test_client()
