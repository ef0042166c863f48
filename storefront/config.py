"""Configuration settings for Storefront."""
from __future__ import annotations

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent


class Config:
    """Base configuration class."""

    SECRET_KEY = os.environ.get("STOREFRONT_SECRET_KEY", "storefront-dev-key")
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "STOREFRONT_DATABASE_URI", f"sqlite:///{BASE_DIR / 'storefront.db'}"
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    ENVIRONMENT = os.environ.get("STOREFRONT_ENV", "development")
    LOG_RETENTION = int(os.environ.get("STOREFRONT_LOG_RETENTION", 200))
    # JSON document holding the catalog; the built-in catalog is used when unset.
    CATALOG_PATH = os.environ.get("STOREFRONT_CATALOG_PATH") or None
