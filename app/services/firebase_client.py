"""
Firebase initialization and helpers
"""

from __future__ import annotations

import json
from typing import Any, Tuple
import base64
import os

import firebase_admin
from firebase_admin import credentials, firestore_async

from app.core.config import Settings
from app.core.errors import ConfigurationError


def load_credentials_info(settings: Settings) -> dict[str, Any]:
    """Read service-account info from one of: FIREBASE_CREDENTIALS_JSON, FIREBASE_CREDENTIALS_B64, FIREBASE_CREDENTIALS_FILE."""
    info: dict[str, Any] | None = None
    if settings.FIREBASE_CREDENTIALS_JSON:
        info = json.loads(settings.FIREBASE_CREDENTIALS_JSON)
    elif settings.FIREBASE_CREDENTIALS_B64:
        decoded = base64.b64decode(settings.FIREBASE_CREDENTIALS_B64).decode("utf-8")
        info = json.loads(decoded)
    elif settings.FIREBASE_CREDENTIALS_FILE and os.path.exists(settings.FIREBASE_CREDENTIALS_FILE):
        with open(settings.FIREBASE_CREDENTIALS_FILE, "r", encoding="utf-8") as f:
            info = json.load(f)

    if not info:
        raise ConfigurationError("Firebase credentials not provided. Set FIREBASE_CREDENTIALS_FILE, FIREBASE_CREDENTIALS_JSON, or FIREBASE_CREDENTIALS_B64")
    return info


def open_firestore(settings: Settings) -> Tuple[Any, Any]:
    """Initialize the default firebase app if needed and return it with an async Firestore client."""
    if not firebase_admin._apps:
        cred = credentials.Certificate(load_credentials_info(settings))
        app = firebase_admin.initialize_app(cred)
    else:
        app = firebase_admin.get_app()

    return app, firestore_async.client(app)
