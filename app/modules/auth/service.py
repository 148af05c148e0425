import hashlib
import logging
import time
import firebase_admin
from firebase_admin import auth as firebase_auth, credentials
from app.modules.auth.schemas import Identity
from app.config.settings import settings
from fastapi import HTTPException
from typing import Dict

logger = logging.getLogger(__name__)

# In-memory cache for verified tokens to avoid re-verifying on every request
_AUTH_USER_CACHE: Dict[str, tuple] = {}
_AUTH_CACHE_MAX_SIZE = 500


def get_firebase_app() -> firebase_admin.App:
    """Return the default Firebase app, initializing it on first use."""
    try:
        return firebase_admin.get_app()
    except ValueError:
        options = {}
        if settings.firebase_project_id:
            options["projectId"] = settings.firebase_project_id
        if settings.firebase_credentials_path:
            cred = credentials.Certificate(settings.firebase_credentials_path)
        else:
            cred = credentials.ApplicationDefault()
        app = firebase_admin.initialize_app(cred, options or None)
        logger.info("Firebase Admin SDK initialized")
        return app


def clear_auth_cache():
    _AUTH_USER_CACHE.clear()


class AuthService:
    def __init__(self, app: firebase_admin.App = None):
        self.app = app

    def verify_token(self, token: str) -> Identity:
        """Verify a Firebase ID token. Uses short TTL cache keyed by token hash."""
        cache_key = hashlib.sha256(token.encode()).hexdigest()
        now = time.monotonic()
        if cache_key in _AUTH_USER_CACHE:
            identity, expiry = _AUTH_USER_CACHE[cache_key]
            if now < expiry:
                return identity
            del _AUTH_USER_CACHE[cache_key]
        try:
            decoded = firebase_auth.verify_id_token(
                token,
                app=self.app or get_firebase_app(),
                clock_skew_seconds=settings.firebase_clock_skew_seconds,
            )
        except (firebase_auth.InvalidIdTokenError, firebase_auth.ExpiredIdTokenError,
                firebase_auth.RevokedIdTokenError, ValueError) as e:
            logger.info(f"Rejected ID token: {e}")
            raise HTTPException(status_code=401, detail="Invalid or expired token")
        except Exception as e:
            logger.error(f"Token verification failed: {e}")
            raise HTTPException(status_code=401, detail="Authentication failed")

        identity = Identity(
            uid=decoded["uid"],
            email=decoded.get("email"),
            display_name=decoded.get("name"),
            photo_url=decoded.get("picture"),
        )
        if len(_AUTH_USER_CACHE) < _AUTH_CACHE_MAX_SIZE:
            _AUTH_USER_CACHE[cache_key] = (identity, now + settings.auth_cache_ttl_seconds)
        return identity
