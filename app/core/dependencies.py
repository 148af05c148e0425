"""
Core dependencies for route protection
"""

from fastapi import Depends, Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from app.modules.auth.schemas import Identity
from app.modules.auth.service import AuthService
from app.modules.notifications.service import NotificationService, LoggingSender

security = HTTPBearer()


def get_auth_service() -> AuthService:
    return AuthService()


def get_current_identity(
    credentials: HTTPAuthorizationCredentials = Security(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> Identity:
    """Verify the Firebase ID token from the Authorization header"""
    return auth_service.verify_token(credentials.credentials)


def get_notification_service() -> NotificationService:
    return NotificationService(LoggingSender())
