"""
Core dependencies for route protection.

Reads are public. Every mutating route depends on require_admin(<operation>),
which resolves the bearer token to a principal and checks it against the
operation matrix. Services assume this gate has already run.
"""

from fastapi import Depends, Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from app.config.permissions_config import ADMIN_ROLE, is_write_operation
from app.core.errors import AuthenticationError, AuthorizationError
from app.database.supabase_client import get_supabase
from app.modules.auth.service import AuthService
from supabase import Client
from typing import Optional
import logging

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def get_auth_service(supabase: Client = Depends(get_supabase)) -> AuthService:
    return AuthService(supabase)


def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> dict:
    """Resolve the bearer token to a principal dict (id, email, name, role)"""
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Not authorized, no token")
    return auth_service.get_current_user(credentials.credentials)


def get_optional_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> Optional[dict]:
    """Like get_current_principal, but an absent or invalid token yields None"""
    if credentials is None or not credentials.credentials:
        return None
    try:
        return auth_service.get_current_user(credentials.credentials)
    except AuthenticationError:
        return None


def is_authorized(principal: Optional[dict], operation: str) -> bool:
    """Reads need nothing; writes need the admin role"""
    if not is_write_operation(operation):
        return True
    if not principal:
        return False
    return principal.get("role") == ADMIN_ROLE


def require_admin(operation: str):
    """Factory function to create the admin gate for a mutating operation"""
    def check_admin(principal: dict = Depends(get_current_principal)) -> dict:
        if not is_authorized(principal, operation):
            logger.warning("Denied %s for user %s (role=%s)", operation, principal.get("id"), principal.get("role"))
            raise AuthorizationError(f"User role '{principal.get('role')}' is not authorized to access this route")
        return principal
    return check_admin
