import hashlib
import hmac
import time
from supabase import Client
from app.config.permissions_config import ADMIN_ROLE
from app.config.settings import settings
from app.core.errors import AuthenticationError, AuthorizationError, ConflictError, StorageError
from app.modules.auth.schemas import AdminSignupRequest, AdminResponse, LoginRequest, TokenResponse
from typing import Dict, Any, Optional
import logging

logger = logging.getLogger(__name__)

# In-memory cache for get_current_user to reduce Supabase auth calls (e.g. many parallel requests with same token)
_AUTH_USER_CACHE: Dict[str, tuple] = {}
_AUTH_CACHE_TTL_SEC = 60
_AUTH_CACHE_MAX_SIZE = 500


def _principal_from_user(user) -> Dict[str, Any]:
    user_metadata = user.user_metadata or {}
    app_metadata = user.app_metadata or {}
    return {
        "id": user.id,
        "email": user.email,
        "name": user_metadata.get("name"),
        "role": app_metadata.get("role"),
        "user_metadata": user_metadata,
        "app_metadata": app_metadata,
    }


class AuthService:
    def __init__(self, supabase: Client, admin_supabase: Optional[Client] = None):
        self.supabase = supabase
        self.admin_supabase = admin_supabase or supabase

    def signup_admin(self, signup_data: AdminSignupRequest, requester: Optional[Dict[str, Any]] = None) -> TokenResponse:
        """Create an admin account. Requires an existing admin's token or the admin secret key."""
        authorized = bool(requester and requester.get("role") == ADMIN_ROLE)
        if not authorized:
            if not signup_data.admin_key:
                raise AuthorizationError("Admin signup requires either a valid admin token or admin secret key")
            if not hmac.compare_digest(signup_data.admin_key.encode(), settings.admin_secret_key.encode()):
                raise AuthorizationError("Invalid admin secret key")

        try:
            self.admin_supabase.auth.admin.create_user({
                "email": signup_data.email,
                "password": signup_data.password,
                "email_confirm": True,
                "user_metadata": {"name": signup_data.name},
                "app_metadata": {"role": ADMIN_ROLE}
            })
        except Exception as e:
            error_message = str(e).lower()
            if "already" in error_message and ("registered" in error_message or "exists" in error_message):
                raise ConflictError("User already exists with this email")
            logger.error("Admin signup failed for %s: %s", signup_data.email, e)
            raise StorageError(f"Registration failed: {e}")

        logger.info("Admin account created: %s", signup_data.email)
        return self.login(LoginRequest(email=signup_data.email, password=signup_data.password))

    def login(self, login_data: LoginRequest) -> TokenResponse:
        """Authenticate with Supabase Auth; only admin accounts may log in"""
        try:
            auth_response = self.supabase.auth.sign_in_with_password({
                "email": login_data.email,
                "password": login_data.password
            })
        except Exception as e:
            logger.info("Login failed for %s: %s", login_data.email, e)
            raise AuthenticationError("Invalid credentials")

        if not auth_response.user or not auth_response.session:
            raise AuthenticationError("Invalid credentials")

        principal = _principal_from_user(auth_response.user)
        if principal["role"] != ADMIN_ROLE:
            raise AuthorizationError("Access denied. Admin role required.")

        return TokenResponse(
            access_token=auth_response.session.access_token,
            token_type="bearer",
            user=AdminResponse(
                id=principal["id"],
                name=principal["name"],
                email=principal["email"] or login_data.email,
                role=principal["role"]
            )
        )

    def get_current_user(self, token: str) -> Dict[str, Any]:
        """Get the principal for a Supabase Auth token. Uses short TTL cache to reduce auth API calls."""
        cache_key = hashlib.sha256(token.encode()).hexdigest()
        now = time.monotonic()
        if cache_key in _AUTH_USER_CACHE:
            principal, expiry = _AUTH_USER_CACHE[cache_key]
            if now < expiry:
                return principal
            del _AUTH_USER_CACHE[cache_key]
        try:
            user_response = self.supabase.auth.get_user(jwt=token)
        except Exception as e:
            logger.debug("Token rejected by Supabase Auth: %s", e)
            raise AuthenticationError("Not authorized, token failed")
        if not user_response or not user_response.user:
            raise AuthenticationError("Not authorized, token failed")
        principal = _principal_from_user(user_response.user)
        if len(_AUTH_USER_CACHE) < _AUTH_CACHE_MAX_SIZE:
            _AUTH_USER_CACHE[cache_key] = (principal, now + _AUTH_CACHE_TTL_SEC)
        return principal


def clear_auth_cache() -> None:
    _AUTH_USER_CACHE.clear()
