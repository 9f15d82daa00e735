from fastapi import APIRouter, Depends, Request
from app.config import settings
from app.core.dependencies import get_optional_principal, require_admin
from app.core.rate_limit import limiter
from app.core.responses import ApiResponse, ok
from app.database.supabase_client import get_supabase, get_service_supabase
from app.modules.auth.schemas import AdminSignupRequest, AdminResponse, LoginRequest, TokenResponse
from app.modules.auth.service import AuthService
from supabase import Client
from typing import Dict, Optional

router = APIRouter(prefix="/admin", tags=["admin"])


def get_admin_auth_service(
    supabase: Client = Depends(get_supabase),
    admin_supabase: Client = Depends(get_service_supabase)
) -> AuthService:
    return AuthService(supabase, admin_supabase)


@router.post("/signup", response_model=ApiResponse[TokenResponse], status_code=201)
async def signup(
    signup_data: AdminSignupRequest,
    requester: Optional[Dict] = Depends(get_optional_principal),
    service: AuthService = Depends(get_admin_auth_service)
):
    """Register a new admin (requires an admin token or the admin secret key)"""
    return ok(service.signup_admin(signup_data, requester), "Admin registration successful")


@router.post("/login", response_model=ApiResponse[TokenResponse])
@limiter.limit(settings.login_rate_limit)
async def login(
    request: Request,
    login_data: LoginRequest,
    service: AuthService = Depends(get_admin_auth_service)
):
    """Login and get access token (admin accounts only)"""
    return ok(service.login(login_data), "Admin login successful")


@router.get("/me", response_model=ApiResponse[AdminResponse])
async def get_me(
    principal: Dict = Depends(require_admin("admin:read"))
):
    """Get the current admin"""
    return ok(AdminResponse(
        id=principal["id"],
        name=principal.get("name"),
        email=principal.get("email") or "",
        role=principal.get("role")
    ))
