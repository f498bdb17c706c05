"""Authentication API routes.

Provides endpoints for:
- User registration
- Login/logout
- Token refresh
- The signed-in user's own profile
"""

from fastapi import APIRouter, Request, Response, status

from zatch.config import settings
from zatch.core.auth.dependencies import CurrentUser
from zatch.core.auth.service import AuthSvc
from zatch.core.constants import MAX_USER_AGENT_LENGTH
from zatch.core.logging import get_client_ip
from zatch.modules.users.schemas import (
    LoginRequest,
    RefreshTokenRequest,
    RegisterRequest,
    RegisterResponse,
    TokenResponse,
    UserPasswordUpdate,
    UserResponse,
    UserUpdate,
)
from zatch.modules.users.services import UserSvc


router = APIRouter(prefix="/auth", tags=["auth"])


def _get_client_info(request: Request) -> tuple[str | None, str | None]:
    user_agent = request.headers.get("User-Agent")
    if user_agent:
        user_agent = user_agent[:MAX_USER_AGENT_LENGTH]
    return user_agent, get_client_ip(request)


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
    description=(
        "Creates a user account. With `tenant_name`, an agency is created too "
        "and the user becomes its owner."
    ),
)
async def register(data: RegisterRequest, service: AuthSvc) -> RegisterResponse:
    user, tenant, tokens = await service.register(
        email=data.email,
        password=data.password,
        full_name=data.full_name,
        tenant_name=data.tenant_name,
    )

    return RegisterResponse(
        user=UserResponse.model_validate(user),
        tenant_id=tenant.id if tenant else None,
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
        expires_in=tokens.expires_in,
    )


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Login with email and password",
    description="Authenticate with email and password to receive access and refresh tokens.",
)
async def login(
    data: LoginRequest,
    service: AuthSvc,
    request: Request,
) -> TokenResponse:
    """Login with email and password."""
    user_agent, ip_address = _get_client_info(request)

    _user, tokens = await service.login(
        email=data.email,
        password=data.password,
        user_agent=user_agent,
        ip_address=ip_address,
    )

    return TokenResponse(
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
        expires_in=tokens.expires_in,
    )


@router.post(
    "/refresh",
    response_model=TokenResponse,
    summary="Refresh access token",
    description="Use a refresh token to obtain a new access token. The old refresh token is revoked.",
)
async def refresh_token(
    data: RefreshTokenRequest,
    service: AuthSvc,
    request: Request,
) -> TokenResponse:
    user_agent, ip_address = _get_client_info(request)

    tokens = await service.refresh_tokens(
        refresh_token=data.refresh_token,
        user_agent=user_agent,
        ip_address=ip_address,
    )

    return TokenResponse(
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
        expires_in=tokens.expires_in,
    )


@router.post(
    "/logout",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Logout",
    description="Revoke the refresh token and forget the active tenant.",
)
async def logout(
    data: RefreshTokenRequest,
    service: AuthSvc,
    response: Response,
) -> None:
    await service.logout(data.refresh_token)
    response.delete_cookie(settings.tenant_cookie_name)


@router.post(
    "/logout-all",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Logout from all devices",
    description="Revoke all refresh tokens to logout from all devices.",
)
async def logout_all(
    current_user: CurrentUser,
    service: AuthSvc,
    response: Response,
) -> None:
    await service.logout_all(current_user.id)
    response.delete_cookie(settings.tenant_cookie_name)


@router.get(
    "/me",
    response_model=UserResponse,
    summary="Get current user",
)
async def get_me(current_user: CurrentUser) -> UserResponse:
    return UserResponse.model_validate(current_user)


@router.patch(
    "/me",
    response_model=UserResponse,
    summary="Update current user",
)
async def update_me(
    data: UserUpdate,
    current_user: CurrentUser,
    service: UserSvc,
) -> UserResponse:
    user = await service.update_profile(current_user, data)
    return UserResponse.model_validate(user)


@router.post(
    "/me/password",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Change password",
    description="Changes the password and revokes every refresh token of the user.",
)
async def change_password(
    data: UserPasswordUpdate,
    current_user: CurrentUser,
    service: UserSvc,
) -> None:
    await service.change_password(current_user, data)
