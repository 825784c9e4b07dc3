"""
Auth endpoints — register, login, logout and the current session.

The session token travels in an HTTP-only cookie; API clients may send
the same token as ``Authorization: Bearer``.
"""

from fastapi import APIRouter, Depends, Request, Response, status

from estatehub.api.deps import get_credential_service, require_identity
from estatehub.core.config import Settings, get_settings, settings
from estatehub.core.guard import Identity
from estatehub.core.rate_limit import limiter
from estatehub.schemas.user import (AuthResponse, IdentityRead, LoginRequest,
                                    MessageResponse, RegisterRequest)
from estatehub.services.credentials import CredentialService

router = APIRouter(prefix="/auth", tags=["auth"])


def _set_session_cookie(response: Response, token: str, config: Settings) -> None:
    response.set_cookie(
        key=config.AUTH_COOKIE_NAME,
        value=token,
        httponly=True,
        secure=config.cookie_secure,
        samesite="strict",
        max_age=config.ACCESS_TOKEN_EXPIRE_SECONDS,
        path="/",
    )


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.RATE_LIMIT_AUTH)
async def register(
    request: Request,
    response: Response,
    body: RegisterRequest,
    service: CredentialService = Depends(get_credential_service),
    config: Settings = Depends(get_settings),
) -> AuthResponse:
    """Create an account and start a session for it."""
    user = await service.register(body.email, body.password, body.name)
    _set_session_cookie(response, service.issue_token(user), config)
    return AuthResponse(id=user.id, email=user.email, message="Registration successful")


@router.post("/login", response_model=AuthResponse)
@limiter.limit(settings.RATE_LIMIT_AUTH)
async def login(
    request: Request,
    response: Response,
    body: LoginRequest,
    service: CredentialService = Depends(get_credential_service),
    config: Settings = Depends(get_settings),
) -> AuthResponse:
    """Authenticate with email/password. Returns 200 OK with an HttpOnly cookie."""
    user = await service.authenticate(body.email, body.password)
    _set_session_cookie(response, service.issue_token(user), config)
    return AuthResponse(id=user.id, email=user.email, message="Login successful")


@router.post("/logout", response_model=MessageResponse)
async def logout(
    response: Response,
    config: Settings = Depends(get_settings),
) -> MessageResponse:
    """Clear the session cookie. Tokens already issued stay valid until expiry."""
    response.delete_cookie(
        config.AUTH_COOKIE_NAME,
        path="/",
        secure=config.cookie_secure,
        httponly=True,
        samesite="strict",
    )
    return MessageResponse(message="Logout successful")


@router.get("/me", response_model=IdentityRead)
async def read_current_identity(
    identity: Identity = Depends(require_identity),
) -> IdentityRead:
    """Return the claims of the current session."""
    return IdentityRead.model_validate(identity)
