"""
Authentication API routes
"""

from fastapi import APIRouter, Depends, Response, status

from storefront.core.config import settings
from storefront.core.exceptions import InvalidCredentialsException
from storefront.schemas.auth import AuthContext, AuthTrigger, SessionToken, SessionUpdate, SessionView
from .dependencies import get_auth_context, get_auth_service, get_current_token
from .schemas import AuthResponse, SessionUpdateRequest, SignInRequest, SignUpRequest
from .services import AuthService

router = APIRouter()

def set_session_cookie(response: Response, auth: AuthResponse) -> None:
    response.set_cookie(
        settings.SESSION_COOKIE_NAME,
        auth.access_token,
        max_age=auth.expires_in,
        httponly=True,
        samesite="lax",
        secure=settings.COOKIE_SECURE,
    )

@router.post(
    "/sign-in",
    response_model=AuthResponse,
    status_code=status.HTTP_200_OK,
    summary="Sign in with email and password",
    description="Verify credentials, hand over the anonymous cart and issue a session"
)
async def sign_in(
    request: SignInRequest,
    response: Response,
    context: AuthContext = Depends(get_auth_context),
    service: AuthService = Depends(get_auth_service)
):
    """Credential sign-in"""
    identity = await service.authorize(request.email, request.password)
    if identity is None:
        raise InvalidCredentialsException()

    auth = await service.sign_in(identity, AuthTrigger.SIGN_IN, context)
    set_session_cookie(response, auth)
    return auth

@router.post(
    "/sign-up",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register new user",
    description="Create an account and sign it in"
)
async def sign_up(
    request: SignUpRequest,
    response: Response,
    context: AuthContext = Depends(get_auth_context),
    service: AuthService = Depends(get_auth_service)
):
    """Register and sign in"""
    identity = await service.register(request)
    auth = await service.sign_in(identity, AuthTrigger.SIGN_UP, context)
    set_session_cookie(response, auth)
    return auth

@router.get(
    "/session",
    response_model=SessionView,
    summary="Get current session"
)
async def get_session(
    token: SessionToken = Depends(get_current_token),
    service: AuthService = Depends(get_auth_service)
):
    return await service.current_session(token)

@router.patch(
    "/session",
    response_model=AuthResponse,
    summary="Update current session",
    description="Override the display name carried by the session"
)
async def update_session(
    request: SessionUpdateRequest,
    response: Response,
    token: SessionToken = Depends(get_current_token),
    service: AuthService = Depends(get_auth_service)
):
    auth = await service.update_session(token, SessionUpdate(name=request.name))
    set_session_cookie(response, auth)
    return auth

@router.post(
    "/sign-out",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Sign out"
)
async def sign_out(response: Response):
    """Drop the session cookie; the anonymous cart cookie stays"""
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return None
