"""
Authentication Routes

POST /auth/signup - Register a student account and sign in
POST /auth/signin - Sign in with email/password
POST /auth/admin - Start an admin session
POST /auth/signout - End the current session
GET /auth/me - Get the current session
"""

from fastapi import APIRouter, HTTPException, Depends

from app.core.auth import get_session_authenticator
from app.core.errors import DuplicateEmailError, InvalidCredentialsError
from app.services.session_service import SessionAuthenticator
from app.schemas.schemas import (
    SignUpRequest, SignInRequest, Identity, SessionResponse, MessageResponse
)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/signup", response_model=Identity, status_code=201)
async def sign_up(
    request: SignUpRequest,
    authenticator: SessionAuthenticator = Depends(get_session_authenticator)
):
    """
    Register a new student account. The new account is signed in straight away.
    """
    try:
        return await authenticator.sign_up(request.email, request.password)
    except DuplicateEmailError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/signin", response_model=Identity)
async def sign_in(
    request: SignInRequest,
    authenticator: SessionAuthenticator = Depends(get_session_authenticator)
):
    """Sign in. Email is case-insensitive."""
    try:
        return await authenticator.sign_in(request.email, request.password)
    except InvalidCredentialsError as e:
        raise HTTPException(status_code=401, detail=str(e))


@router.post("/admin", response_model=Identity)
async def sign_in_as_admin(authenticator: SessionAuthenticator = Depends(get_session_authenticator)):
    return await authenticator.sign_in_as_admin()


@router.post("/signout", response_model=MessageResponse)
async def sign_out(authenticator: SessionAuthenticator = Depends(get_session_authenticator)):
    await authenticator.sign_out()
    return MessageResponse(message="Signed out")


@router.get("/me", response_model=SessionResponse)
async def get_me(authenticator: SessionAuthenticator = Depends(get_session_authenticator)):
    """Get the current session, if any."""
    identity = await authenticator.current_identity()
    return SessionResponse(signed_in=identity is not None, user=identity)
