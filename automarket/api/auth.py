from fastapi import APIRouter, Body, Header, status
from automarket.core.logging import setup_logging
from automarket.schemas.common import MessageResponse
from automarket.schemas.user import AuthSession, SignInRequest, SignUpRequest
from automarket.services.auth_provider import auth_provider
from automarket.utils.token_utils import extract_bearer_token

router = APIRouter(prefix="/auth", tags=["auth"])
logger = setup_logging()


def _session(data: dict) -> AuthSession:
    user = data.get("user") or {}
    return AuthSession(
        access_token=data.get("access_token"),
        refresh_token=data.get("refresh_token"),
        expires_in=data.get("expires_in"),
        user_id=str(user.get("id") or data.get("id") or "") or None,
    )


@router.post("/sign-up", response_model=AuthSession, status_code=status.HTTP_201_CREATED)
async def sign_up(request: SignUpRequest = Body(...)):
    """Register a new account with the identity provider"""
    data = await auth_provider.sign_up(request.email, request.password, request.name)
    logger.info("User signed up", email=request.email)
    return _session(data)


@router.post("/sign-in", response_model=AuthSession, status_code=status.HTTP_200_OK)
async def sign_in(request: SignInRequest = Body(...)):
    data = await auth_provider.sign_in(request.email, request.password)
    logger.info("User signed in", email=request.email)
    return _session(data)


@router.post("/sign-out", response_model=MessageResponse, status_code=status.HTTP_200_OK)
async def sign_out(authorization: str | None = Header(None, alias="Authorization")):
    token = extract_bearer_token(authorization)
    await auth_provider.sign_out(token)
    return MessageResponse(message="Signed out")
