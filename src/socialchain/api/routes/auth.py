from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.security import AuthenticatedUser, get_current_user
from ...db.session import get_db
from ...schemas.auth import (
    ChallengeRequest,
    ChallengeResponse,
    LoginResponse,
    VerifyResponse,
    WalletLoginRequest,
)
from ...schemas.base import ErrorResponse
from ...services.auth_service import AuthService
from ..dependencies import get_auth_service

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post(
    "/challenge",
    response_model=ChallengeResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
async def request_challenge(
    payload: ChallengeRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> ChallengeResponse:
    """
    Requests a single-use challenge message for a wallet to sign.
    """
    challenge = await auth_service.issue_challenge(db, payload.wallet_address, payload.chain_type)
    return ChallengeResponse(
        challenge_id=challenge.id,
        nonce=challenge.nonce,
        message=auth_service.challenge_store.build_sign_message(challenge.nonce),
        expires_at=challenge.expires_at,
    )


@router.post(
    "/wallet-login",
    response_model=LoginResponse,
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}},
)
async def wallet_login(
    payload: WalletLoginRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> LoginResponse:
    """
    Exchanges a signed challenge for a session token.
    """
    result = await auth_service.login(
        db,
        wallet_address=payload.wallet_address,
        chain_type=payload.chain_type,
        challenge_id=payload.challenge_id,
        signature=payload.signature,
        message=payload.message,
    )
    credential = auth_service.session_issuer.validate(result.token)
    return LoginResponse(
        token=result.token,
        user_id=result.user.id,
        wallet_address=result.user.wallet_address,
        wallet_chain=result.user.chain,
        is_new_user=result.is_new_user,
        expires_at=credential.expires_at,
    )


@router.get("/verify", response_model=VerifyResponse, responses={401: {"model": ErrorResponse}})
async def verify_token(
    current_user: Annotated[AuthenticatedUser, Depends(get_current_user)],
) -> VerifyResponse:
    """
    Confirms the bearer token is valid.
    """
    return VerifyResponse()
