"""
API routes for wallet identities.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.security import AuthenticatedUser, get_current_user
from ...db.session import get_db
from ...schemas.base import ErrorResponse
from ...schemas.user import UserRead
from ...services.auth_service import AuthService
from ..dependencies import get_auth_service

router = APIRouter(prefix="/users", tags=["Users"])


@router.get(
    "/me",
    response_model=UserRead,
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def read_users_me(
    current_user: Annotated[AuthenticatedUser, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> UserRead:
    """
    Returns the identity the session token was issued to.
    """
    user = await auth_service.identity_resolver.get_by_id(db, current_user.user_id)
    return UserRead.model_validate(user)
