# routers/auth.py - Login and identity endpoints
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from auth import AuthService, UserLogin, TokenResponse, get_current_user, CurrentUser
from database import get_db_session

router = APIRouter(prefix="/api/v1/auth", tags=["Authentication"])
logger = logging.getLogger("taskdesk.auth")


@router.post("/login", response_model=TokenResponse)
async def login(
    credentials: UserLogin,
    db: AsyncSession = Depends(get_db_session),
):
    """Exchange email + password for a bearer token"""
    user = await AuthService.authenticate_user(credentials.email, credentials.password, db)
    if not user:
        logger.warning(f"Failed login for {credentials.email}")
        raise HTTPException(status_code=401, detail="Invalid credentials")
    return AuthService.token_for(user)


@router.get("/me", response_model=CurrentUser)
async def me(user: CurrentUser = Depends(get_current_user)):
    return user
