"""Authentication endpoints."""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel, EmailStr

from app.core.config import settings
from app.core.dependencies import (
    get_browsing_session,
    get_current_account,
    get_identity_service,
)
from app.services.identity.cookie import ACCOUNT_COOKIE, dump_account_record
from app.services.identity.models import AccountSnapshot
from app.services.identity.service import IdentityService
from app.services.identity.session import BrowsingSession

router = APIRouter()
logger = logging.getLogger(__name__)


class LoginRequest(BaseModel):
    """Login request model."""
    email: EmailStr
    password: str


class RegisterRequest(BaseModel):
    """Registration request model."""
    email: EmailStr
    password: str
    name: str
    phone: Optional[str] = None
    address: Optional[str] = None


class SessionInfo(BaseModel):
    """Session information response."""
    authenticated: bool
    account: Optional[AccountSnapshot] = None
    is_admin: bool = False
    is_staff: bool = False
    cart_item_count: int = 0


def remember_account(response: Response, account: AccountSnapshot) -> None:
    """Cache the account in the signed account cookie."""
    response.set_cookie(
        key=ACCOUNT_COOKIE,
        value=dump_account_record(account.model_dump(mode="json"), settings.session_secret_key),
        httponly=True,
        max_age=settings.session_cookie_max_age,
        samesite="lax",
    )


def session_info(session: BrowsingSession) -> SessionInfo:
    account = session.account
    return SessionInfo(
        authenticated=account is not None,
        account=account,
        is_admin=bool(account and account.is_admin),
        is_staff=bool(account and account.is_staff),
        cart_item_count=session.cart.item_count(),
    )


@router.post("/api/auth/register", status_code=201)
async def register(
    register_req: RegisterRequest,
    response: Response,
    session: BrowsingSession = Depends(get_browsing_session),
    identity: IdentityService = Depends(get_identity_service),
) -> SessionInfo:
    """Register a customer account and sign it in."""
    account = await identity.register(
        email=register_req.email,
        password=register_req.password,
        name=register_req.name,
        phone=register_req.phone,
        address=register_req.address,
    )
    session.sign_in(account)
    remember_account(response, account)
    return session_info(session)


@router.post("/api/auth/login")
async def login(
    login_req: LoginRequest,
    response: Response,
    session: BrowsingSession = Depends(get_browsing_session),
    identity: IdentityService = Depends(get_identity_service),
) -> SessionInfo:
    """Login endpoint."""
    account = await identity.login(login_req.email, login_req.password)
    session.sign_in(account)
    remember_account(response, account)
    return session_info(session)


@router.post("/api/auth/logout")
async def logout(
    response: Response,
    session: BrowsingSession = Depends(get_browsing_session),
):
    """Logout endpoint."""
    IdentityService.logout(session)
    response.delete_cookie(ACCOUNT_COOKIE)
    return {"success": True, "message": "Logged out"}


@router.get("/api/auth/session")
async def get_session_info(
    session: BrowsingSession = Depends(get_browsing_session),
    account: Optional[AccountSnapshot] = Depends(get_current_account),
) -> SessionInfo:
    """Get current session information."""
    return session_info(session)
