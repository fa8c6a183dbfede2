import logging
from fastapi import APIRouter, Depends, HTTPException, status, Request
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_async_session
from app.core.request_context import get_request_context
from app.api.dependencies import get_current_account
from app.models.auth.account import LoginAccount
from app.schemas.auth.login import AccountResponse, LoginRequest, LoginResponse, MeResponse, RegisterRequest
from app.services.auth.auth_service import AuthService
from app.services.auth.permission_service import PermissionService

router = APIRouter()
logger = logging.getLogger(__name__)

@router.post("/login", response_model=LoginResponse)
async def login(
    request: Request,
    login_data: LoginRequest,
    session: AsyncSession = Depends(get_async_session),
):
    """Authenticate with email and password and return an access token"""
    try:
        auth_service = AuthService(session)
        req_context = get_request_context(request)

        account = await auth_service.authenticate(login_data.email, login_data.password)
        if not account:
            logger.info(f"Rejected login from {req_context['ip_address']}")
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Incorrect email or password")

        return await auth_service.create_token(account)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Login error: {str(e)}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Login failed")

@router.post("/register", response_model=LoginResponse, status_code=status.HTTP_201_CREATED)
async def register(
    data: RegisterRequest,
    session: AsyncSession = Depends(get_async_session),
):
    """Create an email/password login and sign it in"""
    auth_service = AuthService(session)
    account = await auth_service.register(data)
    return await auth_service.create_token(account)

@router.post("/anonymous", response_model=LoginResponse, status_code=status.HTTP_201_CREATED)
async def sign_in_anonymously(session: AsyncSession = Depends(get_async_session)):
    """Anonymous session; gets the Employee defaults"""
    auth_service = AuthService(session)
    account = await auth_service.sign_in_anonymously()
    return await auth_service.create_token(account)

@router.post("/token")
async def login_for_access_token(
    form_data: OAuth2PasswordRequestForm = Depends(),
    session: AsyncSession = Depends(get_async_session),
):
    """OAuth2 compatible token endpoint."""
    auth_service = AuthService(session)
    account = await auth_service.authenticate(form_data.username, form_data.password)
    if not account:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    tokens = await auth_service.create_token(account)
    return {
        "access_token": tokens["access_token"],
        "token_type": tokens["token_type"],
        "expires_in": tokens["expires_in"],
    }

@router.get("/me", response_model=MeResponse)
async def get_current_account_info(
    session: AsyncSession = Depends(get_async_session),
    current_account: LoginAccount = Depends(get_current_account),
):
    """Current account with its role and menu access as stored now"""
    permissions = await PermissionService(session).get_effective_permissions(current_account.id)
    return MeResponse(
        account=AccountResponse.model_validate(current_account),
        role=permissions["role"],
        menu_access=permissions["menu_access"],
        is_default=permissions["is_default"],
    )
