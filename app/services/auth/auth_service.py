import logging
import uuid
from typing import Optional, Dict, Any
from datetime import datetime, timedelta, timezone
from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from app.core.config import settings
from app.core.logging import log_user_action
from app.core.security import create_access_token, get_password_hash, verify_password
from app.core.write_errors import write_error_channel
from app.models.auth.account import LoginAccount
from app.models.shared.enums import Role
from app.schemas.auth.login import RegisterRequest
from app.services.auth.permission_service import PermissionService, default_entry

logger = logging.getLogger(__name__)

class AuthService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.permission_service = PermissionService(session)

    async def get_account(self, account_id: str) -> Optional[LoginAccount]:
        result = await self.session.execute(
            select(LoginAccount).where(LoginAccount.id == account_id)
        )
        return result.scalar_one_or_none()

    async def get_account_by_email(self, email: str) -> Optional[LoginAccount]:
        result = await self.session.execute(
            select(LoginAccount).where(LoginAccount.email == email.lower())
        )
        return result.scalar_one_or_none()

    async def _save_account(self, account: LoginAccount) -> LoginAccount:
        try:
            self.session.add(account)
            await self.session.commit()
            await self.session.refresh(account)
            return account
        except Exception as e:
            await self.session.rollback()
            write_error_channel.report("accounts", "create", e, document_id=account.id)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error creating account"
            )

    async def register(self, data: RegisterRequest) -> LoginAccount:
        """Create an email/password login, optionally bound to an employee id"""
        if await self.get_account_by_email(data.email):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Email already registered"
            )
        account_id = (data.employee_id or "").strip() or uuid.uuid4().hex
        if await self.get_account(account_id):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"A login already exists for {account_id}"
            )

        account = LoginAccount(
            id=account_id,
            email=data.email.lower(),
            hashed_password=get_password_hash(data.password),
            display_name=data.display_name or data.email.split("@")[0],
            is_anonymous=False,
        )
        account = await self._save_account(account)
        logger.info(f"Account registered: {account.email} ({account.id})")
        return account

    async def authenticate(self, email: str, password: str) -> Optional[LoginAccount]:
        """Authenticate with email and password"""
        account = await self.get_account_by_email(email)
        if not account or not account.is_active:
            logger.warning(f"Failed login for {email}: unknown or inactive account")
            return None
        if not verify_password(password, account.hashed_password):
            logger.warning(f"Failed login for {email}: bad password")
            return None

        account.last_login = datetime.now(timezone.utc)
        await self.session.commit()
        await self.session.refresh(account)
        log_user_action(account.id, "login", "auth")
        return account

    async def sign_in_anonymously(self) -> LoginAccount:
        account = LoginAccount(
            id=uuid.uuid4().hex,
            display_name="Anonymous",
            is_anonymous=True,
            last_login=datetime.now(timezone.utc),
        )
        account = await self._save_account(account)
        log_user_action(account.id, "anonymous_login", "auth")
        return account

    async def create_token(self, account: LoginAccount) -> Dict[str, Any]:
        """Access token whose claims carry the account's effective role and menu access"""
        permissions = await self.permission_service.get_effective_permissions(account.id)
        expires = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        role = permissions["role"]
        access_token = create_access_token(
            data={
                "sub": account.id,
                "email": account.email,
                "is_anonymous": account.is_anonymous,
                "role": role.value,
                "menu_access": permissions["menu_access"],
            },
            expires_delta=expires,
        )
        return {
            "account": account,
            "access_token": access_token,
            "token_type": "bearer",
            "expires_in": int(expires.total_seconds()),
            "role": role,
            "menu_access": permissions["menu_access"],
        }

    async def ensure_admin(self, email: str, password: str, display_name: Optional[str] = None) -> LoginAccount:
        """Create (or promote) the bootstrap administrator"""
        account = await self.get_account_by_email(email)
        if account is None:
            account = await self.register(RegisterRequest(email=email, password=password, display_name=display_name))
        current = await self.permission_service.get_effective_permissions(account.id)
        if current["role"] != Role.ADMIN:
            await self.permission_service.save_permissions({account.id: default_entry(Role.ADMIN)})
            logger.info(f"Bootstrap admin ready: {email}")
        return account
