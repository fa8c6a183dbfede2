from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from app.api.dependencies import get_current_account, require_admin
from app.core.database import get_async_session
from app.models.auth.account import LoginAccount
from app.schemas.system.settings_schema import SettingsResponse, SettingsUpdate
from app.services.system.settings_service import SettingsService

router = APIRouter()

@router.get("/", response_model=SettingsResponse)
async def get_settings(
    session: AsyncSession = Depends(get_async_session),
    current_account: LoginAccount = Depends(get_current_account)
):
    """Organisation settings, with defaults for anything not stored"""
    return await SettingsService(session).get_settings()

@router.put("/", response_model=SettingsResponse)
async def update_settings(
    data: SettingsUpdate,
    session: AsyncSession = Depends(get_async_session),
    current_account: LoginAccount = Depends(require_admin)
):
    """Merge settings (admin only)"""
    return await SettingsService(session).update_settings(data, actor_id=current_account.id)
