import logging
from typing import Any, Dict, Optional
from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.logging import log_user_action
from app.core.write_errors import write_error_channel
from app.models.system.app_setting import AppSetting, GLOBAL_SETTINGS_ID
from app.schemas.system.settings_schema import SettingsUpdate

logger = logging.getLogger(__name__)


def default_settings() -> Dict[str, Any]:
    return {
        "org_name": settings.DEFAULT_ORG_NAME,
        "period": settings.DEFAULT_PERIOD,
        "currency": settings.DEFAULT_CURRENCY,
        "period_date": None,
    }


class SettingsService:
    """Single global settings document"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_settings(self) -> Dict[str, Any]:
        """Stored values over the defaults; nothing is written on read"""
        stored = await self.session.get(AppSetting, GLOBAL_SETTINGS_ID)
        values = default_settings()
        if stored is not None:
            for field in values:
                value = getattr(stored, field)
                if value not in (None, ""):
                    values[field] = value
            values["updated_at"] = stored.updated_at
        return values

    async def ensure_defaults(self) -> AppSetting:
        stored = await self.session.get(AppSetting, GLOBAL_SETTINGS_ID)
        if stored is None:
            stored = AppSetting(id=GLOBAL_SETTINGS_ID, **default_settings())
            self.session.add(stored)
            await self.session.commit()
            await self.session.refresh(stored)
            logger.info("Default settings created")
        return stored

    async def update_settings(self, data: SettingsUpdate, actor_id: Optional[str] = None) -> Dict[str, Any]:
        """Merge the given fields into the stored document"""
        changes = data.model_dump(exclude_unset=True)
        try:
            stored = await self.session.get(AppSetting, GLOBAL_SETTINGS_ID)
            if stored is None:
                stored = AppSetting(id=GLOBAL_SETTINGS_ID, **default_settings())
                self.session.add(stored)
            for field, value in changes.items():
                setattr(stored, field, value)
            await self.session.commit()
            await self.session.refresh(stored)
        except Exception as e:
            await self.session.rollback()
            write_error_channel.report("settings", "merge", e, document_id=GLOBAL_SETTINGS_ID, actor_id=actor_id)
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error saving settings")

        log_user_action(actor_id, "update", "settings", ",".join(changes))
        return await self.get_settings()
