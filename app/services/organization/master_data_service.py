import logging
from typing import Any, Dict, List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from app.models.organization.department import Department
from app.models.organization.position import Position
from app.models.organization.role_definition import RoleDefinition

logger = logging.getLogger(__name__)


class MasterDataService:
    """Read side of the imported departments, positions and roles"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _all(self, model) -> List[Any]:
        result = await self.session.execute(select(model).order_by(model.created_at, model.id))
        return list(result.scalars().all())

    async def get_departments(self) -> List[Department]:
        return await self._all(Department)

    async def get_positions(self) -> List[Position]:
        return await self._all(Position)

    async def get_roles(self) -> List[RoleDefinition]:
        return await self._all(RoleDefinition)

    async def get_master_data(self) -> Dict[str, List[Any]]:
        return {
            "departments": await self.get_departments(),
            "positions": await self.get_positions(),
            "roles": await self.get_roles(),
        }
