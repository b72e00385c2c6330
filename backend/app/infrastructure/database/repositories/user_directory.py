"""Read-only adapter over the users table."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.interfaces import UserDirectory
from app.infrastructure.database.models import UserModel


class SQLAlchemyUserDirectory(UserDirectory):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def get_display_names(self, user_ids: list[str]) -> dict[str, str]:
        ids = sorted(set(user_ids))
        if not ids:
            return {}
        result = await self._session.execute(
            select(UserModel.id, UserModel.name).where(UserModel.id.in_(ids))
        )
        return {row.id: row.name for row in result.all()}
