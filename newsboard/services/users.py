from __future__ import annotations

from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from newsboard.core.errors import NotFound, storage_errors
from newsboard.models.schemas import UserOut
from newsboard.models.tables import User
from newsboard.services.existence import USER


async def list_users(session: AsyncSession) -> List[UserOut]:
    async with storage_errors("list_users"):
        res = await session.execute(select(User).order_by(User.username))
        users = list(res.scalars().all())
    return [UserOut.model_validate(u) for u in users]


async def get_user(session: AsyncSession, username: str) -> UserOut:
    async with storage_errors("get_user"):
        res = await session.execute(select(User).where(User.username == username))
        user = res.scalar_one_or_none()
    if user is None:
        raise NotFound(USER)
    return UserOut.model_validate(user)
