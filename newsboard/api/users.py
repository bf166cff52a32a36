# newsboard/api/users.py
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from newsboard.db.sa import get_session
from newsboard.models.schemas import UserEnvelope, UserList
from newsboard.services import users as users_svc

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("", response_model=UserList, summary="All users")
async def api_list_users(session: AsyncSession = Depends(get_session)):
    users = await users_svc.list_users(session)
    return {"users": users}


@router.get("/{username}", response_model=UserEnvelope, summary="User by username")
async def api_get_user(username: str, session: AsyncSession = Depends(get_session)):
    user = await users_svc.get_user(session, username)
    return {"user": user}
