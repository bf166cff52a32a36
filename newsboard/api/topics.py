# newsboard/api/topics.py
from typing import Any

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from newsboard.db.sa import get_session
from newsboard.models.schemas import TopicEnvelope, TopicList
from newsboard.services import topics as topics_svc
from newsboard.services.validation import NewTopic, parse_payload

router = APIRouter(prefix="/api/topics", tags=["topics"])


@router.get("", response_model=TopicList, summary="All topics")
async def api_list_topics(session: AsyncSession = Depends(get_session)):
    topics = await topics_svc.list_topics(session)
    return {"topics": topics}


@router.post("", response_model=TopicEnvelope, status_code=201, summary="Create a topic")
async def api_create_topic(payload: Any = Body(None), session: AsyncSession = Depends(get_session)):
    topic = await topics_svc.create_topic(session, parse_payload(NewTopic, payload))
    return {"topic": topic}
