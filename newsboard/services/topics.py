from __future__ import annotations

from typing import List

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from newsboard.core.errors import InvalidPayload, storage_errors
from newsboard.models.schemas import TopicOut
from newsboard.models.tables import Topic
from newsboard.services.validation import NewTopic


async def list_topics(session: AsyncSession) -> List[TopicOut]:
    async with storage_errors("list_topics"):
        res = await session.execute(select(Topic))
        topics = list(res.scalars().all())
    return [TopicOut.model_validate(t) for t in topics]


async def create_topic(session: AsyncSession, payload: NewTopic) -> TopicOut:
    topic = Topic(slug=payload.slug, description=payload.description)
    async with storage_errors("create_topic"):
        try:
            session.add(topic)
            await session.commit()
        except IntegrityError:
            # duplicate slug
            await session.rollback()
            raise InvalidPayload() from None
    return TopicOut.model_validate(topic)
