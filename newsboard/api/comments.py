# newsboard/api/comments.py
import asyncpg
from fastapi import APIRouter, Depends, Response

from newsboard.db.pool import get_conn
from newsboard.services import articles as svc
from newsboard.services.validation import parse_identifier

router = APIRouter(prefix="/api/comments", tags=["comments"])


@router.delete("/{comment_id}", status_code=204, response_class=Response,
               summary="Delete a comment")
async def api_delete_comment(comment_id: str, conn: asyncpg.Connection = Depends(get_conn)):
    await svc.delete_comment(conn, parse_identifier(comment_id))
    return Response(status_code=204)
