from contextlib import asynccontextmanager

import logging

from fastapi import FastAPI

from newsboard.api import articles
from newsboard.api import comments as comments_api
from newsboard.api import endpoints as endpoints_api
from newsboard.api import topics as topics_api
from newsboard.api import users as users_api
from newsboard.config import DB_CREATE_TABLES, LOG_LEVEL, ROOT_PATH
from newsboard.core.errors import register_exception_handlers
from newsboard.core.middleware import RequestLoggingMiddleware
from newsboard.db import pool as db_pool
from newsboard.db import sa as db_sa


logger = logging.getLogger("newsboard.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Storage handles live on app.state for the life of the process
    app.state.pool = await db_pool.connect_db()
    app.state.engine, app.state.sessionmaker = await db_sa.init_sa_engine()
    if DB_CREATE_TABLES:
        await db_sa.create_tables(app.state.engine)
    logger.info("Application started", extra={"event": "startup"})
    try:
        yield
    finally:
        await db_sa.close_sa_engine(app.state.engine)
        await db_pool.close_db(app.state.pool)
        logger.info("Application stopped", extra={"event": "shutdown"})


app = FastAPI(
    title="newsboard",
    lifespan=lifespan,
    root_path=ROOT_PATH,
)
app.add_middleware(RequestLoggingMiddleware)
register_exception_handlers(app)

app.include_router(endpoints_api.router)
app.include_router(topics_api.router)
app.include_router(users_api.router)
app.include_router(articles.router)
app.include_router(comments_api.router)

# Basic logging configuration (can be overridden by server config)
logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
