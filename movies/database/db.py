from sqlmodel import SQLModel, create_engine, Session
from sqlalchemy.engine import URL, Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import text
from functools import lru_cache
from typing import Union
import time
import logging

from ..config import (
    DATABASE_URL,
    DB_CONNECT_RETRIES,
    DB_ECHO,
    DB_HOST,
    DB_NAME,
    DB_PASS,
    DB_PORT,
    DB_RETRY_DELAY,
    DB_USER,
)
from ..models.movies import Movie  # noqa: F401  registers the Movies table

logger = logging.getLogger(__name__)


def build_database_url() -> Union[str, URL]:
    if DATABASE_URL:
        return DATABASE_URL
    return URL.create(
        "mysql+pymysql",
        username=DB_USER,
        password=DB_PASS or None,
        host=DB_HOST,
        port=DB_PORT,
        database=DB_NAME,
    )


@lru_cache(maxsize=1)
def get_engine() -> Engine:
    url = build_database_url()
    connect_args = {}
    if make_url(url).get_backend_name() != "sqlite":
        connect_args["connect_timeout"] = 10
    return create_engine(
        url,
        pool_pre_ping=True,
        connect_args=connect_args,
        echo=DB_ECHO
    )


def wait_for_db(engine: Engine, max_retries: int = DB_CONNECT_RETRIES, retry_delay: int = DB_RETRY_DELAY):
    for attempt in range(1, max_retries + 1):
        try:
            logger.info(f"Attempt {attempt}/{max_retries}: Connecting to DB...")
            with Session(engine) as session:
                session.execute(text("SELECT 1"))
            logger.info(f"Connected to {engine.dialect.name} database")
            SQLModel.metadata.create_all(engine)
            logger.info("Database tables are ready")
            return
        except SQLAlchemyError as e:
            logger.error(f"Connection failed: {type(e).__name__}: {str(e)}")
            if attempt == max_retries:
                raise RuntimeError(f"Failed to connect to DB after {max_retries} attempts") from e
            time.sleep(retry_delay)
