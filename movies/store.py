from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional
import logging
import math

from sqlalchemy import func
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, col, select

from .config import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT
from .errors import MovieNotFoundError, StorageError
from .models.movies import Movie, utcnow

logger = logging.getLogger(__name__)

# Range of the unsigned INTEGER primary key
MAX_MOVIE_ID = 2 ** 32 - 1


@dataclass
class MoviePage:
    items: List[Movie]
    total: int
    page: int
    limit: int
    total_pages: int


class MovieStore:
    """CRUD access to the ``Movies`` table.

    Every call opens its own session on the injected engine. Database
    failures come out as :class:`StorageError`; missing ids as
    :class:`MovieNotFoundError`.
    """

    def __init__(self, engine: Engine, max_page_limit: int = MAX_PAGE_LIMIT):
        self.engine = engine
        self.max_page_limit = max(max_page_limit, 1)

    @contextmanager
    def _session(self, action: str) -> Iterator[Session]:
        with Session(self.engine) as session:
            try:
                yield session
            except SQLAlchemyError as e:
                session.rollback()
                logger.error(f"Error when trying to {action}: {str(e)}")
                raise StorageError(f"Couldn't {action}") from e

    @staticmethod
    def _find(session: Session, movie_id: int) -> Optional[Movie]:
        if not 1 <= movie_id <= MAX_MOVIE_ID:
            return None
        return session.get(Movie, movie_id)

    def create_movie(self, fields: Dict[str, Any]) -> Movie:
        movie = Movie(**fields)
        with self._session("add a movie") as session:
            session.add(movie)
            session.commit()
            session.refresh(movie)
        logger.info(f"A new movie has been added: ID {movie.id}, {movie.title}")
        return movie

    def get_movie(self, movie_id: int) -> Movie:
        with self._session(f"read movie ID {movie_id}") as session:
            movie = self._find(session, movie_id)
        if not movie:
            logger.warning(f"A non-existent movie ID was requested {movie_id}")
            raise MovieNotFoundError(movie_id)
        return movie

    def list_movies(self, page: int = 1, limit: int = DEFAULT_PAGE_LIMIT) -> MoviePage:
        page = max(page, 1)
        limit = min(max(limit, 1), self.max_page_limit)
        offset = (page - 1) * limit
        with self._session("list movies") as session:
            total = session.exec(select(func.count()).select_from(Movie)).one()
            movies = []
            # Windows past the last row are empty; the offset may not fit a SQL integer
            if offset < total:
                query = (
                    select(Movie)
                    .order_by(col(Movie.created_at).desc(), col(Movie.id).desc())
                    .offset(offset)
                    .limit(limit)
                )
                movies = session.exec(query).all()
        logger.info(f"A list of movies was requested, page {page}, {len(movies)} of {total} entries returned")
        return MoviePage(
            items=list(movies),
            total=total,
            page=page,
            limit=limit,
            total_pages=math.ceil(total / limit),
        )

    def update_movie(self, movie_id: int, fields: Dict[str, Any]) -> Movie:
        with self._session(f"update movie ID {movie_id}") as session:
            movie = self._find(session, movie_id)
            if not movie:
                logger.warning(f"Attempt to update a non-existent movie ID {movie_id}")
                raise MovieNotFoundError(movie_id)

            for field, value in fields.items():
                setattr(movie, field, value)
            movie.updated_at = utcnow()

            session.add(movie)
            session.commit()
            session.refresh(movie)
        logger.info(f"Updated movie ID {movie_id}: {movie.title}")
        return movie

    def delete_movie(self, movie_id: int) -> None:
        with self._session(f"delete movie ID {movie_id}") as session:
            movie = self._find(session, movie_id)
            if not movie:
                logger.warning(f"Attempt to delete a non-existent movie ID {movie_id}")
                raise MovieNotFoundError(movie_id)

            session.delete(movie)
            session.commit()
        logger.info(f"Deleted movie ID {movie_id}")
