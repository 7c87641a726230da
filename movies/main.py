from fastapi import APIRouter, Body, Depends, FastAPI, HTTPException, Query, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from typing import Any, Optional
import logging
import re

from .config import DEFAULT_PAGE_LIMIT, HOST, LOG_LEVEL, PORT
from .database.db import get_engine, wait_for_db
from .errors import MovieNotFoundError, MovieValidationError, StorageError
from .models.movies import Movie, MovieRead
from .store import MovieStore
from .validation import describe_errors, validate_create, validate_update

logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")

router = APIRouter()


def get_store(request: Request) -> MovieStore:
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Movie storage is not initialised"
        )
    return store


def parse_page_param(raw: Optional[str], default: int) -> int:
    """Read a page/limit query value the way a lenient integer parser would.

    Missing values fall back to ``default``. Values without a leading integer
    and values below 1 become 1.
    """
    if raw is None or raw == "":
        return default
    match = _LEADING_INT.match(raw)
    if not match:
        return 1
    return max(int(match.group(1)), 1)


def parse_movie_id(raw: str) -> int:
    """Path ids that are not plain digits cannot match any stored movie."""
    if not (raw.isascii() and raw.isdigit()):
        raise MovieNotFoundError(raw)
    return int(raw)


def render_movie(movie: Movie) -> dict:
    return MovieRead(**movie.model_dump()).model_dump(mode="json", by_alias=True)


@router.get("/", summary="Service status")
def root():
    return {"success": True, "message": "Movies API is running"}


@router.post("/api/movies",
             status_code=status.HTTP_201_CREATED,
             summary="Add a new movie",
             responses={
                 400: {"description": "The payload is invalid"}
             })
def create_movie(payload: Any = Body(None), store: MovieStore = Depends(get_store)):
    try:
        fields = validate_create(payload)
    except MovieValidationError as e:
        logger.warning(f"Rejected movie payload: {e.message}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)

    try:
        movie = store.create_movie(fields)
    except StorageError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Couldn't add a movie"
        )
    return {"success": True, "message": "Movie added", "data": render_movie(movie)}


@router.get("/api/movies", summary="Get a page of movies, newest first")
def read_movies(
        page: Optional[str] = Query(None, description="1-based page number"),
        limit: Optional[str] = Query(None, description="Movies per page"),
        store: MovieStore = Depends(get_store)
):
    try:
        result = store.list_movies(
            page=parse_page_param(page, 1),
            limit=parse_page_param(limit, DEFAULT_PAGE_LIMIT),
        )
    except StorageError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Couldn't list movies"
        )
    return {
        "success": True,
        "page": result.page,
        "limit": result.limit,
        "total": result.total,
        "totalPages": result.total_pages,
        "data": [render_movie(movie) for movie in result.items],
    }


@router.get("/api/movies/{movie_id}",
            summary="Get a movie by ID",
            responses={
                404: {"description": "The movie was not found"}
            })
def read_movie(movie_id: str, store: MovieStore = Depends(get_store)):
    try:
        movie = store.get_movie(parse_movie_id(movie_id))
    except MovieNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    except StorageError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Couldn't read the movie"
        )
    return {"success": True, "message": "Movie found", "data": render_movie(movie)}


@router.put("/api/movies/{movie_id}",
            summary="Update movie data",
            responses={
                400: {"description": "The payload is invalid"},
                404: {"description": "The movie was not found"}
            })
def update_movie(movie_id: str, payload: Any = Body(None), store: MovieStore = Depends(get_store)):
    try:
        fields = validate_update(payload)
    except MovieValidationError as e:
        logger.warning(f"Rejected update for movie ID {movie_id}: {e.message}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)

    try:
        movie = store.update_movie(parse_movie_id(movie_id), fields)
    except MovieNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    except StorageError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Couldn't update the movie"
        )
    return {"success": True, "message": "Movie updated", "data": render_movie(movie)}


@router.delete("/api/movies/{movie_id}",
               summary="Delete a movie",
               responses={
                   404: {"description": "The movie was not found"}
               })
def delete_movie(movie_id: str, store: MovieStore = Depends(get_store)):
    try:
        store.delete_movie(parse_movie_id(movie_id))
    except MovieNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    except StorageError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Couldn't delete the movie"
        )
    return {"success": True, "message": "Movie deleted"}


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"success": False, "error": describe_errors(list(exc.errors()))},
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "error": "Internal server error"},
    )


def create_app(store: Optional[MovieStore] = None) -> FastAPI:
    """Build the API. Without a store, one is connected at startup."""
    app = FastAPI(
        title="Movies service",
        description="API for managing a catalog of movies and TV shows",
        version="1.0.0"
    )
    app.state.store = store
    app.include_router(router)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    @app.on_event("startup")
    def startup_event():
        logger.info("Launching the movie service...")
        if app.state.store is None:
            engine = get_engine()
            wait_for_db(engine)
            app.state.store = MovieStore(engine)
        logger.info("The service is ready to work")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=HOST, port=PORT)
