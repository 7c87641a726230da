from typing import Union


class MovieServiceError(Exception):
    """Base class for errors raised by the movies service."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MovieValidationError(MovieServiceError):
    """The request payload does not match the movie schema."""


class MovieNotFoundError(MovieServiceError):
    def __init__(self, movie_id: Union[int, str]):
        super().__init__(f"Movie with ID {movie_id} was not found")
        self.movie_id = movie_id


class StorageError(MovieServiceError):
    """The database failed while serving a request."""
