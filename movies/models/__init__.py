from .movies import Movie, MovieCreate, MovieRead, MovieUpdate, MOVIE_TYPES

__all__ = ["Movie", "MovieCreate", "MovieRead", "MovieUpdate", "MOVIE_TYPES"]
