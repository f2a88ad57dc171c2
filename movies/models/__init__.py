from .movies import Movie, MovieCreate, MovieUpdate, RatingIn

__all__ = ["Movie", "MovieCreate", "MovieUpdate", "RatingIn"]
