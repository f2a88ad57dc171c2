from fastapi import Request
from typing import Any, Dict, List, Optional
from movies.models.movies import Movie
import logging

logger = logging.getLogger(__name__)


class MovieStore:
    """Process-lifetime movie collection.

    Records keep insertion order. Ids are not required to be unique; every
    lookup returns the first record whose id matches.
    """

    def __init__(self, movies: Optional[List[Movie]] = None):
        self._movies: List[Movie] = list(movies or [])

    def __len__(self) -> int:
        return len(self._movies)

    def add(self, movie: Movie) -> Movie:
        self._movies.append(movie)
        return movie

    def all(self) -> List[Movie]:
        return list(self._movies)

    def get(self, movie_id: str) -> Optional[Movie]:
        return next((m for m in self._movies if m.id == movie_id), None)

    def update(self, movie_id: str, changes: Dict[str, Any]) -> Optional[Movie]:
        movie = self.get(movie_id)
        if movie is None:
            return None
        for field, value in changes.items():
            setattr(movie, field, value)
        return movie

    def delete(self, movie_id: str) -> Optional[Movie]:
        for index, movie in enumerate(self._movies):
            if movie.id == movie_id:
                return self._movies.pop(index)
        return None

    def add_rating(self, movie_id: str, rating: float) -> Optional[Movie]:
        movie = self.get(movie_id)
        if movie is None:
            return None
        movie.ratings.append(rating)
        return movie

    def top_rated(self) -> List[Movie]:
        rated = [m for m in self._movies if m.ratings]
        # sorted() is stable, so equal means keep their insertion order
        return sorted(rated, key=lambda m: m.mean_rating(), reverse=True)

    def by_genre(self, genre: str) -> List[Movie]:
        genre = genre.lower()
        return [m for m in self._movies if m.genre.lower() == genre]

    def by_director(self, director: str) -> List[Movie]:
        director = director.lower()
        return [m for m in self._movies if m.director.lower() == director]

    def search(self, keyword: str) -> List[Movie]:
        keyword = keyword.lower()
        return [m for m in self._movies if keyword in m.title.lower()]


def get_store(request: Request) -> MovieStore:
    return request.app.state.store
