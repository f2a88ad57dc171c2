import pytest
from fastapi.testclient import TestClient
from movies.main import app
from movies.models.movies import Movie


@pytest.fixture
def client():
    # entering the client runs the lifespan, which installs a fresh store
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def dune_payload():
    return {
        "id": "1",
        "title": "Dune",
        "director": "Villeneuve",
        "releaseYear": 2021,
        "genre": "Sci-Fi",
    }


@pytest.fixture
def make_movie():
    def _make(movie_id, title="Untitled", director="Nobody", genre="Drama", ratings=None):
        return Movie(
            id=movie_id,
            title=title,
            director=director,
            releaseYear=2000,
            genre=genre,
            ratings=list(ratings or []),
        )
    return _make
