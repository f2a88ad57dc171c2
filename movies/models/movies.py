from decimal import Decimal, ROUND_HALF_UP
from sqlmodel import SQLModel, Field
from typing import List, Optional, Union

Number = Union[int, float]

REQUIRED_FIELDS = ("id", "title", "director", "releaseYear", "genre")


class Movie(SQLModel):
    id: str
    title: str
    director: str
    releaseYear: Number
    genre: str
    ratings: List[Number] = Field(default_factory=list)

    def mean_rating(self) -> float:
        return sum(self.ratings) / len(self.ratings)

    def mean_rating_text(self) -> str:
        # exact ties such as 2.125 round up
        return str(Decimal(self.mean_rating()).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


class MovieCreate(SQLModel):
    """Creation payload; presence of the required fields is checked by the service.

    Ratings sent by the client are ignored whatever their shape.
    """
    id: Optional[str] = None
    title: Optional[str] = None
    director: Optional[str] = None
    releaseYear: Optional[Number] = None
    genre: Optional[str] = None

    def has_required_fields(self) -> bool:
        return all(getattr(self, name) for name in REQUIRED_FIELDS)

    def to_movie(self) -> Movie:
        return Movie(
            id=self.id,
            title=self.title,
            director=self.director,
            releaseYear=self.releaseYear,
            genre=self.genre,
            ratings=[],
        )


class MovieUpdate(SQLModel):
    id: Optional[str] = None
    title: Optional[str] = None
    director: Optional[str] = None
    releaseYear: Optional[Number] = None
    genre: Optional[str] = None
    ratings: Optional[List[Number]] = None


class RatingIn(SQLModel):
    rating: Number
