from contextlib import asynccontextmanager
from fastapi import FastAPI, Depends, HTTPException, Query, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from typing import List, Optional
from movies import settings
from movies.models.movies import Movie, MovieCreate, MovieUpdate, RatingIn
from movies.database.db import MovieStore, get_store
import logging

logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL, logging.INFO))
logger = logging.getLogger(__name__)

MOVIE_NOT_FOUND = "Movie not found"
NO_MOVIES_FOUND = "No movies found"


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Launching the movie service...")
    app.state.store = MovieStore()
    logger.info("The service is ready to work")
    yield
    logger.info(f"Stopping the movie service, {len(app.state.store)} movies discarded")


app = FastAPI(
    title="Movies service",
    description="API for managing an in-memory movie catalog",
    version="1.0.0",
    lifespan=lifespan
)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        content={"error": exc.detail},
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None)
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Rejected request body for {request.method} {request.url.path}: {exc.errors()}")
    return JSONResponse(
        content={"error": "Invalid request body"},
        status_code=status.HTTP_400_BAD_REQUEST
    )


def not_found(detail: str = MOVIE_NOT_FOUND) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


@app.get("/", summary="Service greeting")
async def root():
    return {"message": "Welcome to the movie API"}


@app.post("/movies",
          status_code=status.HTTP_201_CREATED,
          summary="Add a new movie",
          responses={
              400: {"description": "Missing required fields"}
          })
async def create_movie(movie: MovieCreate, store: MovieStore = Depends(get_store)):
    if not movie.has_required_fields():
        logger.warning("Attempt to add a movie with missing required fields")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing required fields"
        )

    created = store.add(movie.to_movie())
    logger.info(f"A new movie has been added: ID {created.id}, {created.title}")
    return {"message": "successfully added"}


@app.get("/movies",
         response_model=List[Movie],
         summary="Get a list of all movies")
async def read_movies(store: MovieStore = Depends(get_store)):
    movies = store.all()
    logger.info(f"A list of movies was requested, {len(movies)} entries were found")
    return movies


@app.get("/movies/top-rated",
         response_model=List[Movie],
         summary="Get rated movies, best average first",
         responses={
             404: {"description": NO_MOVIES_FOUND}
         })
async def read_top_rated(store: MovieStore = Depends(get_store)):
    movies = store.top_rated()
    if not movies:
        raise not_found(NO_MOVIES_FOUND)
    return movies


@app.get("/movies/search",
         response_model=List[Movie],
         summary="Search movies by title",
         responses={
             400: {"description": "Keyword is required"},
             404: {"description": "No movies match the search"}
         })
async def search_movies(
        keyword: Optional[str] = Query(None, description="Case-insensitive part of the title"),
        store: MovieStore = Depends(get_store)
):
    if not keyword:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Keyword is required"
        )

    movies = store.search(keyword)
    logger.info(f"Search for '{keyword}' matched {len(movies)} movies")
    if not movies:
        raise not_found("No movies match the search")
    return movies


@app.get("/movies/genre/{genre}",
         response_model=List[Movie],
         summary="Get movies of a genre",
         responses={
             404: {"description": NO_MOVIES_FOUND}
         })
async def read_movies_by_genre(genre: str, store: MovieStore = Depends(get_store)):
    movies = store.by_genre(genre)
    if not movies:
        raise not_found(NO_MOVIES_FOUND)
    return movies


@app.get("/movies/director/{director}",
         response_model=List[Movie],
         summary="Get movies of a director",
         responses={
             404: {"description": NO_MOVIES_FOUND}
         })
async def read_movies_by_director(director: str, store: MovieStore = Depends(get_store)):
    movies = store.by_director(director)
    if not movies:
        raise not_found(NO_MOVIES_FOUND)
    return movies


@app.get("/movies/{movie_id}",
         response_model=Movie,
         summary="Get a movie by ID",
         responses={
             404: {"description": MOVIE_NOT_FOUND}
         })
async def read_movie(movie_id: str, store: MovieStore = Depends(get_store)):
    movie = store.get(movie_id)
    if not movie:
        logger.warning(f"A non-existent movie ID was requested {movie_id}")
        raise not_found()
    return movie


@app.patch("/movies/{movie_id}",
           response_model=Movie,
           summary="Update movie data partially",
           responses={
               404: {"description": MOVIE_NOT_FOUND}
           })
async def update_movie(
        movie_id: str,
        movie_data: MovieUpdate,
        store: MovieStore = Depends(get_store)
):
    # explicit nulls are skipped so filtered fields never become None
    update_data = movie_data.model_dump(exclude_unset=True, exclude_none=True)
    if settings.PROTECT_IDENTITY_ON_UPDATE:
        update_data.pop("id", None)
        update_data.pop("ratings", None)

    movie = store.update(movie_id, update_data)
    if not movie:
        logger.warning(f"Attempt to update a non-existent movie ID {movie_id}")
        raise not_found()

    logger.info(f"Updated movie ID {movie_id}: {sorted(update_data)}")
    return movie


@app.delete("/movies/{movie_id}",
            summary="Delete a movie",
            responses={
                404: {"description": MOVIE_NOT_FOUND},
                200: {"description": "The movie was deleted successfully"}
            })
async def delete_movie(movie_id: str, store: MovieStore = Depends(get_store)):
    movie = store.delete(movie_id)
    if not movie:
        logger.warning(f"Attempt to delete a non-existent movie ID {movie_id}")
        raise not_found()

    logger.info(f"Deleted movie ID {movie_id}: {movie.title}")
    return {"message": "Movie deleted successfully"}


@app.post("/movies/{movie_id}/rating",
          summary="Rate a movie",
          responses={
              400: {"description": "Rating must be between 1 and 5"},
              404: {"description": MOVIE_NOT_FOUND}
          })
async def rate_movie(
        movie_id: str,
        payload: RatingIn,
        store: MovieStore = Depends(get_store)
):
    if not 1 <= payload.rating <= 5:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Rating must be between 1 and 5"
        )

    movie = store.add_rating(movie_id, payload.rating)
    if not movie:
        logger.warning(f"Attempt to rate a non-existent movie ID {movie_id}")
        raise not_found()

    logger.info(f"Movie ID {movie_id} rated {payload.rating}, {len(movie.ratings)} ratings total")
    return {"message": "Rating added successfully"}


@app.get("/movies/{movie_id}/rating",
         summary="Get the average rating of a movie",
         responses={
             204: {"description": "The movie has no ratings yet"},
             404: {"description": MOVIE_NOT_FOUND}
         })
async def read_average_rating(movie_id: str, store: MovieStore = Depends(get_store)):
    movie = store.get(movie_id)
    if not movie:
        raise not_found()
    if not movie.ratings:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return {"averageRating": movie.mean_rating_text()}


def run():
    import uvicorn

    logger.info(f"Starting movie service on {settings.HOST}:{settings.PORT}")
    uvicorn.run(
        "movies.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower()
    )


if __name__ == "__main__":
    run()
