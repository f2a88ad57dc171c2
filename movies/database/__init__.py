from .db import MovieStore, get_store

__all__ = ["MovieStore", "get_store"]
