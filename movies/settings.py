import os

HOST = os.getenv("MOVIES_HOST", "0.0.0.0")
PORT = int(os.getenv("MOVIES_PORT", "3000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# When enabled, PATCH cannot change a movie's id or replace its ratings
PROTECT_IDENTITY_ON_UPDATE = os.getenv("PROTECT_IDENTITY_ON_UPDATE", "false").lower() in ("1", "true", "yes")
