import logging
import os


# === Storage ===

# Empty means the in-memory store.
DATABASE_URL = os.getenv("DATABASE_URL", "")

# === Passwords ===

BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "10"))

# === Listing / deletion policy ===

BOARD_THREAD_LIMIT = 10
THREAD_REPLY_PREVIEW = 3
DELETED_REPLY_TEXT = "[deleted]"

# === Process ===

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "3000"))


def configure_logging(level: str = LOG_LEVEL) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
