"""Configuration for the game analytics engine.

Every option can be overridden through the environment.
"""

import os
import re

CHESSCOM_API_BASE = os.environ.get("CHESSCOM_API_BASE", "https://api.chess.com/pub")
# chess.com rejects requests without a User-Agent
USER_AGENT = os.environ.get("CHESSCOM_USER_AGENT", "chess-insights/1.0")
REQUEST_TIMEOUT = float(os.environ.get("CHESSCOM_TIMEOUT", "10"))
MAX_RETRIES = int(os.environ.get("CHESSCOM_MAX_RETRIES", "3"))
RETRY_DELAY = float(os.environ.get("CHESSCOM_RETRY_DELAY", "1.0"))
MAX_CONCURRENT_REQUESTS = int(os.environ.get("CHESSCOM_MAX_CONCURRENCY", "4"))

DEFAULT_MONTHS_BACK = int(os.environ.get("INSIGHTS_MONTHS_BACK", "6"))
DEFAULT_GAME_LIMIT = int(os.environ.get("INSIGHTS_GAME_LIMIT", "10"))

CACHE_TTL = float(os.environ.get("INSIGHTS_CACHE_TTL", "300"))  # seconds
CACHE_CAPACITY = int(os.environ.get("INSIGHTS_CACHE_CAPACITY", "100"))

MIN_GAMES_FOR_OPENING_STAT = int(os.environ.get("INSIGHTS_MIN_OPENING_GAMES", "2"))
MAX_OPENING_RESULTS = int(os.environ.get("INSIGHTS_MAX_OPENINGS", "15"))

BEST_GAME_MIN_ACCURACY = float(os.environ.get("INSIGHTS_MIN_ACCURACY", "70"))
BEST_GAME_LIMIT = int(os.environ.get("INSIGHTS_BEST_GAME_LIMIT", "10"))

ECO_TSV_PATH = os.environ.get("ECO_TSV_PATH")

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 25
USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9_-]+$")


def is_valid_username(username: str | None) -> bool:
    """chess.com usernames: 3-25 chars of letters, digits, '_' or '-'."""
    if not username:
        return False
    if not USERNAME_MIN_LENGTH <= len(username) <= USERNAME_MAX_LENGTH:
        return False
    return bool(USERNAME_PATTERN.match(username))
