#!/usr/bin/env python3
"""
Game retrieval from the chess.com public API.

Fetches profiles, stats and monthly game archives, caching payloads in an
injected RequestCache. Independent fetches (archive months, leaderboard
categories) run concurrently; one failing does not abort the others.

Usage:
  python chesscom_client.py --username hikaru --months 3
"""

import argparse
import asyncio
import logging
import re
import sys
from datetime import date
from pathlib import Path

import httpx

sys.path.insert(0, str(Path(__file__).resolve().parent))
import settings
from best_games import analyze_best_games
from models import BestGameEntry, GameAnalytics, GameRecord, parse_game
from opening_stats import aggregate
from request_cache import RequestCache

logger = logging.getLogger(__name__)

LEADERBOARD_CATEGORIES = ("live_rapid", "live_blitz", "live_bullet", "daily", "tactics")
ARCHIVE_MONTH = re.compile(r"/games/(\d{4})/(\d{1,2})/?$")
EVENT_GROUPS = ("finished", "in_progress", "registered")


class ChessComError(Exception):
    """A chess.com request that failed for good (after any retries)."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


def _retryable(status_code: int) -> bool:
    return status_code == 429 or status_code >= 500


def parse_games(payload: dict) -> list[GameRecord]:
    """GameRecords from an archive payload; malformed entries are dropped."""
    games = []
    for raw in payload.get("games") or []:
        try:
            games.append(parse_game(raw))
        except ValueError as e:
            logger.warning("Dropping malformed game: %s", e)
    return games


def newest_first(games: list[GameRecord]) -> list[GameRecord]:
    return sorted(games, key=lambda g: g.end_time, reverse=True)


def previous_month(year: int, month: int) -> tuple[int, int]:
    return (year - 1, 12) if month == 1 else (year, month - 1)


class ChessComClient:
    """
    Async client for api.chess.com/pub.

    Use as an async context manager. A session passed in is left open on exit;
    one created here is closed.
    """

    def __init__(
        self,
        cache: RequestCache | None = None,
        session: httpx.AsyncClient | None = None,
        base_url: str = settings.CHESSCOM_API_BASE,
        max_retries: int = settings.MAX_RETRIES,
        retry_delay: float = settings.RETRY_DELAY,
        max_concurrency: int = settings.MAX_CONCURRENT_REQUESTS,
    ):
        self.cache = cache if cache is not None else RequestCache()
        self.base_url = base_url.rstrip("/")
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self._session = session
        self._owns_session = session is None
        self._semaphore = asyncio.Semaphore(max_concurrency)

    async def __aenter__(self) -> "ChessComClient":
        if self._session is None:
            self._session = httpx.AsyncClient(
                timeout=settings.REQUEST_TIMEOUT,
                headers={"User-Agent": settings.USER_AGENT},
                follow_redirects=True,
            )
        return self

    async def __aexit__(self, *exc_info) -> None:
        if self._owns_session and self._session is not None:
            await self._session.aclose()
            self._session = None

    def _url(self, path_or_url: str) -> str:
        if path_or_url.startswith(("http://", "https://")):
            return path_or_url
        return f"{self.base_url}/{path_or_url.lstrip('/')}"

    async def _get_json(self, path_or_url: str) -> dict:
        """GET with retry on 429, 5xx and transport errors (exponential backoff)."""
        if self._session is None:
            raise RuntimeError("ChessComClient used outside 'async with'")

        url = self._url(path_or_url)
        error: ChessComError | None = None
        for attempt in range(self.max_retries + 1):
            try:
                async with self._semaphore:
                    resp = await self._session.get(url)
            except httpx.HTTPError as e:
                error = ChessComError(f"Request to {url} failed: {e}")
            else:
                if resp.status_code == 200:
                    return resp.json()
                if resp.status_code == 404:
                    raise ChessComError(f"Not found: {url}", status_code=404)
                error = ChessComError(
                    f"{url} returned HTTP {resp.status_code}", status_code=resp.status_code
                )
                if not _retryable(resp.status_code):
                    raise error

            if attempt < self.max_retries:
                delay = self.retry_delay * 2 ** attempt
                logger.info("Retrying %s in %.1fs (attempt %d): %s", url, delay, attempt + 1, error)
                await asyncio.sleep(delay)

        raise error

    async def _cached_json(self, key: str, path: str) -> dict:
        cached = self.cache.get(key)
        if cached is not None:
            return cached
        data = await self._get_json(path)
        self.cache.set(key, data)
        return data

    async def get_profile(self, username: str) -> dict:
        return await self._cached_json(f"profile-{username.lower()}", f"/player/{username}")

    async def get_stats(self, username: str) -> dict:
        return await self._cached_json(f"stats-{username.lower()}", f"/player/{username}/stats")

    async def get_archives(self, username: str) -> list[str]:
        """Monthly archive URLs, oldest first."""
        data = await self._cached_json(
            f"archives-{username.lower()}", f"/player/{username}/games/archives"
        )
        return list(data.get("archives") or [])

    async def get_games_by_month(self, username: str, year: int, month: int) -> list[GameRecord]:
        key = f"games-{username.lower()}-{year:04d}-{month:02d}"
        cached = self.cache.get(key)
        if cached is not None:
            return cached
        payload = await self._get_json(f"/player/{username}/games/{year:04d}/{month:02d}")
        games = parse_games(payload)
        self.cache.set(key, games)
        return games

    async def get_recent_games(
        self, username: str, limit: int = settings.DEFAULT_GAME_LIMIT, today: date | None = None
    ) -> list[GameRecord]:
        """Newest games from this month, topped up from last month if short."""
        today = today or date.today()
        games = await self.get_games_by_month(username, today.year, today.month)
        if len(games) < limit:
            year, month = previous_month(today.year, today.month)
            games = games + await self.get_games_by_month(username, year, month)
        return newest_first(games)[:limit]

    async def _archive_games(self, username: str, archive_url: str) -> list[GameRecord]:
        match = ARCHIVE_MONTH.search(archive_url)
        if match:
            return await self.get_games_by_month(username, int(match[1]), int(match[2]))
        return parse_games(await self._get_json(archive_url))

    async def get_historical_games(
        self, username: str, months_back: int = settings.DEFAULT_MONTHS_BACK
    ) -> list[GameRecord]:
        """Games from the last `months_back` archives. Failed months are skipped."""
        archives = await self.get_archives(username)
        recent = archives[-months_back:] if months_back > 0 else []

        results = await asyncio.gather(
            *(self._archive_games(username, url) for url in recent), return_exceptions=True
        )
        games: list[GameRecord] = []
        for url, result in zip(recent, results):
            if isinstance(result, Exception):
                logger.warning("Failed to fetch archive %s: %s", url, result)
                continue
            games.extend(result)
        return newest_first(games)

    async def _leaderboard(self, category: str) -> list[dict]:
        data = await self._cached_json(f"leaderboards-{category}", f"/leaderboards/{category}")
        return list(data.get(category) or [])

    async def get_leaderboards(self) -> dict[str, list[dict]]:
        """Leaderboards per category; categories that fail are omitted."""
        results = await asyncio.gather(
            *(self._leaderboard(c) for c in LEADERBOARD_CATEGORIES), return_exceptions=True
        )
        boards = {}
        for category, result in zip(LEADERBOARD_CATEGORIES, results):
            if isinstance(result, Exception):
                logger.warning("Failed to fetch leaderboard %s: %s", category, result)
                continue
            boards[category] = result
        return boards

    async def _event_groups(self, path: str) -> dict[str, list[dict]]:
        data = await self._get_json(path)
        return {group: list(data.get(group) or []) for group in EVENT_GROUPS}

    async def get_tournaments(self, username: str) -> dict[str, list[dict]]:
        return await self._event_groups(f"/player/{username}/tournaments")

    async def get_matches(self, username: str) -> dict[str, list[dict]]:
        return await self._event_groups(f"/player/{username}/matches")

    async def get_clubs(self, username: str) -> list[dict]:
        data = await self._get_json(f"/player/{username}/clubs")
        return list(data.get("clubs") or [])

    async def get_best_games(
        self,
        username: str,
        months_back: int = settings.DEFAULT_MONTHS_BACK,
        limit: int = settings.BEST_GAME_LIMIT,
    ) -> list[BestGameEntry]:
        games = await self.get_historical_games(username, months_back)
        return analyze_best_games(games, username, limit)

    async def get_game_analytics(
        self, username: str, months_back: int = settings.DEFAULT_MONTHS_BACK
    ) -> GameAnalytics:
        games = await self.get_historical_games(username, months_back)
        return aggregate(games, username)


async def main_async():
    parser = argparse.ArgumentParser(description="Fetch recent chess.com games")
    parser.add_argument("--username", required=True)
    parser.add_argument("--months", type=int, default=settings.DEFAULT_MONTHS_BACK)
    args = parser.parse_args()

    if not settings.is_valid_username(args.username):
        print(f"Invalid username: {args.username}", file=sys.stderr)
        sys.exit(1)

    async with ChessComClient() as client:
        try:
            games = await client.get_historical_games(args.username, args.months)
        except ChessComError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
    print(f"Fetched {len(games)} games for {args.username}.")


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    asyncio.run(main_async())


if __name__ == "__main__":
    main()
