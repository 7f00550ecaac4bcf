"""
Color-separated opening and win/loss statistics for one player.

Only results in the win/loss/draw partitions move those counters. Any other
result (lose, kingofthehill, threecheck, unknown strings) still counts toward
games and rating, so wins + losses + draws can be lower than games.
"""

import math
from collections.abc import Iterable

import settings
from models import (
    DRAW_RESULTS,
    LOSS_RESULTS,
    AggregateBucket,
    ColoredOpeningStats,
    ColorGameStat,
    ColorSeparatedStats,
    GameAnalytics,
    GameRecord,
    OpeningStat,
    Outcome,
    PlayerResult,
    ResultCode,
)
from opening_classifier import base_opening_name, classify_opening


def aggregate_outcome(result: PlayerResult) -> Outcome | None:
    """Win/loss/draw bucket for a result, or None if it belongs to none of them."""
    if result is ResultCode.WIN:
        return Outcome.WIN
    if result in LOSS_RESULTS:
        return Outcome.LOSS
    if result in DRAW_RESULTS:
        return Outcome.DRAW
    return None


def _round(value: float) -> int:
    # half-up, so 12.5 -> 13
    return int(math.floor(value + 0.5))


def _percentage(part: int, whole: int) -> int:
    return _round(part * 100 / whole) if whole > 0 else 0


def _average(total: int, count: int) -> int:
    return _round(total / count) if count > 0 else 0


def to_opening_stats(
    buckets: dict[str, AggregateBucket],
    color: str,
    min_games: int = settings.MIN_GAMES_FOR_OPENING_STAT,
    max_results: int = settings.MAX_OPENING_RESULTS,
) -> list[OpeningStat]:
    """Derive report rows: drop small families, most-played first, truncated."""
    stats = [
        OpeningStat(
            opening=opening,
            code=bucket.code,
            games=bucket.games,
            wins=bucket.wins,
            losses=bucket.losses,
            draws=bucket.draws,
            win_rate=_percentage(bucket.wins, bucket.games),
            average_rating=_average(bucket.total_rating, bucket.games),
            color=color,
        )
        for opening, bucket in buckets.items()
        if bucket.games >= min_games
    ]
    stats.sort(key=lambda s: -s.games)
    return stats[:max_results]


def merge_opening_buckets(
    white: dict[str, AggregateBucket], black: dict[str, AggregateBucket]
) -> dict[str, AggregateBucket]:
    """Per-family sum of both colors. Inputs are left untouched."""
    combined = {opening: AggregateBucket(**vars(bucket)) for opening, bucket in white.items()}
    for opening, bucket in black.items():
        current = combined.get(opening)
        combined[opening] = current.merged(bucket) if current else AggregateBucket(**vars(bucket))
    return combined


def collect_opening_buckets(
    games: Iterable[GameRecord], username: str
) -> tuple[dict[str, AggregateBucket], dict[str, AggregateBucket]]:
    """Accumulate (white, black) buckets keyed by opening family."""
    white: dict[str, AggregateBucket] = {}
    black: dict[str, AggregateBucket] = {}

    for game in games:
        color = game.color_of(username)
        if color is None:
            continue
        opening = classify_opening(game.pgn)
        if opening is None:
            continue

        family = base_opening_name(opening.name)
        target = white if color == "white" else black
        bucket = target.get(family)
        if bucket is None:
            bucket = target[family] = AggregateBucket(code=opening.code)
        player = game.side(color)
        bucket.record(aggregate_outcome(player.result), player.rating)

    return white, black


def analyze_openings_by_color(
    games: Iterable[GameRecord],
    username: str,
    min_games: int = settings.MIN_GAMES_FOR_OPENING_STAT,
    max_results: int = settings.MAX_OPENING_RESULTS,
) -> ColoredOpeningStats:
    white, black = collect_opening_buckets(games, username)
    combined = merge_opening_buckets(white, black)
    return ColoredOpeningStats(
        white=to_opening_stats(white, "white", min_games, max_results),
        black=to_opening_stats(black, "black", min_games, max_results),
        combined=to_opening_stats(combined, "both", min_games, max_results),
    )


def _color_stat(bucket: AggregateBucket) -> ColorGameStat:
    return ColorGameStat(
        games=bucket.games,
        wins=bucket.wins,
        losses=bucket.losses,
        draws=bucket.draws,
        win_rate=_percentage(bucket.wins, bucket.games),
        average_rating=_average(bucket.total_rating, bucket.games),
    )


def analyze_games_by_color(games: Iterable[GameRecord], username: str) -> ColorSeparatedStats:
    """Overall record as white, as black, and both together."""
    white = AggregateBucket()
    black = AggregateBucket()
    for game in games:
        color = game.color_of(username)
        if color is None:
            continue
        player = game.side(color)
        target = white if color == "white" else black
        target.record(aggregate_outcome(player.result), player.rating)

    return ColorSeparatedStats(
        white=_color_stat(white),
        black=_color_stat(black),
        combined=_color_stat(white.merged(black)),
    )


def aggregate(
    games: Iterable[GameRecord],
    username: str,
    min_games: int = settings.MIN_GAMES_FOR_OPENING_STAT,
    max_results: int = settings.MAX_OPENING_RESULTS,
) -> GameAnalytics:
    games = list(games)
    return GameAnalytics(
        opening_stats=analyze_openings_by_color(games, username, min_games, max_results),
        overall_stats=analyze_games_by_color(games, username),
    )
