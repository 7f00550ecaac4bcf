"""
Rank a player's games by a composite "best game" score.

Score = result base + accuracy bonus + rating-differential term
        + relative-accuracy term, all scaled by a time-class factor.
"""

import logging
from collections.abc import Iterable

import settings
from models import (
    DRAW_RESULTS,
    BestGameEntry,
    GameRecord,
    Outcome,
    PlayerResult,
    ResultCode,
    UnknownResult,
)

logger = logging.getLogger(__name__)

RESULT_POINTS = {
    Outcome.WIN: 100.0,
    Outcome.DRAW: 50.0,
    Outcome.LOSS: 0.0,
}

TIME_CLASS_MULTIPLIERS = {
    "bullet": 0.9,
    "blitz": 1.0,
    "rapid": 1.1,
    "daily": 1.2,
}

UPSET_BONUS_DIVISOR = 20
UPSET_BONUS_CAP = 25
FAVORITE_PENALTY_DIVISOR = 40
FAVORITE_PENALTY_CAP = 10


def scoring_outcome(result: PlayerResult) -> Outcome:
    """
    Outcome used for scoring. Unlike the aggregate partition this is total:
    every result that is neither a win nor a draw scores as a loss.
    """
    if isinstance(result, UnknownResult):
        return Outcome.LOSS
    if result is ResultCode.WIN:
        return Outcome.WIN
    if result in DRAW_RESULTS:
        return Outcome.DRAW
    return Outcome.LOSS


def score_game(
    outcome: Outcome,
    player_accuracy: float,
    opponent_accuracy: float,
    rating_difference: int,
    time_class: str,
) -> float:
    score = RESULT_POINTS[outcome]
    score += (player_accuracy / 100) * 50

    if rating_difference < 0:
        score += min(abs(rating_difference) / UPSET_BONUS_DIVISOR, UPSET_BONUS_CAP)
    else:
        score -= min(rating_difference / FAVORITE_PENALTY_DIVISOR, FAVORITE_PENALTY_CAP)

    score += ((player_accuracy - opponent_accuracy) / 100) * 25
    return score * TIME_CLASS_MULTIPLIERS.get(time_class, 1.0)


def evaluate_game(game: GameRecord, username: str) -> BestGameEntry | None:
    """Score one game from `username`'s side, or None if it can't be scored."""
    color = game.color_of(username)
    if color is None:
        return None
    if game.accuracies is None or not game.accuracies.complete:
        logger.debug("Skipping game without accuracy data: %s", game.url)
        return None

    player = game.side(color)
    opponent = game.opponent(color)
    other = "black" if color == "white" else "white"
    player_accuracy = game.accuracies.for_color(color)
    opponent_accuracy = game.accuracies.for_color(other)
    rating_difference = player.rating - opponent.rating
    outcome = scoring_outcome(player.result)

    return BestGameEntry(
        game=game,
        player_color=color,
        player_rating=player.rating,
        opponent_rating=opponent.rating,
        player_accuracy=player_accuracy,
        opponent_accuracy=opponent_accuracy,
        rating_difference=rating_difference,
        game_score=score_game(
            outcome, player_accuracy, opponent_accuracy, rating_difference, game.time_class
        ),
        result=outcome,
    )


def analyze_best_games(
    games: Iterable[GameRecord],
    username: str,
    limit: int = settings.BEST_GAME_LIMIT,
    min_accuracy: float = settings.BEST_GAME_MIN_ACCURACY,
) -> list[BestGameEntry]:
    """Best-first list of the player's games at or above the accuracy floor."""
    entries = [entry for entry in (evaluate_game(g, username) for g in games) if entry]
    eligible = [e for e in entries if e.player_accuracy >= min_accuracy]
    eligible.sort(key=lambda e: -e.game_score)
    return eligible[:max(limit, 0)]
