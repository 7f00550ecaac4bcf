"""Tests for best_games.py"""

import logging
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from best_games import analyze_best_games, evaluate_game, score_game, scoring_outcome
from models import Accuracies, GameRecord, Outcome, PlayerSide, UnknownResult, parse_result


def make_game(
    white_accuracy: float | None = 90.0,
    black_accuracy: float | None = 80.0,
    white_result: str = "win",
    black_result: str = "resigned",
    white_rating: int = 1500,
    black_rating: int = 1500,
    time_class: str = "blitz",
    url: str = "https://www.chess.com/game/live/1",
) -> GameRecord:
    return GameRecord(
        white=PlayerSide("a", white_rating, parse_result(white_result)),
        black=PlayerSide("b", black_rating, parse_result(black_result)),
        time_class=time_class,
        end_time=0,
        accuracies=Accuracies(white_accuracy, black_accuracy),
        url=url,
    )


def test_scoring_outcome_defaults_to_loss():
    assert scoring_outcome(parse_result("win")) is Outcome.WIN
    assert scoring_outcome(parse_result("agreed")) is Outcome.DRAW
    assert scoring_outcome(parse_result("timevsinsufficient")) is Outcome.DRAW
    assert scoring_outcome(parse_result("checkmated")) is Outcome.LOSS
    # Uncounted by the aggregator, but scored as losses here
    assert scoring_outcome(parse_result("lose")) is Outcome.LOSS
    assert scoring_outcome(parse_result("kingofthehill")) is Outcome.LOSS
    assert scoring_outcome(UnknownResult("something-new")) is Outcome.LOSS


def test_score_win_equal_ratings():
    # 100 + 45 + 0 + 2.5
    assert score_game(Outcome.WIN, 90, 80, 0, "blitz") == pytest.approx(147.5)


def test_score_upset_bonus_is_capped():
    assert score_game(Outcome.LOSS, 80, 80, -200, "blitz") == pytest.approx(40 + 10)
    assert score_game(Outcome.LOSS, 80, 80, -1000, "blitz") == pytest.approx(40 + 25)


def test_score_favorite_penalty_is_capped():
    assert score_game(Outcome.DRAW, 80, 80, 200, "blitz") == pytest.approx(50 + 40 - 5)
    assert score_game(Outcome.DRAW, 80, 80, 1000, "blitz") == pytest.approx(50 + 40 - 10)


def test_score_time_class_multiplier():
    base = score_game(Outcome.WIN, 90, 80, 0, "blitz")
    assert score_game(Outcome.WIN, 90, 80, 0, "bullet") == pytest.approx(base * 0.9)
    assert score_game(Outcome.WIN, 90, 80, 0, "rapid") == pytest.approx(base * 1.1)
    assert score_game(Outcome.WIN, 90, 80, 0, "daily") == pytest.approx(base * 1.2)
    assert score_game(Outcome.WIN, 90, 80, 0, "chess960") == pytest.approx(base)


def test_evaluate_game_from_black_side():
    game = make_game(white_accuracy=70, black_accuracy=95, white_result="timeout",
                     black_result="win", white_rating=1600, black_rating=1500)
    entry = evaluate_game(game, "B")
    assert entry.player_color == "black"
    assert entry.player_accuracy == 95
    assert entry.opponent_accuracy == 70
    assert entry.rating_difference == -100
    assert entry.result is Outcome.WIN
    # 100 + 47.5 + 5 + 6.25
    assert entry.game_score == pytest.approx(158.75)


def test_player_not_in_game_is_skipped():
    assert evaluate_game(make_game(), "carol") is None


def test_incomplete_accuracy_is_skipped_with_diagnostic(caplog):
    game = make_game(black_accuracy=None, url="https://www.chess.com/game/live/42")
    with caplog.at_level(logging.DEBUG, logger="best_games"):
        assert evaluate_game(game, "a") is None
    assert "https://www.chess.com/game/live/42" in caplog.text


def test_game_without_accuracies_is_skipped():
    game = GameRecord(
        white=PlayerSide("a", 1500, parse_result("win")),
        black=PlayerSide("b", 1500, parse_result("resigned")),
        time_class="blitz",
        end_time=0,
    )
    assert analyze_best_games([game], "a") == []


def test_low_accuracy_game_excluded_regardless_of_score():
    game = make_game(white_accuracy=65, black_accuracy=80, white_rating=1000, black_rating=2000)
    assert analyze_best_games([game], "a") == []
    for floor in (66, 70, 85.5):
        assert analyze_best_games([game], "a", min_accuracy=floor) == []


def test_accuracy_floor_is_inclusive():
    game = make_game(white_accuracy=70)
    assert len(analyze_best_games([game], "a")) == 1


def test_ordering_and_limit():
    games = [
        make_game(white_result="resigned", black_result="win", url="loss"),
        make_game(url="win-blitz"),
        make_game(time_class="daily", url="win-daily"),
        make_game(white_result="agreed", black_result="agreed", url="draw"),
    ]
    best = analyze_best_games(games, "a", limit=3)
    assert [e.game.url for e in best] == ["win-daily", "win-blitz", "draw"]
    assert analyze_best_games(games, "a", limit=0) == []


def test_floor_never_violated():
    games = [
        make_game(white_accuracy=acc, black_accuracy=60, url=str(acc))
        for acc in (50, 69.9, 70, 71, 88, 99)
    ]
    for limit in (1, 3, 10):
        for entry in analyze_best_games(games, "a", limit=limit):
            assert entry.player_accuracy >= 70
