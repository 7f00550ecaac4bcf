"""Tests for export.py"""

import csv
import json
import sys
from pathlib import Path
from unittest.mock import AsyncMock, patch

import chess.pgn
import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from chesscom_client import ChessComError
from export import (
    best_game_to_pgn,
    build_report,
    export_csv,
    export_json,
    export_pgn,
    export_text,
    format_text,
    main,
)
from models import Accuracies, GameRecord, PlayerSide, parse_result

SCANDINAVIAN_PGN = """[Event "Live Chess"]
[Site "Chess.com"]
[White "alice"]
[Black "bob"]
[Result "1-0"]
[ECO "B01"]

1. e4 {[%clk 0:02:59.9]} 1... d5 {[%clk 0:02:59]} 2. exd5 Qxd5 3. Nc3 1-0
"""


def make_game(
    end_time: int,
    white_accuracy: float | None = 90.0,
    result: str = "win",
    pgn: str | None = SCANDINAVIAN_PGN,
) -> GameRecord:
    other = "resigned" if result == "win" else "win"
    return GameRecord(
        white=PlayerSide("alice", 1500, parse_result(result)),
        black=PlayerSide("bob", 1480, parse_result(other)),
        time_class="rapid",
        end_time=end_time,
        pgn=pgn,
        accuracies=Accuracies(white_accuracy, 80.0),
        url=f"https://www.chess.com/game/live/{end_time}",
    )


@pytest.fixture
def games():
    return [make_game(1), make_game(2, result="timeout"), make_game(3, white_accuracy=50.0)]


def test_build_report_sections(games):
    report = build_report("alice", games)
    assert report["username"] == "alice"
    assert report["games_analyzed"] == 3
    assert report["overall"]["white"]["games"] == 3
    assert report["overall"]["combined"]["wins"] == 2
    combined = report["openings"]["combined"]
    assert combined[0]["opening"] == "Scandinavian Defense"
    assert combined[0]["color"] == "both"
    # the 50% accuracy game is below the floor
    assert len(report["best_games"]) == 2


def test_best_game_dict_uses_plain_values(games):
    best = build_report("alice", games)["best_games"][0]
    assert best["result"] == "win"
    assert best["player_color"] == "white"
    assert best["game"]["white"]["result"] == "win"
    assert best["game"]["accuracies"] == {"white": 90.0, "black": 80.0}
    json.dumps(best)


def test_json_export_round_trips(games, tmp_path):
    out = tmp_path / "report.json"
    assert export_json(build_report("alice", games), out) == 1
    data = json.loads(out.read_text())
    assert data["overall"]["white"]["games"] == 3


def test_csv_export_one_row_per_opening_stat(games, tmp_path):
    out = tmp_path / "openings.csv"
    n = export_csv(build_report("alice", games), out)
    rows = list(csv.DictReader(out.open(encoding="utf-8")))
    assert n == len(rows) == 2
    assert [r["color"] for r in rows] == ["white", "both"]
    assert rows[0]["opening"] == "Scandinavian Defense"
    assert rows[0]["code"] == "B01"
    assert rows[0]["games"] == "3"


def test_pgn_export_adds_score_header(games, tmp_path):
    out = tmp_path / "best.pgn"
    report = build_report("alice", games)
    assert export_pgn(report, out) == 2

    with open(out, encoding="utf-8") as f:
        game = chess.pgn.read_game(f)
    assert game.headers["BestGameScore"] == f"{report['best_games'][0]['game_score']:.2f}"
    assert game.headers["ECO"] == "B01"
    assert game.headers["Link"] == "https://www.chess.com/game/live/1"
    assert [m.uci() for m in game.mainline_moves()][:2] == ["e2e4", "d7d5"]


def test_best_game_without_pgn_is_not_exported():
    report = build_report("alice", [make_game(1, pgn=None)])
    assert best_game_to_pgn(report["best_games"][0]) is None


def test_text_export(games, tmp_path):
    report = build_report("alice", games)
    text = format_text(report)
    assert "Player: alice (3 games)" in text
    assert "Scandinavian Defense [B01]" in text
    out = tmp_path / "report.txt"
    export_text(report, out)
    assert out.read_text(encoding="utf-8") == text


def test_main_writes_requested_format(games, tmp_path, capsys):
    out = tmp_path / "report.json"
    argv = ["export.py", "--username", "alice", "--format", "json", "--output", str(out)]
    with patch.object(sys, "argv", argv), \
         patch("export.fetch_games", new=AsyncMock(return_value=games)) as fetch:
        main()
    fetch.assert_awaited_once_with("alice", 6)
    assert json.loads(out.read_text())["username"] == "alice"
    assert "Exported 1 json" in capsys.readouterr().out


def test_main_rejects_invalid_username(tmp_path):
    argv = ["export.py", "--username", "no spaces!", "--output", str(tmp_path / "x.json")]
    with patch.object(sys, "argv", argv), pytest.raises(SystemExit) as exc:
        main()
    assert exc.value.code == 1


def test_main_reports_fetch_errors(tmp_path, capsys):
    argv = ["export.py", "--username", "ghost", "--output", str(tmp_path / "x.json")]
    failing = AsyncMock(side_effect=ChessComError("Not found", status_code=404))
    with patch.object(sys, "argv", argv), patch("export.fetch_games", new=failing), \
         pytest.raises(SystemExit):
        main()
    assert "Not found" in capsys.readouterr().err
