#!/usr/bin/env python3
"""
Export CLI: player analytics report in various formats

Formats: json (full report), csv (opening stats), pgn (best games), text

Usage:
  python export.py --username hikaru --format json --output report.json
  python export.py --username hikaru --months 3 --format pgn --output best.pgn
"""

import argparse
import asyncio
import csv
import io
import json
import sys
from dataclasses import asdict
from pathlib import Path

import chess.pgn

sys.path.insert(0, str(Path(__file__).resolve().parent))
import settings
from best_games import analyze_best_games
from chesscom_client import ChessComClient, ChessComError
from models import BestGameEntry, ColorGameStat, GameRecord, OpeningStat, result_value
from opening_stats import aggregate

CSV_FIELDS = ["color", "opening", "code", "games", "wins", "losses", "draws", "win_rate",
              "average_rating"]


def opening_stat_to_dict(stat: OpeningStat) -> dict:
    return asdict(stat)


def color_stat_to_dict(stat: ColorGameStat) -> dict:
    return asdict(stat)


def game_to_dict(game: GameRecord) -> dict:
    """Flat summary of a game (PGN omitted)."""
    out = {
        "url": game.url,
        "time_class": game.time_class,
        "time_control": game.time_control,
        "end_time": game.end_time,
        "rated": game.rated,
        "white": {
            "username": game.white.username,
            "rating": game.white.rating,
            "result": result_value(game.white.result),
        },
        "black": {
            "username": game.black.username,
            "rating": game.black.rating,
            "result": result_value(game.black.result),
        },
    }
    if game.accuracies is not None:
        out["accuracies"] = {"white": game.accuracies.white, "black": game.accuracies.black}
    return out


def best_game_to_dict(entry: BestGameEntry) -> dict:
    return {
        "game": game_to_dict(entry.game),
        "player_color": entry.player_color,
        "player_rating": entry.player_rating,
        "opponent_rating": entry.opponent_rating,
        "player_accuracy": entry.player_accuracy,
        "opponent_accuracy": entry.opponent_accuracy,
        "rating_difference": entry.rating_difference,
        "game_score": round(entry.game_score, 2),
        "result": entry.result.value,
        "pgn": entry.game.pgn,
    }


def build_report(
    username: str,
    games: list[GameRecord],
    min_games: int = settings.MIN_GAMES_FOR_OPENING_STAT,
    max_results: int = settings.MAX_OPENING_RESULTS,
    best_limit: int = settings.BEST_GAME_LIMIT,
    min_accuracy: float = settings.BEST_GAME_MIN_ACCURACY,
) -> dict:
    """Opening stats, overall stats and best games for one player."""
    analytics = aggregate(games, username, min_games, max_results)
    best = analyze_best_games(games, username, best_limit, min_accuracy)
    openings = analytics.opening_stats
    overall = analytics.overall_stats
    return {
        "username": username,
        "games_analyzed": len(games),
        "openings": {
            "white": [opening_stat_to_dict(s) for s in openings.white],
            "black": [opening_stat_to_dict(s) for s in openings.black],
            "combined": [opening_stat_to_dict(s) for s in openings.combined],
        },
        "overall": {
            "white": color_stat_to_dict(overall.white),
            "black": color_stat_to_dict(overall.black),
            "combined": color_stat_to_dict(overall.combined),
        },
        "best_games": [best_game_to_dict(e) for e in best],
    }


def export_json(report: dict, output_path: Path) -> int:
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(report, f, indent=2)
    return 1


def export_csv(report: dict, output_path: Path) -> int:
    """One row per opening stat, white then black then combined."""
    rows = []
    for view in ("white", "black", "combined"):
        rows.extend(report["openings"][view])
    with open(output_path, "w", encoding="utf-8", newline="") as f:
        w = csv.DictWriter(f, fieldnames=CSV_FIELDS)
        w.writeheader()
        for row in rows:
            w.writerow({k: row[k] for k in CSV_FIELDS})
    return len(rows)


def best_game_to_pgn(best: dict) -> chess.pgn.Game | None:
    """Re-read a best game's PGN and tag it with its score."""
    if not best.get("pgn"):
        return None
    game = chess.pgn.read_game(io.StringIO(best["pgn"]))
    if game is None:
        return None
    game.headers["BestGameScore"] = f"{best['game_score']:.2f}"
    url = best["game"]["url"]
    if url and "Link" not in game.headers:
        game.headers["Link"] = url
    return game


def export_pgn(report: dict, output_path: Path) -> int:
    count = 0
    with open(output_path, "w", encoding="utf-8") as f:
        for entry in report["best_games"]:
            game = best_game_to_pgn(entry)
            if game is None:
                continue
            print(game, file=f, end="\n\n")
            count += 1
    return count


def format_text(report: dict) -> str:
    lines = [f"Player: {report['username']} ({report['games_analyzed']} games)", ""]
    for view in ("white", "black", "combined"):
        s = report["overall"][view]
        lines.append(
            f"{view:>8}: {s['games']} games, +{s['wins']} -{s['losses']} ={s['draws']}, "
            f"{s['win_rate']}% wins, avg rating {s['average_rating']}"
        )
    lines.append("")
    lines.append("Openings (combined):")
    for s in report["openings"]["combined"]:
        code = f" [{s['code']}]" if s["code"] else ""
        lines.append(f"  {s['opening']}{code}: {s['games']} games, {s['win_rate']}% wins")
    lines.append("")
    lines.append("Best games:")
    for i, b in enumerate(report["best_games"], 1):
        lines.append(
            f"  {i}. {b['game_score']:.2f} {b['result']} as {b['player_color']} "
            f"({b['player_accuracy']:.1f}% vs {b['opponent_accuracy']:.1f}%) {b['game']['url']}"
        )
    return "\n".join(lines) + "\n"


def export_text(report: dict, output_path: Path) -> int:
    output_path.write_text(format_text(report), encoding="utf-8")
    return 1


EXPORTERS = {
    "json": export_json,
    "csv": export_csv,
    "pgn": export_pgn,
    "text": export_text,
}


async def fetch_games(username: str, months: int) -> list[GameRecord]:
    async with ChessComClient() as client:
        return await client.get_historical_games(username, months)


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--username", "-u", required=True)
    parser.add_argument("--months", type=int, default=settings.DEFAULT_MONTHS_BACK)
    parser.add_argument("--limit", type=int, default=settings.BEST_GAME_LIMIT,
                        help="Best games to include")
    parser.add_argument("--format", choices=sorted(EXPORTERS), default="json")
    parser.add_argument("--output", "-o", required=True)
    args = parser.parse_args()

    if not settings.is_valid_username(args.username):
        print(f"Invalid username: {args.username}", file=sys.stderr)
        sys.exit(1)

    try:
        games = asyncio.run(fetch_games(args.username, args.months))
    except ChessComError as e:
        print(f"Error fetching games: {e}", file=sys.stderr)
        sys.exit(1)

    report = build_report(args.username, games, best_limit=args.limit)
    out = Path(args.output)
    n = EXPORTERS[args.format](report, out)
    print(f"Exported {n} {args.format} item(s) to {out}")


if __name__ == "__main__":
    main()
