"""
FastAPI Query API for chess.com player insights

Endpoints:
  GET /player/{username}/openings  - Opening stats by color
  GET /player/{username}/stats  - Overall win/loss/draw by color
  GET /player/{username}/best-games  - Top-scored games
  GET /opening/eco/{code}  - ECO table lookup
  POST /opening/identify  - Identify opening from SAN moves
"""

import sys
from dataclasses import asdict
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import chess
from fastapi import FastAPI, HTTPException, Query
from pydantic import BaseModel

import settings
from best_games import analyze_best_games
from chesscom_client import ChessComClient, ChessComError
from eco_table import ECO_OPENINGS, opening_by_moves, parse_pgn_moves
from export import best_game_to_dict
from opening_classifier import base_opening_name
from opening_stats import analyze_games_by_color, analyze_openings_by_color
from request_cache import RequestCache

app = FastAPI(title="Chess.com Player Insights API", version="1.0.0")
app.state.cache = RequestCache()


class IdentifyRequest(BaseModel):
    moves: str  # e.g. "1.e4 c5 2.Nf3 d6"


def _check_username(username: str) -> None:
    if not settings.is_valid_username(username):
        raise HTTPException(status_code=400, detail=f"Invalid username: {username}")


async def _fetch_games(username: str, months: int):
    _check_username(username)
    try:
        async with ChessComClient(cache=app.state.cache) as client:
            return await client.get_historical_games(username, months)
    except ChessComError as e:
        if e.status_code == 404:
            raise HTTPException(status_code=404, detail=f"Player {username} not found")
        raise HTTPException(status_code=502, detail=str(e))


@app.get("/player/{username}/openings")
async def player_openings(
    username: str,
    months: int = Query(settings.DEFAULT_MONTHS_BACK, ge=1, le=24),
    min_games: int = Query(settings.MIN_GAMES_FOR_OPENING_STAT, ge=1),
    limit: int = Query(settings.MAX_OPENING_RESULTS, ge=1, le=100),
):
    """Opening stats for white, black and both colors combined."""
    games = await _fetch_games(username, months)
    stats = analyze_openings_by_color(games, username, min_games, limit)
    return {
        "username": username,
        "games_analyzed": len(games),
        "white": [asdict(s) for s in stats.white],
        "black": [asdict(s) for s in stats.black],
        "combined": [asdict(s) for s in stats.combined],
    }


@app.get("/player/{username}/stats")
async def player_stats(
    username: str,
    months: int = Query(settings.DEFAULT_MONTHS_BACK, ge=1, le=24),
):
    games = await _fetch_games(username, months)
    stats = analyze_games_by_color(games, username)
    return {"username": username, **asdict(stats)}


@app.get("/player/{username}/best-games")
async def player_best_games(
    username: str,
    months: int = Query(settings.DEFAULT_MONTHS_BACK, ge=1, le=24),
    limit: int = Query(settings.BEST_GAME_LIMIT, ge=1, le=50),
):
    games = await _fetch_games(username, months)
    best = analyze_best_games(games, username, limit)
    return {"username": username, "best_games": [best_game_to_dict(e) for e in best]}


@app.get("/opening/eco/{code}")
def get_opening_by_eco(code: str):
    """Look up an ECO code in the opening table."""
    record = ECO_OPENINGS.get(code.upper())
    if not record:
        raise HTTPException(status_code=404, detail=f"ECO {code} not found")
    return {
        "eco_code": record.code,
        "name": record.name,
        "family": base_opening_name(record.name),
        "moves": record.moves,
    }


@app.post("/opening/identify")
def identify_opening(body: IdentifyRequest):
    """Replay SAN moves and return the deepest matching table opening."""
    moves = parse_pgn_moves(body.moves)
    if not moves:
        raise HTTPException(status_code=400, detail="Invalid PGN")
    board = chess.Board()
    for san in moves:
        try:
            board.push_san(san)
        except ValueError:
            raise HTTPException(status_code=400, detail=f"Invalid move: {san}")

    record = opening_by_moves(" ".join(moves))
    if not record:
        raise HTTPException(status_code=404, detail="No matching opening")
    return {
        "eco_code": record.code,
        "name": record.name,
        "family": base_opening_name(record.name),
        "fen": board.fen(),
    }


@app.get("/health")
def health():
    return {"status": "ok"}
