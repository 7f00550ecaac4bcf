"""Data models for the game analytics engine."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Literal

Color = Literal["white", "black"]


class ResultCode(str, Enum):
    """Per-side result strings reported by chess.com."""

    WIN = "win"
    CHECKMATED = "checkmated"
    AGREED = "agreed"
    TIMEOUT = "timeout"
    RESIGNED = "resigned"
    STALEMATE = "stalemate"
    LOSE = "lose"
    INSUFFICIENT = "insufficient"
    ABANDONED = "abandoned"
    KINGOFTHEHILL = "kingofthehill"
    THREECHECK = "threecheck"
    TIMEVSINSUFFICIENT = "timevsinsufficient"


@dataclass(frozen=True)
class UnknownResult:
    """A result string outside ResultCode, kept verbatim."""

    raw: str


PlayerResult = ResultCode | UnknownResult

LOSS_RESULTS = frozenset({
    ResultCode.CHECKMATED,
    ResultCode.TIMEOUT,
    ResultCode.RESIGNED,
    ResultCode.ABANDONED,
})
DRAW_RESULTS = frozenset({
    ResultCode.AGREED,
    ResultCode.STALEMATE,
    ResultCode.INSUFFICIENT,
    ResultCode.TIMEVSINSUFFICIENT,
})


class Outcome(str, Enum):
    WIN = "win"
    DRAW = "draw"
    LOSS = "loss"


def parse_result(raw) -> PlayerResult:
    """Map a raw result string onto ResultCode, or UnknownResult if it isn't one."""
    if isinstance(raw, ResultCode):
        return raw
    try:
        return ResultCode(raw)
    except ValueError:
        return UnknownResult("" if raw is None else str(raw))


def result_value(result: PlayerResult) -> str:
    """The raw string a result was parsed from."""
    if isinstance(result, UnknownResult):
        return result.raw
    return result.value


@dataclass(frozen=True)
class PlayerSide:
    username: str
    rating: int
    result: PlayerResult
    uuid: str | None = None


@dataclass(frozen=True)
class Accuracies:
    white: float | None = None
    black: float | None = None

    @property
    def complete(self) -> bool:
        return self.white is not None and self.black is not None

    def for_color(self, color: Color) -> float | None:
        return self.white if color == "white" else self.black


@dataclass(frozen=True)
class GameRecord:
    """One finished game as returned by a monthly archive."""

    white: PlayerSide
    black: PlayerSide
    time_class: str
    end_time: int
    pgn: str | None = None
    accuracies: Accuracies | None = None
    url: str = ""
    time_control: str = ""
    rated: bool = True
    rules: str = "chess"

    def color_of(self, username: str) -> Color | None:
        """Side played by username (case-insensitive), white taking precedence."""
        name = username.lower()
        if self.white.username.lower() == name:
            return "white"
        if self.black.username.lower() == name:
            return "black"
        return None

    def side(self, color: Color) -> PlayerSide:
        return self.white if color == "white" else self.black

    def opponent(self, color: Color) -> PlayerSide:
        return self.black if color == "white" else self.white


def _accuracy(value) -> float | None:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def _rating(value) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return int(value)


def parse_player(data: dict) -> PlayerSide:
    return PlayerSide(
        username=str(data.get("username") or ""),
        rating=_rating(data.get("rating")),
        result=parse_result(data.get("result")),
        uuid=data.get("uuid"),
    )


def parse_game(data: dict) -> GameRecord:
    """Build a GameRecord from a chess.com archive entry.

    Raises ValueError when either player object is missing.
    """
    white = data.get("white")
    black = data.get("black")
    if not isinstance(white, dict) or not isinstance(black, dict):
        raise ValueError(f"game {data.get('url', '?')} has no player data")

    accuracies = None
    raw_acc = data.get("accuracies")
    if isinstance(raw_acc, dict):
        accuracies = Accuracies(
            white=_accuracy(raw_acc.get("white")),
            black=_accuracy(raw_acc.get("black")),
        )

    end_time = data.get("end_time")
    return GameRecord(
        white=parse_player(white),
        black=parse_player(black),
        time_class=str(data.get("time_class") or ""),
        end_time=end_time if isinstance(end_time, int) else 0,
        pgn=data.get("pgn") or None,
        accuracies=accuracies,
        url=data.get("url") or "",
        time_control=str(data.get("time_control") or ""),
        rated=bool(data.get("rated", True)),
        rules=data.get("rules") or "chess",
    )


@dataclass(frozen=True)
class OpeningRecord:
    """One row of the ECO table."""

    code: str
    name: str
    moves: str | None = None


@dataclass(frozen=True)
class ClassifiedOpening:
    name: str
    code: str | None = None


@dataclass
class AggregateBucket:
    """Running win/loss/draw totals for one opening family or one color."""

    games: int = 0
    wins: int = 0
    losses: int = 0
    draws: int = 0
    total_rating: int = 0
    code: str | None = None

    def record(self, outcome: Outcome | None, rating: int) -> None:
        self.games += 1
        self.total_rating += rating
        if outcome is Outcome.WIN:
            self.wins += 1
        elif outcome is Outcome.LOSS:
            self.losses += 1
        elif outcome is Outcome.DRAW:
            self.draws += 1

    def merged(self, other: "AggregateBucket") -> "AggregateBucket":
        return AggregateBucket(
            games=self.games + other.games,
            wins=self.wins + other.wins,
            losses=self.losses + other.losses,
            draws=self.draws + other.draws,
            total_rating=self.total_rating + other.total_rating,
            code=self.code if self.code is not None else other.code,
        )


@dataclass(frozen=True)
class OpeningStat:
    opening: str
    code: str | None
    games: int
    wins: int
    losses: int
    draws: int
    win_rate: int
    average_rating: int
    color: Literal["white", "black", "both"]


@dataclass(frozen=True)
class ColorGameStat:
    games: int = 0
    wins: int = 0
    losses: int = 0
    draws: int = 0
    win_rate: int = 0
    average_rating: int = 0


@dataclass
class ColoredOpeningStats:
    white: list[OpeningStat] = field(default_factory=list)
    black: list[OpeningStat] = field(default_factory=list)
    combined: list[OpeningStat] = field(default_factory=list)


@dataclass
class ColorSeparatedStats:
    white: ColorGameStat = field(default_factory=ColorGameStat)
    black: ColorGameStat = field(default_factory=ColorGameStat)
    combined: ColorGameStat = field(default_factory=ColorGameStat)


@dataclass
class GameAnalytics:
    opening_stats: ColoredOpeningStats
    overall_stats: ColorSeparatedStats


@dataclass(frozen=True)
class BestGameEntry:
    game: GameRecord
    player_color: Color
    player_rating: int
    opponent_rating: int
    player_accuracy: float
    opponent_accuracy: float
    rating_difference: int
    game_score: float
    result: Outcome
