from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Union

STABLEFORD = "Stableford"
STROKE_PLAY = "Stroke Play"
INDIVIDUAL_FORMATS = (STABLEFORD, STROKE_PLAY)

GROUP_STATUSES = ("not_started", "in_progress", "completed")

EntrantId = Union[int, str]


def is_individual_format(fmt: str | None) -> bool:
    return fmt in INDIVIDUAL_FORMATS


def is_stableford(fmt: str | None) -> bool:
    return fmt == STABLEFORD


def entrant_kind_for_format(fmt: str | None) -> str:
    """Individual formats score players; everything else scores groups."""
    return "player" if is_individual_format(fmt) else "group"


@dataclass(frozen=True)
class Hole:
    number: int
    par: int
    stroke_index: int | None = None
    yardage: int | None = None


@dataclass(frozen=True)
class Player:
    id: EntrantId
    name: str
    handicap_index: float | None = None
    handicap: float = 0.0
    kind: str = field(default="player", init=False)


@dataclass(frozen=True)
class Group:
    id: EntrantId
    name: str
    current_hole: int = 0
    status: str = "not_started"
    kind: str = field(default="group", init=False)


Entrant = Union[Player, Group]


@dataclass(frozen=True)
class ScoreRecord:
    entrant_id: EntrantId
    hole_number: int
    strokes: int
    entered_by: str | None = None
    submitted_at: datetime | None = None


@dataclass(frozen=True)
class EntrantTotals:
    entrant_id: EntrantId
    name: str
    kind: str
    total_strokes: int = 0
    score_to_par: int = 0
    holes_completed: int = 0
    total_points: int | None = None
    net_strokes: int | None = None
    net_to_par: int | None = None
    course_handicap: int | None = None
    status: str | None = None


@dataclass(frozen=True)
class LeaderboardEntry:
    entrant_id: EntrantId
    name: str
    total_strokes: int
    score_to_par: int
    holes_completed: int
    rank: int
    is_tied: bool
    finished: bool = False
    total_points: int | None = None
    net_to_par: int | None = None
    course_handicap: int | None = None
    status: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ScorecardRow:
    hole_number: int
    par: int
    stroke_index: int | None
    gross: int | None
    strokes_received: int
    net: int | None
    points: int | None


@dataclass(frozen=True)
class Scorecard:
    player_id: EntrantId
    name: str
    course_handicap: int
    has_handicap: bool
    rows: tuple[ScorecardRow, ...]
    out_gross: int
    in_gross: int
    total_gross: int
    out_net: int
    in_net: int
    total_net: int
    out_points: int
    in_points: int
    total_points: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class TournamentSnapshot:
    """Everything the engine needs for one leaderboard computation."""

    holes: tuple[Hole, ...]
    format: str = STROKE_PLAY
    players: tuple[Player, ...] = ()
    groups: tuple[Group, ...] = ()
    scores: tuple[ScoreRecord, ...] = ()
    slope_rating: int | None = None
    course_rating: float | None = None
    stableford_points_config: Any = None
    tournament_id: EntrantId | None = None
    name: str | None = None

    @property
    def par_total(self) -> int:
        return sum(hole.par for hole in self.holes)

    @property
    def total_holes(self) -> int:
        return len(self.holes)

    def entrants(self) -> tuple[Entrant, ...]:
        if entrant_kind_for_format(self.format) == "player":
            return tuple(self.players)
        return tuple(self.groups)
