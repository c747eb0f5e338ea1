from collections import Counter
from typing import Iterable

from golf_scoring.models import EntrantTotals, LeaderboardEntry, is_stableford


def format_relative(value: int) -> str:
    if value == 0:
        return "E"
    if value > 0:
        return f"+{value}"
    return str(value)


def ranking_key(totals: EntrantTotals, fmt: str) -> int:
    """Lower is better for every format."""
    if is_stableford(fmt):
        return -(totals.total_points or 0)
    return totals.score_to_par


def _entry(
    totals: EntrantTotals,
    rank: int,
    is_tied: bool,
    total_holes: int | None,
) -> LeaderboardEntry:
    finished = bool(total_holes) and totals.holes_completed >= total_holes
    return LeaderboardEntry(
        entrant_id=totals.entrant_id,
        name=totals.name,
        total_strokes=totals.total_strokes,
        score_to_par=totals.score_to_par,
        holes_completed=totals.holes_completed,
        rank=rank,
        is_tied=is_tied,
        finished=finished,
        total_points=totals.total_points,
        net_to_par=totals.net_to_par,
        course_handicap=totals.course_handicap,
        status=totals.status,
    )


def rank_entrants(
    aggregates: Iterable[EntrantTotals],
    fmt: str,
    total_holes: int | None = None,
) -> list[LeaderboardEntry]:
    """
    Order aggregates into a leaderboard with golf-style shared ranks (1, 1, 3).

    Ties are not broken. Entrants that have not completed a hole come last,
    share one rank and are listed by name.
    """
    records = list(aggregates)
    started = [item for item in records if item.holes_completed > 0]
    waiting = [item for item in records if item.holes_completed <= 0]

    started.sort(
        key=lambda item: (
            ranking_key(item, fmt),
            -item.holes_completed,
            item.name,
            str(item.entrant_id),
        )
    )
    key_counts = Counter(ranking_key(item, fmt) for item in started)

    leaderboard: list[LeaderboardEntry] = []
    rank = 0
    previous_key = None
    for position, item in enumerate(started, 1):
        key = ranking_key(item, fmt)
        if key != previous_key:
            rank = position
            previous_key = key
        leaderboard.append(_entry(item, rank, key_counts[key] > 1, total_holes))

    waiting.sort(key=lambda item: (item.name, str(item.entrant_id)))
    waiting_rank = len(started) + 1
    for item in waiting:
        leaderboard.append(_entry(item, waiting_rank, len(waiting) > 1, total_holes))
    return leaderboard


def leaderboard_is_live(entries: Iterable[LeaderboardEntry], total_holes: int) -> bool:
    for entry in entries:
        if entry.status == "in_progress":
            return True
        if 0 < entry.holes_completed < total_holes:
            return True
    return False
