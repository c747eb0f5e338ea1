"""
Course handicap and per-hole stroke allocation.

Course Handicap = round(Handicap Index x (Slope Rating / 113) + (Course Rating - Par))

Strokes are spread over the round by stroke index (1 = hardest). Every hole
gets ``course_handicap // total_holes`` strokes and the remainder goes to the
lowest stroke indexes. The same rule covers 9, 10 or 18 hole rounds.
"""

import math
from typing import Iterable

from golf_scoring.models import Hole, Player

STANDARD_SLOPE = 113
MAX_STROKES_PER_HOLE = 2


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def compute_course_handicap(
    handicap_index: float,
    slope_rating: int,
    course_rating: float,
    par: int,
) -> int:
    raw = handicap_index * (slope_rating / STANDARD_SLOPE) + (course_rating - par)
    return round_half_up(raw)


def strokes_on_hole(course_handicap: int, stroke_index: int | None, total_holes: int = 18) -> int:
    """
    Handicap strokes received on one hole: 0, 1 or 2.

    A hole without a stroke index plays at gross, and plus handicaps receive
    nothing.
    """
    if stroke_index is None or course_handicap <= 0 or total_holes == 0:
        return 0
    base = course_handicap // total_holes
    remainder = course_handicap % total_holes
    extra = 1 if stroke_index <= remainder else 0
    return min(MAX_STROKES_PER_HOLE, base + extra)


def stroke_allocation(course_handicap: int, holes: Iterable[Hole]) -> dict[int, int]:
    course = list(holes)
    total_holes = len(course)
    return {
        hole.number: strokes_on_hole(course_handicap, hole.stroke_index, total_holes)
        for hole in course
    }


def resolve_course_handicap(
    player: Player,
    par_total: int,
    slope_rating: int | None = None,
    course_rating: float | None = None,
) -> int:
    if player.handicap_index is not None:
        return compute_course_handicap(
            player.handicap_index,
            slope_rating if slope_rating is not None else STANDARD_SLOPE,
            course_rating if course_rating is not None else par_total,
            par_total,
        )
    # legacy integer handicap, scratch when unset
    return round_half_up(player.handicap or 0)


def has_handicap(player: Player) -> bool:
    return player.handicap_index is not None or bool(player.handicap and player.handicap > 0)
