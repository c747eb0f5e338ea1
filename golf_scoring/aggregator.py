import logging
from datetime import timezone
from typing import Iterable, Mapping

from golf_scoring.handicap import strokes_on_hole
from golf_scoring.models import (
    Entrant,
    EntrantId,
    EntrantTotals,
    Group,
    Hole,
    ScoreRecord,
    is_individual_format,
    is_stableford,
)
from golf_scoring.stableford import DEFAULT_STABLEFORD_CONFIG, StablefordConfig

logger = logging.getLogger(__name__)


class ScoringError(ValueError):
    pass


class MissingHolesError(ScoringError):
    pass


def _submission_key(position: int, record: ScoreRecord) -> tuple:
    # Untimestamped records sort before timestamped ones; list position breaks ties.
    # Naive timestamps are read as UTC so they compare with aware ones.
    submitted_at = record.submitted_at
    if submitted_at is None:
        return (0, position)
    if submitted_at.tzinfo is None:
        submitted_at = submitted_at.replace(tzinfo=timezone.utc)
    return (1, submitted_at, position)


def latest_scores(
    records: Iterable[ScoreRecord],
    hole_numbers: Iterable[int] | None = None,
) -> dict[EntrantId, dict[int, ScoreRecord]]:
    """
    Collapse submissions to one record per (entrant, hole), latest submission wins.

    Records for holes outside ``hole_numbers`` are dropped.
    """
    allowed = set(hole_numbers) if hole_numbers is not None else None
    ordered = sorted(enumerate(records), key=lambda item: _submission_key(*item))
    latest: dict[EntrantId, dict[int, ScoreRecord]] = {}
    for _, record in ordered:
        if allowed is not None and record.hole_number not in allowed:
            logger.warning(
                "Ignoring score for entrant %s on unknown hole %s",
                record.entrant_id,
                record.hole_number,
            )
            continue
        latest.setdefault(record.entrant_id, {})[record.hole_number] = record
    return latest


def _empty_totals(entrant: Entrant, fmt: str, course_handicap: int | None) -> EntrantTotals:
    individual = is_individual_format(fmt)
    return EntrantTotals(
        entrant_id=entrant.id,
        name=entrant.name,
        kind=entrant.kind,
        total_points=0 if is_stableford(fmt) else None,
        net_strokes=0 if individual else None,
        net_to_par=0 if individual else None,
        course_handicap=course_handicap if individual else None,
        status=entrant.status if isinstance(entrant, Group) else None,
    )


def _totals_for_entrant(
    entrant: Entrant,
    scores: Mapping[int, ScoreRecord],
    holes_by_number: Mapping[int, Hole],
    fmt: str,
    course_handicap: int,
    config: StablefordConfig,
) -> EntrantTotals:
    individual = is_individual_format(fmt)
    stableford = is_stableford(fmt)
    total_holes = len(holes_by_number)

    gross = 0
    par_completed = 0
    net = 0
    points = 0
    for hole_number, record in scores.items():
        hole = holes_by_number[hole_number]
        gross += record.strokes
        par_completed += hole.par
        if not individual:
            continue
        received = strokes_on_hole(course_handicap, hole.stroke_index, total_holes)
        hole_net = record.strokes - received
        net += hole_net
        if stableford:
            points += config.points_for(hole_net - hole.par)

    return EntrantTotals(
        entrant_id=entrant.id,
        name=entrant.name,
        kind=entrant.kind,
        total_strokes=gross,
        score_to_par=gross - par_completed,
        holes_completed=len(scores),
        total_points=points if stableford else None,
        net_strokes=net if individual else None,
        net_to_par=net - par_completed if individual else None,
        course_handicap=course_handicap if individual else None,
        status=entrant.status if isinstance(entrant, Group) else None,
    )


def aggregate_scores(
    records: Iterable[ScoreRecord],
    holes: Iterable[Hole],
    entrants: Iterable[Entrant],
    fmt: str,
    course_handicaps: Mapping[EntrantId, int] | None = None,
    config: StablefordConfig = DEFAULT_STABLEFORD_CONFIG,
) -> list[EntrantTotals]:
    """
    Fold raw score records into one running total per entrant.

    Group formats play at gross. Entrants without scores are still returned,
    in the order given, with zero totals.
    """
    holes_by_number = {hole.number: hole for hole in holes}
    if not holes_by_number:
        raise MissingHolesError("Tournament has no holes to score against.")

    handicaps = course_handicaps or {}
    latest = latest_scores(records, holes_by_number)
    roster = list(entrants)
    known_ids = {entrant.id for entrant in roster}
    for entrant_id in latest:
        if entrant_id not in known_ids:
            logger.warning("Ignoring scores for unknown entrant %s", entrant_id)

    totals: list[EntrantTotals] = []
    for entrant in roster:
        course_handicap = handicaps.get(entrant.id, 0)
        scores = latest.get(entrant.id)
        if not scores:
            totals.append(_empty_totals(entrant, fmt, course_handicap))
            continue
        totals.append(
            _totals_for_entrant(entrant, scores, holes_by_number, fmt, course_handicap, config)
        )
    return totals
