import logging

from golf_scoring.aggregator import MissingHolesError, aggregate_scores, latest_scores
from golf_scoring.handicap import has_handicap, resolve_course_handicap, strokes_on_hole
from golf_scoring.models import (
    EntrantId,
    LeaderboardEntry,
    Player,
    Scorecard,
    ScorecardRow,
    TournamentSnapshot,
    is_individual_format,
)
from golf_scoring.ranking import rank_entrants
from golf_scoring.stableford import parse_stableford_config, stableford_points

logger = logging.getLogger(__name__)


def course_handicaps(snapshot: TournamentSnapshot) -> dict[EntrantId, int]:
    if not is_individual_format(snapshot.format):
        return {}
    par_total = snapshot.par_total
    return {
        player.id: resolve_course_handicap(
            player,
            par_total,
            slope_rating=snapshot.slope_rating,
            course_rating=snapshot.course_rating,
        )
        for player in snapshot.players
    }


def build_leaderboard(snapshot: TournamentSnapshot) -> list[LeaderboardEntry]:
    """Recompute the whole leaderboard from the snapshot's score records."""
    if not snapshot.holes:
        raise MissingHolesError(f"Tournament {snapshot.tournament_id} has no holes configured.")
    config = parse_stableford_config(snapshot.stableford_points_config)
    aggregates = aggregate_scores(
        snapshot.scores,
        snapshot.holes,
        snapshot.entrants(),
        snapshot.format,
        course_handicaps=course_handicaps(snapshot),
        config=config,
    )
    leaderboard = rank_entrants(aggregates, snapshot.format, snapshot.total_holes)
    logger.debug(
        "Leaderboard for tournament %s: %d entrants, %d score records",
        snapshot.tournament_id,
        len(leaderboard),
        len(snapshot.scores),
    )
    return leaderboard


def build_scorecard(player: Player, snapshot: TournamentSnapshot) -> Scorecard:
    if not snapshot.holes:
        raise MissingHolesError(f"Tournament {snapshot.tournament_id} has no holes configured.")
    config = parse_stableford_config(snapshot.stableford_points_config)
    holes = sorted(snapshot.holes, key=lambda hole: hole.number)
    total_holes = len(holes)
    course_handicap = resolve_course_handicap(
        player,
        snapshot.par_total,
        slope_rating=snapshot.slope_rating,
        course_rating=snapshot.course_rating,
    )
    scores = latest_scores(
        (record for record in snapshot.scores if record.entrant_id == player.id),
        (hole.number for hole in holes),
    ).get(player.id, {})

    rows: list[ScorecardRow] = []
    for hole in holes:
        record = scores.get(hole.number)
        received = strokes_on_hole(course_handicap, hole.stroke_index, total_holes)
        gross = record.strokes if record else None
        rows.append(
            ScorecardRow(
                hole_number=hole.number,
                par=hole.par,
                stroke_index=hole.stroke_index,
                gross=gross,
                strokes_received=received,
                net=gross - received if gross is not None else None,
                points=stableford_points(gross, hole.par, received, config) if gross is not None else None,
            )
        )

    # Rounds of nine holes or fewer have no back nine.
    midpoint = total_holes if total_holes <= 9 else total_holes // 2
    out_rows = [row for row in rows if row.hole_number <= midpoint]
    in_rows = [row for row in rows if row.hole_number > midpoint]

    def _sum(items: list[ScorecardRow], attr: str) -> int:
        return sum(getattr(row, attr) or 0 for row in items)

    return Scorecard(
        player_id=player.id,
        name=player.name,
        course_handicap=course_handicap,
        has_handicap=has_handicap(player),
        rows=tuple(rows),
        out_gross=_sum(out_rows, "gross"),
        in_gross=_sum(in_rows, "gross"),
        total_gross=_sum(rows, "gross"),
        out_net=_sum(out_rows, "net"),
        in_net=_sum(in_rows, "net"),
        total_net=_sum(rows, "net"),
        out_points=_sum(out_rows, "points"),
        in_points=_sum(in_rows, "points"),
        total_points=_sum(rows, "points"),
    )
