from datetime import datetime, timedelta

import pytest

from golf_scoring.aggregator import MissingHolesError
from golf_scoring.handicap import strokes_on_hole
from golf_scoring.leaderboard import build_leaderboard, build_scorecard, course_handicaps
from golf_scoring.models import Group, Hole, Player, ScoreRecord, TournamentSnapshot

START = datetime(2026, 6, 14, 7, 30)


def _course() -> tuple[Hole, ...]:
    holes = []
    for number in range(1, 19):
        if number == 3:
            holes.append(Hole(number=3, par=3, stroke_index=1))
        elif number == 1:
            holes.append(Hole(number=1, par=4, stroke_index=3))
        else:
            holes.append(Hole(number=number, par=4, stroke_index=number))
    return tuple(holes)


def test_course_rating_above_par_adds_strokes():
    player = Player(id="a", name="Player A", handicap_index=14.6)
    snapshot = TournamentSnapshot(
        holes=_course(),
        format="Stableford",
        players=(player,),
        scores=(ScoreRecord(entrant_id="a", hole_number=3, strokes=5, submitted_at=START),),
        slope_rating=113,
        course_rating=72,
    )
    assert snapshot.par_total == 71
    # course rating 72 over par 71 adds one stroke
    assert course_handicaps(snapshot) == {"a": 16}


def test_stableford_net_bogey_after_handicap_stroke():
    player = Player(id="a", name="Player A", handicap_index=14.6)
    snapshot = TournamentSnapshot(
        holes=_course(),
        format="Stableford",
        players=(player,),
        scores=(ScoreRecord(entrant_id="a", hole_number=3, strokes=5, submitted_at=START),),
        slope_rating=113,
        course_rating=71,
    )
    assert course_handicaps(snapshot) == {"a": 15}
    strokes = {si: strokes_on_hole(15, si, 18) for si in range(1, 19)}
    assert all(strokes[si] == 1 for si in range(1, 16))
    assert all(strokes[si] == 0 for si in range(16, 19))

    (entry,) = build_leaderboard(snapshot)
    assert entry.total_points == 2
    assert entry.score_to_par == 2
    assert entry.net_to_par == 1
    assert entry.rank == 1
    assert not entry.is_tied


def test_slope_and_rating_default_to_identity():
    snapshot = TournamentSnapshot(
        holes=_course(),
        format="Stroke Play",
        players=(Player(id=1, name="Ana", handicap_index=14.6), Player(id=2, name="Ben")),
    )
    assert course_handicaps(snapshot) == {1: 15, 2: 0}


def test_group_format_has_no_handicaps():
    snapshot = TournamentSnapshot(
        holes=_course(),
        format="Scramble",
        players=(Player(id=1, name="Ana", handicap_index=14.6),),
    )
    assert course_handicaps(snapshot) == {}


def test_scramble_scenario_tied_groups_share_first():
    groups = (
        Group(id="g1", name="Fairway Finders", status="completed"),
        Group(id="g2", name="Green Machines", status="completed"),
        Group(id="g3", name="Sand Savers", status="completed"),
        Group(id="g4", name="Late Starters"),
    )
    scores = []
    for number in range(1, 10):
        par = 3 if number == 3 else 4
        g1 = par - 1 if number in (2, 5) else par
        g2 = par - 1 if number in (7, 8) else par
        g3 = par - 1 if number == 9 else par
        for group_id, strokes in (("g1", g1), ("g2", g2), ("g3", g3)):
            scores.append(
                ScoreRecord(
                    entrant_id=group_id,
                    hole_number=number,
                    strokes=strokes,
                    submitted_at=START + timedelta(minutes=number * 12),
                )
            )
    snapshot = TournamentSnapshot(holes=_course(), format="Scramble", groups=groups, scores=tuple(scores))

    board = build_leaderboard(snapshot)
    by_id = {entry.entrant_id: entry for entry in board}
    assert by_id["g1"].score_to_par == by_id["g2"].score_to_par == -2
    assert by_id["g1"].rank == by_id["g2"].rank == 1
    assert by_id["g1"].is_tied and by_id["g2"].is_tied
    assert by_id["g3"].rank == 3
    assert not by_id["g3"].is_tied
    assert board[-1].entrant_id == "g4"
    assert board[-1].holes_completed == 0
    assert by_id["g1"].total_points is None


def test_recomputation_is_identical():
    groups = (Group(id="g1", name="One"), Group(id="g2", name="Two"))
    scores = tuple(
        ScoreRecord(entrant_id=gid, hole_number=n, strokes=4 + (n % 2), submitted_at=START)
        for gid in ("g1", "g2")
        for n in range(1, 6)
    )
    snapshot = TournamentSnapshot(holes=_course(), format="Scramble", groups=groups, scores=scores)
    first = [entry.to_dict() for entry in build_leaderboard(snapshot)]
    second = [entry.to_dict() for entry in build_leaderboard(snapshot)]
    assert first == second


def test_invalid_points_config_does_not_block_scoring():
    snapshot = TournamentSnapshot(
        holes=_course(),
        format="Stableford",
        players=(Player(id=1, name="Ana"),),
        scores=(ScoreRecord(entrant_id=1, hole_number=2, strokes=4),),
        stableford_points_config="{broken",
    )
    (entry,) = build_leaderboard(snapshot)
    assert entry.total_points == 3


def test_missing_holes_surface_as_error():
    with pytest.raises(MissingHolesError):
        build_leaderboard(TournamentSnapshot(holes=(), format="Scramble"))


def test_scorecard_splits_front_and_back():
    player = Player(id=7, name="Ana", handicap_index=18.0)
    scores = tuple(
        ScoreRecord(entrant_id=7, hole_number=n, strokes=5, submitted_at=START + timedelta(minutes=n))
        for n in (1, 2, 3, 10, 11)
    )
    snapshot = TournamentSnapshot(
        holes=_course(),
        format="Stableford",
        players=(player,),
        scores=scores + (ScoreRecord(entrant_id=8, hole_number=1, strokes=2, submitted_at=START),),
    )
    card = build_scorecard(player, snapshot)
    assert card.course_handicap == 18
    assert card.has_handicap
    assert len(card.rows) == 18
    assert card.out_gross == 15
    assert card.in_gross == 10
    assert card.total_gross == 25
    assert card.total_net == 20
    # par 4 holes: net par = 3 pts; hole 3 (par 3): net bogey = 2 pts
    assert card.out_points == 3 + 3 + 2
    assert card.in_points == 6
    assert card.rows[3].gross is None
    assert card.rows[3].points is None
    assert card.rows[3].strokes_received == 1


def test_nine_hole_scorecard_has_no_back_nine():
    player = Player(id=7, name="Ana")
    holes = tuple(Hole(number=n, par=4, stroke_index=n) for n in range(1, 10))
    scores = tuple(
        ScoreRecord(entrant_id=7, hole_number=n, strokes=4, submitted_at=START + timedelta(minutes=n))
        for n in range(1, 10)
    )
    card = build_scorecard(player, TournamentSnapshot(holes=holes, format="Stableford", players=(player,), scores=scores))
    assert card.out_gross == 36
    assert card.in_gross == 0
    assert card.out_points == 27
    assert card.in_points == 0
    assert card.total_gross == 36
