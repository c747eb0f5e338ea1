from golf_scoring.models import EntrantTotals
from golf_scoring.ranking import format_relative, leaderboard_is_live, rank_entrants


def _totals(entrant_id, name, to_par=0, holes=9, points=None, status=None) -> EntrantTotals:
    return EntrantTotals(
        entrant_id=entrant_id,
        name=name,
        kind="group",
        total_strokes=holes * 4 + to_par,
        score_to_par=to_par,
        holes_completed=holes,
        total_points=points,
        status=status,
    )


def test_stroke_play_ranks_lowest_score_first_with_shared_ranks():
    board = rank_entrants(
        [
            _totals("c", "Cardinals", to_par=1),
            _totals("a", "Albatross", to_par=-2),
            _totals("b", "Birdies", to_par=-2),
            _totals("d", "Doves", to_par=3),
        ],
        "Scramble",
    )
    assert [(entry.entrant_id, entry.rank, entry.is_tied) for entry in board] == [
        ("a", 1, True),
        ("b", 1, True),
        ("c", 3, False),
        ("d", 4, False),
    ]


def test_stableford_ranks_most_points_first():
    board = rank_entrants(
        [
            _totals(1, "Ana", points=30),
            _totals(2, "Ben", points=36),
            _totals(3, "Cy", points=30),
        ],
        "Stableford",
    )
    assert [(entry.entrant_id, entry.rank) for entry in board] == [(2, 1), (1, 2), (3, 2)]
    assert not board[0].is_tied
    assert board[1].is_tied and board[2].is_tied


def test_rank_numbers_skip_tied_positions():
    board = rank_entrants(
        [_totals(n, f"P{n}", to_par=value) for n, value in enumerate([0, 0, 0, 1, 2, 2, 5])],
        "Stroke Play",
    )
    assert [entry.rank for entry in board] == [1, 1, 1, 4, 5, 5, 7]


def test_not_started_entrants_rank_last_by_name():
    board = rank_entrants(
        [
            _totals("z", "Zebras", holes=0),
            _totals("x", "Xenops", to_par=6),
            _totals("y", "Anteaters", holes=0),
        ],
        "Scramble",
    )
    assert [entry.entrant_id for entry in board] == ["x", "y", "z"]
    assert board[0].rank == 1
    assert board[1].rank == board[2].rank == 2
    assert board[1].is_tied


def test_not_started_stableford_player_ranks_below_zero_points():
    board = rank_entrants(
        [_totals(1, "Ana", holes=0, points=0), _totals(2, "Ben", holes=3, points=0)],
        "Stableford",
    )
    assert [entry.entrant_id for entry in board] == [2, 1]
    assert board[1].rank == 2
    assert not board[1].is_tied


def test_tied_entrants_listed_by_holes_completed():
    board = rank_entrants(
        [_totals("a", "Alpha", to_par=-1, holes=5), _totals("b", "Bravo", to_par=-1, holes=12)],
        "Scramble",
    )
    assert [entry.entrant_id for entry in board] == ["b", "a"]
    assert board[0].rank == board[1].rank == 1


def test_finished_flag():
    board = rank_entrants([_totals("a", "Alpha", holes=18), _totals("b", "Bravo", holes=9)], "Scramble", 18)
    finished = {entry.entrant_id: entry.finished for entry in board}
    assert finished == {"a": True, "b": False}


def test_ranking_is_repeatable():
    aggregates = [_totals(n, f"P{n % 3}", to_par=n % 4) for n in range(12)]
    first = [entry.to_dict() for entry in rank_entrants(aggregates, "Scramble")]
    second = [entry.to_dict() for entry in rank_entrants(list(reversed(aggregates)), "Scramble")]
    assert first == second


def test_format_relative():
    assert format_relative(0) == "E"
    assert format_relative(3) == "+3"
    assert format_relative(-2) == "-2"


def test_leaderboard_is_live():
    finished = rank_entrants([_totals("a", "Alpha", holes=18)], "Scramble", 18)
    assert not leaderboard_is_live(finished, 18)
    partial = rank_entrants([_totals("a", "Alpha", holes=18), _totals("b", "Bravo", holes=4)], "Scramble", 18)
    assert leaderboard_is_live(partial, 18)
    waiting = rank_entrants([_totals("c", "Charlie", holes=0, status="in_progress")], "Scramble", 18)
    assert leaderboard_is_live(waiting, 18)
