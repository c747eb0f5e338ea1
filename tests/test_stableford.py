from golf_scoring.stableford import (
    DEFAULT_STABLEFORD_CONFIG,
    StablefordConfig,
    parse_stableford_config,
    stableford_points,
)


def test_default_table():
    cfg = DEFAULT_STABLEFORD_CONFIG
    assert stableford_points(1, 4, 0, cfg) == 5
    assert stableford_points(2, 4, 0, cfg) == 5
    assert stableford_points(3, 4, 0, cfg) == 4
    assert stableford_points(4, 4, 0, cfg) == 3
    assert stableford_points(5, 4, 0, cfg) == 2
    assert stableford_points(6, 4, 0, cfg) == 0
    assert stableford_points(9, 4, 0, cfg) == 0


def test_every_relative_score_maps_to_a_bucket():
    cfg = StablefordConfig(double_bogey_or_worse=1, bogey=2, par=3, birdie=4, eagle=5, albatross=6)
    assert [cfg.points_for(rel) for rel in range(-6, 7)] == [6, 6, 6, 6, 5, 4, 3, 2, 1, 1, 1, 1, 1]


def test_handicap_strokes_lower_the_net_score():
    assert stableford_points(5, 4, 1) == 3
    assert stableford_points(6, 4, 2) == 3
    assert stableford_points(4, 4, 1) == 4


def test_missing_config_gives_defaults():
    assert parse_stableford_config(None) == DEFAULT_STABLEFORD_CONFIG


def test_wrong_shapes_give_defaults():
    assert parse_stableford_config([1, 2, 3]) == DEFAULT_STABLEFORD_CONFIG
    assert parse_stableford_config(42) == DEFAULT_STABLEFORD_CONFIG
    assert parse_stableford_config("not json") == DEFAULT_STABLEFORD_CONFIG
    assert parse_stableford_config("[1, 2]") == DEFAULT_STABLEFORD_CONFIG


def test_serialized_table_is_decoded():
    config = parse_stableford_config('{"par": 2, "birdie": 6}')
    assert config.par == 2
    assert config.birdie == 6
    assert config.bogey == DEFAULT_STABLEFORD_CONFIG.bogey


def test_partial_override_keeps_other_defaults():
    config = parse_stableford_config({"birdie": 7})
    assert config.birdie == 7
    assert config.par == DEFAULT_STABLEFORD_CONFIG.par
    assert config.double_bogey_or_worse == DEFAULT_STABLEFORD_CONFIG.double_bogey_or_worse


def test_invalid_values_fall_back_per_bucket():
    config = parse_stableford_config({"par": -1, "birdie": 5.5, "bogey": "3", "eagle": True})
    assert config == DEFAULT_STABLEFORD_CONFIG


def test_hyphenated_and_alias_keys():
    config = parse_stableford_config({"double-bogey-or-worse": 1, "Eagle-or-better": 8})
    assert config.double_bogey_or_worse == 1
    assert config.eagle == 8


def test_better_than_eagle_clamps_to_eagle_value():
    config = parse_stableford_config({"eagle": 8})
    assert config.albatross == 8
    assert config.points_for(-4) == 8


def test_explicit_albatross_value():
    config = parse_stableford_config({"eagle": 8, "albatross": 16})
    assert config.points_for(-2) == 8
    assert config.points_for(-3) == 16
