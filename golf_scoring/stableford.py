import json
import logging
from dataclasses import asdict, dataclass
from typing import Any

logger = logging.getLogger(__name__)

BUCKET_NAMES = ("albatross", "eagle", "birdie", "par", "bogey", "double_bogey_or_worse")
KEY_ALIASES = {
    "eagle_or_better": "eagle",
    "double_bogey": "double_bogey_or_worse",
}


@dataclass(frozen=True)
class StablefordConfig:
    """Points per net score relative to par."""

    double_bogey_or_worse: int = 0
    bogey: int = 2
    par: int = 3
    birdie: int = 4
    eagle: int = 5
    albatross: int = 5

    def buckets(self) -> list[tuple[int | None, int]]:
        """(upper bound inclusive, points) pairs; ``None`` closes the table."""
        return [
            (-3, self.albatross),
            (-2, self.eagle),
            (-1, self.birdie),
            (0, self.par),
            (1, self.bogey),
            (None, self.double_bogey_or_worse),
        ]

    def points_for(self, relative_to_par: int) -> int:
        for upper, points in self.buckets():
            if upper is None or relative_to_par <= upper:
                return points
        return self.double_bogey_or_worse

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


DEFAULT_STABLEFORD_CONFIG = StablefordConfig()


def _normalize_key(key: Any) -> str | None:
    if not isinstance(key, str):
        return None
    normalized = key.strip().lower().replace("-", "_").replace(" ", "_")
    return KEY_ALIASES.get(normalized, normalized)


def _valid_points(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def parse_stableford_config(raw: Any) -> StablefordConfig:
    """
    Validate a stored points table, falling back to the defaults.

    Never raises: an unreadable table gives the default table and a bad value
    gives that bucket's default. Without an explicit albatross value, scores
    better than eagle earn the eagle points.
    """
    if raw is None:
        return DEFAULT_STABLEFORD_CONFIG
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8", errors="replace")
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError:
            logger.warning("Unreadable Stableford config %r, using defaults", raw)
            return DEFAULT_STABLEFORD_CONFIG
    if not isinstance(raw, dict):
        logger.warning("Stableford config must be a mapping, got %s", type(raw).__name__)
        return DEFAULT_STABLEFORD_CONFIG

    supplied: dict[str, int] = {}
    for key, value in raw.items():
        bucket = _normalize_key(key)
        if bucket not in BUCKET_NAMES:
            logger.debug("Ignoring unknown Stableford bucket %r", key)
            continue
        if not _valid_points(value):
            logger.warning("Invalid points %r for bucket %s, using default", value, bucket)
            continue
        supplied[bucket] = value

    values = DEFAULT_STABLEFORD_CONFIG.to_dict()
    values.update(supplied)
    if "albatross" not in supplied:
        values["albatross"] = values["eagle"]
    return StablefordConfig(**values)


def stableford_points(
    gross: int,
    par: int,
    strokes_received: int,
    config: StablefordConfig = DEFAULT_STABLEFORD_CONFIG,
) -> int:
    net = gross - strokes_received
    return config.points_for(net - par)
