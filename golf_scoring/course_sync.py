import logging
from dataclasses import dataclass
from typing import Any

from golf_scoring import db
from golf_scoring.golf_api import GolfApiError, fetch_course
from golf_scoring.models import Hole

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CourseLayout:
    course_id: int
    course_name: str
    tee_name: str | None
    slope_rating: int | None
    course_rating: float | None
    holes: tuple[Hole, ...]

    @property
    def par_total(self) -> int:
        return sum(hole.par for hole in self.holes)


def _select_tee(course: dict[str, Any], tee_name: str | None) -> dict[str, Any]:
    tees_payload = course.get("tees") or {}
    tees = [tee for gender in ("male", "female") for tee in (tees_payload.get(gender) or [])]
    if not tees:
        raise GolfApiError(f"Course {course.get('id')} has no tees.")
    if tee_name:
        wanted = tee_name.strip().lower()
        for tee in tees:
            if (tee.get("tee_name") or "").strip().lower() == wanted:
                return tee
        raise GolfApiError(f"Course {course.get('id')} has no tee named {tee_name!r}.")
    return tees[0]


def _optional_int(value: Any) -> int | None:
    if value in (None, ""):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _optional_float(value: Any) -> float | None:
    if value in (None, ""):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def holes_from_course(course: dict[str, Any], tee_name: str | None = None) -> CourseLayout:
    """Read one tee of a course API payload into holes and ratings."""
    tee = _select_tee(course, tee_name)
    holes = []
    for idx, hole in enumerate(tee.get("holes") or [], 1):
        holes.append(
            Hole(
                number=_optional_int(hole.get("hole_number")) or idx,
                par=_optional_int(hole.get("par")) or 4,
                stroke_index=_optional_int(hole.get("handicap")),
                yardage=_optional_int(hole.get("yardage")),
            )
        )
    return CourseLayout(
        course_id=course["id"],
        course_name=course.get("course_name") or course.get("club_name") or "",
        tee_name=tee.get("tee_name"),
        slope_rating=_optional_int(tee.get("slope_rating")),
        course_rating=_optional_float(tee.get("course_rating")),
        holes=tuple(holes),
    )


def import_course_holes(
    database_url: str,
    tournament_id: int,
    course_id: int,
    api_key: str,
    tee_name: str | None = None,
) -> dict:
    layout = holes_from_course(fetch_course(course_id, api_key), tee_name)
    db.replace_holes(database_url, tournament_id, layout.holes)
    db.update_tournament_ratings(database_url, tournament_id, layout.slope_rating, layout.course_rating)
    logger.info(
        "Imported %d holes from course %s (%s tee) into tournament %s",
        len(layout.holes),
        layout.course_id,
        layout.tee_name,
        tournament_id,
    )
    return {
        "course_id": layout.course_id,
        "course_name": layout.course_name,
        "tee_name": layout.tee_name,
        "slope_rating": layout.slope_rating,
        "course_rating": layout.course_rating,
        "hole_count": len(layout.holes),
        "par_total": layout.par_total,
    }
