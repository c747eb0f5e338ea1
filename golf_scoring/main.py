import logging
from datetime import datetime
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, ValidationError

from golf_scoring import golf_api
from golf_scoring.aggregator import MissingHolesError
from golf_scoring.course_sync import import_course_holes
from golf_scoring.db import (
    delete_score,
    ensure_schema,
    fetch_tournament,
    load_snapshot,
    update_group_progress,
    upsert_score,
)
from golf_scoring.handicap import STANDARD_SLOPE, compute_course_handicap, stroke_allocation
from golf_scoring.leaderboard import build_leaderboard, build_scorecard
from golf_scoring.models import (
    GROUP_STATUSES,
    STROKE_PLAY,
    Group,
    Hole,
    Player,
    ScoreRecord,
    TournamentSnapshot,
    entrant_kind_for_format,
)
from golf_scoring.ranking import format_relative, leaderboard_is_live
from golf_scoring.settings import load_settings

logger = logging.getLogger(__name__)

app = FastAPI(title="Golf Scoring")
settings = load_settings()


class HolePayload(BaseModel):
    number: int = Field(ge=1)
    par: int
    stroke_index: int | None = None
    yardage: int | None = None


class PlayerPayload(BaseModel):
    id: int | str
    name: str
    handicap_index: float | None = None
    handicap: float = 0.0


class GroupPayload(BaseModel):
    id: int | str
    name: str
    current_hole: int = 0
    status: str = "not_started"


class ScoreRecordPayload(BaseModel):
    entrant_id: int | str
    hole_number: int
    strokes: int
    entered_by: str | None = None
    submitted_at: datetime | None = None


class LeaderboardPayload(BaseModel):
    format: str = STROKE_PLAY
    holes: list[HolePayload]
    players: list[PlayerPayload] = []
    groups: list[GroupPayload] = []
    scores: list[ScoreRecordPayload] = []
    slope_rating: int | None = None
    course_rating: float | None = None
    stableford_points_config: Any = None
    name: str | None = None

    def to_snapshot(self) -> TournamentSnapshot:
        return TournamentSnapshot(
            holes=tuple(Hole(**hole.model_dump()) for hole in self.holes),
            format=self.format,
            players=tuple(Player(**player.model_dump()) for player in self.players),
            groups=tuple(Group(**group.model_dump()) for group in self.groups),
            scores=tuple(ScoreRecord(**score.model_dump()) for score in self.scores),
            slope_rating=self.slope_rating,
            course_rating=self.course_rating,
            stableford_points_config=self.stableford_points_config,
            name=self.name,
        )


class CourseHandicapPayload(BaseModel):
    handicap_index: float
    slope_rating: int | None = None
    course_rating: float | None = None
    holes: list[HolePayload]


class ScoreSubmission(BaseModel):
    tournament_id: int
    entrant_id: int
    hole_number: int = Field(ge=1)
    strokes: int = Field(gt=0)
    entered_by: str | None = None
    pin: str


class ScoreDeletion(BaseModel):
    tournament_id: int
    entrant_id: int
    hole_number: int = Field(ge=1)
    pin: str


class GroupProgressPayload(BaseModel):
    current_hole: int = Field(ge=0)
    status: str
    pin: str


class CourseImportPayload(BaseModel):
    course_id: int
    tee_name: str | None = None
    pin: str


def _leaderboard_response(snapshot: TournamentSnapshot) -> dict:
    entries = build_leaderboard(snapshot)
    rows = []
    for entry in entries:
        row = entry.to_dict()
        row["score_to_par_display"] = format_relative(entry.score_to_par)
        rows.append(row)
    return {
        "tournament_id": snapshot.tournament_id,
        "name": snapshot.name,
        "format": snapshot.format,
        "total_holes": snapshot.total_holes,
        "par_total": snapshot.par_total,
        "is_live": leaderboard_is_live(entries, snapshot.total_holes),
        "entries": rows,
    }


def _missing_holes(exc: MissingHolesError) -> JSONResponse:
    return JSONResponse({"error": str(exc)}, status_code=409)


@app.on_event("startup")
def startup() -> None:
    ensure_schema(settings.database_url)


@app.post("/api/leaderboard")
async def api_leaderboard(request: Request):
    try:
        payload = LeaderboardPayload.model_validate(await request.json())
    except ValidationError as exc:
        return JSONResponse({"error": "Invalid payload", "details": exc.errors()}, status_code=422)
    try:
        return _leaderboard_response(payload.to_snapshot())
    except MissingHolesError as exc:
        return _missing_holes(exc)


@app.get("/api/tournaments/{tournament_id}/leaderboard")
async def api_tournament_leaderboard(tournament_id: int):
    snapshot = load_snapshot(settings.database_url, tournament_id)
    if snapshot is None:
        return JSONResponse({"error": "Tournament not found"}, status_code=404)
    try:
        return _leaderboard_response(snapshot)
    except MissingHolesError as exc:
        return _missing_holes(exc)


@app.get("/api/tournaments/{tournament_id}/scorecard/{player_id}")
async def api_scorecard(tournament_id: int, player_id: int):
    snapshot = load_snapshot(settings.database_url, tournament_id)
    if snapshot is None:
        return JSONResponse({"error": "Tournament not found"}, status_code=404)
    player = next((item for item in snapshot.players if item.id == player_id), None)
    if player is None:
        return JSONResponse({"error": "Player not found"}, status_code=404)
    try:
        return build_scorecard(player, snapshot).to_dict()
    except MissingHolesError as exc:
        return _missing_holes(exc)


@app.post("/api/course-handicap")
async def api_course_handicap(request: Request):
    try:
        payload = CourseHandicapPayload.model_validate(await request.json())
    except ValidationError as exc:
        return JSONResponse({"error": "Invalid payload", "details": exc.errors()}, status_code=422)
    holes = [Hole(**hole.model_dump()) for hole in payload.holes]
    par_total = sum(hole.par for hole in holes)
    course_handicap = compute_course_handicap(
        payload.handicap_index,
        payload.slope_rating if payload.slope_rating is not None else STANDARD_SLOPE,
        payload.course_rating if payload.course_rating is not None else par_total,
        par_total,
    )
    return {
        "course_handicap": course_handicap,
        "par_total": par_total,
        "strokes": {str(number): count for number, count in stroke_allocation(course_handicap, holes).items()},
    }


@app.post("/api/scores")
async def api_scores(request: Request):
    try:
        payload = ScoreSubmission.model_validate(await request.json())
    except ValidationError as exc:
        return JSONResponse({"error": "Invalid payload", "details": exc.errors()}, status_code=422)

    if payload.pin != settings.scoring_pin:
        return JSONResponse({"error": "Invalid PIN"}, status_code=403)

    tournament = fetch_tournament(settings.database_url, payload.tournament_id)
    if tournament is None:
        return JSONResponse({"error": "Tournament not found"}, status_code=404)

    record_id = upsert_score(
        settings.database_url,
        tournament_id=payload.tournament_id,
        entrant_kind=entrant_kind_for_format(tournament["format"]),
        entrant_id=payload.entrant_id,
        hole_number=payload.hole_number,
        strokes=payload.strokes,
        entered_by=payload.entered_by,
    )
    logger.info(
        "Score saved: tournament %s entrant %s hole %s = %s",
        payload.tournament_id,
        payload.entrant_id,
        payload.hole_number,
        payload.strokes,
    )
    return {
        "id": record_id,
        "tournament_id": payload.tournament_id,
        "entrant_id": payload.entrant_id,
        "hole_number": payload.hole_number,
        "strokes": payload.strokes,
    }


@app.post("/api/scores/delete")
async def api_delete_score(request: Request):
    try:
        payload = ScoreDeletion.model_validate(await request.json())
    except ValidationError as exc:
        return JSONResponse({"error": "Invalid payload", "details": exc.errors()}, status_code=422)

    if payload.pin != settings.scoring_pin:
        return JSONResponse({"error": "Invalid PIN"}, status_code=403)

    tournament = fetch_tournament(settings.database_url, payload.tournament_id)
    if tournament is None:
        return JSONResponse({"error": "Tournament not found"}, status_code=404)

    delete_score(
        settings.database_url,
        tournament_id=payload.tournament_id,
        entrant_kind=entrant_kind_for_format(tournament["format"]),
        entrant_id=payload.entrant_id,
        hole_number=payload.hole_number,
    )
    logger.info(
        "Score cleared: tournament %s entrant %s hole %s",
        payload.tournament_id,
        payload.entrant_id,
        payload.hole_number,
    )
    return {"deleted": True}


@app.post("/api/groups/{group_id}/progress")
async def api_group_progress(group_id: int, request: Request):
    try:
        payload = GroupProgressPayload.model_validate(await request.json())
    except ValidationError as exc:
        return JSONResponse({"error": "Invalid payload", "details": exc.errors()}, status_code=422)

    if payload.pin != settings.scoring_pin:
        return JSONResponse({"error": "Invalid PIN"}, status_code=403)

    if payload.status not in GROUP_STATUSES:
        return JSONResponse(
            {"error": f"Unknown status '{payload.status}'", "allowed": list(GROUP_STATUSES)},
            status_code=422,
        )

    update_group_progress(settings.database_url, group_id, payload.current_hole, payload.status)
    logger.info("Group %s on hole %s (%s)", group_id, payload.current_hole, payload.status)
    return {"group_id": group_id, "current_hole": payload.current_hole, "status": payload.status}


@app.get("/api/courses/search")
async def api_course_search(query: str):
    try:
        return golf_api.search_courses(query, settings.golf_api_key)
    except golf_api.GolfApiError as exc:
        return JSONResponse({"error": str(exc)}, status_code=502)


@app.post("/api/tournaments/{tournament_id}/course-import")
async def api_course_import(tournament_id: int, request: Request):
    try:
        payload = CourseImportPayload.model_validate(await request.json())
    except ValidationError as exc:
        return JSONResponse({"error": "Invalid payload", "details": exc.errors()}, status_code=422)
    if payload.pin != settings.scoring_pin:
        return JSONResponse({"error": "Invalid PIN"}, status_code=403)
    try:
        return import_course_holes(
            settings.database_url,
            tournament_id,
            payload.course_id,
            settings.golf_api_key,
            tee_name=payload.tee_name,
        )
    except golf_api.GolfApiError as exc:
        return JSONResponse({"error": str(exc)}, status_code=502)
