"""PostgreSQL storage for tournaments, holes, entrants and hole scores."""

from typing import Any, Iterable, Optional

import psycopg
from psycopg.types.json import Jsonb

from golf_scoring.models import (
    Group,
    Hole,
    Player,
    ScoreRecord,
    TournamentSnapshot,
    entrant_kind_for_format,
)


def ensure_schema(database_url: str) -> None:
    with psycopg.connect(database_url) as conn:
        with conn.cursor() as cur:
            cur.execute(
                """
                create table if not exists tournaments (
                    id serial primary key,
                    name text not null,
                    format text not null default 'Stroke Play',
                    slope_rating integer,
                    course_rating double precision,
                    stableford_points_config jsonb,
                    created_at timestamptz not null default now()
                );
                """
            )
            cur.execute(
                """
                create table if not exists holes (
                    id serial primary key,
                    tournament_id integer not null references tournaments(id) on delete cascade,
                    hole_number integer not null,
                    par integer not null,
                    stroke_index integer,
                    yardage integer,
                    unique (tournament_id, hole_number)
                );
                """
            )
            cur.execute(
                """
                create table if not exists players (
                    id serial primary key,
                    tournament_id integer not null references tournaments(id) on delete cascade,
                    name text not null,
                    handicap_index double precision,
                    handicap double precision not null default 0
                );
                """
            )
            cur.execute(
                """
                create table if not exists groups (
                    id serial primary key,
                    tournament_id integer not null references tournaments(id) on delete cascade,
                    name text not null,
                    current_hole integer not null default 0,
                    status text not null default 'not_started'
                );
                """
            )
            cur.execute(
                """
                create table if not exists scores (
                    id serial primary key,
                    tournament_id integer not null references tournaments(id) on delete cascade,
                    entrant_kind text not null,
                    entrant_id integer not null,
                    hole_number integer not null,
                    strokes integer not null,
                    entered_by text,
                    submitted_at timestamptz not null default now(),
                    unique (tournament_id, entrant_kind, entrant_id, hole_number)
                );
                """
            )


def fetch_tournament(database_url: str, tournament_id: int) -> Optional[dict]:
    with psycopg.connect(database_url) as conn:
        with conn.cursor() as cur:
            cur.execute(
                """
                select id, name, format, slope_rating, course_rating, stableford_points_config
                from tournaments
                where id = %s;
                """,
                (tournament_id,),
            )
            row = cur.fetchone()
            if not row:
                return None
            return {
                "id": row[0],
                "name": row[1],
                "format": row[2],
                "slope_rating": row[3],
                "course_rating": row[4],
                "stableford_points_config": row[5],
            }


def fetch_holes(database_url: str, tournament_id: int) -> list[Hole]:
    with psycopg.connect(database_url) as conn:
        with conn.cursor() as cur:
            cur.execute(
                """
                select hole_number, par, stroke_index, yardage
                from holes
                where tournament_id = %s
                order by hole_number;
                """,
                (tournament_id,),
            )
            return [
                Hole(number=row[0], par=row[1], stroke_index=row[2], yardage=row[3])
                for row in cur.fetchall()
            ]


def fetch_players(database_url: str, tournament_id: int) -> list[Player]:
    with psycopg.connect(database_url) as conn:
        with conn.cursor() as cur:
            cur.execute(
                """
                select id, name, handicap_index, handicap
                from players
                where tournament_id = %s
                order by name;
                """,
                (tournament_id,),
            )
            return [
                Player(id=row[0], name=row[1], handicap_index=row[2], handicap=row[3] or 0.0)
                for row in cur.fetchall()
            ]


def fetch_groups(database_url: str, tournament_id: int) -> list[Group]:
    with psycopg.connect(database_url) as conn:
        with conn.cursor() as cur:
            cur.execute(
                """
                select id, name, current_hole, status
                from groups
                where tournament_id = %s
                order by name;
                """,
                (tournament_id,),
            )
            return [
                Group(id=row[0], name=row[1], current_hole=row[2], status=row[3])
                for row in cur.fetchall()
            ]


def fetch_scores(database_url: str, tournament_id: int, entrant_kind: str) -> list[ScoreRecord]:
    with psycopg.connect(database_url) as conn:
        with conn.cursor() as cur:
            cur.execute(
                """
                select entrant_id, hole_number, strokes, entered_by, submitted_at
                from scores
                where tournament_id = %s and entrant_kind = %s
                order by submitted_at, id;
                """,
                (tournament_id, entrant_kind),
            )
            return [
                ScoreRecord(
                    entrant_id=row[0],
                    hole_number=row[1],
                    strokes=row[2],
                    entered_by=row[3],
                    submitted_at=row[4],
                )
                for row in cur.fetchall()
            ]


def load_snapshot(database_url: str, tournament_id: int) -> Optional[TournamentSnapshot]:
    tournament = fetch_tournament(database_url, tournament_id)
    if tournament is None:
        return None
    fmt = tournament["format"]
    kind = entrant_kind_for_format(fmt)
    players: tuple[Player, ...] = ()
    groups: tuple[Group, ...] = ()
    if kind == "player":
        players = tuple(fetch_players(database_url, tournament_id))
    else:
        groups = tuple(fetch_groups(database_url, tournament_id))
    return TournamentSnapshot(
        holes=tuple(fetch_holes(database_url, tournament_id)),
        format=fmt,
        players=players,
        groups=groups,
        scores=tuple(fetch_scores(database_url, tournament_id, kind)),
        slope_rating=tournament["slope_rating"],
        course_rating=tournament["course_rating"],
        stableford_points_config=tournament["stableford_points_config"],
        tournament_id=tournament["id"],
        name=tournament["name"],
    )


def upsert_tournament(
    database_url: str,
    tournament_id: int | None,
    name: str,
    fmt: str,
    slope_rating: int | None = None,
    course_rating: float | None = None,
    stableford_points_config: Any = None,
) -> int:
    config = Jsonb(stableford_points_config) if stableford_points_config is not None else None
    with psycopg.connect(database_url) as conn:
        with conn.cursor() as cur:
            if tournament_id:
                cur.execute(
                    """
                    update tournaments
                    set name = %s,
                        format = %s,
                        slope_rating = %s,
                        course_rating = %s,
                        stableford_points_config = %s
                    where id = %s
                    returning id;
                    """,
                    (name, fmt, slope_rating, course_rating, config, tournament_id),
                )
            else:
                cur.execute(
                    """
                    insert into tournaments (name, format, slope_rating, course_rating, stableford_points_config)
                    values (%s, %s, %s, %s, %s)
                    returning id;
                    """,
                    (name, fmt, slope_rating, course_rating, config),
                )
            row = cur.fetchone()
            return row[0] if row else 0


def replace_holes(database_url: str, tournament_id: int, holes: Iterable[Hole]) -> None:
    with psycopg.connect(database_url) as conn:
        with conn.cursor() as cur:
            cur.execute("delete from holes where tournament_id = %s;", (tournament_id,))
            for hole in holes:
                cur.execute(
                    """
                    insert into holes (tournament_id, hole_number, par, stroke_index, yardage)
                    values (%s, %s, %s, %s, %s);
                    """,
                    (tournament_id, hole.number, hole.par, hole.stroke_index, hole.yardage),
                )


def update_tournament_ratings(
    database_url: str,
    tournament_id: int,
    slope_rating: int | None,
    course_rating: float | None,
) -> None:
    with psycopg.connect(database_url) as conn:
        with conn.cursor() as cur:
            cur.execute(
                """
                update tournaments
                set slope_rating = %s,
                    course_rating = %s
                where id = %s;
                """,
                (slope_rating, course_rating, tournament_id),
            )


def upsert_score(
    database_url: str,
    tournament_id: int,
    entrant_kind: str,
    entrant_id: int,
    hole_number: int,
    strokes: int,
    entered_by: str | None = None,
) -> Optional[int]:
    """Store one hole score; a later submission for the same hole replaces it."""
    with psycopg.connect(database_url) as conn:
        with conn.cursor() as cur:
            cur.execute(
                """
                insert into scores (
                    tournament_id,
                    entrant_kind,
                    entrant_id,
                    hole_number,
                    strokes,
                    entered_by,
                    submitted_at
                )
                values (%s, %s, %s, %s, %s, %s, now())
                on conflict (tournament_id, entrant_kind, entrant_id, hole_number) do update
                    set strokes = excluded.strokes,
                        entered_by = excluded.entered_by,
                        submitted_at = excluded.submitted_at
                returning id;
                """,
                (tournament_id, entrant_kind, entrant_id, hole_number, strokes, entered_by),
            )
            row = cur.fetchone()
            return row[0] if row else None


def delete_score(
    database_url: str,
    tournament_id: int,
    entrant_kind: str,
    entrant_id: int,
    hole_number: int,
) -> None:
    with psycopg.connect(database_url) as conn:
        with conn.cursor() as cur:
            cur.execute(
                """
                delete from scores
                where tournament_id = %s
                  and entrant_kind = %s
                  and entrant_id = %s
                  and hole_number = %s;
                """,
                (tournament_id, entrant_kind, entrant_id, hole_number),
            )


def update_group_progress(database_url: str, group_id: int, current_hole: int, status: str) -> None:
    with psycopg.connect(database_url) as conn:
        with conn.cursor() as cur:
            cur.execute(
                """
                update groups
                set current_hole = %s,
                    status = %s
                where id = %s;
                """,
                (current_hole, status, group_id),
            )
