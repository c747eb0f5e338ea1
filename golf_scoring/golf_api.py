import logging
import os
from typing import Any

import requests

logger = logging.getLogger(__name__)

API_BASE = "https://api.golfcourseapi.com/v1"


class GolfApiError(Exception):
    pass


def _headers(api_key: str) -> dict[str, str]:
    key = api_key or os.getenv("GOLF_API_KEY", "")
    if not key:
        raise GolfApiError("Missing Golf Course API key.")
    return {"Authorization": f"Key {key}"}


def _get(path: str, api_key: str, params: dict[str, Any] | None = None, timeout: int = 15) -> Any:
    try:
        response = requests.get(
            f"{API_BASE}{path}",
            params=params,
            headers=_headers(api_key),
            timeout=timeout,
        )
    except requests.RequestException as exc:
        raise GolfApiError(f"Golf Course API unreachable: {exc}") from exc
    if response.status_code != 200:
        raise GolfApiError(f"Request to {path} failed: {response.status_code} {response.text}")
    return response.json()


def search_courses(query: str, api_key: str) -> dict[str, Any]:
    if not query:
        return {"courses": []}
    logger.debug("Searching courses for %r", query)
    return _get("/search", api_key, params={"search_query": query})


def fetch_course(course_id: int, api_key: str) -> dict[str, Any]:
    payload = _get(f"/courses/{course_id}", api_key, timeout=20)
    if not isinstance(payload, dict) or "course" not in payload:
        raise GolfApiError(f"Course fetch returned unexpected payload for id {course_id}")
    course = payload["course"]
    if not isinstance(course, dict) or "id" not in course:
        raise GolfApiError(f"Course fetch returned unexpected course data for id {course_id}")
    return course
