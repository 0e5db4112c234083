# backend/course_eval/services/insights.py
"""
Administrator insights: user statistics, rating metrics per course and the
PDF report export.
"""
from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from ..core.errors import Result, captured, not_found, validation
from ..core.store import COURSES, RATINGS, SCHOOLS, SUBJECTS, USERS
from . import pdf_report
from .accounts import public_user
from .aggregator import GROUPINGS, aggregate, ordered_buckets, overall, parse_timestamp

logger = logging.getLogger(__name__)

LATEST_USERS = 10


@dataclass(frozen=True)
class ReportFile:
    filename: str
    content: bytes


def _schools_by_id(store, users: List[Dict[str, Any]]) -> Dict[str, Dict[str, Any]]:
    ids = list({u["school_id"] for u in users if u.get("school_id")})
    return {s["id"]: s for s in store.find(SCHOOLS, in_={"id": ids})}


def _school_name(schools: Dict[str, Dict[str, Any]], user: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    school = schools.get(user.get("school_id"))
    return {"name": school.get("name")} if school else None


def _offset(page: int, limit: int) -> int:
    return (page - 1) * limit


# ----------------------------------------------------------------------
# Users
# ----------------------------------------------------------------------
@captured("users_page")
def users_page(store, page: int, limit: int) -> Result:
    users = store.find(USERS, order="created_at", offset=_offset(page, limit), limit=limit)
    if not users:
        return not_found("Users not found")
    schools = _schools_by_id(store, users)
    return Result.success(
        {"users": [{"surname": u.get("surname"), "school": _school_name(schools, u)} for u in users]}
    )


@captured("users_all")
def users_all(store) -> Result:
    users = store.find(USERS, order="created_at")
    if not users:
        return not_found("Users not found")
    schools = _schools_by_id(store, users)
    return Result.success(
        {
            "users": [
                {
                    "name": u.get("name"),
                    "email": u.get("email"),
                    "surname": u.get("surname"),
                    "school": _school_name(schools, u),
                }
                for u in users
            ]
        }
    )


@captured("users_latest")
def users_latest(store) -> Result:
    users = store.find(USERS, order="created_at", desc=True, limit=LATEST_USERS)
    if not users:
        return not_found("Users not found")
    schools = _schools_by_id(store, users)
    return Result.success(
        {
            "users": [
                {
                    "name": u.get("name"),
                    "surname": u.get("surname"),
                    "email": u.get("email"),
                    "school": _school_name(schools, u),
                }
                for u in users
            ]
        }
    )


@captured("users_count")
def users_count(store) -> Result:
    return Result.success({"totalUsers": store.count(USERS)})


@captured("users_with_ratings")
def users_with_ratings(store) -> Result:
    raters = {r.get("user_id") for r in store.find(RATINGS, columns="user_id", order="user_id") if r.get("user_id")}
    return Result.success({"totalUsersWithRatings": len(raters)})


@captured("user_details")
def user_details(store, page: int, limit: int, now: Optional[datetime] = None) -> Result:
    users = store.find(USERS, order="created_at", offset=_offset(page, limit), limit=limit)
    if not users:
        return not_found("Users not found")
    schools = _schools_by_id(store, users)
    now = now or datetime.now(timezone.utc)

    out = []
    for u in users:
        created = parse_timestamp(u.get("created_at"))
        out.append(
            {
                **public_user(u),
                "school": _school_name(schools, u),
                "accountAge": (now - created).days if created else None,
            }
        )
    return Result.success({"users": out})


@captured("users_count_by_school")
def users_count_by_school(store) -> Result:
    schools = store.find(SCHOOLS, order="name")
    counts = Counter(u.get("school_id") for u in store.find(USERS, columns="id,school_id", order="id"))
    return Result.success(
        {
            "usersCountBySchool": [
                {"id": s["id"], "name": s.get("name"), "usersCount": counts.get(s["id"], 0)} for s in schools
            ]
        }
    )


# ----------------------------------------------------------------------
# Rating metrics
# ----------------------------------------------------------------------
def _course_ratings(store, course_id: str):
    subjects = store.find(SUBJECTS, eq={"course_id": course_id}, order="name")
    ratings = store.find(RATINGS, in_={"subject_id": [s["id"] for s in subjects]}, order="created_at")
    return subjects, ratings


@captured("course_metrics")
def course_metrics(store, course_id: str, group_by: str = "sentence") -> Result:
    key_fn = GROUPINGS.get(group_by)
    if key_fn is None:
        return validation(f"group_by must be one of: {', '.join(sorted(GROUPINGS))}")
    course = store.get(COURSES, course_id)
    if not course:
        return not_found("Course not found")

    subjects, ratings = _course_ratings(store, course_id)
    names = {s["id"]: s.get("name") for s in subjects}

    metrics = []
    for key, bucket in ordered_buckets(aggregate(ratings, key_fn)):
        item = bucket.to_dict()
        item["label"] = names.get(key, key) if group_by == "subject" else key
        metrics.append(item)

    return Result.success(
        {"courseId": course_id, "groupBy": group_by, "totalRatings": len(ratings), "metrics": metrics}
    )


@captured("ratings_overview")
def ratings_overview(store) -> Result:
    bucket = overall(store.find(RATINGS, columns="id,score", order="id"))
    return Result.success(bucket.to_dict())


@captured("course_report")
def course_report(store, course_id: str) -> Result:
    course = store.get(COURSES, course_id)
    if not course:
        return not_found("Course not found")

    _subjects, ratings = _course_ratings(store, course_id)
    sections = ordered_buckets(aggregate(ratings, GROUPINGS["sentence"]))
    pdf = pdf_report.render_report(sections, title=f"{pdf_report.REPORT_TITLE} - {course.get('name') or course_id}")
    logger.info("[insights] report for course %s: %d ratings, %d sentences", course_id, len(ratings), len(sections))
    return Result.success(ReportFile(filename=pdf_report.report_filename(course_id), content=pdf))
