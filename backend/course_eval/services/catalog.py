# backend/course_eval/services/catalog.py
"""Schools, courses, subjects and periods."""
from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Dict, List

from ..core.errors import Result, captured, conflict, not_found
from ..core.store import COURSES, PERIODS, SCHOOLS, SUBJECTS, USERS
from ..models.course import CourseCreate
from ..models.period import PeriodCreate
from ..models.school import SchoolCreate
from ..models.subject import SubjectCreate

logger = logging.getLogger(__name__)


def period_out(row: Dict[str, Any]) -> Dict[str, Any]:
    """Rename the storage column back to the public ``order`` field."""
    out = {k: v for k, v in row.items() if k != "order_index"}
    out["order"] = row.get("order_index")
    return out


def _subjects_by_course(store, course_ids: List[str]) -> Dict[str, List[Dict[str, Any]]]:
    grouped: Dict[str, List[Dict[str, Any]]] = defaultdict(list)
    for subject in store.find(SUBJECTS, in_={"course_id": course_ids}, order="name"):
        grouped[subject["course_id"]].append(subject)
    return grouped


# ----------------------------------------------------------------------
# Schools
# ----------------------------------------------------------------------
@captured("create_school")
def create_school(store, body: SchoolCreate) -> Result:
    if store.find_one(SCHOOLS, name=body.name):
        return conflict("School with the same name already exists")
    school = store.insert(SCHOOLS, {"name": body.name})
    return Result.success({"school": school})


@captured("list_schools")
def list_schools(store) -> Result:
    return Result.success({"schools": store.find(SCHOOLS, order="name")})


# ----------------------------------------------------------------------
# Courses
# ----------------------------------------------------------------------
@captured("create_course")
def create_course(store, body: CourseCreate) -> Result:
    if not store.get(SCHOOLS, body.school_id):
        return not_found("School not found")
    course = store.insert(COURSES, {"name": body.name, "school_id": body.school_id})
    return Result.success({"course": course})


@captured("delete_course")
def delete_course(store, course_id: str) -> Result:
    if not store.get(COURSES, course_id):
        return not_found("Course not found")
    store.delete(COURSES, course_id)
    logger.info("[catalog] deleted course %s", course_id)
    return Result.success()


@captured("list_courses")
def list_courses(store) -> Result:
    return Result.success({"courses": store.find(COURSES, order="name")})


@captured("courses_by_school")
def courses_by_school(store, school_id: str) -> Result:
    return Result.success({"courses": store.find(COURSES, eq={"school_id": school_id}, order="name")})


@captured("courses_with_subjects_by_school")
def courses_with_subjects_by_school(store, school_id: str) -> Result:
    courses = store.find(COURSES, eq={"school_id": school_id}, order="name")
    subjects = _subjects_by_course(store, [c["id"] for c in courses])
    return Result.success(
        {"coursesWithSubjects": [{**c, "subjects": subjects.get(c["id"], [])} for c in courses]}
    )


@captured("course_details")
def course_details(store) -> Result:
    """Every course with its school and its subjects, each subject with its period."""
    courses = store.find(COURSES, order="name")
    school_ids = list({c["school_id"] for c in courses if c.get("school_id")})
    schools = {s["id"]: s for s in store.find(SCHOOLS, in_={"id": school_ids})}
    subjects = _subjects_by_course(store, [c["id"] for c in courses])
    period_ids = list({s["period_id"] for group in subjects.values() for s in group if s.get("period_id")})
    periods = {p["id"]: period_out(p) for p in store.find(PERIODS, in_={"id": period_ids})}

    out = []
    for course in courses:
        out.append(
            {
                **course,
                "school": schools.get(course.get("school_id")),
                "subjects": [
                    {**s, "period": periods.get(s.get("period_id"))} for s in subjects.get(course["id"], [])
                ],
            }
        )
    return Result.success({"courses": out})


# ----------------------------------------------------------------------
# Subjects
# ----------------------------------------------------------------------
@captured("create_subject")
def create_subject(store, body: SubjectCreate) -> Result:
    if not store.get(COURSES, body.course_id):
        return not_found("Course not found")
    if body.period_id and not store.get(PERIODS, body.period_id):
        return not_found("Period not found")
    subject = store.insert(
        SUBJECTS, {"name": body.name, "course_id": body.course_id, "period_id": body.period_id}
    )
    return Result.success({"subject": subject})


@captured("list_subjects")
def list_subjects(store) -> Result:
    return Result.success({"subjects": store.find(SUBJECTS, order="name")})


@captured("delete_subject")
def delete_subject(store, subject_id: str) -> Result:
    if not store.get(SUBJECTS, subject_id):
        return not_found("Subject not found")
    store.delete(SUBJECTS, subject_id)
    return Result.success({"message": "Subject deleted successfully"})


# ----------------------------------------------------------------------
# Periods
# ----------------------------------------------------------------------
@captured("create_period")
def create_period(store, body: PeriodCreate) -> Result:
    if not store.get(USERS, body.user_id):
        return not_found("User not found")
    period = store.insert(PERIODS, {"order_index": body.order, "user_id": body.user_id})
    return Result.success({"period": period_out(period)})


@captured("delete_period")
def delete_period(store, period_id: str) -> Result:
    if not store.get(PERIODS, period_id):
        return not_found("Period not found")
    store.delete(PERIODS, period_id)
    return Result.success()


@captured("list_periods")
def list_periods(store) -> Result:
    return Result.success({"periods": [period_out(p) for p in store.find(PERIODS, order="order_index")]})


@captured("periods_by_user")
def periods_by_user(store, user_id: str) -> Result:
    rows = store.find(PERIODS, eq={"user_id": user_id}, order="order_index")
    return Result.success({"periods": [period_out(p) for p in rows]})


@captured("periods_with_subjects_by_user")
def periods_with_subjects_by_user(store, user_id: str) -> Result:
    periods = store.find(PERIODS, eq={"user_id": user_id}, order="order_index")
    grouped: Dict[str, List[Dict[str, Any]]] = defaultdict(list)
    for subject in store.find(SUBJECTS, in_={"period_id": [p["id"] for p in periods]}, order="name"):
        grouped[subject["period_id"]].append(subject)
    return Result.success(
        {"periodsWithSubjects": [{**period_out(p), "subjects": grouped.get(p["id"], [])} for p in periods]}
    )


# ----------------------------------------------------------------------
# Student views
# ----------------------------------------------------------------------
@captured("subjects_for_student_period")
def subjects_for_student_period(store, user_id: str, period_id: str, course_id: str) -> Result:
    if not store.find_one(PERIODS, id=period_id, user_id=user_id):
        return not_found("Student is not associated with the specified period")
    if not store.get(COURSES, course_id):
        return not_found("Course not found")
    subjects = store.find(SUBJECTS, eq={"course_id": course_id, "period_id": period_id}, order="name")
    return Result.success({"subjects": subjects})


def _school_courses(store, user: Dict[str, Any]) -> List[Dict[str, Any]]:
    if not user.get("school_id"):
        return []
    return store.find(COURSES, eq={"school_id": user["school_id"]}, order="name")


@captured("user_subjects")
def user_subjects(store, user_id: str) -> Result:
    """Courses of the user's school, each with all of its subjects."""
    user = store.get(USERS, user_id)
    if not user:
        return not_found("User not found")
    courses = _school_courses(store, user)
    subjects = _subjects_by_course(store, [c["id"] for c in courses])
    return Result.success([{**c, "subjects": subjects.get(c["id"], [])} for c in courses])


@captured("user_subjects_ordered")
def user_subjects_ordered(store, user_id: str) -> Result:
    """Like user_subjects, keeping only subjects with a period, by period order."""
    user = store.get(USERS, user_id)
    if not user:
        return not_found("User not found")
    courses = _school_courses(store, user)
    subjects = _subjects_by_course(store, [c["id"] for c in courses])
    period_ids = list({s["period_id"] for group in subjects.values() for s in group if s.get("period_id")})
    order = {p["id"]: p.get("order_index") or 0 for p in store.find(PERIODS, in_={"id": period_ids})}

    out = []
    for course in courses:
        attached = [s for s in subjects.get(course["id"], []) if s.get("period_id") in order]
        attached.sort(key=lambda s: (order[s["period_id"]], s.get("name") or ""))
        out.append({**course, "subjects": attached})
    return Result.success(out)
