# backend/course_eval/api/endpoints/student.py
"""Routes for any signed-in user (students rate and comment here)."""
from fastapi import APIRouter, Depends

from ...core.guard import require_user
from ...core.store import get_store
from ...models.comment import CommentCreate
from ...models.rating import RatingCreate
from ...services import catalog, feedback
from ..responses import respond

router = APIRouter(dependencies=[Depends(require_user)])


@router.post("/rating", status_code=201)
def create_rating(body: RatingCreate, claims=Depends(require_user), store=Depends(get_store)):
    return respond(feedback.create_ratings(store, body, claims["sub"]), status_code=201)


@router.post("/comments", status_code=201)
def create_comment(body: CommentCreate, claims=Depends(require_user), store=Depends(get_store)):
    return respond(feedback.create_comment(store, body, claims["sub"]), status_code=201)


@router.get("/{user_id}/subjects")
def user_subjects(user_id: str, store=Depends(get_store)):
    return respond(catalog.user_subjects(store, user_id))


@router.get("/{user_id}/subjects/ordered")
def user_subjects_ordered(user_id: str, store=Depends(get_store)):
    return respond(catalog.user_subjects_ordered(store, user_id))


@router.get("/{user_id}/periods")
def user_periods(user_id: str, store=Depends(get_store)):
    return respond(catalog.periods_by_user(store, user_id))


@router.get("/{user_id}/periods/subjects")
def user_periods_with_subjects(user_id: str, store=Depends(get_store)):
    return respond(catalog.periods_with_subjects_by_user(store, user_id))


@router.get("/{user_id}/periods/{period_id}/courses/{course_id}/subjects")
def subjects_for_period(user_id: str, period_id: str, course_id: str, store=Depends(get_store)):
    return respond(catalog.subjects_for_student_period(store, user_id, period_id, course_id))
