# backend/course_eval/api/endpoints/insights.py
from fastapi import APIRouter, Depends, Query

from ...core.store import get_store
from ...services import insights
from ..responses import respond

router = APIRouter()

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


@router.get("/users")
def users_page(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    store=Depends(get_store),
):
    return respond(insights.users_page(store, page, limit))


@router.get("/users/all")
def users_all(store=Depends(get_store)):
    return respond(insights.users_all(store))


@router.get("/users/latest")
def users_latest(store=Depends(get_store)):
    return respond(insights.users_latest(store))


@router.get("/users/count")
def users_count(store=Depends(get_store)):
    return respond(insights.users_count(store))


@router.get("/users/with-ratings")
def users_with_ratings(store=Depends(get_store)):
    return respond(insights.users_with_ratings(store))


@router.get("/users/details")
def user_details(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    store=Depends(get_store),
):
    return respond(insights.user_details(store, page, limit))


@router.get("/schools/user-counts")
def users_count_by_school(store=Depends(get_store)):
    return respond(insights.users_count_by_school(store))


@router.get("/courses/{course_id}/metrics")
def course_metrics(course_id: str, group_by: str = Query("sentence"), store=Depends(get_store)):
    """Rating metrics for a course grouped by sentence, subject or day."""
    return respond(insights.course_metrics(store, course_id, group_by))


@router.get("/ratings/overview")
def ratings_overview(store=Depends(get_store)):
    return respond(insights.ratings_overview(store))
