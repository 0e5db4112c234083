# backend/course_eval/api/endpoints/feedback.py
from fastapi import APIRouter, Depends

from ...core.store import get_store
from ...services import feedback
from ..responses import respond

router = APIRouter()


@router.get("/ratings")
def list_ratings(store=Depends(get_store)):
    return respond(feedback.list_ratings(store))


@router.delete("/ratings/{rating_id}")
def delete_rating(rating_id: str, store=Depends(get_store)):
    return respond(feedback.delete_rating(store, rating_id))


@router.get("/comments")
def list_comments(store=Depends(get_store)):
    return respond(feedback.list_comments(store))
