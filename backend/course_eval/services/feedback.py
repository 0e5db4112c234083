# backend/course_eval/services/feedback.py
"""Ratings and comments submitted by students."""
from __future__ import annotations

import logging

from ..core.errors import Result, captured, not_found, unauthorized
from ..core.store import COMMENTS, RATINGS, SUBJECTS, USERS
from ..models.comment import CommentCreate
from ..models.rating import RatingCreate

logger = logging.getLogger(__name__)


def _check_refs(store, subject_id: str, user_id: str, author_id: str):
    if user_id != author_id:
        return unauthorized("Cannot submit on behalf of another user")
    if not store.get(SUBJECTS, subject_id):
        return not_found("Subject not found")
    if not store.get(USERS, user_id):
        return not_found("User not found")
    return None


@captured("create_ratings")
def create_ratings(store, body: RatingCreate, author_id: str) -> Result:
    """Store every score of the submission in one bulk insert (all or nothing)."""
    missing = _check_refs(store, body.subject_id, body.user_id, author_id)
    if missing:
        return missing

    rows = [
        {
            "sentence": item.sentence,
            "score": item.score,
            "subject_id": body.subject_id,
            "user_id": body.user_id,
        }
        for item in body.scores
    ]
    ratings = store.insert_many(RATINGS, rows)
    logger.info(
        "[feedback] stored %d rating(s) for subject %s by user %s",
        len(ratings), body.subject_id, body.user_id,
    )
    return Result.success({"ratings": ratings})


@captured("list_ratings")
def list_ratings(store) -> Result:
    return Result.success({"ratings": store.find(RATINGS, order="created_at")})


@captured("delete_rating")
def delete_rating(store, rating_id: str) -> Result:
    if not store.get(RATINGS, rating_id):
        return not_found("Rating not found")
    store.delete(RATINGS, rating_id)
    return Result.success({"message": "Rating deleted successfully"})


@captured("create_comment")
def create_comment(store, body: CommentCreate, author_id: str) -> Result:
    missing = _check_refs(store, body.subject_id, body.user_id, author_id)
    if missing:
        return missing
    comment = store.insert(
        COMMENTS, {"content": body.content, "subject_id": body.subject_id, "user_id": body.user_id}
    )
    return Result.success({"comment": comment})


@captured("list_comments")
def list_comments(store) -> Result:
    """Comments with their subject and the author's id only."""
    comments = store.find(COMMENTS, order="created_at")
    subject_ids = list({c["subject_id"] for c in comments if c.get("subject_id")})
    subjects = {s["id"]: s for s in store.find(SUBJECTS, in_={"id": subject_ids})}

    out = []
    for c in comments:
        out.append({**c, "user": {"id": c.get("user_id")}, "subject": subjects.get(c.get("subject_id"))})
    return Result.success({"comments": out})
