# backend/course_eval/api/endpoints/subjects.py
from fastapi import APIRouter, Depends

from ...core.store import get_store
from ...models.subject import SubjectCreate
from ...services import catalog
from ..responses import respond

router = APIRouter()


@router.post("/subjects", status_code=201)
def create_subject(body: SubjectCreate, store=Depends(get_store)):
    return respond(catalog.create_subject(store, body), status_code=201)


@router.get("/subjects")
def list_subjects(store=Depends(get_store)):
    return respond(catalog.list_subjects(store))


@router.delete("/subjects/{subject_id}")
def delete_subject(subject_id: str, store=Depends(get_store)):
    return respond(catalog.delete_subject(store, subject_id))
