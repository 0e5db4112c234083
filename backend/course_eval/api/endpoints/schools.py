# backend/course_eval/api/endpoints/schools.py
from fastapi import APIRouter, Depends

from ...core.store import get_store
from ...models.school import SchoolCreate
from ...services import catalog
from ..responses import respond

router = APIRouter()


@router.post("/school", status_code=201)
def create_school(body: SchoolCreate, store=Depends(get_store)):
    return respond(catalog.create_school(store, body), status_code=201)


@router.get("/schools")
def list_schools(store=Depends(get_store)):
    return respond(catalog.list_schools(store))


@router.get("/schools/{school_id}/courses")
def school_courses(school_id: str, store=Depends(get_store)):
    return respond(catalog.courses_by_school(store, school_id))


@router.get("/schools/{school_id}/courses/subjects")
def school_courses_with_subjects(school_id: str, store=Depends(get_store)):
    return respond(catalog.courses_with_subjects_by_school(store, school_id))
