# backend/course_eval/api/endpoints/courses.py
from fastapi import APIRouter, Depends

from ...core.store import get_store
from ...models.course import CourseCreate
from ...services import catalog
from ..responses import respond

router = APIRouter()


@router.post("/courses", status_code=201)
def create_course(body: CourseCreate, store=Depends(get_store)):
    return respond(catalog.create_course(store, body), status_code=201)


@router.get("/courses")
def list_courses(store=Depends(get_store)):
    return respond(catalog.list_courses(store))


@router.get("/courses/details")
def course_details(store=Depends(get_store)):
    return respond(catalog.course_details(store))


@router.delete("/courses/{course_id}", status_code=204)
def delete_course(course_id: str, store=Depends(get_store)):
    return respond(catalog.delete_course(store, course_id), status_code=204)
