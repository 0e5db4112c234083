# backend/course_eval/api/endpoints/periods.py
from fastapi import APIRouter, Depends

from ...core.store import get_store
from ...models.period import PeriodCreate
from ...services import catalog
from ..responses import respond

router = APIRouter()


@router.post("/periods", status_code=201)
def create_period(body: PeriodCreate, store=Depends(get_store)):
    return respond(catalog.create_period(store, body), status_code=201)


@router.get("/periods")
def list_periods(store=Depends(get_store)):
    return respond(catalog.list_periods(store))


@router.delete("/periods/{period_id}", status_code=204)
def delete_period(period_id: str, store=Depends(get_store)):
    return respond(catalog.delete_period(store, period_id), status_code=204)
