# backend/course_eval/api/endpoints/reports.py
from fastapi import APIRouter, Depends
from fastapi.responses import Response

from ...core.store import get_store
from ...services import insights
from ..responses import respond

router = APIRouter()


@router.get("/reports/courses/{course_id}")
def download_course_report(course_id: str, store=Depends(get_store)):
    result = insights.course_report(store, course_id)
    if not result.ok:
        return respond(result)

    report = result.value
    return Response(
        content=report.content,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f'attachment; filename="{report.filename}"',
            "Cache-Control": "no-store",
            "X-Content-Type-Options": "nosniff",
        },
    )
