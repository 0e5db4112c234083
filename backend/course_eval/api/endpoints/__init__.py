from fastapi import APIRouter, Depends

from ...core.guard import require_role
from ...core.security import Role
from . import courses, feedback, insights, periods, reports, schools, student, subjects, users

# Public and student routes live under /users, everything else needs ADMIN
users_router = APIRouter()
users_router.include_router(users.router, tags=["Users"])
users_router.include_router(student.router, tags=["Student"])

admin_router = APIRouter(dependencies=[Depends(require_role(Role.ADMIN.value))])
admin_router.include_router(schools.router, tags=["Schools"])
admin_router.include_router(courses.router, tags=["Courses"])
admin_router.include_router(subjects.router, tags=["Subjects"])
admin_router.include_router(periods.router, tags=["Periods"])
admin_router.include_router(feedback.router, tags=["Ratings"])
admin_router.include_router(insights.router, prefix="/insights", tags=["Insights"])
admin_router.include_router(reports.router, tags=["Reports"])
