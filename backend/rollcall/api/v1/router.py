from fastapi import APIRouter

from rollcall.api.v1.endpoints import (
    assignments,
    attendance,
    forms,
    groups,
    responses,
    users,
)

api_v1_router = APIRouter()

api_v1_router.include_router(forms.router, prefix="/forms", tags=["forms"])
api_v1_router.include_router(responses.router, prefix="/forms", tags=["responses"])
api_v1_router.include_router(attendance.router, prefix="/forms", tags=["attendance"])
api_v1_router.include_router(groups.router, prefix="/groups", tags=["groups"])
api_v1_router.include_router(assignments.router, prefix="/assignments", tags=["assignments"])
api_v1_router.include_router(users.router, prefix="/users", tags=["users"])
