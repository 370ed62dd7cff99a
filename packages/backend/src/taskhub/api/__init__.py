"""API route aggregation.

All routers registered here get mounted in main.py.

Identity resolution is applied once, at the api_router level, through
authenticate_request. It short-circuits for the public allow-list
(register, login, health) and rejects everything else without a valid
bearer token before any handler runs.
"""

from fastapi import APIRouter, Depends

from taskhub.api.auth import router as auth_router
from taskhub.api.health import router as health_router
from taskhub.api.projects import router as projects_router
from taskhub.api.tasks import router as tasks_router
from taskhub.api.users import router as users_router
from taskhub.auth.dependencies import authenticate_request

api_router = APIRouter(prefix="/api/v1", dependencies=[Depends(authenticate_request)])

api_router.include_router(health_router, tags=["health"])
api_router.include_router(auth_router, tags=["auth"])
api_router.include_router(users_router, tags=["users"])
api_router.include_router(projects_router, tags=["projects"])
api_router.include_router(tasks_router, tags=["tasks", "comments"])
