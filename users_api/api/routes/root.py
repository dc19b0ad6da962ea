"""Service Index — static description of the deployment and its endpoints."""

from fastapi import APIRouter, Depends

from users_api.config import Settings, get_settings

router = APIRouter(tags=["meta"])

ENDPOINTS = {
    "health": "/health",
    "users": "/api/users",
    "userById": "/api/users/:id",
    "createUser": "POST /api/users",
}


@router.get("/")
async def service_index(settings: Settings = Depends(get_settings)):
    return {
        "message": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
        "pod": settings.hostname,
        "endpoints": ENDPOINTS,
        "database": {
            "host": settings.db_host,
            "name": settings.db_name,
            "user": settings.db_user,
        },
    }
