"""User Routes — list, fetch by id, and create users.

Invariants:
    - Every success body carries success: true
    - Store failures propagate as UsersApiError and are rendered by the
      global handlers (api/error_handlers.py)
    - The path id is passed through as an opaque string
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status

from users_api.infrastructure.database import (
    DatabaseSessionManager, get_db_manager,
)
from users_api.schemas.user import UserCreate
from users_api.services import users as user_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("")
async def list_users(db: DatabaseSessionManager = Depends(get_db_manager)):
    """List all users ordered by id."""
    users = await user_service.list_users(db)
    return {
        "success": True,
        "data": [u.model_dump() for u in users],
        "count": len(users),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/{user_id}")
async def get_user(
    user_id: str, db: DatabaseSessionManager = Depends(get_db_manager),
):
    """Get a single user."""
    user = await user_service.get_user(db, user_id)
    return {"success": True, "data": user.model_dump()}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_user(
    body: UserCreate, db: DatabaseSessionManager = Depends(get_db_manager),
):
    """Create a user."""
    user = await user_service.create_user(db, body)
    logger.info("User created", extra={"user_id": user.id})
    return {"success": True, "data": user.model_dump()}
