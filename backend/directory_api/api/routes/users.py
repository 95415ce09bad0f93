"""User Routes — the five REST endpoints over UserRepository.

Invariants:
    - Each handler is one repository call wrapped in an envelope
    - Domain errors propagate unchanged to the global handlers (api/error_handlers.py)
"""

from fastapi import APIRouter, Depends, status

from directory_api.schemas.user import (
    MessageEnvelope, UserCreate, UserEnvelope, UserListEnvelope, UserUpdate,
)
from directory_api.services.user_repository import UserRepository, get_user_repository

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=UserListEnvelope)
async def list_users(repo: UserRepository = Depends(get_user_repository)):
    """List all users."""
    users = await repo.list_all()
    return UserListEnvelope(
        message="Users retrieved successfully", count=len(users), data=users,
    )


@router.get("/{user_id}", response_model=UserEnvelope)
async def get_user(user_id: str, repo: UserRepository = Depends(get_user_repository)):
    user = await repo.get_by_id(user_id)
    return UserEnvelope(message="User retrieved successfully", data=user)


@router.post(
    "", response_model=UserEnvelope, status_code=status.HTTP_201_CREATED,
)
async def create_user(
    body: UserCreate, repo: UserRepository = Depends(get_user_repository),
):
    """Create a user. All four fields are required."""
    user = await repo.create(body.to_fields())
    return UserEnvelope(message="User created successfully", data=user)


@router.put("/{user_id}", response_model=UserEnvelope)
async def update_user(
    user_id: str,
    body: UserUpdate,
    repo: UserRepository = Depends(get_user_repository),
):
    """Update any subset of a user's fields."""
    user = await repo.update(user_id, body.to_fields())
    return UserEnvelope(message="User updated successfully", data=user)


@router.delete("/{user_id}", response_model=MessageEnvelope)
async def delete_user(user_id: str, repo: UserRepository = Depends(get_user_repository)):
    await repo.delete(user_id)
    return MessageEnvelope(message="User deleted successfully")
