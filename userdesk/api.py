"""FastAPI application that exposes the user directory over JSON."""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, List

from fastapi import Body, FastAPI, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from .errors import UserdeskError
from .models import User
from .users import UserRepository

logger = logging.getLogger("userdesk.api")


class UserResponse(BaseModel):
    id: int
    username: str
    email: str
    created_at: datetime
    updated_at: datetime


class DeleteUserResponse(BaseModel):
    deleted: int


class StatusResponse(BaseModel):
    status: str


def _to_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        username=user.username,
        email=user.email,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


def create_app(*, repository: UserRepository) -> FastAPI:
    """Create the JSON API application."""

    app = FastAPI(title="Userdesk API", docs_url=None, redoc_url=None)
    app.state.repository = repository

    @app.exception_handler(UserdeskError)
    async def handle_userdesk_error(request: Request, exc: UserdeskError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("Unhandled %s on %s: %s\n%s", exc.name, request.url.path, exc.message, exc.stack)
        return JSONResponse(exc.to_dict(), status_code=exc.status_code)

    @app.get("/v1/status", response_model=StatusResponse)
    async def service_status() -> StatusResponse:
        return StatusResponse(status="ok")

    @app.get("/v1/users", response_model=List[UserResponse])
    def list_users() -> List[UserResponse]:
        return [_to_response(user) for user in repository.find_all()]

    @app.post("/v1/users", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
    def create_user(payload: Any = Body(...)) -> UserResponse:
        return _to_response(repository.create(payload))

    @app.get("/v1/users/{username}", response_model=UserResponse)
    def get_user(username: str) -> UserResponse:
        return _to_response(repository.find_one_by_username(username))

    @app.put("/v1/users/{user_id}", response_model=List[UserResponse])
    def update_user(user_id: int, payload: Any = Body(...)) -> List[UserResponse]:
        return [_to_response(user) for user in repository.update_user(user_id, payload)]

    @app.delete("/v1/users/{user_id}", response_model=DeleteUserResponse)
    def delete_user(user_id: int) -> DeleteUserResponse:
        return DeleteUserResponse(deleted=repository.delete_user(user_id))

    return app


__all__ = ["create_app"]
