"""HTML pages for browsing the user directory."""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict

from fastapi import APIRouter, FastAPI, Request, status
from fastapi.responses import HTMLResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from .components import GoToTopButton
from .errors import NotFoundError
from .users import UserRepository

logger = logging.getLogger("userdesk.web")

BASE_DIR = Path(__file__).resolve().parent


def _template_environment() -> Jinja2Templates:
    templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))
    templates.env.globals["now"] = datetime.now
    return templates


def _format_datetime(value: datetime) -> str:
    return value.strftime("%Y-%m-%d %H:%M UTC")


def register_ui_routes(app: FastAPI, repository: UserRepository) -> None:
    """Expose the HTML user directory on the provided FastAPI app."""

    templates = _template_environment()
    app.mount("/static", StaticFiles(directory=str(BASE_DIR / "static")), name="static")

    router = APIRouter(include_in_schema=False)

    def _base_context(**extra: Any) -> Dict[str, Any]:
        context: Dict[str, Any] = {
            "format_datetime": _format_datetime,
            "go_to_top": GoToTopButton(),
        }
        context.update(extra)
        return context

    @router.get("/", response_class=HTMLResponse, name="ui_users")
    def users_page(request: Request):
        users = repository.find_all()
        return templates.TemplateResponse(request, "users.html", _base_context(users=users))

    @router.get("/users/{username}", response_class=HTMLResponse, name="ui_user")
    def user_page(username: str, request: Request):
        try:
            user = repository.find_one_by_username(username)
        except NotFoundError as exc:
            logger.warning("Profile lookup failed for %s", username)
            return templates.TemplateResponse(
                request,
                "error.html",
                _base_context(message=exc.message, action=exc.action),
                status_code=status.HTTP_404_NOT_FOUND,
            )
        return templates.TemplateResponse(request, "user.html", _base_context(user=user))

    app.include_router(router)


def create_app(*, repository: UserRepository) -> FastAPI:
    """Create the web application serving the HTML pages."""

    app = FastAPI(title="Userdesk", docs_url=None, redoc_url=None, openapi_url=None)
    app.state.repository = repository
    register_ui_routes(app, repository)
    return app


__all__ = ["create_app", "register_ui_routes"]
