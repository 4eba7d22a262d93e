# app/web.py
"""Request-scoped helpers shared by the HTML routes: flash messages,
template rendering, injected services and the session user."""
import os
from typing import Any, Dict, Optional

from fastapi import Depends, Request
from fastapi.responses import RedirectResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.orm import Session

from .db import get_db
from .models import User

templates = Jinja2Templates(directory=os.path.join(os.path.dirname(__file__), "templates"))

_FLASH_KEY = "_flashes"


class LoginRequired(Exception):
    pass


def flash(request: Request, category: str, message: str):
    request.session.setdefault(_FLASH_KEY, []).append([category, message])


def pop_flashes(request: Request) -> Dict[str, list]:
    out: Dict[str, list] = {"success": [], "error": []}
    for category, message in request.session.pop(_FLASH_KEY, []):
        out.setdefault(category, []).append(message)
    return out


def redirect(request: Request, url: str, category: Optional[str] = None, message: Optional[str] = None):
    if category and message:
        flash(request, category, message)
    return RedirectResponse(url, status_code=303)


def render(request: Request, name: str, context: Optional[Dict[str, Any]] = None,
           success: Optional[str] = None):
    """Render a view; `success` is shown once without going through the session."""
    flashes = pop_flashes(request)
    if success:
        flashes["success"].append(success)
    ctx = dict(context or {})
    ctx["flashes"] = flashes
    ctx["current_user"] = getattr(request.state, "user", None)
    return templates.TemplateResponse(request, name, ctx)


def get_geocoder(request: Request):
    return request.app.state.geocoder


def get_image_store(request: Request):
    return request.app.state.image_store


def current_user(request: Request, db: Session = Depends(get_db)) -> User:
    user_id = request.session.get("user_id")
    user = db.get(User, user_id) if user_id is not None else None
    if user is None:
        raise LoginRequired()
    request.state.user = user
    return user
