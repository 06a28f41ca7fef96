"""
View rendering helpers.

Every page receives an explicit ``PageContext`` built for the current request,
carrying the page title (falling back to the configured default) and site name.
"""

from dataclasses import dataclass
from typing import Optional

from flask import current_app, render_template, request


@dataclass(frozen=True)
class PageContext:
    title: str
    site_name: str


def build_page_context(title: Optional[str] = None) -> PageContext:
    default_title = current_app.config.get('DEFAULT_PAGE_TITLE', 'NGO Volunteer Management')
    return PageContext(
        title=title or default_title,
        site_name=current_app.config.get('SITE_NAME', default_title),
    )


def render_page(template: str, title: Optional[str] = None, status: int = 200, **data):
    """Render ``template`` with the page context; returns a (body, status) pair."""
    page = build_page_context(title)
    return render_template(template, page=page, title=page.title, **data), status


def wants_json() -> bool:
    """True for JSON request bodies or clients preferring JSON responses."""
    if request.is_json:
        return True
    best = request.accept_mimetypes.best_match(['text/html', 'application/json'])
    return best == 'application/json'
