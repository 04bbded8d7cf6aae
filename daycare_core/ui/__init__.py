# UI package
from .theme import apply_css, page_header, status_pill
from .session import get_store, get_realtime, require_login, render_sidebar

__all__ = [
    "apply_css",
    "page_header",
    "status_pill",
    "get_store",
    "get_realtime",
    "require_login",
    "render_sidebar",
]
