"""Server-rendered page shell and its static assets."""

from .shell import STATIC_DIR, build_previews, render_page

__all__ = ["STATIC_DIR", "build_previews", "render_page"]
