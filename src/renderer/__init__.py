"""Template rendering of binding trees."""

from src.renderer.html_renderer import TemplateRenderer
from src.renderer.protocols import Renderer


__all__ = [
    "Renderer",
    "TemplateRenderer",
]
