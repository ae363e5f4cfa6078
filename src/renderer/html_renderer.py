"""HTML renderer using Jinja2 templates."""

from collections.abc import Mapping
from pathlib import Path

import structlog
from jinja2 import (
    ChoiceLoader,
    Environment,
    FileSystemLoader,
    PackageLoader,
    select_autoescape,
)


logger = structlog.get_logger()

TEMPLATE_SUFFIX = ".html"


class TemplateRenderer:
    """Renders binding-tree nodes with Jinja2 templates.

    Template ``cbi/value`` resolves to ``cbi/value.html``, looked up first in
    an optional override directory and then in src/renderer/templates/.
    Auto-escaping is enabled so stored values cannot inject markup.
    """

    def __init__(self, template_dir: Path | str | None = None) -> None:
        """Initialize the renderer.

        Args:
            template_dir: Optional directory whose templates take precedence.
        """
        loaders: list[FileSystemLoader | PackageLoader] = []
        if template_dir is not None:
            loaders.append(FileSystemLoader(str(template_dir)))
        loaders.append(PackageLoader("src.renderer", "templates"))

        self._log = logger.bind(component="renderer")
        self._env = Environment(
            loader=ChoiceLoader(loaders),
            autoescape=select_autoescape(["html", "xml"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def render(self, template: str, context: Mapping[str, object]) -> str:
        """Render a node template.

        Args:
            template: Template identifier, e.g. ``cbi/map``.
            context: Template variables; ``node`` is the node being drawn.

        Returns:
            The rendered markup.
        """
        tmpl = self._env.get_template(template + TEMPLATE_SUFFIX)
        content = tmpl.render(dict(context))
        self._log.debug("template_rendered", template=template, bytes=len(content))
        return content
