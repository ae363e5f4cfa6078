"""Protocol for renderers drawing binding-tree nodes."""

from collections.abc import Mapping
from typing import Protocol


class Renderer(Protocol):
    """Draws one node template.

    The context always holds the node under ``node``; section and value
    templates also receive the section name under ``section``.
    """

    def render(self, template: str, context: Mapping[str, object]) -> str:
        """Render template with context and return the markup."""
        ...
