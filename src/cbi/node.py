"""Shared base of every binding-tree node."""

from abc import ABC, abstractmethod

from src.cbi.constants import TEMPLATE_NODE
from src.renderer.protocols import Renderer


class Node(ABC):
    """A titled node with ordered children.

    Parsing and rendering walk the children depth first. Parse results are
    combined so that a single failed store call makes the whole walk report
    failure without stopping sibling nodes.
    """

    template = TEMPLATE_NODE

    def __init__(self, title: str | None = None, description: str | None = None):
        self.title = title or ""
        self.description = description or ""
        self.children: list[Node] = []

    @property
    @abstractmethod
    def renderer(self) -> Renderer:
        """Renderer used to draw this node."""

    def append(self, child: "Node") -> None:
        """Append a child node."""
        self.children.append(child)

    def parse(self, *args: str) -> bool:
        """Parse every child and report whether all store calls succeeded."""
        ok = True
        for child in self.children:
            ok = child.parse(*args) and ok
        return ok

    def render(self, *args: str) -> str:
        """Render this node's template."""
        return self.renderer.render(self.template, {"node": self})

    def render_children(self, *args: str) -> str:
        """Render every child and concatenate the markup."""
        return "".join(child.render(*args) for child in self.children)
