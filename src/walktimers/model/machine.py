"""Machine specification as seen by the implicit-timer layer.

Only the parts of a node that decide timer semantics are modelled: the
branch set (its kind and ordered branches) and each branch's pattern.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Branch(BaseModel):
    """A single branch of a node.

    ``pattern`` is the structural template matched against incoming
    messages.  It is usually a mapping, but any JSON shape is allowed.
    """

    pattern: Any = None
    target: str | None = None


class Branches(BaseModel):
    """The branch set of a node.

    ``type`` tags how the branches are selected; ``"message"`` branches
    are matched against incoming messages.
    """

    type: str | None = None
    branches: list[Branch] = []

    @property
    def is_message(self) -> bool:
        return self.type == "message"


class Node(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    branches: Branches | None = Field(default=None, alias="branching")


class Spec(BaseModel):
    name: str = ""
    nodes: dict[str, Node] = {}

    def node(self, name: str) -> Node | None:
        """Look up a node by name, ``None`` when the spec has no such node."""
        return self.nodes.get(name)
