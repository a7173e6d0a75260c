"""Step results produced by the machine engine.

A ``Walked`` records the strides of exactly one completed execution step.
Field aliases follow the engine's JSON encoding (``from``/``to``/``node``).
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class State(BaseModel):
    """A node together with the bindings that were in effect there."""

    model_config = ConfigDict(populate_by_name=True)

    node_name: str = Field(alias="node")
    bs: dict[str, Any] = {}


class Stride(BaseModel):
    """One transition within a step.

    - ``from_`` is ``None`` on the initial entry into a machine
    - ``to`` is ``None`` when the machine halted
    """

    model_config = ConfigDict(populate_by_name=True)

    from_: State | None = Field(default=None, alias="from")
    to: State | None = None


class Walked(BaseModel):
    strides: list[Stride] = []
