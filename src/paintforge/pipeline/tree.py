"""Renderer-neutral visual tree produced by the compositor."""

from __future__ import annotations

import json
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, eq=True)
class Node:
    """One element of a composited frame.

    ``kind`` names the element (``"group"``, ``"fill"``, ``"filter"`` ...),
    ``props`` holds JSON-compatible parameters and ``children`` are drawn
    in order, later children on top.
    """

    kind: str
    props: Mapping[str, Any] = field(default_factory=dict)
    children: tuple[Node, ...] = ()

    __hash__ = None  # type: ignore[assignment]

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"kind": self.kind, "props": dict(self.props)}
        if self.children:
            data["children"] = [child.to_dict() for child in self.children]
        return data

    def to_json(self, *, indent: int | None = None) -> str:
        return json.dumps(self.to_dict(), sort_keys=True, indent=indent)

    def walk(self) -> Iterator[Node]:
        """Depth-first, pre-order traversal including this node."""
        yield self
        for child in self.children:
            yield from child.walk()

    def find_all(self, kind: str) -> list[Node]:
        return [node for node in self.walk() if node.kind == kind]


def group(*children: Node | None, **props: Any) -> Node:
    """A ``group`` node, skipping ``None`` children."""
    return Node("group", props, tuple(c for c in children if c is not None))


Renderer = Callable[[int, Mapping[str, Any]], Node]
"""An external asset renderer: ``(frame, config) -> Node``."""
