"""Repository tree view — nest flat tree paths and render them as Mermaid.

The hierarchy is held in a ``networkx`` directed graph rooted at
:data:`ROOT`; every other node is a repository path carrying ``name`` and
``kind`` attributes.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator, Sequence

import networkx as nx  # type: ignore[import-untyped]

from repo_forge.domain.entities import TreeEntry

ROOT = ""

FOLDER = "folder"
FILE = "blob"

EMPTY_DIAGRAM = "graph TD; A[No Files Loaded]"

_LABEL_STRIP_RE = re.compile(r'["()\[\]]')

_CLASS_DEFS = (
    "  classDef folder fill:#f9f,stroke:#333,stroke-width:2px;\n"
    "  classDef file fill:#fff,stroke:#333,stroke-width:1px;\n"
)


@dataclass(frozen=True, slots=True)
class Diagram:
    """Rendered Mermaid source plus how much of the tree it covers."""

    mermaid: str
    node_count: int
    truncated: bool


def build_path_tree(entries: Sequence[TreeEntry]) -> nx.DiGraph:  # type: ignore[type-arg]
    """Nest flat paths into a parent → child graph.

    Intermediate segments become folders; the last segment of a file entry
    becomes a file.  A path first seen as a folder stays a folder.
    """
    graph: nx.DiGraph = nx.DiGraph()  # type: ignore[type-arg]
    graph.add_node(ROOT, name="", kind=FOLDER)

    for entry in entries:
        parts = [p for p in entry.path.split("/") if p]
        parent = ROOT
        current = ""
        for index, part in enumerate(parts):
            current = f"{current}/{part}" if current else part
            if current not in graph:
                is_file = index == len(parts) - 1 and entry.is_file
                graph.add_node(current, name=part, kind=FILE if is_file else FOLDER)
                graph.add_edge(parent, current)
            parent = current

    return graph


def sorted_children(graph: nx.DiGraph, node: str) -> list[str]:  # type: ignore[type-arg]
    """Folders first, then files; each group ordered by name, ignoring case."""
    return sorted(graph.successors(node), key=lambda child: _sort_key(graph.nodes[child]))


def _sort_key(attrs: dict[str, str]) -> tuple[bool, str, str]:
    name = attrs["name"]
    return (attrs["kind"] != FOLDER, name.casefold(), name)


def walk(graph: nx.DiGraph) -> Iterator[tuple[str | None, str]]:  # type: ignore[type-arg]
    """Yield ``(parent, node)`` pairs depth-first, skipping the synthetic root."""
    stack: list[tuple[str | None, str]] = [
        (None, child) for child in reversed(sorted_children(graph, ROOT))
    ]
    while stack:
        parent, node = stack.pop()
        yield parent, node
        for child in reversed(sorted_children(graph, node)):
            stack.append((node, child))


def render_mermaid(graph: nx.DiGraph, max_nodes: int | None = None) -> Diagram:  # type: ignore[type-arg]
    """Render the tree as a ``graph TD`` flowchart.

    Folders use ``[...]``, files use ``(...)``.  When *max_nodes* is given the
    walk stops after that many nodes.
    """
    total = graph.number_of_nodes() - 1
    if total <= 0:
        return Diagram(mermaid=EMPTY_DIAGRAM, node_count=0, truncated=False)

    ids: dict[str, str] = {}

    def node_id(path: str) -> str:
        if path not in ids:
            ids[path] = f"n{len(ids)}"
        return ids[path]

    lines = ["graph TD;\n"]
    rendered = 0
    for parent, node in walk(graph):
        if max_nodes is not None and rendered >= max_nodes:
            break
        attrs = graph.nodes[node]
        label = _LABEL_STRIP_RE.sub("", attrs["name"])
        start, end = ("[", "]") if attrs["kind"] == FOLDER else ("(", ")")
        shape = f'{node_id(node)}{start}"{label}"{end}'
        if parent is None:
            lines.append(f"  {shape};\n")
        else:
            lines.append(f"  {node_id(parent)} --> {shape};\n")
        rendered += 1

    lines.append(_CLASS_DEFS)
    return Diagram(mermaid="".join(lines), node_count=rendered, truncated=rendered < total)
