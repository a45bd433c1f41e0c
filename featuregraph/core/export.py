from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List

from .graph import ModuleGraph
from .models import Role


_DOT_STYLE = {
    Role.APP: 'shape=box, style="filled", fillcolor="#d9ead3"',
    Role.INTERFACE: 'shape=component, style="filled", fillcolor="#cfe2f3"',
    Role.IMPLEMENTATION: 'shape=box, style="filled", fillcolor="#fff2cc"',
    Role.TEST: 'shape=note, style="filled", fillcolor="#eeeeee"',
}


def to_json(graph: ModuleGraph) -> str:
    return json.dumps(graph.to_dict(), indent=2, sort_keys=True)


def to_dot(graph: ModuleGraph, *, include_externals: bool = True) -> str:
    lines: List[str] = ["digraph modules {", "  rankdir=LR;"]

    for p in graph.projects:
        lines.append(f'  subgraph "cluster_{p.name}" {{')
        lines.append(f'    label="{p.path}";')
        for t in p.targets:
            lines.append(f'    "{t.name}" [{_DOT_STYLE[t.role]}];')
        lines.append("  }")

    for a, b in graph.edges:
        lines.append(f'  "{graph.targets[a].name}" -> "{graph.targets[b].name}";')

    if include_externals:
        externals = sorted({d.target_name for t in graph.targets for d in t.external_dependencies()})
        for name in externals:
            lines.append(f'  "{name}" [shape=ellipse, style="dashed"];')
        for t in graph.targets:
            for d in t.external_dependencies():
                lines.append(f'  "{t.name}" -> "{d.target_name}" [style="dashed"];')

    lines.append("}")
    return "\n".join(lines) + "\n"


def write_snapshot(path: Path, graph: ModuleGraph) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(to_json(graph) + "\n", encoding="utf-8")


def load_snapshot(path: Path) -> Dict[str, Any]:
    return json.loads(path.read_text(encoding="utf-8"))


def snapshots_equal(current: Dict[str, Any], expected: Dict[str, Any]) -> bool:
    """Compares two graph dicts after a JSON round-trip, so tuples/lists and
    key order never matter."""
    def _norm(d: Dict[str, Any]) -> str:
        return json.dumps(d or {}, sort_keys=True)

    return _norm(current) == _norm(expected)
