from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence, Tuple

from .errors import ConfigurationError, CyclicGraphError, DuplicateIdentifierError, UnknownIdentifierError
from .models import Project, Target, TargetDependency


Edge = Tuple[int, int]


@dataclass(frozen=True)
class ModuleGraph:
    """All projects of one build configuration.

    ``targets`` is an arena in project order; ``edges`` are
    ``(consumer_index, dependency_index)`` pairs into it. References are kept
    by name on each Target, so a target may point at one declared later.
    """

    projects: Tuple[Project, ...] = ()
    targets: Tuple[Target, ...] = ()
    edges: Tuple[Edge, ...] = ()
    _index: Dict[str, int] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_projects(cls, projects: Sequence[Project], *, allow_dangling: bool = False) -> "ModuleGraph":
        project_names: Dict[str, str] = {}
        targets: List[Target] = []
        owner_path: Dict[str, str] = {}
        index: Dict[str, int] = {}
        bundle_ids: Dict[str, str] = {}

        for p in projects:
            if p.name in project_names:
                raise DuplicateIdentifierError(f"Duplicate project name: {p.name}")
            project_names[p.name] = p.path

            for t in p.targets:
                if t.name in index:
                    raise DuplicateIdentifierError(f"Duplicate target name: {t.name}")
                if t.bundle_id in bundle_ids:
                    raise DuplicateIdentifierError(
                        f"Bundle id {t.bundle_id} used by both {bundle_ids[t.bundle_id]} and {t.name}"
                    )
                index[t.name] = len(targets)
                owner_path[t.name] = p.path
                bundle_ids[t.bundle_id] = t.name
                targets.append(t)

        edges: Dict[Edge, None] = {}
        for i, t in enumerate(targets):
            for dep in t.project_dependencies():
                j = index.get(dep.target_name)
                if j is None:
                    if allow_dangling:
                        continue
                    raise ConfigurationError(
                        f"{t.name} depends on {dep.target_name} ({dep.module_path}), which is not part of the graph"
                    )
                if dep.module_path and dep.module_path != owner_path[dep.target_name]:
                    raise ConfigurationError(
                        f"{t.name} references {dep.target_name} at {dep.module_path}, "
                        f"but it is declared in {owner_path[dep.target_name]}"
                    )
                edges[(i, j)] = None

        return cls(projects=tuple(projects), targets=tuple(targets), edges=tuple(edges), _index=index)

    # --- lookups ---

    def index_of(self, name: str) -> int:
        try:
            return self._index[name]
        except KeyError:
            raise UnknownIdentifierError(f"Unknown target: {name!r}") from None

    def target(self, name: str) -> Target:
        return self.targets[self.index_of(name)]

    def project_of(self, name: str) -> Project:
        self.index_of(name)
        for p in self.projects:
            if p.target(name) is not None:
                return p
        raise UnknownIdentifierError(f"Unknown target: {name!r}")

    def dependencies_of(self, name: str) -> List[str]:
        i = self.index_of(name)
        return [self.targets[b].name for a, b in self.edges if a == i]

    def dependents_of(self, name: str) -> List[str]:
        i = self.index_of(name)
        return [self.targets[a].name for a, b in self.edges if b == i]

    def transitive_dependencies(self, name: str) -> List[str]:
        start = self.index_of(name)
        adjacency = self._adjacency()
        seen = {start}
        out: List[str] = []
        queue = deque([start])
        while queue:
            current = queue.popleft()
            for nxt in adjacency[current]:
                if nxt in seen:
                    continue
                seen.add(nxt)
                out.append(self.targets[nxt].name)
                queue.append(nxt)
        return out

    def unresolved_references(self) -> List[Tuple[str, TargetDependency]]:
        return [
            (t.name, d)
            for t in self.targets
            for d in t.project_dependencies()
            if d.target_name not in self._index
        ]

    def _adjacency(self) -> List[List[int]]:
        adjacency: List[List[int]] = [[] for _ in self.targets]
        for a, b in self.edges:
            adjacency[a].append(b)
        return adjacency

    # --- ordering ---

    def topological_order(self) -> List[str]:
        """Build order: every target comes after everything it depends on.

        Ties are broken by declaration order, so the result is stable.
        """
        n = len(self.targets)
        remaining_deps = [0] * n
        dependents: List[List[int]] = [[] for _ in range(n)]
        for a, b in self.edges:
            remaining_deps[a] += 1
            dependents[b].append(a)

        queue = deque(i for i in range(n) if remaining_deps[i] == 0)
        order: List[int] = []

        while queue:
            current = queue.popleft()
            order.append(current)
            for consumer in dependents[current]:
                remaining_deps[consumer] -= 1
                if remaining_deps[consumer] == 0:
                    queue.append(consumer)

        if len(order) != n:
            cycle = self._find_cycle({i for i in range(n) if remaining_deps[i] > 0})
            raise CyclicGraphError(
                "Circular target dependency detected: " + " -> ".join(cycle),
                cycle=cycle,
            )

        return [self.targets[i].name for i in order]

    def _find_cycle(self, stuck: set) -> List[str]:
        adjacency = self._adjacency()
        current = min(stuck)
        path: List[int] = []
        position: Dict[int, int] = {}
        while current not in position:
            position[current] = len(path)
            path.append(current)
            current = next(b for b in adjacency[current] if b in stuck)
        loop = path[position[current]:] + [current]
        return [self.targets[i].name for i in loop]

    def is_acyclic(self) -> bool:
        try:
            self.topological_order()
        except CyclicGraphError:
            return False
        return True

    # --- serialization ---

    def to_dict(self, *, include_order: bool = True) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "projects": [p.to_dict() for p in self.projects],
            "targets": [t.to_dict() for t in self.targets],
            "edges": [[a, b] for a, b in self.edges],
        }
        if include_order:
            out["order"] = self.topological_order()
        return out

    def bundle_ids(self) -> List[str]:
        return [t.bundle_id for t in self.targets]

    def summary(self) -> Dict[str, int]:
        return {
            "project_count": len(self.projects),
            "target_count": len(self.targets),
            "edge_count": len(self.edges),
        }
