from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Sequence

from .catalog import APP_FEATURE, FeatureLike
from .declarations import AppDecl, DependencyDecl, ModuleDecl, default_module
from .errors import ConfigurationError, DuplicateIdentifierError
from .graph import ModuleGraph
from .models import Project, Role, TargetDependency
from .resolver import Consumer, DependencyResolver
from .targets import TargetFactory

log = logging.getLogger("featuregraph.builder")


class ModuleGraphBuilder:
    """Assembles feature projects into a validated ModuleGraph.

    Features without a declaration get ``default_module``. The app project
    is built when ``build()`` is called without a feature list, or when the
    list names the ``App`` feature.
    """

    def __init__(
        self,
        *,
        factory: Optional[TargetFactory] = None,
        resolver: Optional[DependencyResolver] = None,
        modules: Sequence[ModuleDecl] = (),
        app: Optional[AppDecl] = None,
        allow_dangling_references: bool = False,
    ):
        self.factory = factory or TargetFactory()
        self.resolver = resolver or DependencyResolver(naming=self.factory.naming)
        self.naming = self.factory.naming
        self.app = app
        self.allow_dangling_references = allow_dangling_references

        self._modules: Dict[str, ModuleDecl] = {}
        for m in modules:
            name = self.naming.catalog.feature(m.feature)
            if name == APP_FEATURE:
                raise ConfigurationError("The App feature is declared through the app section, not as a module")
            if name in self._modules:
                raise DuplicateIdentifierError(f"Feature {name} is declared more than once")
            self._modules[name] = m

    def default_features(self) -> List[str]:
        names = list(self.naming.catalog.module_features())
        if self.app is not None:
            names.append(APP_FEATURE)
        return names

    def build(self, features: Optional[Sequence[FeatureLike]] = None) -> ModuleGraph:
        names: List[str] = []
        for f in (features if features is not None else self.default_features()):
            name = self.naming.catalog.feature(f)
            if name in names:
                raise DuplicateIdentifierError(f"Feature {name} requested more than once")
            names.append(name)

        projects = [
            self.build_app_project() if name == APP_FEATURE else self.build_project(name)
            for name in names
        ]

        graph = ModuleGraph.from_projects(projects, allow_dangling=self.allow_dangling_references)
        graph.topological_order()

        log.info(
            "featuregraph.build projects=%s targets=%s edges=%s",
            len(graph.projects),
            len(graph.targets),
            len(graph.edges),
        )
        dangling = graph.unresolved_references()
        if dangling:
            log.warning(
                "featuregraph.build unresolved references: %s",
                ", ".join(f"{src}->{dep.target_name}" for src, dep in dangling),
            )
        return graph

    def _resolve_all(self, decls: Iterable[DependencyDecl], consumer: Consumer) -> List[TargetDependency]:
        out: List[TargetDependency] = []
        for d in decls:
            if d.role is None:
                out.append(self.resolver.external(d.name))
            else:
                out.append(self.resolver.resolve(d.name, d.role, consumer=consumer))
        return out

    def build_project(self, feature: FeatureLike) -> Project:
        name = self.naming.catalog.feature(feature)
        if name == APP_FEATURE:
            return self.build_app_project()
        decl = self._modules.get(name) or default_module(name)

        targets = [
            self.factory.feature_interface(
                name,
                dependencies=self._resolve_all(decl.interface.dependencies, (name, Role.INTERFACE)),
                resources=decl.interface.resources,
            )
        ]

        if decl.implementation is not None:
            consumer = (name, Role.IMPLEMENTATION)
            # an implementation always links its own interface, once
            deps = self._resolve_all(decl.implementation.dependencies, consumer)
            deps.append(self.resolver.interface(name, consumer=consumer))
            targets.append(
                self.factory.feature_implementation(
                    name,
                    dependencies=deps,
                    resources=decl.implementation.resources,
                )
            )

        for test in decl.tests:
            extras = self._resolve_all(test.dependencies, (name, Role.TEST))
            if test.under == Role.IMPLEMENTATION:
                if decl.implementation is None:
                    raise ConfigurationError(f"{name} declares implementation tests but no implementation")
                targets.append(self.factory.test_implementation(name, dependencies=extras))
            elif test.under == Role.INTERFACE:
                targets.append(self.factory.test_interface(name, dependencies=extras))
            else:
                raise ConfigurationError(f"{name}: tests can only target interface or implementation")

        return Project(name=name, path=self.naming.module_path(name), targets=tuple(targets))

    def build_app_project(self) -> Project:
        if self.app is None:
            raise ConfigurationError("No app is declared")

        path = self.naming.module_path(APP_FEATURE)
        deps = self._resolve_all(self.app.dependencies, (APP_FEATURE, Role.APP))
        self._warn_unpaired(deps)

        sources = [s if s.startswith(path + "/") else f"{path}/{s}" for s in self.app.sources if s]
        target = self.factory.make_app(
            name=self.app.name,
            sources=sources,
            dependencies=deps,
            info_plist=self.app.info_plist,
        )
        return Project(name=APP_FEATURE, path=path, targets=(target,))

    def _warn_unpaired(self, deps: Sequence[TargetDependency]) -> None:
        roles: Dict[str, set] = {}
        for d in deps:
            if d.feature is not None:
                roles.setdefault(d.feature, set()).add(d.role)
        paired = [f for f, r in roles.items() if {Role.INTERFACE, Role.IMPLEMENTATION} <= r]
        if not paired:
            log.warning("App %s does not link any feature interface/implementation pair", self.app.name)
        for f, r in sorted(roles.items()):
            if Role.INTERFACE in r and Role.IMPLEMENTATION not in r:
                log.warning("App %s links %sInterface without its implementation", self.app.name, f)
