from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from .models import Role


@dataclass(frozen=True)
class DependencyDecl:
    """A declared dependency: a feature role, or an external package when
    ``role`` is None."""

    name: str
    role: Optional[Role] = None

    @classmethod
    def interface(cls, feature: str) -> "DependencyDecl":
        return cls(name=feature, role=Role.INTERFACE)

    @classmethod
    def implementation(cls, feature: str) -> "DependencyDecl":
        return cls(name=feature, role=Role.IMPLEMENTATION)

    @classmethod
    def external(cls, package: str) -> "DependencyDecl":
        return cls(name=package, role=None)


@dataclass(frozen=True)
class TargetDecl:
    dependencies: Tuple[DependencyDecl, ...] = ()
    resources: Tuple[str, ...] = ()


@dataclass(frozen=True)
class UnitTestDecl:
    under: Role = Role.IMPLEMENTATION
    dependencies: Tuple[DependencyDecl, ...] = ()


@dataclass(frozen=True)
class ModuleDecl:
    feature: str
    interface: TargetDecl = field(default_factory=TargetDecl)
    implementation: Optional[TargetDecl] = None
    tests: Tuple[UnitTestDecl, ...] = ()


@dataclass(frozen=True)
class AppDecl:
    name: str
    sources: Tuple[str, ...]
    dependencies: Tuple[DependencyDecl, ...] = ()
    info_plist: Optional[Dict[str, Any]] = None


def default_module(feature: str) -> ModuleDecl:
    # interface + implementation wired to its own interface
    return ModuleDecl(
        feature=feature,
        implementation=TargetDecl(dependencies=(DependencyDecl.interface(feature),)),
    )
