from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from .errors import UnknownIdentifierError


DEFAULT_DEPLOYMENT_TARGET = "16.0"
DEFAULT_DESTINATIONS: Tuple[str, ...] = ("iPhone", "iPad")
DEFAULT_INFO_PLIST: Dict[str, Any] = {"UILaunchScreen": {}}


class Role(str, Enum):
    INTERFACE = "interface"
    IMPLEMENTATION = "implementation"
    TEST = "test"
    APP = "app"

    @classmethod
    def parse(cls, value: Any) -> "Role":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise UnknownIdentifierError(f"Unknown role: {value!r}") from None


class ProductType(str, Enum):
    APP = "app"
    FRAMEWORK = "framework"
    STATIC_FRAMEWORK = "staticFramework"
    UNIT_TESTS = "unitTests"


class DependencyKind(str, Enum):
    PROJECT = "project"
    EXTERNAL = "external"


@dataclass(frozen=True)
class TargetDependency:
    kind: DependencyKind
    target_name: str
    module_path: Optional[str] = None
    feature: Optional[str] = None
    role: Optional[Role] = None

    @property
    def is_external(self) -> bool:
        return self.kind == DependencyKind.EXTERNAL

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "target": self.target_name,
            "path": self.module_path,
        }


@dataclass(frozen=True)
class Target:
    name: str
    role: Role
    product: ProductType
    bundle_id: str
    sources: Tuple[str, ...]
    feature: Optional[str] = None
    resources: Tuple[str, ...] = ()
    dependencies: Tuple[TargetDependency, ...] = ()
    destinations: Tuple[str, ...] = DEFAULT_DESTINATIONS
    deployment_target: str = DEFAULT_DEPLOYMENT_TARGET
    info_plist: Optional[Dict[str, Any]] = field(default=None)
    tested_target: Optional[str] = None

    def project_dependencies(self) -> Tuple[TargetDependency, ...]:
        return tuple(d for d in self.dependencies if not d.is_external)

    def external_dependencies(self) -> Tuple[TargetDependency, ...]:
        return tuple(d for d in self.dependencies if d.is_external)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "name": self.name,
            "role": self.role.value,
            "feature": self.feature,
            "product": self.product.value,
            "bundle_id": self.bundle_id,
            "sources": list(self.sources),
            "resources": list(self.resources),
            "dependencies": [d.to_dict() for d in self.dependencies],
            "destinations": list(self.destinations),
            "deployment_target": self.deployment_target,
        }
        if self.info_plist is not None:
            out["info_plist"] = copy.deepcopy(self.info_plist)
        if self.tested_target is not None:
            out["tested_target"] = self.tested_target
        return out


@dataclass(frozen=True)
class Project:
    name: str
    path: str
    targets: Tuple[Target, ...] = ()

    def target(self, name: str) -> Optional[Target]:
        for t in self.targets:
            if t.name == name:
                return t
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "path": self.path,
            "targets": [t.name for t in self.targets],
        }
