from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional, Sequence, Tuple, Union

from .catalog import APP_FEATURE, FeatureLike
from .errors import ConfigurationError
from .models import (
    DEFAULT_DEPLOYMENT_TARGET,
    DEFAULT_DESTINATIONS,
    DEFAULT_INFO_PLIST,
    DependencyKind,
    ProductType,
    Role,
    Target,
    TargetDependency,
)
from .naming import NamingPolicy


Sources = Union[str, Sequence[str]]

FRAMEWORK_PRODUCTS = (ProductType.FRAMEWORK, ProductType.STATIC_FRAMEWORK)


def _normalize_sources(name: str, sources: Optional[Sources]) -> Tuple[str, ...]:
    if isinstance(sources, str):
        sources = [sources]
    out = tuple(s.strip() for s in (sources or []) if isinstance(s, str) and s.strip())
    if not out:
        raise ConfigurationError(f"Target {name!r} has no source roots")
    return out


def _normalize_resources(resources: Optional[Iterable[str]]) -> Tuple[str, ...]:
    if resources is None:
        return ()
    if isinstance(resources, str):
        resources = [resources]
    return tuple(dict.fromkeys(r for r in resources if r))


def _dedupe(dependencies: Optional[Iterable[TargetDependency]]) -> Tuple[TargetDependency, ...]:
    return tuple(dict.fromkeys(dependencies or ()))


@dataclass(frozen=True)
class TargetFactory:
    """Builds Target values for the four archetypes (app, framework,
    feature interface/implementation) and their unit-test bundles.

    All methods are pure; nothing is registered anywhere.
    """

    naming: NamingPolicy = field(default_factory=NamingPolicy)
    package_type: ProductType = ProductType.STATIC_FRAMEWORK
    deployment_target: str = DEFAULT_DEPLOYMENT_TARGET
    destinations: Tuple[str, ...] = DEFAULT_DESTINATIONS

    def __post_init__(self):
        try:
            pt = ProductType(self.package_type)
        except ValueError:
            raise ConfigurationError(f"Unknown package_type: {self.package_type!r}") from None
        if pt not in FRAMEWORK_PRODUCTS:
            raise ConfigurationError(f"package_type must be a framework product, got {pt.value!r}")
        object.__setattr__(self, "package_type", pt)
        object.__setattr__(self, "destinations", tuple(self.destinations))

    def make_app(
        self,
        name: str,
        sources: Sources,
        dependencies: Iterable[TargetDependency] = (),
        info_plist: Optional[Dict[str, Any]] = None,
    ) -> Target:
        # deep copies: app targets never share nested plist values
        plist = copy.deepcopy(DEFAULT_INFO_PLIST)
        plist.update(copy.deepcopy(info_plist or {}))
        return Target(
            name=name,
            role=Role.APP,
            feature=APP_FEATURE,
            product=ProductType.APP,
            bundle_id=self.naming.bundle_id(APP_FEATURE, Role.APP),
            sources=_normalize_sources(name, sources),
            dependencies=_dedupe(dependencies),
            destinations=self.destinations,
            deployment_target=self.deployment_target,
            info_plist=plist,
        )

    def make_framework(
        self,
        name: str,
        sources: Sources,
        dependencies: Iterable[TargetDependency] = (),
        resources: Optional[Iterable[str]] = None,
        *,
        role: Role = Role.IMPLEMENTATION,
        feature: Optional[str] = None,
    ) -> Target:
        return Target(
            name=name,
            role=role,
            feature=feature,
            product=self.package_type,
            bundle_id=self.naming.make_bundle_id(name + ".framework"),
            sources=_normalize_sources(name, sources),
            resources=_normalize_resources(resources),
            dependencies=_dedupe(dependencies),
            destinations=self.destinations,
            deployment_target=self.deployment_target,
        )

    def _feature_framework(self, feature: FeatureLike, role: Role, dependencies, resources) -> Target:
        name = self.naming.catalog.feature(feature)
        return self.make_framework(
            name=self.naming.target_name(name, role),
            sources=[self.naming.source_directory(name, role)],
            dependencies=dependencies,
            resources=resources,
            role=role,
            feature=name,
        )

    def feature_interface(
        self,
        feature: FeatureLike,
        dependencies: Iterable[TargetDependency] = (),
        resources: Optional[Iterable[str]] = None,
    ) -> Target:
        return self._feature_framework(feature, Role.INTERFACE, dependencies, resources)

    def feature_implementation(
        self,
        feature: FeatureLike,
        dependencies: Iterable[TargetDependency] = (),
        resources: Optional[Iterable[str]] = None,
    ) -> Target:
        return self._feature_framework(feature, Role.IMPLEMENTATION, dependencies, resources)

    def _test(self, feature: FeatureLike, under: Role, dependencies: Iterable[TargetDependency]) -> Target:
        name = self.naming.catalog.feature(feature)
        tested = self.naming.target_name(name, under)
        subject = TargetDependency(
            kind=DependencyKind.PROJECT,
            target_name=tested,
            module_path=self.naming.module_path(name),
            feature=name,
            role=under,
        )
        target_name = self.naming.target_name(name, Role.TEST, under=under)
        return Target(
            name=target_name,
            role=Role.TEST,
            feature=name,
            product=ProductType.UNIT_TESTS,
            bundle_id=self.naming.test_bundle_id(name, under=under),
            sources=_normalize_sources(target_name, [self.naming.source_directory(name, Role.TEST, under=under)]),
            dependencies=_dedupe([subject, *(dependencies or ())]),
            destinations=self.destinations,
            deployment_target=self.deployment_target,
            tested_target=tested,
        )

    def test_implementation(self, feature: FeatureLike, dependencies: Iterable[TargetDependency] = ()) -> Target:
        return self._test(feature, Role.IMPLEMENTATION, dependencies)

    def test_interface(self, feature: FeatureLike, dependencies: Iterable[TargetDependency] = ()) -> Target:
        return self._test(feature, Role.INTERFACE, dependencies)
