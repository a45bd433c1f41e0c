from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple

from .catalog import APP_FEATURE, FeatureLike
from .errors import IllegalLayeringError
from .layering import LayeringPolicy, layering_violation
from .models import DependencyKind, Role, TargetDependency
from .naming import NamingPolicy


Consumer = Tuple[FeatureLike, Role]


@dataclass(frozen=True)
class DependencyResolver:
    """Turns (feature, role) pairs into TargetDependency references.

    When ``consumer`` is given the edge consumer -> (feature, role) is
    checked against the layering policy first.
    """

    naming: NamingPolicy = field(default_factory=NamingPolicy)
    policy: LayeringPolicy = field(default_factory=LayeringPolicy)

    def resolve(self, feature: FeatureLike, role, consumer: Optional[Consumer] = None) -> TargetDependency:
        name = self.naming.catalog.feature(feature)
        r = Role.parse(role)

        if consumer is not None:
            consumer_feature = self.naming.catalog.feature(consumer[0])
            consumer_role = Role.parse(consumer[1])
            reason = layering_violation(
                self.policy,
                consumer_feature=consumer_feature,
                consumer_role=consumer_role,
                feature=name,
                role=r,
            )
            if reason:
                raise IllegalLayeringError(
                    f"{consumer_feature}.{consumer_role.value} -> {name}.{r.value}: {reason}"
                )
        elif name == APP_FEATURE or r == Role.APP:
            raise IllegalLayeringError("the application module cannot be a dependency")
        elif r == Role.TEST:
            raise IllegalLayeringError("test targets cannot be a dependency")

        return TargetDependency(
            kind=DependencyKind.PROJECT,
            target_name=self.naming.target_name(name, r),
            module_path=self.naming.module_path(name),
            feature=name,
            role=r,
        )

    def interface(self, feature: FeatureLike, consumer: Optional[Consumer] = None) -> TargetDependency:
        return self.resolve(feature, Role.INTERFACE, consumer=consumer)

    def implementation(self, feature: FeatureLike, consumer: Optional[Consumer] = None) -> TargetDependency:
        return self.resolve(feature, Role.IMPLEMENTATION, consumer=consumer)

    def external(self, name: str) -> TargetDependency:
        return TargetDependency(
            kind=DependencyKind.EXTERNAL,
            target_name=self.naming.catalog.external(name),
        )
