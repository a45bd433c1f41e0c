from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .catalog import APP_FEATURE
from .models import Role


@dataclass(frozen=True)
class LayeringPolicy:
    # Cross-feature interface -> interface edges.
    allow_interface_to_interface: bool = True
    # Cross-feature implementation -> implementation edges.
    allow_cross_implementation: bool = False


def layering_violation(
    policy: LayeringPolicy,
    *,
    consumer_feature: str,
    consumer_role: Role,
    feature: str,
    role: Role,
) -> Optional[str]:
    """Returns a human-readable reason when the edge is illegal, else None."""

    if feature == APP_FEATURE or role == Role.APP:
        return "the application module cannot be a dependency"
    if role == Role.TEST:
        return "test targets cannot be a dependency"
    if consumer_feature == feature and consumer_role == role:
        return "a target cannot depend on itself"

    same_feature = consumer_feature == feature

    if consumer_role == Role.APP:
        return None

    if consumer_role == Role.INTERFACE:
        if role == Role.IMPLEMENTATION:
            return "interfaces must not depend on implementations"
        if not same_feature and not policy.allow_interface_to_interface:
            return "cross-feature interface dependencies are disabled by the layering policy"
        return None

    if consumer_role == Role.IMPLEMENTATION:
        if role == Role.IMPLEMENTATION and not policy.allow_cross_implementation:
            return "implementations must depend on other features through their interface"
        return None

    if consumer_role == Role.TEST:
        if role == Role.IMPLEMENTATION and not same_feature:
            return "tests must not pull in another feature's implementation"
        return None

    return f"unsupported consumer role {consumer_role.value!r}"
