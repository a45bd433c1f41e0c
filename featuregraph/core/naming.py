from __future__ import annotations

from dataclasses import dataclass, field

from .catalog import APP_FEATURE, FeatureCatalog, FeatureLike, default_catalog
from .errors import ConfigurationError, UnknownIdentifierError
from .models import Role


DEFAULT_ROOT_NAMESPACE = "com.smartshop."
MODULES_DIR = "Modules"

_ROLE_DIRS = {
    Role.INTERFACE: "Interface",
    Role.IMPLEMENTATION: "Implementation",
}


def normalize_namespace(namespace: str) -> str:
    ns = (namespace or "").strip()
    if not ns or ns == ".":
        raise ConfigurationError("root_namespace must not be empty")
    if not ns.endswith("."):
        ns += "."
    return ns


@dataclass(frozen=True)
class NamingPolicy:
    """Derives target names, bundle ids and file-system locations.

    Every method is a pure function of (feature, role); the catalog is only
    consulted to reject unknown features and to canonicalize spelling.
    For the test role, ``under`` selects which target is being tested
    (implementation by default).
    """

    catalog: FeatureCatalog = field(default_factory=default_catalog)
    root_namespace: str = DEFAULT_ROOT_NAMESPACE

    def __post_init__(self):
        object.__setattr__(self, "root_namespace", normalize_namespace(self.root_namespace))

    def _feature_role(self, feature: FeatureLike, role) -> tuple[str, Role]:
        name = self.catalog.feature(feature)
        r = Role.parse(role)
        if (name == APP_FEATURE) != (r == Role.APP):
            raise UnknownIdentifierError(f"Role {r.value!r} is not defined for feature {name!r}")
        return name, r

    @staticmethod
    def _under(under) -> Role:
        r = Role.parse(under) if under is not None else Role.IMPLEMENTATION
        if r not in _ROLE_DIRS:
            raise UnknownIdentifierError(f"Tests can only target interface or implementation, got {r.value!r}")
        return r

    def module_path(self, feature: FeatureLike) -> str:
        name = self.catalog.feature(feature)
        if name == APP_FEATURE:
            return f"{MODULES_DIR}/{APP_FEATURE}"
        return f"{MODULES_DIR}/u{name}"

    def target_name(self, feature: FeatureLike, role, under=None) -> str:
        name, r = self._feature_role(feature, role)
        if r == Role.INTERFACE:
            return name + "Interface"
        if r == Role.TEST:
            return self.target_name(name, self._under(under)) + "Tests"
        return name

    def bundle_id(self, feature: FeatureLike, role, under=None) -> str:
        _, r = self._feature_role(feature, role)
        if r == Role.APP:
            qualifier = "app"
        elif r == Role.TEST:
            qualifier = self.target_name(feature, self._under(under)) + "Tests"
        else:
            qualifier = self.target_name(feature, r) + ".framework"
        return self.make_bundle_id(qualifier)

    def test_bundle_id(self, feature: FeatureLike, under=None) -> str:
        return self.bundle_id(feature, Role.TEST, under=under)

    def make_bundle_id(self, qualifier: str) -> str:
        return (self.root_namespace + qualifier).lower()

    def source_directory(self, feature: FeatureLike, role, under=None) -> str:
        name, r = self._feature_role(feature, role)
        base = self.module_path(name)
        if r == Role.APP:
            return f"{base}/Sources"
        if r == Role.TEST:
            return f"{base}/{_ROLE_DIRS[self._under(under)]}/Tests/Sources"
        return f"{base}/{_ROLE_DIRS[r]}/Sources"
