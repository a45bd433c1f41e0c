import pytest

from featuregraph.core import (
    DependencyKind,
    DependencyResolver,
    Feature,
    IllegalLayeringError,
    LayeringPolicy,
    Role,
    TargetDependency,
    UnknownIdentifierError,
)


def test_resolve_interface(resolver):
    dep = resolver.resolve(Feature.HOME, Role.INTERFACE)
    assert dep == TargetDependency(
        kind=DependencyKind.PROJECT,
        target_name="HomeInterface",
        module_path="Modules/uHome",
        feature="Home",
        role=Role.INTERFACE,
    )
    assert dep.to_dict() == {"kind": "project", "target": "HomeInterface", "path": "Modules/uHome"}


def test_resolve_implementation(resolver):
    dep = resolver.implementation("Networking")
    assert dep.target_name == "Networking"
    assert dep.module_path == "Modules/uNetworking"


@pytest.mark.parametrize("feature", ["Home", "Networking", "Network"])
@pytest.mark.parametrize("role", [Role.INTERFACE, Role.IMPLEMENTATION])
def test_resolve_is_deterministic(resolver, feature, role):
    assert resolver.resolve(feature, role) == resolver.resolve(feature, role)


def test_resolve_unknown_feature(resolver):
    with pytest.raises(UnknownIdentifierError):
        resolver.resolve("UnknownFeature", Role.INTERFACE)


def test_resolve_external(resolver):
    dep = resolver.external("alamofire")
    assert dep.is_external
    assert dep.target_name == "Alamofire"
    assert dep.module_path is None

    with pytest.raises(UnknownIdentifierError):
        resolver.external("Kingfisher")


def test_app_is_never_a_dependency(resolver):
    with pytest.raises(IllegalLayeringError):
        resolver.resolve("App", Role.APP)
    with pytest.raises(IllegalLayeringError):
        resolver.resolve("App", Role.APP, consumer=("Home", Role.IMPLEMENTATION))


# ---------------------------------------------------------------------------
# layering
# ---------------------------------------------------------------------------

def test_implementation_may_use_any_interface(resolver):
    consumer = ("Home", Role.IMPLEMENTATION)
    assert resolver.interface("Home", consumer=consumer).target_name == "HomeInterface"
    assert resolver.interface("Networking", consumer=consumer).target_name == "NetworkingInterface"


def test_implementation_must_not_use_other_implementation(resolver):
    with pytest.raises(IllegalLayeringError) as exc:
        resolver.implementation("Networking", consumer=("Home", Role.IMPLEMENTATION))
    assert exc.value.code == "illegal_layering"


def test_cross_implementation_can_be_enabled_explicitly(naming):
    resolver = DependencyResolver(naming=naming, policy=LayeringPolicy(allow_cross_implementation=True))
    dep = resolver.implementation("Networking", consumer=("Home", Role.IMPLEMENTATION))
    assert dep.target_name == "Networking"


def test_target_cannot_depend_on_itself(naming):
    resolver = DependencyResolver(naming=naming, policy=LayeringPolicy(allow_cross_implementation=True))
    with pytest.raises(IllegalLayeringError):
        resolver.implementation("Home", consumer=("Home", Role.IMPLEMENTATION))
    with pytest.raises(IllegalLayeringError):
        resolver.interface("Home", consumer=("Home", Role.INTERFACE))


def test_interface_never_depends_on_implementation(resolver):
    with pytest.raises(IllegalLayeringError):
        resolver.implementation("Home", consumer=("Home", Role.INTERFACE))
    with pytest.raises(IllegalLayeringError):
        resolver.implementation("Networking", consumer=("Home", Role.INTERFACE))


def test_interface_to_interface_is_configurable(naming, resolver):
    assert resolver.interface("Networking", consumer=("Home", Role.INTERFACE)).target_name == "NetworkingInterface"

    strict = DependencyResolver(naming=naming, policy=LayeringPolicy(allow_interface_to_interface=False))
    with pytest.raises(IllegalLayeringError):
        strict.interface("Networking", consumer=("Home", Role.INTERFACE))


def test_app_may_link_implementations(resolver):
    consumer = ("App", Role.APP)
    assert resolver.implementation("Home", consumer=consumer).target_name == "Home"
    assert resolver.implementation("Networking", consumer=consumer).target_name == "Networking"


def test_tests_may_only_pull_their_own_implementation(resolver):
    consumer = ("Home", Role.TEST)
    assert resolver.implementation("Home", consumer=consumer).target_name == "Home"
    assert resolver.interface("Networking", consumer=consumer).target_name == "NetworkingInterface"
    with pytest.raises(IllegalLayeringError):
        resolver.implementation("Networking", consumer=consumer)


def test_test_targets_are_never_dependencies(resolver):
    with pytest.raises(IllegalLayeringError):
        resolver.resolve("Home", Role.TEST, consumer=("Networking", Role.IMPLEMENTATION))
    with pytest.raises(IllegalLayeringError):
        resolver.resolve("Home", Role.TEST)
