import pytest

from featuregraph.builtins import builtin_manifest
from featuregraph.core import (
    DependencyDecl,
    DependencyResolver,
    FeatureCatalog,
    ModuleDecl,
    ModuleGraphBuilder,
    NamingPolicy,
    TargetDecl,
    TargetFactory,
)


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    # Manifest lookup must never pick up the developer's environment
    for key in ("FEATUREGRAPH_MANIFEST", "FEATUREGRAPH_PACKAGE_TYPE", "FEATUREGRAPH_ROOT_NAMESPACE"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture()
def catalog():
    return FeatureCatalog(features=("Home", "Networking", "Network", "App"), externals=("Alamofire",))


@pytest.fixture()
def naming(catalog):
    return NamingPolicy(catalog=catalog)


@pytest.fixture()
def factory(naming):
    return TargetFactory(naming=naming)


@pytest.fixture()
def resolver(naming):
    return DependencyResolver(naming=naming)


@pytest.fixture()
def home_on_networking():
    """Home implementation consuming Networking through its interface."""
    return ModuleDecl(
        feature="Home",
        implementation=TargetDecl(
            dependencies=(
                DependencyDecl.interface("Networking"),
                DependencyDecl.interface("Home"),
            )
        ),
    )


@pytest.fixture()
def builtin_graph():
    return builtin_manifest().make_builder().build()


@pytest.fixture()
def builder_for(factory, resolver):
    def _make(*modules, **kwargs):
        return ModuleGraphBuilder(factory=factory, resolver=resolver, modules=list(modules), **kwargs)

    return _make
