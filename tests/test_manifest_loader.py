"""
Workspace manifest loader tests.
"""
from __future__ import annotations

import json

import pytest

from featuregraph.config import DependencySpec, load_manifest, parse_manifest
from featuregraph.core import ConfigurationError, DependencyDecl, IllegalLayeringError, ProductType, Role


MANIFEST_YAML = """\
root_namespace: io.acme
features: [Home, Networking]
externals: [Alamofire]
modules:
  - feature: Home
    implementation:
      dependencies:
        - interface: Networking
        - interface: Home
    tests:
      implementation:
        dependencies:
          - interface: Home
  - feature: Networking
    implementation:
      dependencies:
        - interface:Networking
        - external: Alamofire
app:
  name: Acme
  sources: [Core]
  dependencies:
    - interface: Home
    - implementation: Home
    - interface: Networking
    - implementation: Networking
"""


# ---------------------------------------------------------------------------
# DependencySpec
# ---------------------------------------------------------------------------

def test_dependency_spec_forms():
    assert DependencySpec.model_validate({"interface": "Home"}).to_decl() == DependencyDecl.interface("Home")
    assert DependencySpec.model_validate("implementation:Home").to_decl() == DependencyDecl.implementation("Home")
    assert DependencySpec.model_validate({"external": "Alamofire"}).to_decl() == DependencyDecl.external("Alamofire")


def test_dependency_spec_needs_exactly_one_kind():
    with pytest.raises(ConfigurationError):
        parse_manifest({"modules": [{"feature": "Home", "interface": {"dependencies": [{}]}}]})
    with pytest.raises(ConfigurationError):
        parse_manifest(
            {
                "modules": [
                    {
                        "feature": "Home",
                        "implementation": {"dependencies": [{"interface": "Home", "implementation": "Home"}]},
                    }
                ]
            }
        )


# ---------------------------------------------------------------------------
# load_manifest: file-based tests
# ---------------------------------------------------------------------------

def test_load_yaml_manifest(tmp_path):
    f = tmp_path / "featuregraph.yaml"
    f.write_text(MANIFEST_YAML, encoding="utf-8")

    manifest = load_manifest(f)
    graph = manifest.make_builder().build()

    assert [t.name for t in graph.targets] == [
        "HomeInterface",
        "Home",
        "HomeTests",
        "NetworkingInterface",
        "Networking",
        "Acme",
    ]
    assert graph.target("Home").bundle_id == "io.acme.home.framework"
    assert graph.target("Acme").bundle_id == "io.acme.app"
    assert [d.target_name for d in graph.target("Networking").external_dependencies()] == ["Alamofire"]


def test_load_json_manifest(tmp_path):
    f = tmp_path / "graph.json"
    f.write_text(json.dumps({"features": ["Home"], "package_type": "framework"}), encoding="utf-8")

    manifest = load_manifest(f)
    graph = manifest.make_builder().build()

    assert [t.name for t in graph.targets] == ["HomeInterface", "Home"]
    assert graph.target("Home").product == ProductType.FRAMEWORK


def test_default_location_is_picked_up(tmp_path):
    (tmp_path / "featuregraph.yaml").write_text("features: [Search]\n", encoding="utf-8")
    manifest = load_manifest()
    assert manifest.features == ["Search"]


def test_missing_default_falls_back_to_builtin():
    manifest = load_manifest()
    assert manifest.app is not None
    assert manifest.app.name == "SmartShop"


def test_explicit_missing_path_is_an_error(tmp_path):
    with pytest.raises(ConfigurationError):
        load_manifest(tmp_path / "nonexistent.yaml")


def test_env_var_path(tmp_path, monkeypatch):
    f = tmp_path / "env_manifest.json"
    f.write_text(json.dumps({"features": ["Profile"]}), encoding="utf-8")
    monkeypatch.setenv("FEATUREGRAPH_MANIFEST", str(f))

    manifest = load_manifest()
    assert manifest.features == ["Profile"]


def test_env_var_pointing_nowhere_is_an_error(tmp_path, monkeypatch):
    monkeypatch.setenv("FEATUREGRAPH_MANIFEST", str(tmp_path / "missing.yaml"))
    with pytest.raises(ConfigurationError):
        load_manifest()


def test_malformed_file_is_an_error(tmp_path):
    f = tmp_path / "bad.yaml"
    f.write_text("this: is: not: valid: yaml:\n  {{{{", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_manifest(f)


def test_non_mapping_file_is_an_error(tmp_path):
    f = tmp_path / "list.json"
    f.write_text(json.dumps([1, 2, 3]), encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_manifest(f)


def test_unknown_keys_are_rejected(tmp_path):
    f = tmp_path / "typo.yaml"
    f.write_text("featurez: [Home]\n", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_manifest(f)


# ---------------------------------------------------------------------------
# environment overrides
# ---------------------------------------------------------------------------

def test_env_overrides(monkeypatch):
    monkeypatch.setenv("FEATUREGRAPH_PACKAGE_TYPE", "framework")
    monkeypatch.setenv("FEATUREGRAPH_ROOT_NAMESPACE", "io.acme")

    manifest = load_manifest()
    graph = manifest.make_builder().build()

    assert manifest.package_type == "framework"
    assert graph.target("HomeInterface").bundle_id == "io.acme.homeinterface.framework"
    assert graph.target("HomeInterface").product == ProductType.FRAMEWORK


def test_invalid_env_override_is_an_error(monkeypatch):
    monkeypatch.setenv("FEATUREGRAPH_PACKAGE_TYPE", "dylib")
    with pytest.raises(ConfigurationError):
        load_manifest()


# ---------------------------------------------------------------------------
# layering from the manifest
# ---------------------------------------------------------------------------

def _cross_impl_manifest(allow: bool) -> dict:
    return {
        "features": ["Home", "Networking"],
        "layering": {"allow_cross_implementation": allow},
        "modules": [
            {"feature": "Home", "implementation": {"dependencies": [{"implementation": "Networking"}]}},
        ],
    }


def test_layering_policy_comes_from_manifest():
    with pytest.raises(IllegalLayeringError):
        parse_manifest(_cross_impl_manifest(False)).make_builder().build()

    graph = parse_manifest(_cross_impl_manifest(True)).make_builder().build()
    assert graph.dependencies_of("Home") == ["Networking", "HomeInterface"]


def test_tests_section_maps_to_roles():
    manifest = parse_manifest(
        {"modules": [{"feature": "Home", "tests": {"interface": {}}}]}
    )
    decl = manifest.modules[0].to_decl()
    assert [t.under for t in decl.tests] == [Role.INTERFACE]
    assert decl.implementation is None
