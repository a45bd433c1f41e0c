"""
Workspace manifest: the catalog, module declarations and layering policy
that drive a graph build.

Manifest format (YAML or JSON):
    root_namespace: com.smartshop.
    package_type: staticFramework
    features: [Home, Networking]
    externals: [Alamofire]
    layering:
      allow_interface_to_interface: true
      allow_cross_implementation: false
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
    app:
      name: SmartShop
      sources: [Core]
      dependencies:
        - interface: Home
        - implementation: Home

Environment variables:
    FEATUREGRAPH_MANIFEST      : path to the manifest (optional).
    FEATUREGRAPH_PACKAGE_TYPE  : overrides package_type.
    FEATUREGRAPH_ROOT_NAMESPACE: overrides root_namespace.
    Default search path: ./featuregraph.yaml, else the built-in manifest.
"""
from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from featuregraph.core.builder import ModuleGraphBuilder
from featuregraph.core.catalog import APP_FEATURE, FeatureCatalog
from featuregraph.core.declarations import AppDecl, DependencyDecl, ModuleDecl, TargetDecl, UnitTestDecl
from featuregraph.core.errors import ConfigurationError
from featuregraph.core.layering import LayeringPolicy
from featuregraph.core.models import DEFAULT_DEPLOYMENT_TARGET, DEFAULT_DESTINATIONS, Role
from featuregraph.core.naming import DEFAULT_ROOT_NAMESPACE, NamingPolicy
from featuregraph.core.resolver import DependencyResolver
from featuregraph.core.targets import TargetFactory

_log = logging.getLogger("featuregraph.config")

DEFAULT_MANIFEST_NAME = "featuregraph.yaml"

PackageType = Literal["framework", "staticFramework"]


class DependencySpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    interface: Optional[str] = None
    implementation: Optional[str] = None
    external: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _from_shorthand(cls, value: Any) -> Any:
        # tolerate "interface:Home" strings
        if isinstance(value, str) and ":" in value:
            kind, _, name = value.partition(":")
            return {kind.strip(): name.strip()}
        return value

    @model_validator(mode="after")
    def _exactly_one(self) -> "DependencySpec":
        set_fields = [k for k in ("interface", "implementation", "external") if getattr(self, k)]
        if len(set_fields) != 1:
            raise ValueError("a dependency needs exactly one of interface / implementation / external")
        return self

    def to_decl(self) -> DependencyDecl:
        if self.interface:
            return DependencyDecl.interface(self.interface)
        if self.implementation:
            return DependencyDecl.implementation(self.implementation)
        return DependencyDecl.external(self.external or "")


class TargetSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    dependencies: List[DependencySpec] = Field(default_factory=list)
    resources: List[str] = Field(default_factory=list)

    def to_decl(self) -> TargetDecl:
        return TargetDecl(
            dependencies=tuple(d.to_decl() for d in self.dependencies),
            resources=tuple(self.resources),
        )


class ModuleTestsSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    dependencies: List[DependencySpec] = Field(default_factory=list)


class ModuleSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    feature: str
    interface: TargetSpec = Field(default_factory=TargetSpec)
    implementation: Optional[TargetSpec] = None
    tests: Dict[Literal["interface", "implementation"], ModuleTestsSpec] = Field(default_factory=dict)

    def to_decl(self) -> ModuleDecl:
        return ModuleDecl(
            feature=self.feature,
            interface=self.interface.to_decl(),
            implementation=self.implementation.to_decl() if self.implementation is not None else None,
            tests=tuple(
                UnitTestDecl(under=Role(under), dependencies=tuple(d.to_decl() for d in spec.dependencies))
                for under, spec in self.tests.items()
            ),
        )


class AppSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str
    sources: List[str]
    dependencies: List[DependencySpec] = Field(default_factory=list)
    info_plist: Dict[str, Any] = Field(default_factory=dict)

    def to_decl(self) -> AppDecl:
        return AppDecl(
            name=self.name,
            sources=tuple(self.sources),
            dependencies=tuple(d.to_decl() for d in self.dependencies),
            info_plist=dict(self.info_plist) or None,
        )


class LayeringSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    allow_interface_to_interface: bool = True
    allow_cross_implementation: bool = False


class WorkspaceManifest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    root_namespace: str = DEFAULT_ROOT_NAMESPACE
    package_type: PackageType = "staticFramework"
    deployment_target: str = DEFAULT_DEPLOYMENT_TARGET
    destinations: List[str] = Field(default_factory=lambda: list(DEFAULT_DESTINATIONS))

    features: List[str] = Field(default_factory=list)
    externals: List[str] = Field(default_factory=list)
    layering: LayeringSpec = Field(default_factory=LayeringSpec)
    allow_dangling_references: bool = False

    modules: List[ModuleSpec] = Field(default_factory=list)
    app: Optional[AppSpec] = None

    def catalog(self) -> FeatureCatalog:
        # modules may be declared without repeating them under features
        names = list(dict.fromkeys([*self.features, *(m.feature for m in self.modules)]))
        if self.app is not None and APP_FEATURE not in names:
            names.append(APP_FEATURE)
        return FeatureCatalog(features=tuple(names), externals=tuple(self.externals))

    def layering_policy(self) -> LayeringPolicy:
        return LayeringPolicy(**self.layering.model_dump())

    def make_builder(self) -> ModuleGraphBuilder:
        naming = NamingPolicy(catalog=self.catalog(), root_namespace=self.root_namespace)
        factory = TargetFactory(
            naming=naming,
            package_type=self.package_type,
            deployment_target=self.deployment_target,
            destinations=tuple(self.destinations),
        )
        return ModuleGraphBuilder(
            factory=factory,
            resolver=DependencyResolver(naming=naming, policy=self.layering_policy()),
            modules=[m.to_decl() for m in self.modules],
            app=self.app.to_decl() if self.app is not None else None,
            allow_dangling_references=self.allow_dangling_references,
        )


def parse_manifest(data: Any, *, source: str = "<memory>") -> WorkspaceManifest:
    if not isinstance(data, dict):
        raise ConfigurationError(f"Manifest {source} must be a mapping, got {type(data).__name__}")
    try:
        return WorkspaceManifest.model_validate(data)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid manifest {source}: {exc}") from exc


def apply_env_overrides(manifest: WorkspaceManifest) -> WorkspaceManifest:
    overrides: Dict[str, Any] = {}
    package_type = os.getenv("FEATUREGRAPH_PACKAGE_TYPE", "").strip()
    if package_type:
        overrides["package_type"] = package_type
    namespace = os.getenv("FEATUREGRAPH_ROOT_NAMESPACE", "").strip()
    if namespace:
        overrides["root_namespace"] = namespace
    if not overrides:
        return manifest

    _log.info("Applying manifest overrides from environment: %s", sorted(overrides))
    return parse_manifest({**manifest.model_dump(), **overrides}, source="<env>")


def load_manifest(path: Optional[Path] = None) -> WorkspaceManifest:
    """
    Load the workspace manifest from a YAML or JSON file.

    A path given explicitly or through FEATUREGRAPH_MANIFEST must exist.
    When neither is set and ./featuregraph.yaml is absent, the built-in
    manifest is used instead.
    """
    from featuregraph.builtins import builtin_manifest

    resolved, explicit = _resolve_path(path)
    if not resolved.exists():
        if explicit:
            raise ConfigurationError(f"Manifest not found: {resolved}")
        _log.info("No manifest at %s; using the built-in manifest", resolved)
        return apply_env_overrides(builtin_manifest())

    try:
        raw_text = resolved.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Cannot read manifest {resolved}: {exc}") from exc

    # JSON first, YAML as the fallback
    try:
        data = json.loads(raw_text)
    except json.JSONDecodeError:
        try:
            data = yaml.safe_load(raw_text)
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"Failed to parse manifest {resolved} as JSON or YAML: {exc}") from exc

    manifest = parse_manifest(data, source=str(resolved))
    _log.info("Loaded manifest %s (%d modules)", resolved, len(manifest.modules))
    return apply_env_overrides(manifest)


def _resolve_path(path: Optional[Path]) -> tuple[Path, bool]:
    if path is not None:
        return Path(path), True
    env_path = os.getenv("FEATUREGRAPH_MANIFEST", "").strip()
    if env_path:
        return Path(env_path), True
    return Path.cwd() / DEFAULT_MANIFEST_NAME, False
