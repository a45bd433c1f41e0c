from .builder import ModuleGraphBuilder
from .catalog import APP_FEATURE, Feature, FeatureCatalog, default_catalog
from .declarations import AppDecl, DependencyDecl, ModuleDecl, TargetDecl, UnitTestDecl, default_module
from .errors import (
    ConfigurationError,
    CyclicGraphError,
    DuplicateIdentifierError,
    FeatureGraphError,
    IllegalLayeringError,
    UnknownIdentifierError,
)
from .graph import ModuleGraph
from .layering import LayeringPolicy
from .models import DependencyKind, ProductType, Project, Role, Target, TargetDependency
from .naming import DEFAULT_ROOT_NAMESPACE, NamingPolicy
from .resolver import DependencyResolver
from .targets import TargetFactory

__all__ = [
    "APP_FEATURE",
    "AppDecl",
    "ConfigurationError",
    "CyclicGraphError",
    "DEFAULT_ROOT_NAMESPACE",
    "DependencyDecl",
    "DependencyKind",
    "DependencyResolver",
    "DuplicateIdentifierError",
    "Feature",
    "FeatureCatalog",
    "FeatureGraphError",
    "IllegalLayeringError",
    "LayeringPolicy",
    "ModuleDecl",
    "ModuleGraph",
    "ModuleGraphBuilder",
    "NamingPolicy",
    "ProductType",
    "Project",
    "Role",
    "Target",
    "TargetDecl",
    "TargetDependency",
    "TargetFactory",
    "UnitTestDecl",
    "UnknownIdentifierError",
    "default_catalog",
    "default_module",
]
