from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Tuple, Union

from .errors import ConfigurationError, DuplicateIdentifierError, UnknownIdentifierError


APP_FEATURE = "App"

_NAME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9_]*$")
_EXTERNAL_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.\-]*$")


class Feature(str, Enum):
    HOME = "Home"
    NETWORKING = "Networking"
    NETWORK = "Network"
    APP = APP_FEATURE


FeatureLike = Union[Feature, str]


def _check_unique(kind: str, names: Iterable[str]) -> Tuple[str, ...]:
    seen = set()
    out = []
    for n in names:
        key = n.lower()
        if key in seen:
            raise DuplicateIdentifierError(f"Duplicate {kind} name in catalog: {n}")
        seen.add(key)
        out.append(n)
    return tuple(out)


@dataclass(frozen=True)
class FeatureCatalog:
    """Closed set of recognized feature names and external package names.

    Lookups are case-insensitive but always return the canonical spelling,
    so ``catalog.feature("home")`` yields ``"Home"``.
    """

    features: Tuple[str, ...]
    externals: Tuple[str, ...] = ()

    def __post_init__(self):
        features = tuple(f.value if isinstance(f, Feature) else str(f) for f in self.features)
        for f in features:
            if not _NAME_RE.match(f):
                raise ConfigurationError(f"Invalid feature name: {f!r}")
        externals = tuple(str(e) for e in self.externals)
        for e in externals:
            if not _EXTERNAL_RE.match(e):
                raise ConfigurationError(f"Invalid external package name: {e!r}")

        object.__setattr__(self, "features", _check_unique("feature", features))
        object.__setattr__(self, "externals", _check_unique("external package", externals))

    def feature(self, value: FeatureLike) -> str:
        name = value.value if isinstance(value, Feature) else str(value)
        for f in self.features:
            if f.lower() == name.strip().lower():
                return f
        raise UnknownIdentifierError(f"Unknown feature: {name!r}")

    def external(self, value: str) -> str:
        name = str(value)
        for e in self.externals:
            if e.lower() == name.strip().lower():
                return e
        raise UnknownIdentifierError(f"Unknown external package: {name!r}")

    def has_feature(self, value: FeatureLike) -> bool:
        try:
            self.feature(value)
        except UnknownIdentifierError:
            return False
        return True

    def module_features(self) -> Tuple[str, ...]:
        return tuple(f for f in self.features if f != APP_FEATURE)


def default_catalog() -> FeatureCatalog:
    return FeatureCatalog(features=tuple(f.value for f in Feature))
