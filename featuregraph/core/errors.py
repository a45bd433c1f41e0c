from __future__ import annotations

from typing import List, Optional


class FeatureGraphError(Exception):
    code = "featuregraph_error"


class UnknownIdentifierError(FeatureGraphError):
    code = "unknown_identifier"


class ConfigurationError(FeatureGraphError):
    code = "configuration"


class IllegalLayeringError(FeatureGraphError):
    code = "illegal_layering"


class DuplicateIdentifierError(FeatureGraphError):
    code = "duplicate_identifier"


class CyclicGraphError(FeatureGraphError):
    code = "cyclic_graph"

    def __init__(self, message: str, cycle: Optional[List[str]] = None):
        super().__init__(message)
        self.cycle = list(cycle or [])
