from __future__ import annotations

from .config import WorkspaceManifest


def builtin_manifest() -> WorkspaceManifest:
    # The SmartShop scaffold: a task-list Home feature on top of Networking.
    return WorkspaceManifest.model_validate(
        {
            "features": ["Home", "Networking", "Network"],
            "modules": [
                {
                    "feature": "Home",
                    "implementation": {
                        "dependencies": [
                            {"interface": "Networking"},
                            {"interface": "Home"},
                        ],
                    },
                    "tests": {
                        "implementation": {"dependencies": [{"interface": "Home"}]},
                    },
                },
                {
                    "feature": "Networking",
                    "implementation": {"dependencies": [{"interface": "Networking"}]},
                },
                {
                    "feature": "Network",
                    "implementation": {"dependencies": [{"interface": "Network"}]},
                },
            ],
            "app": {
                "name": "SmartShop",
                "sources": ["Core"],
                "dependencies": [
                    {"interface": "Home"},
                    {"implementation": "Home"},
                    {"interface": "Networking"},
                    {"implementation": "Networking"},
                ],
            },
        }
    )
