"""rn-scaffold -- clean-architecture scaffolding for React Native and Expo apps.

Quick usage::

    import asyncio
    from rn_scaffold import ScaffoldConfig, Scaffolder

    config = ScaffoldConfig(project_root="./MyApp")
    result = asyncio.run(Scaffolder(config).run())
"""

from rn_scaffold.config import ScaffoldConfig
from rn_scaffold.dependencies import DependencyOutcome, DependencyReconciler, DependencyReport
from rn_scaffold.manifest import PlatformKind, ProjectManifest, classify_platform, load_manifest
from rn_scaffold.pipeline import ScaffoldResult, ScaffoldState, Scaffolder

__all__ = [
    "DependencyOutcome",
    "DependencyReconciler",
    "DependencyReport",
    "PlatformKind",
    "ProjectManifest",
    "ScaffoldConfig",
    "ScaffoldResult",
    "ScaffoldState",
    "Scaffolder",
    "classify_platform",
    "load_manifest",
]
