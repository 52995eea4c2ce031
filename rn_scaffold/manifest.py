"""Reading ``package.json`` and classifying the host project.

The manifest is read once at the start of a run and once more after a
dependency install, for verification. Nothing in here writes to disk.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType

from .errors import ManifestNotFound, ManifestParseError
from .utils import load_json

MANIFEST_NAME = "package.json"

_DEPENDENCY_SECTIONS = ("dependencies", "devDependencies")


class PlatformKind(str, Enum):
    UNKNOWN = "unknown"
    REACT_NATIVE_CLI = "react-native-cli"
    EXPO = "expo"

    @property
    def label(self) -> str:
        return {
            PlatformKind.UNKNOWN: "Unknown",
            PlatformKind.REACT_NATIVE_CLI: "React Native CLI",
            PlatformKind.EXPO: "Expo",
        }[self]


@dataclass(frozen=True)
class ProjectManifest:
    """Declared dependencies of the host project (runtime and development merged)."""

    path: Path
    dependencies: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "dependencies", MappingProxyType(dict(self.dependencies)))

    def __contains__(self, name: object) -> bool:
        return name in self.dependencies

    def names(self) -> set[str]:
        return set(self.dependencies)


def load_manifest(project_root: str | Path, manifest_name: str = MANIFEST_NAME) -> ProjectManifest:
    """Read and merge the dependency sections of ``package.json``.

    Args:
        project_root: Directory containing the manifest.
        manifest_name: File name of the manifest.

    Returns:
        The merged manifest. Development entries win over runtime entries
        that share a name.

    Raises:
        ManifestNotFound: If the file does not exist.
        ManifestParseError: If the file is not a JSON object, or a
            dependency section is not an object.
    """
    path = Path(project_root) / manifest_name
    if not path.is_file():
        raise ManifestNotFound(path)

    try:
        data = load_json(path)
    except json.JSONDecodeError as exc:
        raise ManifestParseError(path, str(exc)) from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise ManifestParseError(path, str(exc)) from exc

    if not isinstance(data, dict):
        raise ManifestParseError(path, "top-level value must be an object")

    merged: dict[str, str] = {}
    for section in _DEPENDENCY_SECTIONS:
        entries = data.get(section)
        if entries is None:
            entries = {}
        if not isinstance(entries, dict):
            raise ManifestParseError(path, f'"{section}" must be an object')
        merged.update({str(name): str(version) for name, version in entries.items()})

    return ProjectManifest(path=path, dependencies=merged)


def classify_platform(manifest: ProjectManifest | None) -> PlatformKind:
    """Classify the project from its declared dependencies.

    Expo wins when both ``expo`` and ``react-native`` are declared, since
    every Expo app also depends on React Native.
    """
    if manifest is None:
        return PlatformKind.UNKNOWN
    if "expo" in manifest:
        return PlatformKind.EXPO
    if "react-native" in manifest:
        return PlatformKind.REACT_NATIVE_CLI
    return PlatformKind.UNKNOWN
