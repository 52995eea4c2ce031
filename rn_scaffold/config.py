"""rn-scaffold configuration.

Centralised, typed configuration for a scaffold run. The fixed plans (the
directory layout, the template-to-destination file plan and the required
navigation dependencies) live here as immutable tuples so the orchestrator
receives them as explicit configuration rather than module-level state.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"

# ---------------------------------------------------------------------------
# Fixed plans
# ---------------------------------------------------------------------------

DIRECTORY_PLAN: tuple[str, ...] = (
    "src/assets/images",
    "src/assets/fonts",
    "src/assets/icons",
    "src/components/common",
    "src/constants/sizings",
    "src/constants/styles",
    "src/constants/splash",
    "src/hooks/splash",
    "src/navigation/stack",
    "src/navigation/bottom",
    "src/screens/splash",
    "src/screens/home",
    "src/screens/profile",
    "src/screens/settings",
    "src/state/zustand",
    "src/state/context",
    "src/styles/splash",
    "src/styles/home",
    "src/styles/profile",
    "src/styles/settings",
    "src/types",
    "src/utils",
)

FILE_PLAN: tuple[tuple[str, str], ...] = (
    # Constants
    ("constants/SIZINGS.ts.template", "src/constants/sizings/SIZINGS.ts"),
    ("constants/COLORS.ts.template", "src/constants/styles/COLORS.ts"),
    ("constants/splash.constants.ts.template", "src/constants/splash/splash.constants.ts"),
    # Types and utils
    ("types/Type.ts.template", "src/types/Type.ts"),
    ("utils/Util.ts.template", "src/utils/Util.ts"),
    # Navigation
    ("navigation/StackNavigation.tsx.template", "src/navigation/stack/StackNavigation.tsx"),
    ("navigation/BottomTabNavigation.tsx.template", "src/navigation/bottom/BottomTabNavigation.tsx"),
    # Screens
    ("screens/SplashScreen.tsx.template", "src/screens/splash/SplashScreen.tsx"),
    ("screens/HomeScreen.tsx.template", "src/screens/home/HomeScreen.tsx"),
    ("screens/ProfileScreen.tsx.template", "src/screens/profile/ProfileScreen.tsx"),
    ("screens/SettingsScreen.tsx.template", "src/screens/settings/SettingsScreen.tsx"),
    # Hooks
    ("hooks/useSplashNavigation.ts.template", "src/hooks/splash/useSplashNavigation.ts"),
    # Styles
    ("styles/splash.styles.ts.template", "src/styles/splash/splash.styles.ts"),
    ("styles/home.styles.ts.template", "src/styles/home/home.styles.ts"),
    ("styles/profile.styles.ts.template", "src/styles/profile/profile.styles.ts"),
    ("styles/settings.styles.ts.template", "src/styles/settings/settings.styles.ts"),
    # Root
    ("root/App.tsx.template", "App.tsx"),
)

REQUIRED_DEPENDENCIES: tuple[str, ...] = (
    "@react-navigation/native",
    "@react-navigation/native-stack",
    "@react-navigation/bottom-tabs",
    "react-native-safe-area-context",
    "react-native-screens",
)


class ScaffoldConfig(BaseModel):
    """Configuration for one scaffold run.

    Instances are frozen: the plans and paths are decided once, before the
    orchestrator starts, and are never mutated during a run.
    """

    model_config = ConfigDict(frozen=True)

    project_root: Path = Field(default_factory=Path.cwd)
    templates_dir: Path = Field(default=_DEFAULT_TEMPLATE_DIR)
    source_root: str = Field(default="src", description="Tree checked for conflicts before writing")
    manifest_name: str = Field(default="package.json")
    lockfile_name: str = Field(default="yarn.lock", description="Selects yarn over npm when present")
    native_dir: str = Field(default="ios", description="Native folder that needs a pod install")
    architecture_doc: str = Field(default="PROJECT_ARCHITECTURE.md")
    install_timeout: int = Field(default=600, ge=10, description="Package-manager timeout in seconds")
    assume_yes: bool = Field(default=False, description="Answer every prompt affirmatively")

    directories: tuple[str, ...] = Field(default=DIRECTORY_PLAN)
    files: tuple[tuple[str, str], ...] = Field(default=FILE_PLAN)
    required_dependencies: tuple[str, ...] = Field(default=REQUIRED_DEPENDENCIES)

    @field_validator("files")
    @classmethod
    def _destinations_unique(cls, files: tuple[tuple[str, str], ...]) -> tuple[tuple[str, str], ...]:
        seen: set[str] = set()
        for _, destination in files:
            if destination in seen:
                raise ValueError(f"duplicate file destination: {destination}")
            seen.add(destination)
        return files

    # ------------------------------------------------------------------
    # Derived paths
    # ------------------------------------------------------------------

    @property
    def manifest_path(self) -> Path:
        """Path to the project's ``package.json``."""
        return self.project_root / self.manifest_name

    @property
    def lockfile_path(self) -> Path:
        return self.project_root / self.lockfile_name

    @property
    def native_path(self) -> Path:
        return self.project_root / self.native_dir

    @property
    def source_path(self) -> Path:
        """Root of the generated source tree (``<project>/src``)."""
        return self.project_root / self.source_root

    @property
    def architecture_doc_path(self) -> Path:
        return self.project_root / self.architecture_doc

    def template_path(self, name: str) -> Path:
        """Resolve a template name relative to :attr:`templates_dir`."""
        return self.templates_dir / name

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration to a JSON file and return its path."""
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "ScaffoldConfig":
        """Load a previously-saved configuration from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls, **overrides: Any) -> "ScaffoldConfig":
        """Build a ``ScaffoldConfig`` from environment variables.

        Recognised variables (all optional):
            RN_SCAFFOLD_PROJECT_ROOT, RN_SCAFFOLD_TEMPLATES_DIR,
            RN_SCAFFOLD_INSTALL_TIMEOUT, RN_SCAFFOLD_ASSUME_YES.

        Keyword arguments take precedence over the environment.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("RN_SCAFFOLD_PROJECT_ROOT"):
            kwargs["project_root"] = Path(os.environ["RN_SCAFFOLD_PROJECT_ROOT"])
        if os.environ.get("RN_SCAFFOLD_TEMPLATES_DIR"):
            kwargs["templates_dir"] = Path(os.environ["RN_SCAFFOLD_TEMPLATES_DIR"])
        if os.environ.get("RN_SCAFFOLD_INSTALL_TIMEOUT"):
            kwargs["install_timeout"] = int(os.environ["RN_SCAFFOLD_INSTALL_TIMEOUT"])
        if os.environ.get("RN_SCAFFOLD_ASSUME_YES"):
            kwargs["assume_yes"] = os.environ["RN_SCAFFOLD_ASSUME_YES"].strip().lower() in (
                "1",
                "true",
                "yes",
            )

        kwargs.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**kwargs)
