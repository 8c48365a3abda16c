"""Project overview injected into the first user message of a run."""

import json
import logging
import re
import tomllib
from pathlib import Path
from typing import Optional

from ..tools.filesystem import LocalFileBackend
from ..tools.list_directory import build_tree

logger = logging.getLogger(__name__)

MAX_DEPENDENCIES = 15
OVERVIEW_TREE_DEPTH = 3

COMMON_ENTRY_POINTS = [
    "main.py",
    "app.py",
    "__main__.py",
    "index.js",
    "server.js",
    "app.js",
    "main.go",
    "main.rs",
    "Program.cs",
]


def _as_table(value) -> dict:
    """``value`` when a manifest section is a mapping, otherwise an empty one."""
    return value if isinstance(value, dict) else {}


class ProjectOverviewBuilder:
    """Builds a compact description of a project: metadata plus directory tree."""

    def build(self, root_path: str | Path) -> str:
        """Render the overview for ``root_path``.

        Args:
            root_path: Project root

        Returns:
            Plain-text overview
        """
        backend = LocalFileBackend(root_path)
        root = backend.root

        lines = [f"Project root: {root}", f"Project name: {root.name}"]
        lines.extend(self._describe_project(root))

        entry_points = self._find_entry_points(root)
        if entry_points:
            lines.append(f"Entry points: {', '.join(entry_points)}")

        lines.append("")
        lines.append("Directory structure:")
        build_tree(backend, root, OVERVIEW_TREE_DEPTH, lines, indent="  ")
        return "\n".join(lines)

    def _describe_project(self, root: Path) -> list[str]:
        """Type and dependency lines from the first recognised manifest."""
        detectors = (
            self._describe_dotnet,
            self._describe_node,
            self._describe_python,
            self._describe_go,
            self._describe_rust,
            self._describe_java,
        )
        for detector in detectors:
            try:
                description = detector(root)
            except (OSError, ValueError, AttributeError, TypeError) as e:
                logger.debug("Skipping %s: %s", detector.__name__, e)
                continue
            if description is not None:
                return description
        return []

    @staticmethod
    def _dependency_lines(dependencies: list[str]) -> list[str]:
        if not dependencies:
            return []
        return ["Dependencies:"] + [f"  - {dep}" for dep in dependencies[:MAX_DEPENDENCIES]]

    def _describe_dotnet(self, root: Path) -> Optional[list[str]]:
        csproj_files = sorted(root.glob("*.csproj"))
        if not csproj_files:
            return None

        content = csproj_files[0].read_text(encoding="utf-8", errors="replace")
        framework = re.search(r"<TargetFramework>(.*?)</TargetFramework>", content)
        sdk = re.search(r'<Project\s+Sdk="(.*?)"', content)

        lines = [f"Type: .NET ({framework.group(1) if framework else 'unknown'})"]
        if sdk:
            lines.append(f"SDK: {sdk.group(1)}")
        packages = re.findall(r'<PackageReference\s+Include="([^"]+)"\s+Version="([^"]+)"', content)
        lines.extend(self._dependency_lines([f"{name} ({version})" for name, version in packages]))
        return lines

    def _describe_node(self, root: Path) -> Optional[list[str]]:
        package_json = root / "package.json"
        if not package_json.is_file():
            return None

        # json.JSONDecodeError is a ValueError
        data = json.loads(package_json.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            return ["Type: Node.js"]
        lines = []
        if data.get("name"):
            lines.append(f"Package: {data['name']}")
        lines.append("Type: Node.js")
        deps = _as_table(data.get("dependencies"))
        lines.extend(self._dependency_lines([f"{name} ({version})" for name, version in deps.items()]))
        return lines

    def _describe_python(self, root: Path) -> Optional[list[str]]:
        pyproject = root / "pyproject.toml"
        if pyproject.is_file():
            lines = ["Type: Python (pyproject.toml)"]
            try:
                data = tomllib.loads(pyproject.read_text(encoding="utf-8"))
            except tomllib.TOMLDecodeError:
                return lines
            project = _as_table(data.get("project"))
            if project.get("name"):
                lines.insert(0, f"Package: {project['name']}")
            dependencies = project.get("dependencies")
            if isinstance(dependencies, list):
                lines.extend(self._dependency_lines([str(dep) for dep in dependencies]))
            return lines

        requirements = root / "requirements.txt"
        if requirements.is_file():
            reqs = [
                line.strip()
                for line in requirements.read_text(encoding="utf-8").splitlines()
                if line.strip() and not line.lstrip().startswith("#")
            ]
            return ["Type: Python"] + self._dependency_lines(reqs)

        if (root / "setup.py").is_file():
            return ["Type: Python (setup.py)"]
        return None

    def _describe_go(self, root: Path) -> Optional[list[str]]:
        go_mod = root / "go.mod"
        if not go_mod.is_file():
            return None

        module = re.search(r"^module\s+(.+)$", go_mod.read_text(encoding="utf-8"), re.MULTILINE)
        lines = [f"Module: {module.group(1).strip()}"] if module else []
        lines.append("Type: Go")
        return lines

    def _describe_rust(self, root: Path) -> Optional[list[str]]:
        cargo = root / "Cargo.toml"
        if not cargo.is_file():
            return None

        lines = ["Type: Rust (Cargo)"]
        try:
            data = tomllib.loads(cargo.read_text(encoding="utf-8"))
        except tomllib.TOMLDecodeError:
            return lines
        lines.extend(self._dependency_lines(list(_as_table(data.get("dependencies")))))
        return lines

    def _describe_java(self, root: Path) -> Optional[list[str]]:
        if (root / "pom.xml").is_file():
            return ["Type: Java (Maven)"]
        if (root / "build.gradle").is_file() or (root / "build.gradle.kts").is_file():
            return ["Type: Java (Gradle)"]
        return None

    def _find_entry_points(self, root: Path) -> list[str]:
        entry_points = [entry for entry in COMMON_ENTRY_POINTS if (root / entry).is_file()]
        entry_points.extend(
            f"src/{entry}" for entry in COMMON_ENTRY_POINTS if (root / "src" / entry).is_file()
        )
        return entry_points


def build_project_overview(root_path: str | Path) -> str:
    return ProjectOverviewBuilder().build(root_path)
