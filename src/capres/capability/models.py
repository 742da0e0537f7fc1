"""Optional capability data model.

Probe results, feature decisions and staging records. Every type here is
immutable and is recomputed on each resolver run.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional, Union


class ArtifactRole(Enum):
    """Role of a probed artifact within an SDK tree."""

    HEADER = "header"
    IMPORT_LIBRARY = "import-library"
    RUNTIME_LIBRARY = "runtime-library"
    DIRECTORY = "directory"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ResolvedPath:
    """Absolute path of a verified artifact plus its role."""

    path: Path
    role: ArtifactRole


@dataclass(frozen=True)
class MissingArtifact:
    """An expected artifact that the probe did not find.

    Attributes:
        role: Role of the missing artifact
        path: Absolute path where it was expected
        kind: Human-readable label (e.g. "runtime library", "interface directory")
    """

    role: ArtifactRole
    path: Path
    kind: str

    def describe(self) -> str:
        return f"{self.kind} {self.path.name} at {self.path}"


@dataclass(frozen=True)
class Satisfied:
    """Every artifact was found.

    artifacts is ordered header, import library 1, import library 2, runtime library.
    """

    artifacts: tuple[ResolvedPath, ...]

    ok = True

    def _with_role(self, role: ArtifactRole) -> List[Path]:
        return [a.path for a in self.artifacts if a.role is role]

    @property
    def header(self) -> Path:
        return self._with_role(ArtifactRole.HEADER)[0]

    @property
    def interface_dir(self) -> Path:
        return self.header.parent

    @property
    def import_libraries(self) -> List[Path]:
        return self._with_role(ArtifactRole.IMPORT_LIBRARY)

    @property
    def runtime_library(self) -> Path:
        return self._with_role(ArtifactRole.RUNTIME_LIBRARY)[0]


@dataclass(frozen=True)
class Unsatisfied:
    """At least one artifact is missing; missing follows the fixed check order."""

    missing: tuple[MissingArtifact, ...]

    ok = False

    def describe(self) -> List[str]:
        return [m.describe() for m in self.missing]


ProbeResult = Union[Satisfied, Unsatisfied]


@dataclass(frozen=True)
class RuntimeDependency:
    """Runtime library the packaged application must carry.

    Attributes:
        source: The SDK copy of the library
        staged_path: Location of the staged copy relative to the project root
    """

    source: Path
    staged_path: str


@dataclass(frozen=True)
class FeatureDecision:
    """Outcome of configuring one optional capability.

    Derived from a ProbeResult; disabled decisions carry no include, link or
    delay-load entries.
    """

    flag: str
    enabled: bool
    include_paths: tuple[Path, ...] = ()
    system_include_paths: tuple[Path, ...] = ()
    link_inputs: tuple[Path, ...] = ()
    system_libraries: tuple[str, ...] = ()
    delay_loads: tuple[str, ...] = ()
    runtime_dependencies: tuple[RuntimeDependency, ...] = ()
    diagnostics: tuple[str, ...] = ()
    probe: Optional[ProbeResult] = field(default=None, compare=False, repr=False)

    @property
    def definition(self) -> str:
        return f"{self.flag}={1 if self.enabled else 0}"
