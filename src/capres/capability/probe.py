"""SDK Dependency Probe.

Read-only inspection of an optional SDK tree. Checks run in a fixed order:

    1. SDK root directory
    2. interface directory, then its header
    3. per-platform import library directory, then both import libraries
    4. per-platform runtime directory, then the runtime library

A missing directory is reported once and its children are not checked, so
the first structural cause comes first and files that cannot exist are not
listed. Files inside an existing directory are all checked (collect-all).

Absence is returned as data. Only an unexpected OSError (permission denied,
I/O error) raises ProbeEnvironmentError.
"""

import logging
import os
import stat
from pathlib import Path
from typing import List, Optional, Sequence, Union

from capres.errors import ProbeEnvironmentError
from capres.layouts import SdkLayout
from capres.targets import TargetPlatform

from .models import ArtifactRole, MissingArtifact, ProbeResult, ResolvedPath, Satisfied, Unsatisfied

logger = logging.getLogger(__name__)


def sdk_root_from_anchor(anchor: Union[str, Path], relative: str = "..") -> Path:
    """Compute an SDK root relative to a known anchor (e.g. the module directory).

    The result is absolute and normalized but symlinks are not resolved.
    """
    return Path(os.path.abspath(os.path.join(os.fspath(anchor), relative)))


def _entry_mode(path: Path) -> Optional[int]:
    """Return the st_mode of path, or None when it does not exist.

    Raises:
        ProbeEnvironmentError: On any other OSError
    """
    try:
        return path.stat().st_mode
    except (FileNotFoundError, NotADirectoryError):
        return None
    except OSError as e:
        raise ProbeEnvironmentError(f"Cannot inspect {path}: {e}") from e


class SdkProbe:
    """Checks an SDK tree against a layout for one target platform."""

    def __init__(self, root: Union[str, Path], layout: SdkLayout, target: TargetPlatform):
        """Initialize the probe.

        Args:
            root: SDK root directory; may not exist
            layout: Layout naming the expected artifacts
            target: Target platform selecting the per-platform directories
        """
        self.root = Path(os.path.abspath(os.fspath(root)))
        self.layout = layout
        self.target = target
        self._found: List[ResolvedPath] = []
        self._missing: List[MissingArtifact] = []

    @property
    def interface_dir(self) -> Path:
        return self.root / self.layout.interface_dir

    @property
    def lib_dir(self) -> Path:
        return self.root / self.layout.lib_dir / self.layout.lib_platform_dir(self.target)

    @property
    def runtime_dir(self) -> Path:
        return self.root / self.layout.runtime_platform_dir(self.target)

    def probe(self) -> ProbeResult:
        """Run every check and return the verdict.

        Raises:
            ProbeEnvironmentError: If the filesystem cannot be inspected
        """
        self._found = []
        self._missing = []

        logger.debug(f"Probing {self.layout.name} SDK at {self.root} for {self.target}")

        if not self._check_dir(self.root, "SDK root directory"):
            return Unsatisfied(missing=tuple(self._missing))

        if self._check_dir(self.interface_dir, "interface directory"):
            self._check_files(self.interface_dir, [self.layout.header], ArtifactRole.HEADER, "header")

        if self._check_dir(self.lib_dir, "library directory"):
            self._check_files(self.lib_dir, self.layout.import_libraries, ArtifactRole.IMPORT_LIBRARY, "import library")

        if self._check_dir(self.runtime_dir, "runtime directory"):
            runtime_name = self.layout.runtime_library_for(self.target)
            self._check_files(self.runtime_dir, [runtime_name], ArtifactRole.RUNTIME_LIBRARY, "runtime library")

        if self._missing:
            logger.debug(f"{self.layout.name} SDK incomplete: {len(self._missing)} missing artifact(s)")
            return Unsatisfied(missing=tuple(self._missing))

        logger.debug(f"{self.layout.name} SDK complete at {self.root}")
        return Satisfied(artifacts=tuple(self._found))

    def _check_dir(self, path: Path, kind: str) -> bool:
        mode = _entry_mode(path)
        if mode is not None and stat.S_ISDIR(mode):
            return True
        logger.debug(f"Missing {kind}: {path}")
        self._missing.append(MissingArtifact(role=ArtifactRole.DIRECTORY, path=path, kind=kind))
        return False

    def _check_files(self, directory: Path, names: Sequence[str], role: ArtifactRole, kind: str) -> None:
        # Keep checking siblings after a miss
        for name in names:
            path = directory / name
            mode = _entry_mode(path)
            if mode is not None and stat.S_ISREG(mode):
                self._found.append(ResolvedPath(path=path, role=role))
            else:
                logger.debug(f"Missing {kind}: {path}")
                self._missing.append(MissingArtifact(role=role, path=path, kind=kind))


def probe_sdk(root: Union[str, Path], layout: SdkLayout, target: TargetPlatform) -> ProbeResult:
    """Probe an SDK tree. See SdkProbe."""
    return SdkProbe(root, layout, target).probe()
