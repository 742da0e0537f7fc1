"""Build Settings - aggregated output of a resolver run.

Design:
    The surrounding build system owns the real settings object. capres never
    mutates it; instead every decision is folded into an immutable
    BuildSettings value which the caller applies in one place. Folding is
    order-preserving and drops duplicate entries.
"""

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Iterable, Tuple, TypeVar

from .capability.models import FeatureDecision, RuntimeDependency
from .capability.platform_feature import PlatformFeatureDecision
from .thirdparty.library_family import LibraryFamilyDecision

T = TypeVar("T")


def _extend_unique(existing: Tuple[T, ...], extra: Iterable[T]) -> Tuple[T, ...]:
    merged = list(existing)
    for item in extra:
        if item not in merged:
            merged.append(item)
    return tuple(merged)


@dataclass(frozen=True)
class BuildSettings:
    """Everything capres asks the build system to register.

    Attributes:
        definitions: Compile-time definitions (e.g. "FLAG=1")
        include_paths: Public include search paths
        system_include_paths: System include search paths
        link_inputs: Import libraries to link
        system_libraries: Platform libraries to link by name
        delay_loads: Libraries bound on first use
        runtime_dependencies: Runtime libraries packaging must carry
        dependency_modules: Third-party modules to add as dependencies
        diagnostics: Operator-facing lines describing why features are off
    """

    definitions: tuple[str, ...] = ()
    include_paths: tuple[Path, ...] = ()
    system_include_paths: tuple[Path, ...] = ()
    link_inputs: tuple[Path, ...] = ()
    system_libraries: tuple[str, ...] = ()
    delay_loads: tuple[str, ...] = ()
    runtime_dependencies: tuple[RuntimeDependency, ...] = ()
    dependency_modules: tuple[str, ...] = ()
    diagnostics: tuple[str, ...] = ()

    def with_feature(self, decision: FeatureDecision) -> "BuildSettings":
        """Return new settings with a capability decision folded in."""
        return replace(
            self,
            definitions=_extend_unique(self.definitions, [decision.definition]),
            include_paths=_extend_unique(self.include_paths, decision.include_paths),
            system_include_paths=_extend_unique(self.system_include_paths, decision.system_include_paths),
            link_inputs=_extend_unique(self.link_inputs, decision.link_inputs),
            system_libraries=_extend_unique(self.system_libraries, decision.system_libraries),
            delay_loads=_extend_unique(self.delay_loads, decision.delay_loads),
            runtime_dependencies=_extend_unique(self.runtime_dependencies, decision.runtime_dependencies),
            diagnostics=_extend_unique(self.diagnostics, decision.diagnostics),
        )

    def with_library_family(self, decision: LibraryFamilyDecision) -> "BuildSettings":
        """Return new settings with a library family decision folded in."""
        return replace(
            self,
            definitions=_extend_unique(self.definitions, [decision.definition]),
            dependency_modules=_extend_unique(self.dependency_modules, decision.dependency_modules),
            diagnostics=_extend_unique(self.diagnostics, decision.diagnostics),
        )

    def with_platform_feature(self, decision: PlatformFeatureDecision) -> "BuildSettings":
        """Return new settings with a platform-gated feature folded in."""
        return replace(
            self,
            definitions=_extend_unique(self.definitions, [decision.definition]),
            dependency_modules=_extend_unique(self.dependency_modules, decision.dependency_modules),
        )

    def is_defined(self, flag: str) -> bool:
        """True if flag is defined with a value of 1."""
        return f"{flag}=1" in self.definitions

    def to_dict(self) -> Dict[str, Any]:
        """JSON-serializable form (paths as strings)."""
        return {
            "definitions": list(self.definitions),
            "include_paths": [str(p) for p in self.include_paths],
            "system_include_paths": [str(p) for p in self.system_include_paths],
            "link_inputs": [str(p) for p in self.link_inputs],
            "system_libraries": list(self.system_libraries),
            "delay_loads": list(self.delay_loads),
            "runtime_dependencies": [{"source": str(d.source), "staged_path": d.staged_path} for d in self.runtime_dependencies],
            "dependency_modules": list(self.dependency_modules),
            "diagnostics": list(self.diagnostics),
        }
