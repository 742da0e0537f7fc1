"""capres - build-time resolver for optional native capabilities.

Decides whether an optional SDK is present, turns that into build settings,
stages its runtime library, and discovers optional third-party modules.
"""

__version__ = "0.3.0"

from .build_settings import BuildSettings
from .resolver import ResolutionReport, ResolveRequest, resolve

__all__ = ["BuildSettings", "ResolutionReport", "ResolveRequest", "__version__", "resolve"]
