"""SDK layout loader.

Layout definitions ship as JSON files inside this package and are read with
importlib.resources so they work from an installed wheel.
"""

from __future__ import annotations

import json
from importlib import resources
from pathlib import Path

from capres.errors import LayoutConfigError

from .sdk_layout_model import SdkLayout

DEFAULT_LAYOUT = "nvenc"

__all__ = ["DEFAULT_LAYOUT", "SdkLayout", "list_layouts", "load_layout", "load_layout_file"]


def load_layout(name: str = DEFAULT_LAYOUT) -> SdkLayout:
    """Load a packaged SDK layout by name.

    Args:
        name: Layout name without the .json extension (e.g. 'nvenc')

    Raises:
        LayoutConfigError: If no packaged layout has that name or it is malformed
    """
    layout_file = resources.files(__package__).joinpath(f"{name}.json")
    if not layout_file.is_file():
        known = ", ".join(list_layouts()) or "none"
        raise LayoutConfigError(f"Unknown SDK layout '{name}' (available: {known})")

    with layout_file.open("r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise LayoutConfigError(f"Invalid JSON in SDK layout '{name}': {e}")
    return SdkLayout.from_dict(data)


def load_layout_file(path: Path) -> SdkLayout:
    """Load an SDK layout from a JSON file outside the package."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise LayoutConfigError(f"Cannot read SDK layout {path}: {e}")
    except json.JSONDecodeError as e:
        raise LayoutConfigError(f"Invalid JSON in SDK layout {path}: {e}")
    return SdkLayout.from_dict(data)


def list_layouts() -> list[str]:
    """List the names of all packaged SDK layouts."""
    names = []
    for f in resources.files(__package__).iterdir():
        if f.name.endswith(".json") and f.is_file():
            names.append(f.name[:-5])
    return sorted(names)
