"""Saved layouts: object positions plus their label texts, by name.

Each layout is one ``{name}.json`` file in the layout directory::

    {"positions": [[x, y], ...], "texts": ["Vox", ...]}
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

from . import config
from .angles import Point
from .registry import ObjectRegistry

logger = logging.getLogger(__name__)


@dataclass
class Layout:
    """A named snapshot of object positions and label texts."""
    name: str
    positions: list[Point] = field(default_factory=list)
    texts: list[str] = field(default_factory=list)

    @classmethod
    def capture(cls, name: str, registry: ObjectRegistry) -> "Layout":
        """Snapshot the current registry."""
        return cls(
            name=name,
            positions=[obj.position for obj in registry],
            texts=[obj.label for obj in registry],
        )

    def fits(self, registry: ObjectRegistry) -> bool:
        """Whether this layout has exactly one entry per registered object."""
        return len(self.positions) == len(registry) and len(self.texts) == len(registry)

    def to_dict(self) -> dict:
        return {
            "positions": [[x, y] for x, y in self.positions],
            "texts": list(self.texts),
        }

    @classmethod
    def from_dict(cls, name: str, data: dict) -> "Layout":
        """Decode a layout file.

        Raises:
            ValueError: If the data is not a layout
        """
        if not isinstance(data, dict):
            raise ValueError(f"Layout {name!r} is not a JSON object")
        try:
            positions = [(float(p[0]), float(p[1])) for p in data.get("positions", [])]
            texts = [str(t) for t in data.get("texts", [])]
        except (TypeError, IndexError, ValueError) as exc:
            raise ValueError(f"Layout {name!r} is malformed: {exc}") from exc
        return cls(name=name, positions=positions, texts=texts)


class LayoutStore:
    """Directory of saved layouts."""

    def __init__(self, directory: Union[str, Path] = config.LAYOUT_DIR):
        self.directory = Path(directory).expanduser()

    def _path(self, name: str) -> Path:
        return self.directory / f"{name}.json"

    def names(self) -> list[str]:
        """Names of all saved layouts, sorted."""
        if not self.directory.is_dir():
            return []
        return sorted(p.stem for p in self.directory.glob("*.json"))

    def save(self, layout: Layout) -> Optional[Path]:
        """Write a layout, replacing any layout of the same name.

        Returns:
            The file written, or None if the name is blank
        """
        name = layout.name.strip()
        if not name:
            logger.warning("Layout name is empty; not saved")
            return None
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self._path(name)
        path.write_text(json.dumps(layout.to_dict(), indent=2), encoding="utf-8")
        logger.info("Layout saved to %s", path)
        return path

    def load(self, name: str) -> Optional[Layout]:
        """Read a layout by name.

        Returns:
            The layout, or None if no such file exists

        Raises:
            ValueError: If the file exists but is not a valid layout
        """
        path = self._path(name)
        if not path.is_file():
            logger.warning("Layout %s not found", name)
            return None
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise ValueError(f"Layout {name!r} is not valid JSON: {exc}") from exc
        logger.info("Layout loaded from %s", path)
        return Layout.from_dict(name, data)

    def delete(self, name: str) -> bool:
        """Delete a layout. Returns False if it did not exist."""
        path = self._path(name)
        if not path.is_file():
            logger.warning("Layout %s does not exist", name)
            return False
        path.unlink()
        logger.info("Layout %s deleted", name)
        return True
