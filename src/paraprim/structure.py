"""
The primitive arena: primitives by stable id, regions, and the map of
which region owns which primitive.

Typical use while rasterizing a mesh::

    structure = Structure(ParameterSet({"r": 2.0}))
    metal = structure.add_region("metal")
    metal.add_cylinder((0, 0, 0), (0, 0, 10), "r", priority=1)
    report = structure.reevaluate()
    if not report:
        print(report.format())
    ids = structure.classify_grid(xlines, ylines, zlines)
"""

from __future__ import annotations

import logging
import threading
from typing import Dict, Iterable, List, Optional, Tuple, Union

import numpy as np

from .config import Settings, load_settings
from .errors import UpdateReport
from .params import ParameterSet
from .primitives import Primitive
from .region import Region

logger = logging.getLogger(__name__)


class Structure:
    """Owns primitives and regions and resolves point classification."""

    def __init__(self, params: Optional[ParameterSet] = None,
                 settings: Optional[Settings] = None):
        self.params = params if params is not None else ParameterSet()
        self.settings = settings if settings is not None else load_settings()
        self.lock = threading.RLock()
        self._primitives: Dict[int, Primitive] = {}
        self._regions: List[Region] = []
        self._owner: Dict[int, Region] = {}
        self._next_region_id = 0

    # ------------------------------------------------------------------
    # regions
    # ------------------------------------------------------------------

    def add_region(self, name: str) -> Region:
        with self.lock:
            region = Region(self, name, self._next_region_id)
            self._next_region_id += 1
            self._regions.append(region)
            return region

    @property
    def regions(self) -> List[Region]:
        with self.lock:
            return list(self._regions)

    def region(self, key: Union[int, str]) -> Region:
        """
        Look up a region by id or by name.

        Raises:
            KeyError: if no region matches
        """
        for region in self.regions:
            if isinstance(key, str) and region.name == key:
                return region
            if not isinstance(key, str) and region.id == key:
                return region
        raise KeyError(f"no region {key!r}")

    # ------------------------------------------------------------------
    # primitives
    # ------------------------------------------------------------------

    def add_primitive(self, primitive: Primitive, region: Optional[Region] = None) -> Primitive:
        """
        Put ``primitive`` in the arena, assigning the next free id when it
        has none, and optionally hand it to ``region``.

        Raises:
            ValueError: if the id is taken or the primitive belongs to
                another structure
        """
        with self.lock:
            if primitive._structure is not None and primitive._structure is not self:
                raise ValueError(f"{primitive.describe()} belongs to another structure")
            if primitive._structure is None:
                if primitive.id is None:
                    primitive.id = max(self._primitives, default=-1) + 1
                elif primitive.id in self._primitives:
                    raise ValueError(f"duplicate primitive id: {primitive.id}")
                self._primitives[primitive.id] = primitive
                primitive._structure = self
            if region is not None:
                self.set_owner(primitive, region)
            return primitive

    def remove_primitive(self, primitive: Primitive) -> None:
        """Remove ``primitive`` from the arena and from its region."""
        with self.lock:
            if self._primitives.get(primitive.id) is not primitive:
                raise KeyError(f"primitive not in structure: {primitive.describe()}")
            self.set_owner(primitive, None)
            del self._primitives[primitive.id]
            primitive._structure = None

    def primitive(self, primitive_id: int) -> Primitive:
        return self._primitives[primitive_id]

    @property
    def primitives(self) -> List[Primitive]:
        with self.lock:
            return list(self._primitives.values())

    def __contains__(self, primitive: Primitive) -> bool:
        return self._primitives.get(primitive.id) is primitive

    # ------------------------------------------------------------------
    # ownership
    # ------------------------------------------------------------------

    def set_owner(self, primitive: Primitive, region: Optional[Region]) -> None:
        """Move ``primitive`` to ``region`` (``None`` detaches) in one step."""
        with self.lock:
            if primitive not in self:
                self.add_primitive(primitive)
            if region is not None and region.structure is not self:
                raise ValueError(f"region '{region.name}' belongs to another structure")

            old = self._owner.get(primitive.id)
            if old is region:
                return
            if old is not None:
                old._members.remove(primitive.id)
                del self._owner[primitive.id]
            if region is not None:
                region._members.append(primitive.id)
                self._owner[primitive.id] = region

            logger.debug("%s: owner %s -> %s", primitive.describe(),
                         old.name if old is not None else None,
                         region.name if region is not None else None)

    def owner_of(self, primitive: Primitive) -> Optional[Region]:
        with self.lock:
            if self._primitives.get(primitive.id) is not primitive:
                return None
            return self._owner.get(primitive.id)

    # ------------------------------------------------------------------
    # evaluation and classification
    # ------------------------------------------------------------------

    def reevaluate(self) -> UpdateReport:
        """Re-evaluate every primitive; the report collects all failures."""
        report = UpdateReport()
        with self.lock:
            for primitive in self.primitives:
                report.merge(primitive.reevaluate())
        return report

    def classify(self, point, tol: Optional[float] = None,
                 mark_used: bool = False) -> Tuple[Optional[Region], Optional[Primitive], Optional[int]]:
        """
        Find the region governing ``point``.

        Returns ``(region, primitive, priority)`` or ``(None, None, None)``.
        The highest priority wins; on equal priority the later region does.
        """
        if tol is None:
            tol = self.settings.tolerance
        best: Tuple[Optional[Region], Optional[Primitive], Optional[int]] = (None, None, None)
        for region in self.regions:
            primitive, priority = region.classify(point, tol)
            if primitive is None:
                continue
            if best[1] is None or priority >= best[2]:
                best = (region, primitive, priority)
        if mark_used and best[1] is not None:
            best[1].used = True
        return best

    def classify_points(self, points: Iterable, tol: Optional[float] = None,
                        mark_used: bool = True) -> np.ndarray:
        """Region id for each point of an ``(N, 3)`` array, ``-1`` when none."""
        pts = np.asarray(points, dtype=float).reshape(-1, 3)
        result = np.full(len(pts), -1, dtype=int)
        for i, p in enumerate(pts):
            region, _, _ = self.classify(tuple(p), tol, mark_used)
            if region is not None:
                result[i] = region.id
        return result

    def classify_grid(self, x: Iterable[float], y: Iterable[float], z: Iterable[float],
                      tol: Optional[float] = None, mark_used: bool = True) -> np.ndarray:
        """Region id for every node of a rectilinear mesh, shaped ``(nx, ny, nz)``."""
        xs = np.asarray(x, dtype=float)
        ys = np.asarray(y, dtype=float)
        zs = np.asarray(z, dtype=float)
        gx, gy, gz = np.meshgrid(xs, ys, zs, indexing="ij")
        points = np.stack([gx.ravel(), gy.ravel(), gz.ravel()], axis=1)
        ids = self.classify_points(points, tol, mark_used)
        return ids.reshape(len(xs), len(ys), len(zs))

    # ------------------------------------------------------------------
    # diagnostics
    # ------------------------------------------------------------------

    def reset_used(self) -> None:
        for primitive in self.primitives:
            primitive.reset_used()

    def warn_unused_primitives(self) -> List[Primitive]:
        """Log unused primitives of every region (if enabled in settings)."""
        unused: List[Primitive] = []
        if not self.settings.warn_unused:
            return unused
        for region in self.regions:
            unused.extend(region.warn_unused_primitives())
        return unused

    def status(self) -> str:
        lines = [f"Structure: {len(self._primitives)} primitives, "
                 f"{len(self._regions)} regions, {self.params.count} parameters"]
        for region in self.regions:
            lines.append(region.status())
        orphans = [p for p in self.primitives if self.owner_of(p) is None]
        if orphans:
            lines.append(f"Unowned: {', '.join(p.describe() for p in orphans)}")
        return "\n".join(lines)
