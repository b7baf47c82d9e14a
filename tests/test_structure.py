"""
Tests for the primitive arena and point classification across regions.
"""

import logging
import threading

import numpy as np
import pytest
from paraprim import (
    Structure, ParameterSet, Settings, Box, Sphere, Polygon,
    create_primitive, ExpressionParseError,
)
from paraprim.primitives import primitive_class


@pytest.fixture
def structure():
    return Structure(ParameterSet({"w": 1.0}), Settings())


class TestArena:
    """Ids, ownership and removal."""

    def test_ids_assigned_in_order(self, structure):
        """Primitives get increasing ids, regions too."""
        metal = structure.add_region("metal")
        air = structure.add_region("air")
        a = metal.add_box()
        b = air.add_sphere()
        assert (a.id, b.id) == (0, 1)
        assert (metal.id, air.id) == (0, 1)
        assert structure.primitive(1) is b

    def test_explicit_id(self, structure):
        """An explicit id is kept and the next one follows it."""
        structure.add_primitive(Box(structure.params, id=5))
        nxt = structure.add_primitive(Box(structure.params))
        assert nxt.id == 6

    def test_duplicate_id(self, structure):
        """Two primitives cannot share an id."""
        structure.add_primitive(Box(structure.params, id=3))
        with pytest.raises(ValueError):
            structure.add_primitive(Sphere(structure.params, id=3))

    def test_foreign_primitive(self, structure):
        """A primitive belongs to one structure only."""
        other = Structure(ParameterSet(), Settings())
        box = other.add_primitive(Box(other.params))
        with pytest.raises(ValueError):
            structure.add_primitive(box)

    def test_remove(self, structure):
        """Removal detaches from the region and the arena."""
        metal = structure.add_region("metal")
        box = metal.add_box((0, 0, 0), (1, 1, 1))
        structure.remove_primitive(box)
        assert box not in structure
        assert len(metal) == 0
        assert box.region is None
        with pytest.raises(KeyError):
            structure.remove_primitive(box)

    def test_region_lookup(self, structure):
        """Regions are found by id or name."""
        metal = structure.add_region("metal")
        assert structure.region("metal") is metal
        assert structure.region(0) is metal
        with pytest.raises(KeyError):
            structure.region("air")

    def test_unowned_primitive(self, structure):
        """A primitive can live in the arena without a region."""
        box = structure.add_primitive(Box(structure.params))
        assert box.region is None
        assert "Unowned" in structure.status()


class TestClassify:
    """Classification across regions."""

    def test_priority_across_regions(self, structure):
        """The higher priority region wins, wherever it is listed."""
        metal = structure.add_region("metal")
        air = structure.add_region("air")
        pin = metal.add_cylinder((0, 0, 0), (0, 0, 4), 0.5, priority=1)
        air.add_box((-5, -5, -5), (5, 5, 5))
        region, primitive, priority = structure.classify((0.0, 0.0, 2.0))
        assert (region, primitive, priority) == (metal, pin, 1)
        assert structure.classify((3.0, 0.0, 2.0))[0] is air
        assert structure.classify((9.0, 0.0, 0.0)) == (None, None, None)

    def test_equal_priority_later_region(self, structure):
        """On a tie the later region governs."""
        first = structure.add_region("first")
        second = structure.add_region("second")
        first.add_box((0, 0, 0), (1, 1, 1))
        second.add_box((0, 0, 0), (1, 1, 1))
        assert structure.classify((0.5, 0.5, 0.5))[0] is second

    def test_settings_tolerance(self):
        """The default tolerance comes from settings."""
        square = [(0, 0), (1, 0), (1, 1), (0, 1)]
        strict = Structure(settings=Settings(tolerance=0.0))
        strict.add_region("sheet").add_polygon(square)
        loose = Structure(settings=Settings(tolerance=0.1))
        loose.add_region("sheet").add_polygon(square)
        point = (0.5, 0.5, 0.05)
        assert strict.classify(point)[0] is None
        assert loose.classify(point)[0] is not None
        assert strict.classify(point, tol=0.1)[0] is not None

    def test_classify_points(self, structure):
        """Region ids per point, -1 for nothing."""
        structure.add_region("a").add_box((0, 0, 0), (1, 1, 1))
        structure.add_region("b").add_sphere((5, 0, 0), 1)
        ids = structure.classify_points([(0.5, 0.5, 0.5), (5.0, 0.0, 0.0), (9, 9, 9)])
        assert isinstance(ids, np.ndarray)
        assert ids.tolist() == [0, 1, -1]

    def test_classify_grid(self, structure):
        """Grid result is shaped (nx, ny, nz) and marks primitives used."""
        metal = structure.add_region("metal")
        box = metal.add_box((0, 0, 0), (1, 1, 1))
        unused = metal.add_box((20, 20, 20), (21, 21, 21))
        ids = structure.classify_grid([0.5, 5.0], [0.5], [0.25, 0.75, 2.0])
        assert ids.shape == (2, 1, 3)
        assert ids[0, 0].tolist() == [0, 0, -1]
        assert ids[1, 0].tolist() == [-1, -1, -1]
        assert box.used
        assert not unused.used


class TestStructureUpdates:
    """Bulk re-evaluation and diagnostics."""

    def test_reevaluate_collects_all(self, structure):
        """Every primitive's failures land in one report."""
        metal = structure.add_region("metal")
        metal.add_box((0, 0, 0), ("w", "w", "oops"))
        metal.add_sphere((0, 0, 0), "nope + 1")
        report = structure.reevaluate()
        assert len(report) == 2
        assert all(isinstance(e, ExpressionParseError) for e in report.errors)
        assert {e.primitive_id for e in report.errors} == {0, 1}

    def test_parameter_change_needs_reevaluate(self, structure):
        """Changing a parameter takes effect at the next reevaluate."""
        metal = structure.add_region("metal")
        metal.add_box((0, 0, 0), ("w", 1, 1))
        structure.reevaluate()
        structure.params.set_value("w", 3.0)
        assert structure.classify((2.0, 0.5, 0.5))[0] is None
        assert structure.reevaluate().ok
        assert structure.classify((2.0, 0.5, 0.5))[0] is metal

    def test_reevaluate_waits_for_lock(self, structure):
        """A bulk reevaluate holds off while another thread owns the arena."""
        structure.add_region("metal").add_box((0, 0, 0), ("w", 1, 1))
        done = threading.Event()

        def run():
            structure.reevaluate()
            done.set()

        with structure.lock:
            worker = threading.Thread(target=run)
            worker.start()
            assert not done.wait(0.2)
        worker.join(5.0)
        assert done.is_set()

    def test_warn_unused_respects_settings(self, caplog):
        """warn_unused=False keeps the structure quiet."""
        quiet = Structure(settings=Settings(warn_unused=False))
        quiet.add_region("metal").add_box()
        with caplog.at_level(logging.WARNING, logger="paraprim"):
            assert quiet.warn_unused_primitives() == []
        assert not [r for r in caplog.records if r.levelno >= logging.WARNING]

    def test_warn_unused(self, structure, caplog):
        """Unused primitives from every region are returned."""
        structure.add_region("a").add_box((0, 0, 0), (1, 1, 1))
        structure.add_region("b").add_box((5, 5, 5), (6, 6, 6))
        structure.classify((0.5, 0.5, 0.5), mark_used=True)
        with caplog.at_level(logging.WARNING, logger="paraprim"):
            unused = structure.warn_unused_primitives()
        assert [p.id for p in unused] == [1]
        structure.reset_used()
        assert len(structure.warn_unused_primitives()) == 2

    def test_status(self, structure):
        """Status starts with a summary line."""
        structure.add_region("metal").add_box()
        assert structure.status().splitlines()[0] == (
            "Structure: 1 primitives, 1 regions, 1 parameters"
        )


class TestFactory:
    """Creating primitives by type name or tag."""

    def test_by_name(self):
        """Names are case-insensitive."""
        sphere = create_primitive("sphere", radius=2)
        assert isinstance(sphere, Sphere)
        assert sphere.radius == 2.0
        assert primitive_class("LinPoly").__name__ == "LinearExtrudePolygon"

    def test_by_tag(self):
        """Numeric tags resolve too."""
        assert primitive_class(0x10) is Polygon
        assert primitive_class(1) is Box

    def test_unknown(self):
        """Unknown kinds raise ValueError."""
        with pytest.raises(ValueError):
            create_primitive("torus")
        with pytest.raises(ValueError):
            primitive_class(3)
