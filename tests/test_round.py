"""
Tests for Sphere and Cylinder primitives.
"""

import math

import pytest
from paraprim import Sphere, Cylinder, ParameterSet


@pytest.fixture
def params():
    return ParameterSet({"r": 2.0})


class TestSphere:
    """Sphere bounds and containment."""

    def test_bounds(self, params):
        """Center plus/minus radius, accurate."""
        s = Sphere(params, center=(1, 2, 3), radius=2)
        bb = s.bounding_box()
        assert bb.box == (-1.0, 3.0, 0.0, 4.0, 1.0, 5.0)
        assert bb.accurate

    def test_surface_is_outside(self, params):
        """A point exactly at the radius is not inside."""
        s = Sphere(params, center=(0, 0, 0), radius=2)
        assert not s.contains((2.0, 0.0, 0.0))
        assert s.contains((2.0 - 1e-9, 0.0, 0.0))
        assert s.contains((0.0, 0.0, 0.0))

    def test_parametric_radius(self, params):
        """Radius follows the parameter after reevaluate."""
        s = Sphere(params, center=(0, 0, 0), radius="r * 2")
        assert s.reevaluate().ok
        assert s.radius == 4.0
        assert s.radius_term == "r * 2"
        assert s.contains((0.0, 3.9, 0.0))

    def test_radius_error_reported(self, params):
        """A broken radius expression is labelled."""
        s = Sphere(params, id=3, radius="r +")
        report = s.reevaluate()
        assert [e.field for e in report.errors] == ["radius"]


class TestCylinderBounds:
    """Cylinder bounding boxes."""

    def test_z_aligned_is_accurate(self, params):
        """(0,0,0)-(0,0,10) r=2 is tight along z."""
        c = Cylinder(params, start=(0, 0, 0), stop=(0, 0, 10), radius=2)
        bb = c.bounding_box()
        assert bb.accurate
        assert (bb.zmin, bb.zmax) == (0.0, 10.0)
        assert (bb.xmin, bb.xmax) == (-2.0, 2.0)
        assert (bb.ymin, bb.ymax) == (-2.0, 2.0)

    def test_y_aligned_is_accurate(self, params):
        """Reversed y aligned axis is normalized and tight."""
        c = Cylinder(params, start=(1, 5, 1), stop=(1, -5, 1), radius=1)
        bb = c.bounding_box()
        assert bb.accurate
        assert bb.box == (0.0, 2.0, -5.0, 5.0, 0.0, 2.0)

    def test_x_aligned_is_accurate(self, params):
        """x aligned axis tightens the x range only."""
        c = Cylinder(params, start=(0, 0, 0), stop=(4, 0, 0), radius=1)
        bb = c.bounding_box()
        assert bb.accurate
        assert bb.box == (0.0, 4.0, -1.0, 1.0, -1.0, 1.0)

    def test_oblique_is_conservative(self, params):
        """A skew axis gives an expanded, inaccurate box."""
        c = Cylinder(params, start=(0, 0, 0), stop=(1, 1, 1), radius=1)
        bb = c.bounding_box()
        assert not bb.accurate
        assert bb.box == (-1.0, 2.0, -1.0, 2.0, -1.0, 2.0)


class TestCylinderContains:
    """Cylinder containment."""

    def test_axis_aligned(self, params):
        """Points near the axis inside, far away outside."""
        c = Cylinder(params, start=(0, 0, 0), stop=(0, 0, 10), radius=2)
        assert c.contains((0.0, 0.0, 5.0))
        assert not c.contains((3.0, 0.0, 5.0))
        assert c.contains((1.9, 0.0, 0.0))

    def test_lateral_surface_outside(self, params):
        """Distance exactly r is outside."""
        c = Cylinder(params, start=(0, 0, 0), stop=(0, 0, 10), radius=2)
        assert not c.contains((2.0, 0.0, 5.0))

    def test_beyond_caps(self, params):
        """Points past either end are outside."""
        c = Cylinder(params, start=(0, 0, 0), stop=(0, 0, 10), radius=2)
        assert not c.contains((0.0, 0.0, -0.1))
        assert not c.contains((0.0, 0.0, 10.1))

    def test_reversed_axis(self, params):
        """Axis direction does not matter."""
        c = Cylinder(params, start=(0, 0, 10), stop=(0, 0, 0), radius=2)
        assert c.contains((0.5, 0.5, 9.0))

    def test_oblique_axis(self, params):
        """Skew cylinder contains points near its axis."""
        c = Cylinder(params, start=(0, 0, 0), stop=(4, 4, 0), radius=1)
        assert c.contains((2.0, 2.0, 0.5))
        assert not c.contains((2.0, 0.0, 0.0))

    def test_degenerate_axis(self, params):
        """Coincident endpoints contain nothing."""
        c = Cylinder(params, start=(1, 1, 1), stop=(1, 1, 1), radius=5)
        assert not c.contains((1.0, 1.0, 1.0))

    def test_parametric_radius(self, params):
        """Radius expression."""
        c = Cylinder(params, start=(0, 0, 0), stop=(0, 0, 1), radius="r")
        c.reevaluate()
        assert c.contains((1.5, 0.0, 0.5))
        assert c.bounding_box().xmax == 2.0

    def test_copy(self, params):
        """Copy keeps expressions."""
        c = Cylinder(params, start=(0, 0, 0), stop=(0, 0, "r"), radius="r")
        dup = c.copy()
        assert dup.stop_terms[2] == "r"
        assert dup.radius_term == "r"
