"""
Property-based tests for recompute: idempotence and orthogonal validity across layouts
"""

import pytest
from hypothesis import given, settings, strategies as st

from connector_router.connector.generator import ConnectorPathGenerator
from connector_router.connector.model import Connection, Connector, ConnectorMode
from connector_router.connector.shapes import RectShape
from connector_router.connector.surface import Surface
from connector_router.geometry.point_location import PathPoint
from connector_router.routing.path_optimizer import validate_orthogonal


coords = st.integers(-200, 200)
sizes = st.integers(20, 150)
gaps = st.integers(10, 200)
shifts = st.integers(-150, 150)


def build(*shapes):
    surface = Surface()
    for shape in shapes:
        surface.add(shape)
    return surface, ConnectorPathGenerator(surface.get)


def flatten(connector):
    """Positions and both controls of every point, as one flat list"""
    values = []
    for p in connector.absolute_path:
        values.extend([p.x, p.y, p.in_vec.x, p.in_vec.y, p.out_vec.x, p.out_vec.y])
    return values


def place_beside(xywh, side, gap, shift, size):
    """xywh of a square shape on ``side`` of ``xywh``, ``gap`` away"""
    x, y, w, h = xywh
    if side == 'right':
        return (x + w + gap, y + shift, size, size)
    if side == 'left':
        return (x - gap - size, y + shift, size, size)
    if side == 'below':
        return (x + shift, y + h + gap, size, size)
    return (x + shift, y - gap - size, size, size)


class TestOrthogonalLayouts:
    """Auto-anchored orthogonal connectors between two separate shapes"""

    @settings(max_examples=60, deadline=None)
    @given(
        coords, coords, sizes, sizes,
        st.sampled_from(['right', 'left', 'below', 'above']),
        gaps, shifts, sizes,
    )
    def test_route_is_orthogonal_and_stable(self, x, y, w, h, side, gap, shift, size):
        a_xywh = (x, y, w, h)
        surface, generator = build(
            RectShape.from_xywh('a', a_xywh),
            RectShape.from_xywh('b', place_beside(a_xywh, side, gap, shift, size)),
        )
        connector = surface.add(
            Connector.create('c', Connection.attached('a'), Connection.attached('b'), ConnectorMode.ORTHOGONAL)
        )

        assert generator.recompute_from_ends(connector)
        first = flatten(connector)
        path = [(p.x, p.y) for p in connector.absolute_path]
        assert len(path) >= 2
        assert validate_orthogonal(path)

        assert generator.recompute_from_ends(connector)
        assert flatten(connector) == pytest.approx(first, abs=1e-6)


class TestCurveIdempotence:
    """Curve controls are re-smoothed from positions only"""

    @settings(max_examples=60, deadline=None)
    @given(
        st.tuples(coords, coords),
        st.tuples(coords, coords),
        st.lists(st.tuples(coords, coords), min_size=1, max_size=4),
    )
    def test_interior_points_survive_recompute(self, start, end, interior):
        surface, generator = build()
        connector = surface.add(
            Connector.create('c', Connection.free(start), Connection.free(end), ConnectorMode.CURVE)
        )
        points = [PathPoint(float(px), float(py)) for px, py in [start] + interior + [end]]
        connector.write_path_absolute(points)

        assert generator.recompute_from_ends(connector)
        first = flatten(connector)
        assert len(connector.absolute_path) == len(interior) + 2

        assert generator.recompute_from_ends(connector)
        assert flatten(connector) == pytest.approx(first, abs=1e-6)

    def test_attached_end_with_interior_point(self):
        surface, generator = build(RectShape.from_xywh('a', (0, 0, 100, 100)))
        connector = surface.add(
            Connector.create('c', Connection.attached('a'), Connection.free((400, 300)), ConnectorMode.CURVE)
        )
        generator.recompute_from_ends(connector)
        generator.add_point_into_path(connector, 1)
        generator.move_point(connector, 1, (250, 40))

        generator.recompute_from_ends(connector)
        first = flatten(connector)
        generator.recompute_from_ends(connector)
        assert flatten(connector) == pytest.approx(first, abs=1e-6)


class TestPinnedReroute:
    """Segment drags pin an axis; later shape moves re-route only the ends"""

    @settings(max_examples=40, deadline=None)
    @given(st.integers(-20, 20), st.integers(-50, 150), st.integers(-100, 150))
    def test_drag_then_shape_move(self, offset, dx, dy):
        surface, generator = build(
            RectShape.from_xywh('a', (0, 0, 100, 100)),
            RectShape.from_xywh('b', (300, 200, 100, 100)),
        )
        connector = surface.add(
            Connector.create(
                'c',
                Connection.attached('a', (1, 0.5)),
                Connection.attached('b', (0, 0.5)),
                ConnectorMode.ORTHOGONAL,
            )
        )
        generator.recompute_from_ends(connector)
        path = connector.absolute_path
        index = 1 if len(path) >= 4 else 0
        before, after = path[index], path[index + 1]
        if before.x == after.x:
            drag = (before.x + offset, (before.y + after.y) / 2)
        else:
            drag = ((before.x + after.x) / 2, before.y + offset)

        generator.move_point(connector, index, drag)
        assert any(p.is_pinned for p in connector.absolute_path)

        surface.update('b', xywh=[300 + dx, 200 + dy, 100, 100])
        assert generator.recompute_from_ends(connector)
        moved = [(p.x, p.y) for p in connector.absolute_path]
        assert validate_orthogonal(moved)
        assert moved[-1] == pytest.approx((300 + dx, 250 + dy))

        first = flatten(connector)
        assert generator.recompute_from_ends(connector)
        assert flatten(connector) == pytest.approx(first, abs=1e-6)
