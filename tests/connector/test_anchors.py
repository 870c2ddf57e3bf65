"""
Tests for anchor resolution of connection ends
"""

import pytest

from connector_router.core.exceptions import InvalidConnectionError, UnresolvableEndpointError
from connector_router.connector.anchors import AnchorResolver, calculate_nearest_location
from connector_router.connector.model import Connection, Connector, ConnectorMode
from connector_router.connector.shapes import RectShape, GroupShape, edge_normal
from connector_router.geometry.bound import Bound


@pytest.fixture
def resolver(surface):
    return AnchorResolver(surface.get)


class TestAnchors:
    """Cardinal anchors of a shape"""

    def test_anchors_of_plain_rectangle(self, resolver, surface):
        anchors = resolver.get_anchors(surface.get('a'))
        assert [(a.point.x, a.point.y) for a in anchors] == [(50, 0), (50, 100), (0, 50), (100, 50)]
        assert [a.coord for a in anchors] == [(0.5, 0), (0.5, 1), (0, 0.5), (1, 0.5)]
        assert [a.point.tangent for a in anchors] == [(0, -1), (0, 1), (-1, 0), (1, 0)]

    def test_anchors_follow_rotation(self, resolver):
        """A quarter turn moves the top anchor onto the right side, facing right"""
        shape = RectShape.from_xywh('r', (0, 0, 100, 100), rotate=90)
        top = resolver.get_anchors(shape)[0]
        assert top.point.x == pytest.approx(100)
        assert top.point.y == pytest.approx(50)
        assert top.point.tangent.x == pytest.approx(1)
        assert top.point.tangent.y == pytest.approx(0, abs=1e-9)
        assert top.coord.x == pytest.approx(0.5)
        assert top.coord.y == pytest.approx(0, abs=1e-9)

    def test_nearest_anchor(self, resolver, surface):
        point = resolver.nearest_anchor(surface.get('a'), (500, 60))
        assert (point.x, point.y) == (100, 50)

    def test_calculate_nearest_location(self):
        assert calculate_nearest_location((50, 200), Bound(0, 0, 100, 100)) == (0.5, 1.0)


class TestEdgeNormal:
    """Outward normal of the edge nearest a relative position"""

    def test_edge_midpoints(self):
        bound = Bound(0, 0, 100, 100)
        assert edge_normal(bound, (0.5, 0)) == (0, -1)
        assert edge_normal(bound, (1, 0.5)) == (1, 0)
        assert edge_normal(bound, (0.5, 1)) == (0, 1)
        assert edge_normal(bound, (0, 0.5)) == (-1, 0)

    def test_corner_tie_prefers_top(self):
        assert edge_normal(Bound(0, 0, 100, 100), (1, 0)) == (0, -1)

    def test_thin_shape_uses_absolute_distance(self):
        """On a wide, flat shape a point near the top edge faces up even at x=0.9"""
        assert edge_normal(Bound(0, 0, 1000, 10), (0.9, 0.2)) == (0, -1)


class TestResolveEndpoints:
    """Turning connections into path points"""

    def test_fixed_position(self, resolver):
        point = resolver.resolve_endpoint(Connection.attached('a', (1, 0.5)), (0, 0))
        assert (point.x, point.y) == (100, 50)
        assert point.tangent == (1, 0)

    def test_free_position(self, resolver):
        point = resolver.resolve_endpoint(Connection.free((7, 8)), (0, 0))
        assert (point.x, point.y) == (7, 8)
        assert point.tangent == (0, 0)

    def test_auto_pair_picks_closest_anchors(self, resolver):
        connector = Connector.create('c', Connection.attached('a'), Connection.attached('b'))
        start, end = resolver.compute_start_end(connector)
        assert (start.x, start.y) == (100, 50)
        assert (end.x, end.y) == (300, 50)

    def test_auto_end_aims_at_fixed_end(self, resolver):
        connector = Connector.create('c', Connection.attached('a'), Connection.free((50, 400)))
        start, end = resolver.compute_start_end(connector)
        assert (start.x, start.y) == (50, 100)
        assert (end.x, end.y) == (50, 400)

    def test_center_facing(self, resolver):
        connector = Connector.create(
            'c', Connection.attached('a'), Connection.attached('b'), ConnectorMode.STRAIGHT
        )
        start, end = resolver.compute_center_facing(connector)
        assert (start.x, start.y) == (100, 50)
        assert (end.x, end.y) == (300, 50)

    def test_start_end_bounds(self, resolver):
        connector = Connector.create('c', Connection.attached('a'), Connection.free((0, 0)))
        assert resolver.start_end_bounds(connector) == (Bound(0, 0, 100, 100), None)


class TestShapeLookup:
    """Elements that cannot be endpoints"""

    def test_missing_shape(self, resolver):
        with pytest.raises(UnresolvableEndpointError) as exc_info:
            resolver.shape('missing')
        assert exc_info.value.shape_id == 'missing'

    def test_connector_is_not_an_endpoint(self, resolver, surface):
        surface.add(Connector.create('c', Connection.free((0, 0)), Connection.free((1, 1))))
        with pytest.raises(InvalidConnectionError):
            resolver.shape('c')

    def test_group_is_not_an_endpoint(self, resolver, surface):
        surface.add(GroupShape('g', Bound(0, 0, 400, 100), ['a', 'b']))
        with pytest.raises(InvalidConnectionError):
            resolver.shape('g')

    def test_is_attached(self, resolver):
        assert resolver.is_attached(Connection.attached('a'))
        assert not resolver.is_attached(Connection.attached('missing'))
        assert not resolver.is_attached(Connection.free((0, 0)))
