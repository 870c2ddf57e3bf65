"""
Tests for pointer-driven endpoint and waypoint drags
"""

import pytest

from connector_router.connector.handle import (
    AVAILABLE,
    SEGMENT,
    EndpointDrag,
    WaypointDrag,
    middle_handle_positions,
)
from connector_router.connector.model import Connection, ConnectorMode
from connector_router.connector.snapping import ConnectionOverlay
from connector_router.geometry.point_location import PathPoint


def positions(connector):
    return [(p.x, p.y) for p in connector.absolute_path]


@pytest.fixture
def routed(generator, make_connector, auto_connection):
    connector = make_connector(auto_connection('a'), auto_connection('b'))
    generator.recompute_from_ends(connector)
    return connector


@pytest.fixture
def overlay(surface):
    return ConnectionOverlay(surface)


class TestEndpointDrag:
    """Dragging a connector end"""

    def test_release_without_move_changes_nothing(self, routed, overlay, generator):
        before = routed.relative_path
        drag = EndpointDrag(routed, 'target', overlay, generator)
        assert not drag.pointer_up()
        assert routed.relative_path == before

    def test_drag_to_empty_space(self, routed, overlay, generator):
        drag = EndpointDrag(routed, 'target', overlay, generator)
        drag.pointer_move((500, 500))

        assert routed.target == Connection.free((500, 500))
        assert positions(routed)[-1] == (500, 500)
        assert drag.pointer_up()
        assert routed.stashed == ()

    def test_drag_onto_anchor(self, routed, overlay, generator):
        drag = EndpointDrag(routed, 'target', overlay, generator)
        drag.pointer_move((500, 500))
        result = drag.pointer_move((301, 50))

        assert result.connection == Connection.attached('b', (0, 0.5))
        assert positions(routed)[-1] == (300, 50)

    def test_cancel_restores(self, routed, overlay, generator):
        before = routed.relative_path
        drag = EndpointDrag(routed, 'target', overlay, generator)
        drag.pointer_move((500, 500))
        drag.cancel()

        assert routed.target == Connection.attached('b')
        assert routed.relative_path == before

    def test_own_shape_is_not_a_target(self, routed, overlay, generator):
        """The opposite end's shape is excluded from snapping"""
        drag = EndpointDrag(routed, 'target', overlay, generator)
        result = drag.pointer_move((101, 50))
        assert result.connection.is_free

    def test_invalid_end(self, routed, overlay, generator):
        with pytest.raises(ValueError):
            EndpointDrag(routed, 'middle', overlay, generator)


class TestWaypointDrag:
    """Dragging interior points and segment handles"""

    @pytest.fixture
    def straight(self, make_connector):
        return make_connector(Connection.free((0, 0)), Connection.free((200, 0)), ConnectorMode.STRAIGHT)

    def test_segment_handle_inserts_point(self, straight, generator):
        drag = WaypointDrag(straight, 0, SEGMENT, generator)
        assert drag.pointer_move((100, 50)) == 1
        assert positions(straight) == [(0, 0), (100, 50), (200, 0)]

        assert drag.pointer_up()
        assert positions(straight) == [(0, 0), (100, 50), (200, 0)]
        assert straight.stashed == ()

    def test_repeated_moves_reuse_inserted_point(self, straight, generator):
        drag = WaypointDrag(straight, 0, SEGMENT, generator)
        drag.pointer_move((100, 50))
        drag.pointer_move((120, 60))
        assert positions(straight) == [(0, 0), (120, 60), (200, 0)]

    def test_available_handle_cancel(self, straight, generator):
        WaypointDrag(straight, 0, SEGMENT, generator).pointer_move((100, 50))
        straight.pop()

        drag = WaypointDrag(straight, 1, AVAILABLE, generator)
        drag.pointer_move((100, 80))
        assert positions(straight)[1] == (100, 80)

        drag.cancel()
        assert positions(straight)[1] == (100, 50)

    def test_release_without_move(self, straight, generator):
        assert not WaypointDrag(straight, 0, SEGMENT, generator).pointer_up()
        assert len(straight.absolute_path) == 2

    def test_orthogonal_segment_drag_survives_release(self, make_connector, generator):
        """Pinned points of a dragged segment are kept by the settle recompute"""
        connector = make_connector(Connection.free((0, 0)), Connection.free((200, 100)))
        connector.write_path_absolute([
            PathPoint(0, 0), PathPoint(0, 50), PathPoint(200, 50), PathPoint(200, 100),
        ])

        drag = WaypointDrag(connector, 1, SEGMENT, generator)
        assert drag.pointer_move((120, 37)) == 1
        assert drag.pointer_up()

        assert positions(connector) == [(0, 0), (0, 37), (200, 37), (200, 100)]

    def test_unknown_kind(self, straight, generator):
        with pytest.raises(ValueError):
            WaypointDrag(straight, 0, 'corner', generator)


class TestMiddleHandles:
    def test_straight_segment_handle(self, make_connector):
        connector = make_connector(Connection.free((0, 0)), Connection.free((200, 0)), ConnectorMode.STRAIGHT)
        assert middle_handle_positions(connector) == [(0, (100, 0))]

    def test_short_orthogonal_segment_hidden(self, make_connector):
        connector = make_connector(Connection.free((0, 0)), Connection.free((100, 10)))
        connector.write_path_absolute([PathPoint(0, 0), PathPoint(0, 10), PathPoint(100, 10)])
        assert middle_handle_positions(connector) == [(1, (50, 10))]
