"""Tests for the frozen road network."""

import dataclasses

import pytest

from roadnet.network import IssueCode, IssueSeverity, NetworkIssue, RoadNetwork, RoadNetworkBuilder
from roadnet.segments import RoadSegmentFactory


class TestRoadNetwork:
    """Test network queries."""

    def setup_method(self):
        factory = RoadSegmentFactory()
        builder = RoadNetworkBuilder("Queries")
        builder.add_segments([
            factory.create_intersection(),
            factory.create_straight(),
            factory.create_straight(),
        ])
        builder.connect_segments(0, "north", 1, "start")
        builder.connect_segments(0, "south", 2, "start")
        self.network = builder.build()

    def test_lookup(self):
        """Segments can be found by id."""
        hub, north, south = self.network.segments
        assert self.network.get_segment(north.id) is north
        assert self.network.index_of(south.id) == 2
        assert self.network.index_of("missing") is None
        with pytest.raises(KeyError):
            self.network.get_segment("missing")

    def test_neighbors(self):
        """Neighbours follow the connection order."""
        hub, north, south = self.network.segments
        assert self.network.neighbors(hub.id) == [north, south]
        assert self.network.neighbors(north.id) == [hub]

    def test_open_connections(self):
        """Unlinked connections are listed per segment."""
        hub, north, south = self.network.segments
        assert self.network.open_connections() == [
            (hub.id, "east"),
            (hub.id, "west"),
            (north.id, "end"),
            (south.id, "end"),
        ]
        assert not self.network.is_closed

    def test_length(self):
        """Length sums the segment lengths."""
        assert self.network.length == pytest.approx(7.0 + 20.0 + 20.0)

    def test_frozen(self):
        """Networks cannot be modified."""
        with pytest.raises(dataclasses.FrozenInstanceError):
            self.network.name = "Changed"

    def test_describe(self):
        """describe() summarizes placement and links."""
        hub, north, _ = self.network.segments
        summary = north.describe()
        assert summary["type"] == "straight"
        assert summary["connections"]["start"]["connected_to"] == hub.id
        assert summary["connections"]["end"]["connected_to"] is None

    def test_empty_network(self):
        """An empty network is not closed."""
        network = RoadNetwork(id="empty", name="Empty")
        assert network.num_segments == 0
        assert network.length == 0
        assert not network.is_closed


class TestNetworkIssue:
    """Test issue records."""

    def test_str_and_severity(self):
        """Issues print their severity and code."""
        issue = NetworkIssue(IssueSeverity.ERROR, IssueCode.NO_SEGMENTS, "Network must have at least one segment")
        assert issue.is_error
        assert str(issue) == "[error] no_segments: Network must have at least one segment"

        warning = NetworkIssue(IssueSeverity.WARNING, IssueCode.FLAT_SURFACE, "corrected")
        assert not warning.is_error
