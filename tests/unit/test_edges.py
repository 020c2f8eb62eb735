"""
Unit tests for edge kind decoding.

Tests cover:
- Self-loop edges decode as relation edges
- Other edges decode as attribute edges
- Encoding back to table pairs
"""

from smeltdb.codec.edges import (
    AttributeEdge,
    RelationEdge,
    attribute_edges,
    decode_edge,
    decode_edges,
    relation_edge_map,
    relation_edges,
)


class TestDecodeEdge:
    """Tests for decode_edge."""

    def test_self_loop_is_relation(self):
        """Equal endpoints mean relation membership."""
        assert decode_edge("a", "a") == RelationEdge(member_id="a")

    def test_distinct_endpoints_is_attribute(self):
        """Distinct endpoints mean key -> value."""
        assert decode_edge("k", "v") == AttributeEdge(key_id="k", value_id="v")

    def test_to_pair(self):
        """Variants encode back to table pairs."""
        assert AttributeEdge("k", "v").to_pair() == ("k", "v")
        assert RelationEdge("m").to_pair() == ("m", "m")


class TestDecodeEdges:
    """Tests for edge set decoding."""

    EDGES = {"k1": "v1", "r1": "r1", "k2": "v2"}

    def test_order_preserved(self):
        """Decoding follows the edge set's order."""
        assert list(decode_edges(self.EDGES)) == [
            AttributeEdge("k1", "v1"),
            RelationEdge("r1"),
            AttributeEdge("k2", "v2"),
        ]

    def test_split_by_kind(self):
        """Filters return only their kind."""
        assert [e.key_id for e in attribute_edges(self.EDGES)] == ["k1", "k2"]
        assert [e.member_id for e in relation_edges(self.EDGES)] == ["r1"]

    def test_relation_edge_map(self):
        """Members map to themselves."""
        assert relation_edge_map(["a", "b"]) == {"a": "a", "b": "b"}
        assert relation_edge_map([]) == {}
