"""Unit tests for board generation: terrain, tokens, robber and ports."""

from __future__ import annotations

import collections
import random
import unittest

from settlers import board_generator
from settlers.errors import BoardGenerationError
from settlers.models.board import PortType, Road, TerrainType


def _generate(seed: int = 42):
    return board_generator.generate_board(random.Random(seed))


class TestAssignResources(unittest.TestCase):
    """Tests for terrain and number-token placement."""

    def test_terrain_distribution(self) -> None:
        board, _ = _generate()
        counts = collections.Counter(h.terrain for h in board.hexes)
        self.assertEqual(counts[TerrainType.HILLS], 3)
        self.assertEqual(counts[TerrainType.FOREST], 4)
        self.assertEqual(counts[TerrainType.PASTURE], 4)
        self.assertEqual(counts[TerrainType.FIELDS], 4)
        self.assertEqual(counts[TerrainType.MOUNTAINS], 3)
        self.assertEqual(counts[TerrainType.DESERT], 1)

    def test_number_tokens(self) -> None:
        """The 18 tokens cover every non-desert hex and 7 never appears."""
        board, _ = _generate()
        tokens = sorted(h.number_token for h in board.hexes if h.number_token)
        self.assertEqual(
            tokens, [2, 3, 3, 4, 4, 5, 5, 6, 6, 8, 8, 9, 9, 10, 10, 11, 11, 12]
        )

    def test_desert_has_robber_and_no_token(self) -> None:
        board, _ = _generate()
        desert = next(h for h in board.hexes if h.terrain == TerrainType.DESERT)
        self.assertIsNone(desert.number_token)
        self.assertIsNone(desert.resource)
        self.assertTrue(desert.has_robber)
        self.assertEqual(board.robber_hex_id, desert.hex_id)

    def test_exactly_one_robber(self) -> None:
        for seed in range(5):
            board, _ = _generate(seed)
            self.assertEqual(sum(h.has_robber for h in board.hexes), 1)

    def test_same_seed_same_board(self) -> None:
        a, _ = _generate(7)
        b, _ = _generate(7)
        self.assertEqual(a, b)

    def test_different_seeds_differ(self) -> None:
        a, _ = _generate(1)
        b, _ = _generate(2)
        self.assertNotEqual(
            [h.terrain for h in a.hexes], [h.terrain for h in b.hexes]
        )


class TestAssignPorts(unittest.TestCase):
    """Tests for port placement around the coast."""

    def test_nine_ports_with_standard_mix(self) -> None:
        board, _ = _generate()
        ports = [e.port for e in board.edges if e.port is not None]
        self.assertEqual(len(ports), 9)
        counts = collections.Counter(ports)
        self.assertEqual(counts[PortType.GENERIC], 4)
        for port_type in PortType:
            if port_type != PortType.GENERIC:
                self.assertEqual(counts[port_type], 1)

    def test_ports_only_on_border_edges(self) -> None:
        board, _ = _generate()
        for edge in board.edges:
            if edge.port is not None:
                self.assertTrue(edge.is_border)

    def test_positions_fixed_types_shuffled(self) -> None:
        """Port edges depend only on the topology; only types vary by seed."""
        positions = set()
        layouts = set()
        for seed in range(6):
            board, _ = _generate(seed)
            port_edges = tuple(e.edge_id for e in board.edges if e.port is not None)
            positions.add(port_edges)
            layouts.add(tuple(board.edges[eid].port for eid in port_edges))
        self.assertEqual(len(positions), 1)
        self.assertGreater(len(layouts), 1)

    def test_positions_evenly_spaced(self) -> None:
        """With 30 border edges the ports sit every third edge clockwise."""
        board, topo = _generate()
        ordered = sorted(
            topo.border_edge_ids, key=lambda eid: (topo.clockwise_angle(eid), eid)
        )
        expected = {ordered[i * 3] for i in range(9)}
        actual = {e.edge_id for e in board.edges if e.port is not None}
        self.assertEqual(actual, expected)

    def test_reassigning_raises(self) -> None:
        board, topo = _generate()
        with self.assertRaises(BoardGenerationError):
            board_generator.assign_ports(board, topo, random.Random(0))

    def test_too_few_free_border_edges_raises(self) -> None:
        board, topo = _generate()
        for edge in board.edges:
            edge.port = None
        for eid in topo.border_edge_ids[8:]:
            board.edges[eid].road = Road(player_index=0)
        with self.assertRaises(BoardGenerationError):
            board_generator.assign_ports(board, topo, random.Random(0))

    def test_roads_exclude_edges_from_ports(self) -> None:
        board, topo = _generate()
        for edge in board.edges:
            edge.port = None
        blocked = topo.border_edge_ids[:3]
        for eid in blocked:
            board.edges[eid].road = Road(player_index=1)
        board_generator.assign_ports(board, topo, random.Random(0))
        for eid in blocked:
            self.assertIsNone(board.edges[eid].port)
        self.assertEqual(sum(e.port is not None for e in board.edges), 9)


if __name__ == '__main__':
    unittest.main()
