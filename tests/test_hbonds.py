"""Tests for secstruc/protein/hbonds.py: hydrogen-bond classification."""

import logging

import numpy as np
import pytest

from secstruc.constants import HBOND_UNBONDED_ENERGY, SECSTRUC_CODES
from secstruc.errors import InputError
from secstruc.protein.core import Protein
from secstruc.protein.hbonds import (
    BondGraph,
    HBondRecord,
    Pattern,
    assign_codes,
    classify_by_hydrogen_bonds,
    collapse_singlets,
    format_bond_graph,
)

from backbones import add_bond, build_backbone, helix_ca_trace, make_graph, straight_ca_trace


def run_passes(graph):
    """Everything after bond selection, in classifier order."""
    graph.mark_turns()
    graph.find_bridges()
    graph.make_sheets_coherent()
    assign_codes(graph)
    collapse_singlets(graph)
    return graph.protein.secondary_structure


def assert_symmetric_partners(protein):
    for residue in protein:
        for partner in (residue.beta1, residue.beta2):
            if partner is not None:
                assert residue.index in (protein[partner].beta1, protein[partner].beta2)


class TestBondGraph:
    def test_only_complete_backbones(self):
        coords = build_backbone(6)
        coords[2, 3] = np.nan
        protein = Protein.from_backbone(coords, sequence="AAAAAJ")
        graph = BondGraph.from_protein(protein)
        assert [rec.residue.index for rec in graph] == [0, 1, 3, 4]

    def test_at_bounds(self):
        graph = make_graph(4)
        assert graph.at(0) is graph[0]
        assert graph.at(3) is graph[3]
        assert graph.at(-1) is None
        assert graph.at(4) is None

    def test_missing_ordinal(self, helix_backbone):
        protein = Protein.from_backbone(helix_backbone)
        protein[3].ordinal = None
        with pytest.raises(InputError, match="ordinal"):
            BondGraph.from_protein(protein)

    def test_unbonded_defaults(self):
        rec = HBondRecord(make_graph(1)[0].residue)
        assert rec.co_hbond is None and rec.hn_hbond is None
        assert rec.co_energy == HBOND_UNBONDED_ENERGY
        assert rec.pattern == Pattern.NONE


class TestHelixBonds:
    def test_i_to_i_plus_4(self, helix_protein):
        graph = BondGraph.from_protein(helix_protein)
        graph.compute_hbonds()
        for i in range(8):
            assert graph[i].co_hbond == i + 4
            assert graph[i].co_energy < -1.0
        for b in range(4, 12):
            assert graph[b].hn_hbond == b - 4

    def test_first_residue_not_a_donor(self, helix_protein):
        graph = BondGraph.from_protein(helix_protein)
        graph.compute_hbonds()
        assert graph[0].hn_hbond is None
        assert all(rec.co_hbond != 0 for rec in graph)

    def test_helix_codes(self, helix_protein):
        assert classify_by_hydrogen_bonds(helix_protein)
        codes = helix_protein.secondary_structure
        assert codes[:11] == " hHHHHHHHHH"
        assert codes[11] in " t"

    def test_deterministic(self, helix_backbone):
        first = Protein.from_backbone(helix_backbone)
        second = Protein.from_backbone(helix_backbone)
        classify_by_hydrogen_bonds(first)
        classify_by_hydrogen_bonds(second)
        classify_by_hydrogen_bonds(second)
        assert first.secondary_structure == second.secondary_structure

    def test_code_alphabet(self, helix_protein):
        classify_by_hydrogen_bonds(helix_protein)
        assert set(helix_protein.secondary_structure) <= SECSTRUC_CODES


class TestTurnBits:
    def test_gap_sets_matching_bit(self):
        graph = make_graph(12)
        add_bond(graph, 0, 2)
        add_bond(graph, 1, 4)
        add_bond(graph, 2, 6)
        add_bond(graph, 3, 8)
        add_bond(graph, 4, 10)
        graph.mark_turns()
        assert graph[0].pattern == Pattern.NONE
        assert graph[1].pattern == Pattern.TURN3
        assert graph[2].pattern == Pattern.TURN4
        assert graph[3].pattern == Pattern.TURN5
        assert graph[4].pattern == Pattern.NONE

    def test_no_turn_across_chains(self):
        ca = straight_ca_trace(10)
        ca[5:] += np.array([10.0, 0.0, 0.0])
        protein = Protein.from_ca_trace(ca)
        graph = BondGraph(protein, [HBondRecord(residue) for residue in protein])
        add_bond(graph, 3, 6)
        graph.mark_turns()
        assert graph[3].pattern == Pattern.NONE


class TestHelixPasses:
    def test_alpha_helix_from_turn_pair(self):
        graph = make_graph(10)
        add_bond(graph, 1, 5)
        add_bond(graph, 2, 6)
        assert run_passes(graph) == "  hHHH    "

    def test_pi_helix_fills_blanks_only(self):
        graph = make_graph(12)
        add_bond(graph, 1, 5)
        add_bond(graph, 2, 6)
        add_bond(graph, 3, 8)
        add_bond(graph, 4, 9)
        assert run_passes(graph) == "  hHHHiII   "

    def test_3_10_helix(self):
        graph = make_graph(10)
        add_bond(graph, 2, 5)
        add_bond(graph, 3, 6)
        assert run_passes(graph) == "   gGG    "


class TestSinglets:
    @pytest.mark.parametrize("co, nh, expected", [
        (2, 5, "   tTT    "),
        (2, 6, "   tTTT   "),
        (1, 6, "  tTTTT   "),
    ])
    def test_isolated_turn(self, co, nh, expected):
        graph = make_graph(10)
        add_bond(graph, co, nh)
        assert run_passes(graph) == expected

    def test_isolated_helix_residue(self):
        graph = make_graph(6)
        for residue, code in zip(graph.protein, " G iI "):
            residue.secstruc = code
        collapse_singlets(graph)
        assert graph.protein.secondary_structure == " t iI "

    def test_reads_rewritten_neighbour(self):
        graph = make_graph(4)
        for residue, code in zip(graph.protein, " IG "):
            residue.secstruc = code
        collapse_singlets(graph)
        assert graph.protein.secondary_structure == " tt "


class TestBridges:
    def test_antiparallel_ladder(self):
        graph = make_graph(14)
        add_bond(graph, 2, 12)
        add_bond(graph, 12, 2)
        add_bond(graph, 4, 10)
        add_bond(graph, 10, 4)
        codes = run_passes(graph)

        residues = graph.protein.residues
        assert (residues[2].beta1, residues[3].beta1, residues[4].beta1) == (12, 11, 10)
        assert (residues[12].beta1, residues[11].beta1, residues[10].beta1) == (2, 3, 4)
        assert_symmetric_partners(graph.protein)
        assert Pattern.ANTIPARALLEL in graph[3].pattern
        assert codes == "  eEE     eEE "

    def test_parallel_ladder(self):
        graph = make_graph(14)
        for i, j in ((3, 9), (4, 10), (5, 11)):
            add_bond(graph, i - 1, j)
            add_bond(graph, j, i + 1)
        codes = run_passes(graph)

        residues = graph.protein.residues
        assert [residues[i].beta1 for i in (3, 4, 5)] == [9, 10, 11]
        assert_symmetric_partners(graph.protein)
        assert Pattern.PARALLEL in graph[9].pattern
        assert Pattern.ANTIPARALLEL not in graph[9].pattern
        assert codes == "   eEE   eEE  "

    def test_lone_bridge_is_not_a_strand(self):
        graph = make_graph(14)
        add_bond(graph, 2, 9)
        add_bond(graph, 9, 4)
        codes = run_passes(graph)
        assert graph.protein[3].beta1 == 9
        assert graph.protein[9].beta1 == 3
        assert codes == " " * 14

    def test_third_partner_refused(self):
        graph = make_graph(14)
        assert graph.link(5, 1, Pattern.ANTIPARALLEL)
        assert graph.link(5, 9, Pattern.ANTIPARALLEL)
        assert not graph.link(5, 12, Pattern.PARALLEL)
        assert not graph.link(5, 1, Pattern.ANTIPARALLEL)

        residues = graph.protein.residues
        assert (residues[5].beta1, residues[5].beta2) == (1, 9)
        assert residues[12].beta1 is None
        assert Pattern.PARALLEL in graph[12].pattern
        assert_symmetric_partners(graph.protein)


class TestSheetCoherence:
    def test_swap_to_follow_previous(self):
        graph = make_graph(20)
        residues = graph.protein.residues
        residues[5].beta1 = 15
        residues[6].beta1, residues[6].beta2 = 2, 14
        assert graph.make_sheets_coherent() == 1
        assert (residues[6].beta1, residues[6].beta2) == (14, 2)

    def test_skips_unpartnered_previous(self):
        graph = make_graph(20)
        residues = graph.protein.residues
        residues[4].beta1 = 15
        residues[6].beta1, residues[6].beta2 = 2, 14
        graph.make_sheets_coherent()
        assert (residues[6].beta1, residues[6].beta2) == (14, 2)

    def test_follow_beta2_ladder(self):
        graph = make_graph(20)
        residues = graph.protein.residues
        residues[5].beta2 = 15
        residues[6].beta1 = 14
        graph.make_sheets_coherent()
        assert (residues[6].beta1, residues[6].beta2) == (None, 14)

    def test_consistent_ladder_unchanged(self):
        graph = make_graph(20)
        residues = graph.protein.residues
        residues[5].beta1 = 15
        residues[6].beta1, residues[6].beta2 = 14, 2
        assert graph.make_sheets_coherent() == 0


class TestStrandPass:
    def test_one_gap_allows_three(self):
        graph = make_graph(20)
        residues = graph.protein.residues
        residues[2].beta1 = 15
        residues[4].beta1 = 13
        assign_codes(graph)
        assert graph.protein.secondary_structure[2:5] == "eEE"

    def test_one_gap_too_far(self):
        graph = make_graph(20)
        residues = graph.protein.residues
        residues[2].beta1 = 15
        residues[4].beta1 = 11
        assign_codes(graph)
        assert graph.protein.secondary_structure[:6] == " " * 6

    def test_two_gaps_bridged(self):
        graph = make_graph(20)
        residues = graph.protein.residues
        residues[2].beta1 = 15
        residues[5].beta1 = 14
        assign_codes(graph)
        assert graph.protein.secondary_structure[:7] == "  eEEE "

    def test_three_gaps_break_ladder(self):
        graph = make_graph(20)
        residues = graph.protein.residues
        residues[2].beta1 = 15
        residues[6].beta1 = 14
        assign_codes(graph)
        assert graph.protein.secondary_structure[:8] == " " * 8

    def test_later_ladder_in_same_scan_keeps_upper_case(self):
        graph = make_graph(20)
        residues = graph.protein.residues
        for k, partner in zip(range(2, 7), (15, 14, 13, 3, 2)):
            residues[k].beta1 = partner
        assign_codes(graph)
        assert graph.protein.secondary_structure[:8] == "  eEEEE "


class TestClassifier:
    def test_ca_only_fails(self):
        protein = Protein.from_ca_trace(helix_ca_trace(8), sequence="AAAAAAAJ")
        for residue in protein:
            residue.secstruc = "H"
        assert not classify_by_hydrogen_bonds(protein)
        assert protein.secondary_structure == "       -"

    def test_debug_table(self, helix_protein, caplog):
        with caplog.at_level(logging.DEBUG, logger="secstruc.protein.hbonds"):
            classify_by_hydrogen_bonds(helix_protein)
        assert "Bond graph:" in caplog.text

    def test_format_bond_graph(self):
        graph = make_graph(10)
        add_bond(graph, 2, 6)
        run_passes(graph)
        lines = format_bond_graph(graph).splitlines()
        assert len(lines) == 10
        assert lines[2].split()[:3] == ["A3", "ALA", "4"]
