"""DSSP-like secondary structure from backbone hydrogen-bond patterns.

Builds an ephemeral bond graph over the residues with a complete N/CA/C/O
backbone, keeps the single best hydrogen bond per C=O and per N-H, derives
n-turns and beta bridges from it and resolves those into per-residue codes:

1. 4-turn pairs -> alpha helix (overwrites)
2. bridge partner ladders -> strand (beta1 slot, then beta2 slot)
3. 5-turn pairs -> pi helix (blank residues only)
4. 3-turn pairs -> 3-10 helix (blank residues only)
5. isolated 3-10 / pi residues and isolated n-turns -> turn

Usage:
    from secstruc.protein.hbonds import classify_by_hydrogen_bonds

    if not classify_by_hydrogen_bonds(protein):
        ...  # no complete backbone, fall back to CA geometry
"""

import enum
import logging
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional

import numpy as np
import torch

from ..constants import (
    ALPHA_HELIX_START,
    BACKBONE_ATOMS,
    COIL,
    HBOND_UNBONDED_ENERGY,
    HELIX_3_10,
    HELIX_3_10_START,
    PI_HELIX,
    PI_HELIX_START,
    SHEET_PARTNER_MAX_GAP,
    STRAND,
    STRAND_START,
    TURN,
    TURN_START,
)
from ..errors import InputError
from .core import Protein, Residue, reset_secondary_structure
from .geometry import (
    as_coords,
    calculate_hbond_energies,
    place_amide_hydrogens,
    select_best_hbonds,
)

logger = logging.getLogger(__name__)


class Pattern(enum.IntFlag):
    """Per-residue hydrogen-bond pattern bits."""
    NONE = 0
    TURN3 = 0x01
    TURN4 = 0x02
    TURN5 = 0x04
    ANTIPARALLEL = 0x08
    PARALLEL = 0x10


# Ordinal gap of a C=O(i) -> N-H(i+n) bond -> turn bit
TURN_PATTERNS: Dict[int, Pattern] = {
    3: Pattern.TURN3,
    4: Pattern.TURN4,
    5: Pattern.TURN5,
}


# ============================================================================
# Bond graph
# ============================================================================

@dataclass
class HBondRecord:
    """Working record for one residue with a complete backbone."""
    residue: Residue
    co_hbond: Optional[int] = None   # Record whose N-H binds this C=O
    co_energy: float = HBOND_UNBONDED_ENERGY
    hn_hbond: Optional[int] = None   # Record whose C=O binds this N-H
    hn_energy: float = HBOND_UNBONDED_ENERGY
    pattern: Pattern = Pattern.NONE

    @property
    def ordinal(self) -> int:
        return self.residue.ordinal


class BondGraph:
    """
    Ordered sequence of HBondRecords built for a single classification run.

    Bond targets are record indices. Windowed lookups go through ``at``,
    which returns None outside the sequence.
    """

    def __init__(self, protein: Protein, records: List[HBondRecord]):
        self.protein = protein
        self.records = records

    @classmethod
    def from_protein(cls, protein: Protein) -> "BondGraph":
        """Records for amino-acid residues with resolvable N, CA, C and O."""
        records = []
        for residue in protein:
            if not residue.is_amino_acid or not residue.has_atoms(BACKBONE_ATOMS):
                continue
            if residue.ordinal is None:
                raise InputError(
                    f"Residue {residue.name} has no ordinal; call Protein.assign_ordinals() first"
                )
            records.append(HBondRecord(residue))
        return cls(protein, records)

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[HBondRecord]:
        return iter(self.records)

    def __getitem__(self, k: int) -> HBondRecord:
        return self.records[k]

    def at(self, k: int) -> Optional[HBondRecord]:
        """Record at position k, or None when k falls outside the graph."""
        if 0 <= k < len(self.records):
            return self.records[k]
        return None

    def ordinal(self, k: int) -> int:
        return self.records[k].ordinal

    def partner_gap(self, first: int, second: int) -> int:
        """Ordinal distance between two residues given by protein index."""
        residues = self.protein.residues
        return abs(residues[first].ordinal - residues[second].ordinal)

    def backbone(self) -> Dict[str, torch.Tensor]:
        """Backbone coordinates of all records as (L, 3) float64 tensors."""
        return {
            atom: as_coords(np.stack([rec.residue.atom(atom) for rec in self.records]))
            for atom in BACKBONE_ATOMS
        }

    # ------------------------------------------------------------------
    # Hydrogen bonds and turns
    # ------------------------------------------------------------------

    def compute_hbonds(self) -> int:
        """Keep the lowest-energy accepted bond per C=O and per N-H."""
        bb = self.backbone()
        h, has_h = place_amide_hydrogens(bb['N'], bb['C'], bb['O'])
        energies = calculate_hbond_energies(bb['N'], bb['CA'], bb['C'], bb['O'], h, has_h)
        co_partner, co_energy, nh_partner, nh_energy = select_best_hbonds(energies)

        n_bonds = 0
        for rec, partner, energy in zip(self.records, co_partner.tolist(), co_energy.tolist()):
            if partner >= 0:
                rec.co_hbond = partner
                rec.co_energy = energy
                n_bonds += 1
        for rec, partner, energy in zip(self.records, nh_partner.tolist(), nh_energy.tolist()):
            if partner >= 0:
                rec.hn_hbond = partner
                rec.hn_energy = energy
        return n_bonds

    def mark_turns(self) -> None:
        """Set the n-turn bit from the ordinal gap of each C=O bond."""
        for rec in self.records:
            if rec.co_hbond is None:
                continue
            gap = self.ordinal(rec.co_hbond) - rec.ordinal
            rec.pattern |= TURN_PATTERNS.get(gap, Pattern.NONE)

    # ------------------------------------------------------------------
    # Bridges
    # ------------------------------------------------------------------

    def link(self, a: int, b: int, bit: Pattern) -> bool:
        """Record a bridge between records a and b.

        Both residues get the pattern bit. The partner references are
        written only if both residues have room for each other, so
        beta1/beta2 stay symmetric. Returns True if a new link was made.
        """
        if a == b:
            return False
        first, second = self.records[a], self.records[b]
        first.pattern |= bit
        second.pattern |= bit

        res_a, res_b = first.residue, second.residue
        if _holds_partner(res_a, res_b.index) and _holds_partner(res_b, res_a.index):
            return False
        if not (_has_room(res_a, res_b.index) and _has_room(res_b, res_a.index)):
            logger.debug(
                f"Bridge {res_a.name}-{res_b.name} dropped: partner slots already taken"
            )
            return False
        _add_partner(res_a, res_b.index)
        _add_partner(res_b, res_a.index)
        return True

    def find_bridges(self) -> int:
        """Detect antiparallel and parallel bridges from the bond graph."""
        n_links = 0

        # Antiparallel: i and j bond each other
        for a, rec in enumerate(self.records):
            b = rec.co_hbond
            if b is not None and self.records[b].co_hbond == a:
                n_links += self.link(a, b, Pattern.ANTIPARALLEL)

        # Antiparallel: C=O(i-1) -> N-H(j+1) and C=O(j-1) -> N-H(i+1) bridge i and j
        for a, rec in enumerate(self.records):
            if rec.co_hbond is None:
                continue
            ahead = self.at(a + 2)
            if ahead is None or ahead.hn_hbond is None:
                continue
            k = ahead.hn_hbond
            if self.ordinal(rec.co_hbond) - self.ordinal(k) == 2:
                if self.at(k + 1) is None:
                    continue
                n_links += self.link(a + 1, k + 1, Pattern.ANTIPARALLEL)

        # Parallel: C=O(i-1) -> N-H(j) and C=O(j) -> N-H(i+1)
        for a in range(1, len(self.records) - 1):
            b = self.records[a - 1].co_hbond
            if b is None or self.records[b].co_hbond is None:
                continue
            if self.ordinal(self.records[b].co_hbond) - self.ordinal(a) == 1:
                n_links += self.link(a, b, Pattern.PARALLEL)

        # Parallel: C=O(j-1) -> N-H(i) and C=O(i) -> N-H(j+1)
        for a, rec in enumerate(self.records):
            if rec.hn_hbond is None or rec.co_hbond is None:
                continue
            if self.ordinal(rec.co_hbond) - self.ordinal(rec.hn_hbond) == 2:
                partner = rec.hn_hbond + 1
                if self.at(partner) is None:
                    continue
                n_links += self.link(a, partner, Pattern.PARALLEL)

        return n_links

    def make_sheets_coherent(self) -> int:
        """Swap beta1/beta2 where that keeps a ladder in the same slot.

        Each residue is compared with the previous record, or the one before
        that when the previous record has no partner at all.
        """
        n_swaps = 0
        for a in range(1, len(self.records)):
            residue = self.records[a].residue
            if residue.beta1 is None:
                continue
            reference = self.records[a - 1].residue
            if reference.beta1 is None and reference.beta2 is None and a > 1:
                reference = self.records[a - 2].residue
            if self._should_swap(residue, reference):
                residue.beta1, residue.beta2 = residue.beta2, residue.beta1
                n_swaps += 1
        return n_swaps

    def _should_swap(self, residue: Residue, reference: Residue) -> bool:
        if reference.beta1 is not None:
            if self.partner_gap(reference.beta1, residue.beta1) <= SHEET_PARTNER_MAX_GAP:
                return False
            return (
                residue.beta2 is not None
                and self.partner_gap(reference.beta1, residue.beta2) <= SHEET_PARTNER_MAX_GAP
            )
        if reference.beta2 is not None:
            if self.partner_gap(reference.beta2, residue.beta1) > SHEET_PARTNER_MAX_GAP:
                return False
            return (
                residue.beta2 is None
                or self.partner_gap(reference.beta2, residue.beta2) > SHEET_PARTNER_MAX_GAP
            )
        return False


def _holds_partner(residue: Residue, partner: int) -> bool:
    return partner in (residue.beta1, residue.beta2)


def _has_room(residue: Residue, partner: int) -> bool:
    return _holds_partner(residue, partner) or residue.beta1 is None or residue.beta2 is None


def _add_partner(residue: Residue, partner: int) -> None:
    if _holds_partner(residue, partner):
        return
    if residue.beta1 is None:
        residue.beta1 = partner
    else:
        residue.beta2 = partner


# ============================================================================
# Code assignment
# ============================================================================

def _assign_helix(graph: BondGraph, bit: Pattern, span: int, start_code: str, blank_only: bool) -> None:
    """Write a helix code over records i+1..i+span for every n-turn pair (i, i+1)."""
    code = start_code
    for a in range(len(graph) - 1):
        if bit in graph[a].pattern and bit in graph[a + 1].pattern:
            for slot in range(1, span + 1):
                rec = graph.at(a + slot)
                if rec is None:
                    break
                if blank_only and rec.residue.secstruc != COIL:
                    continue
                rec.residue.secstruc = code
                code = code.upper()
        else:
            code = start_code


def _assign_strands(graph: BondGraph, slot_name: str) -> None:
    """Mark ladders of consecutive bridge partners held in one partner slot.

    A residue extends the ladder of the previous partnered residue when the
    two partners are within 2 ordinals. Across one unpartnered residue the
    partners may be 3 apart; across two they must still be within 2. Three
    unpartnered residues end the scan. Codes are written only into blank or
    strand residues. The start code is not reset when a later ladder begins
    in the same scan, so it may open with 'E'.
    """
    def partner(k: int) -> Optional[int]:
        return getattr(graph[k].residue, slot_name)

    n = len(graph)
    a = 0
    while a < n:
        if partner(a) is None:
            a += 1
            continue

        code = STRAND_START
        b = a + 1
        while b < n:
            if partner(b) is not None:
                reach = 2
            else:
                b += 1
                if b >= n:
                    break
                if partner(b) is not None:
                    reach = 3
                else:
                    b += 1
                    if b >= n or partner(b) is None:
                        break
                    reach = 2

            if graph.partner_gap(partner(a), partner(b)) <= reach:
                for c in range(a, b + 1):
                    residue = graph[c].residue
                    if residue.secstruc in (COIL, STRAND_START):
                        residue.secstruc = code
                        code = STRAND
                    elif residue.secstruc == STRAND:
                        code = STRAND
            a = b
            b += 1
        a += 1


def assign_codes(graph: BondGraph) -> None:
    """Resolve turn and bridge patterns into codes, highest priority first."""
    _assign_helix(graph, Pattern.TURN4, 4, ALPHA_HELIX_START, blank_only=False)
    _assign_strands(graph, "beta1")
    _assign_strands(graph, "beta2")
    _assign_helix(graph, Pattern.TURN5, 5, PI_HELIX_START, blank_only=True)
    _assign_helix(graph, Pattern.TURN3, 3, HELIX_3_10_START, blank_only=True)


def collapse_singlets(graph: BondGraph) -> None:
    """Turn isolated 3-10/pi residues and isolated n-turns into turn runs.

    The 3-10/pi pass reads neighbour codes as already rewritten earlier in
    the same pass. The n-turn passes read the pattern bits, which are never
    rewritten.
    """
    for a, rec in enumerate(graph):
        code = rec.residue.secstruc
        if code not in (HELIX_3_10, HELIX_3_10_START, PI_HELIX, PI_HELIX_START):
            continue
        letter = code.upper()
        neighbours = (graph.at(a - 1), graph.at(a + 1))
        if all(n is None or n.residue.secstruc.upper() != letter for n in neighbours):
            rec.residue.secstruc = TURN_START

    for span in (5, 4, 3):
        bit = TURN_PATTERNS[span]
        for a, rec in enumerate(graph):
            if bit not in rec.pattern:
                continue
            neighbours = (graph.at(a - 1), graph.at(a + 1))
            if any(n is not None and bit in n.pattern for n in neighbours):
                continue
            code = TURN_START
            for slot in range(1, span + 1):
                target = graph.at(a + slot)
                if target is None:
                    break
                if target.residue.secstruc == COIL:
                    target.residue.secstruc = code
                    code = TURN


def format_bond_graph(graph: BondGraph) -> str:
    """One line per record: code, turn bits, bridge type and partner names."""
    residues = graph.protein.residues
    lines = []
    for rec in graph:
        residue = rec.residue
        turns = "".join(str(n) if bit in rec.pattern else " " for n, bit in TURN_PATTERNS.items())
        anti = "a" if Pattern.ANTIPARALLEL in rec.pattern else " "
        para = "p" if Pattern.PARALLEL in rec.pattern else " "
        partners = [residues[p].name if p is not None else "" for p in (residue.beta1, residue.beta2)]
        lines.append(
            f"{residue.name:>6s} {residue.res_type:3s} {residue.secstruc} {turns} {anti} {para} "
            f"{partners[0]:>6s} {partners[1]:>6s}"
        )
    return "\n".join(lines)


def classify_by_hydrogen_bonds(protein: Protein) -> bool:
    """Assign DSSP-like codes from backbone hydrogen bonds.

    Resets the secondary-structure fields first. Returns False when no
    residue has a complete N/CA/C/O backbone (e.g. a CA-only trace); the
    caller is expected to fall back to ``classify_by_geometry``.
    """
    reset_secondary_structure(protein)
    graph = BondGraph.from_protein(protein)
    if len(graph) == 0:
        logger.debug("No residue with a complete N/CA/C/O backbone")
        return False

    n_bonds = graph.compute_hbonds()
    graph.mark_turns()
    n_links = graph.find_bridges()
    n_swaps = graph.make_sheets_coherent()
    assign_codes(graph)
    collapse_singlets(graph)

    logger.debug(
        f"Bond graph over {len(graph)} of {len(protein)} residues: {n_bonds} C=O bonds, "
        f"{n_links} bridge links, {n_swaps} partner swaps"
    )
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("Bond graph:\n" + format_bond_graph(graph))
    return True
