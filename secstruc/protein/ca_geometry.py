"""Secondary structure from CA geometry alone.

Works on CA-only traces: helices from CA pseudo-torsions, strands from
close CA-CA contacts between two 3-residue windows.
"""

import logging
from typing import List

import numpy as np
import torch

from ..constants import (
    ALPHA_HELIX,
    CA_ANTIPARALLEL_MAX_DISTANCE,
    CA_ANTIPARALLEL_MIN_SEPARATION,
    CA_BOND_MAX_DISTANCE,
    CA_HELIX_1_4_MAX_DISTANCE,
    CA_HELIX_TORSION_RANGE,
    CA_PARALLEL_MAX_DISTANCE,
    CA_PARALLEL_MIN_SEPARATION,
    STRAND,
)
from .core import Protein, Residue, reset_secondary_structure
from .geometry import as_coords, calculate_consecutive_distances, calculate_window_torsions

logger = logging.getLogger(__name__)


class CATrace:
    """CA positions of the eligible residues, in chain order."""

    def __init__(self, residues: List[Residue]):
        self.residues = residues
        if residues:
            self.ca = as_coords(np.stack([residue.atom("CA") for residue in residues]))
        else:
            self.ca = torch.zeros(0, 3, dtype=torch.float64)
        self.bonds: List[float] = calculate_consecutive_distances(self.ca).tolist()
        self.distances: List[List[float]] = torch.cdist(self.ca, self.ca).tolist()

    @classmethod
    def from_protein(cls, protein: Protein) -> "CATrace":
        eligible = [
            residue for residue in protein
            if residue.is_amino_acid and residue.atom("CA") is not None
        ]
        return cls(eligible)

    def __len__(self) -> int:
        return len(self.residues)

    def is_helix(self, slot: int) -> bool:
        return self.residues[slot].secstruc == ALPHA_HELIX

    def is_chained(self, first: int, last: int) -> bool:
        """True if every consecutive CA-CA step between the slots is short."""
        lo, hi = min(first, last), max(first, last)
        return all(self.bonds[k] <= CA_BOND_MAX_DISTANCE for k in range(lo, hi))

    def mark(self, slots, code: str) -> None:
        for slot in slots:
            self.residues[slot].secstruc = code


def mark_helices(trace: CATrace) -> int:
    """Mark every 4-residue window with helical CA torsion and 1-4 distance."""
    if len(trace) < 4:
        return 0
    torsions = calculate_window_torsions(trace.ca).tolist()
    lo, hi = CA_HELIX_TORSION_RANGE
    n_windows = 0
    for slot in range(len(trace) - 3):
        if not trace.is_chained(slot, slot + 3):
            continue
        angle = torsions[slot]
        if lo < angle < hi and trace.distances[slot][slot + 3] < CA_HELIX_1_4_MAX_DISTANCE:
            trace.mark(range(slot, slot + 4), ALPHA_HELIX)
            n_windows += 1
    return n_windows


def _strand_window_ok(trace: CATrace, slots) -> bool:
    return not any(trace.is_helix(slot) for slot in slots) and trace.is_chained(slots[0], slots[-1])


def mark_parallel_strands(trace: CATrace) -> int:
    """Mark pairs of 3-residue windows running in the same direction."""
    n_pairs = 0
    for slot in range(len(trace) - 2):
        first = (slot, slot + 1, slot + 2)
        if not _strand_window_ok(trace, first):
            continue
        for slot2 in range(slot + CA_PARALLEL_MIN_SEPARATION, len(trace) - 2):
            second = (slot2, slot2 + 1, slot2 + 2)
            if not _strand_window_ok(trace, second):
                continue
            if all(
                trace.distances[a][b] <= CA_PARALLEL_MAX_DISTANCE
                for a, b in zip(first, second)
            ):
                trace.mark(first + second, STRAND)
                n_pairs += 1
    return n_pairs


def mark_antiparallel_strands(trace: CATrace) -> int:
    """Mark pairs of 3-residue windows running in opposite directions."""
    n_pairs = 0
    for slot in range(len(trace) - 2):
        first = (slot, slot + 1, slot + 2)
        if not _strand_window_ok(trace, first):
            continue
        for slot2 in range(slot + CA_ANTIPARALLEL_MIN_SEPARATION, len(trace)):
            second = (slot2, slot2 - 1, slot2 - 2)
            if not _strand_window_ok(trace, second):
                continue
            if all(
                trace.distances[a][b] <= CA_ANTIPARALLEL_MAX_DISTANCE
                for a, b in zip(first, second)
            ):
                trace.mark(first + second, STRAND)
                n_pairs += 1
    return n_pairs


def classify_by_geometry(protein: Protein) -> None:
    """Assign 'H' and 'E' codes from inter-CA distances and CA torsions.

    Resets the secondary-structure fields first. Residues without a CA or
    that are not amino acids are skipped; windows run across such gaps.
    Helix residues are never overwritten by the strand tests.
    """
    reset_secondary_structure(protein)
    trace = CATrace.from_protein(protein)

    n_helix = mark_helices(trace)
    n_parallel = mark_parallel_strands(trace)
    n_antiparallel = mark_antiparallel_strands(trace)
    logger.debug(
        f"CA geometry over {len(trace)} residues: {n_helix} helical windows, "
        f"{n_parallel} parallel and {n_antiparallel} antiparallel strand pairs"
    )
