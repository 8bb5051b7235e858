"""Reduce secondary-structure codes for cartoon-style schematics.

Cartoon renderers only know coil, turn, helix and strand. This module maps
the full code alphabet onto that reduced set, cleans up fragments too short
to draw, and splits the result into drawable segments.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from ..constants import (
    ALPHA_HELIX,
    COIL,
    NON_AMINO_ACID,
    SCHEMATIC_KINDS,
    SCHEMATIC_MIN_RUN_LENGTH,
    STRAND,
    TURN,
    TURN_CODES,
    TURN_START,
)
from ..errors import InputError
from .core import Protein, Residue

logger = logging.getLogger(__name__)

# Hydrogen-bond codes without a schematic counterpart
_HBOND_REDUCTION = {
    'i': COIL,
    'I': COIL,
    'g': 'h',
    'G': ALPHA_HELIX,
}

_SCHEMATIC_CODES = frozenset(" -HhEeTt")


@dataclass
class Segment:
    """Contiguous drawable element; first/last are residue indices."""
    kind: str
    first: int
    last: int

    @property
    def length(self) -> int:
        return self.last - self.first + 1


def simplify_for_schematic(protein: Protein, coil: bool = False, from_hbonds: bool = True) -> str:
    """
    Rewrite the codes of ``protein`` in place into the schematic alphabet.

    Args:
        protein: Classified protein
        coil: Draw turns as coil
        from_hbonds: The codes come from the hydrogen-bond method, so pi
            helices are dropped and 3-10 helices drawn as alpha helices

    Returns:
        The simplified code string
    """
    residues = protein.residues

    if from_hbonds:
        for residue in residues:
            residue.secstruc = _HBOND_REDUCTION.get(residue.secstruc, residue.secstruc)

    if coil:
        for residue in residues:
            if residue.secstruc in TURN_CODES:
                residue.secstruc = COIL
    else:
        # single coil residue between two turns
        for k in range(1, len(residues) - 1):
            if (
                residues[k].secstruc == COIL
                and residues[k - 1].secstruc == TURN
                and residues[k + 1].secstruc == TURN_START
            ):
                residues[k].secstruc = TURN
        # turn start directly after a turn
        for k in range(1, len(residues)):
            if residues[k].secstruc == TURN_START and residues[k - 1].secstruc == TURN:
                residues[k].secstruc = TURN

    n_removed = _remove_short_runs(residues)
    _absorb_isolated_residues(residues)
    logger.debug(f"Schematic simplification removed {n_removed} short helix/strand run(s)")
    return protein.secondary_structure


def _remove_short_runs(residues: List[Residue]) -> int:
    """Blank helix and strand runs shorter than SCHEMATIC_MIN_RUN_LENGTH.

    A run starts at any residue and continues while the code equals the
    uppercase of its first code, so a lowercase code always starts a new run.
    """
    n_removed = 0
    start = 0
    for k in range(1, len(residues) + 1):
        kind = residues[start].secstruc.upper()
        if k < len(residues) and residues[k].secstruc == kind:
            continue
        if kind in (ALPHA_HELIX, STRAND) and k - start < SCHEMATIC_MIN_RUN_LENGTH:
            for residue in residues[start:k]:
                residue.secstruc = COIL
            n_removed += 1
        start = k
    return n_removed


def _absorb_isolated_residues(residues: List[Residue]) -> None:
    """A residue with non-amino-acid (or no) neighbours on both sides becomes '-'."""
    for k, residue in enumerate(residues):
        if residue.secstruc == NON_AMINO_ACID:
            continue
        prev_code = residues[k - 1].secstruc if k > 0 else NON_AMINO_ACID
        next_code = residues[k + 1].secstruc if k + 1 < len(residues) else NON_AMINO_ACID
        if prev_code == NON_AMINO_ACID and next_code == NON_AMINO_ACID:
            residue.secstruc = NON_AMINO_ACID


def extract_segments(protein: Protein) -> List[Segment]:
    """
    Split simplified codes into coil, turn, helix and strand segments.

    Consecutive segments share their joint residue. Helix or strand elements
    followed directly by another helix or strand are joined by a two-residue
    turn. The end of the protein behaves like a non-amino-acid residue.

    Raises:
        InputError: If a code outside the schematic alphabet is present;
            run ``simplify_for_schematic`` first.
    """
    codes = [residue.secstruc for residue in protein]
    unknown = sorted(set(codes) - _SCHEMATIC_CODES)
    if unknown:
        raise InputError(
            f"Codes {unknown} have no schematic counterpart; call simplify_for_schematic() first"
        )

    segments: List[Segment] = []
    if not codes:
        return segments

    codes.append(NON_AMINO_ACID)
    current = codes[0]
    first: Optional[int] = 0
    prev = 0

    for k, code in enumerate(codes):
        if code != current:
            following = code.upper()
            if current == NON_AMINO_ACID:
                first = k
            elif current == COIL:
                if following == NON_AMINO_ACID:
                    segments.append(Segment(SCHEMATIC_KINDS[COIL], first, prev))
                    first = None
                elif following == TURN:
                    segments.append(Segment(SCHEMATIC_KINDS[COIL], first, prev))
                    first = prev
                else:
                    segments.append(Segment(SCHEMATIC_KINDS[COIL], first, k))
                    first = k
            elif current == TURN:
                if following == NON_AMINO_ACID:
                    segments.append(Segment(SCHEMATIC_KINDS[TURN], first, prev))
                    first = None
                else:
                    segments.append(Segment(SCHEMATIC_KINDS[TURN], first, k))
                    first = k
            elif current in (ALPHA_HELIX, STRAND):
                segments.append(Segment(SCHEMATIC_KINDS[current], first, prev))
                if following == NON_AMINO_ACID:
                    first = None
                elif following in (COIL, TURN):
                    first = prev
                else:
                    segments.append(Segment(SCHEMATIC_KINDS[TURN], prev, k))
                    first = k
            current = following
        prev = k

    return segments
