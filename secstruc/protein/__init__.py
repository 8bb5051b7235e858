from .core import Protein, Residue, reset_secondary_structure
from .ca_geometry import CATrace, classify_by_geometry
from .hbonds import BondGraph, HBondRecord, Pattern, classify_by_hydrogen_bonds
from .assign import assign_secondary_structure
from .schematic import Segment, extract_segments, simplify_for_schematic
from .geometry import (
    calculate_torsion,
    calculate_window_torsions,
    calculate_hbond_energies,
    place_amide_hydrogens,
    select_best_hbonds,
)

__all__ = [
    "Protein",
    "Residue",
    "reset_secondary_structure",
    "CATrace",
    "classify_by_geometry",
    "BondGraph",
    "HBondRecord",
    "Pattern",
    "classify_by_hydrogen_bonds",
    "assign_secondary_structure",
    "Segment",
    "extract_segments",
    "simplify_for_schematic",
    "calculate_torsion",
    "calculate_window_torsions",
    "calculate_hbond_energies",
    "place_amide_hydrogens",
    "select_best_hbonds",
]
