"""secstruc - Protein secondary-structure assignment from backbone coordinates."""

# --- Molecule model ---
from .protein.core import Protein, Residue

# --- Classifiers ---
from .protein.assign import assign_secondary_structure, reset_secondary_structure
from .protein.ca_geometry import classify_by_geometry
from .protein.hbonds import classify_by_hydrogen_bonds

# --- Schematic ---
from .protein.schematic import Segment, extract_segments, simplify_for_schematic

# --- Infrastructure ---
from .errors import SecstrucError, InputError, BackboneError
from .specs import METHOD_SPECS, MethodSpec, normalize_method
from . import constants

__version__ = "0.1.0"

__all__ = [
    "Protein", "Residue",
    "assign_secondary_structure", "reset_secondary_structure",
    "classify_by_geometry", "classify_by_hydrogen_bonds",
    "Segment", "extract_segments", "simplify_for_schematic",
    "SecstrucError", "InputError", "BackboneError",
    "MethodSpec", "METHOD_SPECS", "normalize_method",
    "constants",
]
