"""
Secondary-structure assignment entry point.

Usage:
    from secstruc import Protein, assign_secondary_structure

    protein = Protein.from_backbone(coords)         # (L, 4, 3) N/CA/C/O
    codes = assign_secondary_structure(protein)     # e.g. ' hHHHHHHHH  '
    codes = assign_secondary_structure(protein, method="ca")
"""

import logging
from typing import Optional

from ..errors import BackboneError
from ..specs import DEFAULT_METHOD, METHOD_SPECS, normalize_method
from .ca_geometry import classify_by_geometry
from .core import Protein, reset_secondary_structure
from .hbonds import classify_by_hydrogen_bonds

logger = logging.getLogger(__name__)

__all__ = [
    "assign_secondary_structure",
    "reset_secondary_structure",
]


def assign_secondary_structure(
    protein: Protein,
    method: Optional[str] = DEFAULT_METHOD,
    fallback: bool = True,
) -> str:
    """
    Write secondary-structure codes and bridge partners into the residues.

    Args:
        protein: Protein whose residues are classified in place
        method: 'hbonds' (default) or 'ca', or one of their aliases
        fallback: Use the CA-geometry method when the hydrogen-bond method
            finds no complete backbone. If False, raise BackboneError instead.

    Returns:
        The code string, one character per residue
    """
    spec = METHOD_SPECS[normalize_method(method)]

    if not spec.needs_full_backbone:
        classify_by_geometry(protein)
    elif not classify_by_hydrogen_bonds(protein):
        if not fallback:
            raise BackboneError(
                f"No residue of {protein!r} has a complete N/CA/C/O backbone; "
                "hydrogen-bond classification is not possible"
            )
        logger.warning(
            f"No complete N/CA/C/O backbone in {protein!r}, falling back to CA geometry"
        )
        classify_by_geometry(protein)

    return protein.secondary_structure
