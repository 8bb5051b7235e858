"""
Protein Representation

Residues are held in an arena (``Protein.residues``) and addressed by their
stable ``index``. Bridge partners written by the classifiers are stored as
arena indices, never as object references.
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional, Sequence

import numpy as np

from ..constants import (
    ALL_AMINO_ACID_3TO1,
    AMINO_ACID_1TO3,
    BACKBONE_ATOMS,
    CHAIN_BREAK_CA_DISTANCE,
    CHAIN_ORDINAL_STRIDE,
    COIL,
    NON_AMINO_ACID,
    NON_AMINO_ACID_CODE,
)
from ..errors import InputError

logger = logging.getLogger(__name__)


def residue_code(res_type: str) -> str:
    """3-letter residue name -> 1-letter code, 'X' for non-amino-acids."""
    return ALL_AMINO_ACID_3TO1.get(res_type.strip().upper(), NON_AMINO_ACID_CODE)


@dataclass(eq=False)
class Residue:
    """Single residue with named atoms and mutable secondary-structure fields."""
    name: str               # Label, e.g. 'A12'
    res_type: str           # 3-letter residue name, e.g. 'ALA'
    atoms: Dict[str, np.ndarray] = field(default_factory=dict)
    chain_id: str = ''
    code: str = field(default=NON_AMINO_ACID_CODE, init=False)
    index: int = -1         # Position in the owning Protein
    ordinal: Optional[int] = None
    secstruc: str = COIL
    beta1: Optional[int] = None
    beta2: Optional[int] = None

    def __post_init__(self):
        self.res_type = self.res_type.strip().upper()
        self.code = residue_code(self.res_type)

        atoms: Dict[str, np.ndarray] = {}
        for atom_name, xyz in self.atoms.items():
            coords = np.asarray(xyz, dtype=np.float64)
            if coords.shape != (3,):
                raise InputError(
                    f"Atom {atom_name} of residue {self.name} has coordinate shape "
                    f"{coords.shape}, expected (3,)"
                )
            # NaN rows stand for atoms missing from the experimental model
            if not np.isfinite(coords).all():
                continue
            atoms[atom_name.strip().upper()] = coords
        self.atoms = atoms

    @property
    def is_amino_acid(self) -> bool:
        return self.code != NON_AMINO_ACID_CODE

    def atom(self, name: str) -> Optional[np.ndarray]:
        """Coordinates of the named atom, or None if it is missing."""
        return self.atoms.get(name)

    def has_atoms(self, names: Iterable[str]) -> bool:
        return all(name in self.atoms for name in names)

    def reset_secondary_structure(self) -> None:
        self.secstruc = COIL if self.is_amino_acid else NON_AMINO_ACID
        self.beta1 = None
        self.beta2 = None


class Protein:
    """
    Ordered residue sequence of one molecule.

    Ordinals are assigned on construction unless ``assign_ordinals`` is
    False, in which case the caller is expected to have set them.
    """

    def __init__(
        self,
        residues: Iterable[Residue],
        name: Optional[str] = None,
        assign_ordinals: bool = True,
    ):
        self.name = name
        self.residues: List[Residue] = list(residues)
        for index, residue in enumerate(self.residues):
            residue.index = index
        if assign_ordinals:
            self.assign_ordinals()

    @classmethod
    def from_backbone(
        cls,
        coords: np.ndarray,
        sequence: Optional[str] = None,
        chain_id: str = "A",
        name: Optional[str] = None,
    ) -> "Protein":
        """Build from an (L, 4, 3) array of N, CA, C, O coordinates.

        NaN entries mark missing atoms.
        """
        coords = np.asarray(coords, dtype=np.float64)
        if coords.ndim != 3 or coords.shape[1:] != (len(BACKBONE_ATOMS), 3):
            raise InputError(f"Backbone coordinates must have shape (L, 4, 3), got {coords.shape}")
        res_types = _sequence_to_types(sequence, coords.shape[0])
        residues = [
            Residue(
                name=f"{chain_id}{i + 1}",
                res_type=res_type,
                atoms={atom: coords[i, k] for k, atom in enumerate(BACKBONE_ATOMS)},
                chain_id=chain_id,
            )
            for i, res_type in enumerate(res_types)
        ]
        return cls(residues, name=name)

    @classmethod
    def from_ca_trace(
        cls,
        ca: np.ndarray,
        sequence: Optional[str] = None,
        chain_id: str = "A",
        name: Optional[str] = None,
    ) -> "Protein":
        """Build a CA-only model from an (L, 3) array."""
        ca = np.asarray(ca, dtype=np.float64)
        if ca.ndim != 2 or ca.shape[1] != 3:
            raise InputError(f"CA coordinates must have shape (L, 3), got {ca.shape}")
        res_types = _sequence_to_types(sequence, ca.shape[0])
        residues = [
            Residue(
                name=f"{chain_id}{i + 1}",
                res_type=res_type,
                atoms={"CA": ca[i]},
                chain_id=chain_id,
            )
            for i, res_type in enumerate(res_types)
        ]
        return cls(residues, name=name)

    def assign_ordinals(self) -> None:
        """Number amino-acid residues with a CA consecutively along each chain.

        A chain ends at a chain-id change, at any residue without a CA, or
        where consecutive CA atoms are farther apart than
        CHAIN_BREAK_CA_DISTANCE. Each new chain starts at the next multiple
        of CHAIN_ORDINAL_STRIDE, so residues of different chains are never
        sequence neighbours.
        """
        next_ordinal = 0
        started = False
        in_chain = False
        prev_ca: Optional[np.ndarray] = None
        prev_chain: Optional[str] = None
        n_chains = 0

        for residue in self.residues:
            ca = residue.atom("CA") if residue.is_amino_acid else None
            if ca is None:
                residue.ordinal = None
                in_chain = False
                continue

            continues = (
                in_chain
                and residue.chain_id == prev_chain
                and float(np.linalg.norm(ca - prev_ca)) <= CHAIN_BREAK_CA_DISTANCE
            )
            if not continues:
                if started:
                    next_ordinal = (next_ordinal // CHAIN_ORDINAL_STRIDE + 1) * CHAIN_ORDINAL_STRIDE
                started = True
                n_chains += 1

            residue.ordinal = next_ordinal
            next_ordinal += 1
            prev_ca = ca
            prev_chain = residue.chain_id
            in_chain = True

        logger.debug(f"Assigned ordinals over {n_chains} chain segment(s)")

    @property
    def sequence(self) -> str:
        return "".join(residue.code for residue in self.residues)

    @property
    def secondary_structure(self) -> str:
        """Secondary-structure codes of all residues as one string."""
        return "".join(residue.secstruc for residue in self.residues)

    def partners(self, index: int) -> List[Residue]:
        """Bridge partners (beta1 first) of the residue at ``index``."""
        residue = self[index]
        return [self.residues[p] for p in (residue.beta1, residue.beta2) if p is not None]

    def __getitem__(self, index: int) -> Residue:
        if not -len(self.residues) <= index < len(self.residues):
            raise InputError(f"Residue index {index} out of range for {len(self.residues)} residues")
        return self.residues[index]

    def __len__(self) -> int:
        return len(self.residues)

    def __iter__(self) -> Iterator[Residue]:
        return iter(self.residues)

    def __repr__(self) -> str:
        label = f"{self.name!r}, " if self.name else ""
        return f"Protein({label}{len(self.residues)} residues)"


def _sequence_to_types(sequence: Optional[str], length: int) -> Sequence[str]:
    if sequence is None:
        return ["ALA"] * length
    if len(sequence) != length:
        raise InputError(f"Sequence length {len(sequence)} does not match {length} residues")
    return [AMINO_ACID_1TO3.get(letter.upper(), "UNK") for letter in sequence]


def reset_secondary_structure(protein: Protein) -> None:
    """Blank the code of amino-acid residues, '-' for the rest; clear partners."""
    for residue in protein:
        residue.reset_secondary_structure()
