"""
Amino Acid and Residue Constants.

Residue-name tables used to decide which residues are amino acids and to
derive their one-letter codes.
"""

# =============================================================================
# Amino Acid Mappings
# =============================================================================

# Standard 20 amino acids: 3-letter to 1-letter
AMINO_ACID_3TO1 = {
    'ALA': 'A', 'ARG': 'R', 'ASN': 'N', 'ASP': 'D', 'CYS': 'C',
    'GLN': 'Q', 'GLU': 'E', 'GLY': 'G', 'HIS': 'H', 'ILE': 'I',
    'LEU': 'L', 'LYS': 'K', 'MET': 'M', 'PHE': 'F', 'PRO': 'P',
    'SER': 'S', 'THR': 'T', 'TRP': 'W', 'TYR': 'Y', 'VAL': 'V',
}

# Reverse mapping: 1-letter to 3-letter
AMINO_ACID_1TO3 = {v: k for k, v in AMINO_ACID_3TO1.items()}

# Ambiguous and legacy residue names still found in older PDB entries
NONSTANDARD_AMINO_ACID_3TO1 = {
    'ASX': 'B', 'GLX': 'Z',
    'CPR': 'P',
    'CSH': 'C', 'CSM': 'C', 'CYH': 'C',
    'TRY': 'W',
}

# Combined lookup used for residue codes
ALL_AMINO_ACID_3TO1 = {**AMINO_ACID_3TO1, **NONSTANDARD_AMINO_ACID_3TO1}

# One-letter code of anything that is not an amino acid
NON_AMINO_ACID_CODE = 'X'

# Backbone atoms required by the hydrogen-bond classifier, in array order
BACKBONE_ATOMS = ('N', 'CA', 'C', 'O')
