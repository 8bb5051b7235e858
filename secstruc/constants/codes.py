"""Secondary-structure code alphabet.

Lowercase marks the first residue of a run, uppercase the interior.
"""

COIL = ' '
NON_AMINO_ACID = '-'
ALPHA_HELIX = 'H'
ALPHA_HELIX_START = 'h'
HELIX_3_10 = 'G'
HELIX_3_10_START = 'g'
PI_HELIX = 'I'
PI_HELIX_START = 'i'
STRAND = 'E'
STRAND_START = 'e'
TURN = 'T'
TURN_START = 't'

SECSTRUC_CODES = frozenset(" -HhGgIiEeTt")

TURN_CODES = frozenset("Tt")

# Reduced alphabet understood by cartoon renderers.
SCHEMATIC_KINDS = {
    ' ': "coil",
    'T': "turn",
    'H': "helix",
    'E': "strand",
}
