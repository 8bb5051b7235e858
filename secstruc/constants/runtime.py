"""Thresholds and defaults for the secondary-structure classifiers."""

# Sequence ordinals
# Each new chain starts at the next multiple of this stride.
CHAIN_ORDINAL_STRIDE = 100000
CHAIN_BREAK_CA_DISTANCE = 4.2           # Angstrom, consecutive CA atoms

# CA-geometry classifier
CA_BOND_MAX_DISTANCE = 4.2              # consecutive CA-CA inside a window
CA_HELIX_TORSION_RANGE = (-60.0, -46.0)  # degrees, open interval
CA_HELIX_1_4_MAX_DISTANCE = 5.9
CA_PARALLEL_MIN_SEPARATION = 6
CA_PARALLEL_MAX_DISTANCE = 5.8
CA_ANTIPARALLEL_MIN_SEPARATION = 7
CA_ANTIPARALLEL_MAX_DISTANCE = 5.7

# Hydrogen-bond classifier
HBOND_PEPTIDE_BOND_MAX_DISTANCE = 2.0   # C(i)-N(i+1), longer means chain break
HBOND_NH_BOND_LENGTH = 1.008
HBOND_CA_CUTOFF = 8.0
HBOND_MIN_RECORD_SEPARATION = 3
HBOND_ENERGY_CUTOFF = -0.5              # kcal/mol
# Kabsch & Sander: q1 * q2 * f, partial charges 0.42e / 0.20e
HBOND_ENERGY_FACTOR = 0.42 * 0.20 * 332.0
HBOND_UNBONDED_ENERGY = 1.0e10

# Bridge ladders
SHEET_PARTNER_MAX_GAP = 2

# Schematic post-processing
SCHEMATIC_MIN_RUN_LENGTH = 3
