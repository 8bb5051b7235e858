"""Constants for secstruc."""

from .amino_acids import (
    ALL_AMINO_ACID_3TO1,
    AMINO_ACID_1TO3,
    AMINO_ACID_3TO1,
    BACKBONE_ATOMS,
    NON_AMINO_ACID_CODE,
    NONSTANDARD_AMINO_ACID_3TO1,
)
from .codes import *  # noqa: F401,F403
from .runtime import *  # noqa: F401,F403
