"""Shared test fixtures for secstruc."""

import numpy as np
import pytest

from secstruc.protein.core import Protein

from backbones import build_backbone, helix_ca_trace


@pytest.fixture
def helix_backbone() -> np.ndarray:
    """12-residue ideal alpha helix, full N/CA/C/O backbone."""
    return build_backbone(12)


@pytest.fixture
def helix_protein(helix_backbone) -> Protein:
    return Protein.from_backbone(helix_backbone, name="helix")


@pytest.fixture
def ca_helix_protein() -> Protein:
    return Protein.from_ca_trace(helix_ca_trace(8), name="ca_helix")


@pytest.fixture
def hairpin_protein() -> Protein:
    """12-residue CA-only hairpin: strands 0-4 and 7-11, 4.8 A apart."""
    ca = np.zeros((12, 3))
    for k in range(5):
        ca[k] = [3.8 * k, 0.0, 0.0]
    ca[5] = [17.8, 1.0, 1.0]
    ca[6] = [17.8, 3.8, 1.0]
    for r in range(7, 12):
        ca[r] = [3.8 * (11 - r), 4.8, 0.0]
    return Protein.from_ca_trace(ca, name="hairpin")


@pytest.fixture
def parallel_protein() -> Protein:
    """9-residue CA-only model: parallel strands 0-2 and 6-8, remote filler 3-5."""
    ca = np.zeros((9, 3))
    for k in range(3):
        ca[k] = [3.8 * k, 0.0, 0.0]
        ca[3 + k] = [50.0 + 3.8 * k, 50.0, 50.0]
        ca[6 + k] = [3.8 * k, 4.8, 0.0]
    return Protein.from_ca_trace(ca, name="parallel")
