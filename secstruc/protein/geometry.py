"""Stateless geometric computation functions for backbone classification.

Pure functions with no class dependencies. All tensors are float64 so that
threshold comparisons are reproducible across runs.
"""

import math
from typing import Tuple

import torch
import torch.nn.functional as F

from ..constants import (
    HBOND_CA_CUTOFF,
    HBOND_ENERGY_CUTOFF,
    HBOND_ENERGY_FACTOR,
    HBOND_MIN_RECORD_SEPARATION,
    HBOND_NH_BOND_LENGTH,
    HBOND_PEPTIDE_BOND_MAX_DISTANCE,
)


def as_coords(values) -> torch.Tensor:
    """Array-like of shape (N, 3) -> float64 tensor."""
    return torch.as_tensor(values, dtype=torch.float64).reshape(-1, 3)


def calculate_torsion(
    p1: torch.Tensor,
    p2: torch.Tensor,
    p3: torch.Tensor,
    p4: torch.Tensor,
) -> torch.Tensor:
    """Torsion angle (degrees) of four points, batched over leading dims.

    Measured between p2->p1 and p3->p4 viewed along p2->p3, which makes the
    CA trace of a right-handed alpha helix come out near -50 degrees.
    Degenerate (collinear) quadruples give NaN so that no threshold test
    accepts them.
    """
    v1 = p1 - p2
    v2 = p4 - p3
    axis = p3 - p2

    x1 = torch.cross(axis, v1, dim=-1)
    x2 = torch.cross(axis, v2, dim=-1)

    cos_angle = (x1 * x2).sum(-1) / (x1.norm(dim=-1) * x2.norm(dim=-1))
    angle = torch.rad2deg(torch.acos(torch.clamp(cos_angle, -1.0, 1.0)))

    ones = torch.ones_like(angle)
    sign = torch.where((v1 * x2).sum(-1) > 0.0, ones, -ones)
    return sign * angle


def calculate_window_torsions(ca: torch.Tensor) -> torch.Tensor:
    """Torsion of every 4-point window along a (L, 3) trace -> (L - 3,)."""
    if ca.shape[0] < 4:
        return ca.new_zeros(0)
    return calculate_torsion(ca[:-3], ca[1:-2], ca[2:-1], ca[3:])


def calculate_consecutive_distances(points: torch.Tensor) -> torch.Tensor:
    """Distances between consecutive rows of a (L, 3) tensor -> (L - 1,)."""
    return (points[1:] - points[:-1]).norm(dim=-1)


def place_amide_hydrogens(
    n: torch.Tensor,
    c: torch.Tensor,
    o: torch.Tensor,
) -> Tuple[torch.Tensor, torch.Tensor]:
    """Estimate backbone amide hydrogen positions.

    The N-H of residue k+1 points along C(k)->O(k) reversed when the
    peptide bond C(k)-N(k+1) is intact; across a chain break the residue's
    own carbonyl axis O(k+1) - C(k+1) is used instead. The first residue has
    no preceding carbonyl and gets no hydrogen.

    Args:
        n, c, o: Backbone atom tensors of shape (L, 3).

    Returns:
        Tuple of (hydrogens, has_hydrogen):
            - hydrogens: (L, 3), row 0 is NaN
            - has_hydrogen: (L,) bool
    """
    L = n.shape[0]
    hydrogens = torch.full_like(n, float('nan'))
    has_hydrogen = torch.zeros(L, dtype=torch.bool)
    if L < 2:
        return hydrogens, has_hydrogen

    peptide = (c[:-1] - n[1:]).norm(dim=-1) <= HBOND_PEPTIDE_BOND_MAX_DISTANCE
    direction = torch.where(
        peptide.unsqueeze(-1),
        c[:-1] - o[:-1],
        o[1:] - c[1:],
    )
    hydrogens[1:] = n[1:] + HBOND_NH_BOND_LENGTH * F.normalize(direction, dim=-1)
    has_hydrogen[1:] = True
    return hydrogens, has_hydrogen


def calculate_hbond_energies(
    n: torch.Tensor,
    ca: torch.Tensor,
    c: torch.Tensor,
    o: torch.Tensor,
    h: torch.Tensor,
    has_h: torch.Tensor,
) -> torch.Tensor:
    """Electrostatic hydrogen-bond energies between all backbone pairs.

    ``energies[a, b]`` is the energy (kcal/mol) of the bond C=O(a) ... H-N(b):

        E = f * (1/r(O,N) + 1/r(C,H) - 1/r(O,H) - 1/r(C,N))

    Pairs fewer than HBOND_MIN_RECORD_SEPARATION rows apart, pairs with CA
    atoms farther apart than HBOND_CA_CUTOFF, donors without a hydrogen and
    energies not below HBOND_ENERGY_CUTOFF are set to +inf.

    Returns:
        (L, L) float64 tensor.
    """
    L = n.shape[0]
    inf = math.inf

    r_on = torch.cdist(o, n)
    r_ch = torch.cdist(c, h)
    r_oh = torch.cdist(o, h)
    r_cn = torch.cdist(c, n)
    energies = HBOND_ENERGY_FACTOR * (1.0 / r_on + 1.0 / r_ch - 1.0 / r_oh - 1.0 / r_cn)
    energies = torch.where(torch.isnan(energies), torch.full_like(energies, inf), energies)

    idx = torch.arange(L)
    separation = (idx.unsqueeze(0) - idx.unsqueeze(1)).abs()
    valid = separation >= HBOND_MIN_RECORD_SEPARATION
    valid &= torch.cdist(ca, ca) <= HBOND_CA_CUTOFF
    valid &= has_h.unsqueeze(0)
    valid &= energies < HBOND_ENERGY_CUTOFF

    return energies.masked_fill(~valid, inf)


def select_best_hbonds(
    energies: torch.Tensor,
) -> Tuple[torch.Tensor, torch.Tensor, torch.Tensor, torch.Tensor]:
    """Best-only bond selection from an energy matrix.

    Returns:
        Tuple of (co_partner, co_energy, nh_partner, nh_energy), each (L,).
        Partners are -1 where no bond was accepted. Ties resolve to the
        lowest index.
    """
    if energies.shape[0] == 0:
        empty = torch.zeros(0, dtype=torch.long)
        return empty, energies.new_zeros(0), empty, energies.new_zeros(0)

    co_energy, co_partner = energies.min(dim=1)
    nh_energy, nh_partner = energies.min(dim=0)
    co_partner = co_partner.masked_fill(~torch.isfinite(co_energy), -1)
    nh_partner = nh_partner.masked_fill(~torch.isfinite(nh_energy), -1)
    return co_partner, co_energy, nh_partner, nh_energy
