"""Method specs for stable classification request contracts."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from .errors import InputError


@dataclass(frozen=True)
class MethodSpec:
    name: str
    aliases: tuple[str, ...]
    needs_full_backbone: bool


HBONDS_SPEC = MethodSpec(
    name="hbonds",
    aliases=("hbonds", "hbond", "hb", "dssp"),
    needs_full_backbone=True,
)

CA_SPEC = MethodSpec(
    name="ca",
    aliases=("ca", "ca_geom", "geometry"),
    needs_full_backbone=False,
)

METHOD_SPECS: Mapping[str, MethodSpec] = {
    "hbonds": HBONDS_SPEC,
    "ca": CA_SPEC,
}

DEFAULT_METHOD = "hbonds"


def normalize_method(method: str | None) -> str:
    """Map a user-supplied method name onto a key of ``METHOD_SPECS``."""
    if method is None:
        return DEFAULT_METHOD
    key = str(method).strip().lower()
    for spec in METHOD_SPECS.values():
        if key in spec.aliases:
            return spec.name
    allowed = [alias for spec in METHOD_SPECS.values() for alias in spec.aliases]
    raise InputError(f"Unsupported secondary-structure method: {method!r}. Allowed: {allowed}")
