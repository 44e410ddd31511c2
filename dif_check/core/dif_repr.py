"""
DIF representation — one closed union over every supported DIF format.

Each arm owns the metadata returned by its reader.  Operations dispatch
with an ``isinstance`` chain ending in ``assert_never`` so that a new arm
without a matching branch is reported by the type checker.

Adding a format:
  1. add a ``DifType`` member,
  2. add a reader under ``core/`` and a frozen arm dataclass here,
  3. extend ``DifRepr`` and every dispatch site (here and in
     ``policy/verdict.py``).
"""
from dataclasses import dataclass
from enum import Enum, unique
from typing import Dict, Optional, Union, assert_never
from uuid import UUID

from dif_check.core.macho_reader import MachoMeta
from dif_check.core.mapping_reader import ProguardMeta
from dif_check.errors import MachoBuildIdError


@unique
class DifType(str, Enum):
    DSYM = "dsym"
    PROGUARD = "proguard"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class DsymDif:
    """Mach-O symbol file (dSYM companion or binary with DWARF)."""

    meta: MachoMeta

    def __post_init__(self):
        if not self.meta.architectures:
            raise MachoBuildIdError(f"Mach-O file without build-id: {self.meta.path}")


@dataclass(frozen=True)
class ProguardDif:
    """Android Proguard/R8 mapping file."""

    meta: ProguardMeta


DifRepr = Union[DsymDif, ProguardDif]


def dif_type(dif: DifRepr) -> DifType:
    if isinstance(dif, DsymDif):
        return DifType.DSYM
    if isinstance(dif, ProguardDif):
        return DifType.PROGUARD
    assert_never(dif)


def variants(dif: DifRepr) -> Dict[UUID, Optional[str]]:
    """
    Build-id → architecture label, in ascending build-id order.

    Mach-O files yield one labelled entry per slice; mapping files yield
    a single entry without a label.
    """
    if isinstance(dif, DsymDif):
        entries: Dict[UUID, Optional[str]] = dict(dif.meta.architectures)
    elif isinstance(dif, ProguardDif):
        entries = {dif.meta.uuid: None}
    else:
        assert_never(dif)
    return dict(sorted(entries.items()))
