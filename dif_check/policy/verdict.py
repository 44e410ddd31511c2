"""
Verdict — usability of a classified DIF and the autodetection guard.

Two decisions live here:
  1. Usability (is_usable / get_problem) — does the file carry the data
     symbolication needs, beyond being structurally valid?
  2. Mapping guard (accept_mapping_candidate) — is an autodetected
     mapping file corroborated enough to be accepted?

Policy rules read the Profile for knobs but never open files.
"""
from pathlib import Path
from typing import Dict, Optional, assert_never

from dif_check.core.dif_repr import DifRepr, DifType, DsymDif, ProguardDif, dif_type
from dif_check.core.mapping_reader import ProguardMeta
from dif_check.policy.profile import Profile


# ── Problem wording (static, keyed by format) ────────────────────────────────

PROBLEMS: Dict[DifType, str] = {
    DifType.DSYM: "missing DWARF debug info",
    DifType.PROGUARD: "missing line information",
}


# ── Usability ────────────────────────────────────────────────────────────────

def is_usable(dif: DifRepr) -> bool:
    """
    Mach-O: DWARF debug info is present (not just a symbol table).
    Proguard: at least one member maps to source lines (not just renames).
    """
    if isinstance(dif, DsymDif):
        return dif.meta.has_debug_info
    if isinstance(dif, ProguardDif):
        return dif.meta.has_line_info
    assert_never(dif)


def get_problem(dif: DifRepr) -> Optional[str]:
    """None when usable, otherwise the fixed message for the format."""
    if is_usable(dif):
        return None
    return PROBLEMS[dif_type(dif)]


# ── Autodetection guard ──────────────────────────────────────────────────────

def accept_mapping_candidate(
    path: Path,
    meta: ProguardMeta,
    profile: Profile,
) -> bool:
    """
    Accept an autodetected mapping file only with a corroborating signal:
    a conventional file extension, or line information in the content.
    """
    return path.suffix in profile.mapping_extensions or meta.has_line_info
