"""
Mach-O reader — open a Mach-O file or dSYM bundle and extract DIF metadata.

Responsibilities:
  - Resolve a ``.dSYM`` bundle directory to the DWARF companion file inside.
  - Validate that the file is a thin or fat (universal) Mach-O container.
  - Name the architecture of every slice and read its LC_UUID.
  - Detect DWARF sections in the ``__DWARF`` segment of each slice.
  - Return a MachoMeta dataclass with all usability-relevant facts.

This module intentionally does NOT parse DWARF data.
"""
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional
from uuid import UUID

from macholib.MachO import MachO
from macholib.mach_o import CPU_TYPE_NAMES, LC_SEGMENT, LC_SEGMENT_64, LC_UUID

from dif_check.errors import MachoBuildIdError, MachoParseError

logger = logging.getLogger(__name__)

DWARF_SEGMENT = "__DWARF"
DEBUG_INFO_SECTION = "__debug_info"

_MH_DSYM = 0xA

_CPU_ARCH_ABI64 = 0x01000000
_CPU_ARCH_ABI64_32 = 0x02000000
_CPU_SUBTYPE_MASK = 0x00FFFFFF

CPU_TYPE_X86 = 7
CPU_TYPE_X86_64 = CPU_TYPE_X86 | _CPU_ARCH_ABI64
CPU_TYPE_ARM = 12
CPU_TYPE_ARM64 = CPU_TYPE_ARM | _CPU_ARCH_ABI64
CPU_TYPE_ARM64_32 = CPU_TYPE_ARM | _CPU_ARCH_ABI64_32
CPU_TYPE_POWERPC = 18
CPU_TYPE_POWERPC64 = CPU_TYPE_POWERPC | _CPU_ARCH_ABI64

# (cputype, cpusubtype) → label; subtype None matches any subtype.
_ARCH_NAMES = {
    (CPU_TYPE_X86, None): "i386",
    (CPU_TYPE_X86_64, 8): "x86_64h",
    (CPU_TYPE_X86_64, None): "x86_64",
    (CPU_TYPE_ARM, 5): "armv4t",
    (CPU_TYPE_ARM, 6): "armv6",
    (CPU_TYPE_ARM, 7): "armv5",
    (CPU_TYPE_ARM, 9): "armv7",
    (CPU_TYPE_ARM, 10): "armv7f",
    (CPU_TYPE_ARM, 11): "armv7s",
    (CPU_TYPE_ARM, 12): "armv7k",
    (CPU_TYPE_ARM, 14): "armv6m",
    (CPU_TYPE_ARM, 15): "armv7m",
    (CPU_TYPE_ARM, 16): "armv7em",
    (CPU_TYPE_ARM, None): "arm",
    (CPU_TYPE_ARM64, 2): "arm64e",
    (CPU_TYPE_ARM64, None): "arm64",
    (CPU_TYPE_ARM64_32, None): "arm64_32",
    (CPU_TYPE_POWERPC, None): "ppc",
    (CPU_TYPE_POWERPC64, None): "ppc64",
}


@dataclass(frozen=True)
class MachoSlice:
    """One architecture slice of a (possibly universal) Mach-O file."""

    arch: str
    cputype: int
    cpusubtype: int
    filetype: int
    uuid: Optional[UUID] = None
    dwarf_section_names: List[str] = field(default_factory=list)

    @property
    def is_dsym(self) -> bool:
        return self.filetype == _MH_DSYM

    @property
    def has_debug_info(self) -> bool:
        return DEBUG_INFO_SECTION in self.dwarf_section_names


@dataclass(frozen=True)
class MachoMeta:
    """Structural metadata extracted from a Mach-O container."""

    path: str
    file_size: int
    is_fat: bool
    slices: List[MachoSlice] = field(default_factory=list)

    @property
    def architectures(self) -> Dict[UUID, str]:
        """Build-id → architecture label for every slice that has an LC_UUID."""
        return {s.uuid: s.arch for s in self.slices if s.uuid is not None}

    @property
    def has_debug_info(self) -> bool:
        return any(s.has_debug_info for s in self.slices)


def arch_name(cputype: int, cpusubtype: int) -> str:
    """Map a Mach-O (cputype, cpusubtype) pair to its conventional label."""
    subtype = cpusubtype & _CPU_SUBTYPE_MASK
    name = _ARCH_NAMES.get((cputype, subtype)) or _ARCH_NAMES.get((cputype, None))
    if name is not None:
        return name
    fallback = CPU_TYPE_NAMES.get(cputype)
    return fallback.lower() if fallback else "unknown"


def _cstr(raw: bytes) -> str:
    return raw.rstrip(b"\x00").decode("ascii", errors="replace")


def resolve_dsym_bundle(path: Path) -> Path:
    """
    Return the DWARF file inside a ``.dSYM`` bundle, or *path* unchanged.

    Raises
    ------
    MachoParseError
        If *path* is a directory that does not hold exactly one DWARF file.
    """
    if not path.is_dir():
        return path

    dwarf_dir = path / "Contents" / "Resources" / "DWARF"
    candidates = sorted(p for p in dwarf_dir.glob("*") if p.is_file())
    if len(candidates) != 1:
        raise MachoParseError(
            f"Expected exactly one DWARF file in {dwarf_dir}, found {len(candidates)}"
        )
    logger.debug("Resolved dSYM bundle %s → %s", path, candidates[0])
    return candidates[0]


def _read_slice(header) -> MachoSlice:
    cputype = header.header.cputype
    cpusubtype = header.header.cpusubtype

    uuid = None
    dwarf_sections: List[str] = []
    for load_cmd, cmd, data in header.commands:
        if load_cmd.cmd == LC_UUID:
            uuid = UUID(bytes=bytes(cmd.uuid))
        elif load_cmd.cmd in (LC_SEGMENT, LC_SEGMENT_64):
            if _cstr(cmd.segname) == DWARF_SEGMENT:
                dwarf_sections.extend(_cstr(sect.sectname) for sect in data)

    return MachoSlice(
        arch=arch_name(cputype, cpusubtype),
        cputype=cputype,
        cpusubtype=cpusubtype,
        filetype=header.header.filetype,
        uuid=uuid,
        dwarf_section_names=sorted(dwarf_sections),
    )


def read_macho(path: str) -> MachoMeta:
    """
    Open *path* as a Mach-O file (or dSYM bundle) and return its metadata.

    Raises
    ------
    FileNotFoundError
        If *path* does not exist.
    MachoParseError
        If the file is not a valid Mach-O container or no slice carries
        a build-id.
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Debug info file not found: {path}")

    target = resolve_dsym_bundle(p)

    try:
        macho = MachO(str(target), allow_unknown_load_commands=True)
    except Exception as e:
        raise MachoParseError(f"Not a Mach-O file: {path} ({e})") from e

    slices = [_read_slice(h) for h in macho.headers]
    for s in slices:
        if s.uuid is None:
            logger.warning("Skipping %s slice without LC_UUID in %s", s.arch, path)

    meta = MachoMeta(
        path=str(target),
        file_size=target.stat().st_size,
        is_fat=macho.fat is not None,
        slices=slices,
    )
    if not meta.architectures:
        raise MachoBuildIdError(f"No build-id (LC_UUID) found in {path}")

    logger.debug(
        "Mach-O %s: %d slice(s), debug_info=%s",
        path, len(slices), meta.has_debug_info,
    )
    return meta
