"""
Shared pytest fixtures for dif_check tests.

Mach-O images are synthesised on the fly with ``struct`` so the tests
need neither Xcode nor a macOS host:

  - thin 64-bit images with an LC_UUID and an optional ``__DWARF``
    segment,
  - fat (universal) containers wrapping several thin slices,
  - ``.dSYM`` bundle directories around a thin image.

Proguard mappings are written as plain text.
"""
import struct
import textwrap
from pathlib import Path
from typing import List, Optional, Sequence, Tuple
from uuid import UUID

import pytest

MH_MAGIC_64 = 0xFEEDFACF
FAT_MAGIC = 0xCAFEBABE
MH_EXECUTE = 0x2
MH_DSYM = 0xA
LC_SEGMENT_64 = 0x19
LC_UUID = 0x1B

CPU_TYPE_X86_64 = 0x01000007
CPU_TYPE_ARM64 = 0x0100000C
CPU_SUBTYPE_X86_64_ALL = 3
CPU_SUBTYPE_ARM64_ALL = 0

UUID_ARM64 = UUID("0c4fe0b4-3c7e-3cbd-8f2f-5a6e5d3c2b1a")
UUID_X86_64 = UUID("9a1b2c3d-4e5f-3a6b-8c7d-0e1f2a3b4c5d")

DWARF_SECTIONS = ("__debug_line", "__debug_info", "__debug_abbrev", "__debug_str")


def _segment_64(segname: str, sectnames: Sequence[str]) -> bytes:
    """LC_SEGMENT_64 with zero-sized sections (no section payload)."""
    sections = b"".join(
        struct.pack(
            "<16s16sQQIIIIIIII",
            name.encode(), segname.encode(),
            0, 0,          # addr, size
            0, 0, 0, 0,    # offset, align, reloff, nreloc
            0, 0, 0, 0,    # flags, reserved1..3
        )
        for name in sectnames
    )
    cmdsize = 72 + len(sections)
    header = struct.pack(
        "<II16sQQQQiiII",
        LC_SEGMENT_64, cmdsize, segname.encode(),
        0, 0, 0, 0,        # vmaddr, vmsize, fileoff, filesize
        7, 7,              # maxprot, initprot
        len(sectnames), 0,
    )
    return header + sections


def _uuid_command(uuid: UUID) -> bytes:
    return struct.pack("<II16s", LC_UUID, 24, uuid.bytes)


def build_thin_macho(
    cputype: int = CPU_TYPE_ARM64,
    cpusubtype: int = CPU_SUBTYPE_ARM64_ALL,
    uuid: Optional[UUID] = UUID_ARM64,
    with_dwarf: bool = True,
    filetype: int = MH_DSYM,
) -> bytes:
    """Return the bytes of a little-endian 64-bit Mach-O image."""
    commands: List[bytes] = []
    if uuid is not None:
        commands.append(_uuid_command(uuid))
    commands.append(_segment_64("__TEXT", ["__text"]))
    if with_dwarf:
        commands.append(_segment_64("__DWARF", DWARF_SECTIONS))

    body = b"".join(commands)
    header = struct.pack(
        "<IiiIIIII",
        MH_MAGIC_64, cputype, cpusubtype, filetype,
        len(commands), len(body), 0, 0,
    )
    return header + body


def build_fat_macho(slices: Sequence[Tuple[int, int, bytes]]) -> bytes:
    """Wrap (cputype, cpusubtype, image) slices in a big-endian fat header."""
    align = 12
    offset = 1 << align
    arch_table = b""
    payload = b""
    for cputype, cpusubtype, image in slices:
        arch_table += struct.pack(">iiIII", cputype, cpusubtype, offset, len(image), align)
        padded = image + b"\x00" * (-len(image) % (1 << align))
        payload += padded
        offset += len(padded)

    header = struct.pack(">II", FAT_MAGIC, len(slices)) + arch_table
    header += b"\x00" * ((1 << align) - len(header))
    return header + payload


MAPPING_WITH_LINES = textwrap.dedent("""\
    # compiler: R8
    # compiler_version: 8.2.42
    com.example.app.MainActivity -> com.example.app.MainActivity:
        android.widget.TextView label -> a
        1:1:void <init>():12:12 -> <init>
        1:4:void onCreate(android.os.Bundle):20:23 -> onCreate
    com.example.app.util.Strings -> a.a:
        7:9:java.lang.String join(java.util.List,java.lang.String):41:43 -> a
""")

MAPPING_WITHOUT_LINES = textwrap.dedent("""\
    com.example.app.MainActivity -> com.example.app.MainActivity:
        android.widget.TextView label -> a
        void onCreate(android.os.Bundle) -> onCreate
    com.example.app.util.Strings -> a.a:
        java.lang.String join(java.util.List,java.lang.String) -> a
""")


# ── Mach-O fixtures ──────────────────────────────────────────────────────────

@pytest.fixture
def dsym_fat_two_slices(tmp_path) -> Path:
    """Universal dSYM with arm64 + x86_64 slices, both with DWARF."""
    p = tmp_path / "App"
    p.write_bytes(build_fat_macho([
        (CPU_TYPE_ARM64, CPU_SUBTYPE_ARM64_ALL,
         build_thin_macho(CPU_TYPE_ARM64, CPU_SUBTYPE_ARM64_ALL, UUID_ARM64)),
        (CPU_TYPE_X86_64, CPU_SUBTYPE_X86_64_ALL,
         build_thin_macho(CPU_TYPE_X86_64, CPU_SUBTYPE_X86_64_ALL, UUID_X86_64)),
    ]))
    return p


@pytest.fixture
def macho_without_dwarf(tmp_path) -> Path:
    """Thin arm64 executable with a UUID but no __DWARF segment."""
    p = tmp_path / "App.stripped"
    p.write_bytes(build_thin_macho(with_dwarf=False, filetype=MH_EXECUTE))
    return p


@pytest.fixture
def macho_without_uuid(tmp_path) -> Path:
    """Thin arm64 image with DWARF sections but no LC_UUID."""
    p = tmp_path / "NoUuid"
    p.write_bytes(build_thin_macho(uuid=None))
    return p


@pytest.fixture
def dsym_bundle(tmp_path) -> Path:
    """``App.dSYM`` bundle directory holding one thin DWARF file."""
    bundle = tmp_path / "App.app.dSYM"
    dwarf_dir = bundle / "Contents" / "Resources" / "DWARF"
    dwarf_dir.mkdir(parents=True)
    (dwarf_dir / "App").write_bytes(build_thin_macho())
    return bundle


# ── Mapping fixtures ─────────────────────────────────────────────────────────

@pytest.fixture
def mapping_with_lines(tmp_path) -> Path:
    """R8 mapping with line ranges, no corroborating extension."""
    p = tmp_path / "mapping.map"
    p.write_text(MAPPING_WITH_LINES)
    return p


@pytest.fixture
def mapping_txt_without_lines(tmp_path) -> Path:
    """Rename-only mapping with the conventional .txt extension."""
    p = tmp_path / "mapping.txt"
    p.write_text(MAPPING_WITHOUT_LINES)
    return p


@pytest.fixture
def mapping_bare_without_lines(tmp_path) -> Path:
    """Rename-only mapping without any corroborating extension."""
    p = tmp_path / "mapping"
    p.write_text(MAPPING_WITHOUT_LINES)
    return p


@pytest.fixture
def binary_blob(tmp_path) -> Path:
    """Arbitrary binary content that is neither Mach-O nor text."""
    p = tmp_path / "blob"
    p.write_bytes(b"\x13\x37\x00\xff" * 64)
    return p
