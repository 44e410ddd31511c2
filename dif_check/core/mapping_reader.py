"""
Mapping reader — read an Android Proguard/R8 mapping file.

Responsibilities:
  - Validate that the file is a UTF-8 text table (no NUL bytes).
  - Derive the deterministic build-id from the file content.
  - Detect whether any member carries a source line range.
  - Return a ProguardMeta dataclass with the counts used for reporting.

Line grammar::

    # comment
    com.example.Original -> a.b:
        int field -> a
        12:14:void method(int):33:35 -> b

Unrecognised lines are counted and skipped, never fatal.
"""
import hashlib
import logging
import re
import uuid
from dataclasses import dataclass
from pathlib import Path

from dif_check.errors import MappingParseError

logger = logging.getLogger(__name__)

# uuid5(NAMESPACE_DNS, "guardsquare.com") — namespace shared by Proguard tooling.
PROGUARD_NAMESPACE = uuid.uuid5(uuid.NAMESPACE_DNS, "guardsquare.com")

_CLASS_RE = re.compile(r"^(?P<orig>\S+) -> (?P<obf>\S+):$")
_MEMBER_RE = re.compile(
    r"^\s+"
    r"(?:(?P<start>\d+):(?P<end>\d+):)?"
    r"(?P<type>\S+) (?P<name>[^\s(]+)"
    r"(?:\((?P<args>[^)]*)\))?"
    r"(?::\d+(?::\d+)?)?"
    r" -> (?P<obf>\S+)$"
)


@dataclass(frozen=True)
class ProguardMeta:
    """Metadata extracted from a Proguard mapping file."""

    path: str
    file_size: int
    uuid: uuid.UUID
    has_line_info: bool
    class_count: int = 0
    member_count: int = 0
    line_mapping_count: int = 0
    skipped_lines: int = 0


def mapping_uuid(content: bytes) -> uuid.UUID:
    """UUIDv5 of *content* under the Proguard namespace."""
    digest = hashlib.sha1(PROGUARD_NAMESPACE.bytes + content).digest()
    return uuid.UUID(bytes=digest[:16], version=5)


def read_mapping(path: str) -> ProguardMeta:
    """
    Open *path* as a Proguard mapping file and return its metadata.

    Raises
    ------
    FileNotFoundError
        If *path* does not exist.
    MappingParseError
        If the file is not a text mapping table.
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Debug info file not found: {path}")
    if p.is_dir():
        raise MappingParseError(f"Not a mapping file: {path} is a directory")

    content = p.read_bytes()
    if b"\x00" in content:
        raise MappingParseError(f"Not a mapping file: {path} contains binary data")
    try:
        text = content.decode("utf-8")
    except UnicodeDecodeError as e:
        raise MappingParseError(f"Not a mapping file: {path} ({e})") from e

    classes = members = line_mappings = skipped = 0
    for line in text.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        if _CLASS_RE.match(line):
            classes += 1
            continue
        m = _MEMBER_RE.match(line)
        if m:
            members += 1
            if m.group("start") is not None:
                line_mappings += 1
            continue
        skipped += 1

    if skipped:
        logger.debug("Skipped %d unrecognised line(s) in %s", skipped, path)

    meta = ProguardMeta(
        path=str(p),
        file_size=len(content),
        uuid=mapping_uuid(content),
        has_line_info=line_mappings > 0,
        class_count=classes,
        member_count=members,
        line_mapping_count=line_mappings,
        skipped_lines=skipped,
    )
    logger.debug(
        "Mapping %s: %d class(es), %d member(s), %d with line info",
        path, classes, members, line_mappings,
    )
    return meta
