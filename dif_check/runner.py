"""
Check runner — top-level orchestration: path → DifRepr → report + exit code.

This module ties the readers, the usability policy and IO together.
``open_dif`` is the detection/dispatch driver; ``main`` is the CLI.
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from dif_check import __version__
from dif_check.config import settings
from dif_check.core.dif_repr import DifRepr, DifType, DsymDif, ProguardDif, dif_type
from dif_check.core.macho_reader import read_macho
from dif_check.core.mapping_reader import read_mapping
from dif_check.errors import (
    AdapterParseError,
    ClassificationError,
    DifError,
    MachoBuildIdError,
    MappingParseError,
)
from dif_check.io.schema import DifCheckReport
from dif_check.io.writer import make_console, render_text, write_json
from dif_check.policy.profile import Profile
from dif_check.policy.verdict import accept_mapping_candidate

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_UNUSABLE = 1
EXIT_ERROR = 2


# ── Detection / dispatch ─────────────────────────────────────────────────────

def open_dif(
    path: str,
    dif_type_hint: Optional[DifType] = None,
    profile: Optional[Profile] = None,
) -> DifRepr:
    """
    Open *path* as a DIF, autodetecting the format unless a hint is given.

    Parameters
    ----------
    path : str
        File (or ``.dSYM`` bundle) to inspect.
    dif_type_hint : DifType, optional
        Forces the format; the reader's error propagates unchanged.
    profile : Profile, optional
        Guard knobs.  Defaults to Profile.default().

    Raises
    ------
    AdapterParseError
        The forced reader rejected the file, or autodetection found a
        Mach-O container without a build-id.
    ClassificationError
        Neither reader accepts the file, or a mapping parse succeeded
        but nothing corroborates it.
    FileNotFoundError
        *path* does not exist.
    """
    if profile is None:
        profile = Profile.default()

    # ── Explicit format: single attempt, no fallback ─────────────────
    if dif_type_hint == DifType.DSYM:
        return DsymDif(read_macho(path))
    if dif_type_hint == DifType.PROGUARD:
        return ProguardDif(read_mapping(path))

    # ── Autodetect step 1: Mach-O wins regardless of usability ───────
    try:
        dif: DifRepr = DsymDif(read_macho(path))
    except MachoBuildIdError:
        # a Mach-O container, just not an identifiable one
        raise
    except AdapterParseError as e:
        logger.debug("Not a Mach-O file, trying mapping: %s", e)
    else:
        logger.info("Classified %s as %s", path, dif_type(dif))
        return dif

    # ── Autodetect step 2: mapping, behind the corroboration guard ───
    try:
        meta = read_mapping(path)
    except MappingParseError as e:
        logger.debug("Not a mapping file either: %s", e)
        raise ClassificationError() from e

    if not accept_mapping_candidate(Path(path), meta, profile):
        logger.info(
            "Rejected uncorroborated mapping candidate %s (profile=%s)",
            path, profile.profile_id,
        )
        raise ClassificationError()

    dif = ProguardDif(meta)
    logger.info("Classified %s as %s", path, dif_type(dif))
    return dif


def check_dif(
    path: str,
    dif_type_hint: Optional[DifType] = None,
    profile: Optional[Profile] = None,
) -> DifCheckReport:
    """Open *path* and build its check report."""
    return DifCheckReport.from_dif(open_dif(path, dif_type_hint, profile))


# ── CLI ──────────────────────────────────────────────────────────────────────

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dif-check",
        description="Given the path to a debug info file, check whether it is usable.",
    )
    parser.add_argument(
        "path",
        help="The path to the debug info file.",
    )
    parser.add_argument(
        "-t", "--type",
        choices=[t.value for t in DifType],
        default=None,
        help="Explicitly sets the type of the debug info file.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Returns the results as JSON.",
    )
    parser.add_argument(
        "--color",
        choices=["auto", "always", "never"],
        default=settings.COLOR,
        help="Colorize text output (default: %(default)s).",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point for dif-check.  Returns the process exit code."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.LOG_LEVEL,
        format=settings.LOG_FORMAT,
        stream=sys.stderr,
    )

    hint = DifType(args.type) if args.type else None
    try:
        report = check_dif(args.path, hint, Profile.from_settings(settings))
    except (DifError, OSError) as e:
        logger.error("%s", e)
        return EXIT_ERROR

    if args.json:
        write_json(report, sys.stdout)
    else:
        render_text(report, make_console(sys.stdout, args.color))

    return EXIT_OK if report.is_usable else EXIT_UNUSABLE


if __name__ == "__main__":
    sys.exit(main())
