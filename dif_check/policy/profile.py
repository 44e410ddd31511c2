"""
Profile — tunable knobs for DIF classification.

The profile keeps heuristics out of the readers.  Changing which file
extensions corroborate a mapping file is a profile change, not a code
change.
"""
from dataclasses import dataclass
from typing import FrozenSet

from dif_check.config import Settings


@dataclass(frozen=True)
class Profile:
    """Describes how autodetection accepts low-confidence matches."""

    # Identity
    profile_id: str

    # Extensions (with leading dot, case-sensitive) that corroborate a
    # mapping file which carries no line information.
    mapping_extensions: FrozenSet[str] = frozenset({".txt"})

    @classmethod
    def default(cls) -> "Profile":
        """The built-in profile: only ``.txt`` corroborates a mapping file."""
        return cls(
            profile_id="default",
            mapping_extensions=frozenset({".txt"}),
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Profile":
        return cls(
            profile_id="settings",
            mapping_extensions=frozenset(settings.MAPPING_EXTENSIONS),
        )
