"""
Errors raised while opening and classifying a debug information file.

Usability is not an error: a well-formed file without debug data is a
regular result and is reported through the exit code only.
"""


class DifError(Exception):
    """Base class for all dif_check failures."""


class AdapterParseError(DifError):
    """A format reader rejected the file outright."""


class MachoParseError(AdapterParseError):
    """The file is not a readable Mach-O container or dSYM bundle."""


class MappingParseError(AdapterParseError):
    """The file cannot be read as a Proguard mapping table."""


class ClassificationError(DifError):
    """No format could be assigned to the file with confidence."""

    def __init__(self, message: str = "invalid debug info file"):
        super().__init__(message)


class MachoBuildIdError(MachoParseError):
    """The file is a Mach-O container but no slice carries an LC_UUID."""
