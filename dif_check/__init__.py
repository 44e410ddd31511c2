"""
dif_check — usability check for debug information files (DIFs).

Classifies a file as a Mach-O/dSYM symbol file or an Android Proguard
mapping, extracts its build identifiers and reports whether it carries
the data needed for symbolication.
"""

__version__ = "0.1.0"
PACKAGE_NAME = "dif_check"
