"""
L1 Domain — Executable search path composition.

Builds a new ``PATH`` value with the install prefix's bin directory
added. Applying it to the environment is the installer's job.
"""

from __future__ import annotations

from pkgtarget.core.models.capability import CapabilitySnapshot, OsFamily


def path_separator(snapshot: CapabilitySnapshot) -> str:
    return ";" if snapshot.os_family == OsFamily.WINDOWS else ":"


def search_path(current: str, bin_dir: str, mode: str = "prepend", sep: str = ":") -> str:
    """Return ``current`` with ``bin_dir`` prepended, appended, or untouched.

    An entry already present is not added twice.
    """
    if mode == "skip" or not bin_dir:
        return current
    entries = [e for e in current.split(sep) if e] if current else []
    if bin_dir in entries:
        return current
    if mode == "prepend":
        return sep.join([bin_dir, *entries])
    if mode == "append":
        return sep.join([*entries, bin_dir])
    raise ValueError(f"Unknown PATH mode: {mode!r}")
