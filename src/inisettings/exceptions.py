# -*- encoding: utf-8 -*-
# @File   : exceptions.py
# @Time   : 2024/10/12 21:40:03
# @Author : Kariko Lin

"""Errors and warnings shared by the codec and the store.

Recoverable, per-line problems are *warnings* (`IniSyntaxWarning`),
so a bad line never aborts a whole load.
Anything that stops an operation is a `SettingsError`.
"""


class SettingsError(Exception):
    """Base of all fatal errors raised by `inisettings`."""

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = path

    def __str__(self) -> str:
        if self.path is None:
            return self.message
        return f'{self.path}: {self.message}'


class IniStorageError(SettingsError):
    """Open/read/write/create failed, e.g. permission denied,
    or the file vanished right after the existence check."""
    pass


class IniConversionError(SettingsError, ValueError):
    """A stored (or given) value can't be converted to the requested kind."""
    pass


class IniSyntaxWarning(UserWarning):
    """Malformed or duplicated INI line. The line is skipped (or overrides)."""
    pass
