# -*- encoding: utf-8 -*-
# @File   : settings.py
# @Time   : 2024/10/13 00:21:36
# @Author : Kariko Lin

"""One `Settings` per INI file, shared by every thread of the process.

```python
settings = Settings.get_instance('/etc/cfg/my_settings.ini')
settings.set_value('net.port', 8080)
port = settings.get_value('net.port', 0)
name = settings.get_value_fmt('', 'slots.item%d.name', 3)
```

The table in memory is a cache of the file. Before every access
the file is `stat`-ed, and re-read if it differs from what we saw last
(changed by another process, truncated, deleted...).
Every `set_value()` rewrites the whole file.

Only threads are ordered here. Another *process* writing the same file
may still race with us between the reload and the write.
"""

import logging
import os
import sys
from threading import Lock
from typing import ClassVar, TextIO

from .exceptions import IniStorageError
from .ini import IniParser, IniTable, check_pair
from .values import SupportedValue, ValueKind, decode_value, encode_value

__all__ = ['Settings', 'get_settings', 'normalize_path']

# mtime alone may not change for two writes in the same clock tick.
type FileSignature = tuple[int, int]


def normalize_path(path: str | os.PathLike[str]) -> str:
    return os.path.abspath(os.fspath(path))


# only `Settings.get_instance()` holds this.
_REGISTRY_TOKEN = object()


class Settings:
    """INI backed key/value store. Keys are `section.key`.

    Can't be instantiated directly, use `Settings.get_instance()`
    (or `get_settings()`) so that a file only has one live cache.
    """

    _registry: ClassVar[dict[str, 'Settings']] = {}
    _registry_lock: ClassVar[Lock] = Lock()

    def __init__(
        self, path: str | os.PathLike[str], encoding: str = 'utf-8',
        *, _token: object = None
    ) -> None:
        if _token is not _REGISTRY_TOKEN:
            raise TypeError(
                'Settings is one per file, use Settings.get_instance().')
        self._path = normalize_path(path)
        self._codec = encoding
        self._parser = IniParser(self._path, encoding)
        # guards _table, _signature and all file IO below.
        self._lock = Lock()
        self._table = IniTable()
        self._signature: FileSignature | None = None

    # ***********  instances ***********
    @classmethod
    def get_instance(
        cls, path: str | os.PathLike[str], encoding: str = 'utf-8'
    ) -> 'Settings':
        """The store bound to `path`, created on first request.

        `encoding` only matters for the call which creates it.
        """
        key = normalize_path(path)
        if (ins := cls._registry.get(key)) is not None:
            return ins
        with cls._registry_lock:
            if (ins := cls._registry.get(key)) is None:
                ins = cls(key, encoding, _token=_REGISTRY_TOKEN)
                cls._registry[key] = ins
        return ins

    @classmethod
    def destroy_instance(cls, path: str | os.PathLike[str]) -> bool:
        """Forget the store of `path`. Next `get_instance()` builds a new one.

        Returns `False` if there was nothing to forget.
        """
        with cls._registry_lock:
            return cls._registry.pop(normalize_path(path), None) is not None

    @classmethod
    def instances(cls) -> list[str]:
        with cls._registry_lock:
            return list(cls._registry)

    # ***********  interfaces ***********
    def get_full_path(self) -> str:
        return self._path

    def get_value[V: (str, int, float, bool)](
        self, key: str, default: V = '', *, kind: ValueKind | None = None
    ) -> V:
        """Value of `key`, converted to the kind of `default`.

        `default` comes back if the file or the key doesn't exist,
        or the stored value is empty. Reading never adds the key.

        Raises:
            IniStorageError: the file exists but can't be (re)loaded.
            IniConversionError: stored text isn't a valid number.
        """
        if kind is None:
            kind = ValueKind.of(default)
        with self._lock:
            if not os.path.exists(self._path):
                self._forget()
                return default
            self._refresh()
            text = self._table.get(key)
        if text is None:
            return default
        return decode_value(text, default, kind)

    def get_value_fmt[V: (str, int, float, bool)](
        self, default: V, fmt: str, *args: object,
        kind: ValueKind | None = None
    ) -> V:
        """Same as `get_value()`, but the key is `fmt % args`.

        e.g. `get_value_fmt(0, 'section.item%d.field', 3)`
        reads `section.item3.field`.
        """
        return self.get_value(fmt % args, default, kind=kind)

    def get_str(self, key: str, default: str = '') -> str:
        return self.get_value(key, default, kind=ValueKind.STRING)

    def get_int(self, key: str, default: int = 0) -> int:
        return self.get_value(key, default, kind=ValueKind.INT)

    def get_float(
        self, key: str, default: float = 0.0, *, single: bool = False
    ) -> float:
        return self.get_value(
            key, default,
            kind=ValueKind.FLOAT if single else ValueKind.DOUBLE)

    def get_bool(self, key: str, default: bool = False) -> bool:
        return self.get_value(key, default, kind=ValueKind.BOOL)

    def set_value(
        self, key: str, value: SupportedValue, *,
        kind: ValueKind | None = None
    ) -> None:
        """Save `value` as `key`, then rewrite the whole file.

        Missing file (and its folders) will be created.
        A key without section stays in memory only, it's never written.

        Raises:
            TypeError: `value` is not str, int, float or bool.
            IniConversionError: e.g. a float too large for `ValueKind.FLOAT`,
                or key/value text that wouldn't read back the same
                (line breaks, padding spaces, `=` or `;` in the key...).
            IniStorageError: creating, reading or writing the file failed.
        """
        text = encode_value(value, kind)
        check_pair(key, text)
        with self._lock:
            if not os.path.exists(self._path):
                self._create_file()
            # load before write, keep what others wrote since last time.
            self._refresh()
            table = self._table.copy()
            table[key] = text
            try:
                self._parser.write(table)
            except OSError as e:
                raise IniStorageError(
                    'write failed, maybe permission denied.', self._path
                ) from e
            self._table = table
            self._signature = self._stat()

    def snapshot(self) -> IniTable:
        """A copy of the current table, reloaded first if needed."""
        with self._lock:
            if not os.path.exists(self._path):
                self._forget()
                return IniTable()
            self._refresh()
            return self._table.copy()

    def dump_file(self, stream: TextIO | None = None) -> None:
        """Debug aid: copy the raw file to `stream` (stdout by default)."""
        if stream is None:
            stream = sys.stdout
        with self._lock:
            try:
                with open(self._path, 'r', encoding=self._codec,
                          errors='replace') as fp:
                    for line in fp:
                        stream.write(line)
            except OSError as e:
                logging.error(f'Failed to open file: {self._path} ({e})')

    def __str__(self) -> str:
        with self._lock:
            return str(self._table)

    def __repr__(self) -> str:
        return f'<Settings {self._path!r} ({self._codec})>'

    # ***********  implementation ***********
    # all of them expect `self._lock` held.
    def _forget(self) -> None:
        self._table = IniTable()
        self._signature = None

    def _stat(self) -> FileSignature:
        try:
            st = os.stat(self._path)
        except OSError as e:
            raise IniStorageError(
                'stat failed, file may be removed just now.', self._path
            ) from e
        return st.st_mtime_ns, st.st_size

    def _refresh(self) -> None:
        signature = self._stat()
        if signature == self._signature:
            return
        logging.debug(f'Reload {self._path}')
        try:
            table = self._parser.read()
        except (OSError, UnicodeDecodeError) as e:
            raise IniStorageError(
                'open failed, maybe permission denied.', self._path
            ) from e
        self._table = table
        self._signature = signature

    def _create_file(self) -> None:
        logging.info(f"{self._path} doesn't exist, create a new one.")
        parent = os.path.dirname(self._path)
        if not os.path.isdir(parent):
            logging.info(f'Create directory: {parent}')
            try:
                os.makedirs(parent, exist_ok=True)
            except OSError as e:
                raise IniStorageError(
                    'path create failed, maybe permission denied.', self._path
                ) from e
        try:
            with open(self._path, 'x', encoding=self._codec):
                pass
        except FileExistsError:
            # someone else was faster, just read theirs.
            pass
        except OSError as e:
            raise IniStorageError(
                'file create failed, maybe permission denied.', self._path
            ) from e
        else:
            logging.info(f'Create regular file: {self._path}')
        self._forget()


def get_settings(
    path: str | os.PathLike[str], encoding: str = 'utf-8'
) -> Settings:
    return Settings.get_instance(path, encoding)
