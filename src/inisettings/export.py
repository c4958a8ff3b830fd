# -*- encoding: utf-8 -*-
# @File   : export.py
# @Time   : 2024/10/14 23:02:18
# @Author : Kariko Lin

"""Dump a settings table to YAML / JSON, and load it back.

Both use the same layout:

    ```yaml
    section1:
      key1: value1
      key2: value2
    section2:
      key1: value3
    ```

Only what `IniParser` would write ends up in the output
(no empty values, no section-less keys).
"""

import json
from collections.abc import Mapping
from typing import Any
from warnings import warn

import yaml

from .abstract import FileHandler
from .exceptions import IniSyntaxWarning
from .ini import IniTable
from .ini.model import SECTION_SEP


def _flatten(src: Any, filename: str) -> IniTable:
    if src is None:
        return IniTable()
    if not isinstance(src, Mapping):
        raise ValueError(
            f'{filename}: expecting a mapping of sections, '
            f'got {type(src).__name__}.')
    nested: dict[str, dict[str, str]] = {}
    for section, pairs in src.items():
        if not isinstance(pairs, Mapping):
            warn(f'{filename}: section "{section}" is not a mapping, skipped.',
                 IniSyntaxWarning)
            continue
        section = str(section)
        # `a.b` would come back as section `a`, key `b.*`.
        if not section or SECTION_SEP in section:
            warn(f'{filename}: section "{section}" can\'t be a section '
                 'name (empty or containing "."), skipped.',
                 IniSyntaxWarning)
            continue
        # yaml may give us ints / bools, store them as they are written.
        nested[section] = {
            str(k): '' if v is None else str(v) for k, v in pairs.items()
        }
    return IniTable.from_nested(nested)


class IniYamlExporter(FileHandler[IniTable]):
    def read(self) -> IniTable:
        with open(self._fn, 'r', encoding=self._codec) as fp:
            return _flatten(yaml.safe_load(fp), self._fn)

    def write(self, instance: IniTable, indent: int = 2) -> None:
        # values stay strings, so `port: '8080'` is quoted on purpose.
        with open(self._fn, 'w', encoding=self._codec) as fp:
            yaml.safe_dump(
                instance.to_nested(), fp,
                allow_unicode=True, indent=indent, sort_keys=True)


class IniJsonExporter(FileHandler[IniTable]):
    def read(self) -> IniTable:
        with open(self._fn, 'r', encoding=self._codec) as fp:
            return _flatten(json.load(fp), self._fn)

    def write(self, instance: IniTable, indent: int = 2) -> None:
        with open(self._fn, 'w', encoding=self._codec) as fp:
            json.dump(instance.to_nested(), fp,
                      ensure_ascii=False, indent=indent, sort_keys=True)
