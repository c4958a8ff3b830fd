# -*- encoding: utf-8 -*-
# @File   : model.py
# @Time   : 2024/10/10 00:57:10
# @Author : Kariko Lin

"""
Flat INI structure: one dict of `section.key` to value.

No inheritance, no `+=`, no `[#include]`. A section only exists
because some key starts with its name.
"""

from collections.abc import Iterable, Mapping, MutableMapping
from typing import Iterator, TypedDict

from ..exceptions import IniConversionError

SECTION_SEP = '.'
COMMENT_MARKS = (';', '#')


class IniSectionMeta(TypedDict):
    section: str
    pairs: dict[str, str]


def split_key(combined_key: str) -> tuple[str, str] | None:
    """`"sect.a.b"` -> `("sect", "a.b")`.

    `None` if there's no section or no key left, i.e. nothing
    that can be written back as `[sect]` + `key=value`.
    """
    section, sep, key = combined_key.partition(SECTION_SEP)
    if not sep or not section or not key:
        return None
    return section, key


def join_key(section: str, key: str) -> str:
    return f'{section}{SECTION_SEP}{key}'


def _has_linebreak(text: str) -> bool:
    return '\n' in text or '\r' in text


def check_pair(combined_key: str, value: str) -> None:
    """Make sure the pair reads back unchanged once written.

    There's no escaping in the file, so anything the parser would
    trim, split or take as syntax is refused with `IniConversionError`.
    Keys without a section pass: they are never written anyway.
    """
    if _has_linebreak(value) or value != value.strip():
        raise IniConversionError(
            f'value {value!r} of {combined_key!r} can\'t be written: '
            'no line breaks, no leading/trailing spaces.')
    if (parts := split_key(combined_key)) is None:
        return
    section, key = parts
    if (_has_linebreak(section) or section != section.strip()
            or ']' in section):
        raise IniConversionError(
            f'section {section!r} of {combined_key!r} can\'t be written.')
    if (_has_linebreak(key) or key != key.strip() or '=' in key
            or key[0] in COMMENT_MARKS or key[0] == '['):
        raise IniConversionError(
            f'key {key!r} of {combined_key!r} can\'t be written.')


class IniTable(MutableMapping[str, str]):
    """组合键（`section.key`）到字符串值的映射，代表整个 INI 文件。

    键里第一个`.`之前是小节名，之后（可以再含`.`）是小节内的键名。
    没有`.`的键可以放进来，但写文件时会被丢掉。
    """

    def __init__(
        self,
        pairs: Mapping[str, str] | Iterable[tuple[str, str]] = ()
    ) -> None:
        self.__raw: dict[str, str] = {}
        self.update(pairs)

    def __getitem__(self, key: str) -> str:
        return self.__raw[key]

    def __setitem__(self, key: str, value: str) -> None:
        self.__raw[key] = value

    def __delitem__(self, key: str) -> None:
        del self.__raw[key]

    def __contains__(self, key: object) -> bool:
        return key in self.__raw

    def __len__(self) -> int:
        return len(self.__raw)

    def __iter__(self) -> Iterator[str]:
        return iter(self.__raw)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, IniTable):
            return self.__raw == other.__raw
        if isinstance(other, Mapping):
            return self.__raw == dict(other)
        return NotImplemented

    def __repr__(self) -> str:
        return 'IniTable { .cnt = %d }' % len(self.__raw)

    def __str__(self) -> str:
        return ''.join(f'*{k} = {v}\n' for k, v in self.__raw.items())

    def copy(self) -> 'IniTable':
        return IniTable(self.__raw)

    def sections(self) -> list[str]:
        """Section names, in the order they are written to file."""
        return [meta['section'] for meta in self.iter_sections()]

    def iter_sections(self) -> Iterator[IniSectionMeta]:
        """Group writable pairs by section, keys sorted.

        Empty values and keys without a section are skipped silently.
        """
        current: IniSectionMeta | None = None
        for combined_key in sorted(self.__raw):
            value = self.__raw[combined_key]
            if not value:
                continue
            if (parts := split_key(combined_key)) is None:
                continue
            section, key = parts
            if current is None or current['section'] != section:
                if current is not None:
                    yield current
                current = IniSectionMeta(section=section, pairs={})
            current['pairs'][key] = value
        if current is not None:
            yield current

    def to_nested(self) -> dict[str, dict[str, str]]:
        """`{section: {key: value}}`, only what would reach the file."""
        return {
            meta['section']: meta['pairs'] for meta in self.iter_sections()
        }

    @classmethod
    def from_nested(
        cls, nested: Mapping[str, Mapping[str, str]]
    ) -> 'IniTable':
        ret = cls()
        for section, pairs in nested.items():
            for key, value in pairs.items():
                ret[join_key(section, key)] = value
        return ret
