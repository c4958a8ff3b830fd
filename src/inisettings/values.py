# -*- encoding: utf-8 -*-
# @File   : values.py
# @Time   : 2024/10/12 22:05:47
# @Author : Kariko Lin

"""Typed value <-> stored text.

Only five kinds of values are supported, see `ValueKind`.
Anything else is rejected with `TypeError` before any text is produced.
"""

from enum import Enum
from operator import index
from re import ASCII
from re import compile as regex
from struct import error as StructError
from struct import pack, unpack

from .exceptions import IniConversionError

__all__ = ['ValueKind', 'SupportedValue', 'decode_value', 'encode_value']

type SupportedValue = str | int | float | bool

TRUTHY_TEXTS = ('1', 'true')

# plain decimal only: no `1_000`, no `infinity`, no non-ASCII digits.
INT_TEXT = regex(r'[+-]?[0-9]+', ASCII)
FLOAT_TEXT = regex(
    r'[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf|nan)',
    ASCII)


class ValueKind(str, Enum):
    STRING = 'string'
    INT = 'int'
    FLOAT = 'float'  # single precision
    DOUBLE = 'double'
    BOOL = 'bool'

    @classmethod
    def of(cls, value: object) -> 'ValueKind':
        """Kind of a python value. `float` is always taken as `DOUBLE`."""
        # bool is a subclass of int, check it first.
        if isinstance(value, bool):
            return cls.BOOL
        if isinstance(value, int):
            return cls.INT
        if isinstance(value, float):
            return cls.DOUBLE
        if isinstance(value, str):
            return cls.STRING
        raise TypeError(
            f'unsupported value type {type(value).__name__!r}, '
            'expecting one of str, int, float, bool.')


def _to_single(value: float) -> float:
    try:
        return unpack('<f', pack('<f', value))[0]
    except (OverflowError, StructError) as e:
        raise IniConversionError(
            f'{value!r} is out of single precision range') from e


def _single_text(value: float) -> str:
    value = _to_single(value)
    # shortest text which still gives back the same single.
    for precision in range(6, 10):
        text = f'{value:.{precision}g}'
        if _to_single(float(text)) == value:
            return text
    return repr(value)


def decode_value[V: (str, int, float, bool)](
    text: str, default: V, kind: ValueKind | None = None
) -> V:
    """Convert stored `text` into the kind of `default` (or `kind`).

    Empty text always gives `default`. Numbers that fail to parse raise
    `IniConversionError` instead of falling back to `default`.
    """
    if kind is None:
        kind = ValueKind.of(default)
    if not text:
        return default

    match kind:
        case ValueKind.STRING:
            return text
        case ValueKind.BOOL:
            return text in TRUTHY_TEXTS
        case ValueKind.INT:
            if not INT_TEXT.fullmatch(text):
                raise IniConversionError(f'{text!r} is not an integer')
            return int(text, 10)
        case ValueKind.FLOAT | ValueKind.DOUBLE:
            if not FLOAT_TEXT.fullmatch(text):
                raise IniConversionError(
                    f'{text!r} is not a floating point number')
            number = float(text)
            return _to_single(number) if kind is ValueKind.FLOAT else number
    raise TypeError(f'unsupported value kind {kind!r}')


def encode_value(value: SupportedValue, kind: ValueKind | None = None) -> str:
    """Canonical text of `value`. Strings pass through unchanged."""
    if kind is None:
        kind = ValueKind.of(value)

    match kind:
        case ValueKind.STRING:
            if not isinstance(value, str):
                raise TypeError(f'{value!r} is not a string')
            return value
        case ValueKind.BOOL:
            return '1' if index(value) else '0'
        case ValueKind.INT:
            return str(index(value))
        case ValueKind.DOUBLE:
            return repr(float(value))
        case ValueKind.FLOAT:
            return _single_text(float(value))
    raise TypeError(f'unsupported value kind {kind!r}')
