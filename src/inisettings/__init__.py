# -*- encoding: utf-8 -*-
# @File   : __init__.py
# @Time   : 2024/10/10 01:16:53
# @Author : Kariko Lin

import logging

from .exceptions import (
    SettingsError,
    IniStorageError,
    IniConversionError,
    IniSyntaxWarning
)
from .values import ValueKind, decode_value, encode_value
from .ini import IniTable, IniParser
from .export import IniYamlExporter, IniJsonExporter
from .settings import Settings, get_settings

__all__ = [
    'Settings', 'get_settings',
    'ValueKind', 'decode_value', 'encode_value',
    'IniTable', 'IniParser',
    'IniYamlExporter', 'IniJsonExporter',
    'SettingsError', 'IniStorageError', 'IniConversionError',
    'IniSyntaxWarning'
]

logging.basicConfig(level=logging.INFO,
                    format='[%(asctime)s] %(levelname)s: %(message)s')
