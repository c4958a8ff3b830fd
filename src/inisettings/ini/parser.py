# -*- encoding: utf-8 -*-
# @File   : parser.py
# @Time   : 2024/10/10 01:04:45
# @Author : Kariko Lin

"""Note: the syntax accepted here is deliberately small.

    ```ini
    ; comment, so does `#`. ONLY at the start of a line.
    [section]
    key = value  ; NOT a comment, it's part of the value.
    ```

- no multi-line values, no escaping, no quoting.
- a key line before any `[section]` is dropped.
- duplicated sections merge, duplicated keys: the later one wins.

Every dropped (or overridden) line gets an `IniSyntaxWarning`.
"""

from io import StringIO, TextIOBase
from typing import TextIO
from warnings import warn

import chardet

from .model import COMMENT_MARKS, IniTable, join_key
from ..abstract import FileHandler
from ..exceptions import IniSyntaxWarning


class IniParser(FileHandler[IniTable]):
    @staticmethod
    def readstream(buf: TextIOBase | TextIO,
                   ins: IniTable | None = None) -> IniTable:
        """读取解码好的字符串流，结果并入`ins`（不给就新建一个）。

        如没有特殊需求，直接调用`self.read()`便是。
        """
        if ins is None:
            ins = IniTable()
        section = ''
        seen_sections: set[str] = set()
        for lineno, line in enumerate(buf, 1):
            line = line.strip()
            if not line or line[0] in COMMENT_MARKS:
                continue

            if line[0] == '[':
                end = line.find(']')
                if end < 0:
                    warn(f'line {lineno}: unmatched "[": {line}',
                         IniSyntaxWarning, stacklevel=2)
                    continue
                section = line[1:end].strip()
                if section in seen_sections:
                    warn(f'line {lineno}: duplicated section [{section}]',
                         IniSyntaxWarning, stacklevel=2)
                seen_sections.add(section)
                continue

            if not section:
                warn(f'line {lineno}: no section for "{line}"',
                     IniSyntaxWarning, stacklevel=2)
                continue
            eq = line.find('=')
            if eq < 0:
                warn(f'line {lineno}: unmatched "=": {line}',
                     IniSyntaxWarning, stacklevel=2)
                continue
            if eq == 0:
                warn(f'line {lineno}: empty key: {line}',
                     IniSyntaxWarning, stacklevel=2)
                continue

            combined_key = join_key(section, line[:eq].strip())
            if combined_key in ins:
                warn(f'line {lineno}: duplicated key {combined_key}, '
                     f'"{ins[combined_key]}" overridden',
                     IniSyntaxWarning, stacklevel=2)
            ins[combined_key] = line[eq + 1:].strip()
        return ins

    @staticmethod
    def loads(text: str) -> IniTable:
        return IniParser.readstream(StringIO(text))

    @staticmethod
    def _decode_file(filename: str) -> StringIO:
        with open(filename, 'rb') as fp:
            raw = fp.read()

        codec = chardet.detect(raw)
        if codec['encoding'] is None or codec['confidence'] < 0.8:
            codec['encoding'] = 'utf-8'
        # still failing here means the file is simply broken.
        return StringIO(raw.decode(codec['encoding']))

    def read(self) -> IniTable:
        """读取`IniParser`实例指定的文件。

        May raise `OSError`, or `UnicodeDecodeError`
        when neither the given encoding nor the guessed one fits.
        """
        try:
            # when encoding got wrong,
            # just `UnicodeDecodeError` and fallback to `chardet`.
            with open(self._fn, 'r', encoding=self._codec) as fp:
                return self.readstream(fp)
        except UnicodeDecodeError:
            return self.readstream(self._decode_file(self._fn))

    @staticmethod
    def writestream(
        instance: IniTable, buf: TextIOBase | TextIO, *,
        blank_lines: int = 1
    ) -> None:
        """Output sections in key order. Entries with empty value,
        or without a section name, are NOT written."""
        for cnt, meta in enumerate(instance.iter_sections()):
            if cnt > 0:
                buf.write('\n' * blank_lines)
            buf.write(f'[{meta["section"]}]\n')
            for k, v in meta['pairs'].items():
                buf.write(f'{k}={v}\n')

    @staticmethod
    def dumps(instance: IniTable, *, blank_lines: int = 1) -> str:
        buf = StringIO()
        IniParser.writestream(instance, buf, blank_lines=blank_lines)
        return buf.getvalue()

    def write(self, instance: IniTable, *, blank_lines: int = 1) -> None:
        """保存到*一个* INI 文件（整个覆盖，不追加）。"""
        with open(self._fn, 'w', encoding=self._codec) as fp:
            self.writestream(instance, fp, blank_lines=blank_lines)

    def __str__(self) -> str:
        return "INI file: " + super().__str__() + f"({self._codec})"
