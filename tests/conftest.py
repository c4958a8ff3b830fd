import os

import pytest

from inisettings import Settings


def touch_later(path) -> None:
    """Push mtime one second forward, so a same-size edit is still seen."""
    st = os.stat(path)
    os.utime(path, ns=(st.st_atime_ns, st.st_mtime_ns + 1_000_000_000))


def write_externally(path, text: str) -> None:
    with open(path, 'w', encoding='utf-8') as fp:
        fp.write(text)
    touch_later(path)


@pytest.fixture
def ini_path(tmp_path):
    return tmp_path / 'cfg' / 'settings.ini'


@pytest.fixture
def settings(ini_path):
    ins = Settings.get_instance(ini_path)
    yield ins
    Settings.destroy_instance(ini_path)
