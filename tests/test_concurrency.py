import threading
from concurrent.futures import ThreadPoolExecutor

from inisettings import IniParser, Settings

WRITERS = 4
READERS = 4
ROUNDS = 50


def test_single_instance_under_race(tmp_path):
    path = tmp_path / 'race.ini'
    barrier = threading.Barrier(16)

    def grab(_):
        barrier.wait()
        return Settings.get_instance(path)

    try:
        with ThreadPoolExecutor(max_workers=16) as pool:
            got = list(pool.map(grab, range(16)))
        assert all(i is got[0] for i in got)
    finally:
        Settings.destroy_instance(path)


def test_readers_never_see_torn_values(settings, ini_path):
    padding = 'x' * 512

    def value_of(writer: int, n: int) -> str:
        return f'writer{writer}-{n}-{padding}'

    written = {
        value_of(w, n) for w in range(WRITERS) for n in range(ROUNDS)
    }
    start = threading.Barrier(WRITERS + READERS)
    done = threading.Event()
    seen: list[str] = []
    bad: list[str] = []

    def write(writer: int) -> None:
        start.wait()
        for n in range(ROUNDS):
            settings.set_value('shared.value', value_of(writer, n))
            settings.set_value(f'own.writer{writer}', n)

    def read() -> None:
        start.wait()
        while not done.is_set():
            value = settings.get_value('shared.value', 'default')
            seen.append(value)
            if value != 'default' and value not in written:
                bad.append(value)

    writers = [threading.Thread(target=write, args=(i,))
               for i in range(WRITERS)]
    readers = [threading.Thread(target=read) for _ in range(READERS)]
    for t in writers + readers:
        t.start()
    for t in writers:
        t.join()
    done.set()
    for t in readers:
        t.join()

    assert bad == []
    assert seen
    final = IniParser(str(ini_path)).read()
    assert final['shared.value'] in written
    # no writer lost its own key to another one's rewrite.
    for w in range(WRITERS):
        assert final[f'own.writer{w}'] == str(ROUNDS - 1)


def test_instances_do_not_block_each_other(settings, tmp_path):
    other = Settings.get_instance(tmp_path / 'other.ini')
    finished = threading.Event()

    def use_other():
        other.set_value('a.b', 'c')
        other.get_value('a.b')
        finished.set()

    try:
        # hold the first store busy the whole time.
        with settings._lock:
            t = threading.Thread(target=use_other)
            t.start()
            assert finished.wait(timeout=10)
            t.join()
    finally:
        Settings.destroy_instance(tmp_path / 'other.ini')
