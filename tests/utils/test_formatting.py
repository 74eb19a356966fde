from pyv_cache.runtime.cache import LFUCache
from pyv_cache.runtime.memory import MainMemory
from pyv_cache.utils.formatting import format_cache, format_line, print_cache


def test_format_line_layout():
    assert format_line(True, 3, 0x1f, bytes([0, 0xab, 7]), 4) == "1 3 0x001f 00 ab 07 "


def test_format_line_zero_tag_width():
    assert format_line(False, 0, 0, bytes(1), 0) == "0 0 0x0 00 "


def test_format_line_tag_wider_than_width():
    assert format_line(True, 1, 0x1234, b"", 2) == "1 1 0x1234 "


def test_format_cache_order():
    memory = MainMemory(bytearray(range(16)))
    cache = LFUCache(1, 2, 1, 2)
    cache.read(memory, 2)   # set 1, tag 0
    cache.read(memory, 5)   # set 0, tag 1
    cache.read(memory, 5)

    assert format_cache(cache) == [
        "Set 0",
        "1 2 0x01 04 05 ",
        "0 0 0x00 00 00 ",
        "Set 1",
        "1 1 0x00 02 03 ",
        "0 0 0x00 00 00 ",
    ]


def test_format_cache_is_read_only():
    memory = MainMemory(bytearray(range(16)))
    cache = LFUCache(0, 2, 2, 1)
    cache.read(memory, 0)
    before = cache.snapshot()
    format_cache(cache)
    assert cache.snapshot() == before


def test_print_cache(capsys):
    cache = LFUCache(0, 1, 0, 1)
    print_cache(cache)
    captured = capsys.readouterr()
    assert captured.out == "Set 0\n0 0 0x0 00 \n"
