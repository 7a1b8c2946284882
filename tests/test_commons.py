import pytest

from v6fs.commons import format_permissions, read_i32_be, read_u16_be, swap_words, to_signed
from v6fs.image import BIG_ENDIAN_LAYOUT, PDP11_LAYOUT


def test_read_u16_be():
    assert read_u16_be(b"\x00\x01") == 1
    assert read_u16_be(b"\x01\x00") == 256
    assert read_u16_be(b"\xff\xff") == 65535
    assert read_u16_be(b"\x01\xab\xcd", position=1) == 0xABCD
    # Out of bounds
    with pytest.raises(IndexError):
        read_u16_be(b"\x01\x02", position=1)


def test_read_i32_be():
    assert read_i32_be(b"\x00\x00\x00\x01") == 1
    assert read_i32_be(b"\x12\x34\x56\x78") == 0x12345678
    assert read_i32_be(b"\x7f\xff\xff\xff") == 2**31 - 1
    assert read_i32_be(b"\x80\x00\x00\x00") == -(2**31)
    assert read_i32_be(b"\xff\xff\xff\xfe") == -2
    assert read_i32_be(b"\x00\x00\x00\x00\x00\x2a", position=2) == 42
    with pytest.raises(IndexError):
        read_i32_be(b"\x00\x00\x00")


def test_swap_words():
    assert swap_words(0x12345678) == 0x56781234
    assert swap_words(swap_words(0xCAFEBABE)) == 0xCAFEBABE


def test_layout():
    assert BIG_ENDIAN_LAYOUT.struct_format("H") == ">H"
    assert PDP11_LAYOUT.struct_format("H") == "<H"
    assert BIG_ENDIAN_LAYOUT.long(0x12345678) == 0x12345678
    assert BIG_ENDIAN_LAYOUT.long(0xFFFFFFFE) == -2
    # High order word first
    assert PDP11_LAYOUT.long(0x56781234) == 0x12345678
    assert PDP11_LAYOUT.long(0xFFFEFFFF) == -2
    assert BIG_ENDIAN_LAYOUT.is_directory(0x8000 | 0o755)
    assert not BIG_ENDIAN_LAYOUT.is_directory(0o755)
    assert PDP11_LAYOUT.is_directory(0o140755)
    assert not PDP11_LAYOUT.is_directory(0o100644)
    assert PDP11_LAYOUT.is_large(0o150755)


def test_to_signed():
    assert to_signed(0, 32) == 0
    assert to_signed(0xFFFFFFFF, 32) == -1
    assert to_signed(0x7FFF, 16) == 0x7FFF
    assert to_signed(0x8000, 16) == -0x8000


def test_format_permissions():
    assert format_permissions(0b111101101) == "rwxr-xr-x"
    assert format_permissions(0o644) == "rw-r--r--"
    assert format_permissions(0) == "---------"
    assert format_permissions(0o777) == "rwxrwxrwx"
    # Type bits are ignored
    assert format_permissions(0x8000 | 0o750) == "rwxr-x---"
