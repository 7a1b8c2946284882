# Copyright (C) 2014 Andrea Bonomi <andrea.bonomi@gmail.com>

# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to
# deal in the Software without restriction, including without limitation the
# rights to use, copy, modify, merge, publish, distribute, sublicense, and/or
# sell copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in
# all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN
# THE SOFTWARE.

__all__ = [
    "BLOCK_SIZE",
    "BIG_ENDIAN",
    "PDP11",
    "dump_struct",
    "format_permissions",
    "hex_dump",
    "read_i32_be",
    "read_u16_be",
    "swap_words",
    "to_signed",
]

import sys
from typing import Any, Dict, List

BLOCK_SIZE = 512
BYTES_PER_LINE = 16
BIG_ENDIAN = "big"  # Most significant byte first
PDP11 = "pdp11"  # Little-endian words, most significant word first

PERMS = [
    (0o400, "r"),
    (0o200, "w"),
    (0o100, "x"),
    (0o040, "r"),
    (0o020, "w"),
    (0o010, "x"),
    (0o004, "r"),
    (0o002, "w"),
    (0o001, "x"),
]


def to_signed(val: int, bits: int) -> int:
    """
    Interpret an unsigned integer as two's complement
    """
    if val & (1 << (bits - 1)):
        return val - (1 << bits)
    return val


def read_u16_be(val: bytes, position: int = 0) -> int:
    """
    Converts two bytes to a single unsigned word, most significant byte first
    """
    return val[0 + position] << 8 | val[1 + position]


def read_i32_be(val: bytes, position: int = 0) -> int:
    """
    Converts four bytes to a signed long, most significant byte first
    """
    return to_signed(read_u16_be(val, position) << 16 | read_u16_be(val, position + 2), 32)


def swap_words(val: int) -> int:
    """
    Swap high order and low order word in a 32-bit integer
    """
    return (val >> 16) + ((val & 0xFFFF) << 16)


def hex_dump(data: bytes, bytes_per_line: int = BYTES_PER_LINE) -> None:
    """
    Display contents in hexadecimal
    """
    for i in range(0, len(data), bytes_per_line):
        line = data[i : i + bytes_per_line]
        hex_str = " ".join([f"{x:02x}" for x in line])
        ascii_str = "".join([chr(x) if 32 <= x <= 126 else "." for x in line])
        sys.stdout.write(f"{i:08x}   {hex_str.ljust(3 * bytes_per_line)}  {ascii_str}\n")


def dump_struct(d: Dict[str, Any], exclude: List[str] = [], include: List[str] = []) -> str:
    result: List[str] = []
    for k, v in d.items():
        if (type(v) in (int, str, bytes, bool) or k in include) and k not in exclude:
            if len(k) < 6:
                label = k.upper() + ":"
            else:
                label = k.replace("_", " ").title() + ":"
            result.append(f"{label:20s}{v}")
    return "\n".join(result)


def format_permissions(mode: int) -> str:
    """
    Format the low 9 bits of the mode as rwxrwxrwx
    """
    return "".join(ch if mode & flag else "-" for flag, ch in PERMS)
