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

import errno
import math
import os
import typing as t

from .commons import BIG_ENDIAN, BLOCK_SIZE, PDP11, swap_words, to_signed

__all__ = [
    "Layout",
    "LAYOUTS",
    "BIG_ENDIAN_LAYOUT",
    "PDP11_LAYOUT",
    "RawImage",
]


class Layout:
    """
    On-disk conventions of an image: byte order and mode flags
    """

    name: str
    byte_order: str
    dir_mask: int  #   mode bits selecting the file type
    dir_value: int  #  file type value of a directory
    large_flag: int  # large file (indirect addressing)

    def __init__(self, name: str, byte_order: str, dir_mask: int, dir_value: int, large_flag: int):
        self.name = name
        self.byte_order = byte_order
        self.dir_mask = dir_mask
        self.dir_value = dir_value
        self.large_flag = large_flag

    def is_directory(self, mode: int) -> bool:
        return (mode & self.dir_mask) == self.dir_value

    def struct_format(self, fmt: str) -> str:
        """
        struct format string in the byte order of the image
        """
        return (">" if self.byte_order == BIG_ENDIAN else "<") + fmt

    def long(self, val: int) -> int:
        """
        Signed 32-bit value of a long unpacked as "I"
        """
        if self.byte_order == PDP11:
            val = swap_words(val)
        return to_signed(val, 32)

    def is_large(self, mode: int) -> bool:
        return bool(mode & self.large_flag)

    def __repr__(self) -> str:
        return f"<Layout {self.name}>"


BIG_ENDIAN_LAYOUT = Layout("big", BIG_ENDIAN, dir_mask=0x8000, dir_value=0x8000, large_flag=0x1000)
# UNIX version 6, as written by a PDP-11
PDP11_LAYOUT = Layout("pdp11", PDP11, dir_mask=0o060000, dir_value=0o040000, large_flag=0o010000)

LAYOUTS: t.Dict[str, Layout] = {
    BIG_ENDIAN_LAYOUT.name: BIG_ENDIAN_LAYOUT,
    PDP11_LAYOUT.name: PDP11_LAYOUT,
}


class RawImage:
    """
    Read-only disk image

    The whole image is kept in memory; blocks are returned
    as views of the same buffer, without copying.
    """

    data: memoryview
    layout: Layout
    filename: t.Optional[str] = None

    def __init__(self, data: bytes, layout: Layout = BIG_ENDIAN_LAYOUT):
        self.data = memoryview(bytes(data))
        self.layout = layout

    @classmethod
    def from_file(cls, filename: str, layout: Layout = BIG_ENDIAN_LAYOUT) -> "RawImage":
        """
        Load the image from a file
        """
        with open(filename, "rb") as f:
            self = cls(f.read(), layout)
        self.filename = os.path.abspath(filename)
        return self

    def read_block(self, block_number: int) -> memoryview:
        """
        Read a block of the image
        """
        if block_number < 0 or (block_number + 1) * BLOCK_SIZE > len(self.data):
            raise OSError(errno.EIO, os.strerror(errno.EIO))
        position = block_number * BLOCK_SIZE
        return self.data[position : position + BLOCK_SIZE]

    def get_size(self) -> int:
        """
        Get image size in bytes
        """
        return len(self.data)

    def get_length(self) -> int:
        """
        Get the length in blocks
        """
        return int(math.ceil(self.get_size() / BLOCK_SIZE))

    def __len__(self) -> int:
        return len(self.data)

    def __str__(self) -> str:
        return self.filename or f"<image {self.get_size()} bytes>"
