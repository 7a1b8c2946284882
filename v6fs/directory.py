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

import struct
import typing as t

from .errors import InvalidNameError, UnsupportedAddressingError
from .image import Layout
from .inode import Inode

__all__ = [
    "DirectoryEntry",
    "list_entries",
    "FILENAME_LEN",
    "DIR_ENTRY_SIZE",
]

FILENAME_LEN = 14
DIR_FORMAT = f"H{FILENAME_LEN}s"
DIR_ENTRY_SIZE = struct.calcsize("<" + DIR_FORMAT)


class DirectoryEntry(t.NamedTuple):
    """
    Directory entry, the name is kept as latin-1 text
    so it can be converted back to the bytes on disk
    """

    inode_num: int
    name: str

    @classmethod
    def from_bytes(cls, inode_num: int, raw_name: bytes) -> "DirectoryEntry":
        return cls(inode_num, bytes(raw_name).rstrip(b"\x00").decode("latin-1"))

    @property
    def raw_name(self) -> bytes:
        return self.name.encode("latin-1")

    def decode_name(self) -> str:
        """
        Decode the name as ASCII, raise InvalidNameError if not valid
        """
        try:
            return self.raw_name.decode("ascii")
        except UnicodeDecodeError:
            raise InvalidNameError(self.raw_name)

    @property
    def display_name(self) -> str:
        return self.raw_name.decode("ascii", errors="backslashreplace")

    def __str__(self) -> str:
        return f"{self.inode_num:>5} {self.display_name}"


def read_entries(block: bytes, layout: Layout) -> t.Iterator[DirectoryEntry]:
    """
    Decode the directory entries of a block, skipping the unused slots
    """
    for inode_num, name in struct.iter_unpack(layout.struct_format(DIR_FORMAT), block):
        if inode_num != 0:
            yield DirectoryEntry.from_bytes(inode_num, name)


def list_entries(inode: Inode, follow_indirect: bool = False) -> t.List[DirectoryEntry]:
    """
    List the entries of a directory, in on-disk order

    Large directories are listed as empty unless follow_indirect
    is set; huge directories (double indirect addressing) are
    always listed as empty.
    """
    if inode.is_large() and not follow_indirect:
        return []
    try:
        block_map = inode.block_map()
    except UnsupportedAddressingError:
        return []
    result: t.List[DirectoryEntry] = []
    for block_number in block_map.blocks():
        block = inode.image.read_block(block_number)
        result.extend(read_entries(block, inode.image.layout))
    return result
