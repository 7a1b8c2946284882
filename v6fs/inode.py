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

import math
import struct
import typing as t
from abc import ABC, abstractmethod

from .commons import BLOCK_SIZE, format_permissions
from .errors import InvalidInodeError, UnsupportedAddressingError
from .image import RawImage
from .superblock import INODE_SIZE, INODES_PER_BLOCK, SUPER_BLOCK

__all__ = [
    "BlockMap",
    "DirectBlockMap",
    "IndirectBlockMap",
    "Inode",
    "decode_inode",
    "inode_count",
    "ROOT_INODE",
]

ROOT_INODE = 1  # Root directory inode number
INODE_LIST_OFFSET = (SUPER_BLOCK + 1) * BLOCK_SIZE
NADDR = 8  # number of address slots
POINTERS_PER_BLOCK = BLOCK_SIZE // 2
INODE_FORMAT = f"HBBBBH {NADDR}H II"
assert struct.calcsize("<" + INODE_FORMAT) == INODE_SIZE


def inode_position(inode_num: int) -> int:
    """
    Byte offset of an inode in the image
    """
    return INODE_LIST_OFFSET + INODE_SIZE * (inode_num - 1)


def inode_count(image: RawImage) -> int:
    """
    Number of inodes that can be decoded from the image
    """
    records = max(0, image.get_size() - INODE_LIST_OFFSET) // INODE_SIZE
    if records == 0:
        return 0
    (isize,) = struct.unpack_from(image.layout.struct_format("H"), image.data, SUPER_BLOCK * BLOCK_SIZE)
    if isize == 0:
        return records
    return min(isize * INODES_PER_BLOCK, records)


class BlockMap(ABC):
    """
    Maps the logical blocks of a file to the physical blocks of the image
    """

    @abstractmethod
    def physical_block(self, logical_index: int) -> int:
        """
        Physical block address of a logical block, 0 if not allocated
        """

    @abstractmethod
    def blocks(self) -> t.Iterator[int]:
        """
        Iterate over the allocated physical blocks, in logical order
        """


class DirectBlockMap(BlockMap):
    """
    Small file, the address slots are the data blocks
    """

    addr: t.Tuple[int, ...]

    def __init__(self, addr: t.Tuple[int, ...]):
        self.addr = addr

    def physical_block(self, logical_index: int) -> int:
        return self.addr[logical_index]

    def blocks(self) -> t.Iterator[int]:
        for block_number in self.addr:
            if block_number != 0:
                yield block_number


class IndirectBlockMap(BlockMap):
    """
    Large file, each address slot points to a block of block numbers
    """

    image: RawImage
    addr: t.Tuple[int, ...]

    def __init__(self, image: RawImage, addr: t.Tuple[int, ...]):
        self.image = image
        self.addr = addr

    def read_pointers(self, block_number: int) -> t.List[int]:
        block = self.image.read_block(block_number)
        return list(struct.unpack_from(self.image.layout.struct_format(f"{POINTERS_PER_BLOCK}H"), block, 0))

    def physical_block(self, logical_index: int) -> int:
        slot, index = divmod(logical_index, POINTERS_PER_BLOCK)
        indirect_block = self.addr[slot]
        if indirect_block == 0:
            return 0
        return self.read_pointers(indirect_block)[index]

    def blocks(self) -> t.Iterator[int]:
        for indirect_block in self.addr:
            if indirect_block != 0:
                for block_number in self.read_pointers(indirect_block):
                    if block_number != 0:
                        yield block_number


class Inode:

    image: RawImage
    inode_num: int  #             inode number
    mode: int  #                  type and permission bits
    nlink: int  #                 number of links to file
    uid: int  #                   user ID of owner
    gid: int  #                   group ID of owner
    size_high: int  #             high byte of 24-bit size
    size_low: int  #              low word of 24-bit size
    addr: t.Tuple[int, ...]  #    block numbers
    atime: int = 0  #             time of last access
    mtime: int = 0  #             time of last modification

    def __init__(self, image: RawImage):
        self.image = image

    @classmethod
    def read(cls, image: RawImage, inode_num: int) -> "Inode":
        if inode_num < 1 or inode_num > inode_count(image):
            raise InvalidInodeError(inode_num)
        self = Inode(image)
        self.inode_num = inode_num
        layout = image.layout
        (
            self.mode,  #       1 word  type and permission bits
            self.nlink,  #      1 byte  number of links to file
            self.uid,  #        1 byte  user ID of owner
            self.gid,  #        1 byte  group ID of owner
            self.size_high,  #  1 byte  high byte of 24-bit size
            self.size_low,  #   1 word  low word of 24-bit size
            *addr,  #           8 words block numbers
            atime,  #           1 long  time of last access
            mtime,  #           1 long  time of last modification
        ) = struct.unpack_from(layout.struct_format(INODE_FORMAT), image.data, inode_position(inode_num))
        self.addr = tuple(addr)
        self.atime = layout.long(atime)
        self.mtime = layout.long(mtime)
        return self

    def size(self) -> int:
        """
        File size in bytes
        """
        return (self.size_high << 16) + self.size_low

    def get_length(self) -> int:
        """
        Get the length in blocks
        """
        return int(math.ceil(self.size() / BLOCK_SIZE))

    def is_directory(self) -> bool:
        return self.image.layout.is_directory(self.mode)

    def is_large(self) -> bool:
        return self.image.layout.is_large(self.mode)

    def is_huge(self) -> bool:
        """
        Extra-large files are not marked by any flag, but only by having addr[7] non-zero
        """
        return self.is_large() and self.addr[NADDR - 1] != 0

    def permissions(self) -> str:
        """
        Permission bits as rwxrwxrwx
        """
        return format_permissions(self.mode)

    def block_map(self) -> BlockMap:
        if not self.is_large():
            return DirectBlockMap(self.addr)
        elif self.is_huge():
            raise UnsupportedAddressingError(self.inode_num)
        else:
            return IndirectBlockMap(self.image, self.addr)

    def _fields(self) -> t.Tuple[t.Any, ...]:
        return (
            self.inode_num,
            self.mode,
            self.nlink,
            self.uid,
            self.gid,
            self.size_high,
            self.size_low,
            self.addr,
            self.atime,
            self.mtime,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Inode):
            return NotImplemented
        return self._fields() == other._fields()

    def __hash__(self) -> int:
        return hash(self._fields())

    def __str__(self) -> str:
        return (
            f"{self.inode_num:>4}# {self.uid:>3},{self.gid:<3} nlinks: {self.nlink:>3} "
            f"size: {self.size():>8}  {self.permissions()} mode: {self.mode:06o}"
        )

    def __repr__(self) -> str:
        return f"<Inode {self.inode_num} mode={self.mode:06o} size={self.size()} addr={list(self.addr)}>"


def decode_inode(index: int, image: RawImage) -> Inode:
    """
    Decode the inode by number (1-based)
    """
    return Inode.read(image, index)
