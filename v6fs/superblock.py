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

from .commons import BLOCK_SIZE, dump_struct
from .image import RawImage

__all__ = [
    "SuperBlock",
    "decode_superblock",
    "NICFREE",
    "NICINOD",
    "SUPER_BLOCK",
]

SUPER_BLOCK = 1  # Superblock block number
NICFREE = 100  # number of superblock free blocks
NICINOD = 100  # number of superblock inodes
INODE_SIZE = 32
INODES_PER_BLOCK = BLOCK_SIZE // INODE_SIZE
SUPER_BLOCK_FORMAT = f"HHH {NICFREE}H H {NICINOD}H BBBB HH"


class SuperBlock:
    """
    Superblock, the second block of the image
    """

    isize: int  #              number of blocks devoted to the i-list
    fsize: int  #              size in blocks of entire volume
    nfree: int  #              number of in core free blocks
    free: t.List[int]  #       in core free blocks
    ninode: int  #             number of in core i-nodes
    inode: t.List[int]  #      in core free i-nodes
    flock: int  #              lock during free list manipulation
    ilock: int  #              lock during i-list manipulation
    fmod: int  #               super block modified flag
    ronly: int  #              mounted read-only flag
    time: t.Tuple[int, int]  # current date of last update

    @classmethod
    def read(cls, image: RawImage) -> "SuperBlock":
        self = SuperBlock()
        block = image.read_block(SUPER_BLOCK)
        superblock = struct.unpack_from(image.layout.struct_format(SUPER_BLOCK_FORMAT), block, 0)
        (
            self.isize,
            self.fsize,
            self.nfree,
        ) = superblock[0:3]
        self.free = list(superblock[3 : 3 + NICFREE])
        self.ninode = superblock[3 + NICFREE]
        self.inode = list(superblock[4 + NICFREE : 4 + NICFREE + NICINOD])
        (
            self.flock,
            self.ilock,
            self.fmod,
            self.ronly,
        ) = superblock[4 + NICFREE + NICINOD : 8 + NICFREE + NICINOD]
        self.time = (superblock[8 + NICFREE + NICINOD], superblock[9 + NICFREE + NICINOD])
        return self

    @property
    def inode_count(self) -> int:
        """
        Number of inodes in the i-list
        """
        return self.isize * INODES_PER_BLOCK

    def check(self, image: t.Optional[RawImage] = None) -> t.List[str]:
        """
        Sanity check of the geometry, returns the list of the problems found
        """
        problems = []
        if self.fsize < self.isize + 2:
            problems.append(f"volume size {self.fsize} smaller than the i-list ({self.isize} blocks)")
        if image is not None and self.fsize > image.get_length():
            problems.append(f"volume size {self.fsize} exceeds the image ({image.get_length()} blocks)")
        if self.nfree > NICFREE:
            problems.append(f"free block count {self.nfree} exceeds {NICFREE}")
        if self.ninode > NICINOD:
            problems.append(f"free inode count {self.ninode} exceeds {NICINOD}")
        return problems

    def __str__(self) -> str:
        return dump_struct(self.__dict__, include=["time"]) + f"\n{'Inode Count:':20s}{self.inode_count}"


def decode_superblock(image: RawImage) -> SuperBlock:
    """
    Decode the superblock of the image
    """
    return SuperBlock.read(image)
