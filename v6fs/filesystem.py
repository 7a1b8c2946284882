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

import posixpath
import sys
import typing as t

from .commons import BLOCK_SIZE, hex_dump
from .directory import DirectoryEntry, list_entries
from .errors import not_a_directory
from .format import format_inode, format_listing_entry
from .image import RawImage
from .inode import ROOT_INODE, Inode, decode_inode, inode_count
from .path import lookup_path, resolve_path, unix_join
from .superblock import SuperBlock, decode_superblock

__all__ = [
    "V6Filesystem",
]


class V6Filesystem:
    """
    Read-only UNIX version 6 style filesystem with a current directory
    """

    fs_name = "unix6"
    fs_description = "UNIX version 6"
    image: RawImage
    cwd: int  #               current directory inode number
    pwd: str  #               current directory path
    follow_indirect: bool  #  list large directories

    def __init__(self, image: RawImage, follow_indirect: bool = False):
        self.image = image
        self.follow_indirect = follow_indirect
        self.cwd = ROOT_INODE
        self.pwd = "/"

    @classmethod
    def mount(cls, image: RawImage, follow_indirect: bool = False) -> "V6Filesystem":
        self = cls(image, follow_indirect=follow_indirect)
        # Fail early on images without an inode list
        self.read_inode(ROOT_INODE)
        return self

    @property
    def superblock(self) -> SuperBlock:
        return decode_superblock(self.image)

    def read_inode(self, inode_num: int) -> Inode:
        """
        Read inode by number
        """
        return decode_inode(inode_num, self.image)

    def get_inode(self, path: t.Optional[str] = None) -> Inode:
        """
        Get inode by path, relative to the current directory
        """
        if not path:
            return self.read_inode(self.cwd)
        return self.read_inode(lookup_path(self.image, path, self.cwd, follow_indirect=self.follow_indirect))

    def list_dir(self, path: t.Optional[str] = None) -> t.List[DirectoryEntry]:
        """
        List the entries of a directory (default the current directory)
        """
        inode = self.get_inode(path)
        if not inode.is_directory():
            raise not_a_directory(path)
        return list_entries(inode, follow_indirect=self.follow_indirect)

    def ls(self, path: t.Optional[str] = None, long: bool = False) -> t.List[str]:
        """
        Listing of a directory, names only or with type, permissions and size
        """
        entries = self.list_dir(path)
        if not long:
            return [entry.display_name for entry in entries]
        return [format_listing_entry(entry, self.read_inode(entry.inode_num)) for entry in entries]

    def chdir(self, path: str) -> int:
        """
        Change the current directory, the current
        directory is not changed if the path is not valid
        """
        inode_num = resolve_path(self.image, path, self.cwd, follow_indirect=self.follow_indirect)
        self.cwd = inode_num
        self.pwd = posixpath.normpath(unix_join(self.pwd, path))
        if self.pwd.startswith("//"):
            self.pwd = self.pwd[1:]
        return inode_num

    def get_pwd(self) -> str:
        """
        Get the current directory
        """
        return self.pwd

    def examine(self, arg: t.Optional[str] = None) -> str:
        """
        Describe an inode, by path or by number (#number)
        """
        if arg and arg.startswith("#") and arg[1:].isdigit():
            inode = self.read_inode(int(arg[1:]))
        else:
            inode = self.get_inode(arg)
        lines = [format_inode(inode)]
        if inode.is_directory():
            lines.append("Directory entries:")
            for entry in list_entries(inode, follow_indirect=self.follow_indirect):
                lines.append(str(entry))
        return "\n".join(lines)

    def dump(self, start: int, end: t.Optional[int] = None) -> None:
        """
        Dump a range of blocks of the image
        """
        if end is None:
            end = start
        for block_number in range(start, end + 1):
            data = self.image.read_block(block_number)
            sys.stdout.write(f"\nBLOCK NUMBER   {block_number:08}\n")
            hex_dump(data)

    def get_size(self) -> int:
        """
        Get filesystem size in bytes
        """
        return self.image.get_size()

    def __str__(self) -> str:
        return f"{self.fs_description} {self.image} ({inode_count(self.image)} inodes, {self.get_size() // BLOCK_SIZE} blocks)"
