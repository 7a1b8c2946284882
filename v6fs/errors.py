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
import os
import typing as t

__all__ = [
    "InvalidInodeError",
    "InvalidNameError",
    "UnsupportedAddressingError",
    "not_a_directory",
    "not_found",
]


class InvalidInodeError(OSError):
    """
    Inode number outside of the inode list
    """

    inode_num: int

    def __init__(self, inode_num: int):
        super().__init__(errno.EINVAL, f"Invalid inode number {inode_num}")
        self.inode_num = inode_num


class UnsupportedAddressingError(OSError):
    """
    The inode uses an addressing mode that cannot be resolved
    """

    inode_num: int

    def __init__(self, inode_num: int, reason: str = "huge file addressing"):
        super().__init__(errno.EOPNOTSUPP, f"Unsupported {reason} for inode {inode_num}")
        self.inode_num = inode_num


class InvalidNameError(OSError):
    """
    Directory entry name is not valid ASCII
    """

    raw_name: bytes

    def __init__(self, raw_name: bytes):
        super().__init__(errno.EILSEQ, os.strerror(errno.EILSEQ), raw_name.decode("ascii", errors="backslashreplace"))
        self.raw_name = raw_name


def not_found(name: t.Optional[str] = None) -> FileNotFoundError:
    return FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), name)


def not_a_directory(name: t.Optional[str] = None) -> NotADirectoryError:
    return NotADirectoryError(errno.ENOTDIR, os.strerror(errno.ENOTDIR), name)
