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

__version__ = "0.1.0"

from .directory import DirectoryEntry, list_entries
from .errors import InvalidInodeError, InvalidNameError, UnsupportedAddressingError
from .filesystem import V6Filesystem
from .format import format_listing_entry
from .image import BIG_ENDIAN_LAYOUT, PDP11_LAYOUT, RawImage
from .inode import ROOT_INODE, Inode, decode_inode
from .path import resolve, resolve_path
from .superblock import SuperBlock, decode_superblock

__all__ = [
    "BIG_ENDIAN_LAYOUT",
    "PDP11_LAYOUT",
    "ROOT_INODE",
    "DirectoryEntry",
    "Inode",
    "InvalidInodeError",
    "InvalidNameError",
    "RawImage",
    "SuperBlock",
    "UnsupportedAddressingError",
    "V6Filesystem",
    "decode_inode",
    "decode_superblock",
    "format_listing_entry",
    "list_entries",
    "resolve",
    "resolve_path",
]
