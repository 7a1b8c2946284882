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

from datetime import datetime, timedelta

from .commons import dump_struct, format_permissions
from .directory import DirectoryEntry
from .inode import Inode

__all__ = [
    "format_inode",
    "format_listing_entry",
    "format_permissions",
    "format_time",
    "format_type",
]

SIZE_WIDTH = 10


def format_type(inode: Inode) -> str:
    return "d" if inode.is_directory() else "-"


def format_time(t: int) -> str:
    try:
        mod_time = datetime.fromtimestamp(t)
    except (OverflowError, OSError, ValueError):
        return str(t)
    six_months_ago = datetime.now() - timedelta(days=6 * 30)
    if mod_time > six_months_ago:
        return mod_time.strftime("%b %d %H:%M")
    else:
        return mod_time.strftime("%b %d %Y ")


def format_listing_entry(entry: DirectoryEntry, inode: Inode) -> str:
    """
    Format a long listing line: type, permissions, size and name
    """
    return f"{format_type(inode)}{format_permissions(inode.mode)} {inode.size():>{SIZE_WIDTH}} {entry.display_name}"


def format_inode(inode: Inode) -> str:
    """
    Describe all the fields of an inode
    """
    lines = [
        dump_struct(inode.__dict__, exclude=["image"]),
        f"{'Size:':20s}{inode.size()}",
        f"{'Blocks:':20s}{inode.get_length()}",
        f"{'Type:':20s}{'directory' if inode.is_directory() else 'file'}{' (large)' if inode.is_large() else ''}",
        f"{'Permissions:':20s}{format_permissions(inode.mode)}",
        f"{'Addr:':20s}{' '.join(str(x) for x in inode.addr)}",
        f"{'Atime:':20s}{format_time(inode.atime)}",
        f"{'Mtime:':20s}{format_time(inode.mtime)}",
    ]
    return "\n".join(lines)
