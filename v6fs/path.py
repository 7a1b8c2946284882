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

import typing as t

from .directory import list_entries
from .errors import not_a_directory, not_found
from .image import RawImage
from .inode import ROOT_INODE, Inode, decode_inode

__all__ = [
    "resolve",
    "lookup_path",
    "resolve_path",
    "split_path",
    "unix_join",
]

SEPARATOR = "/"


def unix_join(a: str, *p: str) -> str:
    """
    Join two or more pathname components
    """
    path = a
    for b in p:
        if b.startswith(SEPARATOR):
            path = b
        elif not path or path.endswith(SEPARATOR):
            path += b
        else:
            path += SEPARATOR + b
    return path


def split_path(path: str) -> t.List[str]:
    """
    Split a path in components, repeated separators are collapsed
    """
    return [x for x in path.split(SEPARATOR) if x]


def encode_component(component: str) -> t.Optional[bytes]:
    try:
        return component.encode("latin-1")
    except UnicodeEncodeError:
        # Can't match any name on disk
        return None


def resolve(start_inode: Inode, components: t.Sequence[str], follow_indirect: bool = False) -> int:
    """
    Walk the components starting from a directory, return the inode number
    of the last one. Each component must be a directory.
    Large directories are walked only if follow_indirect is set.
    """
    current = start_inode
    for component in components:
        name = encode_component(component)
        for entry in list_entries(current, follow_indirect=follow_indirect):
            if entry.raw_name == name:
                child = decode_inode(entry.inode_num, current.image)
                if not child.is_directory():
                    raise not_a_directory(component)
                current = child
                break
        else:
            raise not_found(component)
    return current.inode_num


def resolve_path(image: RawImage, path: str, cwd: int = ROOT_INODE, follow_indirect: bool = False) -> int:
    """
    Resolve a path to an inode number; relative paths start from cwd
    """
    components = split_path(path)
    if path.startswith(SEPARATOR):
        if not components:
            return ROOT_INODE
        start = ROOT_INODE
    else:
        start = cwd
    return resolve(decode_inode(start, image), components, follow_indirect=follow_indirect)


def lookup_path(image: RawImage, path: str, cwd: int = ROOT_INODE, follow_indirect: bool = False) -> int:
    """
    Get the inode number of a path; unlike resolve_path,
    the last component can be any kind of file
    """
    components = split_path(path)
    if not components:
        return resolve_path(image, path, cwd, follow_indirect=follow_indirect)
    start = ROOT_INODE if path.startswith(SEPARATOR) else cwd
    parent = decode_inode(resolve(decode_inode(start, image), components[:-1], follow_indirect), image)
    name = encode_component(components[-1])
    for entry in list_entries(parent, follow_indirect=follow_indirect):
        if entry.raw_name == name:
            return entry.inode_num
    raise not_found(path)
