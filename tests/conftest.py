import struct
import typing as t

import pytest

from v6fs.commons import BLOCK_SIZE
from v6fs.image import BIG_ENDIAN_LAYOUT, PDP11_LAYOUT, Layout, RawImage

LARGE = 0o010000
DIR_MODE = {
    BIG_ENDIAN_LAYOUT.name: 0x8000,
    PDP11_LAYOUT.name: 0o140000,  # allocated + directory
}
FILE_MODE = {
    BIG_ENDIAN_LAYOUT.name: 0,
    PDP11_LAYOUT.name: 0o100000,  # allocated
}


class ImageBuilder:
    """
    Build an image in memory
    """

    def __init__(self, layout: Layout = BIG_ENDIAN_LAYOUT, blocks: int = 64, isize: int = 2):
        self.layout = layout
        self.data = bytearray(blocks * BLOCK_SIZE)
        self.superblock(isize=isize, fsize=blocks)

    @property
    def dir_mode(self) -> int:
        return DIR_MODE[self.layout.name]

    @property
    def file_mode(self) -> int:
        return FILE_MODE[self.layout.name]

    def u16(self, position: int, value: int) -> None:
        fmt = ">H" if self.layout is BIG_ENDIAN_LAYOUT else "<H"
        struct.pack_into(fmt, self.data, position, value)

    def i32(self, position: int, value: int) -> None:
        value &= 0xFFFFFFFF
        if self.layout is BIG_ENDIAN_LAYOUT:
            struct.pack_into(">I", self.data, position, value)
        else:
            struct.pack_into("<HH", self.data, position, value >> 16, value & 0xFFFF)

    def superblock(
        self,
        isize: int,
        fsize: int,
        free: t.Sequence[int] = (),
        inodes: t.Sequence[int] = (),
        flags: t.Tuple[int, int, int, int] = (0, 0, 0, 0),
        time: t.Tuple[int, int] = (0, 0),
    ) -> None:
        base = BLOCK_SIZE
        self.u16(base, isize)
        self.u16(base + 2, fsize)
        self.u16(base + 4, len(free))
        for i, block_number in enumerate(free):
            self.u16(base + 6 + i * 2, block_number)
        self.u16(base + 206, len(inodes))
        for i, inode_num in enumerate(inodes):
            self.u16(base + 208 + i * 2, inode_num)
        self.data[base + 408 : base + 412] = bytes(flags)
        self.u16(base + 412, time[0])
        self.u16(base + 414, time[1])

    def inode(
        self,
        inode_num: int,
        mode: int,
        size: int = 0,
        addr: t.Sequence[int] = (),
        nlink: int = 1,
        uid: int = 0,
        gid: int = 0,
        atime: int = 0,
        mtime: int = 0,
    ) -> None:
        position = 2 * BLOCK_SIZE + 32 * (inode_num - 1)
        self.u16(position, mode)
        self.data[position + 2] = nlink
        self.data[position + 3] = uid
        self.data[position + 4] = gid
        self.data[position + 5] = size >> 16
        self.u16(position + 6, size & 0xFFFF)
        for i, block_number in enumerate(addr):
            self.u16(position + 8 + i * 2, block_number)
        self.i32(position + 24, atime)
        self.i32(position + 28, mtime)

    def directory(self, inode_num: int, block_number: int, entries: t.Sequence[t.Tuple[int, t.Union[str, bytes]]]) -> None:
        self.directory_block(block_number, entries)
        self.inode(inode_num, self.dir_mode | 0o755, size=len(entries) * 16, addr=[block_number])

    def directory_block(self, block_number: int, entries: t.Sequence[t.Tuple[int, t.Union[str, bytes]]]) -> None:
        position = block_number * BLOCK_SIZE
        for i, (inode_num, name) in enumerate(entries):
            raw_name = name.encode("ascii") if isinstance(name, str) else name
            self.u16(position + i * 16, inode_num)
            self.data[position + i * 16 + 2 : position + i * 16 + 2 + len(raw_name)] = raw_name

    def pointer_block(self, block_number: int, pointers: t.Sequence[int]) -> None:
        for i, pointer in enumerate(pointers):
            self.u16(block_number * BLOCK_SIZE + i * 2, pointer)

    def image(self) -> RawImage:
        return RawImage(bytes(self.data), self.layout)


def build_tree(layout: Layout) -> RawImage:
    """
    /
    +-- bin/            ls, fourteen_chars, caf\\xe9
    +-- etc/            passwd, rc (two blocks, empty slots)
    +-- readme          65538 bytes
    +-- big/            large directory: a, b
    +-- huge/           huge directory
    """
    b = ImageBuilder(layout)
    b.directory(1, 10, [(1, "."), (1, ".."), (2, "bin"), (3, "etc"), (4, "readme"), (8, "big"), (11, "huge")])
    b.directory(2, 11, [(2, "."), (1, ".."), (5, "ls"), (12, "fourteen_chars"), (13, b"caf\xe9")])
    # etc: second address slot unused, a deleted entry in the first block
    b.directory_block(12, [(3, "."), (1, ".."), (0, "deleted"), (6, "passwd")])
    b.directory_block(13, [(0, ""), (7, "rc")])
    b.inode(3, b.dir_mode | 0o755, size=BLOCK_SIZE + 32, addr=[12, 0, 13])
    b.inode(4, b.file_mode | 0o644, size=65538, addr=[14], uid=3, gid=1, atime=0x12345678, mtime=-2)
    b.inode(5, b.file_mode | 0o755, size=100, addr=[15])
    b.inode(6, b.file_mode | 0o644, size=20, addr=[16])
    b.inode(7, b.file_mode | 0o700, size=10, addr=[17])
    # big: pointer block 20 -> data blocks 21, 22
    b.pointer_block(20, [21, 0, 22])
    b.directory_block(21, [(8, "."), (1, ".."), (9, "a")])
    b.directory_block(22, [(10, "b")])
    b.inode(8, b.dir_mode | LARGE | 0o755, size=2 * BLOCK_SIZE, addr=[20])
    b.inode(9, b.file_mode | 0o644)
    b.inode(10, b.file_mode | 0o644)
    b.directory_block(23, [(11, "."), (1, "..")])
    b.inode(11, b.dir_mode | LARGE | 0o755, size=32, addr=[23, 0, 0, 0, 0, 0, 0, 24])
    b.inode(12, b.file_mode | 0o644)
    b.inode(13, b.file_mode | 0o644)
    return b.image()


@pytest.fixture
def builder() -> t.Callable[..., ImageBuilder]:
    return ImageBuilder


@pytest.fixture
def image() -> RawImage:
    return build_tree(BIG_ENDIAN_LAYOUT)


@pytest.fixture(params=[BIG_ENDIAN_LAYOUT, PDP11_LAYOUT], ids=lambda x: x.name)
def any_image(request: pytest.FixtureRequest) -> RawImage:
    return build_tree(request.param)


@pytest.fixture
def image_file(tmp_path) -> str:
    filename = tmp_path / "v6root"
    filename.write_bytes(bytes(build_tree(BIG_ENDIAN_LAYOUT).data))
    return str(filename)
