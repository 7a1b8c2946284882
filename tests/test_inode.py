import pytest

from v6fs.commons import BLOCK_SIZE
from v6fs.errors import InvalidInodeError, UnsupportedAddressingError
from v6fs.image import BIG_ENDIAN_LAYOUT, RawImage
from v6fs.inode import (
    ROOT_INODE,
    DirectBlockMap,
    IndirectBlockMap,
    decode_inode,
    inode_count,
    inode_position,
)


def test_inode_position():
    assert inode_position(1) == 1024
    assert inode_position(2) == 1056
    assert inode_position(17) == 1024 + 32 * 16


def test_decode_inode(any_image):
    inode = decode_inode(4, any_image)
    assert inode.inode_num == 4
    assert inode.mode & 0o777 == 0o644
    assert inode.nlink == 1
    assert inode.uid == 3
    assert inode.gid == 1
    assert inode.size_high == 1
    assert inode.size_low == 2
    assert inode.size() == 65538
    assert inode.get_length() == 129
    assert inode.addr == (14, 0, 0, 0, 0, 0, 0, 0)
    assert inode.atime == 0x12345678
    assert inode.mtime == -2
    assert not inode.is_directory()
    assert not inode.is_large()
    assert inode.permissions() == "rw-r--r--"


def test_decode_root(any_image):
    root = decode_inode(ROOT_INODE, any_image)
    assert root.is_directory()
    assert root.permissions() == "rwxr-xr-x"
    assert root.size() == 7 * 16
    assert root.addr[0] == 10


def test_decode_is_deterministic(any_image):
    for i in range(1, inode_count(any_image) + 1):
        assert decode_inode(i, any_image) == decode_inode(i, any_image)
    assert decode_inode(1, any_image) != decode_inode(2, any_image)


def test_fields_of_other_inodes_do_not_leak(builder):
    b = builder()
    b.inode(1, 0x8000 | 0o755, uid=7, gid=8, size=0x020304)
    b.inode(2, 0o600, uid=1, gid=2, size=5)
    image = b.image()
    inode = decode_inode(2, image)
    assert (inode.uid, inode.gid, inode.size()) == (1, 2, 5)


def test_invalid_inode(image):
    assert inode_count(image) == 32
    decode_inode(32, image)
    for inode_num in (0, -1, 33, 1000):
        with pytest.raises(InvalidInodeError):
            decode_inode(inode_num, image)


def test_inode_count(builder):
    # Inode count bounded by the image size
    b = builder(blocks=3, isize=10)
    assert inode_count(b.image()) == 16
    # Without isize, the image size is used
    b = builder(blocks=4, isize=0)
    assert inode_count(b.image()) == 32
    # No inode list
    assert inode_count(RawImage(bytes(2 * BLOCK_SIZE))) == 0
    with pytest.raises(InvalidInodeError):
        decode_inode(ROOT_INODE, RawImage(bytes(2 * BLOCK_SIZE)))


def test_direct_block_map(any_image):
    etc = decode_inode(3, any_image)
    block_map = etc.block_map()
    assert isinstance(block_map, DirectBlockMap)
    assert list(block_map.blocks()) == [12, 13]
    assert block_map.physical_block(0) == 12
    assert block_map.physical_block(1) == 0
    assert block_map.physical_block(2) == 13
    with pytest.raises(IndexError):
        block_map.physical_block(8)


def test_indirect_block_map(any_image):
    big = decode_inode(8, any_image)
    assert big.is_directory()
    assert big.is_large()
    assert not big.is_huge()
    block_map = big.block_map()
    assert isinstance(block_map, IndirectBlockMap)
    assert list(block_map.blocks()) == [21, 22]
    assert block_map.physical_block(0) == 21
    assert block_map.physical_block(1) == 0
    assert block_map.physical_block(2) == 22
    assert block_map.physical_block(256) == 0


def test_huge_block_map(any_image):
    huge = decode_inode(11, any_image)
    assert huge.is_huge()
    with pytest.raises(UnsupportedAddressingError):
        huge.block_map()


def test_str(image):
    assert "rw-r--r--" in str(decode_inode(4, image))
    assert "addr=[14," in repr(decode_inode(4, image))
    assert image.layout is BIG_ENDIAN_LAYOUT
