import io

import pytest

from bitstream import (COUNT_MASK, FOOTER, MAGIC, REC_SIZE, FormatError,
                       encode_tree, node_record, read_tree, unpack_record)
from huffman import Node, tree_to_string, build_tree
from iohandlers import ByteReader


def _tree(data: bytes):
    return build_tree(ByteReader(data))


def test_magic_bytes():
    assert MAGIC == b"{hu|m}ff"
    assert FOOTER == b"\x00" * 8


def test_empty_tree_is_header_and_footer():
    assert encode_tree(_tree(b"")) == MAGIC + FOOTER


def test_record_layout():
    assert node_record(Node(count=1, tag=97)) == b"\x03\x00\x00\x00\x00\x00\x00\x61"
    assert node_record(Node(count=2, tag=451, left=0, right=1)) == b"\x04" + b"\x00" * 7


def test_record_is_memoized():
    n = Node(count=5, tag=1)
    first = node_record(n)
    n.count = 9
    assert node_record(n) is first


def test_count_truncated_to_55_bits():
    leaf, count, sym = unpack_record(node_record(Node(count=(1 << 55) + 7, tag=200)))
    assert (leaf, count, sym) == (True, 7, 200)
    _, count, _ = unpack_record(node_record(Node(count=COUNT_MASK, tag=0)))
    assert count == COUNT_MASK


def test_preorder_frame():
    blob = encode_tree(_tree(b"ab"))
    assert blob == (MAGIC
                    + b"\x04" + b"\x00" * 7
                    + b"\x03" + b"\x00" * 6 + b"a"
                    + b"\x03" + b"\x00" * 6 + b"b"
                    + FOOTER)


@pytest.mark.parametrize("data", [b"a", b"ab", b"aaabbc", b"abcd", bytes(range(256))])
def test_read_tree_rebuilds_same_tree(data):
    tree = _tree(data)
    back = read_tree(io.BytesIO(encode_tree(tree)))
    assert tree_to_string(back) == tree_to_string(tree)
    assert back.paths == tree.paths
    assert len(encode_tree(tree)) == 16 + REC_SIZE * (2 * len(set(data)) - 1)


def test_read_tree_stops_at_footer():
    f = io.BytesIO(encode_tree(_tree(b"hello")) + b"PAYLOAD")
    read_tree(f)
    assert f.read() == b"PAYLOAD"


def test_read_empty_tree():
    tree = read_tree(io.BytesIO(MAGIC + FOOTER))
    assert tree.root is None


def test_bad_magic():
    blob = bytearray(encode_tree(_tree(b"hello")))
    blob[0] ^= 0xFF
    with pytest.raises(FormatError):
        read_tree(io.BytesIO(bytes(blob)))


@pytest.mark.parametrize("cut", [0, 4, 8, 12, 16, 31, 39])
def test_truncated_frame(cut):
    blob = encode_tree(_tree(b"ab"))[:cut]
    with pytest.raises(FormatError):
        read_tree(io.BytesIO(blob))


def test_bad_footer():
    blob = bytearray(encode_tree(_tree(b"ab")))
    blob[-3] = 1
    with pytest.raises(FormatError, match="footer"):
        read_tree(io.BytesIO(bytes(blob)))


def test_count_mismatch():
    blob = bytearray(encode_tree(_tree(b"ab")))
    blob[8] = 0x06  # root count 2 -> 3
    with pytest.raises(FormatError, match="count"):
        read_tree(io.BytesIO(bytes(blob)))


def test_duplicate_leaf():
    leaf = b"\x03" + b"\x00" * 6 + b"a"
    blob = MAGIC + b"\x04" + b"\x00" * 7 + leaf + leaf + FOOTER
    with pytest.raises(FormatError, match="duplicate"):
        read_tree(io.BytesIO(blob))


def test_format_error_is_value_error():
    assert issubclass(FormatError, ValueError)
