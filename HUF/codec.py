from bitpack import DEFAULT_BUFFER_BITS, DEFAULT_FLUSH_BYTES, BitPacker, BitReader
from bitstream import FormatError, read_tree, write_tree
from huffman import Tree, build_tree
from iohandlers import ByteReader, ByteSink


def encode(tree: Tree, source, sink, *, buffer_bits: int = DEFAULT_BUFFER_BITS,
           flush_bytes: int = DEFAULT_FLUSH_BYTES) -> int:
    """
    Second pass: write the tree frame, then every symbol's path bits.
    Returns number of payload bits written (before padding).
    """
    write_tree(sink, tree)
    packer = BitPacker(sink, buffer_bits=buffer_bits, flush_bytes=flush_bytes)
    paths = tree.paths
    for sym in source.sequence():
        entry = paths[sym]
        if entry is None:
            raise ValueError(f"symbol {sym} does not occur in the tree")
        packer.write_code(*entry)
    packer.finish()
    return packer.bits_written


def decode(source) -> bytes:
    """
    Rebuild the tree from the frame and walk it bit by bit.

    The frame has no symbol count; the leaf counts sum to it, so decoding
    stops there and the padding bits of the last byte are never read.
    """
    tree = read_tree(source)
    if tree.root is None:
        if source.read(1):
            raise FormatError("Malformed stream: payload after empty tree")
        return b""

    nodes = tree.nodes
    root = nodes[tree.root]
    if root.is_leaf:
        return bytes([root.tag]) * root.count

    # flatten to plain lists for the hot loop
    left = [n.left for n in nodes]
    right = [n.right for n in nodes]
    symbol = [n.symbol for n in nodes]

    br = BitReader(source)
    out = bytearray()
    remaining = tree.total_symbols
    while remaining:
        idx = tree.root
        while symbol[idx] is None:
            idx = right[idx] if br.read_bit() else left[idx]
        out.append(symbol[idx])
        remaining -= 1
    return bytes(out)


def compress(data: bytes, *, buffer_bits: int = DEFAULT_BUFFER_BITS,
             flush_bytes: int = DEFAULT_FLUSH_BYTES) -> bytes:
    src = ByteReader(data)
    tree = build_tree(src)
    src.reset()
    sink = ByteSink()
    encode(tree, src, sink, buffer_bits=buffer_bits, flush_bytes=flush_bytes)
    return sink.getvalue()


def decompress(blob: bytes) -> bytes:
    return decode(ByteReader(blob))
