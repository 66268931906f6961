import struct

from huffman import NUM_SYMBOLS, Node, Tree, generate_paths

MAGIC = bytes([0x7B, 0x68, 0x75, 0x7C, 0x6D, 0x7D, 0x66, 0x66])  # b"{hu|m}ff"
FOOTER = bytes(8)

# Node record, one little-endian u64 per node:
# bit 0      leaf flag
# bits 1-55  low 55 bits of count (higher bits are dropped)
# bits 56-63 symbol (leaf) or 0 (internal)
REC_FMT = "<Q"
REC_SIZE = struct.calcsize(REC_FMT)
COUNT_BITS = 55
COUNT_MASK = (1 << COUNT_BITS) - 1
MAX_NODES = 2 * NUM_SYMBOLS - 1


class FormatError(ValueError):
    pass


def node_record(node: Node) -> bytes:
    if node.record is None:
        word = (node.count & COUNT_MASK) << 1
        if node.is_leaf:
            word |= 1 | (node.tag << 56)
        node.record = struct.pack(REC_FMT, word)
    return node.record


def unpack_record(data: bytes):
    """Returns (is_leaf, count, symbol)."""
    (word,) = struct.unpack(REC_FMT, data)
    return bool(word & 1), (word >> 1) & COUNT_MASK, word >> 56


def encode_tree(tree: Tree) -> bytes:
    parts = [MAGIC]
    parts.extend(node_record(tree.nodes[idx]) for idx in tree.preorder())
    parts.append(FOOTER)
    return b"".join(parts)


def write_tree(f, tree: Tree):
    f.write(encode_tree(tree))


def _read_exact(f, n: int, what: str) -> bytes:
    data = f.read(n)
    if len(data) != n:
        raise FormatError(f"Malformed stream: {what} truncated")
    return data


def read_tree(f) -> Tree:
    """
    Parse header, pre-order node records and footer.

    Records carry no node count: every internal node is followed by exactly
    two subtrees, so the walk ends when no internal node is waiting for a
    child.
    """
    if _read_exact(f, len(MAGIC), "header") != MAGIC:
        raise FormatError("Bad magic")

    tree = Tree()
    data = _read_exact(f, REC_SIZE, "tree")
    if data == FOOTER:
        return tree

    pending = []  # internal nodes still missing a child
    seen = set()
    while True:
        if len(tree.nodes) >= MAX_NODES:
            raise FormatError("Malformed stream: too many tree records")
        leaf, count, sym = unpack_record(data)
        idx = len(tree.nodes)
        tree.nodes.append(Node(count=count, tag=sym if leaf else 0))

        if pending:
            top = tree.nodes[pending[-1]]
            if top.left is None:
                top.left = idx
            else:
                top.right = idx
                pending.pop()
        else:
            tree.root = idx

        if leaf:
            if sym in seen:
                raise FormatError(f"Malformed stream: duplicate leaf for symbol {sym}")
            seen.add(sym)
        else:
            pending.append(idx)

        if not pending:
            break
        data = _read_exact(f, REC_SIZE, "tree")

    if _read_exact(f, len(FOOTER), "footer") != FOOTER:
        raise FormatError("Malformed stream: bad footer")

    _link(tree)
    return tree


def _link(tree: Tree):
    # arena is in pre-order, so children always sit after their parent
    for idx in range(len(tree.nodes) - 1, -1, -1):
        n = tree.nodes[idx]
        if n.is_leaf:
            continue
        l, r = tree.nodes[n.left], tree.nodes[n.right]
        if (l.count + r.count) & COUNT_MASK != n.count:
            raise FormatError(f"Malformed stream: node {idx} count does not match its children")
        l.parent = r.parent = idx
        n.tag = l.tag + r.tag + NUM_SYMBOLS
    generate_paths(tree)
