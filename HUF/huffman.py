from __future__ import annotations
import heapq
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple

import numpy as np
from freq import count_symbols

NUM_SYMBOLS = 256

Path = Tuple[int, int]  # (bits, length); bit i is the edge taken at depth i


@dataclass
class Node:
    count: int
    tag: int                       # leaf: symbol value; internal: left.tag + right.tag + 256
    left: Optional[int] = None     # arena indices
    right: Optional[int] = None
    parent: Optional[int] = None
    path: int = 0
    path_length: int = 0
    record: Optional[bytes] = None  # serialized form, filled by bitstream.node_record

    @property
    def is_leaf(self) -> bool:
        return self.left is None and self.right is None

    @property
    def symbol(self) -> Optional[int]:
        return self.tag if self.is_leaf else None


class Tree:
    """
    Huffman tree stored as an arena: nodes refer to each other by index,
    so the parent back-reference never owns anything.
    """
    def __init__(self):
        self.nodes: List[Node] = []
        self.root: Optional[int] = None
        self.paths: List[Optional[Path]] = [None] * NUM_SYMBOLS

    def add_leaf(self, symbol: int, count: int) -> int:
        self.nodes.append(Node(count=count, tag=symbol))
        return len(self.nodes) - 1

    def add_internal(self, count: int, left: int, right: int) -> int:
        tag = self.nodes[left].tag + self.nodes[right].tag + NUM_SYMBOLS
        idx = len(self.nodes)
        self.nodes.append(Node(count=count, tag=tag, left=left, right=right))
        self.nodes[left].parent = idx
        self.nodes[right].parent = idx
        return idx

    def key(self, idx: int) -> Tuple[int, int, int]:
        # arena index settles (count, tag) collisions between distinct internal nodes
        n = self.nodes[idx]
        return (n.count, n.tag, idx)

    def preorder(self) -> Iterator[int]:
        if self.root is None:
            return
        stack = [self.root]
        while stack:
            idx = stack.pop()
            yield idx
            n = self.nodes[idx]
            if n.right is not None:
                stack.append(n.right)
            if n.left is not None:
                stack.append(n.left)

    def leaves(self) -> Iterator[Node]:
        for idx in self.preorder():
            if self.nodes[idx].is_leaf:
                yield self.nodes[idx]

    @property
    def total_symbols(self) -> int:
        return sum(n.count for n in self.leaves())

    def __len__(self):
        return sum(1 for _ in self.preorder())

    def __str__(self):
        return str(tree_to_string(self))


def build_tree_from_counts(counts: np.ndarray, present: Optional[np.ndarray] = None) -> Tree:
    """Merge the two smallest fragments until one remains, then assign paths."""
    if present is None:
        present = np.asarray(counts) > 0
    tree = Tree()
    heap = []
    for s in np.flatnonzero(present):
        idx = tree.add_leaf(int(s), int(counts[s]))
        heap.append(tree.key(idx))
    if not heap:
        return tree
    heapq.heapify(heap)

    while len(heap) > 1:
        c1, _, n1 = heapq.heappop(heap)
        c2, _, n2 = heapq.heappop(heap)
        idx = tree.add_internal(c1 + c2, n1, n2)
        heapq.heappush(heap, tree.key(idx))

    tree.root = heap[0][2]
    generate_paths(tree)
    return tree


def build_tree(source) -> Tree:
    counts, present = count_symbols(source)
    return build_tree_from_counts(counts, present)


def generate_paths(tree: Tree):
    """
    Top-down pass: a child's path is its parent's with one bit appended
    (0 = left, 1 = right). Fills tree.paths for every leaf.
    """
    tree.paths = [None] * NUM_SYMBOLS
    for idx in tree.preorder():
        n = tree.nodes[idx]
        if n.parent is None:
            n.path, n.path_length = 0, 0
        else:
            p = tree.nodes[n.parent]
            bit = 1 if p.right == idx else 0
            n.path = p.path | (bit << p.path_length)
            n.path_length = p.path_length + 1
        if n.is_leaf:
            tree.paths[n.tag] = (n.path, n.path_length)


def tree_to_string(tree: Tree) -> Optional[str]:
    """
    Pre-order text form: internal "<count>", leaf "*<symbol>:<count>".
    e.g. b"aaabbc" -> "6 *97:3 3 *99:1 *98:2"
    """
    if tree.root is None:
        return None
    parts = []
    for idx in tree.preorder():
        n = tree.nodes[idx]
        parts.append(f"*{n.tag}:{n.count}" if n.is_leaf else f"{n.count}")
    return " ".join(parts)


def code_table(tree: Tree) -> Dict[int, str]:
    out = {}
    for sym, entry in enumerate(tree.paths):
        if entry is None:
            continue
        bits, length = entry
        out[sym] = "".join(str((bits >> i) & 1) for i in range(length))
    return out
