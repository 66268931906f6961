import argparse
from bitstream import read_tree
from huffman import code_table, tree_to_string
from iohandlers import ByteReader

def describe(tree) -> str:
    lines = [f"tree: {tree_to_string(tree)}",
             f"nodes={len(tree)} total_symbols={tree.total_symbols}"]
    leaves = {n.tag: n.count for n in tree.leaves()}
    for sym, code in sorted(code_table(tree).items(), key=lambda kv: (len(kv[1]), kv[0])):
        lines.append(f"{sym:3d} {chr(sym) if 32 <= sym < 127 else '.'} count={leaves[sym]:<8d} {code or '-'}")
    return "\n".join(lines)

def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--input", required=True, help="path to .huff")
    args = ap.parse_args()

    with ByteReader(args.input) as src:
        tree = read_tree(src)
    print(describe(tree))

if __name__ == "__main__":
    main()
