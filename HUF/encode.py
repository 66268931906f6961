import argparse
import os
from bitpack import DEFAULT_BUFFER_BITS, DEFAULT_FLUSH_BYTES
from codec import encode
from freq import count_symbols
from huffman import build_tree_from_counts
from iohandlers import ByteReader, ByteSink
from metrics import entropy, mean_code_length, compression_ratio

def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--input", required=True, help="path to any file")
    ap.add_argument("--output", required=True, help="path to .huff")
    ap.add_argument("--buffer_bits", type=int, default=DEFAULT_BUFFER_BITS, help="bit buffer size (multiple of 8)")
    ap.add_argument("--flush_bytes", type=int, default=DEFAULT_FLUSH_BYTES, help="flush output after this many cached bytes")
    args = ap.parse_args()

    os.makedirs(os.path.dirname(args.output) or ".", exist_ok=True)
    with ByteReader(args.input) as src:
        # pass 1: count, pass 2: encode
        counts, present = count_symbols(src)
        tree = build_tree_from_counts(counts, present)
        src.reset()
        with ByteSink(args.output) as sink:
            nbits = encode(tree, src, sink, buffer_bits=args.buffer_bits, flush_bytes=args.flush_bytes)

    n_in = int(counts.sum())
    n_out = os.path.getsize(args.output)
    print(f"[encode] wrote {args.output}")
    print(f"[encode] symbols={n_in}, distinct={int(present.sum())}, tree_nodes={len(tree)}, payload_bits={nbits}")
    print(f"[encode] entropy={entropy(counts):.3f} bits/sym, mean_code={mean_code_length(counts, tree):.3f} bits/sym")
    print(f"[encode] {n_in} -> {n_out} bytes, ratio={compression_ratio(n_in, n_out):.3f}")

if __name__ == "__main__":
    main()
