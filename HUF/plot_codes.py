import argparse
import os
import numpy as np
import matplotlib.pyplot as plt
from bitstream import read_tree
from iohandlers import ByteReader

def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--input", required=True, help="path to .huff")
    ap.add_argument("--output", default="results/fig_codes.png")
    args = ap.parse_args()

    with ByteReader(args.input) as src:
        tree = read_tree(src)

    counts = np.zeros(256, dtype=np.float64)
    lengths = np.zeros(256, dtype=np.int32)
    for n in tree.leaves():
        counts[n.tag] = n.count
        lengths[n.tag] = n.path_length

    syms = np.arange(256)
    fig, ax1 = plt.subplots(figsize=(10, 3))
    ax1.bar(syms, counts, width=1.0, color="tab:blue")
    ax1.set_xlabel("byte value")
    ax1.set_ylabel("count", color="tab:blue")
    ax2 = ax1.twinx()
    mask = counts > 0
    ax2.plot(syms[mask], lengths[mask], ".", color="tab:red")
    ax2.set_ylabel("code length (bits)", color="tab:red")
    plt.tight_layout()
    os.makedirs(os.path.dirname(args.output) or ".", exist_ok=True)
    plt.savefig(args.output, dpi=300)
    print(f"[plot_codes] wrote {args.output}")

if __name__ == "__main__":
    main()
