import argparse
import os
from codec import decode
from iohandlers import ByteReader

def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--input", required=True, help="path to .huff")
    ap.add_argument("--output", required=True, help="path to decoded file")
    args = ap.parse_args()

    with ByteReader(args.input) as src:
        data = decode(src)

    os.makedirs(os.path.dirname(args.output) or ".", exist_ok=True)
    with open(args.output, "wb") as f:
        f.write(data)
    print(f"[decode] wrote {args.output} ({len(data)} bytes)")

if __name__ == "__main__":
    main()
