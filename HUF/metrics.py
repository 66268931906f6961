import numpy as np


def entropy(counts: np.ndarray) -> float:
    """Shannon entropy in bits per symbol (0.0 for empty or single-symbol input)."""
    c = np.asarray(counts, dtype=np.float64)
    total = c.sum()
    if total == 0:
        return 0.0
    p = c[c > 0] / total
    return max(0.0, float(-(p * np.log2(p)).sum()))


def mean_code_length(counts: np.ndarray, tree) -> float:
    total = int(np.asarray(counts).sum())
    if total == 0:
        return 0.0
    bits = sum(int(counts[s]) * entry[1] for s, entry in enumerate(tree.paths) if entry is not None)
    return bits / total


def compression_ratio(original_len: int, compressed_len: int) -> float:
    if compressed_len == 0:
        return float("inf")
    return original_len / compressed_len
