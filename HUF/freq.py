import numpy as np


def count_symbols(source):
    """
    One pass over the source.
    Returns:
      counts: uint64 array (256,), occurrences per byte value
      present: bool array (256,), True where counts > 0
    """
    counts = np.zeros(256, dtype=np.uint64)
    for block in source.chunks():
        counts += np.bincount(block, minlength=256).astype(np.uint64)
    return counts, counts > 0


def histogram(data: bytes) -> np.ndarray:
    # in-memory shortcut used by metrics and tests
    return np.bincount(np.frombuffer(data, dtype=np.uint8), minlength=256).astype(np.uint64)
