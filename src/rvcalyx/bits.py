WORD_BITS = 32
CONTAINER_WIDTHS = (8, 16, 32)


def extract_bits(word: int, lo: int, hi: int, width: int = 32) -> int:
    """Return bits `lo`..`hi` (inclusive) of `word`, right-aligned.

    `width` is the container the caller wants the field in (8, 16 or 32 bits).
    """
    if width not in CONTAINER_WIDTHS:
        raise ValueError(f"width must be one of {CONTAINER_WIDTHS}, got {width}")
    if lo < 0 or hi >= WORD_BITS or lo > hi:
        raise ValueError(f"invalid bit range [{lo}, {hi}]")
    span = hi - lo + 1
    if span > width:
        raise ValueError(f"bit range [{lo}, {hi}] does not fit in {width} bits")
    mask = (1 << span) - 1
    return (word >> lo) & mask


def to_signed(value: int, bits: int) -> int:
    """Two's-complement reading of a `bits`-wide unsigned pattern."""
    value &= (1 << bits) - 1
    if value & (1 << (bits - 1)):
        return value - (1 << bits)
    return value
