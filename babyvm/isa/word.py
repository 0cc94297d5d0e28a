"""32-bit word arithmetic shared by the decoder and the executor.

Store words and registers are kept as unsigned Python ints in [0, 2**32).
Every arithmetic result is masked back into that range, so subtraction and
addition wrap exactly like the machine's 32-bit adder. The signed view is only
taken where an instruction asks for it (the sign test of CMP) and for display.
"""

from babyvm.types import Word

WORD_BITS = 32
WORD_MASK = (1 << WORD_BITS) - 1
SIGN_BIT = 1 << (WORD_BITS - 1)


def to_word(value: int) -> Word:
    """Wrap an arbitrary int into an unsigned 32-bit word."""
    return value & WORD_MASK


def negate(value: Word) -> Word:
    """Two's-complement negation: bitwise complement plus one.

    negate(0) is 0 because ~0 + 1 overflows back to zero.
    """
    return (~value + 1) & WORD_MASK


def is_negative(value: Word) -> bool:
    """Test the sign bit (bit 31)."""
    return bool(value & SIGN_BIT)


def to_signed(value: Word) -> int:
    value = to_word(value)
    if value & SIGN_BIT:
        return value - (1 << WORD_BITS)
    return value


def line_bits(store_size: int) -> int:
    """Minimal number of bits able to address every line of the store.

    Args:
        store_size: Number of words in the store
    Returns:
        ceil(log2(store_size)), at least 1
    Raises:
        ValueError: if the store is empty
    """
    if store_size < 1:
        raise ValueError(f'Store must hold at least one word, got {store_size}')
    return max(1, (store_size - 1).bit_length())


def line_mask(store_size: int) -> int:
    return (1 << line_bits(store_size)) - 1
