import string

from Crypto.Util.number import long_to_bytes, bytes_to_long

# Printable text first, then everything else; always all 256 values.
_TEXT_FIRST = string.printable.encode()
CANDIDATE_BYTES = _TEXT_FIRST + bytes(u for u in range(256) if u not in _TEXT_FIRST)


def ceil_div(a, b):
    """ceil(a / b) on integers, exact for arbitrarily large values."""
    return -(-a // b)


def floor_div(a, b):
    """floor(a / b) on integers."""
    return a // b


def block_ceil(length, block_size):
    """
    Returns (blocks, padding): the number of blocks needed to hold length
    bytes and the number of bytes missing to reach that block boundary.
    """
    blocks = ceil_div(length, block_size)
    return blocks, blocks * block_size - length


def chunks(data, size):
    return [data[i:i + size] for i in range(0, len(data), size)]


def nth_block(data, index, size):
    """The index-th block of data, or None past the end."""
    if index * size >= len(data):
        return None
    return data[index * size:(index + 1) * size]


def xor_bytes(a, b):
    return bytes(x ^ y for x, y in zip(a, b))


def int_to_bytes(n, length=None):
    """Big-endian encoding of n, left-padded with zeros to length bytes."""
    if length is None:
        return long_to_bytes(n)
    raw = long_to_bytes(n)
    if len(raw) > length:
        raise ValueError(f"{n} does not fit in {length} bytes")
    return raw.rjust(length, b'\x00')


def bytes_to_int(data):
    return bytes_to_long(data)
