"""
Utility functions for generating short, URL-safe identifiers.

Folder and file ids, as well as stored file names, use base62 strings:
shorter than UUIDs and safe to embed in URLs and object keys.
"""
import secrets
import string

# Base62 character set: [0-9a-zA-Z]
BASE62_CHARS = string.digits + string.ascii_letters


def b62encode(num: int) -> str:
    """
    Encode a non-negative integer as a base62 string.

    Examples:
        >>> b62encode(12345)
        '3d7'
    """
    if num == 0:
        return BASE62_CHARS[0]

    base = len(BASE62_CHARS)
    encoded = []

    while num > 0:
        num, remainder = divmod(num, base)
        encoded.append(BASE62_CHARS[remainder])

    return "".join(reversed(encoded))


def generate_short_id(length: int = 12) -> str:
    """
    Generate a random base62 identifier.

    Args:
        length: Length of the output string (default: 12 characters, ~71 bits)

    Returns:
        Identifier made of [0-9a-zA-Z] characters
    """
    # Enough random bits for `length` base62 digits, left-padded with "0"
    num = secrets.randbits(6 * length)
    return b62encode(num).rjust(length, BASE62_CHARS[0])[-length:]
