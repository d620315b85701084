"""Slug generation and collision avoidance

This module derives free, deterministic 8-character slugs from the registry's
mint counter and walks the slug space when a derived slug is already taken.

Functions:
    generate_slug(counter) -> str:
        Derive a candidate slug from a counter value.
    advance_slug(candidate) -> str:
        Return the next slug in base58 odometer order.
    allocate_slug(counter, exists, max_attempts=DEFAULT_MAX_ALLOCATION_ATTEMPTS) -> str:
        Return the first free slug starting from the counter's candidate.

Example:
    >>> from slugregistry.utils import allocate_slug
    >>> taken = set()
    >>> slug = allocate_slug(0, taken.__contains__)
    >>> len(slug)
    8
    >>> advance_slug('1111111z')
    '11111121'
"""

import hashlib

from slugregistry.exceptions import SlugSpaceExhaustedError
from slugregistry.types import SlugExistsCheck
from slugregistry.utils.constants import (
    SLUG_ALPHABET,
    SLUG_LENGTH,
    SLUG_SHIFT_BITS,
    DEFAULT_MAX_ALLOCATION_ATTEMPTS,
)


BASE = len(SLUG_ALPHABET)  # 58


def generate_slug(counter: int) -> str:
    """Derive a deterministic 8-character slug from a counter.

    The counter is encoded as a 32-byte big-endian unsigned integer and hashed
    with SHA3-256. Characters are then pulled from the digest, read as a
    big-endian integer: each step indexes the alphabet with the running value
    modulo 58 and shifts the value right by 6 bits.

    Args:
        counter (int):
            Mint counter value (non-negative, fits in 256 bits).

    Returns:
        str: Slug of exactly 8 base58 characters.

    Raises:
        TypeError: If counter is not an integer.
        ValueError: If counter is negative or doesn't fit in 32 bytes.

    Example:
        >>> generate_slug(0) == generate_slug(0)
        True
    """
    if not isinstance(counter, int) or isinstance(counter, bool):
        raise TypeError(f'Counter must be of type integer (given type: {type(counter)}).')
    if counter < 0:
        raise ValueError(f'Counter must be a non-negative integer (given value: {counter}).')
    if counter.bit_length() > 256:
        raise ValueError(f'Counter must fit in 256 bits (given value: {counter}).')

    digest = hashlib.sha3_256(counter.to_bytes(32, 'big')).digest()
    value = int.from_bytes(digest, 'big')

    characters = []
    for _ in range(SLUG_LENGTH):
        characters.append(SLUG_ALPHABET[value % BASE])
        value >>= SLUG_SHIFT_BITS
    return ''.join(characters)


def advance_slug(candidate: str) -> str:
    """Return the successor of a slug in base58 odometer order.

    The rightmost character is replaced by its successor in the alphabet. A
    character already at the last symbol resets to the first symbol and carries
    into its left neighbour.

    NOTE:
        When every character carries (e.g. 'zzzzzzzz') the result wraps to the
        all-first-symbol slug ('11111111'). That slug may well be taken already,
        in which case the caller simply keeps advancing.

    Args:
        candidate (str):
            Non-empty slug made of base58 characters.

    Returns:
        str: The next slug, of the same length.

    Raises:
        ValueError: If candidate is empty or holds characters outside the alphabet.

    Example:
        >>> advance_slug('11111111')
        '11111112'
        >>> advance_slug('1111111z')
        '11111121'
        >>> advance_slug('zzzzzzzz')
        '11111111'
    """
    if not candidate:
        raise ValueError('Slug candidate must be a non-empty string.')

    characters = list(candidate)
    for position in range(len(characters) - 1, -1, -1):
        index = SLUG_ALPHABET.find(characters[position])
        if index < 0:
            raise ValueError(f"Character '{characters[position]}' is not part of the slug alphabet.")
        if index < BASE - 1:
            characters[position] = SLUG_ALPHABET[index + 1]
            return ''.join(characters)
        characters[position] = SLUG_ALPHABET[0]

    # Every position carried over: terminal wrap
    return ''.join(characters)


def allocate_slug(counter: int, exists: SlugExistsCheck, max_attempts: int = DEFAULT_MAX_ALLOCATION_ATTEMPTS) -> str:
    """Return the first free slug reachable from the counter's candidate.

    Args:
        counter (int):
            Current mint counter value.
        exists (Callable[[str], bool]):
            Existence check against the registry.
        max_attempts (int):
            Maximum number of advances before giving up.

    Returns:
        str: A slug for which `exists` returned False.

    Raises:
        SlugSpaceExhaustedError: If no free slug is found within max_attempts advances.
        ValueError: If max_attempts is negative.
    """
    if max_attempts < 0:
        raise ValueError(f'Maximum attempts must be a non-negative integer (given value: {max_attempts}).')

    candidate = generate_slug(counter)
    attempts = 0
    while exists(candidate):
        if attempts >= max_attempts:
            raise SlugSpaceExhaustedError(f'No free slug found for counter {counter} after {max_attempts} attempts.')
        candidate = advance_slug(candidate)
        attempts += 1
    return candidate
