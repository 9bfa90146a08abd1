"""
Configured alphabets for fractional sort keys.

base64: compact mixed-case keys. The lowest character '-' has nothing to do
with Firebase push-ID ordering; keys close to the floor ('-01', '-yz') would not
behave predictably if it did.

padded_numeric: a blank plus the ten digits, for keys that should look like
numbers. Do NOT int() these keys; blanks can show up anywhere, not only as
left padding, although simple values such as '  0'..'999' sort as expected.
"""

from typing import Dict, Optional

from fractional_indexing import NO_KEY, SortKeyProvider

BASE64_CHARS = "-0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ_abcdefghijklmnopqrstuvwxyz"
PADDED_NUMERIC_CHARS = " 0123456789"

DEFAULT_ALPHABET = "base64"

base64_provider = SortKeyProvider(BASE64_CHARS)
padded_numeric_provider = SortKeyProvider(PADDED_NUMERIC_CHARS)

PROVIDERS: Dict[str, SortKeyProvider] = {
    "base64": base64_provider,
    "padded_numeric": padded_numeric_provider,
}


def get_provider(name: Optional[str] = None) -> SortKeyProvider:
    """
    Look up a configured provider by alphabet name.

    Args:
        name: 'base64' or 'padded_numeric'; None or '' means DEFAULT_ALPHABET

    Raises:
        ValueError: If the name is not a configured alphabet
    """
    name = (name or DEFAULT_ALPHABET).strip().lower()
    try:
        return PROVIDERS[name]
    except KeyError:
        raise ValueError(
            f"Unknown sort key alphabet '{name}', expected one of {sorted(PROVIDERS)}"
        ) from None


def sort_key_from_padded_numeric(key: Optional[str]) -> str:
    """
    Convert a padded_numeric sort key into an equivalent base64 sort key.

    ' ' and '-' are both digit 0 and the ten digits are 1-10 in both alphabets,
    so swapping the blank is enough to keep the same value and order.

    Examples:
        >>> sort_key_from_padded_numeric(' 14')
        '-14'
        >>> sort_key_from_padded_numeric(None)
        ''
    """
    if not key:
        return NO_KEY
    return key.replace(" ", "-")
