"""
Fractional Indexing for list ordering with string sort keys.

A SortKeyProvider is built from an ordered alphabet. Each sort key is read as a
big-endian fraction in base len(alphabet), so a new key can always be generated
between, before or after existing keys without renumbering any of them.

Plain string comparison of two keys must agree with the numeric comparison of
their digits. That is why the alphabet has to be in code-point order, and why a
database column holding these keys needs COLLATE "C" (byte-order sorting).
"""

from functools import cmp_to_key
from typing import Iterable, List, Optional, Sequence, Union

# The canonical "missing" sort key; None is treated the same way
NO_KEY = ""


class SortKeyError(ValueError):
    """Base class for every sort key contract violation."""


class InvalidAlphabetError(SortKeyError):
    pass


class InvalidCharacterError(SortKeyError):
    pass


class InvalidDigitError(SortKeyError):
    pass


class NotSortedError(SortKeyError):
    pass


class IdenticalKeysError(SortKeyError):
    pass


class OutOfRangeError(SortKeyError):
    pass


class SortKeyAlphabet:
    """
    The characters a SortKeyProvider works with, lowest digit first.

    Raises:
        InvalidAlphabetError: If the characters are not distinct, not in
            code-point order, or not single UTF-16 code units.
    """

    MIN_RADIX = 2

    def __init__(self, chars: str):
        if not isinstance(chars, str):
            raise InvalidAlphabetError(
                f"SortKeyAlphabet: chars must be a string, got {type(chars).__name__}"
            )
        self._chars = chars
        self._validate()

    def _validate(self) -> None:
        chars = self._chars
        if len(chars) < self.MIN_RADIX:
            raise InvalidAlphabetError(
                f"SortKeyAlphabet: chars must contain at least {self.MIN_RADIX} characters, got {chars!r}"
            )

        # str.__lt__ compares code points, which is what ORDER BY ... COLLATE "C" does too
        if "".join(sorted(chars)) != chars:
            raise InvalidAlphabetError(
                f"SortKeyAlphabet: chars must be in standard lexicographical order, got {chars!r}"
            )

        if len(set(chars)) != len(chars):
            raise InvalidAlphabetError(
                f"SortKeyAlphabet: chars must be distinct, got {chars!r}"
            )

        # astral characters are surrogate pairs elsewhere (JavaScript, UTF-16 collations)
        wide = [c for c in chars if ord(c) > 0xFFFF]
        if wide:
            raise InvalidAlphabetError(
                f"SortKeyAlphabet: chars must be single code-unit characters, got {wide!r}"
            )

    @property
    def chars(self) -> str:
        return self._chars

    @property
    def radix(self) -> int:
        return len(self._chars)

    def __eq__(self, other) -> bool:
        if not isinstance(other, SortKeyAlphabet):
            return False
        return self._chars == other._chars

    def __hash__(self) -> int:
        return hash(self._chars)

    def __repr__(self) -> str:
        return f"SortKeyAlphabet(chars={self._chars!r})"


class SortKeyProvider:
    """
    Generates and compares sort keys for one alphabet.

    Instances are immutable once built and keep no per-call state, so a single
    provider can be shared freely between threads and requests.

    Examples, using the alphabet 'DEFabc':
        >>> provider = SortKeyProvider('DEFabc')
        >>> provider.sort_key_initial_item()
        'Fa'
        >>> provider.sort_key_at_first_before('Fa')
        'EEa'
        >>> provider.sort_key_at_last_after('Fa')
        'aba'
    """

    def __init__(self, alphabet: Union[str, SortKeyAlphabet]):
        if not isinstance(alphabet, SortKeyAlphabet):
            alphabet = SortKeyAlphabet(alphabet)

        self._alphabet = alphabet
        self._radix = alphabet.radix
        self._digit_to_char = tuple(alphabet.chars)
        self._char_to_digit = {c: i for i, c in enumerate(self._digit_to_char)}
        self._sort_key = cmp_to_key(self.sort_key_comparator)

        self.SORT_KEY_LOWEST = self._digit_to_char[0]
        # a "high-water mark" rather than a ceiling; longer keys can always sort above it
        self.SORT_KEY_HIGHEST = self._digit_to_char[self._radix - 1]

    @property
    def alphabet(self) -> SortKeyAlphabet:
        return self._alphabet

    @property
    def radix(self) -> int:
        return self._radix

    def __repr__(self) -> str:
        return f"SortKeyProvider(chars={self._alphabet.chars!r})"

    def _char_to_int(self, c: str) -> int:
        """Convert an alphabet character to its digit."""
        try:
            return self._char_to_digit[c]
        except KeyError:
            raise InvalidCharacterError(f"SortKeyProvider: Invalid character: {c!r}") from None

    def _int_to_char(self, i: int) -> str:
        """Convert a digit to its alphabet character."""
        if not 0 <= i < self._radix:
            raise InvalidDigitError(f"SortKeyProvider: Invalid digit: {i}")
        return self._digit_to_char[i]

    def _to_digits(self, key: str) -> List[int]:
        return [self._char_to_int(c) for c in key]

    def validate_sort_key(self, key: Optional[str]) -> bool:
        """Check if a sort key is a non-empty string made of alphabet characters."""
        if not key or not isinstance(key, str):
            return False
        return all(c in self._char_to_digit for c in key)

    def upper_bound_sort_key_after(self, key: Optional[str]) -> str:
        """
        Build a bound that sorts above `key`, for when no upper bound is given.

        The bound is one SORT_KEY_HIGHEST longer than the run of SORT_KEY_HIGHEST
        that `key` starts with, so there is always room above `key`.

        Examples, using the alphabet 'a'-'z':
            '' -> 'z'
            'z' -> 'zz'
            'zzab' -> 'zzz'
        """
        highest = self.SORT_KEY_HIGHEST
        key = key or NO_KEY
        precision = 0
        while precision < len(key) and key[precision] == highest:
            precision += 1
        return highest * (precision + 1)

    def _midpoint(self, key_less: str, key_more: str) -> str:
        """Average two keys digit by digit, as base-radix fractions."""
        radix = self._radix
        digits_less = self._to_digits(key_less)
        digits_more = self._to_digits(key_more)

        # Add, right to left; the shorter key is padded with trailing zeros
        width = max(len(digits_less), len(digits_more))
        digits_sum = []
        carry = 0
        for i in range(width - 1, -1, -1):
            d1 = digits_less[i] if i < len(digits_less) else 0
            d2 = digits_more[i] if i < len(digits_more) else 0
            total = d1 + d2 + carry
            digits_sum.append(total % radix)
            carry = total // radix
        digits_sum.reverse()

        # A carry out of the first digit moves the point one place to the right
        point_shift = 0
        while carry:
            digits_sum.insert(0, carry % radix)
            carry //= radix
            point_shift += 1

        # Halve, left to right
        digits_mid = []
        remainder = 0
        for digit in digits_sum:
            dividend = remainder * radix + digit
            digits_mid.append(dividend // 2)
            remainder = dividend % 2
        if remainder:
            digits_mid.append(remainder * radix // 2)

        # Trailing zeros add no magnitude
        while digits_mid and digits_mid[-1] == 0:
            digits_mid.pop()

        del digits_mid[:point_shift]

        return "".join(self._int_to_char(d) for d in digits_mid)

    def sort_key_between(self, key_less: Optional[str], key_more: Optional[str]) -> str:
        """
        Generate a sort key that sorts above `key_less` and below `key_more`.

        A missing `key_less` means "from the very bottom"; a missing `key_more`
        means "with no upper bound".

        Raises:
            IdenticalKeysError: If the two keys are the same
            NotSortedError: If `key_less` sorts above `key_more`
            InvalidCharacterError: If a key holds a character outside the alphabet
            OutOfRangeError: If no key strictly between the two could be generated
        """
        if not key_less:
            key_less = self.SORT_KEY_LOWEST + (key_more or NO_KEY)
        if not key_more:
            key_more = self.upper_bound_sort_key_after(key_less)

        order = self.sort_key_comparator(key_less, key_more)
        if order > 0:
            raise NotSortedError(
                f"SortKeyProvider.sort_key_between: {key_less!r} and {key_more!r} are not in sorted order"
            )
        if order == 0:
            raise IdenticalKeysError(
                f"SortKeyProvider.sort_key_between: {key_less!r} and {key_more!r} are identical"
            )

        key_between = self._midpoint(key_less, key_more)

        # Post-condition; the strict lower bound is where the arithmetic can fall short
        middle = self.sorted_sort_keys([key_less, key_more, key_between])[1]
        if (
            middle != key_between
            or self.sort_key_comparator(key_less, key_between) >= 0
            or self.sort_key_comparator(key_between, key_more) >= 0
        ):
            raise OutOfRangeError(
                f"SortKeyProvider.sort_key_between: generated {key_between!r} "
                f"is not between {key_less!r} and {key_more!r}"
            )

        return key_between

    def sort_key_initial_item(self) -> str:
        """Return a sort key for the first and only item of a new list."""
        return self.sort_key_between(self.SORT_KEY_LOWEST, self.SORT_KEY_HIGHEST)

    def sort_key_at_first_before(self, key_more: Optional[str]) -> str:
        """
        Return a sort key for an item placed before the current first item.

        Repeated calls halve the distance to SORT_KEY_LOWEST without reaching it.
        """
        return self.sort_key_between(self.SORT_KEY_LOWEST, key_more)

    def sort_key_at_last_after(self, key_less: Optional[str]) -> str:
        """Return a sort key for an item placed after the current last item."""
        # a bound of plain SORT_KEY_HIGHEST would fail once keys pass the high-water mark
        key_more = self.upper_bound_sort_key_after(key_less)
        return self.sort_key_between(key_less, key_more)

    def sort_key_comparator(self, key1: Optional[str], key2: Optional[str]) -> int:
        """
        Compare two sort keys, returning -1, 0 or 1.

        A missing key sorts below everything else. Otherwise this is a
        code-point comparison; locale-aware collation would disagree with the
        alphabet's digit order.
        """
        safe1 = key1 or NO_KEY
        safe2 = key2 or NO_KEY
        if safe1 == safe2:
            return 0
        return 1 if safe1 > safe2 else -1

    def sorted_sort_keys(self, keys: Iterable[Optional[str]]) -> List[Optional[str]]:
        """Return the keys in sort key order, missing keys first."""
        return sorted(keys, key=self._sort_key)

    def sort_key_populate_missing(self, preordered_sort_keys: Sequence[Optional[str]]) -> List[str]:
        """
        Fill in the missing entries of an otherwise sorted list of sort keys.

        Present keys keep their place and value. The input is left untouched.

        Examples, using the alphabet 'DEFabc':
            [None, None, 'F', None, None, 'a', None, None]
            -> ['Da', 'E', 'F', 'FEa', 'Fa', 'a', 'b', 'ba']

        Raises:
            NotSortedError: If the present keys are not in ascending order
        """
        sort_keys = list(preordered_sort_keys)
        length = len(sort_keys)
        if length == 0:
            return sort_keys

        goes_after = NO_KEY
        first_missing = -1

        # Back-fill each gap right to left, up to the next known key
        for index in range(length):
            sort_key = sort_keys[index]
            if not sort_key:
                if first_missing == -1:
                    first_missing = index
                continue

            if goes_after and self.sort_key_comparator(goes_after, sort_key) >= 0:
                raise NotSortedError(
                    f"SortKeyProvider.sort_key_populate_missing: {goes_after!r} and {sort_key!r} "
                    f"are not in sorted order"
                )

            if first_missing != -1:
                goes_before = sort_key
                for fill in range(index - 1, first_missing - 1, -1):
                    if goes_after:
                        generated = self.sort_key_between(goes_after, goes_before)
                    else:
                        # no lower boundary yet
                        generated = self.sort_key_at_first_before(goes_before)
                    sort_keys[fill] = generated
                    goes_before = generated
                first_missing = -1

            goes_after = sort_key

        if first_missing == -1:
            return sort_keys

        if not goes_after:
            # nothing to anchor to, so start in the middle
            goes_after = self.sort_key_initial_item()
            sort_keys[first_missing] = goes_after
            first_missing += 1

        # Trailing gap, left to right
        for fill in range(first_missing, length):
            generated = self.sort_key_at_last_after(goes_after)
            sort_keys[fill] = generated
            goes_after = generated

        return sort_keys
