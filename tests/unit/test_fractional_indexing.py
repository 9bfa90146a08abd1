"""
Unit tests for fractional indexing module.

Tests the SortKeyProvider arithmetic and its boundaries using the small
'DEFabc' alphabet, which mixes upper and lower case on purpose: code-point
order and case-insensitive order disagree on it.
"""

import pytest
from fractional_indexing import (
    NO_KEY,
    SortKeyAlphabet,
    SortKeyProvider,
    SortKeyError,
    InvalidAlphabetError,
    InvalidCharacterError,
    InvalidDigitError,
    NotSortedError,
    IdenticalKeysError,
    OutOfRangeError,
)

ITERATIONS = 100
MISSING = None
INITIAL_KEY = "Fa"
VERY_LOW_BUT_NOT_LOWEST = "DDDDDDDDDDE"


def assert_sort_key_order(provider, expected):
    """The keys are unique and already in comparator order."""
    actual = provider.sorted_sort_keys(list(reversed(expected)))
    assert actual == expected
    assert len(set(actual)) == len(actual)


class TestSortKeyAlphabet:
    """Tests for alphabet validation at construction time."""

    def test_accepts_ordered_alphabet(self):
        alphabet = SortKeyAlphabet("012")
        assert alphabet.chars == "012"
        assert alphabet.radix == 3

    def test_rejects_unordered_alphabet(self):
        with pytest.raises(InvalidAlphabetError, match="standard lexicographical order"):
            SortKeyAlphabet("210")

    def test_rejects_case_insensitive_ordering(self):
        """'aB' is alphabetical, but 'B' < 'a' by code point."""
        with pytest.raises(InvalidAlphabetError):
            SortKeyAlphabet("aB")

    def test_rejects_duplicate_characters(self):
        with pytest.raises(InvalidAlphabetError, match="distinct"):
            SortKeyAlphabet("aab")

    def test_rejects_too_short_alphabet(self):
        with pytest.raises(InvalidAlphabetError, match="at least 2"):
            SortKeyAlphabet("a")
        with pytest.raises(InvalidAlphabetError):
            SortKeyAlphabet("")

    def test_rejects_astral_characters(self):
        with pytest.raises(InvalidAlphabetError, match="single code-unit"):
            SortKeyAlphabet("ab\U0001F600")

    def test_rejects_non_string(self):
        with pytest.raises(InvalidAlphabetError):
            SortKeyAlphabet(["a", "b"])

    def test_errors_are_value_errors(self):
        with pytest.raises(ValueError):
            SortKeyAlphabet("cba")

    def test_equality(self):
        assert SortKeyAlphabet("abc") == SortKeyAlphabet("abc")
        assert SortKeyAlphabet("abc") != SortKeyAlphabet("abd")
        assert hash(SortKeyAlphabet("abc")) == hash(SortKeyAlphabet("abc"))


class TestSortKeyProviderConstruction:
    """Tests for provider construction and boundaries."""

    def test_constructs_from_string_or_alphabet(self):
        from_string = SortKeyProvider("DEFabc")
        from_alphabet = SortKeyProvider(SortKeyAlphabet("DEFabc"))

        assert from_string.alphabet == from_alphabet.alphabet
        assert from_string.radix == 6

    def test_rejects_unordered_alphabet(self):
        with pytest.raises(InvalidAlphabetError):
            SortKeyProvider("210")

    def test_exposes_boundaries(self, provider):
        assert provider.SORT_KEY_LOWEST == "D"
        assert provider.SORT_KEY_HIGHEST == "c"

    def test_providers_are_independent(self, provider):
        digits = SortKeyProvider("0123456789")

        assert digits.sort_key_initial_item() == "45"
        assert provider.sort_key_initial_item() == INITIAL_KEY

    def test_invalid_digit(self, provider):
        with pytest.raises(InvalidDigitError, match="Invalid digit"):
            provider._int_to_char(6)
        with pytest.raises(InvalidDigitError):
            provider._int_to_char(-1)


class TestSortKeyBetween:
    """Tests for sort_key_between."""

    def test_between_two_keys(self, provider):
        after_initial = provider.sort_key_at_last_after(INITIAL_KEY)
        before_after = provider.sort_key_between(INITIAL_KEY, after_initial)
        assert before_after == "aDba"
        assert_sort_key_order(provider, [INITIAL_KEY, before_after, after_initial])

        before_initial = provider.sort_key_at_first_before(INITIAL_KEY)
        after_before = provider.sort_key_between(before_initial, INITIAL_KEY)
        assert after_before == "EcEa"
        assert_sort_key_order(provider, [before_initial, after_before, INITIAL_KEY])

    def test_requires_sorted_parameters(self, provider):
        after_initial = provider.sort_key_at_last_after(INITIAL_KEY)

        provider.sort_key_between(INITIAL_KEY, after_initial)

        with pytest.raises(NotSortedError, match="are not in sorted order"):
            provider.sort_key_between(after_initial, INITIAL_KEY)

        with pytest.raises(IdenticalKeysError, match="are identical"):
            provider.sort_key_between(INITIAL_KEY, INITIAL_KEY)

    def test_missing_keys(self, provider):
        assert provider.sort_key_between(MISSING, MISSING) == INITIAL_KEY
        assert provider.sort_key_between(NO_KEY, NO_KEY) == INITIAL_KEY
        assert provider.sort_key_between(INITIAL_KEY, MISSING) == "aba"
        assert provider.sort_key_between(MISSING, INITIAL_KEY) == "EFba"

    def test_strict_lower_bound(self, provider):
        lowest = provider.SORT_KEY_LOWEST

        # it can get really close to the lower bound
        assert provider.sort_key_between(lowest, VERY_LOW_BUT_NOT_LOWEST) == "DDDDDDDDDDDa"

        # a missing lower bound plus the floor becomes 'DD' > 'D'
        with pytest.raises(NotSortedError):
            provider.sort_key_between("", lowest)

        with pytest.raises(InvalidCharacterError, match="Invalid character"):
            provider.sort_key_between(" ", lowest)

        with pytest.raises(IdenticalKeysError):
            provider.sort_key_between(lowest, lowest)

        # precision does not open room below the floor
        with pytest.raises(OutOfRangeError, match="is not between"):
            provider.sort_key_between(lowest, "DD")

    def test_trailing_lowest_leaves_no_room(self, provider):
        """'a' and 'aD' are the same value, so the midpoint is 'a' itself."""
        with pytest.raises(OutOfRangeError):
            provider.sort_key_between("a", "aD")

    def test_no_strict_upper_bound(self, provider):
        between = provider.sort_key_between(provider.SORT_KEY_HIGHEST, "")
        assert between == "cFa"

        dogfood = [between]
        for _ in range(ITERATIONS):
            dogfood.append(provider.sort_key_between(dogfood[-1], ""))
        assert_sort_key_order(provider, dogfood)

    def test_invalid_character_in_upper_key(self, provider):
        with pytest.raises(InvalidCharacterError):
            provider.sort_key_between("D", "x")

    def test_errors_share_a_base_class(self, provider):
        with pytest.raises(SortKeyError):
            provider.sort_key_between("a", "a")
        with pytest.raises(ValueError):
            provider.sort_key_between("b", "a")

    def test_deterministic(self, provider):
        results = {provider.sort_key_between("E", "bc") for _ in range(10)}
        assert len(results) == 1

    def test_order_preserved_for_many_pairs(self, provider):
        keys = provider.sort_key_populate_missing([None] * 30)
        for i in range(len(keys) - 1):
            for j in range(i + 1, min(i + 5, len(keys))):
                between = provider.sort_key_between(keys[i], keys[j])
                assert keys[i] < between < keys[j]

    def test_repeated_inserts_at_same_point(self, provider):
        key_less = "E"
        key_more = "b"
        for _ in range(ITERATIONS):
            between = provider.sort_key_between(key_less, key_more)
            assert key_less < between < key_more
            key_more = between


class TestUpperBoundSortKeyAfter:
    """Tests for the synthesized upper bound."""

    def test_high_water_mark(self):
        provider = SortKeyProvider("abcdefghijklmnopqrstuvwxyz")

        assert provider.upper_bound_sort_key_after("") == "z"
        assert provider.upper_bound_sort_key_after(None) == "z"
        assert provider.upper_bound_sort_key_after("m") == "z"
        assert provider.upper_bound_sort_key_after("z") == "zz"
        assert provider.upper_bound_sort_key_after("zzab") == "zzz"

    def test_bound_is_always_above_key(self, provider):
        for key in ["D", "Fa", "c", "cc", "ccb", "cD"]:
            assert provider.upper_bound_sort_key_after(key) > key


class TestSortKeyInitialItem:
    def test_middle_of_full_range(self, provider):
        initial = provider.sort_key_initial_item()
        assert initial == INITIAL_KEY
        assert_sort_key_order(provider, [provider.SORT_KEY_LOWEST, initial, provider.SORT_KEY_HIGHEST])


class TestSortKeyAtFirstBefore:
    def test_before_a_key(self, provider):
        before_initial = provider.sort_key_at_first_before(INITIAL_KEY)
        assert before_initial == "EEa"
        assert_sort_key_order(provider, [before_initial, INITIAL_KEY])

    def test_missing_key(self, provider):
        assert provider.sort_key_at_first_before(MISSING) == INITIAL_KEY

    def test_strict_lower_bound(self, provider):
        assert provider.sort_key_at_first_before(VERY_LOW_BUT_NOT_LOWEST) == "DDDDDDDDDDDa"

        with pytest.raises(IdenticalKeysError):
            provider.sort_key_at_first_before(provider.SORT_KEY_LOWEST)

    def test_zeno_towards_lower_bound(self, provider):
        before = provider.sort_key_at_first_before(provider.SORT_KEY_HIGHEST)
        assert_sort_key_order(provider, [before, provider.SORT_KEY_HIGHEST])

        dogfood = [before]
        for _ in range(ITERATIONS):
            dogfood.insert(0, provider.sort_key_at_first_before(dogfood[0]))

        assert_sort_key_order(provider, dogfood)
        assert provider.SORT_KEY_LOWEST not in dogfood


class TestSortKeyAtLastAfter:
    def test_after_a_key(self, provider):
        after_initial = provider.sort_key_at_last_after(INITIAL_KEY)
        assert after_initial == "aba"
        assert_sort_key_order(provider, [INITIAL_KEY, after_initial])

    def test_missing_key(self, provider):
        assert provider.sort_key_at_last_after(MISSING) == "Fca"

    def test_after_lowest(self, provider):
        after = provider.sort_key_at_last_after(provider.SORT_KEY_LOWEST)
        assert_sort_key_order(provider, [provider.SORT_KEY_LOWEST, after])

    def test_zeno_past_high_water_mark(self, provider):
        after = provider.sort_key_at_last_after(provider.SORT_KEY_HIGHEST)
        assert_sort_key_order(provider, [provider.SORT_KEY_HIGHEST, after])

        dogfood = [after]
        for _ in range(ITERATIONS):
            dogfood.append(provider.sort_key_at_last_after(dogfood[-1]))
        assert_sort_key_order(provider, dogfood)


class TestSortKeyComparator:
    def test_compares_keys(self, provider):
        assert provider.sort_key_comparator(INITIAL_KEY, INITIAL_KEY) == 0
        assert provider.sort_key_comparator(INITIAL_KEY, provider.sort_key_at_first_before(INITIAL_KEY)) == 1
        assert provider.sort_key_comparator(INITIAL_KEY, provider.sort_key_at_last_after(INITIAL_KEY)) == -1

    def test_missing_is_least(self, provider):
        assert provider.sort_key_comparator(MISSING, MISSING) == 0
        assert provider.sort_key_comparator(MISSING, NO_KEY) == 0
        assert provider.sort_key_comparator(INITIAL_KEY, MISSING) == 1
        assert provider.sort_key_comparator(MISSING, INITIAL_KEY) == -1
        assert provider.sort_key_comparator(MISSING, provider.SORT_KEY_LOWEST) == -1

    def test_not_case_insensitive(self, provider):
        after_initial = provider.sort_key_at_last_after(INITIAL_KEY)
        assert after_initial == "aba"

        assert provider.sorted_sort_keys([after_initial, INITIAL_KEY]) == [INITIAL_KEY, after_initial]
        # case-insensitive ordering gets it backwards
        assert sorted([INITIAL_KEY, after_initial], key=str.lower) == [after_initial, INITIAL_KEY]

    def test_total_order_laws(self, provider):
        keys = provider.sort_key_populate_missing([None, None, "E", None, "a", None, None])
        keys += [None, provider.SORT_KEY_LOWEST, provider.SORT_KEY_HIGHEST]
        compare = provider.sort_key_comparator

        for a in keys:
            assert compare(a, a) == 0
            for b in keys:
                assert compare(a, b) == -compare(b, a)
                for c in keys:
                    if compare(a, b) <= 0 and compare(b, c) <= 0:
                        assert compare(a, c) <= 0


class TestValidateSortKey:
    def test_valid(self, provider):
        assert provider.validate_sort_key("D") is True
        assert provider.validate_sort_key("FabcDE") is True

    def test_invalid(self, provider):
        assert provider.validate_sort_key("") is False
        assert provider.validate_sort_key(None) is False
        assert provider.validate_sort_key("Fx") is False
        assert provider.validate_sort_key("F a") is False
        assert provider.validate_sort_key(42) is False


class TestSortKeyPopulateMissing:
    def test_empty(self, provider):
        assert provider.sort_key_populate_missing([]) == []

    def test_lone_missing_key(self, provider):
        assert provider.sort_key_populate_missing([MISSING]) == [INITIAL_KEY]
        assert provider.sort_key_populate_missing([""]) == [INITIAL_KEY]

    def test_leading_missing_key(self, provider):
        populated = provider.sort_key_populate_missing([MISSING, VERY_LOW_BUT_NOT_LOWEST])
        assert populated == ["DDDDDDDDDDDa", VERY_LOW_BUT_NOT_LOWEST]
        assert_sort_key_order(provider, populated)

    def test_multiple_leading_missing_keys(self, provider):
        populated = provider.sort_key_populate_missing([MISSING, MISSING, VERY_LOW_BUT_NOT_LOWEST])
        assert populated == ["DDDDDDDDDDDEa", "DDDDDDDDDDDa", VERY_LOW_BUT_NOT_LOWEST]
        assert_sort_key_order(provider, populated)

    def test_trailing_missing_key(self, provider):
        populated = provider.sort_key_populate_missing([provider.SORT_KEY_HIGHEST, MISSING])
        assert populated == [provider.SORT_KEY_HIGHEST, "cFa"]

    def test_multiple_trailing_missing_keys(self, provider):
        populated = provider.sort_key_populate_missing([provider.SORT_KEY_HIGHEST, MISSING, MISSING])
        assert populated == [provider.SORT_KEY_HIGHEST, "cFa", "caba"]
        assert_sort_key_order(provider, populated)

    def test_bounded_missing_key(self, provider):
        populated = provider.sort_key_populate_missing(["DEF", MISSING, "abc"])
        assert populated == ["DEF", "FDDa", "abc"]

    def test_hot_mess_of_missing_keys(self, provider):
        populated = provider.sort_key_populate_missing([
            MISSING, MISSING, "F", MISSING, MISSING, "a", MISSING, MISSING,
        ])
        assert populated == ["Da", "E", "F", "FEa", "Fa", "a", "b", "ba"]
        assert_sort_key_order(provider, populated)

    def test_all_missing(self, provider):
        populated = provider.sort_key_populate_missing([MISSING] * 5)
        assert populated[0] == INITIAL_KEY
        assert_sort_key_order(provider, populated)

    def test_nothing_missing(self, provider):
        keys = ["E", "F", "a"]
        assert provider.sort_key_populate_missing(keys) == keys

    def test_rejects_misordered_input_across_gap(self, provider):
        with pytest.raises(NotSortedError, match="not in sorted order"):
            provider.sort_key_populate_missing(
                [provider.SORT_KEY_HIGHEST, MISSING, provider.SORT_KEY_LOWEST]
            )

    def test_rejects_adjacent_misordered_input(self, provider):
        with pytest.raises(NotSortedError):
            provider.sort_key_populate_missing(["b", "a", MISSING])

    def test_rejects_duplicate_keys(self, provider):
        with pytest.raises(NotSortedError):
            provider.sort_key_populate_missing(["a", "a"])

    def test_does_not_mutate_input(self, provider):
        keys = [provider.SORT_KEY_LOWEST, MISSING, provider.SORT_KEY_HIGHEST]
        populated = provider.sort_key_populate_missing(keys)

        assert populated != keys
        assert keys == [provider.SORT_KEY_LOWEST, MISSING, provider.SORT_KEY_HIGHEST]

    def test_accepts_tuples(self, provider):
        populated = provider.sort_key_populate_missing(("E", None))
        assert isinstance(populated, list)
        assert populated[0] == "E"
