"""Tests for referral code and link generation."""

import pytest

from commission import (
    InvalidAmount,
    InvalidName,
    generate_code,
    generate_link,
    normalize_code,
)


class TestGenerateCode:
    """Tests for generate_code."""

    def test_basic(self) -> None:
        assert generate_code("Admin", "User", 1) == "ADUS0001"

    def test_four_digit_id(self) -> None:
        assert generate_code("Bob", "Brown", 9999) == "BOBR9999"

    def test_long_id_not_truncated(self) -> None:
        """Ids above four digits are used in full."""
        assert generate_code("Bob", "Brown", 123456) == "BOBR123456"

    def test_lowercase_names_upper_cased(self) -> None:
        assert generate_code("jane", "doe", 42) == "JADO0042"

    def test_short_names(self) -> None:
        """One-letter names use what is there."""
        assert generate_code("J", "D", 7) == "JD0007"

    def test_single_name(self) -> None:
        """An empty last name is allowed."""
        assert generate_code("Cher", "", 3) == "CH0003"

    def test_whitespace_stripped(self) -> None:
        assert generate_code("  Al ", " Bo", 5) == "ALBO0005"

    def test_both_names_empty_rejected(self) -> None:
        with pytest.raises(InvalidName):
            generate_code("  ", "", 1)

    def test_negative_id_rejected(self) -> None:
        with pytest.raises(InvalidAmount):
            generate_code("Admin", "User", -1)

    def test_distinct_ids_give_distinct_codes(self) -> None:
        """Same names, different ids, different codes."""
        codes = {generate_code("Sam", "Smith", i) for i in range(1, 500)}
        assert len(codes) == 499


class TestGenerateLink:
    """Tests for generate_link."""

    def test_basic(self) -> None:
        assert (
            generate_link("https://candiez.shop", "ABC123")
            == "https://candiez.shop/signup?ref=ABC123"
        )

    def test_trailing_slashes_removed(self) -> None:
        assert (
            generate_link("https://candiez.shop//", "ABC123")
            == "https://candiez.shop/signup?ref=ABC123"
        )


class TestNormalizeCode:
    """Tests for normalize_code."""

    def test_trim_and_upper(self) -> None:
        assert normalize_code("  adus0001 ") == "ADUS0001"

    def test_empty(self) -> None:
        assert normalize_code("") == ""
