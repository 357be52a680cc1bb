"""Unit tests for auth/validators.py -- credential shape checks.

Covers:
- valid_email accepts common addresses and rejects missing parts / bad TLDs
- valid_username accepts letters and whitespace only
- valid_password enforces the 6-character minimum
- All three are total: None and non-strings return False instead of raising
"""

import pytest

from auth.validators import valid_email, valid_password, valid_username


class TestValidEmail:
    @pytest.mark.parametrize(
        "email",
        ["jane@x.com", "first.last@example.co", "a_b-c@sub.domain.org", "x@y.museum"],
    )
    def test_accepts(self, email: str) -> None:
        assert valid_email(email)

    @pytest.mark.parametrize(
        "email",
        [
            "",
            "plainaddress",
            "@x.com",
            "jane@",
            "jane@x",
            "jane@x.c",  # TLD too short
            "jane@x.abcdefg",  # TLD too long
            "jane@x.c0m",  # digits in TLD
            "ja ne@x.com",
            "jane+tag@x.com",  # '+' not in the allowed local-part set
            "jane@x.com\n",
        ],
    )
    def test_rejects(self, email: str) -> None:
        assert not valid_email(email)

    @pytest.mark.parametrize("value", [None, 42, ["jane@x.com"]])
    def test_non_string_is_false(self, value) -> None:
        assert valid_email(value) is False


class TestValidUsername:
    @pytest.mark.parametrize("name", ["Jane", "Jane Doe", "Mary  Ann Smith", "a"])
    def test_accepts_letters_and_spaces(self, name: str) -> None:
        assert valid_username(name)

    @pytest.mark.parametrize("name", ["Jane1", "Jane_Doe", "O'Brien", "Jane-Doe", "J.D.", ""])
    def test_rejects_digits_and_punctuation(self, name: str) -> None:
        assert not valid_username(name)

    def test_none_is_false(self) -> None:
        assert valid_username(None) is False


class TestValidPassword:
    def test_minimum_length_is_six(self) -> None:
        assert not valid_password("12345")
        assert valid_password("123456")

    def test_no_upper_bound_or_complexity(self) -> None:
        assert valid_password("a" * 500)
        assert valid_password("aaaaaa")

    @pytest.mark.parametrize("value", [None, "", 123456])
    def test_missing_or_wrong_type_is_false(self, value) -> None:
        assert valid_password(value) is False
