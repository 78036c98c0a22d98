import pytest

from filebox.utils.validators import PasswordValidationError, clean_name, validate_password_complexity


class TestPasswordComplexity:
    """Password complexity validation tests"""

    def test_valid_password(self):
        validate_password_complexity("Secr3t-pass")

    def test_too_short(self):
        with pytest.raises(PasswordValidationError) as exc:
            validate_password_complexity("Ab1!a")
        assert "8 characters" in str(exc.value)

    def test_missing_letter(self):
        with pytest.raises(PasswordValidationError) as exc:
            validate_password_complexity("12345678!")
        assert "letter" in str(exc.value)

    def test_missing_digit(self):
        with pytest.raises(PasswordValidationError) as exc:
            validate_password_complexity("Abcdef!@#")
        assert "digit" in str(exc.value)

    def test_missing_special(self):
        with pytest.raises(PasswordValidationError) as exc:
            validate_password_complexity("Abc123456")
        assert "special character" in str(exc.value)

    def test_collects_all_errors(self):
        with pytest.raises(PasswordValidationError) as exc:
            validate_password_complexity("abc")
        assert len(exc.value.errors) == 3


class TestCleanName:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("Docs", "Docs"),
            ("  Docs  ", "Docs"),
            ("Tax\t  2026\nreturns", "Tax 2026 returns"),
            ("   ", None),
            ("", None),
            (None, None),
        ],
    )
    def test_clean_name(self, value, expected):
        assert clean_name(value) == expected
