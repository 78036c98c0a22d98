import re
import string

# Define allowed special characters (excluding space)
SPECIAL_CHARS = string.punctuation.replace(' ', '')

PASSWORD_MIN_LENGTH = 8


class PasswordValidationError(Exception):
    """Password validation error exception"""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__('; '.join(errors))


def validate_password_complexity(password: str) -> None:
    """
    Validate password complexity requirements.

    Rules:
    - Minimum length of 8 characters
    - At least 1 letter
    - At least 1 digit
    - At least 1 special character

    Raises:
        PasswordValidationError: When password does not meet requirements
    """
    checks = [
        (len(password) >= PASSWORD_MIN_LENGTH,
         f"Password must be at least {PASSWORD_MIN_LENGTH} characters long"),
        (re.search(r'[A-Za-z]', password),
         "Password must contain at least 1 letter"),
        (re.search(r'\d', password),
         "Password must contain at least 1 digit"),
        (re.search(rf'[{re.escape(SPECIAL_CHARS)}]', password),
         f"Password must contain at least 1 special character ({SPECIAL_CHARS})"),
    ]

    errors = [message for passed, message in checks if not passed]
    if errors:
        raise PasswordValidationError(errors)


def clean_name(value: str | None) -> str | None:
    """
    Normalize a user-supplied display name.

    Surrounding whitespace is stripped and internal runs of whitespace are
    collapsed. Returns None when nothing is left.
    """
    if value is None:
        return None
    cleaned = re.sub(r'\s+', ' ', value).strip()
    return cleaned or None
