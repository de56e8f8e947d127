"""Email format validation for signup."""

import re

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")


def validate_email_format(email: str) -> str:
    """Return an error message, or an empty string when ``email`` is valid."""
    if not email:
        return "Email address is required."

    email = email.strip().lower()
    if len(email) > 255:
        return "Email address is too long."
    if not EMAIL_PATTERN.match(email):
        return "Please enter a valid email address format."

    local_part = email.split("@", 1)[0]
    if len(local_part) > 64:
        return "Invalid email address format."
    return ""
