import string

MAX_FILENAME_LENGTH = 64

# Overly restrictive on purpose: no separators, whitespace or non-ASCII.
_ALLOWED_CHARACTERS = frozenset(string.ascii_letters + string.digits + "_-.")


def sanitize(candidate: str) -> bool:
    """Check a proposed filename against the allowed characters and length."""
    if len(candidate) > MAX_FILENAME_LENGTH:
        return False
    return all(char in _ALLOWED_CHARACTERS for char in candidate)
