import re
import secrets
import string

# Base62 alphabet; short codes are case-sensitive
ALPHABET = string.ascii_letters + string.digits
BASE = len(ALPHABET)
SHORT_CODE_LENGTH = 6

_SHORT_CODE_RE = re.compile(rf"[A-Za-z0-9]{{{SHORT_CODE_LENGTH}}}")
_NON_ALNUM_RE = re.compile(r"[^a-z0-9]", re.IGNORECASE)


def generate_short_code() -> str:
    """Generate a random 6-character Base62 code. Uniqueness is checked by the caller."""
    return ''.join(secrets.choice(ALPHABET) for _ in range(SHORT_CODE_LENGTH))


def is_short_code(code: str) -> bool:
    return bool(_SHORT_CODE_RE.fullmatch(code or ""))


def slugify_content(content: str, limit: int = 20) -> str:
    """Replace every non-alphanumeric character with '-' and keep the first ``limit`` chars."""
    return _NON_ALNUM_RE.sub("-", content)[:limit]
