"""
Short prefixed ID generator for Fritter entities.

Format: {prefix}_{base36_random}
- us_xxxxxxxx  - user
- ct_xxxxxxxx  - content item

8 chars base36 = 36^8 = 2.8 trillion unique IDs per type
Total length: 11 chars (2 prefix + 1 separator + 8 random)

VSP requests are keyed by username and carry no generated ID.
"""
import secrets
import re
from typing import Optional

# Base36 alphabet (lowercase letters + digits)
ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"
BASE = len(ALPHABET)  # 36

# Valid prefixes
PREFIXES = {
    'user': 'us',
    'content': 'ct',
}

# Reverse mapping for validation
PREFIX_TO_TYPE = {v: k for k, v in PREFIXES.items()}

# Regex for validation
ID_PATTERN = re.compile(r'^(us|ct)_[0-9a-z]{8}$')


def _random_base36(length: int = 8) -> str:
    """Generate random base36 string"""
    return ''.join(ALPHABET[secrets.randbelow(BASE)] for _ in range(length))


def generate_id(entity_type: str) -> str:
    """
    Generate a new short ID for the given entity type.

    Args:
        entity_type: One of 'user', 'content'

    Returns:
        Short ID like 'ct_x5b8r2yj'

    Raises:
        ValueError: If entity_type is invalid
    """
    if entity_type not in PREFIXES:
        raise ValueError(f"Invalid entity type: {entity_type}. "
                        f"Must be one of: {list(PREFIXES.keys())}")

    return f"{PREFIXES[entity_type]}_{_random_base36(8)}"


def validate_id(id_str: str, entity_type: Optional[str] = None) -> bool:
    """
    Check if a string is a valid short ID, optionally of a given type.

    Args:
        id_str: String to validate
        entity_type: Expected entity type, or None for any

    Returns:
        True if valid, False otherwise
    """
    if not id_str or not isinstance(id_str, str):
        return False
    if not ID_PATTERN.match(id_str):
        return False
    return entity_type is None or get_id_type(id_str) == entity_type


def get_id_type(id_str: str) -> Optional[str]:
    """Extract the entity type ('user', 'content') from an ID, or None."""
    if not id_str or not ID_PATTERN.match(id_str):
        return None
    return PREFIX_TO_TYPE.get(id_str[:2])


def generate_user_id() -> str:
    """Generate a new user ID"""
    return generate_id('user')


def generate_content_id() -> str:
    """Generate a new content ID"""
    return generate_id('content')
