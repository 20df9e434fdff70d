"""Utility functions and helpers."""

from __future__ import annotations

import base64
import secrets
import string


def generate_random_string(length: int = 32) -> str:
    """Generate a random string of specified length.

    Args:
        length: Length of the random string

    Returns:
        Random string containing letters and digits
    """
    alphabet = string.ascii_letters + string.digits
    return "".join(secrets.choice(alphabet) for _ in range(length))


def generate_client_key(length: int = 20) -> str:
    """Generate an API client key (letters and digits only)."""
    return generate_random_string(length)


def generate_client_secret(num_bytes: int = 18) -> str:
    """Generate an API client secret.

    Args:
        num_bytes: Number of random bytes before encoding

    Returns:
        URL-safe base64 text without padding
    """
    return base64.urlsafe_b64encode(secrets.token_bytes(num_bytes)).decode().rstrip("=")
