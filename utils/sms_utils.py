"""
utils/sms_utils.py

Purpose: SMS link builders

- Normalizes recipient phone numbers
- Generates SMS deep links for mobile apps
- Builds public short URLs
- Generates random short identifiers
"""

import base64
import re
import secrets
import urllib.parse


# Characters encodeURIComponent leaves untouched on top of quote()'s defaults
DEEP_LINK_SAFE_CHARS = "!*'()"

_NON_DIGITS = re.compile(r"[^0-9]")


def normalize_phone(phone: str) -> str:
    """
    Strips everything but ASCII digits from a phone number.
    A single leading "+" is kept when the input starts with one.

    Examples:
        "+1 (234) 567-8900" -> "+12345678900"
        "234.567.8900"      -> "2345678900"
    """
    if not phone:
        return ""

    phone = phone.strip()
    digits = _NON_DIGITS.sub("", phone)

    return f"+{digits}" if phone.startswith("+") else digits


def count_digits(phone: str) -> int:
    """Number of ASCII digits in a (normalized) phone number."""
    return sum(1 for char in phone if char in "0123456789")


def create_sms_deep_link(phone_number: str, message: str) -> str:
    """
    Creates a deep link that opens SMS app with pre-filled content.
    Works on both Android and iOS.

    Args:
        phone_number: Normalized recipient phone number
        message: Pre-filled SMS content

    Returns:
        SMS deep link URL (sms:<phone>?body=<encoded message>)
    """
    encoded_message = urllib.parse.quote(message, safe=DEEP_LINK_SAFE_CHARS)
    return f"sms:{phone_number}?body={encoded_message}"


def build_short_url(base_url: str, short_id: str) -> str:
    """
    Joins the public base URL and the redirect path for a short identifier.
    """
    return f"{base_url.rstrip('/')}/s/{short_id}"


def generate_short_id(num_bytes: int = 6) -> str:
    """
    Generates a URL-safe short identifier from a cryptographically secure
    random source (6 bytes -> 8 characters, ~48 bits of entropy).
    """
    raw = secrets.token_bytes(num_bytes)
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")
