import re

from src.core.errors import AddressNotFound, ValidationError

# Whole input is an address, prefix optional
_FULL_ADDRESS = re.compile(r"(?:0x)?([0-9a-f]{40})", re.IGNORECASE)
# Address embedded in free text, e.g. https://polymarket.com/profile/0x...
_EMBEDDED_ADDRESS = re.compile(r"0x([0-9a-f]{40})", re.IGNORECASE)


def canonical_address(hex_digits: str) -> str:
    return "0x" + hex_digits.lower()


def extract_wallet_address(text: str) -> str:
    """
    Pull a wallet address out of a raw address or a profile URL.
    Returns the lowercase `0x`-prefixed form; the first match wins.
    Raises AddressNotFound when the text contains no address.
    """
    if text is None:
        raise AddressNotFound("")
    text = text.strip()

    match = _FULL_ADDRESS.fullmatch(text)
    if match:
        return canonical_address(match.group(1))

    match = _EMBEDDED_ADDRESS.search(text)
    if match:
        return canonical_address(match.group(1))

    raise AddressNotFound(text)


def validate_wallet_address(user: str) -> str:
    """Strict check for query parameters: the whole value must be an address."""
    match = _FULL_ADDRESS.fullmatch(user or "")
    if not match:
        raise ValidationError("Invalid or missing wallet address (user)")
    return canonical_address(match.group(1))
