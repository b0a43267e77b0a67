# richter/utils/codes.py
import secrets


def generate_verification_code(length: int = 8) -> int:
    """Uniform random digits from the OS CSPRNG, read as a fixed-width number."""
    digits = "".join(str(secrets.randbelow(10)) for _ in range(length))
    return int(digits)


def format_code(code: int, length: int = 8) -> str:
    return str(code).zfill(length)


def parse_code(raw: str, length: int = 8):
    # Only the canonical zero-padded ASCII form is a code.
    if len(raw) != length or not (raw.isascii() and raw.isdigit()):
        return None
    return int(raw)
