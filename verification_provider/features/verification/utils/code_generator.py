import secrets

CODE_LENGTH = 6


def generate_code(length: int = CODE_LENGTH) -> str:
    """Generate a numeric verification code; leading zeros are kept."""
    return ''.join(str(secrets.randbelow(10)) for _ in range(length))
