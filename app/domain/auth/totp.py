"""TOTP helpers (RFC 6238, SHA1, 6 digits, 30 second step)."""

import pyotp

TOTP_DIGITS = 6
TOTP_INTERVAL = 30
# Accept the previous and the next step to absorb clock drift
TOTP_VALID_WINDOW = 1


def generate_secret() -> str:
    return pyotp.random_base32()


def provisioning_uri(secret: str, account_name: str, issuer: str) -> str:
    return pyotp.TOTP(secret, digits=TOTP_DIGITS, interval=TOTP_INTERVAL).provisioning_uri(
        name=account_name, issuer_name=issuer
    )


def current_pin(secret: str) -> str:
    return pyotp.TOTP(secret, digits=TOTP_DIGITS, interval=TOTP_INTERVAL).now()


def verify_pin(secret: str | None, pin: str | None, for_time=None) -> bool:
    if not secret or not pin:
        return False
    pin = pin.strip()
    if len(pin) != TOTP_DIGITS or not pin.isdigit():
        return False
    totp = pyotp.TOTP(secret, digits=TOTP_DIGITS, interval=TOTP_INTERVAL)
    return totp.verify(pin, for_time=for_time, valid_window=TOTP_VALID_WINDOW)
