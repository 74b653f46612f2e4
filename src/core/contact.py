"""WhatsApp contact links for providers."""

import re
from urllib.parse import quote

_NON_DIGITS = re.compile(r"\D")


def default_message(provider_name: str | None = None) -> str:
    greeting = f"Hello, {provider_name}!" if provider_name else "Hello!"
    return (
        f"{greeting} I found your profile on the marketplace and would like a quote. "
        "Can we talk about the service?"
    )


def whatsapp_url(
    phone: str,
    provider_name: str | None = None,
    message: str | None = None,
    country_code: str = "55",
) -> str:
    """Build a wa.me link with a pre-filled quote request message."""
    digits = _NON_DIGITS.sub("", phone)
    text = quote(message if message is not None else default_message(provider_name), safe="")
    return f"https://wa.me/{country_code}{digits}?text={text}"
