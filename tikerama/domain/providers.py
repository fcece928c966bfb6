# tikerama/domain/providers.py
from tikerama.utils.format import digits_only

# Mobile-money wallets accepted at checkout, with the national prefixes they issue
MOMO_PROVIDERS = {
    "orange_money": {
        "id": "orange_money",
        "name": "Orange Money",
        "prefix": ("07", "08"),
    },
    "mtn_momo": {
        "id": "mtn_momo",
        "name": "MTN Mobile Money",
        "prefix": ("05",),
    },
    "wave": {
        "id": "wave",
        "name": "Wave",
        "prefix": ("01",),
    },
}


def provider_name(provider: str) -> str:
    return MOMO_PROVIDERS[provider]["name"]


def detect_provider(phone: str) -> str | None:
    """Guess the wallet from a 10-digit number's prefix; None when nothing matches."""
    digits = digits_only(phone)
    if len(digits) != 10:
        return None

    for provider_id, provider in MOMO_PROVIDERS.items():
        if digits.startswith(provider["prefix"]):
            return provider_id

    return None
