# tikerama/utils/format.py
import re
from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP

from tikerama.utils.settings import CURRENCY_SYMBOL

_NON_DIGITS = re.compile(r"\D")


def format_currency(amount: Decimal | int | float, symbol: str = CURRENCY_SYMBOL) -> str:
    """XOF has no minor unit: rounds to whole francs, groups thousands with a space."""
    whole = Decimal(str(amount)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    grouped = f"{int(whole):,}".replace(",", " ")
    return f"{grouped} {symbol}"


def digits_only(phone: str) -> str:
    return _NON_DIGITS.sub("", phone)


def format_phone_number(phone: str) -> str:
    digits = digits_only(phone)

    if len(digits) in (8, 10):
        return " ".join(digits[i:i + 2] for i in range(0, len(digits), 2))

    return phone


def is_valid_phone_number(phone: str) -> bool:
    # Ivorian mobile numbers: 10 digits starting with 0, or legacy 8 digits
    digits = digits_only(phone)
    return (len(digits) == 10 and digits.startswith("0")) or len(digits) == 8


def _as_date(value: str | date | datetime) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.fromisoformat(value.replace("Z", "+00:00")).date()


def get_relative_time(value: str | date | datetime, today: date | None = None) -> str:
    today = today or date.today()
    diff_days = (_as_date(value) - today).days

    if diff_days < 0:
        return "Événement passé"
    if diff_days == 0:
        return "Aujourd'hui"
    if diff_days == 1:
        return "Demain"
    if diff_days < 7:
        return f"Dans {diff_days} jours"
    if diff_days < 30:
        weeks = diff_days // 7
        return f"Dans {weeks} semaine{'s' if weeks > 1 else ''}"

    return f"Dans {diff_days // 30} mois"


def is_upcoming(value: str | date | datetime, today: date | None = None) -> bool:
    return _as_date(value) > (today or date.today())


def truncate_text(text: str, max_length: int) -> str:
    if len(text) <= max_length:
        return text
    return text[:max_length].strip() + "..."


def get_initials(first_name: str, last_name: str) -> str:
    return f"{first_name[:1]}{last_name[:1]}".upper()
