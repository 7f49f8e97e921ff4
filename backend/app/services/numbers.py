"""Currency/number formatting, GST and Gujarati numeral helpers."""

from decimal import Decimal, InvalidOperation

from backend.app.core.errors import InvalidNumber

CURRENCY_GLYPH = "₹"
DEFAULT_TAX_RATE = 18

LATIN_DIGITS = "0123456789"
GUJARATI_DIGITS = "૦૧૨૩૪૫૬૭૮૯"
_TO_GUJARATI = str.maketrans(LATIN_DIGITS, GUJARATI_DIGITS)
_FROM_GUJARATI = str.maketrans(GUJARATI_DIGITS, LATIN_DIGITS)


def to_decimal(value: Decimal | float | int | str) -> Decimal:
    """Convert user or stored input to Decimal, rejecting anything non-finite."""
    if value is None or isinstance(value, bool):
        raise InvalidNumber(value, "expected a number")
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except (InvalidOperation, ValueError) as exc:
            raise InvalidNumber(value, "malformed") from exc
    if not result.is_finite():
        raise InvalidNumber(value, "not finite")
    return result


def normalize_decimal(value: Decimal | float | int | str) -> Decimal:
    """Drop trailing fraction zeros without switching to exponent notation (164000, not 1.64E+5)."""
    number = to_decimal(value).normalize()
    if number.as_tuple().exponent > 0:
        number = number.quantize(Decimal(1))
    return number


def _group_indian(integer_digits: str) -> str:
    if len(integer_digits) <= 3:
        return integer_digits
    head, tail = integer_digits[:-3], integer_digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


def format_number(amount: Decimal | float | int | str) -> str:
    """Format with Indian grouping (4,03,000), keeping the input's fraction digits."""
    value = to_decimal(amount)
    text = format(abs(value), "f")
    integer_part, _, fraction = text.partition(".")
    grouped = _group_indian(integer_part)
    if fraction:
        grouped = f"{grouped}.{fraction}"
    if value < 0:
        return f"-{grouped}"
    return grouped


def format_currency(amount: Decimal | float | int | str) -> str:
    value = to_decimal(amount)
    body = f"{CURRENCY_GLYPH} {format_number(abs(value))}"
    if value < 0:
        return f"-{body}"
    return body


def parse_formatted_number(text: str) -> Decimal:
    """Parse the output of format_number/format_currency back to a Decimal."""
    if not isinstance(text, str):
        raise InvalidNumber(text, "expected a string")
    cleaned = from_target_script_digits(text).replace(CURRENCY_GLYPH, "").replace(",", "")
    cleaned = "".join(cleaned.split())
    if not cleaned:
        raise InvalidNumber(text, "empty")
    return to_decimal(cleaned)


def compute_tax(base: Decimal | float | int | str, rate: Decimal | float | int | str = DEFAULT_TAX_RATE) -> Decimal:
    """GST on ``base``. ``rate`` is a percentage: pass 18, not 0.18."""
    return to_decimal(base) * to_decimal(rate) / Decimal(100)


def to_target_script_digits(value: Decimal | float | int | str) -> str:
    if isinstance(value, str):
        return value.translate(_TO_GUJARATI)
    return format(to_decimal(value), "f").translate(_TO_GUJARATI)


def from_target_script_digits(text: str) -> str:
    return text.translate(_FROM_GUJARATI)


def to_target_script_currency(amount: Decimal | float | int | str) -> str:
    return to_target_script_digits(format_currency(amount))
