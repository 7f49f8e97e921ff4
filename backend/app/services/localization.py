"""Invoice labels, unit names and dates in English and Gujarati."""

from datetime import date
from typing import Literal

from backend.app.services.numbers import to_target_script_digits

Language = Literal["en", "gu"]

LABELS: dict[str, dict[str, str]] = {
    "en": {
        "quotation": "Quotation",
        "invoice_no": "Invoice #",
        "client": "Client",
        "date": "Date",
        "sr": "Sr",
        "description": "Description",
        "quantity": "Qty",
        "unit": "Unit",
        "rate": "Rate (₹)",
        "total": "Total (₹)",
        "subtotal": "Total without GST",
        "gst": "GST",
        "grand_total": "Total Amount",
        "gst_number": "GST",
        "phone": "Phone",
        "generated_by": "Generated by",
        "inquiries": "For inquiries, contact us at:",
        "terms": "Terms & Conditions:",
        "terms_1": "1. Payment due within 15 days",
        "terms_2": "2. All prices are inclusive of taxes",
        "thanks_business": "Thank You for Your Business!",
        "payment_details": "Payment Details:",
        "thank_you": "Thank you",
    },
    "gu": {
        "quotation": "કોટેશન",
        "invoice_no": "બિલ",
        "client": "પાર્ટી",
        "date": "તારીખ",
        "sr": "ક્રમ",
        "description": "વર્ણન",
        "quantity": "જથ્થો",
        "unit": "એકમ",
        "rate": "દર (₹)",
        "total": "કુલ (₹)",
        "subtotal": "GST વિના કુલ",
        "gst": "જીએસટી",
        "grand_total": "GST સાથે કુલ",
        "gst_number": "જીએસટી",
        "phone": "ફોન",
        "generated_by": "દ્વારા બનાવેલ",
        "inquiries": "સંપર્ક:",
        "terms": "નિયમો અને શરતો:",
        "terms_1": "૧. ચુકવણી ૧૫ દિવસમાં",
        "terms_2": "૨. તમામ કિંમતો કર સહિત છે",
        "thanks_business": "આપના વ્યવસાય બદલ આભાર!",
        "payment_details": "ચુકવણી વિગતો:",
        "thank_you": "આભાર",
    },
}

GUJARATI_UNITS = {
    "pcs": "નંગ",
    "kg": "કિલો",
    "g": "ગ્રામ",
    "l": "લિટર",
    "ml": "મિલિ",
    "day": "દિવસ",
    "hour": "કલાક",
    "month": "મહિનો",
    "year": "વર્ષ",
    "ft": "ફૂટ",
    "m": "મીટર",
    "cm": "સેમી",
    "sqft": "ચો.ફૂટ",
    "sft": "ચો.ફૂટ",
    "sqm": "ચો.મી",
    "dozen": "ડઝન",
    "box": "બોક્સ",
    "pair": "જોડી",
    "set": "સેટ",
    "unit": "યુનિટ",
    "person": "વ્યક્તિ",
    "qty": "જથ્થો",
}

GUJARATI_MONTHS = [
    "જાન્યુઆરી", "ફેબ્રુઆરી", "માર્ચ", "એપ્રિલ",
    "મે", "જૂન", "જુલાઈ", "ઓગસ્ટ",
    "સપ્ટેમ્બર", "ઓક્ટોબર", "નવેમ્બર", "ડિસેમ્બર",
]


def label(key: str, language: Language = "en") -> str:
    return LABELS.get(language, LABELS["en"]).get(key, LABELS["en"][key])


def localize_unit(unit: str | None, language: Language = "en") -> str:
    unit = unit or "pcs"
    if language == "gu":
        return GUJARATI_UNITS.get(unit.lower(), unit)
    return unit


def format_date(value: date | None, language: Language = "en") -> str:
    if value is None:
        return ""
    if language == "gu":
        month = GUJARATI_MONTHS[value.month - 1]
        return f"{to_target_script_digits(value.day)} {month}, {to_target_script_digits(value.year)}"
    return value.isoformat()
