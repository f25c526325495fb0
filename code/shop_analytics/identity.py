"""
Customer identity resolution.

Sales carry free-text customer fields and no foreign key, so a customer is
identified by a derived key: the lowercased, trimmed name joined to the
digits of the phone number. Keep these pure so the join rule can be swapped
without touching the aggregation code.
"""

import re

import pandas as pd

_NON_DIGITS = re.compile(r"\D+")
_WHITESPACE = re.compile(r"\s+")


def normalize_name(name) -> str:
    if name is None or (not isinstance(name, str) and pd.isna(name)):
        return ""
    return _WHITESPACE.sub(" ", str(name).strip().lower())


def normalize_phone(phone) -> str:
    if phone is None or (not isinstance(phone, str) and pd.isna(phone)):
        return ""
    if isinstance(phone, float) and phone.is_integer():
        phone = int(phone)
    return _NON_DIGITS.sub("", str(phone))


def identity_key(name, phone) -> str:
    return f"{normalize_name(name)}:{normalize_phone(phone)}"


def normalize_product(name) -> str:
    return normalize_name(name)
