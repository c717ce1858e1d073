"""Payment identifier rules: credit card numbers and IBANs.
"""

from __future__ import annotations

import re
from typing import Any, Dict

from .base import Options, Rule, rule


def luhn_valid(number: str) -> bool:
    """Check a digit string with the Luhn (mod 10) algorithm."""
    total = 0
    for index, char in enumerate(reversed(number)):
        digit = int(char)
        if index % 2 == 1:
            digit *= 2
            if digit > 9:
                digit -= 9
        total += digit
    return total % 10 == 0


def iban_checksum_valid(iban: str) -> bool:
    """Check an upper-case, space-free IBAN with the ISO 7064 mod-97 rule."""
    rearranged = iban[4:] + iban[:4]
    remainder = 0
    for char in rearranged:
        digits = str(ord(char) - ord("A") + 10) if char.isalpha() else char
        for digit in digits:
            remainder = (remainder * 10 + int(digit)) % 97
    return remainder == 1


@rule("credit_card")
class CreditCard(Rule):
    """String must be a plausible card number passing the Luhn check.

    Spaces and dashes are ignored. Numbers must have 12-19 digits and may
    not repeat a single digit.

    Options:
        card_type: visa, mastercard, amex, discover, diners or jcb
        message: Error message
    """

    CARD_PATTERNS = {
        "visa": re.compile(r"^4[0-9]{12}(?:[0-9]{3})?$"),
        "mastercard": re.compile(
            r"^(?:5[1-5][0-9]{14}|2(?:22[1-9]|2[3-9][0-9]|[3-6][0-9]{2}|7[0-1][0-9]|720)[0-9]{12})$"
        ),
        "amex": re.compile(r"^3[47][0-9]{13}$"),
        "discover": re.compile(r"^6(?:011|5[0-9]{2})[0-9]{12}$"),
        "diners": re.compile(r"^3(?:0[0-5]|[68][0-9])[0-9]{11}$"),
        "jcb": re.compile(r"^(?:2131|1800|35\d{3})\d{11}$"),
    }
    REPEATED_DIGIT = re.compile(r"^(\d)\1+$")

    @staticmethod
    def visa() -> Dict[str, Any]:
        return {"card_type": "visa"}

    @staticmethod
    def mastercard() -> Dict[str, Any]:
        return {"card_type": "mastercard"}

    @staticmethod
    def amex() -> Dict[str, Any]:
        return {"card_type": "amex"}

    @staticmethod
    def discover() -> Dict[str, Any]:
        return {"card_type": "discover"}

    def validate_value(self, value: Any, options: Options) -> str | None:
        if value is None:
            return None
        if not isinstance(value, str):
            return "Credit card number must be a string"

        message = options.get("message", "Invalid credit card number")
        number = value.replace(" ", "").replace("-", "")

        if not (number.isascii() and number.isdigit()):
            if "message" in options:
                return message
            return "Credit card number must contain only digits"

        if not 12 <= len(number) <= 19:
            return message

        if self.REPEATED_DIGIT.match(number):
            return message

        card_type = options.get("card_type")
        if card_type is not None:
            pattern = self.CARD_PATTERNS.get(card_type.lower())
            if pattern is None:
                return f"Unknown card type: {card_type}"
            if not pattern.match(number):
                return f"Invalid {card_type.lower().capitalize()} card number"

        if not luhn_valid(number):
            return message
        return None


@rule("iban")
class Iban(Rule):
    """String must be an IBAN with a known country, correct length and checksum.

    Spaces are ignored and letters are case-insensitive.

    Options:
        message: Error message for malformed input
    """

    COUNTRY_LENGTHS = {
        "AD": 24, "AE": 23, "AL": 28, "AT": 20, "AZ": 28, "BA": 20, "BE": 16,
        "BG": 22, "BH": 22, "BR": 29, "BY": 28, "CH": 21, "CR": 22, "CY": 28,
        "CZ": 24, "DE": 22, "DK": 18, "DO": 28, "EE": 20, "EG": 29, "ES": 24,
        "FI": 18, "FO": 18, "FR": 27, "GB": 22, "GE": 22, "GI": 23, "GL": 18,
        "GR": 27, "GT": 28, "HR": 21, "HU": 28, "IE": 22, "IL": 23, "IS": 26,
        "IT": 27, "JO": 30, "KW": 30, "KZ": 20, "LB": 28, "LC": 32, "LI": 21,
        "LT": 20, "LU": 20, "LV": 21, "MC": 27, "MD": 24, "ME": 22, "MK": 19,
        "MR": 27, "MT": 31, "MU": 30, "NL": 18, "NO": 15, "PK": 24, "PL": 28,
        "PS": 29, "PT": 25, "QA": 29, "RO": 24, "RS": 22, "SA": 24, "SE": 24,
        "SI": 19, "SK": 24, "SM": 27, "TN": 24, "TR": 26, "UA": 29, "VA": 22,
        "VG": 24, "XK": 20,
    }
    IBAN_SHAPE = re.compile(r"^[A-Z]{2}[0-9]{2}[A-Z0-9]+$")

    @staticmethod
    def sepa() -> Dict[str, Any]:
        return {"message": "Invalid IBAN for SEPA region"}

    @staticmethod
    def for_country(country: str) -> Dict[str, Any]:
        return {"message": f"Invalid IBAN for country {country}"}

    def validate_value(self, value: Any, options: Options) -> str | None:
        if value is None:
            return None
        if not isinstance(value, str):
            return "IBAN must be a string"

        iban = value.upper().replace(" ", "")
        if not self.IBAN_SHAPE.match(iban):
            return options.get("message", "Invalid IBAN")

        country = iban[:2]
        expected_length = self.COUNTRY_LENGTHS.get(country)
        if expected_length is None:
            return "Unknown IBAN country code"
        if len(iban) != expected_length:
            return f"Invalid IBAN length for country {country}"

        if not iban_checksum_valid(iban):
            return "Invalid IBAN checksum"
        return None
