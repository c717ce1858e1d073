"""Value rules.

Each rule checks a single extracted value and returns an error message or
None. Importing this package registers every built-in rule in
``rule_catalog`` under its configuration name.
"""

from .base import (
    Options,
    Rule,
    RuleKey,
    create_rule,
    register_rule,
    resolve_rule_class,
    rule,
    rule_catalog,
)
from .collection import Count, UniqueItems
from .contact import Email, Ip, PhoneNumber, Url
from .finance import CreditCard, Iban, iban_checksum_valid, luhn_valid
from .general import Callback, Contain, Equals, NotBlank, NotEmpty
from .numeric import Positive, Range
from .text import ISO_8601, Alphanumeric, DateTime, Format, Json, Length, Uuid

__all__ = [
    # Contract and catalog
    "Rule",
    "RuleKey",
    "Options",
    "rule",
    "rule_catalog",
    "register_rule",
    "resolve_rule_class",
    "create_rule",
    # Presence, equality, membership
    "NotBlank",
    "NotEmpty",
    "Equals",
    "Contain",
    "Callback",
    # Numbers
    "Range",
    "Positive",
    # Strings
    "Length",
    "Format",
    "Alphanumeric",
    "Uuid",
    "Json",
    "DateTime",
    "ISO_8601",
    # Contact data
    "Email",
    "Url",
    "Ip",
    "PhoneNumber",
    # Payments
    "CreditCard",
    "Iban",
    "luhn_valid",
    "iban_checksum_valid",
    # Collections
    "Count",
    "UniqueItems",
]
