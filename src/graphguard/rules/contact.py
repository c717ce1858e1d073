"""Email, URL, IP address and phone number rules.
"""

from __future__ import annotations

import ipaddress
import re
from typing import Any, Dict, Iterable
from urllib.parse import urlsplit

from email_validator import EmailNotValidError, validate_email

from .base import Options, Rule, rule


@rule("email")
class Email(Rule):
    """String must be a syntactically valid email address.

    Syntax checking is delegated to email-validator. With ``check_dns`` the
    domain must also resolve to a mail server.

    Options:
        message: Error message
        check_dns: Verify the domain accepts mail (default False)
    """

    DEFAULT_MESSAGE = "Invalid email address"

    @staticmethod
    def basic(message: str = DEFAULT_MESSAGE) -> Dict[str, Any]:
        return {"message": message, "check_dns": False}

    @staticmethod
    def with_dns_check(message: str = DEFAULT_MESSAGE) -> Dict[str, Any]:
        return {"message": message, "check_dns": True}

    @staticmethod
    def strict() -> Dict[str, Any]:
        return {"strict": True, "check_dns": True}

    def validate_value(self, value: Any, options: Options) -> str | None:
        if value is None:
            return None
        if not isinstance(value, str):
            return "Email must be a string"

        try:
            validate_email(value, check_deliverability=False)
        except EmailNotValidError:
            return options.get("message", self.DEFAULT_MESSAGE)

        if options.get("check_dns", False):
            try:
                validate_email(value, check_deliverability=True)
            except EmailNotValidError:
                return "Email domain does not exist"

        return None


_HOSTNAME_PATTERN = re.compile(
    r"^(?:[a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?)(?:\.[a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?)*\.?$",
    re.IGNORECASE,
)


def _is_loopback_host(host: str) -> bool:
    return host in ("localhost", "::1") or host.startswith("127.")


@rule("url")
class Url(Rule):
    """String must be an absolute URL with a host.

    ``javascript``, ``data``, ``vbscript`` and ``file`` URLs are always
    rejected. Without ``allowed_protocols`` only common network schemes are
    accepted.

    Options:
        allowed_protocols: Accepted schemes
        allow_localhost: Accept loopback hosts (default True)
        message: Error message
    """

    DANGEROUS_PROTOCOLS = frozenset({"javascript", "data", "vbscript", "file"})
    COMMON_PROTOCOLS = frozenset({"http", "https", "ftp", "ftps", "ssh", "sftp", "ws", "wss"})

    @staticmethod
    def https_only() -> Dict[str, Any]:
        return {"allowed_protocols": ["https"]}

    @staticmethod
    def no_localhost() -> Dict[str, Any]:
        return {"allow_localhost": False}

    @staticmethod
    def secure() -> Dict[str, Any]:
        return {"allowed_protocols": ["https"], "allow_localhost": False}

    def validate_value(self, value: Any, options: Options) -> str | None:
        if value is None:
            return None
        if not isinstance(value, str):
            return "URL must be a string"

        message = options.get("message", "Invalid URL")

        host = self._host(value)
        if host is None:
            return message

        scheme = urlsplit(value).scheme.lower()
        if scheme in self.DANGEROUS_PROTOCOLS:
            return message

        allowed: Iterable[str] | None = options.get("allowed_protocols")
        if allowed is not None:
            allowed = list(allowed)
            if scheme not in {p.lower() for p in allowed}:
                return f"URL protocol must be one of: {', '.join(allowed)}"
        elif scheme not in self.COMMON_PROTOCOLS:
            return message

        if not options.get("allow_localhost", True) and _is_loopback_host(host):
            return "Localhost URLs are not allowed"

        return None

    @staticmethod
    def _host(value: str) -> str | None:
        if not value or any(ch.isspace() for ch in value):
            return None
        try:
            parts = urlsplit(value)
            parts.port  # raises ValueError for malformed ports
        except ValueError:
            return None
        if not parts.scheme or not parts.hostname:
            return None

        host = parts.hostname.lower()
        try:
            ipaddress.ip_address(host)
            return host
        except ValueError:
            pass
        return host if _HOSTNAME_PATTERN.match(host) else None


@rule("ip")
class Ip(Rule):
    """String must be an IPv4 or IPv6 address.

    Options:
        version: "v4"/"4" or "v6"/"6" to require one family
        allow_private: Accept private and loopback ranges (default True)
        allow_reserved: Accept reserved ranges (default True)
        message: Error message
    """

    @staticmethod
    def v4() -> Dict[str, Any]:
        return {"version": "v4"}

    @staticmethod
    def v6() -> Dict[str, Any]:
        return {"version": "v6"}

    @staticmethod
    def no_private() -> Dict[str, Any]:
        return {"allow_private": False}

    @staticmethod
    def public_v4() -> Dict[str, Any]:
        return {"version": "v4", "allow_private": False}

    def validate_value(self, value: Any, options: Options) -> str | None:
        if value is None:
            return None
        if not isinstance(value, str):
            return "IP address must be a string"

        version = str(options.get("version", "")).lower().lstrip("v")
        try:
            address = ipaddress.ip_address(value)
        except ValueError:
            address = None

        if version == "4":
            if address is None or address.version != 4:
                return "Invalid IPv4 address"
        elif version == "6":
            if address is None or address.version != 6:
                return "Invalid IPv6 address"
        elif address is None:
            return options.get("message", "Invalid IP address")

        if not options.get("allow_private", True) and (address.is_private or address.is_loopback):
            return "Private IP addresses are not allowed"

        if not options.get("allow_reserved", True) and (
            address.is_reserved or address.is_unspecified or address.is_link_local
        ):
            return "Reserved IP addresses are not allowed"

        return None


@rule("phone_number")
class PhoneNumber(Rule):
    """String must look like a phone number.

    Spaces, dashes, dots and parentheses are ignored. A ``country_code``
    selects a national pattern; ``require_international`` demands E.164.

    Options:
        country_code: One of the supported ISO country codes
        require_international: Require "+" and E.164 digits (default False)
        message: Error message
    """

    COUNTRY_PATTERNS = {
        "DE": re.compile(r"^(\+49|0049|0)[1-9][0-9]{1,14}$"),
        "US": re.compile(r"^(\+1|1)?[2-9]\d{2}[2-9]\d{6}$"),
        "GB": re.compile(r"^(\+44|0044|0)[1-9]\d{9,10}$"),
        "FR": re.compile(r"^(\+33|0033|0)[1-9]\d{8}$"),
        "IT": re.compile(r"^(\+39|0039)?[0-9]{6,12}$"),
        "ES": re.compile(r"^(\+34|0034)?[6-9]\d{8}$"),
        "AT": re.compile(r"^(\+43|0043|0)[1-9]\d{3,12}$"),
        "CH": re.compile(r"^(\+41|0041|0)[1-9]\d{8}$"),
        "NL": re.compile(r"^(\+31|0031|0)[1-9]\d{8}$"),
        "BE": re.compile(r"^(\+32|0032|0)[1-9]\d{7,8}$"),
    }
    E164_PATTERN = re.compile(r"^\+[1-9]\d{1,14}$")
    GENERIC_PATTERN = re.compile(r"^(\+)?[0-9]{7,15}$")
    _FORMATTING = str.maketrans("", "", " -().")

    @staticmethod
    def german() -> Dict[str, Any]:
        return {"country_code": "DE"}

    @staticmethod
    def us() -> Dict[str, Any]:
        return {"country_code": "US"}

    @staticmethod
    def international() -> Dict[str, Any]:
        return {"require_international": True}

    def validate_value(self, value: Any, options: Options) -> str | None:
        if value is None:
            return None
        if not isinstance(value, str):
            return "Phone number must be a string"

        cleaned = value.translate(self._FORMATTING)

        country_code = options.get("country_code")
        if country_code is not None:
            code = country_code.upper()
            pattern = self.COUNTRY_PATTERNS.get(code)
            if pattern is None:
                return f"Unsupported country code: {country_code}"
            if not pattern.match(cleaned):
                return f"Invalid phone number for country {code}"
            return None

        if options.get("require_international", False):
            if not self.E164_PATTERN.match(cleaned):
                return "Phone number must be in international format (+XX...)"
            return None

        if not self.GENERIC_PATTERN.match(cleaned):
            return options.get("message", "Invalid phone number")
        return None
