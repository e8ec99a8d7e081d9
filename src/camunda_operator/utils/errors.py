"""Error sanitization utilities to keep credentials out of events, status and logs."""

import re

# Bearer tokens and JWTs can show up verbatim in HTTP error bodies
SENSITIVE_PATTERNS = [
    r"(bearer)\s+[A-Za-z0-9\-\._~\+/]+=*",
    r"(eyJ)[A-Za-z0-9\-_]+\.[A-Za-z0-9\-_]+\.[A-Za-z0-9\-_]*",
]

SENSITIVE_FIELDS = {
    "client_secret",
    "clientsecret",
    "zeebe_client_secret",
    "access_token",
    "refresh_token",
    "password",
    "credentials",
    "secret",
    "token",
}


def sanitize_error_message(message: str) -> str:
    """Redact secrets and bearer tokens from an error message.

    Args:
        message: Original error message

    Returns:
        Message with sensitive values replaced by ``[REDACTED]``
    """
    sanitized = message

    for pattern in SENSITIVE_PATTERNS:
        sanitized = re.sub(pattern, r"\1 [REDACTED]", sanitized, flags=re.IGNORECASE)

    for field in SENSITIVE_FIELDS:
        # field: value, field=value and "field": "value"
        sanitized = re.sub(
            rf"(\"?{field}\"?)\s*[:=]\s*\"?([^\s,;\)\"&}}]+)\"?",
            r"\1: [REDACTED]",
            sanitized,
            flags=re.IGNORECASE,
        )

    return sanitized


def sanitize_exception(error: Exception) -> str:
    """Return the sanitized message of an exception."""
    return sanitize_error_message(str(error))
