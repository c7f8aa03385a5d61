"""Logging helpers."""


def sanitize_for_log(value: str | None, max_length: int = 100) -> str:
    """Sanitize a string for safe logging to prevent log injection."""
    if value is None:
        return "Not found"
    # Remove newlines, carriage returns, and other control characters
    sanitized = "".join(c if c.isprintable() and c not in "\n\r\t" else " " for c in value)
    if len(sanitized) > max_length:
        sanitized = sanitized[:max_length] + "..."
    return sanitized
