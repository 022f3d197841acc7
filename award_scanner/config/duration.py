"""Duration parsing for the scan interval setting."""

import re

_ISO8601_PATTERN = re.compile(
    r"^P(?:(?P<days>\d+)D)?(?:T(?:(?P<hours>\d+)H)?(?:(?P<minutes>\d+)M)?(?:(?P<seconds>\d+(?:\.\d+)?)S)?)?$"
)
_HUMAN_PATTERN = re.compile(r"(\d+)([smhd])")

_UNIT_SECONDS = {"s": 1, "m": 60, "h": 3600, "d": 86400}

MIN_SCAN_INTERVAL = 300
MAX_SCAN_INTERVAL = 86400


class DurationParseError(ValueError):
    """Raised when a duration string cannot be parsed."""

    pass


def parse_duration(duration_str: str) -> int:
    """
    Parse a duration string to seconds.

    Accepts human-readable durations ("30m", "1h", "1h30m", "2d") and
    ISO-8601 durations ("PT30M", "PT1H", "P1D").

    Args:
        duration_str: Duration string to parse

    Returns:
        Duration in seconds

    Raises:
        DurationParseError: If the string is empty, malformed or zero

    Examples:
        >>> parse_duration("1h")
        3600
        >>> parse_duration("PT15M")
        900
    """
    text = duration_str.strip() if duration_str else ""
    if not text:
        raise DurationParseError("Duration string cannot be empty")

    if text.upper().startswith("P"):
        seconds = _parse_iso8601(text.upper())
    else:
        seconds = _parse_human(text.lower())

    if seconds == 0:
        raise DurationParseError(f"Duration cannot be zero: '{duration_str}'")
    return seconds


def _parse_iso8601(text: str) -> int:
    match = _ISO8601_PATTERN.match(text)
    if not match or text in ("P", "PT"):
        raise DurationParseError(
            f"Invalid ISO-8601 duration format: '{text}'. "
            "Expected format like 'P1D', 'PT1H30M' or 'PT15M'"
        )
    parts = match.groupdict()
    return (
        int(parts["days"] or 0) * _UNIT_SECONDS["d"]
        + int(parts["hours"] or 0) * _UNIT_SECONDS["h"]
        + int(parts["minutes"] or 0) * _UNIT_SECONDS["m"]
        + int(float(parts["seconds"] or 0))
    )


def _parse_human(text: str) -> int:
    compact = re.sub(r"\s+", "", text)
    matches = _HUMAN_PATTERN.findall(compact)
    if not matches or "".join(f"{num}{unit}" for num, unit in matches) != compact:
        raise DurationParseError(
            f"Invalid duration format: '{text}'. "
            "Use digits with units s, m, h or d, e.g. '30m', '1h' or '1h30m'"
        )
    return sum(int(num) * _UNIT_SECONDS[unit] for num, unit in matches)


def validate_duration_range(
    duration_seconds: int,
    min_seconds: int = MIN_SCAN_INTERVAL,
    max_seconds: int = MAX_SCAN_INTERVAL,
) -> None:
    """
    Validate that a scan interval is within the accepted range.

    Args:
        duration_seconds: Duration in seconds
        min_seconds: Minimum allowed duration (default: 5 minutes)
        max_seconds: Maximum allowed duration (default: 24 hours)

    Raises:
        DurationParseError: If the duration is outside the range
    """
    if duration_seconds < min_seconds:
        raise DurationParseError(
            f"Scan interval too short: {duration_seconds}s. Minimum is {min_seconds}s."
        )
    if duration_seconds > max_seconds:
        raise DurationParseError(
            f"Scan interval too long: {duration_seconds}s. Maximum is {max_seconds}s."
        )
