# pythra_forms/dateformat.py
"""
Token based date formatting and parsing.

Patterns use the moment/fecha style tokens familiar from web date pickers, so a
single pattern string such as ``"YYYY-MM-DD"`` drives both directions:

    YYYY  4-digit year          YY    2-digit year
    MMMM  January               MMM   Jan
    MM    01-12                 M     1-12
    DD    01-31                 D     1-31
    dddd  Monday                ddd   Mon
    HH    00-23                 H     0-23
    hh    01-12                 h     1-12
    mm    00-59                 m     0-59
    ss    00-59                 s     0-59
    A     AM/PM                 a     am/pm

Text inside square brackets is copied literally (``"[Week of] MMM D"``).
Named masks (see `MASKS`) may be passed instead of a pattern.

Month and weekday names are English only.
"""
import re
import logging
from datetime import date, datetime
from typing import Dict, List, Optional, Tuple, Union

logger = logging.getLogger(__name__)

MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]
MONTH_NAMES_SHORT = [name[:3] for name in MONTH_NAMES]
DAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]
DAY_NAMES_SHORT = [name[:3] for name in DAY_NAMES]

MASKS: Dict[str, str] = {
    "default": "ddd MMM DD YYYY HH:mm:ss",
    "shortDate": "M/D/YY",
    "mediumDate": "MMM D, YYYY",
    "longDate": "MMMM D, YYYY",
    "fullDate": "dddd, MMMM D, YYYY",
    "isoDate": "YYYY-MM-DD",
    "isoDateTime": "YYYY-MM-DD[T]HH:mm:ss",
}

# Two digit years below this pivot are in the 2000s, the rest in the 1900s.
TWO_DIGIT_YEAR_PIVOT = 69

_TOKEN_RE = re.compile(r"\[([^\]]*)\]|YYYY|YY|MMMM|MMM|MM|M|DD|D|dddd|ddd|HH|H|hh|h|mm|m|ss|s|A|a")

DateLike = Union[date, datetime]


class DateFormatError(ValueError):
    """Raised when a string does not match a date pattern or names an invalid date."""


def resolve_pattern(pattern: str) -> str:
    """Return the pattern for a named mask, or the pattern itself."""
    if not isinstance(pattern, str) or not pattern:
        raise TypeError("A date pattern must be a non-empty string.")
    return MASKS.get(pattern, pattern)


def _tokenize(pattern: str) -> List[Tuple[str, str]]:
    """
    Split a pattern into ``(kind, text)`` pairs, kind being ``"token"`` or
    ``"literal"``.
    """
    parts: List[Tuple[str, str]] = []
    pos = 0
    for match in _TOKEN_RE.finditer(pattern):
        if match.start() > pos:
            parts.append(("literal", pattern[pos:match.start()]))
        if match.group(1) is not None:
            parts.append(("literal", match.group(1)))
        else:
            parts.append(("token", match.group(0)))
        pos = match.end()
    if pos < len(pattern):
        parts.append(("literal", pattern[pos:]))
    return parts


def _format_token(token: str, value: DateLike) -> str:
    hour = getattr(value, "hour", 0)
    minute = getattr(value, "minute", 0)
    second = getattr(value, "second", 0)
    hour12 = hour % 12 or 12

    if token == "YYYY":
        return f"{value.year:04d}"
    if token == "YY":
        return f"{value.year % 100:02d}"
    if token == "MMMM":
        return MONTH_NAMES[value.month - 1]
    if token == "MMM":
        return MONTH_NAMES_SHORT[value.month - 1]
    if token == "MM":
        return f"{value.month:02d}"
    if token == "M":
        return str(value.month)
    if token == "DD":
        return f"{value.day:02d}"
    if token == "D":
        return str(value.day)
    if token == "dddd":
        return DAY_NAMES[value.weekday()]
    if token == "ddd":
        return DAY_NAMES_SHORT[value.weekday()]
    if token == "HH":
        return f"{hour:02d}"
    if token == "H":
        return str(hour)
    if token == "hh":
        return f"{hour12:02d}"
    if token == "h":
        return str(hour12)
    if token == "mm":
        return f"{minute:02d}"
    if token == "m":
        return str(minute)
    if token == "ss":
        return f"{second:02d}"
    if token == "s":
        return str(second)
    if token == "A":
        return "PM" if hour >= 12 else "AM"
    if token == "a":
        return "pm" if hour >= 12 else "am"
    raise ValueError(f"Unknown date token {token!r}")


def format_date(value: DateLike, pattern: str = "isoDate") -> str:
    """
    Format a date or datetime with a token pattern or named mask.

    >>> format_date(date(2024, 2, 5), "YYYY-MM-DD")
    '2024-02-05'
    """
    if not isinstance(value, date):
        raise TypeError(f"format_date expects a date or datetime, got {type(value).__name__}.")
    pattern = resolve_pattern(pattern)
    return "".join(
        text if kind == "literal" else _format_token(text, value)
        for kind, text in _tokenize(pattern)
    )


def _names_alternation(names: List[str]) -> str:
    return "|".join(re.escape(n) for n in names)


_PARSE_PATTERNS: Dict[str, str] = {
    "YYYY": r"\d{4}",
    "YY": r"\d{2}",
    "MMMM": _names_alternation(MONTH_NAMES),
    "MMM": _names_alternation(MONTH_NAMES_SHORT),
    "MM": r"\d{2}",
    "M": r"\d{1,2}",
    "DD": r"\d{2}",
    "D": r"\d{1,2}",
    "dddd": _names_alternation(DAY_NAMES),
    "ddd": _names_alternation(DAY_NAMES_SHORT),
    "HH": r"\d{2}",
    "H": r"\d{1,2}",
    "hh": r"\d{2}",
    "h": r"\d{1,2}",
    "mm": r"\d{2}",
    "m": r"\d{1,2}",
    "ss": r"\d{2}",
    "s": r"\d{1,2}",
    "A": r"AM|PM",
    "a": r"am|pm",
}

_compiled_cache: Dict[str, Tuple["re.Pattern[str]", List[str]]] = {}


def _compile(pattern: str):
    cached = _compiled_cache.get(pattern)
    if cached is not None:
        return cached
    regex_parts = []
    group_tokens: List[str] = []
    for kind, text in _tokenize(pattern):
        if kind == "literal":
            regex_parts.append(re.escape(text))
        else:
            regex_parts.append(f"(?P<t{len(group_tokens)}>{_PARSE_PATTERNS[text]})")
            group_tokens.append(text)
    compiled = (re.compile("".join(regex_parts), re.IGNORECASE), group_tokens)
    _compiled_cache[pattern] = compiled
    return compiled


def _lookup_name(text: str, names: List[str]) -> int:
    lowered = [n.lower() for n in names]
    return lowered.index(text.lower())


def parse_datetime(text: str, pattern: str = "isoDate") -> datetime:
    """
    Parse ``text`` with a token pattern or named mask.

    Fields missing from the pattern default to the current year, January, the
    1st and midnight. Weekday names are matched but not checked against the date.

    :raises DateFormatError: if the text is empty, does not match the pattern,
        or names a date that does not exist (e.g. ``2023-02-29``).
    """
    if not isinstance(text, str):
        raise TypeError(f"parse_datetime expects a string, got {type(text).__name__}.")
    if not text.strip():
        raise DateFormatError("Cannot parse an empty date string.")

    resolved = resolve_pattern(pattern)
    regex, group_tokens = _compile(resolved)
    match = regex.fullmatch(text.strip())
    if match is None:
        raise DateFormatError(f"{text!r} does not match date pattern {resolved!r}.")

    fields = {"year": date.today().year, "month": 1, "day": 1, "hour": 0, "minute": 0, "second": 0}
    meridiem = None
    for index, token in enumerate(group_tokens):
        raw = match.group(f"t{index}")
        if token == "YYYY":
            fields["year"] = int(raw)
        elif token == "YY":
            two_digit = int(raw)
            fields["year"] = two_digit + (2000 if two_digit < TWO_DIGIT_YEAR_PIVOT else 1900)
        elif token == "MMMM":
            fields["month"] = _lookup_name(raw, MONTH_NAMES) + 1
        elif token == "MMM":
            fields["month"] = _lookup_name(raw, MONTH_NAMES_SHORT) + 1
        elif token in ("MM", "M"):
            fields["month"] = int(raw)
        elif token in ("DD", "D"):
            fields["day"] = int(raw)
        elif token in ("HH", "H", "hh", "h"):
            fields["hour"] = int(raw)
        elif token in ("mm", "m"):
            fields["minute"] = int(raw)
        elif token in ("ss", "s"):
            fields["second"] = int(raw)
        elif token in ("A", "a"):
            meridiem = raw.lower()

    if meridiem is not None:
        if not 1 <= fields["hour"] <= 12:
            raise DateFormatError(f"{text!r}: hour {fields['hour']} is not valid with AM/PM.")
        if meridiem == "pm" and fields["hour"] != 12:
            fields["hour"] += 12
        elif meridiem == "am" and fields["hour"] == 12:
            fields["hour"] = 0

    try:
        return datetime(**fields)
    except ValueError as e:
        raise DateFormatError(f"{text!r} is not a valid date: {e}") from e


def parse_date(text: str, pattern: str = "isoDate") -> date:
    """Parse ``text`` into a `datetime.date`, dropping any time of day."""
    return parse_datetime(text, pattern).date()


def try_parse_date(text: Optional[str], pattern: str = "isoDate") -> Optional[date]:
    """
    Like `parse_date`, but returns ``None`` for empty or unparsable values
    and when ``pattern`` itself is not a usable pattern.
    """
    if not text:
        return None
    if not isinstance(pattern, str) or not pattern:
        logger.debug("Treating %r as no selection, %r is not a date pattern", text, pattern)
        return None
    try:
        return parse_date(text, pattern)
    except DateFormatError as e:
        logger.debug("Treating unparsable date as no selection: %s", e)
        return None
