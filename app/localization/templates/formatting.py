"""Locale-aware value formatting backed by Babel.

Covers the ICU ``number``/``date``/``time``/``datetime`` placeholder styles,
typed ARB placeholders and DOTNET format tails.
"""

from datetime import date, datetime, time, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Optional, Union

from babel import Locale
from babel.dates import format_date, format_datetime, format_skeleton, format_time
from babel.numbers import (
    format_compact_currency,
    format_compact_decimal,
    format_currency,
    format_decimal,
    format_percent,
    format_scientific,
    get_currency_symbol,
    get_decimal_symbol,
    get_territory_currencies,
)

from localization.exceptions import TemplateProcessingError
from localization.models import Placeholder

Number = Union[int, float, Decimal]
Temporal = Union[date, time, datetime]

_DATE_STYLES = ("short", "medium", "long", "full")
_DEFAULT_CURRENCY = "USD"


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


def to_decimal(value: Any) -> Decimal:
    """Convert an argument to a Decimal.

    Numeric strings are accepted; floats go through ``str`` so that 0.1 stays
    0.1.

    Raises:
        TemplateProcessingError: If the value is not numeric.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise TemplateProcessingError(f"Boolean value '{value}' cannot be used as a number")
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, str):
        try:
            return Decimal(value.strip())
        except InvalidOperation as e:
            raise TemplateProcessingError(f"Value '{value}' is not a number") from e
    raise TemplateProcessingError(f"Value of type {type(value).__name__} is not a number")


def territory_currency(locale: Locale) -> str:
    if locale.territory:
        currencies = get_territory_currencies(locale.territory)
        if currencies:
            return currencies[0]
    return _DEFAULT_CURRENCY


def format_plain(value: Any, locale: Locale) -> str:
    """Render a value without a style.

    None renders as "null"; floats and decimals use the locale decimal
    symbol but no grouping.
    """
    if value is None:
        return "null"
    if isinstance(value, (float, Decimal)) and not isinstance(value, bool):
        text = str(value)
        return text.replace(".", get_decimal_symbol(locale))
    return str(value)


def _format_skeleton_number(number: Decimal, skeleton: str, locale: Locale) -> str:
    tokens = skeleton.split()
    head = tokens[0].lower() if tokens else ""
    if head in ("compact-short", "k"):
        return format_compact_decimal(number, format_type="short", locale=locale, fraction_digits=1)
    if head in ("compact-long", "kk"):
        return format_compact_decimal(number, format_type="long", locale=locale, fraction_digits=1)
    if head == "percent" or head == "%":
        return format_percent(number / 100, locale=locale)
    if head.startswith("currency/"):
        return format_currency(number, head.split("/", 1)[1].upper(), locale=locale)
    if head in ("integer", "precision-integer"):
        return format_decimal(number, format="#,##0", locale=locale)
    return format_decimal(number, locale=locale)


def format_number(value: Any, style: Optional[str], locale: Locale, custom: bool = False) -> str:
    """Format a ``{x, number, style}`` placeholder.

    Args:
        value: Numeric argument.
        style: None (general), "integer", "percent", "currency" or
            "currency:ISO", "compact"/"compact-short", "compact-long", an
            ICU skeleton starting with "::", or an LDML pattern.
        locale: Babel locale.
        custom: True when the style is a quoted pattern.

    Raises:
        TemplateProcessingError: If the value is not numeric or the pattern is invalid.
    """
    number = to_decimal(value)
    try:
        if custom:
            return format_decimal(number, format=style, locale=locale)
        if not style:
            return format_decimal(number, locale=locale)

        lowered = style.strip().lower()
        if lowered.startswith("::"):
            return _format_skeleton_number(number, style.strip()[2:], locale)
        if lowered == "integer":
            return format_decimal(number, format="#,##0", locale=locale)
        if lowered == "percent":
            return format_percent(number, locale=locale)
        if lowered == "currency" or lowered.startswith(("currency:", "currency/")):
            iso = style.strip()[9:].strip().upper() or territory_currency(locale)
            return format_currency(number, iso, locale=locale)
        if lowered in ("compact", "compact-short", "short"):
            return format_compact_decimal(number, format_type="short", locale=locale, fraction_digits=1)
        if lowered in ("compact-long", "long"):
            return format_compact_decimal(number, format_type="long", locale=locale, fraction_digits=1)
        return format_decimal(number, format=style, locale=locale)
    except (ValueError, KeyError) as e:
        raise TemplateProcessingError(f"Cannot format {value!r} with number style '{style}': {e}") from e


def to_temporal(value: Any) -> Temporal:
    """Convert an argument to a date, time or datetime.

    Accepts date/time objects, ISO 8601 strings ("Z" is read as UTC) and
    POSIX timestamps.

    Raises:
        TemplateProcessingError: If the value cannot be read as a moment in time.
    """
    if isinstance(value, (datetime, date, time)):
        return value
    if is_number(value):
        return datetime.fromtimestamp(float(value), tz=timezone.utc)
    if isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        for parse in (datetime.fromisoformat, time.fromisoformat):
            try:
                return parse(text)
            except ValueError:
                continue
    raise TemplateProcessingError(f"Value {value!r} cannot be used as a date or time")


def _tz(moment: Temporal):
    return getattr(moment, "tzinfo", None)


def format_temporal(
    kind: str,
    value: Any,
    style: Optional[str],
    locale: Locale,
    custom: bool = False,
) -> str:
    """Format a ``{x, date|time|datetime, style}`` placeholder.

    Args:
        kind: "date", "time" or "datetime".
        value: Date or time argument, see to_temporal().
        style: "short", "medium" (default), "long", "full", an ICU skeleton
            starting with "::", or an LDML pattern.
        locale: Babel locale.
        custom: True when the style is a quoted pattern.
    """
    moment = to_temporal(value)
    fmt = (style or "medium").strip()
    if not custom and fmt.lower() in _DATE_STYLES:
        fmt = fmt.lower()

    try:
        if not custom and fmt.startswith("::"):
            return format_skeleton(fmt[2:], _as_datetime(moment), tzinfo=_tz(moment), locale=locale)
        if kind == "date":
            if isinstance(moment, time):
                raise TemplateProcessingError(f"Time value {value!r} cannot be formatted as a date")
            return format_date(moment, format=fmt, locale=locale)
        if kind == "time":
            if not isinstance(moment, (datetime, time)):
                moment = datetime.combine(moment, time())
            return format_time(moment, format=fmt, tzinfo=_tz(moment), locale=locale)
        return format_datetime(_as_datetime(moment), format=fmt, tzinfo=_tz(moment), locale=locale)
    except (ValueError, KeyError, AttributeError) as e:
        raise TemplateProcessingError(f"Cannot format {value!r} with {kind} style '{style}': {e}") from e


def _as_datetime(moment: Temporal) -> datetime:
    if isinstance(moment, datetime):
        return moment
    if isinstance(moment, date):
        return datetime.combine(moment, time())
    return datetime.combine(date.today(), moment)


def format_arb_number(value: Any, placeholder: Placeholder, locale: Locale) -> str:
    """Format a value for a ``num``/``int`` ARB placeholder with a format.

    Supported formats follow the Flutter intl names: compact, compactLong,
    compactCurrency, compactSimpleCurrency, currency, simpleCurrency,
    decimalPattern, decimalPercentPattern, percentPattern and
    scientificPattern. ``optionalParameters`` may carry decimalDigits, name
    (currency code), symbol and customPattern.
    """
    number = to_decimal(value)
    params = placeholder.optional_parameters
    name = (placeholder.format or "").strip()
    digits = params.get("decimalDigits")
    currency = params.get("name") or territory_currency(locale)

    try:
        custom_pattern = params.get("customPattern")
        if custom_pattern:
            return format_decimal(number, format=custom_pattern, locale=locale)
        if name == "compact":
            return format_compact_decimal(number, format_type="short", locale=locale, fraction_digits=1)
        if name == "compactLong":
            return format_compact_decimal(number, format_type="long", locale=locale, fraction_digits=1)
        if name in ("compactCurrency", "compactSimpleCurrency"):
            return format_compact_currency(number, currency, locale=locale, fraction_digits=1)
        if name in ("currency", "simpleCurrency"):
            text = format_currency(number, currency, locale=locale)
            symbol = params.get("symbol")
            if symbol and name == "currency":
                text = text.replace(get_currency_symbol(currency, locale=locale), symbol)
            return text
        if name == "decimalPercentPattern":
            pattern = "#,##0" + ("." + "0" * int(digits) if digits else "") + "%"
            return format_percent(number, format=pattern, locale=locale)
        if name == "percentPattern":
            return format_percent(number, locale=locale)
        if name == "scientificPattern":
            return format_scientific(number, locale=locale)
        if name == "decimalPattern" and digits is not None:
            pattern = ("#,##0." + "0" * int(digits)) if int(digits) > 0 else "#,##0"
            return format_decimal(number, format=pattern, locale=locale)
        return format_decimal(number, locale=locale)
    except (ValueError, KeyError) as e:
        raise TemplateProcessingError(
            f"Cannot format {value!r} with number format '{name}'", placeholder=placeholder.name
        ) from e


def format_arb_datetime(value: Any, placeholder: Placeholder, locale: Locale) -> str:
    """Format a value for a ``DateTime`` ARB placeholder with a format.

    The format is an ICU skeleton ("yMd", "Hm") unless the placeholder sets
    ``isCustomDateFormat`` to true, in which case it is an LDML pattern.
    """
    moment = _as_datetime(to_temporal(value))
    fmt = (placeholder.format or "").strip()
    is_custom = str(placeholder.properties.get("isCustomDateFormat", "")).lower() == "true"
    try:
        if is_custom:
            return format_datetime(moment, format=fmt, tzinfo=_tz(moment), locale=locale)
        # Several skeletons may be joined with '+'
        parts = [format_skeleton(part, moment, tzinfo=_tz(moment), locale=locale) for part in fmt.split("+")]
        return " ".join(parts)
    except (ValueError, KeyError) as e:
        raise TemplateProcessingError(
            f"Cannot format {value!r} with date format '{fmt}'", placeholder=placeholder.name
        ) from e


_DOTNET_DATE_FORMATS = {
    "d": ("date", "short"),
    "D": ("date", "full"),
    "t": ("time", "short"),
    "T": ("time", "medium"),
    "f": ("datetime", "{1} {0}", "full", "short"),
    "F": ("datetime", "{1} {0}", "full", "medium"),
    "g": ("datetime", "{1} {0}", "short", "short"),
    "G": ("datetime", "{1} {0}", "short", "medium"),
}


def _format_dotnet_temporal(moment: Temporal, fmt: str, locale: Locale) -> str:
    spec = _DOTNET_DATE_FORMATS.get(fmt)
    if spec is None:
        return format_datetime(_as_datetime(moment), format=fmt, tzinfo=_tz(moment), locale=locale)
    if spec[0] == "date":
        return format_date(moment, format=spec[1], locale=locale)
    if spec[0] == "time":
        return format_time(moment, format=spec[1], tzinfo=_tz(moment), locale=locale)
    stamp = _as_datetime(moment)
    return spec[1].format(
        format_time(stamp, format=spec[3], tzinfo=_tz(stamp), locale=locale),
        format_date(stamp, format=spec[2], locale=locale),
    )


def _format_dotnet_number(number: Decimal, fmt: str, locale: Locale) -> str:
    letter = fmt[0].upper()
    precision_text = fmt[1:]
    if letter in "NFDPCXEG" and (not precision_text or precision_text.isdigit()):
        precision = int(precision_text) if precision_text else None
        if letter == "N":
            digits = 2 if precision is None else precision
            return format_decimal(number, format="#,##0" + ("." + "0" * digits if digits else ""), locale=locale)
        if letter == "F":
            digits = 2 if precision is None else precision
            return format_decimal(number, format="0" + ("." + "0" * digits if digits else ""), locale=locale)
        if letter == "D":
            return format_decimal(number, format="0" * (precision or 1), locale=locale)
        if letter == "P":
            digits = 2 if precision is None else precision
            return format_percent(number, format="#,##0" + ("." + "0" * digits if digits else "") + "%", locale=locale)
        if letter == "C":
            return format_currency(number, territory_currency(locale), locale=locale)
        if letter == "X":
            text = format(int(number), "x" if fmt[0] == "x" else "X")
            return text.rjust(precision or 0, "0")
        if letter == "E":
            return format_scientific(number, locale=locale)
        return format_plain(number, locale)
    return format_decimal(number, format=fmt, locale=locale)


def format_dotnet(value: Any, fmt: Optional[str], locale: Locale) -> str:
    """Format a value for a DOTNET ``{0:fmt}`` placeholder.

    Standard numeric (N, F, D, P, C, X, E, G) and date/time (d, D, t, T, f, F,
    g, G) specifiers are mapped onto Babel; anything else is used as an LDML
    pattern.
    """
    if value is None:
        return ""
    if not fmt:
        return format_plain(value, locale)
    try:
        if isinstance(value, (datetime, date, time)):
            return _format_dotnet_temporal(value, fmt, locale)
        if is_number(value):
            return _format_dotnet_number(to_decimal(value), fmt, locale)
    except (ValueError, KeyError) as e:
        raise TemplateProcessingError(f"Cannot format {value!r} with format '{fmt}'") from e
    return format_plain(value, locale)
