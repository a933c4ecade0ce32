#!/usr/bin/env python3
"""
Cron Parser Backend
Parses cron expressions, expands fields into concrete values, describes them
in plain English and enumerates upcoming execution times
"""

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)

# Upper bound on minutes scanned when enumerating executions (about a week)
CRON_MAX_ITERATIONS = 10000

MONTH_ABBREVIATIONS = ('JAN', 'FEB', 'MAR', 'APR', 'MAY', 'JUN',
                       'JUL', 'AUG', 'SEP', 'OCT', 'NOV', 'DEC')
DAY_ABBREVIATIONS = ('SUN', 'MON', 'TUE', 'WED', 'THU', 'FRI', 'SAT')

MONTH_NAMES = ('January', 'February', 'March', 'April', 'May', 'June',
               'July', 'August', 'September', 'October', 'November', 'December')
DAY_NAMES = ('Sunday', 'Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday')

FIELD_ORDER_5 = ('minute', 'hour', 'day_of_month', 'month', 'day_of_week')
FIELD_ORDER_6 = ('second',) + FIELD_ORDER_5


@dataclass(frozen=True)
class CronFieldRange:
    """Allowed values of one cron field."""
    min_value: int
    max_value: int
    unit: str
    names: Optional[Tuple[str, ...]] = None
    display_names: Optional[Tuple[str, ...]] = None

    @property
    def size(self) -> int:
        return self.max_value - self.min_value + 1

    def format_value(self, value: int) -> str:
        """Render a value, using its display name where the field has one"""
        if self.display_names and self.min_value <= value <= self.max_value:
            return self.display_names[value - self.min_value]
        return str(value)


CRON_RANGES: Dict[str, CronFieldRange] = {
    'second': CronFieldRange(0, 59, 'second'),
    'minute': CronFieldRange(0, 59, 'minute'),
    'hour': CronFieldRange(0, 23, 'hour'),
    'day_of_month': CronFieldRange(1, 31, 'day of month'),
    'month': CronFieldRange(1, 12, 'month', MONTH_ABBREVIATIONS, MONTH_NAMES),
    'day_of_week': CronFieldRange(0, 6, 'day of week', DAY_ABBREVIATIONS, DAY_NAMES),
}


@dataclass
class ParsedCron:
    """Raw sub-expressions of a cron expression, not yet expanded."""
    minute: str
    hour: str
    day_of_month: str
    month: str
    day_of_week: str
    second: Optional[str] = None

    def fields(self) -> Dict[str, str]:
        """Return the present fields in expression order"""
        order = FIELD_ORDER_6 if self.second is not None else FIELD_ORDER_5
        return {name: getattr(self, name) for name in order}

    def to_dict(self) -> Dict[str, Any]:
        return {
            'second': self.second,
            'minute': self.minute,
            'hour': self.hour,
            'day_of_month': self.day_of_month,
            'month': self.month,
            'day_of_week': self.day_of_week
        }


@dataclass
class CronParseResult:
    """Outcome of parsing or checking a cron expression."""
    success: bool
    data: Optional[ParsedCron] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'success': self.success,
            'data': self.data.to_dict() if self.data else None,
            'error': self.error
        }


@dataclass
class CronDescription:
    description: str
    summary: str
    next_executions: List[datetime]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'description': self.description,
            'summary': self.summary,
            'next_executions': [when.isoformat() for when in self.next_executions]
        }


def parse_cron_expression(expression: str) -> CronParseResult:
    """Split a cron expression into its fields without validating their values"""
    if not expression or not isinstance(expression, str):
        return CronParseResult(False, error='Expression must be a non-empty string')

    trimmed = expression.strip()
    if not trimmed:
        return CronParseResult(False, error='Expression cannot be empty')

    parts = trimmed.split()

    if len(parts) == 5:
        return CronParseResult(True, data=ParsedCron(*parts))
    if len(parts) == 6:
        second, minute, hour, day_of_month, month, day_of_week = parts
        return CronParseResult(True, data=ParsedCron(minute, hour, day_of_month, month,
                                                     day_of_week, second=second))

    return CronParseResult(False, error=f'Invalid cron format. Expected 5 or 6 parts, got {len(parts)}')


def get_field_value(value: str, names: Optional[Tuple[str, ...]] = None, min_value: int = 0) -> int:
    """Resolve a name or number to its integer value, -1 if it is neither"""
    if names:
        upper = value.upper()
        if upper in names:
            return names.index(upper) + min_value

    if re.fullmatch(r'[0-9]+', value):
        return int(value)
    return -1


def _resolve_range(expr: str, names: Optional[Tuple[str, ...]], min_value: int) -> Tuple[int, int]:
    bounds = expr.split('-')
    if len(bounds) != 2:
        return -1, -1
    return get_field_value(bounds[0], names, min_value), get_field_value(bounds[1], names, min_value)


def parse_field(field: str, min_value: int, max_value: int,
                names: Optional[Tuple[str, ...]] = None) -> List[int]:
    """Expand a cron field into the sorted set of values it denotes.

    Supports '*', lists ('1,15'), ranges ('1-5', 'MON-FRI') and steps
    ('*/15', '10-40/10', '5/20'). Parts that fall outside [min_value,
    max_value] or cannot be parsed are dropped, so an invalid field
    yields an empty list.
    """
    if field == '*':
        return list(range(min_value, max_value + 1))

    values = set()

    for part in field.split(','):
        if '/' in part:
            pieces = part.split('/')
            if len(pieces) != 2 or not re.fullmatch(r'[0-9]+', pieces[1]):
                continue
            expr, step = pieces[0], int(pieces[1])
            if step <= 0:
                continue

            if expr == '*':
                values.update(range(min_value, max_value + 1, step))
            elif '-' in expr:
                start, end = _resolve_range(expr, names, min_value)
                if min_value <= start <= end <= max_value:
                    values.update(range(start, end + 1, step))
            else:
                start = get_field_value(expr, names, min_value)
                if min_value <= start <= max_value:
                    values.update(range(start, max_value + 1, step))

        elif '-' in part:
            start, end = _resolve_range(part, names, min_value)
            if min_value <= start <= end <= max_value:
                values.update(range(start, end + 1))

        else:
            value = get_field_value(part, names, min_value)
            if min_value <= value <= max_value:
                values.add(value)

    return sorted(values)


def expand_field(field: str, field_type: str) -> List[int]:
    """Expand a field using the range and names of its field type"""
    field_range = CRON_RANGES[field_type]
    return parse_field(field, field_range.min_value, field_range.max_value, field_range.names)


def validate_cron_field(field: str, field_type: str) -> bool:
    """A field is valid when it denotes at least one value"""
    if not field or not isinstance(field, str):
        return False
    return len(expand_field(field, field_type)) > 0


def check_cron_expression(expression: str) -> CronParseResult:
    """Parse an expression and validate every field, reporting the first failure"""
    result = parse_cron_expression(expression)
    if not result.success:
        return result

    for field_type, field in result.data.fields().items():
        if not validate_cron_field(field, field_type):
            unit = CRON_RANGES[field_type].unit
            return CronParseResult(False, data=result.data, error=f'Invalid {unit} field: {field}')

    return result


def validate_cron_expression(expression: str) -> bool:
    return check_cron_expression(expression).success


def describe_cron_field(field: str, field_type: str) -> str:
    """Describe a cron field in plain English"""
    field_range = CRON_RANGES[field_type]
    unit = field_range.unit

    if field == '*':
        return f'every {unit}'

    values = expand_field(field, field_type)
    if not values:
        return f'invalid {unit}'

    fmt = field_range.format_value

    if len(values) == field_range.size:
        return f'every {unit}'

    if len(values) == 1:
        return f'at {fmt(values[0])}'

    is_contiguous = all(values[idx] == values[idx - 1] + 1 for idx in range(1, len(values)))
    if is_contiguous and len(values) > 2:
        return f'from {fmt(values[0])} to {fmt(values[-1])}'

    if len(values) <= 3:
        return 'at ' + ', '.join(fmt(value) for value in values)

    return 'at ' + ', '.join(fmt(value) for value in values[:2]) + f' and {len(values) - 2} more'


def _summarize(cron: ParsedCron) -> str:
    daily_fields = cron.day_of_month == '*' and cron.month == '*'
    fixed_time = cron.minute != '*' and cron.hour != '*'

    if cron.minute == '0' and cron.hour == '0' and daily_fields and cron.day_of_week == '*':
        return 'Daily at midnight'
    if fixed_time and daily_fields and cron.day_of_week != '*':
        return 'Weekly schedule'
    if fixed_time and daily_fields:
        return 'Daily schedule'
    return 'Custom schedule'


def describe_cron_expression(expression: str, now: Optional[datetime] = None,
                             execution_count: int = 5,
                             max_iterations: Optional[int] = None) -> Optional[CronDescription]:
    """Describe a valid cron expression; None when it is invalid"""
    result = check_cron_expression(expression)
    if not result.success:
        return None

    cron = result.data
    description = 'Runs '

    if cron.second is not None and cron.second != '0':
        description += f"{describe_cron_field(cron.second, 'second')}, "

    description += f"{describe_cron_field(cron.minute, 'minute')} past {describe_cron_field(cron.hour, 'hour')}"

    day_of_month_desc = describe_cron_field(cron.day_of_month, 'day_of_month')
    day_of_week_desc = describe_cron_field(cron.day_of_week, 'day_of_week')
    if cron.day_of_month != '*' and cron.day_of_week != '*':
        description += f', on {day_of_month_desc} of the month or on {day_of_week_desc}'
    elif cron.day_of_month != '*':
        description += f', on {day_of_month_desc} of the month'
    elif cron.day_of_week != '*':
        description += f', on {day_of_week_desc}'

    if cron.month != '*':
        description += f", {describe_cron_field(cron.month, 'month')}"

    return CronDescription(
        description=description,
        summary=_summarize(cron),
        next_executions=calculate_next_executions(expression, execution_count, now=now,
                                                  max_iterations=max_iterations)
    )


def _day_matches(cron: ParsedCron, days_of_month: List[int], days_of_week: List[int],
                 when: datetime) -> bool:
    # Cron weekday numbering starts at Sunday
    day_of_week = when.isoweekday() % 7
    if cron.day_of_month == '*':
        return day_of_week in days_of_week
    if cron.day_of_week == '*':
        return when.day in days_of_month
    # Both restricted: either one is enough
    return when.day in days_of_month or day_of_week in days_of_week


def calculate_next_executions(expression: str, count: int = 5, now: Optional[datetime] = None,
                              max_iterations: Optional[int] = None) -> List[datetime]:
    """Find upcoming execution times by scanning forward minute by minute.

    Each matching minute yields a single timestamp. With a seconds field,
    that timestamp carries the first second the field allows, so
    ``*/30 * * * * *`` reports the ``:00`` runs and never the ``:30`` ones.

    Args:
        expression: Cron expression (5 or 6 fields)
        count: Number of executions wanted
        now: Reference time, defaults to the current local time
        max_iterations: Minutes to scan before giving up, defaults to
            CRON_MAX_ITERATIONS

    Returns:
        Up to ``count`` datetimes in ascending order. Fewer are returned when
        the scan is exhausted; an invalid expression yields an empty list.
    """
    result = check_cron_expression(expression)
    if not result.success:
        return []

    cron = result.data
    minutes = expand_field(cron.minute, 'minute')
    hours = expand_field(cron.hour, 'hour')
    days_of_month = expand_field(cron.day_of_month, 'day_of_month')
    months = expand_field(cron.month, 'month')
    days_of_week = expand_field(cron.day_of_week, 'day_of_week')
    # Executions land on the first matching second of each matching minute
    second = expand_field(cron.second, 'second')[0] if cron.second is not None else 0

    limit = CRON_MAX_ITERATIONS if max_iterations is None else max_iterations
    current = (now or datetime.now()).replace(second=0, microsecond=0) + timedelta(minutes=1)
    executions = []
    attempts = 0

    while len(executions) < count and attempts < limit:
        attempts += 1
        if (current.month in months
                and _day_matches(cron, days_of_month, days_of_week, current)
                and current.hour in hours
                and current.minute in minutes):
            executions.append(current.replace(second=second))
        current += timedelta(minutes=1)

    if len(executions) < count:
        logger.debug("Cron scan for %r stopped after %d minutes with %d of %d executions",
                     expression, attempts, len(executions), count)

    return executions


def get_common_cron_examples() -> Dict[str, Dict[str, str]]:
    """Frequently used cron expressions keyed by a short slug"""
    return {
        'every-minute': {'expression': '* * * * *', 'description': 'Every minute'},
        'hourly': {'expression': '0 * * * *', 'description': 'Every hour'},
        'daily-midnight': {'expression': '0 0 * * *', 'description': 'Daily at midnight'},
        'daily-noon': {'expression': '0 12 * * *', 'description': 'Daily at noon'},
        'weekly-monday': {'expression': '0 9 * * 1', 'description': 'Every Monday at 9 AM'},
        'weekdays': {'expression': '0 9 * * 1-5', 'description': 'Weekdays at 9 AM'},
        'monthly': {'expression': '0 0 1 * *', 'description': 'First day of every month at midnight'},
        'quarterly': {'expression': '0 0 1 1,4,7,10 *', 'description': 'First day of every quarter'},
        'yearly': {'expression': '0 0 1 1 *', 'description': 'January 1st at midnight'},
    }
