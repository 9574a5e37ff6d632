"""
Query-string helpers shared by the list endpoints.

User input only ever reaches SQL as bound parameters of SQLAlchemy
expressions built here.
"""
from datetime import datetime

from sqlalchemy import or_

from finance_saas.errors import ValidationError


def search_filter(term, *columns):
    """Case-insensitive OR-match of ``term`` across ``columns``; ``%`` and ``_`` match literally."""
    escaped = term.strip().replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')
    pattern = f"%{escaped}%"
    return or_(*[column.ilike(pattern, escape='\\') for column in columns])


def parse_date_arg(args, name, required=False):
    """Parse a YYYY-MM-DD query argument; None when absent and not required."""
    value = args.get(name)
    if not value:
        if required:
            raise ValidationError(f"{name} is required")
        return None
    try:
        return datetime.strptime(value, '%Y-%m-%d').date()
    except ValueError:
        raise ValidationError(f"{name} must be in YYYY-MM-DD format")


def parse_int_arg(args, name, default, minimum=None, maximum=None):
    value = args.get(name)
    if value in (None, ''):
        return default
    try:
        number = int(value)
    except ValueError:
        raise ValidationError(f"{name} must be an integer")
    if minimum is not None and number < minimum:
        raise ValidationError(f"{name} must be >= {minimum}")
    if maximum is not None and number > maximum:
        raise ValidationError(f"{name} must be <= {maximum}")
    return number


def parse_pagination(args, default_limit=20, max_limit=100):
    """Out-of-range page/limit values are clamped rather than rejected."""
    page = parse_int_arg(args, 'page', 1)
    limit = parse_int_arg(args, 'limit', default_limit)
    if page < 1:
        page = 1
    if limit < 1:
        limit = default_limit
    if limit > max_limit:
        limit = max_limit
    return page, limit


def pagination_meta(page, limit, total_count):
    total_pages = (total_count + limit - 1) // limit if total_count > 0 else 0
    return {
        "page": page,
        "limit": limit,
        "total_count": total_count,
        "total_pages": total_pages,
        "has_next": page < total_pages,
        "has_prev": page > 1,
    }
