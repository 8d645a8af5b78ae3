"""Stock movement synthesis: per product totals over a date range."""

from datetime import date
from decimal import Decimal

from django.utils.dateparse import parse_date


class DateRangeError(ValueError):
    pass


def parse_date_range(date_from, date_to):
    """
    Parse the two ISO dates of a report period. Either may be empty.
    Raises DateRangeError for malformed dates or an inverted range.
    """
    parsed = []
    for label, raw in (('date_from', date_from), ('date_to', date_to)):
        raw = (raw or '').strip()
        if not raw:
            parsed.append(None)
            continue
        try:
            value = parse_date(raw)
        except ValueError:
            value = None
        if value is None:
            raise DateRangeError(f"Invalid {label}: '{raw}' (expected YYYY-MM-DD)")
        parsed.append(value)

    start, end = parsed
    if start and end and start > end:
        raise DateRangeError("date_from must be before or equal to date_to")
    return start, end


def build_synthesis(movements):
    """
    Group movement rows by product in a single pass.

    Each row is a mapping with product_id, product_name, unit_price, type
    ('in' or 'out') and quantity. Returns (products, totals) where products
    is sorted by name.
    """
    groups = {}
    for row in movements:
        group = groups.get(row['product_id'])
        if group is None:
            group = groups[row['product_id']] = {
                'product_id': row['product_id'],
                'product_name': row['product_name'],
                'unit_price': Decimal(row['unit_price'] or 0),
                'total_in': 0,
                'total_out': 0,
                'movement_count': 0,
            }
        if row['type'] == 'in':
            group['total_in'] += row['quantity']
        else:
            group['total_out'] += row['quantity']
        group['movement_count'] += 1

    products = sorted(groups.values(), key=lambda g: (g['product_name'].lower(), g['product_id']))
    for group in products:
        group['net'] = group['total_in'] - group['total_out']
        group['value_out'] = group['total_out'] * group['unit_price']

    totals = {
        'total_in': sum(g['total_in'] for g in products),
        'total_out': sum(g['total_out'] for g in products),
        'net': sum(g['net'] for g in products),
        'movement_count': sum(g['movement_count'] for g in products),
        'value_out': sum((g['value_out'] for g in products), Decimal('0')),
        'product_count': len(products),
    }
    return products, totals


def period_label(start, end):
    def fmt(value):
        return value.strftime('%Y-%m-%d') if isinstance(value, date) else '...'
    return f"{fmt(start)} to {fmt(end)}"
