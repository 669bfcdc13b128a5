"""
Billing computations

Pure functions over already-fetched rows: orders and customers are the
serialized dicts the API returns, billing settings are a dict with the
BillingSettings fields. Nothing here touches the database, and every
date-dependent function takes an optional `today` so results are
reproducible.
"""
from datetime import date, datetime, timedelta
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from django.template.loader import render_to_string
from django.utils import timezone

from backend.tailoring.models import is_delivered, compute_due_amount
from .models import DEFAULT_INVOICE_PREFIX, DEFAULT_LOGO_URL

FILTER_ALL = 'All'
FILTER_TODAY = 'Today'
FILTER_THIS_WEEK = 'This Week'
FILTER_THIS_MONTH = 'This Month'
FILTER_CUSTOM = 'Custom'
FILTERS = (FILTER_ALL, FILTER_TODAY, FILTER_THIS_WEEK, FILTER_THIS_MONTH, FILTER_CUSTOM)

MODE_PRINT = 'print'
MODE_PDF = 'pdf'
MODES = (MODE_PRINT, MODE_PDF)

DEFAULT_BILLING_SETTINGS = {
    'shop_name': 'Karanjkar Tailors',
    'shop_address': 'Your Shop Address',
    'shop_phone': '+91 00000 00000',
    'shop_gstin': '',
    'invoice_prefix': DEFAULT_INVOICE_PREFIX,
    'logo_url': DEFAULT_LOGO_URL,
    'logo_data_url': '',
    'apply_tax': True,
    'tax_percent': Decimal('5'),
}

ZERO = Decimal('0')


def to_decimal(value):
    """Lenient numeric conversion: None, blanks and garbage count as zero"""
    if value is None or value == '':
        return ZERO
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return ZERO


def to_date_only(value):
    """YYYY-MM-DD prefix of a date, datetime or ISO string; '' when absent"""
    if not value:
        return ''
    if isinstance(value, datetime):
        if timezone.is_aware(value):
            value = timezone.localtime(value)
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return str(value)[:10]


def parse_day(value):
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError):
        return None


def order_date(order):
    """Billing date of an order: creation date, falling back to delivery date"""
    return to_date_only(order.get('created_at')) or to_date_only(order.get('delivery_date'))


def resolve_settings(billing=None):
    """Billing settings with defaults filled in for anything missing"""
    resolved = dict(DEFAULT_BILLING_SETTINGS)
    resolved.update({key: value for key, value in (billing or {}).items() if value is not None})
    return resolved


def filter_orders(orders, period=FILTER_ALL, date_from=None, date_to=None, today=None):
    """
    Keep the orders whose billing date falls in the requested period.

    Orders without any date are dropped by every filter. `Custom` compares
    the YYYY-MM-DD strings inclusively and is a no-op unless both bounds
    are given.

    Raises:
        ValueError: unknown period name
    """
    if period not in FILTERS:
        raise ValueError(f"Unknown billing filter '{period}'. Use one of: {', '.join(FILTERS)}")

    today = today or timezone.localdate()
    week_start = today - timedelta(days=today.weekday())
    week_end = week_start + timedelta(days=6)
    date_from = to_date_only(date_from)
    date_to = to_date_only(date_to)

    filtered = []
    for order in orders:
        day = order_date(order)
        if not day:
            continue

        if period == FILTER_TODAY:
            keep = day == today.isoformat()
        elif period == FILTER_THIS_WEEK:
            parsed = parse_day(day)
            keep = parsed is not None and week_start <= parsed <= week_end
        elif period == FILTER_THIS_MONTH:
            parsed = parse_day(day)
            keep = parsed is not None and (parsed.year, parsed.month) == (today.year, today.month)
        elif period == FILTER_CUSTOM:
            keep = not (date_from and date_to) or date_from <= day <= date_to
        else:
            keep = True

        if keep:
            filtered.append(order)
    return filtered


def tax_breakdown(amount, billing):
    """Tax on an amount, split into two equal CGST/SGST halves"""
    billing = resolve_settings(billing)
    tax_percent = to_decimal(billing['tax_percent'])
    tax_amount = amount * tax_percent / 100 if billing['apply_tax'] else ZERO
    half = tax_amount / 2
    return {
        'tax_percent': tax_percent,
        'tax_amount': tax_amount,
        'cgst_amount': half,
        'sgst_amount': half,
        'total_amount': amount + tax_amount,
    }


def summarize(orders, billing=None):
    """Aggregate totals for a set of bills"""
    subtotal = sum((to_decimal(o.get('price')) for o in orders), ZERO)
    total_received = sum((to_decimal(o.get('paid_amount')) for o in orders), ZERO)
    total_outstanding = sum(
        (compute_due_amount(to_decimal(o.get('price')), to_decimal(o.get('paid_amount'))) for o in orders),
        ZERO
    )
    tax = tax_breakdown(subtotal, billing)
    delivered = sum(1 for o in orders if is_delivered(o.get('status')))

    return {
        'total_bills': len(orders),
        'subtotal': subtotal,
        'total_received': total_received,
        'total_outstanding': total_outstanding,
        'tax_amount': tax['tax_amount'],
        'cgst_amount': tax['cgst_amount'],
        'sgst_amount': tax['sgst_amount'],
        'total_amount': tax['total_amount'],
        'delivered': delivered,
        'pending': len(orders) - delivered,
    }


def invoice_number(order, prefix=None, today=None):
    """{prefix}-{year}-{id:04d}, e.g. KT-2024-0007"""
    day = order_date(order)
    if day[:4].isdigit():
        year = day[:4]
    else:
        year = str((today or timezone.localdate()).year)
    try:
        order_id = int(order.get('id') or 0)
    except (TypeError, ValueError):
        order_id = 0
    return f"{prefix or DEFAULT_INVOICE_PREFIX}-{year}-{order_id:04d}"


def format_currency(value):
    """Rupee amount with Indian digit grouping: 123456.5 -> ₹1,23,456.50"""
    amount = to_decimal(value).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)
    sign = '-' if amount < 0 else ''
    whole, fraction = f"{abs(amount):.2f}".split('.')
    if len(whole) > 3:
        head, tail = whole[:-3], whole[-3:]
        groups = []
        while len(head) > 2:
            groups.insert(0, head[-2:])
            head = head[:-2]
        if head:
            groups.insert(0, head)
        whole = ','.join(groups + [tail])
    return f"{sign}₹{whole}.{fraction}"


def format_percent(value):
    normalized = to_decimal(value).normalize()
    return f"{normalized:f}"


def customer_index(customers):
    """Map customer id -> customer row"""
    index = {}
    for customer in customers:
        try:
            index[int(customer.get('id'))] = customer
        except (TypeError, ValueError):
            continue
    return index


def lookup_customer(order, customers_by_id):
    try:
        return customers_by_id.get(int(order.get('customer_id')))
    except (TypeError, ValueError):
        return None


def customer_display_name(order, customer=None):
    return order.get('customer_name') or (customer or {}).get('name') or f"ID {order.get('customer_id')}"


def build_invoice(order, customers_by_id, billing=None, mode=MODE_PRINT, today=None):
    """Template context for one order's invoice"""
    billing = resolve_settings(billing)
    customer = lookup_customer(order, customers_by_id)

    amount = to_decimal(order.get('price'))
    paid_amount = to_decimal(order.get('paid_amount'))
    tax = tax_breakdown(amount, billing)
    half_percent = tax['tax_percent'] / 2

    return {
        'shop_name': billing['shop_name'],
        'shop_address': billing['shop_address'],
        'shop_phone': billing['shop_phone'],
        'shop_gstin': billing['shop_gstin'],
        'logo_src': billing['logo_data_url'] or billing['logo_url'] or DEFAULT_LOGO_URL,
        'invoice_number': invoice_number(order, billing['invoice_prefix'], today=today),
        'date': order_date(order) or '-',
        'save_as_pdf': mode == MODE_PDF,
        'customer_name': customer_display_name(order, customer),
        'customer_phone': (customer or {}).get('phone') or order.get('customer_phone') or '-',
        'dress_type': order.get('dress_type') or '-',
        'status': order.get('status') or 'Pending',
        'subtotal': format_currency(amount),
        'paid_amount': format_currency(paid_amount),
        'due_amount': format_currency(compute_due_amount(amount, paid_amount)),
        'apply_tax': bool(billing['apply_tax']),
        'cgst_label': f"CGST ({format_percent(half_percent)}%)",
        'sgst_label': f"SGST ({format_percent(half_percent)}%)",
        'cgst_amount': format_currency(tax['cgst_amount']),
        'sgst_amount': format_currency(tax['sgst_amount']),
        'total_amount': format_currency(tax['total_amount']),
    }


def render_invoices(orders, customers, billing=None, mode=MODE_PRINT, today=None):
    """
    One printable HTML document holding an invoice section per order.

    Every section after the first starts on a new page. `pdf` mode only adds
    a hint to pick "Save as PDF" in the print dialog; the browser does the
    actual PDF encoding.
    """
    if mode not in MODES:
        raise ValueError(f"Unknown invoice mode '{mode}'. Use one of: {', '.join(MODES)}")
    customers_by_id = customer_index(customers)
    invoices = [build_invoice(order, customers_by_id, billing, mode, today) for order in orders]
    return render_to_string('billing/invoice.html', {'invoices': invoices, 'mode': mode})


def bill_rows(orders, customers, billing=None, today=None):
    """Per-order lines of the billing table"""
    billing = resolve_settings(billing)
    customers_by_id = customer_index(customers)
    rows = []
    for order in orders:
        amount = to_decimal(order.get('price'))
        paid_amount = to_decimal(order.get('paid_amount'))
        rows.append({
            'id': order.get('id'),
            'invoice_number': invoice_number(order, billing['invoice_prefix'], today=today),
            'date': order_date(order) or '-',
            'customer_id': order.get('customer_id'),
            'customer_name': customer_display_name(order, lookup_customer(order, customers_by_id)),
            'dress_type': order.get('dress_type') or '-',
            'total_amount': tax_breakdown(amount, billing)['total_amount'],
            'paid_amount': paid_amount,
            'due_amount': compute_due_amount(amount, paid_amount),
            'status': order.get('status') or 'Pending',
        })
    return rows
