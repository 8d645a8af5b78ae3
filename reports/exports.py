"""PDF and Excel rendering of tabular data.

Both renderers take the same inputs: a title, optional subtitle lines, a
header row, data rows and an optional footer row. Rows hold raw values
(str, int, Decimal, date); the PDF side formats them as text while the
Excel side writes numbers as numbers.
"""

from datetime import date, datetime
from decimal import Decimal
from io import BytesIO
import re

import xlsxwriter
from django.conf import settings
from django.http import HttpResponse
from django.utils import timezone
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.units import mm
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas

PDF = 'pdf'
XLSX = 'xlsx'
EXPORT_FORMATS = (PDF, XLSX)

CONTENT_TYPES = {
    PDF: 'application/pdf',
    XLSX: 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
}

FONT = 'Helvetica'
FONT_BOLD = 'Helvetica-Bold'
FONT_SIZE = 9
ROW_HEIGHT = 6 * mm
MARGIN = 14 * mm


class ExportFormatError(ValueError):
    pass


def format_amount(value):
    """1234567.5 -> '1,234,567.50', whole amounts drop the decimals"""
    value = Decimal(value or 0)
    text = f"{value:,.2f}"
    if text.endswith('.00'):
        text = text[:-3]
    return text


def money(value):
    return f"{format_amount(value)} {settings.CURRENCY_LABEL}"


def _cell_text(value):
    if value is None:
        return ''
    if isinstance(value, Decimal):
        return format_amount(value)
    if isinstance(value, datetime):
        return timezone.localtime(value).strftime('%Y-%m-%d %H:%M') if timezone.is_aware(value) \
            else value.strftime('%Y-%m-%d %H:%M')
    if isinstance(value, date):
        return value.strftime('%Y-%m-%d')
    return str(value)


def _cell_value(value):
    """Value as written into a spreadsheet cell"""
    if value is None:
        return ''
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, (int, float)):
        return value
    return _cell_text(value)


def _fit(text, width, font, size):
    if stringWidth(text, font, size) <= width:
        return text
    while text and stringWidth(text + '...', font, size) > width:
        text = text[:-1]
    return text + '...'


def render_table_pdf(title, headers, rows, footer=None, subtitle_lines=()):
    """Draw a paginated table; the header row is repeated on every page"""
    buf = BytesIO()
    page_size = landscape(A4) if len(headers) > 5 else A4
    c = canvas.Canvas(buf, pagesize=page_size)
    w, h = page_size

    col_width = (w - 2 * MARGIN) / len(headers)
    # First column is text, the others are mostly figures
    aligns = ['left'] + ['right'] * (len(headers) - 1)

    def draw_row(values, y, font):
        c.setFont(font, FONT_SIZE)
        for index, value in enumerate(values):
            x = MARGIN + index * col_width
            text = _fit(_cell_text(value), col_width - 2 * mm, font, FONT_SIZE)
            if aligns[index] == 'left':
                c.drawString(x + 1 * mm, y, text)
            else:
                c.drawRightString(x + col_width - 1 * mm, y, text)

    def draw_header(y):
        draw_row(headers, y, FONT_BOLD)
        y -= 2 * mm
        c.line(MARGIN, y, w - MARGIN, y)
        return y - ROW_HEIGHT + 2 * mm

    y = h - 18 * mm
    c.setFont(FONT_BOLD, 16)
    c.drawString(MARGIN, y, title)
    y -= 8 * mm

    c.setFont(FONT, 10)
    for line in subtitle_lines:
        c.drawString(MARGIN, y, line)
        y -= 5 * mm
    y -= 4 * mm

    y = draw_header(y)

    for values in rows:
        if y < 20 * mm:
            c.showPage()
            y = draw_header(h - 18 * mm)
        draw_row(values, y, FONT)
        y -= ROW_HEIGHT

    if footer:
        if y < 25 * mm:
            c.showPage()
            y = h - 18 * mm
        c.line(MARGIN, y + ROW_HEIGHT - 2 * mm, w - MARGIN, y + ROW_HEIGHT - 2 * mm)
        draw_row(footer, y - 1 * mm, FONT_BOLD)

    c.showPage()
    c.save()
    return buf.getvalue()


def render_table_xlsx(title, headers, rows, footer=None, subtitle_lines=()):
    """Write a single-sheet workbook with a bold header and total row"""
    buf = BytesIO()
    workbook = xlsxwriter.Workbook(buf, {'in_memory': True})
    # Sheet names are limited to 31 characters, without []:*?/\
    sheet = workbook.add_worksheet(re.sub(r'[\[\]:*?/\\]', '', title)[:31])

    title_format = workbook.add_format({'bold': True, 'font_size': 14})
    header_format = workbook.add_format({
        'bold': True, 'font_color': '#FFFFFF', 'bg_color': '#2563EB', 'border': 1
    })
    number_format = workbook.add_format({'num_format': '#,##0.##'})
    footer_format = workbook.add_format({'bold': True, 'top': 1, 'num_format': '#,##0.##'})

    sheet.write(0, 0, title, title_format)
    row = 1
    for line in subtitle_lines:
        sheet.write(row, 0, line)
        row += 1
    row += 1

    sheet.write_row(row, 0, headers, header_format)
    row += 1

    widths = [len(str(header)) for header in headers]
    for values in rows:
        for col, value in enumerate(values):
            cell = _cell_value(value)
            if isinstance(cell, (int, float)):
                sheet.write_number(row, col, cell, number_format)
            else:
                sheet.write(row, col, cell)
            widths[col] = max(widths[col], len(_cell_text(value)))
        row += 1

    if footer:
        for col, value in enumerate(footer):
            sheet.write(row, col, _cell_value(value), footer_format)

    for col, width in enumerate(widths):
        sheet.set_column(col, col, min(width + 2, 50))

    workbook.close()
    return buf.getvalue()


def render_table(fmt, title, headers, rows, footer=None, subtitle_lines=()):
    if fmt == PDF:
        return render_table_pdf(title, headers, rows, footer, subtitle_lines)
    if fmt == XLSX:
        return render_table_xlsx(title, headers, rows, footer, subtitle_lines)
    raise ExportFormatError(f"Unsupported export format: {fmt}")


def export_response(fmt, filename, title, headers, rows, footer=None, subtitle_lines=()):
    """Render the table and wrap it in a download response"""
    content = render_table(fmt, title, headers, rows, footer, subtitle_lines)
    response = HttpResponse(content, content_type=CONTENT_TYPES[fmt])
    response['Content-Disposition'] = f'attachment; filename="{filename}.{fmt}"'
    return response


def render_receipt_pdf(sale):
    """Single-sale receipt, as handed to the customer"""
    created = timezone.localtime(sale.created_at) if timezone.is_aware(sale.created_at) else sale.created_at
    lines = list(sale.lines.all())
    return render_table_pdf(
        title=f"{settings.SHOP_NAME} - SALES RECEIPT",
        headers=['Item', 'Qty', f'Unit price ({settings.CURRENCY_LABEL})', f'Total ({settings.CURRENCY_LABEL})'],
        rows=[
            [line.product_name, line.quantity, line.unit_price, line.total_price]
            for line in lines
        ],
        footer=['', '', 'TOTAL', money(sale.total_amount)],
        subtitle_lines=[
            f"Transaction #: {sale.transaction_number}",
            f"Date: {created.strftime('%Y-%m-%d %H:%M')}",
            f"Seller: {sale.seller_name}",
        ],
    )
