import csv
import io
from datetime import date
from typing import Iterable

from .services import TableRow

CSV_HEADER = ['Ngày', 'Số đơn', 'Doanh thu', 'Trung bình/Đơn', 'Hoàn thành', 'Đã hủy']
SUPPORTED_FORMATS = ('csv',)


def render_csv(rows: Iterable[TableRow]) -> bytes:
    """
    Render report table rows as a UTF-8 CSV with a byte order mark so that
    spreadsheet tools pick up the Vietnamese headers correctly.
    """
    buffer = io.StringIO()
    buffer.write('\ufeff')
    writer = csv.writer(buffer, lineterminator='\r\n')
    writer.writerow(CSV_HEADER)
    for row in rows:
        writer.writerow([
            row.date,
            row.total_orders,
            row.revenue,
            row.avg_order,
            row.completed,
            row.cancelled,
        ])
    return buffer.getvalue().encode('utf-8')


def export_filename(period: str, day: date) -> str:
    return f"bao-cao-doanh-thu-{period}-{day.strftime('%Y%m%d')}.csv"
