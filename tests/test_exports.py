from datetime import date
from decimal import Decimal

from reports.exports import export_filename, render_csv
from reports.services import TableRow


def test_render_csv():
    rows = [
        TableRow('16/05/2024', 3, Decimal('90000.00'), Decimal('30000.00'), 2, 1),
        TableRow('15/05/2024', 1, Decimal('0.00'), Decimal('0.00'), 0, 0),
    ]

    content = render_csv(rows)

    assert content.startswith(b'\xef\xbb\xbf')
    assert content.decode('utf-8-sig').split('\r\n') == [
        'Ngày,Số đơn,Doanh thu,Trung bình/Đơn,Hoàn thành,Đã hủy',
        '16/05/2024,3,90000.00,30000.00,2,1',
        '15/05/2024,1,0.00,0.00,0,0',
        '',
    ]


def test_render_csv_without_rows_keeps_header():
    assert render_csv([]).decode('utf-8-sig') == 'Ngày,Số đơn,Doanh thu,Trung bình/Đơn,Hoàn thành,Đã hủy\r\n'


def test_export_filename():
    assert export_filename('month', date(2024, 5, 15)) == 'bao-cao-doanh-thu-month-20240515.csv'
