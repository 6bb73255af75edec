"""
utils/export.py — Excel export of crop plans using openpyxl.

Generates an .xlsx workbook with one row per crop plan, a styled header row
and a coloured status cell. Columns put the estimated figures next to the
actual figures recorded at harvest.
"""

from datetime import datetime
from io import BytesIO

from openpyxl.styles import Font, PatternFill, Alignment, Border, Side


# Status colors for the status cell
STATUS_FILLS = {
    'Planned': PatternFill(start_color='90A4AE', end_color='90A4AE', fill_type='solid'),
    'Planted': PatternFill(start_color='4CAF50', end_color='4CAF50', fill_type='solid'),
    'Harvested': PatternFill(start_color='FFB300', end_color='FFB300', fill_type='solid'),
    'Completed': PatternFill(start_color='00897B', end_color='00897B', fill_type='solid'),
    'Cancelled': PatternFill(start_color='D32F2F', end_color='D32F2F', fill_type='solid'),
}

HEADER_FONT = Font(name='Calibri', bold=True, color='FFFFFF', size=11)
HEADER_FILL = PatternFill(start_color='1565C0', end_color='1565C0', fill_type='solid')
HEADER_ALIGNMENT = Alignment(horizontal='center', vertical='center', wrap_text=True)
HEADER_BORDER = Border(
    bottom=Side(style='thin', color='0D47A1'),
    right=Side(style='thin', color='E2E8F0'),
)
CELL_BORDER = Border(
    bottom=Side(style='thin', color='E2E8F0'),
    right=Side(style='thin', color='E2E8F0'),
)

# (header, CropPlan attribute, column width)
COLUMNS = [
    ('Plan ID', 'id', 9),
    ('User', 'user_id', 14),
    ('Crop', 'crop_name', 16),
    ('District', 'district_name', 16),
    ('Area (ha)', 'actual_area_planted_ha', 11),
    ('Planting date', 'planting_date', 14),
    ('Status', 'status', 12),
    ('Est. harvest date', 'estimated_harvest_date', 16),
    ('Est. yield (kg/ha)', 'estimated_yield_kg_per_ha', 16),
    ('Est. production (kg)', 'estimated_total_production_kg', 18),
    ('Est. price (Rwf/kg)', 'estimated_price_per_kg_rwf', 17),
    ('Est. revenue (Rwf)', 'estimated_revenue_rwf', 18),
    ('Harvest date', 'actual_harvest_date', 14),
    ('Yield (kg/ha)', 'actual_yield_kg_per_ha', 14),
    ('Production (kg)', 'actual_total_production_kg', 16),
    ('Price (Rwf/kg)', 'actual_selling_price_per_kg_rwf', 15),
    ('Revenue (Rwf)', 'actual_revenue_rwf', 16),
    ('Notes', 'harvest_notes', 30),
]


def _build_sheet(ws, plans):
    """Populate a worksheet with one row per plan and a styled header."""
    for col_idx, (header, _, width) in enumerate(COLUMNS, 1):
        cell = ws.cell(row=1, column=col_idx, value=header)
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL
        cell.alignment = HEADER_ALIGNMENT
        cell.border = HEADER_BORDER
        ws.column_dimensions[cell.column_letter].width = width

    for row_idx, plan in enumerate(plans, 2):
        for col_idx, (_, attr, _) in enumerate(COLUMNS, 1):
            value = getattr(plan, attr)
            cell = ws.cell(row=row_idx, column=col_idx, value=value if value is not None else '')
            cell.border = CELL_BORDER
            if attr == 'status' and value in STATUS_FILLS:
                cell.fill = STATUS_FILLS[value]
                cell.font = Font(color='FFFFFF', bold=True)

    # Freeze header row
    ws.freeze_panes = 'A2'


def generate_crop_plans_excel(plans):
    """Generate an Excel workbook listing crop plans.

    Returns:
        (BytesIO buffer, filename) on success, (None, None) when there are no plans.
    """
    import openpyxl

    if not plans:
        return None, None

    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = 'Crop plans'

    _build_sheet(ws, plans)

    buffer = BytesIO()
    wb.save(buffer)
    buffer.seek(0)

    filename = f"crop_plans_{datetime.now().strftime('%Y%m%d')}.xlsx"
    return buffer, filename
