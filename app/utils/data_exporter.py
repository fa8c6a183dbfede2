import csv
import pandas as pd
from io import StringIO, BytesIO
from typing import List, Dict, Any, Optional
from datetime import datetime
from fastapi import HTTPException, status
from fastapi.responses import StreamingResponse
from openpyxl.styles import Font, PatternFill, Border, Side
from openpyxl.utils import get_column_letter
import logging

logger = logging.getLogger(__name__)

# Report columns whose totals are meaningful (targets and actuals, not percentages)
SUM_KEYWORDS = ['target', 'actual']

# Achievement columns coloured by the same thresholds as the report badges
ACHIEVEMENT_KEYWORD = 'ach'
BADGE_FILLS = {
    "success": PatternFill("solid", fgColor="C6EFCE"),
    "warning": PatternFill("solid", fgColor="FFEB9C"),
    "destructive": PatternFill("solid", fgColor="FFC7CE"),
}


def achievement_badge(achievement: float) -> str:
    if achievement >= 100:
        return "success"
    if achievement >= 80:
        return "warning"
    return "destructive"


class DataExportService:
    def prepare_data_for_export(self, data: List[Any], fields_mapping: Dict[str, str]) -> List[Dict[str, Any]]:
        """Map fields to display names and format values"""
        exported_data = []

        for item in data:
            row = {}
            for field_key, display_name in fields_mapping.items():
                if isinstance(item, dict):
                    value = item.get(field_key)
                else:
                    value = getattr(item, field_key, None)

                if value is None:
                    value = ""
                elif isinstance(value, datetime):
                    value = value.strftime("%Y-%m-%d %H:%M:%S")
                elif isinstance(value, float):
                    value = round(value, 2)
                elif hasattr(value, "value") and not isinstance(value, (str, int)):  # enums
                    value = value.value

                row[display_name] = value
            exported_data.append(row)

        return exported_data

    def export_to_csv(self, data: List[Dict[str, Any]], filename: str, columns: Optional[List[str]] = None) -> StreamingResponse:
        """Export data to CSV format"""
        try:
            output = StringIO()
            fieldnames = columns or (list(data[0].keys()) if data else [])
            if fieldnames:
                writer = csv.DictWriter(output, fieldnames=fieldnames)
                writer.writeheader()
                writer.writerows(data)

            return StreamingResponse(
                iter([output.getvalue()]),
                media_type="text/csv",
                headers={"Content-Disposition": f"attachment; filename={filename}.csv"}
            )

        except Exception as e:
            logger.error(f"Error exporting to CSV: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to export data to CSV"
            )

    def export_to_excel(
        self,
        data: List[Dict[str, Any]],
        filename: str,
        sheet_name: str = "Report",
        columns: Optional[List[str]] = None
    ) -> StreamingResponse:
        """Export data to Excel with a styled header, badge colours on achievement columns and a total row"""
        try:
            output = BytesIO()
            df = pd.DataFrame(data, columns=columns or (list(data[0].keys()) if data else None))

            sum_columns = {
                col_idx: name
                for col_idx, name in enumerate(df.columns, 1)
                if any(keyword in name.lower() for keyword in SUM_KEYWORDS)
                and ACHIEVEMENT_KEYWORD not in name.lower()
            }
            achievement_columns = {
                col_idx for col_idx, name in enumerate(df.columns, 1)
                if ACHIEVEMENT_KEYWORD in name.lower()
            }

            with pd.ExcelWriter(output, engine='openpyxl') as writer:
                df.to_excel(writer, sheet_name=sheet_name, index=False)
                worksheet = writer.sheets[sheet_name]

                header_font = Font(bold=True, color="FFFFFF")
                header_fill = PatternFill("solid", fgColor="366092")
                thin_border = Border(
                    left=Side(style='thin'),
                    right=Side(style='thin'),
                    top=Side(style='thin'),
                    bottom=Side(style='thin')
                )
                sum_font = Font(bold=True)
                sum_fill = PatternFill("solid", fgColor="D9D9D9")

                max_row = len(df) + 1
                max_col = len(df.columns)

                for col in range(1, max_col + 1):
                    header_cell = worksheet.cell(row=1, column=col)
                    header_cell.font = header_font
                    header_cell.fill = header_fill
                    header_cell.border = thin_border

                for row in range(2, max_row + 1):
                    for col in range(1, max_col + 1):
                        cell = worksheet.cell(row=row, column=col)
                        cell.border = thin_border
                        if col in sum_columns:
                            cell.number_format = '#,##0.00'
                        elif col in achievement_columns and isinstance(cell.value, (int, float)):
                            cell.number_format = '0.0'
                            cell.fill = BADGE_FILLS[achievement_badge(cell.value)]

                if sum_columns and len(df):
                    sum_row_number = max_row + 2
                    label = worksheet.cell(row=sum_row_number, column=1, value="TOTAL")
                    label.font = sum_font
                    label.fill = sum_fill
                    for col_idx, col_name in sum_columns.items():
                        total = float(pd.to_numeric(df[col_name], errors="coerce").fillna(0).sum())
                        sum_cell = worksheet.cell(row=sum_row_number, column=col_idx, value=total)
                        sum_cell.font = sum_font
                        sum_cell.fill = sum_fill
                        sum_cell.number_format = '#,##0.00'
                        sum_cell.border = thin_border

                for col_idx, column in enumerate(worksheet.columns, 1):
                    max_length = max((len(str(cell.value)) for cell in column if cell.value is not None), default=0)
                    worksheet.column_dimensions[get_column_letter(col_idx)].width = min(max(max_length + 2, 10), 50)

            logger.info(f"Excel export {filename} completed with {len(df)} rows")
            output.seek(0)

            return StreamingResponse(
                BytesIO(output.read()),
                media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
                headers={"Content-Disposition": f"attachment; filename={filename}.xlsx"}
            )

        except Exception as e:
            logger.error(f"Error exporting to Excel: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to export data to Excel"
            )
