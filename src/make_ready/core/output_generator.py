import logging
from pathlib import Path

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

DEFAULT_WORKSHEET_NAME = "Make Ready Report"
DEFAULT_FILE_SUFFIX = "_Make_Ready_Report.xlsx"
DEFAULT_COLUMN_WIDTHS = [10, 20, 15, 20, 25, 18, 18, 18, 18, 20, 20, 35, 15, 15, 20]
DEFAULT_WRAP_CELLS = ["B1", "O2"]


class OutputGenerator:
    """Handles Excel output generation"""

    def __init__(self, config=None):
        self.config = config or {}
        output_settings = self.config.get('output_settings', {})
        self.worksheet_name = output_settings.get('worksheet_name', DEFAULT_WORKSHEET_NAME)
        self.file_suffix = output_settings.get('file_suffix', DEFAULT_FILE_SUFFIX)
        self.column_widths = output_settings.get('column_widths', DEFAULT_COLUMN_WIDTHS)
        self.wrap_cells = output_settings.get('wrap_cells', DEFAULT_WRAP_CELLS)

    def write_output(self, report, output_file):
        """
        Write the report to a new workbook

        Args:
            report (Report): Rows and merged regions to write
            output_file (str | Path): Destination .xlsx path

        Returns:
            str: Path of the saved workbook
        """
        output_path = Path(output_file)
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)

            wb = Workbook()
            ws = wb.active
            ws.title = self.worksheet_name

            for row in report.values():
                ws.append(row)

            self._apply_merges(ws, report.merges)
            self._format_sheet(ws, report.header_row_count, len(report.rows))

            wb.save(output_path)
            logging.info(f"Successfully wrote {report.pole_count()} poles ({len(report.rows)} rows) to {output_path}")
            return str(output_path)

        except Exception as e:
            logging.error(f"Error writing output: {e}")
            raise

    @staticmethod
    def _apply_merges(ws, merges):
        # Merge spans are 0-based; worksheet rows and columns start at 1
        for merge in merges:
            ws.merge_cells(start_row=merge.start_row + 1, start_column=merge.start_col + 1,
                           end_row=merge.end_row + 1, end_column=merge.end_col + 1)
        logging.debug(f"Applied {len(merges)} merged regions")

    def _format_sheet(self, ws, header_row_count, row_count):
        for col_idx, width in enumerate(self.column_widths, 1):
            ws.column_dimensions[get_column_letter(col_idx)].width = width

        thin = Side(style='thin')
        border = Border(left=thin, right=thin, top=thin, bottom=thin)
        header_fill = PatternFill(start_color='B7DEE8', end_color='B7DEE8', fill_type='solid')
        header_font = Font(bold=True)
        centered = Alignment(horizontal='center', vertical='center')
        top_aligned = Alignment(vertical='top')

        for row in ws.iter_rows(min_row=1, max_row=row_count, max_col=len(self.column_widths)):
            for cell in row:
                cell.border = border
                if cell.row <= header_row_count:
                    cell.font = header_font
                    cell.fill = header_fill
                    cell.alignment = centered
                elif cell.column <= 11:
                    # Pole-level columns are merged down the block
                    cell.alignment = top_aligned

        for ref in self.wrap_cells:
            ws[ref].alignment = Alignment(wrap_text=True, horizontal='center', vertical='center')

        ws.freeze_panes = ws.cell(row=header_row_count + 1, column=1)

    def generate_output_file(self, job_name, output_dir):
        """Build the output path for a job: <output_dir>/<job_name>_Make_Ready_Report.xlsx"""
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        output_path = output_dir / f"{job_name}{self.file_suffix}"
        logging.info(f"Generated output file path: {output_path}")
        return str(output_path)
