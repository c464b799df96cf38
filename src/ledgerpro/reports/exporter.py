"""Statement export to Excel and CSV.

Income statements and balance sheets are laid out from their rows()
hints: section rows shaded, subtotal rows bold, total rows white on dark.
Tabular views (trial balance, general ledger) get a header row and one row
per record. CSV export goes through pandas.
"""

import logging
from pathlib import Path
from typing import Optional, Union

import pandas as pd
from openpyxl import Workbook
from openpyxl.styles import Font, Alignment, PatternFill, Border, Side

from ledgerpro.core.preferences import DisplayConfig
from ledgerpro.services.financial_statements import GeneralLedger, TrialBalance

logger = logging.getLogger(__name__)

MONEY_FORMAT = '#,##0.00'

HEADER_FONT = Font(bold=True, size=14)
SUBHEADER_FONT = Font(italic=True, size=10, color="595959")
SECTION_FILL = PatternFill(start_color="D9E1F2", end_color="D9E1F2", fill_type="solid")
TOTAL_FILL = PatternFill(start_color="1F2A44", end_color="1F2A44", fill_type="solid")
TABLE_HEADER_FILL = PatternFill(start_color="4472C4", end_color="4472C4", fill_type="solid")
WHITE_BOLD = Font(bold=True, color="FFFFFF")
THIN_BORDER = Border(
    left=Side(style="thin"),
    right=Side(style="thin"),
    top=Side(style="thin"),
    bottom=Side(style="thin"),
)


class StatementExporter:
    """
    Writes statements to .xlsx or .csv files.

    Usage:
        exporter = StatementExporter()
        exporter.export(service.balance_sheet(), Path("reports/bs.xlsx"))
    """

    def __init__(self, display: Optional[DisplayConfig] = None):
        self.display = display or DisplayConfig()

    def export(self, statement, output_path: Union[str, Path]) -> Path:
        """Export by file extension (.xlsx or .csv)."""
        output_path = Path(output_path)
        suffix = output_path.suffix.lower()
        if suffix == ".csv":
            return self.export_csv(statement, output_path)
        if suffix != ".xlsx":
            raise ValueError(f"Unsupported export format: {suffix or output_path.name}")
        if isinstance(statement, GeneralLedger):
            return self.export_general_ledger_excel(statement, output_path)
        if isinstance(statement, TrialBalance):
            return self.export_trial_balance_excel(statement, output_path)
        return self.export_excel(statement, output_path)

    def export_excel(self, statement, output_path: Union[str, Path]) -> Path:
        """
        Export an income statement or balance sheet.

        Args:
            statement: Object exposing title, subtitle and rows()
            output_path: Output file path (.xlsx)

        Returns:
            Path to generated Excel file
        """
        wb = Workbook()
        ws = wb.active
        ws.title = statement.title[:31]

        row = 1
        ws.cell(row=row, column=1, value=statement.title).font = HEADER_FONT
        ws.merge_cells(start_row=row, start_column=1, end_row=row, end_column=2)
        row += 1
        ws.cell(row=row, column=1, value=statement.subtitle).font = SUBHEADER_FONT
        row += 2

        for report_row in statement.rows():
            label_cell = ws.cell(row=row, column=1, value=report_row.label)
            amount_cell = ws.cell(row=row, column=2)
            if report_row.amount is not None:
                amount_cell.value = report_row.amount
                amount_cell.number_format = MONEY_FORMAT

            if report_row.kind == "section":
                label_cell.font = Font(bold=True)
                label_cell.fill = SECTION_FILL
                amount_cell.fill = SECTION_FILL
            elif report_row.kind == "item":
                label_cell.alignment = Alignment(indent=1)
            elif report_row.kind == "subtotal":
                label_cell.font = Font(bold=True)
                amount_cell.font = Font(bold=True)
                amount_cell.border = Border(top=Side(style="thin"))
            elif report_row.kind == "total":
                for cell in (label_cell, amount_cell):
                    cell.font = WHITE_BOLD
                    cell.fill = TOTAL_FILL
            row += 1

        is_balanced = getattr(statement, "is_balanced", None)
        if is_balanced is False:
            row += 1
            off_by = self.display.format_currency(abs(statement.difference))
            ws.cell(row=row, column=1, value=f"Out of balance by {off_by}").font = Font(bold=True, color="C00000")

        ws.column_dimensions["A"].width = 42
        ws.column_dimensions["B"].width = 18

        return self._save(wb, output_path)

    def export_trial_balance_excel(self, trial: TrialBalance, output_path: Union[str, Path]) -> Path:
        wb = Workbook()
        ws = wb.active
        ws.title = "Trial Balance"

        row = 1
        ws.cell(row=row, column=1, value="Trial Balance").font = HEADER_FONT
        row += 1
        ws.cell(row=row, column=1, value=f"As of {trial.as_of}").font = SUBHEADER_FONT
        row += 2

        row = self._write_header(ws, row, ["Code", "Account", "Type", "Debit", "Credit"])
        for line in trial.accounts:
            values = [line.code, line.name, line.account_type.value, line.debit, line.credit]
            row = self._write_record(ws, row, values, money_columns=(4, 5))

        ws.cell(row=row, column=2, value="TOTALS")
        for col, value in ((4, trial.total_debit), (5, trial.total_credit)):
            cell = ws.cell(row=row, column=col, value=value)
            cell.number_format = MONEY_FORMAT
        for col in range(1, 6):
            ws.cell(row=row, column=col).font = WHITE_BOLD
            ws.cell(row=row, column=col).fill = TOTAL_FILL
        row += 2

        status = "Balanced" if trial.is_balanced else (
            f"Out of balance by {self.display.format_currency(abs(trial.difference))}"
        )
        ws.cell(row=row, column=1, value=status).font = Font(bold=True)

        for letter, width in zip("ABCDE", (10, 36, 12, 16, 16)):
            ws.column_dimensions[letter].width = width

        return self._save(wb, output_path)

    def export_general_ledger_excel(self, ledger: GeneralLedger, output_path: Union[str, Path]) -> Path:
        """One block per account: header, lines with running balance, totals."""
        wb = Workbook()
        ws = wb.active
        ws.title = "General Ledger"

        row = 1
        ws.cell(row=row, column=1, value="General Ledger").font = HEADER_FONT
        row += 1
        if ledger.start_date or ledger.end_date:
            period = f"{ledger.start_date or 'beginning'} to {ledger.end_date or 'today'}"
            ws.cell(row=row, column=1, value=period).font = SUBHEADER_FONT
        row += 2

        if not ledger.accounts:
            ws.cell(row=row, column=1, value="No transactions found.")

        for section in ledger.accounts:
            title = ws.cell(row=row, column=1, value=section.account.label)
            title.font = Font(bold=True)
            for col in range(1, 7):
                ws.cell(row=row, column=col).fill = SECTION_FILL
            row += 1

            row = self._write_header(
                ws, row, ["Date", "Reference", "Description", "Debit", "Credit", "Balance"]
            )
            for line in section.rows:
                values = [
                    line.date,
                    line.reference,
                    line.description,
                    line.debit if line.debit else None,
                    line.credit if line.credit else None,
                    line.balance,
                ]
                row = self._write_record(ws, row, values, money_columns=(4, 5, 6))

            ws.cell(row=row, column=3, value="Totals").font = Font(bold=True)
            for col, value in ((4, section.total_debit), (5, section.total_credit),
                               (6, section.closing_balance)):
                cell = ws.cell(row=row, column=col, value=value)
                cell.font = Font(bold=True)
                cell.number_format = MONEY_FORMAT
            row += 2

        for letter, width in zip("ABCDEF", (12, 18, 40, 15, 15, 16)):
            ws.column_dimensions[letter].width = width

        return self._save(wb, output_path)

    def export_csv(self, statement, output_path: Union[str, Path]) -> Path:
        """Write statement.to_records() as CSV."""
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        df = pd.DataFrame(statement.to_records())
        df.to_csv(output_path, index=False)

        logger.info(f"Exported {statement.title} to {output_path}")
        return output_path

    @staticmethod
    def _write_header(ws, row: int, headers) -> int:
        for col, header in enumerate(headers, 1):
            cell = ws.cell(row=row, column=col, value=header)
            cell.font = WHITE_BOLD
            cell.fill = TABLE_HEADER_FILL
            cell.border = THIN_BORDER
            cell.alignment = Alignment(horizontal="center")
        return row + 1

    @staticmethod
    def _write_record(ws, row: int, values, money_columns=()) -> int:
        for col, value in enumerate(values, 1):
            cell = ws.cell(row=row, column=col, value=value)
            cell.border = THIN_BORDER
            if col in money_columns:
                cell.number_format = MONEY_FORMAT
        return row + 1

    @staticmethod
    def _save(wb: Workbook, output_path: Union[str, Path]) -> Path:
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        wb.save(output_path)
        logger.info(f"Exported {wb.active.title} to {output_path}")
        return output_path
