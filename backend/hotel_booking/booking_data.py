"""Spreadsheet-backed booking test data."""
import logging
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Any, List, Mapping, Optional

from openpyxl import load_workbook

from hotel_booking.config import settings
from hotel_booking.utils import stay_dates, to_iso_date

logger = logging.getLogger(__name__)

CHECK_IN_COLUMN = "CheckInDate"
CHECK_OUT_COLUMN = "CheckOutDate"


@dataclass(frozen=True)
class BookingRow:
    """One booking scenario from the data sheet."""
    location: str
    check_in: str
    check_out: str
    hotel_name: str

    @classmethod
    def from_mapping(cls, row: Mapping[str, Any]) -> "BookingRow":
        return cls(
            location=str(row["Location"]).strip(),
            check_in=to_iso_date(row[CHECK_IN_COLUMN]),
            check_out=to_iso_date(row[CHECK_OUT_COLUMN]),
            hotel_name=str(row["HotelName"]).strip(),
        )


class BookingDataSheet:
    """Reads and refreshes the booking rows of one worksheet."""

    def __init__(self, path: Optional[Path] = None, sheet_name: Optional[str] = None):
        self.path = Path(path) if path else Path(settings.test_data_dir) / settings.test_data_file
        self.sheet_name = sheet_name or settings.test_data_sheet

    def records(self) -> List[dict]:
        """Rows as dicts keyed by the header row."""
        if not self.path.exists():
            logger.error(f"File not found: {self.path}")
            return []

        workbook = load_workbook(self.path)
        try:
            if self.sheet_name not in workbook.sheetnames:
                logger.error(f"Sheet not found: {self.sheet_name}")
                return []
            rows = list(workbook[self.sheet_name].iter_rows(values_only=True))
        finally:
            workbook.close()

        if not rows:
            return []
        header = [str(cell).strip() if cell is not None else "" for cell in rows[0]]
        records = [
            dict(zip(header, values)) for values in rows[1:]
            if any(value is not None for value in values)
        ]
        logger.info(f"Loaded {len(records)} rows from sheet: {self.sheet_name}")
        return records

    def rows(self) -> List[BookingRow]:
        return [BookingRow.from_mapping(record) for record in self.records()]

    def refresh_dates(self, today: Optional[date] = None, stay_days: Optional[int] = None) -> int:
        """Rewrite every row's dates to today and today + ``stay_days``.

        Returns:
            Number of rows updated
        """
        if not self.path.exists():
            logger.error(f"File not found: {self.path}")
            return 0

        check_in, check_out = stay_dates(today or date.today(), stay_days or settings.stay_length_days)
        workbook = load_workbook(self.path)
        try:
            if self.sheet_name not in workbook.sheetnames:
                logger.error(f"Sheet not found: {self.sheet_name}")
                return 0
            sheet = workbook[self.sheet_name]
            header = [cell.value for cell in sheet[1]]
            try:
                check_in_col = header.index(CHECK_IN_COLUMN) + 1
                check_out_col = header.index(CHECK_OUT_COLUMN) + 1
            except ValueError:
                logger.error(f"Sheet {self.sheet_name} has no {CHECK_IN_COLUMN}/{CHECK_OUT_COLUMN} columns")
                return 0

            updated = 0
            for row in range(2, sheet.max_row + 1):
                if all(cell.value is None for cell in sheet[row]):
                    continue
                sheet.cell(row=row, column=check_in_col, value=check_in)
                sheet.cell(row=row, column=check_out_col, value=check_out)
                updated += 1
            workbook.save(self.path)
        finally:
            workbook.close()

        logger.info(f"Updated dates successfully in {self.path.name}")
        return updated
