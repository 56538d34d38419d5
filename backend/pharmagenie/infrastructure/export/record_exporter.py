"""CSV and Excel export of chat response data.

Works on the projected records returned by the chat endpoint. CSV covers a
single collection; Excel covers one collection or several (one sheet each
plus a Summary sheet).
"""

import csv
import io
import logging
from typing import Any

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from pharmagenie.application.services.response_formatter import approval_text
from pharmagenie.domain.entities.collections import (
    ADVERSE_EVENTS,
    ALL_COLLECTIONS,
    DRUGS,
    PARTICIPANTS,
    SITES,
    TRIALS,
)
from pharmagenie.domain.exceptions import ExportError

logger = logging.getLogger(__name__)

CSV_MEDIA_TYPE = "text/csv"
EXCEL_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

# (record key, column title) per collection.
COLLECTION_HEADERS: dict[str, list[tuple[str, str]]] = {
    TRIALS: [
        ("trial_id", "Trial ID"),
        ("title", "Title"),
        ("sponsor", "Sponsor"),
        ("drug", "Drug"),
        ("indication", "Indication"),
        ("phase", "Phase"),
        ("status", "Status"),
        ("start_date", "Start Date"),
        ("end_date", "End Date"),
        ("current_enrollment", "Current Enrollment"),
        ("enrollment_target", "Enrollment Target"),
        ("enrollment_progress", "Progress"),
    ],
    DRUGS: [
        ("drug_id", "Drug ID"),
        ("name", "Name"),
        ("drug_class", "Class"),
        ("approval_status", "Approval Status"),
        ("description", "Description"),
        ("mechanism", "Mechanism of Action"),
    ],
    SITES: [
        ("site_id", "Site ID"),
        ("name", "Name"),
        ("city", "City"),
        ("state", "State"),
        ("country", "Country"),
        ("postal_code", "Postal Code"),
        ("capacity", "Capacity"),
        ("current_trials", "Current Trials"),
    ],
    PARTICIPANTS: [
        ("participant_id", "Participant ID"),
        ("age", "Age"),
        ("gender", "Gender"),
        ("ethnicity", "Ethnicity"),
        ("enrollment_status", "Enrollment Status"),
        ("enrollment_date", "Enrollment Date"),
        ("trial_id", "Trial ID"),
    ],
    ADVERSE_EVENTS: [
        ("event_id", "Event ID"),
        ("severity", "Severity"),
        ("is_serious", "Is Serious"),
        ("description", "Description"),
        ("outcome", "Outcome"),
        ("report_date", "Report Date"),
        ("participant_id", "Participant ID"),
        ("trial_id", "Trial ID"),
    ],
}

_HEADER_FONT = Font(bold=True, color="FFFFFFFF")
_HEADER_FILL = PatternFill(fill_type="solid", fgColor="FF4A90E2")
_HEADER_ALIGNMENT = Alignment(vertical="center", horizontal="center")


def headers_for(collection: str) -> list[tuple[str, str]]:
    try:
        return COLLECTION_HEADERS[collection]
    except KeyError:
        raise ExportError(f"Unknown collection type '{collection}'") from None


def sheet_title(collection: str) -> str:
    return collection[:1].upper() + collection[1:]


def single_collection_type(response_data: dict[str, Any]) -> str | None:
    """The only non-empty collection in ``response_data``, or None."""
    non_empty = [name for name in ALL_COLLECTIONS if response_data.get(name)]
    return non_empty[0] if len(non_empty) == 1 else None


def normalize_rows(records: list[dict[str, Any]], collection: str) -> list[dict[str, Any]]:
    """Flatten values for tabular output (Yes/No booleans, approval text)."""
    rows = []
    for record in records:
        row = dict(record)
        if collection == DRUGS and not isinstance(row.get("approval_status"), str):
            row["approval_status"] = approval_text(row.get("approval_status"))
        if "is_serious" in row and row["is_serious"] is not None:
            row["is_serious"] = "Yes" if row["is_serious"] else "No"
        rows.append(row)
    return rows


def _cell_value(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value)
    return str(value)


def export_csv(records: list[dict[str, Any]], collection: str) -> bytes:
    """Serialize one collection's records to UTF-8 CSV."""
    headers = headers_for(collection)
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow([title for _, title in headers])
    for row in normalize_rows(records, collection):
        writer.writerow([_cell_value(row.get(key)) for key, _ in headers])
    logger.info("Exported %d %s records to CSV", len(records), collection)
    return buffer.getvalue().encode("utf-8")


def _write_sheet(sheet: Worksheet, records: list[dict[str, Any]], collection: str) -> None:
    headers = headers_for(collection)
    sheet.append([title for _, title in headers])
    for row in normalize_rows(records, collection):
        sheet.append([_cell_value(row.get(key)) for key, _ in headers])

    for index, (_, title) in enumerate(headers, start=1):
        cell = sheet.cell(row=1, column=index)
        cell.font = _HEADER_FONT
        cell.fill = _HEADER_FILL
        cell.alignment = _HEADER_ALIGNMENT
        sheet.column_dimensions[get_column_letter(index)].width = max(15, len(title) + 5)

    sheet.auto_filter.ref = f"A1:{get_column_letter(len(headers))}1"


def _workbook_bytes(workbook: Workbook) -> bytes:
    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


def export_excel(records: list[dict[str, Any]], collection: str) -> bytes:
    """One styled worksheet for one collection."""
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = sheet_title(collection)
    _write_sheet(sheet, records, collection)
    logger.info("Exported %d %s records to Excel", len(records), collection)
    return _workbook_bytes(workbook)


def export_multi_collection_excel(response_data: dict[str, Any]) -> bytes:
    """Summary sheet plus one sheet per non-empty collection."""
    workbook = Workbook()
    summary = workbook.active
    summary.title = "Summary"
    summary.append(["Collection", "Count"])
    for index in (1, 2):
        cell = summary.cell(row=1, column=index)
        cell.font = _HEADER_FONT
        cell.fill = _HEADER_FILL
    summary.column_dimensions["A"].width = 20
    summary.column_dimensions["B"].width = 15

    exported = 0
    for name in ALL_COLLECTIONS:
        records = response_data.get(name) or []
        if not records:
            continue
        summary.append([sheet_title(name), len(records)])
        _write_sheet(workbook.create_sheet(sheet_title(name)), records, name)
        exported += 1

    logger.info("Exported %d collections to a multi-sheet workbook", exported)
    return _workbook_bytes(workbook)


def export_response_csv(response_data: dict[str, Any]) -> tuple[bytes, str]:
    """CSV for a response holding exactly one collection with several records.

    Returns the payload and the collection name.
    """
    collection = single_collection_type(response_data)
    if collection is None or len(response_data[collection]) <= 1:
        raise ExportError(
            "CSV export is only available for single collection with multiple "
            "records. Use Excel for multi-collection data."
        )
    return export_csv(response_data[collection], collection), collection


def export_response_excel(response_data: dict[str, Any]) -> tuple[bytes, str | None]:
    """Excel for a response; multi-collection data gets a multi-sheet workbook.

    Returns the payload and the collection name (None for multi-sheet).
    """
    collection = single_collection_type(response_data)
    if collection is not None:
        return export_excel(response_data[collection], collection), collection
    if not any(response_data.get(name) for name in ALL_COLLECTIONS):
        raise ExportError("Nothing to export: the response holds no records.")
    return export_multi_collection_excel(response_data), None
