"""Spreadsheet export of search results.

Entities are flattened into a fixed column layout and written as CSV or
XLSX with pandas (openpyxl is the XLSX engine).
"""

import io
import logging
import re
from datetime import date

import pandas as pd

from app.models import Company

logger = logging.getLogger(__name__)

NOT_AVAILABLE = "N/A"

EXPORT_COLUMNS = [
    "No.",
    "Company Name",
    "Address",
    "Phone",
    "Email",
    "Website",
    "Category",
    "Business Status",
    "Source",
    "Coordinates",
]

# Excel column widths in characters, same order as EXPORT_COLUMNS
COLUMN_WIDTHS = [5, 30, 40, 15, 25, 30, 20, 15, 20, 20]

SHEET_NAME = "Companies"

CSV_MEDIA_TYPE = "text/csv; charset=utf-8"
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _value(value: str | None) -> str:
    return value if value else NOT_AVAILABLE


def to_table(entities: list[Company]) -> list[dict[str, str | int]]:
    """Flatten entities into export rows, one dict per entity."""
    rows: list[dict[str, str | int]] = []
    for index, company in enumerate(entities, start=1):
        coordinates = (
            f"{company.coordinates.lat}, {company.coordinates.lng}"
            if company.coordinates is not None
            else NOT_AVAILABLE
        )
        rows.append({
            "No.": index,
            "Company Name": company.name,
            "Address": _value(company.address),
            "Phone": _value(company.contact.phone),
            "Email": _value(company.contact.email),
            "Website": _value(company.contact.website),
            "Category": _value(company.category),
            "Business Status": _value(company.business_status),
            "Source": _value(company.source),
            "Coordinates": coordinates,
        })
    return rows


def to_dataframe(entities: list[Company]) -> pd.DataFrame:
    return pd.DataFrame(to_table(entities), columns=EXPORT_COLUMNS)


def to_csv_bytes(entities: list[Company]) -> bytes:
    """Render entities as UTF-8 CSV with a header row."""
    return to_dataframe(entities).to_csv(index=False).encode("utf-8")


def to_xlsx_bytes(entities: list[Company]) -> bytes:
    """Render entities as an XLSX workbook with a single sheet."""
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        to_dataframe(entities).to_excel(writer, sheet_name=SHEET_NAME, index=False)
        worksheet = writer.sheets[SHEET_NAME]
        for column_cells, width in zip(worksheet.columns, COLUMN_WIDTHS):
            worksheet.column_dimensions[column_cells[0].column_letter].width = width
    logger.debug(f"Rendered {len(entities)} entities to XLSX")
    return buffer.getvalue()


def _slug(value: str) -> str:
    return re.sub(r"[^a-zA-Z0-9]", "-", value).lower()


def export_filename(
    location: str,
    skills: list[str] | tuple[str, ...],
    extension: str,
    today: date | None = None,
) -> str:
    """File name such as ``internships-pune-python-2024-05-01.csv``."""
    skills_part = "-".join(_slug(skill) for skill in skills) if skills else "all-skills"
    stamp = (today or date.today()).isoformat()
    return f"internships-{_slug(location)}-{skills_part}-{stamp}.{extension.lstrip('.')}"
