"""Export service - write catalog records to CSV, XLSX or JSON."""

import csv
import io
import json
import logging
from pathlib import Path
from typing import Iterable

from openpyxl import Workbook

from ..config import EXPORT_FILENAME_PREFIX, EXPORT_SHEET_NAME
from ..models.product import ProductRecord
from ..utils import export_timestamp

logger = logging.getLogger(__name__)

COLUMNS = ["商品名称", "类目", "价格", "销量", "店铺名称", "店铺链接", "商品链接", "采集时间", "原始内容"]
FORMATS = ("csv", "xlsx", "json")

UNKNOWN_CATEGORY = "未知"
NO_LINK = "无"


class ExportError(Exception):
    """Serialization or file write failed."""
    pass


def to_row(record: ProductRecord) -> dict[str, str]:
    """Map a record onto the export columns."""
    return {
        "商品名称": record.product_name,
        "类目": record.category or UNKNOWN_CATEGORY,
        "价格": record.price,
        "销量": record.sales_volume,
        "店铺名称": record.shop_name,
        "店铺链接": record.shop_link or NO_LINK,
        "商品链接": record.product_link or NO_LINK,
        "采集时间": record.timestamp.astimezone().strftime("%Y/%m/%d %H:%M:%S"),
        "原始内容": record.raw_content,
    }


def to_csv(records: Iterable[ProductRecord]) -> bytes:
    """UTF-8 CSV with BOM; every field quoted, inner quotes doubled."""
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=COLUMNS, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writeheader()
    for record in records:
        writer.writerow(to_row(record))
    return buffer.getvalue().encode("utf-8-sig")


def to_json(records: Iterable[ProductRecord]) -> bytes:
    rows = [to_row(r) for r in records]
    return json.dumps(rows, ensure_ascii=False, indent=2).encode("utf-8")


def to_xlsx(records: Iterable[ProductRecord]) -> bytes:
    """Single-sheet workbook with the export columns."""
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = EXPORT_SHEET_NAME
    sheet.append(COLUMNS)
    for record in records:
        row = to_row(record)
        sheet.append([row[column] for column in COLUMNS])

    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


SERIALIZERS = {
    "csv": to_csv,
    "xlsx": to_xlsx,
    "json": to_json,
}


def export_filename(fmt: str) -> str:
    """Example: "TikTok数据_2026-10-19T08-30-00.csv" """
    return f"{EXPORT_FILENAME_PREFIX}{export_timestamp()}.{fmt}"


def serialize(records: Iterable[ProductRecord], fmt: str) -> bytes:
    """Serialize records to the given format.

    Raises:
        ExportError: unknown format or serialization failure
    """
    serializer = SERIALIZERS.get(fmt)
    if serializer is None:
        raise ExportError(f"Unknown export format: {fmt!r}. Valid: {list(FORMATS)}")
    try:
        return serializer(records)
    except Exception as e:
        raise ExportError(f"Failed to serialize {fmt}: {e}") from e


def export_records(records: Iterable[ProductRecord], fmt: str, directory: str | Path = ".") -> Path:
    """
    Write records to a timestamped file in directory.

    Returns:
        Path of the written file

    Raises:
        ExportError: unknown format, serialization or write failure
    """
    records = list(records)
    content = serialize(records, fmt)
    path = Path(directory) / export_filename(fmt)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
    except OSError as e:
        raise ExportError(f"Failed to write {path}: {e}") from e

    logger.info(f"Exported {len(records)} records to {path}")
    return path
