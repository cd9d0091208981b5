import csv
import io
import logging
from datetime import date, datetime
from pathlib import Path

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFError, TTFont
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from behavior_app.core.config import Settings, get_settings
from behavior_app.schemas.reports import ReportRow
from behavior_app.schemas.students import StudentOut
from behavior_app.services.records import normalize_key, read_classes, read_students
from behavior_app.services.results import OperationError, Result, ok, operation
from behavior_app.services.storage import StorageService
from behavior_app.services.store import TableStore

logger = logging.getLogger(__name__)

BOM = "\ufeff"
CSV_HEADER = (
    "ลำดับ",
    "รหัสนักเรียน",
    "ชื่อ-สกุล",
    "ชั้น",
    "คะแนนเริ่มต้น",
    "คะแนนที่เพิ่ม",
    "คะแนนที่หัก",
    "คะแนนคงเหลือ",
)
IMPORT_HEADER = ("รหัสนักเรียน", "ชื่อ-สกุล", "ชั้น")
IMPORT_EXAMPLE = ("10001", "ด.ช. ตัวอย่าง ใจดี", "ม.1/1")
EXPORT_CONTENT_TYPES = {
    "csv": "text/csv; charset=utf-8",
    "pdf": "application/pdf",
}
REPORT_FONT_PREFIX = "ReportFont"
THAI_SAMPLE_CHAR = "ก"


def report_rows(students: list[StudentOut]) -> list[ReportRow]:
    return [
        ReportRow(
            sequence=sequence,
            id=student.id,
            student_code=student.student_code,
            name=student.name,
            class_name=student.class_name,
            initial_score=student.initial_score,
            added_score=student.added_score,
            deducted_score=student.deducted_score,
            net_score=student.net_score,
        )
        for sequence, student in enumerate(students, start=1)
    ]


def filter_rows(rows: list[ReportRow], search: str = "", class_name: str = "") -> list[ReportRow]:
    needle = normalize_key(search)
    wanted_class = (class_name or "").strip()
    return [
        row
        for row in rows
        if (not needle or needle in row.student_code.casefold() or needle in row.name.casefold())
        and (not wanted_class or row.class_name == wanted_class)
    ]


def _table_values(row: ReportRow) -> list:
    return [
        row.sequence,
        row.student_code,
        row.name,
        row.class_name,
        row.initial_score,
        row.added_score,
        row.deducted_score,
        row.net_score,
    ]


def render_csv(rows: list[ReportRow]) -> bytes:
    buffer = io.StringIO()
    buffer.write(BOM)
    buffer.write(",".join(CSV_HEADER) + "\r\n")
    writer = csv.writer(buffer, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\r\n")
    for row in rows:
        writer.writerow(_table_values(row))
    return buffer.getvalue().encode("utf-8")


def find_report_font(settings: Settings) -> str | None:
    """Return REPORT_FONT_PATH, or the first known Thai font found on disk."""
    if settings.report_font_path:
        return settings.report_font_path
    for directory in settings.report_font_dirs:
        root = Path(directory).expanduser()
        if not root.is_dir():
            continue
        for filename in settings.report_font_files:
            match = next(root.rglob(filename), None)
            if match is not None:
                return str(match)
    return None


def _register_font(font_path: str) -> str:
    name = f"{REPORT_FONT_PREFIX}-{Path(font_path).stem}"
    if name in pdfmetrics.getRegisteredFontNames():
        return name
    try:
        font = TTFont(name, font_path)
    except (OSError, TTFError) as exc:
        raise OperationError(f"Cannot load report font {font_path}: {exc}") from exc
    # Base-14 fonts and most Latin TTFs draw Thai as empty boxes.
    if ord(THAI_SAMPLE_CHAR) not in font.face.charToGlyph:
        raise OperationError(f"Report font {font_path} has no Thai glyphs")
    pdfmetrics.registerFont(font)
    logger.info("Registered report font %s from %s.", name, font_path)
    return name


def render_pdf(rows: list[ReportRow], title: str, font_path: str) -> bytes:
    font = bold_font = _register_font(font_path)
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=landscape(A4),
        leftMargin=10 * mm,
        rightMargin=10 * mm,
        topMargin=10 * mm,
        bottomMargin=10 * mm,
        title=title,
    )
    styles = getSampleStyleSheet()
    title_style = ParagraphStyle("ReportTitle", parent=styles["Heading2"], fontName=bold_font)
    meta_style = ParagraphStyle("ReportMeta", parent=styles["Normal"], fontName=font)

    elements = [
        Paragraph(title, title_style),
        Paragraph(f"{date.today():%d/%m/%Y} | {len(rows)}", meta_style),
        Spacer(1, 8),
    ]

    table_data = [list(CSV_HEADER)]
    table_data.extend([str(value) for value in _table_values(row)] for row in rows)
    if not rows:
        table_data.append(["-"] * len(CSV_HEADER))

    widths = [14 * mm, 30 * mm, 80 * mm, 25 * mm, 30 * mm, 30 * mm, 30 * mm, 30 * mm]
    table = Table(table_data, repeatRows=1, colWidths=widths)
    table.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#f3f4f6")),
                ("GRID", (0, 0), (-1, -1), 0.25, colors.HexColor("#d1d5db")),
                ("FONTNAME", (0, 0), (-1, 0), bold_font),
                ("FONTNAME", (0, 1), (-1, -1), font),
                ("FONTSIZE", (0, 0), (-1, -1), 9),
                ("ALIGN", (4, 1), (-1, -1), "RIGHT"),
                ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
            ]
        )
    )
    elements.append(table)
    doc.build(elements)
    return buffer.getvalue()


def build_import_template() -> bytes:
    lines = [",".join(IMPORT_HEADER), ",".join(IMPORT_EXAMPLE)]
    return (BOM + "\r\n".join(lines) + "\r\n").encode("utf-8")


@operation
def get_report_data(store: TableStore) -> Result:
    rows = report_rows(read_students(store))
    return ok(
        students=[row.model_dump() for row in rows],
        classes=[item.name for item in read_classes(store)],
    )


@operation
def filter_student_report(store: TableStore, search: str = "", class_name: str = "") -> Result:
    rows = filter_rows(report_rows(read_students(store)), search, class_name)
    return ok(students=[row.model_dump() for row in rows])


@operation
def export_report(store: TableStore, export_format: str, storage: StorageService | None = None) -> Result:
    export_format = (export_format or "").strip().lower()
    if export_format not in EXPORT_CONTENT_TYPES:
        raise OperationError("Export format must be 'csv' or 'pdf'")

    settings = get_settings()
    rows = report_rows(read_students(store))
    if export_format == "csv":
        content = render_csv(rows)
    else:
        font_path = find_report_font(settings)
        if font_path is None:
            raise OperationError(
                "PDF export needs a Thai TrueType font: set REPORT_FONT_PATH or install one of REPORT_FONT_FILES"
            )
        content = render_pdf(rows, settings.report_title, font_path)

    filename = f"student-report-{datetime.now():%Y%m%d-%H%M%S}.{export_format}"
    storage = storage or StorageService()
    url = storage.save_file(
        content,
        filename=filename,
        content_type=EXPORT_CONTENT_TYPES[export_format],
        prefix=settings.exports_prefix,
    )
    logger.info("Exported %d student(s) as %s.", len(rows), export_format)
    return ok(
        message=f"Exported {len(rows)} student(s)",
        url=url,
        filename=filename,
        format=export_format,
        rows=len(rows),
    )
