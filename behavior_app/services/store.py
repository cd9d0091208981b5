"""Sheet-like table storage.

Every named table is a header plus data rows, keyed by the identifier in
column 1. Callers always read a whole table and address rows by their
0-based position among the data rows.
"""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Protocol

from sqlalchemy import func, select
from sqlalchemy.orm import Session, sessionmaker

from behavior_app.core.config import get_settings
from behavior_app.db.session import get_session_factory
from behavior_app.models import Behavior, Infraction, SchoolClass, Student, Teacher

logger = logging.getLogger(__name__)

TEACHERS = "Teachers"
BEHAVIORS = "Behaviors"
INFRACTIONS = "Infractions"
STUDENTS = "Students"
CLASSES = "Classes"

Row = list[Any]


@dataclass(frozen=True)
class TableSchema:
    name: str
    columns: tuple[str, ...]
    model: type

    def position(self, column: str) -> int:
        try:
            return self.columns.index(column)
        except ValueError as exc:
            raise KeyError(f"{self.name} has no column {column}") from exc


TABLES: dict[str, TableSchema] = {
    schema.name: schema
    for schema in (
        TableSchema(TEACHERS, ("id", "name", "username", "password"), Teacher),
        TableSchema(BEHAVIORS, ("id", "name", "score", "type"), Behavior),
        TableSchema(CLASSES, ("id", "name"), SchoolClass),
        TableSchema(
            STUDENTS,
            ("id", "student_code", "name", "class_name", "initial_score", "deducted_score", "added_score"),
            Student,
        ),
        TableSchema(
            INFRACTIONS,
            ("id", "student_id", "student_name", "student_class", "date", "behavior_id", "comment", "created_at"),
            Infraction,
        ),
    )
}


def get_schema(table: str) -> TableSchema:
    try:
        return TABLES[table]
    except KeyError as exc:
        raise KeyError(f"Unknown table: {table}") from exc


def _pad(row: Sequence[Any], width: int) -> Row:
    values = list(row)[:width]
    return values + [None] * (width - len(values))


class TableStore(Protocol):
    def headers(self, table: str) -> list[str]: ...

    def read_rows(self, table: str) -> list[Row]: ...

    def append_rows(self, table: str, rows: Sequence[Sequence[Any]]) -> None: ...

    def update_row(self, table: str, index: int, values: Mapping[str, Any]) -> None: ...

    def delete_row(self, table: str, index: int) -> None: ...


class MemoryTableStore:
    def __init__(self) -> None:
        self._sheets: dict[str, list[Row]] = {}

    def _sheet(self, table: str) -> list[Row]:
        schema = get_schema(table)
        sheet = self._sheets.get(table)
        if sheet is None:
            sheet = [list(schema.columns)]
            self._sheets[table] = sheet
            logger.info("Created table %s in memory.", table)
        return sheet

    def _check_index(self, table: str, sheet: list[Row], index: int) -> None:
        if not 0 <= index < len(sheet) - 1:
            raise IndexError(f"{table} has no row {index}")

    def headers(self, table: str) -> list[str]:
        return list(self._sheet(table)[0])

    def read_rows(self, table: str) -> list[Row]:
        return [list(row) for row in self._sheet(table)[1:]]

    def append_rows(self, table: str, rows: Sequence[Sequence[Any]]) -> None:
        width = len(get_schema(table).columns)
        sheet = self._sheet(table)
        sheet.extend(_pad(row, width) for row in rows)

    def update_row(self, table: str, index: int, values: Mapping[str, Any]) -> None:
        schema = get_schema(table)
        sheet = self._sheet(table)
        self._check_index(table, sheet, index)
        row = sheet[index + 1]
        for column, value in values.items():
            row[schema.position(column)] = value

    def delete_row(self, table: str, index: int) -> None:
        sheet = self._sheet(table)
        self._check_index(table, sheet, index)
        del sheet[index + 1]


class SqlTableStore:
    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self.session_factory = session_factory
        self._ready: set[str] = set()

    def _prepare(self, table: str) -> TableSchema:
        schema = get_schema(table)
        if table not in self._ready:
            with self.session_factory() as db:
                schema.model.__table__.create(bind=db.get_bind(), checkfirst=True)
            self._ready.add(table)
            logger.info("Table %s is ready (%s).", table, schema.model.__tablename__)
        return schema

    def _ordered(self, schema: TableSchema):
        return select(schema.model).order_by(schema.model.row_number)

    def _row_at(self, db: Session, schema: TableSchema, index: int):
        item = None
        if index >= 0:
            item = db.scalars(self._ordered(schema).offset(index).limit(1)).first()
        if item is None:
            raise IndexError(f"{schema.name} has no row {index}")
        return item

    def headers(self, table: str) -> list[str]:
        return list(self._prepare(table).columns)

    def read_rows(self, table: str) -> list[Row]:
        schema = self._prepare(table)
        with self.session_factory() as db:
            items = db.scalars(self._ordered(schema)).all()
            return [[getattr(item, column) for column in schema.columns] for item in items]

    def append_rows(self, table: str, rows: Sequence[Sequence[Any]]) -> None:
        schema = self._prepare(table)
        if not rows:
            return
        with self.session_factory() as db:
            next_number = (db.scalar(select(func.max(schema.model.row_number))) or 0) + 1
            for offset, row in enumerate(rows):
                values = {
                    column: value
                    for column, value in zip(schema.columns, _pad(row, len(schema.columns)))
                    if value is not None
                }
                db.add(schema.model(row_number=next_number + offset, **values))
            db.commit()

    def update_row(self, table: str, index: int, values: Mapping[str, Any]) -> None:
        schema = self._prepare(table)
        with self.session_factory() as db:
            item = self._row_at(db, schema, index)
            for column, value in values.items():
                if column not in schema.columns:
                    raise KeyError(f"{table} has no column {column}")
                setattr(item, column, value)
            db.commit()

    def delete_row(self, table: str, index: int) -> None:
        schema = self._prepare(table)
        with self.session_factory() as db:
            db.delete(self._row_at(db, schema, index))
            db.commit()


_store: TableStore | None = None


def get_store() -> TableStore:
    global _store
    if _store is None:
        settings = get_settings()
        if settings.store_backend.lower() == "memory":
            _store = MemoryTableStore()
        else:
            _store = SqlTableStore(get_session_factory())
    return _store


def reset_store() -> None:
    global _store
    _store = None
