"""
Column types and per-field column options.

A record field is an annotated class attribute. The annotation picks the SQL
type; ``column(...)`` carries the rest of the column definition:

    class Product(Model):
        id: Serial = column(primary_key=True)
        name: str = column(size=50, null=False)
        at: DateTime = column(default="now")
        owner: Integer = column(null=False, foreign_key="User.id")
"""

import dataclasses
import types
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, NewType, Optional, Tuple, Union, get_args, get_origin

from rowmodel.exceptions import ModelDefinitionError

Serial = NewType("Serial", int)
Integer = NewType("Integer", int)
Text = NewType("Text", str)
Float = NewType("Float", float)
Date = NewType("Date", date)
DateTime = NewType("DateTime", datetime)
Boolean = NewType("Boolean", bool)

SQL_TYPES = {
    Serial: "SERIAL",
    Integer: "INTEGER",
    int: "INTEGER",
    Text: "TEXT",
    Float: "DOUBLE PRECISION",
    float: "DOUBLE PRECISION",
    Date: "DATE",
    date: "DATE",
    DateTime: "TIMESTAMP",
    datetime: "TIMESTAMP",
    Boolean: "BOOLEAN",
    bool: "BOOLEAN",
}

# dataclasses.Field.metadata key holding the ColumnOptions
COLUMN_METADATA = "rowmodel.column"


@dataclass(frozen=True)
class ColumnOptions:
    primary_key: bool = False
    auto: bool = False
    null: bool = True
    unique: bool = False
    size: Optional[int] = None
    default: Any = None
    foreign_key: Optional[str] = None


def column(
    *,
    primary_key: bool = False,
    auto: bool = False,
    null: bool = True,
    unique: bool = False,
    size: Optional[int] = None,
    default: Any = None,
    foreign_key: Optional[str] = None,
) -> Any:
    """
    Declare the column options of a record field.

    ``default`` is the SQL-side default; the Python attribute itself always
    defaults to None so unset fields are left to the database on insert.
    """
    options = ColumnOptions(
        primary_key=primary_key,
        auto=auto,
        null=null,
        unique=unique,
        size=size,
        default=default,
        foreign_key=foreign_key,
    )
    return dataclasses.field(default=None, metadata={COLUMN_METADATA: options})


@dataclass(frozen=True)
class ColumnSpec:
    name: str
    sql_type: str
    options: ColumnOptions

    @property
    def is_primary_key(self) -> bool:
        return self.options.primary_key

    @property
    def nullable(self) -> bool:
        return self.options.null and not self.options.primary_key


@dataclass(frozen=True)
class ModelMeta:
    """Everything the SQL layer needs to know about a record class."""

    table: str
    columns: Tuple[ColumnSpec, ...]
    primary_key: str

    @property
    def column_names(self) -> Tuple[str, ...]:
        return tuple(c.name for c in self.columns)

    def get_column(self, name: str) -> ColumnSpec:
        for c in self.columns:
            if c.name == name:
                return c
        raise KeyError(name)


# Record class name -> table name, for resolving foreign_key="User.id"
_tables: Dict[str, str] = {}


def register_table(class_name: str, table: str) -> None:
    _tables[class_name] = table


def table_for(class_name: str) -> str:
    """Table name of a registered record class, else the lower-cased name."""
    return _tables.get(class_name, class_name.lower())


def unwrap_optional(annotation: Any) -> Any:
    """Return X for Optional[X] / X | None, else the annotation itself."""
    if get_origin(annotation) in (Union, types.UnionType):
        args = [a for a in get_args(annotation) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation


def resolve_sql_type(name: str, annotation: Any, options: ColumnOptions) -> str:
    annotation = unwrap_optional(annotation)
    if annotation is str:
        return f"VARCHAR({options.size})" if options.size else "TEXT"
    if options.auto and annotation in (Integer, int):
        return "SERIAL"
    try:
        return SQL_TYPES[annotation]
    except (KeyError, TypeError):
        raise ModelDefinitionError(
            f"field {name!r} has unsupported type {annotation!r}"
        ) from None


def parse_foreign_key(reference: str) -> Tuple[str, str]:
    """Split ``"User.id"`` into ``("User", "id")``."""
    model_name, sep, field_name = reference.partition(".")
    if not sep or not model_name or not field_name:
        raise ModelDefinitionError(
            f"foreign_key must look like 'Model.field', got {reference!r}"
        )
    return model_name, field_name
