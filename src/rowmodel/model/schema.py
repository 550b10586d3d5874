import math
from typing import Any

from rowmodel.model.fields import ColumnSpec, ModelMeta, parse_foreign_key, table_for
from rowmodel.query.statements import quote

NOW_DEFAULTS = {
    "DATE": "CURRENT_DATE",
    "TIMESTAMP": "CURRENT_TIMESTAMP",
}


def literal(value: Any) -> str:
    """Render a Python value as a SQL literal for a DEFAULT clause."""
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, float) and not math.isfinite(value):
        if math.isnan(value):
            return "'NaN'::float8"
        return "'Infinity'::float8" if value > 0 else "'-Infinity'::float8"
    if isinstance(value, (int, float)):
        return repr(value)
    return "'" + str(value).replace("'", "''") + "'"


def column_definition(col: ColumnSpec) -> str:
    parts = [quote(col.name), col.sql_type]
    options = col.options

    if col.is_primary_key:
        parts.append("PRIMARY KEY")
    elif not col.nullable:
        parts.append("NOT NULL")
    if options.unique and not col.is_primary_key:
        parts.append("UNIQUE")

    if options.default is not None:
        if options.default == "now" and col.sql_type in NOW_DEFAULTS:
            parts.append(f"DEFAULT {NOW_DEFAULTS[col.sql_type]}")
        else:
            parts.append(f"DEFAULT {literal(options.default)}")

    if options.foreign_key:
        model_name, field_name = parse_foreign_key(options.foreign_key)
        parts.append(f"REFERENCES {quote(table_for(model_name))}({quote(field_name)})")

    return " ".join(parts)


def create_table(meta: ModelMeta) -> str:
    """
    Build the CREATE TABLE IF NOT EXISTS statement for a record.

    Example:
        CREATE TABLE IF NOT EXISTS "user" ("id" SERIAL PRIMARY KEY, "name" VARCHAR(50) NOT NULL UNIQUE)
    """
    columns = ", ".join(column_definition(c) for c in meta.columns)
    return f"CREATE TABLE IF NOT EXISTS {quote(meta.table)} ({columns})"
