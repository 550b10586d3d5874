"""
SQL statement builders.

Each builder is a pure function returning ``(sql, params)`` with %s
placeholders, ready for psycopg. Builders take the record's ``ModelMeta``
(table name, primary key, column names) and never touch a connection.
"""

from typing import TYPE_CHECKING, Any, Iterable, List, Sequence, Tuple

from rowmodel.exceptions import EmptyKwargsError, UnknownFieldError
from rowmodel.query.kwargs import Kwargs

if TYPE_CHECKING:
    from rowmodel.model.fields import ModelMeta

Statement = Tuple[str, tuple]


def quote(identifier: str) -> str:
    """Quote an identifier for PostgreSQL."""
    return '"' + identifier.replace('"', '""') + '"'


def qualified(table: str, column: str) -> str:
    return f"{quote(table)}.{quote(column)}"


def _check_columns(meta: "ModelMeta", names: Iterable[str]) -> None:
    unknown = [name for name in names if name not in meta.column_names]
    if unknown:
        raise UnknownFieldError(
            f"{meta.table} has no field(s) {', '.join(unknown)}"
        )


def _condition(column_sql: str, value: Any, params: List[Any]) -> str:
    if value is None:
        return f"{column_sql} IS NULL"
    params.append(value)
    return f"{column_sql} = %s"


def where(meta: "ModelMeta", kw: Kwargs | None) -> Tuple[List[str], str, List[Any]]:
    """
    Compile a Kwargs filter into JOIN clauses, a WHERE predicate and params.

    Plain keys must be columns of the record. Keys of the form
    ``fk__table__column`` join ``table`` on ``table.fk = <record pk>`` and
    compare ``table.column``. Each related table is joined once.
    """
    joins: List[str] = []
    joined: set[str] = set()
    conditions: List[str] = []
    params: List[Any] = []

    for arg in kw or ():
        if arg.key in meta.column_names:
            conditions.append(_condition(qualified(meta.table, arg.key), arg.value, params))
            continue

        relation = arg.relation
        if relation is None:
            raise UnknownFieldError(f"{meta.table} has no field {arg.key}")
        foreign_key, table, column = relation
        if table not in joined:
            joined.add(table)
            joins.append(
                f"INNER JOIN {quote(table)} ON "
                f"{qualified(meta.table, meta.primary_key)} = {qualified(table, foreign_key)}"
            )
        conditions.append(_condition(qualified(table, column), arg.value, params))

    operator = kw.operator.sql if kw is not None else " AND "
    return joins, operator.join(conditions), params


def select(meta: "ModelMeta", kw: Kwargs | None = None, limit: int | None = None) -> Statement:
    """SELECT the record's rows matching ``kw`` (all rows when empty)."""
    joins, predicate, params = where(meta, kw)
    table = quote(meta.table)
    if joins:
        query = f"SELECT DISTINCT {table}.* FROM {table} " + " ".join(joins)
    else:
        query = f"SELECT * FROM {table}"
    if predicate:
        query += f" WHERE {predicate}"
    if limit is not None:
        query += " LIMIT %s"
        params.append(limit)
    return query, tuple(params)


def count(meta: "ModelMeta", kw: Kwargs | None = None) -> Statement:
    joins, predicate, params = where(meta, kw)
    table = quote(meta.table)
    if joins:
        query = (
            f"SELECT COUNT(DISTINCT {qualified(meta.table, meta.primary_key)}) AS count "
            f"FROM {table} " + " ".join(joins)
        )
    else:
        query = f"SELECT COUNT(*) AS count FROM {table}"
    if predicate:
        query += f" WHERE {predicate}"
    return query, tuple(params)


def insert(meta: "ModelMeta", values: Sequence[Tuple[str, Any]]) -> Statement:
    """INSERT one row and return it; no values inserts the column defaults."""
    _check_columns(meta, [name for name, _ in values])
    table = quote(meta.table)
    if not values:
        return f"INSERT INTO {table} DEFAULT VALUES RETURNING *", ()

    columns = ", ".join(quote(name) for name, _ in values)
    placeholders = ", ".join(["%s"] * len(values))
    return (
        f"INSERT INTO {table} ({columns}) VALUES ({placeholders}) RETURNING *",
        tuple(value for _, value in values),
    )


def update(meta: "ModelMeta", values: Sequence[Tuple[str, Any]], key: Any) -> Statement:
    """UPDATE the given columns of the row whose primary key is ``key``."""
    if not values:
        raise EmptyKwargsError(f"nothing to update on {meta.table}")
    _check_columns(meta, [name for name, _ in values])
    assignments = ", ".join(f"{quote(name)} = %s" for name, _ in values)
    return (
        f"UPDATE {quote(meta.table)} SET {assignments} WHERE {quote(meta.primary_key)} = %s",
        tuple(value for _, value in values) + (key,),
    )


def exists(meta: "ModelMeta", key: Any) -> Statement:
    return (
        f"SELECT EXISTS (SELECT 1 FROM {quote(meta.table)} "
        f"WHERE {quote(meta.primary_key)} = %s) AS found",
        (key,),
    )


def delete(meta: "ModelMeta", key: Any) -> Statement:
    return (
        f"DELETE FROM {quote(meta.table)} WHERE {quote(meta.primary_key)} = %s",
        (key,),
    )


def delete_many(meta: "ModelMeta", keys: Sequence[Any]) -> Statement:
    return (
        f"DELETE FROM {quote(meta.table)} WHERE {quote(meta.primary_key)} = ANY(%s)",
        (list(keys),),
    )
