"""
The Model base class.

Subclassing Model registers a record type: its annotated fields become the
columns of one table, the class becomes a dataclass, and it gains async
operations that forward the record's field-name/value pairs to the database.

    class User(Model):
        id: Serial = column(primary_key=True)
        name: str = column(size=50, unique=True, null=False)
        role: str = column(default="user")

    await migrate([User], conn)
    user = await User(name="joe").save(conn)
    same = await User.get(kwargs(name="joe"), conn)
    admins = await User.filter(kwargs(role="admin"), conn)

Every operation takes an optional caller-owned psycopg AsyncConnection; see
rowmodel.db for what happens without one.
"""

import dataclasses
import inspect
import logging
from typing import Any, ClassVar, Iterable, List, Optional, Tuple, Type, TypeVar, get_origin, get_type_hints

import psycopg

from rowmodel import db
from rowmodel.exceptions import EmptyKwargsError, MissingPrimaryKeyError, ModelDefinitionError
from rowmodel.model.fields import (
    COLUMN_METADATA,
    ColumnOptions,
    ColumnSpec,
    ModelMeta,
    column,
    parse_foreign_key,
    register_table,
    resolve_sql_type,
)
from rowmodel.model.schema import create_table
from rowmodel.query import statements
from rowmodel.query.kwargs import Kwargs

logger = logging.getLogger(__name__)

M = TypeVar("M", bound="Model")

Connection = Optional[psycopg.AsyncConnection]


def _is_classvar(annotation: Any) -> bool:
    return annotation is ClassVar or get_origin(annotation) is ClassVar


def _prepare_fields(cls: type, hints: dict) -> None:
    """Give every own field a column() default so the dataclass needs no arguments."""
    for name in inspect.get_annotations(cls):
        if _is_classvar(hints.get(name)):
            continue
        if hasattr(Model, name):
            raise ModelDefinitionError(
                f"{cls.__name__}.{name} would shadow Model.{name}; rename the field"
            )
        value = cls.__dict__.get(name, dataclasses.MISSING)
        if value is dataclasses.MISSING:
            setattr(cls, name, column())
        elif not isinstance(value, dataclasses.Field):
            # A plain assignment is the SQL default: ``role: str = "user"``
            setattr(cls, name, column(default=value))


def _build_meta(cls: type, hints: dict) -> ModelMeta:
    columns: List[ColumnSpec] = []
    for f in dataclasses.fields(cls):
        options = f.metadata.get(COLUMN_METADATA, ColumnOptions())
        if options.foreign_key:
            parse_foreign_key(options.foreign_key)
        columns.append(
            ColumnSpec(
                name=f.name,
                sql_type=resolve_sql_type(f.name, hints[f.name], options),
                options=options,
            )
        )

    keys = [c.name for c in columns if c.is_primary_key]
    if len(keys) > 1:
        raise ModelDefinitionError(f"{cls.__name__} declares more than one primary key: {keys}")
    if not keys:
        # Fall back to a field named ``id``
        for i, c in enumerate(columns):
            if c.name == "id":
                columns[i] = dataclasses.replace(
                    c, options=dataclasses.replace(c.options, primary_key=True)
                )
                keys = ["id"]
                break
        else:
            raise ModelDefinitionError(
                f"{cls.__name__} has no primary key; mark a field primary_key=True or name it 'id'"
            )

    table = cls.__dict__.get("__tablename__") or cls.__name__.lower()
    return ModelMeta(table=table, columns=tuple(columns), primary_key=keys[0])


class Model:
    """
    Base class for records mapped onto a single table.

    Set ``__tablename__`` to override the table name (class name lower-cased
    by default). Set ``__abstract__ = True`` on an intermediate class to share
    fields without mapping that class to a table.
    """

    __meta__: ClassVar[ModelMeta]
    __tablename__: ClassVar[Optional[str]] = None
    __abstract__: ClassVar[bool] = False

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        try:
            hints = get_type_hints(cls)
        except NameError as exc:
            raise ModelDefinitionError(f"cannot resolve annotations of {cls.__name__}: {exc}") from exc

        _prepare_fields(cls, hints)
        dataclasses.dataclass(cls)

        if cls.__dict__.get("__abstract__", False):
            return

        cls.__meta__ = _build_meta(cls, hints)
        register_table(cls.__name__, cls.__meta__.table)

    # =========================================================================
    # Field access
    # =========================================================================

    @classmethod
    def from_row(cls: Type[M], row: dict) -> M:
        """Build a record from a dict row, ignoring columns it does not declare."""
        names = cls.__meta__.column_names
        return cls(**{k: v for k, v in row.items() if k in names})

    def values(self) -> List[Tuple[str, Any]]:
        """Field-name/value pairs in declaration order."""
        return [(name, getattr(self, name)) for name in self.__meta__.column_names]

    def to_dict(self) -> dict:
        return dict(self.values())

    @property
    def pk(self) -> Any:
        return getattr(self, self.__meta__.primary_key)

    def _require_pk(self) -> Any:
        if self.pk is None:
            raise MissingPrimaryKeyError(
                f"{type(self).__name__}.{self.__meta__.primary_key} is not set"
            )
        return self.pk

    def _refresh(self, row: dict) -> None:
        names = self.__meta__.column_names
        for key, value in row.items():
            if key in names:
                setattr(self, key, value)

    # =========================================================================
    # Schema
    # =========================================================================

    @classmethod
    def schema(cls) -> str:
        """The CREATE TABLE statement for this record."""
        return create_table(cls.__meta__)

    @classmethod
    async def migrate(cls, conn: Connection = None) -> None:
        """Create the table if it does not exist yet."""
        logger.info("Creating table %s", cls.__meta__.table)
        await db.execute(cls.schema(), conn=conn)

    # =========================================================================
    # Inserts
    # =========================================================================

    async def save(self: M, conn: Connection = None) -> M:
        """
        Insert this record.

        Fields left as None are not sent, so auto keys and SQL defaults apply.
        The record is refreshed from the inserted row and returned.
        """
        values = [(name, value) for name, value in self.values() if value is not None]
        query, params = statements.insert(self.__meta__, values)
        row = await db.fetch_one(query, params, conn=conn)
        self._refresh(row)
        return self

    @classmethod
    async def create(cls: Type[M], kw: Kwargs, conn: Connection = None) -> M:
        """Insert a row from the ``kw`` terms and return it as a record."""
        if not kw:
            raise EmptyKwargsError(f"nothing to insert into {cls.__meta__.table}")
        query, params = statements.insert(cls.__meta__, [(arg.key, arg.value) for arg in kw])
        row = await db.fetch_one(query, params, conn=conn)
        return cls.from_row(row)

    # =========================================================================
    # Queries
    # =========================================================================

    @classmethod
    async def get(cls: Type[M], kw: Kwargs, conn: Connection = None) -> Optional[M]:
        """First record matching ``kw``, or None."""
        query, params = statements.select(cls.__meta__, kw, limit=1)
        row = await db.fetch_one(query, params, conn=conn)
        return cls.from_row(row) if row else None

    @classmethod
    async def filter(cls: Type[M], kw: Kwargs, conn: Connection = None) -> List[M]:
        """All records matching ``kw``, its terms joined by ``kw.operator``."""
        query, params = statements.select(cls.__meta__, kw)
        rows = await db.fetch_all(query, params, conn=conn)
        return [cls.from_row(row) for row in rows]

    @classmethod
    async def all(cls: Type[M], conn: Connection = None) -> List[M]:
        query, params = statements.select(cls.__meta__)
        rows = await db.fetch_all(query, params, conn=conn)
        return [cls.from_row(row) for row in rows]

    @classmethod
    async def count(cls, kw: Optional[Kwargs] = None, conn: Connection = None) -> int:
        query, params = statements.count(cls.__meta__, kw)
        row = await db.fetch_one(query, params, conn=conn)
        return row["count"] if row else 0

    # =========================================================================
    # Updates and deletes
    # =========================================================================

    async def update(self, conn: Connection = None) -> bool:
        """
        Write every non-key field of this record; True if a row changed.

        A record with no columns besides its key has nothing to write, so this
        only reports whether its row exists.
        """
        key = self._require_pk()
        values = [(name, value) for name, value in self.values() if name != self.__meta__.primary_key]
        if not values:
            query, params = statements.exists(self.__meta__, key)
            row = await db.fetch_one(query, params, conn=conn)
            return bool(row and row["found"])
        query, params = statements.update(self.__meta__, values, key)
        return await db.execute(query, params, conn=conn) > 0

    @classmethod
    async def set(cls, key: Any, kw: Kwargs, conn: Connection = None) -> bool:
        """Update the ``kw`` fields of the row whose primary key is ``key``."""
        query, params = statements.update(cls.__meta__, [(arg.key, arg.value) for arg in kw], key)
        return await db.execute(query, params, conn=conn) > 0

    async def delete(self, conn: Connection = None) -> bool:
        key = self._require_pk()
        query, params = statements.delete(self.__meta__, key)
        return await db.execute(query, params, conn=conn) > 0

    @classmethod
    async def delete_many(cls, records: Iterable["Model"], conn: Connection = None) -> int:
        """Delete the given records by primary key; returns rows deleted."""
        keys = [record._require_pk() for record in records]
        if not keys:
            return 0
        query, params = statements.delete_many(cls.__meta__, keys)
        return await db.execute(query, params, conn=conn)


async def migrate(models: Iterable[Type[Model]], conn: Connection = None) -> None:
    """Create the tables of ``models`` in order; list referenced tables first."""
    for model in models:
        await model.migrate(conn)
