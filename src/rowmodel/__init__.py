"""
rowmodel: declarative records over PostgreSQL.

    from rowmodel import Model, Serial, column, kwargs, migrate

    class User(Model):
        id: Serial = column(primary_key=True)
        email: str = column(size=255, unique=True)
        password: str = column(size=255, null=False)

    await migrate([User], conn)
    await User.create(kwargs(email="joe@example.com", password="secret"), conn)
    user = await User.get(kwargs(email="joe@example.com"), conn)
"""

from rowmodel.exceptions import (
    ConfigurationError,
    EmptyKwargsError,
    MissingPrimaryKeyError,
    ModelDefinitionError,
    RowModelError,
    UnknownFieldError,
)
from rowmodel.model import (
    Boolean,
    Date,
    DateTime,
    Float,
    Integer,
    Model,
    Serial,
    Text,
    column,
    migrate,
)
from rowmodel.query import Arg, Kwargs, Operator, kwargs

__all__ = [
    "Arg",
    "Boolean",
    "ConfigurationError",
    "Date",
    "DateTime",
    "EmptyKwargsError",
    "Float",
    "Integer",
    "Kwargs",
    "MissingPrimaryKeyError",
    "Model",
    "ModelDefinitionError",
    "Operator",
    "RowModelError",
    "Serial",
    "Text",
    "UnknownFieldError",
    "column",
    "kwargs",
    "migrate",
]
