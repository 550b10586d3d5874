"""
Model

Record classes, their column types and the tables they map onto.
"""

from rowmodel.model.base import Model, migrate
from rowmodel.model.fields import Boolean, Date, DateTime, Float, Integer, Serial, Text, column

__all__ = [
    "Boolean",
    "Date",
    "DateTime",
    "Float",
    "Integer",
    "Model",
    "Serial",
    "Text",
    "column",
    "migrate",
]
