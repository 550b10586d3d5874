"""
Query

Filter expressions (Kwargs) and the SQL statement builders that compile them.
"""

from rowmodel.query.kwargs import Arg, Kwargs, Operator, kwargs

__all__ = ["Arg", "Kwargs", "Operator", "kwargs"]
