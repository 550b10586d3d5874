from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Iterator, List

# Separator for related-table terms: ``owner__product__is_sel``
RELATION_SEPARATOR = "__"


class Operator(Enum):
    """Combinator joining the terms of a filter."""

    AND = "AND"
    OR = "OR"

    @property
    def sql(self) -> str:
        return f" {self.value} "


@dataclass(frozen=True)
class Arg:
    """A single ``key = value`` equality term."""

    key: str
    value: Any

    @property
    def relation(self) -> tuple[str, str, str] | None:
        """
        Split a related-table key into (foreign_key, table, column).

        Returns None for plain column keys.
        """
        parts = self.key.split(RELATION_SEPARATOR)
        if len(parts) == 3 and all(parts):
            return parts[0], parts[1], parts[2]
        return None


@dataclass(frozen=True)
class Kwargs:
    """
    Ordered equality terms plus the combinator that joins them.

    Build one with kwargs(); terms are ANDed unless switched with or_().
    """

    operator: Operator = Operator.AND
    args: tuple[Arg, ...] = field(default_factory=tuple)

    def or_(self) -> "Kwargs":
        """Return a copy whose terms are joined with OR."""
        return replace(self, operator=Operator.OR)

    def and_(self) -> "Kwargs":
        """Return a copy whose terms are joined with AND."""
        return replace(self, operator=Operator.AND)

    def keys(self) -> List[str]:
        return [arg.key for arg in self.args]

    def values(self) -> List[Any]:
        return [arg.value for arg in self.args]

    def __iter__(self) -> Iterator[Arg]:
        return iter(self.args)

    def __len__(self) -> int:
        return len(self.args)


def kwargs(**fields: Any) -> Kwargs:
    """
    Build an AND filter from keyword arguments, keeping their order.

    Usage:
        kwargs(email="joe@example.com", password="secret")
        kwargs(name="joe", email="joe@example.com").or_()
        kwargs(owner__product__is_sel=True)
    """
    return Kwargs(
        operator=Operator.AND,
        args=tuple(Arg(key, value) for key, value in fields.items()),
    )
