"""
Chainable query features: search, filter, sort and paginate.

``QueryFeatures`` wraps a base ``SELECT`` over one SQLModel table and
translates raw request parameters into SQL predicates. Every stage returns a
new instance, so a half-built pipeline can be shared safely between tasks.

Filter parameters follow the ``field=value`` / ``field[op]=value`` convention:

>>> params = {"keyword": "async", "createdAt[gte]": "2026-01-01", "page": "2"}
>>> features = QueryFeatures(PostDB, params).search().filter().paginate(15)

Predicates and pagination are stored separately; ``count`` only ever sees
the predicates, so it reports the filtered total no matter when it is called.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from datetime import datetime
from operator import ge, gt, le, lt
from re import compile as re_compile
from typing import Any, Self
from uuid import UUID

from pydantic.alias_generators import to_snake
from sqlalchemy import JSON, Column, Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import ColumnElement
from sqlmodel import SQLModel

from blogcms.errors.validation import ValidationError

type ParamValue = str | list[str]
type QueryParams = Mapping[str, ParamValue]

RESERVED_PARAMS: frozenset[str] = frozenset({"keyword", "page", "limit", "sort"})

RANGE_OPERATORS = {"gt": gt, "gte": ge, "lt": lt, "lte": le}

_FIELD_OPERATOR = re_compile(r"^(?P<field>\w+)\[(?P<op>\w+)\]$")
_LIKE_ESCAPE = "\\"

# OFFSET stays within a signed 64-bit integer for page sizes below 2**32
MAX_PAGE = 2**31 - 1


def collect_params(items: Iterable[tuple[str, str]]) -> dict[str, ParamValue]:
    """
    Fold repeated query-string items into a parameter mapping.

    Args:
        items: ``(key, value)`` pairs, e.g. ``request.query_params.multi_items()``.

    Returns:
        dict[str, ParamValue]: Single values as strings, repeated keys as lists.
    """
    params: dict[str, ParamValue] = {}
    for key, value in items:
        current = params.get(key)
        if current is None:
            params[key] = value
        elif isinstance(current, list):
            current.append(value)
        else:
            params[key] = [current, value]
    return params


def _escape_like(value: str) -> str:
    return (
        value.replace(_LIKE_ESCAPE, _LIKE_ESCAPE * 2)
        .replace("%", f"{_LIKE_ESCAPE}%")
        .replace("_", f"{_LIKE_ESCAPE}_")
    )


def _coerce(column: Column, raw: str) -> Any:
    """Convert a raw query-string value to the Python type of ``column``."""
    try:
        python_type = column.type.python_type
    except NotImplementedError:
        return raw

    try:
        if python_type is bool:
            lowered = raw.strip().lower()
            if lowered in {"true", "1", "yes"}:
                return True
            if lowered in {"false", "0", "no"}:
                return False
            raise ValueError(raw)
        if python_type is datetime:
            return datetime.fromisoformat(raw)
        if python_type is UUID:
            return UUID(raw)
        return python_type(raw)
    except (TypeError, ValueError) as e:
        mssg = f"Invalid value '{raw}' for field '{column.name}'"
        raise ValidationError(detail=mssg) from e


@dataclass(frozen=True)
class QueryFeatures[ModelT: SQLModel]:
    """
    Immutable search/filter/sort/paginate pipeline over a SQLModel table.

    Attributes:
        model: The SQLModel table model being queried.
        params: Raw request parameters (string or list of strings per key).
        search_field: Field matched by the ``keyword`` parameter.
        aliases: Public parameter names mapped to column names.
        predicates: Conjunctive WHERE conditions accumulated so far.
        order_by: ORDER BY clauses set by ``sort``.
        offset: Rows skipped by ``paginate``.
        page_size: Row limit set by ``paginate`` (None means unpaginated).
    """

    model: type[ModelT]
    params: QueryParams = field(default_factory=dict)
    search_field: str = "title"
    aliases: Mapping[str, str] = field(default_factory=dict)
    predicates: tuple[ColumnElement[bool], ...] = ()
    order_by: tuple[Any, ...] = ()
    offset: int = 0
    page_size: int | None = None

    def _single(self, name: str) -> str | None:
        value = self.params.get(name)
        if isinstance(value, list):
            return value[0] if value else None
        return value

    def _column(self, name: str) -> Column:
        key = self.aliases.get(name) or to_snake(name)
        columns = self.model.__table__.columns  # pyrefly: ignore [missing-attribute]
        if key not in columns:
            mssg = f"Unknown field '{name}'"
            raise ValidationError(detail=mssg)
        column = columns[key]
        if isinstance(column.type, JSON):
            mssg = f"Field '{name}' cannot be used for filtering or sorting"
            raise ValidationError(detail=mssg)
        return column

    @property
    def page(self) -> int:
        """Current page number from the ``page`` parameter (default 1, clamped to ``1..MAX_PAGE``)."""
        raw = self._single("page")
        try:
            page = int(raw) if raw is not None else 1
        except ValueError:
            page = 1
        return min(max(page, 1), MAX_PAGE)

    def search(self) -> Self:
        """Restrict to rows whose search field contains ``keyword`` (case-insensitive)."""
        keyword = self._single("keyword")
        if keyword is None or not keyword.strip():
            return self

        column = self._column(self.search_field)
        pattern = f"%{_escape_like(keyword.strip())}%"
        return replace(
            self,
            predicates=(*self.predicates, column.ilike(pattern, escape=_LIKE_ESCAPE)),
        )

    def filter(self) -> Self:
        """
        Add equality and range predicates from every non-reserved parameter.

        ``field=value`` becomes equality (``IN`` for repeated values) and
        ``field[gt|gte|lt|lte]=value`` becomes a range condition.

        Raises:
            ValidationError: On unknown fields, unsupported operators or
                values that do not fit the column type.
        """
        predicates: list[ColumnElement[bool]] = []

        for key, value in self.params.items():
            if key in RESERVED_PARAMS:
                continue

            name, op = key, None
            if match := _FIELD_OPERATOR.match(key):
                name, op = match["field"], match["op"]

            column = self._column(name)
            raw_values = value if isinstance(value, list) else [value]

            if op is None:
                values = [_coerce(column, raw) for raw in raw_values]
                predicates.append(column == values[0] if len(values) == 1 else column.in_(values))
                continue

            compare = RANGE_OPERATORS.get(op)
            if compare is None:
                mssg = f"Unsupported operator '{op}' for field '{name}'"
                raise ValidationError(detail=mssg)
            predicates.extend(compare(column, _coerce(column, raw)) for raw in raw_values)

        return replace(self, predicates=(*self.predicates, *predicates))

    def sort(self, default: str | None = None) -> Self:
        """
        Order by the ``sort`` parameter, or ``default`` when it is absent.

        Fields are comma separated; a leading ``-`` sorts descending. The
        primary key is always appended so pages never overlap on ties.
        """
        ordering = self._single("sort") or default
        order: list[Any] = []

        for part in (ordering or "").split(","):
            name = part.strip()
            if not name:
                continue
            column = self._column(name.lstrip("-+"))
            order.append(column.desc() if name.startswith("-") else column.asc())

        primary_key = self.model.__table__.primary_key.columns  # pyrefly: ignore [missing-attribute]
        order.extend(column.asc() for column in primary_key)
        return replace(self, order_by=tuple(order))

    def paginate(self, page_size: int) -> Self:
        """
        Limit to one page of ``page_size`` rows at the current page.

        Raises:
            ValidationError: If ``page_size`` is not positive.
        """
        if page_size <= 0:
            mssg = "Page size must be a positive integer"
            raise ValidationError(detail=mssg)
        return replace(self, page_size=page_size, offset=(self.page - 1) * page_size)

    @property
    def statement(self) -> Select:
        """The fully composed SELECT statement."""
        statement = select(self.model).where(*self.predicates)
        if self.order_by:
            statement = statement.order_by(*self.order_by)
        if self.page_size is not None:
            statement = statement.offset(self.offset).limit(self.page_size)
        return statement

    async def count(self, session: AsyncSession) -> int:
        """Count rows matching the search and filter predicates (pagination ignored)."""
        statement = select(func.count()).select_from(self.model).where(*self.predicates)
        result = await session.execute(statement)
        return result.scalar_one()

    async def execute(self, session: AsyncSession) -> list[ModelT]:
        """Run the composed statement and return the matching rows."""
        result = await session.execute(self.statement)
        return list(result.scalars().all())
