"""Immutable request builders.

Builders are frozen dataclasses. Every refinement returns a new builder
through :func:`dataclasses.replace`, so a partly configured builder can be
kept as a template and reused, even from concurrent tasks::

    base = client.topics.list(ForumId.fid(-7)).order("postdate")
    first, second = await asyncio.gather(base.send(), base.page(2).send())

Invalid refinements raise :class:`~ngakit.exceptions.BuilderError`
immediately; :meth:`RequestBuilder.build` re-checks required inputs.
"""

from __future__ import annotations

import dataclasses
import enum
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Generic, Optional, TypeVar

from ngakit.exceptions import BuilderError
from ngakit.request.descriptor import RequestDescriptor

if TYPE_CHECKING:
    from ngakit.client.executor import Executor

T = TypeVar("T")
B = TypeVar("B", bound="RequestBuilder[Any]")
E = TypeVar("E", bound=enum.Enum)


@dataclass(frozen=True)
class RequestBuilder(Generic[T]):
    """Base class of every operation builder.

    Subclasses add their inputs as dataclass fields and implement
    :meth:`build`.
    """

    executor: Executor = field(repr=False, compare=False)

    def build(self) -> RequestDescriptor:
        raise NotImplementedError

    async def send(self) -> T:
        """Validate, execute and decode the request.

        Raises:
            BuilderError: If a required input is missing or invalid.
            AuthRequiredError: If the operation needs a credential.
            NetworkError: On transport failure.
            ApiError: If the forum reports an error.
            DecodeError: If the response cannot be decoded.
        """
        return await self.executor.send(self.build())

    def _with(self: B, **changes: Any) -> B:
        return dataclasses.replace(self, **changes)


@dataclass(frozen=True)
class FixedRequest(RequestBuilder[T]):
    """A builder with nothing left to refine."""

    descriptor: Optional[RequestDescriptor] = None

    def build(self) -> RequestDescriptor:
        if self.descriptor is None:
            raise BuilderError("request has no descriptor")
        return self.descriptor


def check_page(page: int) -> int:
    if isinstance(page, bool) or not isinstance(page, int):
        raise BuilderError(f"page must be an integer, got {page!r}")
    if page < 1:
        raise BuilderError(f"page must be >= 1, got {page}")
    return page


def check_id(value: object, what: str) -> str:
    text = str(value).strip() if value is not None else ""
    if not text:
        raise BuilderError(f"{what} is required")
    return text


def check_text(value: Optional[str], what: str) -> str:
    if value is None or not value.strip():
        raise BuilderError(f"{what} must not be empty")
    return value


def coerce_enum(enum_cls: type[E], value: object, what: str) -> E:
    """Accept an enum member, its value, or its name; reject anything else."""
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        for member in enum_cls:
            if value == member.value or value.upper() == member.name:
                return member
    allowed = ", ".join(str(member.value) for member in enum_cls)
    raise BuilderError(f"unsupported {what} {value!r}; expected one of: {allowed}")


def pairs(*items: tuple[str, object]) -> tuple[tuple[str, str], ...]:
    """Ordered parameter pairs with values rendered as strings; ``None`` becomes ``""``."""
    return tuple((key, "" if value is None else str(value)) for key, value in items)
