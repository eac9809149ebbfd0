"""Formatter protocol and the name -> formatter registry."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, TypeVar, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from athena_tool.core.models import ResultSet


@runtime_checkable
class Formatter(Protocol):
    """Renders a ResultSet as output lines (without trailing newlines)."""

    def format(self, result: ResultSet) -> Iterator[str]: ...


F = TypeVar("F", bound=type)


class FormatterRegistry:
    def __init__(self) -> None:
        self._formatters: dict[str, type[Formatter]] = {}

    def register(self, name: str) -> Callable[[F], F]:
        """Class decorator that makes a formatter available under `name`."""

        def decorator(formatter_class: F) -> F:
            self._formatters[name] = formatter_class
            return formatter_class

        return decorator

    def get(self, name: str, **options: object) -> Formatter:
        try:
            formatter_class = self._formatters[name]
        except KeyError:
            msg = f"Unknown format {name!r}. Available: {', '.join(self.available)}"
            raise KeyError(msg) from None
        return formatter_class(**options)

    @property
    def available(self) -> list[str]:
        return sorted(self._formatters)


registry = FormatterRegistry()
