# telnyx_outbound/bindings.py
"""
Deferred Parameter Bindings

Activity properties are configured before the workflow runs, but their values
are often only known at execution time. A `Binding` wraps one of five forms
and produces the concrete value when the activity executes:

    - a literal value
    - fn() -> value
    - fn() -> awaitable value
    - fn(context) -> value
    - fn(context) -> awaitable value

The same mechanism backs every property of every activity in this package.
"""

import asyncio
import inspect
from collections.abc import Awaitable, Callable, Mapping
from enum import Enum
from typing import Any, Generic, TypeVar, Union

from loguru import logger

from .context import ExecutionContext

T = TypeVar("T")

Bindable = Union[
    T,
    Callable[[], T],
    Callable[[], Awaitable[T]],
    Callable[[ExecutionContext], T],
    Callable[[ExecutionContext], Awaitable[T]],
]


class BindingKind(str, Enum):
    CONSTANT = "constant"
    CALLABLE = "callable"
    CALLABLE_ASYNC = "callable_async"
    CONTEXT = "context"
    CONTEXT_ASYNC = "context_async"


def _takes_context(fn: Callable) -> bool:
    """Return True if `fn` expects the execution context as its single argument."""
    try:
        signature = inspect.signature(fn)
    except (TypeError, ValueError):
        # Builtins without a signature are treated as zero-argument callables.
        return False

    positional = [
        p
        for p in signature.parameters.values()
        if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD) and p.default is p.empty
    ]
    if len(positional) > 1:
        raise TypeError(f"Binding callables take at most one argument, got {signature}")
    if positional:
        return True
    return any(p.kind is p.VAR_POSITIONAL for p in signature.parameters.values())


class Binding(Generic[T]):
    """A property value computed when the activity executes."""

    __slots__ = ("kind", "_source")

    def __init__(self, kind: BindingKind, source: Any):
        self.kind = kind
        self._source = source

    @classmethod
    def constant(cls, value: T) -> "Binding[T]":
        """Bind a literal, even if the literal itself is callable."""
        return cls(BindingKind.CONSTANT, value)

    @classmethod
    def of(cls, value: "Bindable[T] | Binding[T]") -> "Binding[T]":
        """
        Classify `value` into one of the five binding forms.

        Args:
            value: A literal, a callable, or an existing Binding.

        Returns:
            Binding: `value` unchanged if it already is a Binding.
        """
        if isinstance(value, Binding):
            return value
        if not callable(value):
            return cls.constant(value)

        is_async = inspect.iscoroutinefunction(value)
        if _takes_context(value):
            return cls(BindingKind.CONTEXT_ASYNC if is_async else BindingKind.CONTEXT, value)
        return cls(BindingKind.CALLABLE_ASYNC if is_async else BindingKind.CALLABLE, value)

    async def resolve(self, context: ExecutionContext) -> T:
        """
        Produce the bound value for this execution.

        Exceptions raised by the bound callable propagate unchanged.
        """
        if self.kind is BindingKind.CONSTANT:
            return self._source

        if self.kind in (BindingKind.CONTEXT, BindingKind.CONTEXT_ASYNC):
            result = self._source(context)
        else:
            result = self._source()

        # Plain callables may still hand back an awaitable (e.g. a lambda returning a coroutine).
        if inspect.isawaitable(result):
            result = await result
        return result

    def __repr__(self) -> str:
        return f"Binding({self.kind.value}, {self._source!r})"


async def _resolve_concurrently(
    bindings: Mapping[str, Binding[Any]], names: list[str], context: ExecutionContext
) -> list[Any]:
    """Resolve bindings side by side; if one fails the others are cancelled."""
    tasks = [asyncio.ensure_future(bindings[name].resolve(context)) for name in names]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


async def resolve_bindings(
    bindings: Mapping[str, Binding[Any]], context: ExecutionContext
) -> dict[str, Any]:
    """
    Resolve every binding against `context`.

    Bindings are independent of each other, so they are resolved concurrently.
    The first failure cancels the remaining resolutions, and the whole
    resolution is abandoned if the context's cancellation signal fires.

    Args:
        bindings: Property name to binding.
        context: The live execution context.

    Returns:
        dict[str, Any]: Property name to resolved value.
    """
    names = list(bindings)
    values = await context.guard(_resolve_concurrently(bindings, names, context))
    logger.debug(f"Resolved {len(names)} bindings for {context.workflow_instance_id}")
    return dict(zip(names, values))
