# telnyx_outbound/context.py
"""
Activity Execution Context

The ambient state an activity sees while it runs: the workflow instance it
belongs to, workflow variables, the inbound call the instance is servicing
(if any) and the cancellation signal supplied by the host engine.
"""

import asyncio
from collections.abc import Awaitable
from dataclasses import dataclass, field
from typing import Any, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class InboundCall:
    """
    The call that triggered the running workflow instance.

    Attributes:
        call_control_id: Telnyx handle of the inbound call leg.
        from_number: The 'From' number of the inbound call.
        to_number: The 'To' number of the inbound call.
        client_state: Client state carried on the inbound call's webhooks.
    """

    call_control_id: str
    from_number: str | None = None
    to_number: str | None = None
    client_state: str | None = None


@dataclass
class ExecutionContext:
    """
    Execution context passed to activities and to context-aware bindings.

    Attributes:
        workflow_instance_id: ID of the workflow instance being executed.
        activity_id: ID of the activity being executed.
        variables: Workflow variables visible to the activity.
        inbound_call: The call this workflow instance is servicing, if any.
        cancellation: Set by the host engine to abort the execution.
    """

    workflow_instance_id: str
    activity_id: str | None = None
    variables: dict[str, Any] = field(default_factory=dict)
    inbound_call: InboundCall | None = None
    cancellation: asyncio.Event = field(default_factory=asyncio.Event)

    def get_variable(self, name: str, default: Any = None) -> Any:
        return self.variables.get(name, default)

    def from_number(self, explicit: str | None) -> str | None:
        """
        Return the caller ID to present on an outbound leg.

        An explicit, non-blank value wins. Otherwise the 'From' number of the
        inbound call is used; with no inbound call the result is None.
        """
        if explicit and explicit.strip():
            return explicit
        if self.inbound_call is None:
            return None
        return self.inbound_call.from_number

    @property
    def is_cancelled(self) -> bool:
        return self.cancellation.is_set()

    def cancel(self) -> None:
        self.cancellation.set()

    async def guard(self, awaitable: Awaitable[T]) -> T:
        """
        Await `awaitable` unless the cancellation signal fires first.

        If cancellation wins, the pending work is cancelled and
        `asyncio.CancelledError` is raised.
        """
        task = asyncio.ensure_future(awaitable)
        if self.is_cancelled:
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)
            raise asyncio.CancelledError(f"Execution of {self.workflow_instance_id} was cancelled")

        waiter = asyncio.ensure_future(self.cancellation.wait())
        try:
            done, _ = await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            waiter.cancel()
            if not task.done():
                task.cancel()
                await asyncio.gather(task, return_exceptions=True)

        if task in done:
            return task.result()
        raise asyncio.CancelledError(f"Execution of {self.workflow_instance_id} was cancelled")
