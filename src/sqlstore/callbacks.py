# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Completion handlers for provider operations.

A handler is accepted in two shapes and resolved once, at the public
boundary, into a single variant:

- BoundCallback: a target object plus an action (method name or plain
  function). The action runs with the target as receiver.
- PlainCallback: any callable.

Mappings of the form {"target": obj, "action": "method"} (optionally with
"extra_args") are accepted as the bound shape.

Payloads are always delivered as one positional argument. A result list
reaches a single-parameter callback whole, never spread across parameters.
"""

from __future__ import annotations

import inspect
import types
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class BoundCallback:
    """Callback invoked as a method of `target`."""

    target: Any
    action: str | Callable[..., Any]
    extra_args: tuple[Any, ...] = ()

    def resolve(self) -> Callable[..., Any]:
        if isinstance(self.action, str):
            method = getattr(self.target, self.action, None)
            if method is None or not callable(method):
                raise TypeError(
                    f"{type(self.target).__name__} has no callable action '{self.action}'"
                )
            return method
        return types.MethodType(self.action, self.target)

    def __call__(self, *payload: Any) -> Any:
        return self.resolve()(*payload, *self.extra_args)


@dataclass(frozen=True)
class PlainCallback:
    """Callback invoked as a plain function."""

    func: Callable[..., Any]

    def __call__(self, *payload: Any) -> Any:
        return self.func(*payload)


Callback = Union[BoundCallback, PlainCallback]


def as_callback(value: Any) -> Callback | None:
    """Resolve a user supplied handler into a Callback variant.

    Raises:
        TypeError: If value is neither a callable nor a target/action descriptor.
    """
    if value is None or isinstance(value, (BoundCallback, PlainCallback)):
        return value
    if isinstance(value, Mapping):
        if value.get("target") is None or value.get("action") is None:
            raise TypeError("Callback descriptor requires both 'target' and 'action'")
        return BoundCallback(
            value["target"], value["action"], tuple(value.get("extra_args") or ())
        )
    if callable(value):
        return PlainCallback(value)
    raise TypeError(f"Unsupported callback type: {type(value).__name__}")


async def dispatch(callback: Callback | None, *payload: Any) -> bool:
    """Invoke a callback with at most one payload argument.

    Coroutine results are awaited. Returns False when there was no callback.
    """
    if callback is None:
        return False
    if len(payload) > 1:
        raise TypeError("dispatch() delivers at most one payload argument")
    result = callback(*payload)
    if inspect.isawaitable(result):
        await result
    return True


__all__ = ["BoundCallback", "PlainCallback", "Callback", "as_callback", "dispatch"]
