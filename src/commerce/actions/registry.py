"""Action handler registry.

Each action type maps to exactly one handler and, optionally, a payload
model that validates the raw payload before the handler runs. Handlers are
called as ``handler(tenant_id, payload)``.
"""

from collections.abc import Callable
from dataclasses import dataclass

from pydantic import BaseModel
from pydantic import ValidationError as PayloadError

from commerce.exceptions import UnknownActionType, ValidationFailed


@dataclass(frozen=True)
class RegisteredAction:
    type: str
    handler: Callable
    payload_model: type[BaseModel] | None = None

    def parse(self, payload: dict):
        if self.payload_model is None:
            return payload
        try:
            return self.payload_model.model_validate(payload)
        except PayloadError as exc:
            problems = "; ".join(
                f"{'.'.join(str(part) for part in error['loc']) or 'payload'}: {error['msg']}" for error in exc.errors()
            )
            raise ValidationFailed(f"Invalid payload for {self.type}: {problems}", field="payload") from None


_REGISTRY: dict[str, RegisteredAction] = {}


def _qualified_name(func) -> str:
    return f"{func.__module__}.{func.__qualname__}"


def action_handler(action_type: str, payload: type[BaseModel] | None = None):
    """Register the decorated function as the handler of ``action_type``."""

    def decorator(func):
        existing = _REGISTRY.get(action_type)
        if existing is not None and _qualified_name(existing.handler) != _qualified_name(func):
            raise ValueError(f"Action type {action_type} is already registered")
        _REGISTRY[action_type] = RegisteredAction(type=action_type, handler=func, payload_model=payload)
        return func

    return decorator


def lookup(action_type: str) -> RegisteredAction:
    try:
        return _REGISTRY[action_type]
    except KeyError:
        raise UnknownActionType(action_type) from None


def registered_types() -> list[str]:
    return sorted(_REGISTRY)
