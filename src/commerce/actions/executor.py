"""Action executor.

Runs a batch of actions for one tenant. Every action is dispatched through
the handler registry and runs on its own: a failure is recorded in that
action's result and the batch carries on. N actions always yield N results,
in input order.
"""

import structlog
from protean.exceptions import ObjectNotFoundError, ValidationError

from commerce.actions.models import Action, ActionResult, StoreSnapshot
from commerce.actions.registry import lookup
from commerce.actions.validators import validate_action
from commerce.exceptions import PersistenceError

# Handler modules register themselves with the registry on import.
from commerce.actions.handlers import (  # noqa: F401  isort: skip
    categories,
    collections,
    discounts,
    media,
    orders,
    products,
    queries,
    sections,
    store,
    variants,
)

logger = structlog.get_logger(__name__)


def _error_message(exc: Exception) -> str:
    message = getattr(exc, "message", None)
    if message:
        return message
    if isinstance(exc, ValidationError):
        return "; ".join(f"{field}: {', '.join(map(str, errors))}" for field, errors in exc.messages.items())
    return str(exc) or exc.__class__.__name__


def execute_action(tenant_id, action: Action) -> ActionResult:
    try:
        registered = lookup(action.type)
        payload = registered.parse(action.payload)
        data = registered.handler(str(tenant_id), payload)
    except (ValidationError, ObjectNotFoundError, PersistenceError) as exc:
        logger.info("action_failed", tenant_id=str(tenant_id), action_type=action.type, error=_error_message(exc))
        return ActionResult(action=action, success=False, error=_error_message(exc))
    except Exception as exc:
        logger.exception("action_crashed", tenant_id=str(tenant_id), action_type=action.type)
        return ActionResult(action=action, success=False, error=_error_message(exc))

    logger.info("action_executed", tenant_id=str(tenant_id), action_type=action.type)
    return ActionResult(action=action, success=True, data=data)


def execute_actions(tenant_id, actions: list[Action]) -> list[ActionResult]:
    """Execute ``actions`` sequentially against the tenant's store."""
    return [execute_action(tenant_id, action) for action in actions]


def run_actions(tenant_id, actions: list[Action], snapshot: StoreSnapshot | None = None) -> list[ActionResult]:
    """Validate, then execute, each action.

    A corrected action replaces the original; a rejected one is reported
    as failed without touching the store.
    """
    results = []
    for action in actions:
        try:
            verdict = validate_action(action, snapshot)
        except Exception as exc:
            logger.exception("action_validation_crashed", tenant_id=str(tenant_id), action_type=action.type)
            results.append(ActionResult(action=action, success=False, error=_error_message(exc)))
            continue

        if not verdict.valid:
            logger.info("action_rejected", tenant_id=str(tenant_id), action_type=action.type, error=verdict.error)
            results.append(ActionResult(action=action, success=False, error=verdict.error))
            continue

        to_run = verdict.fixed or action
        results.append(execute_action(tenant_id, to_run))
    return results
