"""Invoice Status Transitions

Adjacency tables for invoice status changes and the pure function that
applies a change to an invoice.

Two policies exist:
- strict (default): UNPAID -> ISSUED -> PAID, with OVERDUE and CANCELED
  branches; PAID and CANCELED are terminal
- permissive: any status may move to any other status (demo override,
  selected with TRANSITION_POLICY=permissive)
"""

from datetime import datetime
from typing import Dict, FrozenSet, Mapping
from invoice_lifecycle.domain.errors import InvalidTransitionError
from invoice_lifecycle.domain.invoice import Invoice, InvoiceStatus


_STRICT_TRANSITIONS: Dict[InvoiceStatus, FrozenSet[InvoiceStatus]] = {
    InvoiceStatus.UNPAID: frozenset({InvoiceStatus.ISSUED, InvoiceStatus.CANCELED}),
    InvoiceStatus.ISSUED: frozenset(
        {InvoiceStatus.PAID, InvoiceStatus.OVERDUE, InvoiceStatus.CANCELED}
    ),
    InvoiceStatus.OVERDUE: frozenset({InvoiceStatus.PAID, InvoiceStatus.CANCELED}),
    InvoiceStatus.PAID: frozenset(),
    InvoiceStatus.CANCELED: frozenset(),
}

_PERMISSIVE_TRANSITIONS: Dict[InvoiceStatus, FrozenSet[InvoiceStatus]] = {
    status: frozenset(other for other in InvoiceStatus if other != status)
    for status in InvoiceStatus
}


class TransitionPolicy:
    """Named adjacency table of allowed status moves"""

    def __init__(self, name: str, transitions: Mapping[InvoiceStatus, FrozenSet[InvoiceStatus]]):
        self.name = name
        self._transitions = dict(transitions)

    def allowed_targets(self, current: InvoiceStatus) -> FrozenSet[InvoiceStatus]:
        return self._transitions.get(current, frozenset())

    def is_allowed(self, current: InvoiceStatus, target: InvoiceStatus) -> bool:
        return target in self.allowed_targets(current)

    def is_terminal(self, status: InvoiceStatus) -> bool:
        return not self.allowed_targets(status)

    def __repr__(self) -> str:
        return f"TransitionPolicy({self.name!r})"


STRICT_POLICY = TransitionPolicy("strict", _STRICT_TRANSITIONS)
PERMISSIVE_POLICY = TransitionPolicy("permissive", _PERMISSIVE_TRANSITIONS)

_POLICIES = {policy.name: policy for policy in (STRICT_POLICY, PERMISSIVE_POLICY)}


def get_transition_policy(name: str) -> TransitionPolicy:
    """Resolve a policy by its configured name"""
    try:
        return _POLICIES[name.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown transition policy '{name}', expected one of {sorted(_POLICIES)}"
        ) from None


def is_transition_allowed(
    current: InvoiceStatus,
    target: InvoiceStatus,
    policy: TransitionPolicy = STRICT_POLICY,
) -> bool:
    return policy.is_allowed(current, target)


def apply_transition(
    invoice: Invoice,
    target: InvoiceStatus,
    now: datetime,
    policy: TransitionPolicy = STRICT_POLICY,
) -> Invoice:
    """
    Move an invoice to a new status

    Args:
        invoice: Current invoice (not modified)
        target: Requested status
        now: Timestamp for updated_at and paid_at/canceled_at
        policy: Active transition policy

    Returns:
        New Invoice with the target status

    Raises:
        InvalidTransitionError: If the move is not allowed by the policy
    """
    if not policy.is_allowed(invoice.status, target):
        raise InvalidTransitionError(invoice.status, target, policy.name)

    changes = {"status": target, "updated_at": now}
    if target == InvoiceStatus.PAID and invoice.paid_at is None:
        changes["paid_at"] = now
    if target == InvoiceStatus.CANCELED and invoice.canceled_at is None:
        changes["canceled_at"] = now

    return invoice.model_copy(update=changes, deep=True)
