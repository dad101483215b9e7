"""Delta reconciliation between two polls, and rendering of the report body.

CodePipeline lists action executions newest-first. Progress is presented oldest-first,
so reconciliation works on the reversed listing. Entries are never re-sorted: attempts
that share a timestamp keep the relative order the service returned.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass

from codepipeline_execute.models import ActionObservation, ActionRef, DedupKey, ObservedSet

EXECUTING_VERB = "is executing"
EXECUTED_VERB = "was executed"


@dataclass(frozen=True, slots=True)
class ReconcileResult:
    changed: tuple[ActionObservation, ...]
    next_keys: frozenset[DedupKey]
    merged: ObservedSet


def reconcile(
    previous_keys: Iterable[DedupKey],
    catalog: ObservedSet,
    fresh_details: Sequence[ActionObservation],
) -> ReconcileResult:
    """Compare a fresh listing against the keys seen on the previous poll.

    Args:
        previous_keys: Dedup keys returned by the previous call (empty on the first poll).
        catalog: The current observed set, in catalog order.
        fresh_details: Action executions as listed by CodePipeline (newest-first).

    Returns:
        The changed executions (oldest-first), the keys to pass to the next call and the
        catalog with the latest attempt of every listed action merged in.
    """

    seen = frozenset(previous_keys)
    chronological = list(reversed(fresh_details))

    changed = tuple(detail for detail in chronological if detail.dedup_key not in seen)

    latest: dict[ActionRef, ActionObservation] = {}
    for detail in chronological:
        latest[detail.ref] = detail

    merged = tuple(latest.get(entry.ref, entry) for entry in catalog)
    next_keys = frozenset(detail.dedup_key for detail in fresh_details)

    return ReconcileResult(changed=changed, next_keys=next_keys, merged=merged)


def format_action(observation: ActionObservation, icons: Mapping[str, str]) -> str:
    status = observation.status
    if observation.external_url is not None:
        status = f"[{observation.status}]({observation.external_url})"

    icon = icons.get(observation.status)
    prefix = f"{icon}&nbsp;&nbsp;" if icon is not None else ""
    return f"\n - {prefix}{observation.ref} - {status}"


def render_body(heading: str, observed: ObservedSet, icons: Mapping[str, str]) -> str:
    """Render the full report body: heading, then one line per catalog entry."""

    return heading + "".join(format_action(entry, icons) for entry in observed)


def complete_heading(heading: str) -> str:
    return heading.replace(EXECUTING_VERB, EXECUTED_VERB, 1)


def format_progress_line(observation: ActionObservation) -> str:
    return f"{observation.ref} - {observation.status}"
