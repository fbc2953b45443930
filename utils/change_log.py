"""
Human readable change descriptions for the activity log.

An ``EntityLog`` describes how one kind of entity (project, task) is
rendered: which fields are tracked and in what order, the headline field
quoted in every message, and the two per-entity policies (whether an update
with no detected change still gets logged, and whether updates carry a
"Current:" clause).

Rendering rules:

* text values are quoted and cut to their first 30 characters, no ellipsis;
  empty or missing text renders as ``"(empty)"``
* choice values render as their raw value (``TODO``, ``HIGH``)
* dates render as ISO ``YYYY-MM-DD``; a missing date renders as ``(none)``
* summary clauses (create/delete, "Current:") cut descriptions to 50
  characters followed by ``...``
"""
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

ARROW = "→"
EMPTY_TEXT = "(empty)"
NO_DATE = "(none)"
DIFF_TEXT_LIMIT = 30
SUMMARY_TEXT_LIMIT = 50

TEXT = 'text'
CHOICE = 'choice'
DATE = 'date'


@dataclass(frozen=True)
class TrackedField:
    attr: str
    label: str
    kind: str = TEXT
    # headline fields (name, title) are already quoted in the message itself
    in_summary: bool = True

    def equal(self, old, new) -> bool:
        # dates are plain ``date`` values here, so value equality is the
        # instant comparison and None == None holds
        return old == new

    def render_change(self, value) -> str:
        if self.kind == TEXT:
            text = value or EMPTY_TEXT
            return f'"{text[:DIFF_TEXT_LIMIT]}"'
        if self.kind == DATE:
            return value.isoformat() if value is not None else NO_DATE
        return str(value)

    def render_summary(self, value) -> Optional[str]:
        """The ``Label: value`` summary fragment, or None when unset."""
        if self.kind == CHOICE:
            return f"{self.label}: {value}"
        if not value:
            return None
        if self.kind == DATE:
            return f"{self.label}: {value.isoformat()}"
        suffix = "..." if len(value) > SUMMARY_TEXT_LIMIT else ""
        return f"{self.label}: {value[:SUMMARY_TEXT_LIMIT]}{suffix}"


def snapshot(instance, fields: Iterable[TrackedField]) -> dict:
    return {field.attr: getattr(instance, field.attr) for field in fields}


def compute_changes(before: dict, after: dict, fields: Sequence[TrackedField], touched) -> List[str]:
    """
    Diff clauses for every field in ``touched`` whose value changed.

    Fields absent from ``touched`` never appear, even if their values differ.
    Clauses come out in the declared field order, not the order of ``touched``.
    """
    touched = set(touched)
    changes = []
    for field in fields:
        if field.attr not in touched:
            continue
        old, new = before.get(field.attr), after.get(field.attr)
        if field.equal(old, new):
            continue
        changes.append(f"{field.label}: {field.render_change(old)} {ARROW} {field.render_change(new)}")
    return changes


def summarize(values: dict, fields: Sequence[TrackedField], include_text: bool = True) -> List[str]:
    """Summary fragments: choices and dates first, free text last."""
    ordered = [f for f in fields if f.kind != TEXT] + [f for f in fields if f.kind == TEXT]
    parts = []
    for field in ordered:
        if not field.in_summary:
            continue
        if field.kind == TEXT and not include_text:
            continue
        part = field.render_summary(values.get(field.attr))
        if part is not None:
            parts.append(part)
    return parts


@dataclass(frozen=True)
class EntityLog:
    kind: str
    headline: str
    fields: Tuple[TrackedField, ...]
    created_action: str
    updated_action: str
    deleted_action: str
    # (project_id, task_id) an entry for this instance is filed under
    scope: Callable
    log_unchanged_updates: bool = True
    show_current_on_update: bool = False

    def snapshot(self, instance) -> dict:
        return snapshot(instance, self.fields)

    def _title(self, values):
        return f'{self.kind} "{values[self.headline]}"'

    def _with_summary(self, values, verb):
        parts = summarize(values, self.fields)
        message = f"{self._title(values)} {verb}"
        if parts:
            message += f" ({', '.join(parts)})"
        return message

    def created_message(self, values: dict) -> str:
        return self._with_summary(values, "created")

    def deleted_message(self, values: dict) -> str:
        return self._with_summary(values, "deleted")

    def updated_message(self, before: dict, after: dict, touched) -> Optional[str]:
        """
        The update message, or None when nothing changed and this entity
        doesn't log unchanged updates.
        """
        changes = compute_changes(before, after, self.fields, touched)
        if not changes and not self.log_unchanged_updates:
            return None

        message = f"{self._title(after)} updated"
        if changes:
            message += f" - {'; '.join(changes)}"
        if self.show_current_on_update:
            message += f". Current: {', '.join(summarize(after, self.fields, include_text=False))}"
        return message
