"""
Admin slot editor for one date.

The editor keeps the set loaded from the registry (baseline) next to the
set being edited (draft). Between requests the pair lives in
request.session['slot_editor'], keyed by ISO date:
{
    "2025-03-10": {"baseline": ["10:00", "10:30"], "draft": ["10:30", "13:00"]},
}

Use load_editor/store_editor/clear_editor instead of touching the session
key directly.
"""
from apps.core.exceptions import ValidationError
from .registry import as_date, configured_universe, get_slots, set_slots

SESSION_KEY = 'slot_editor'


class SlotEditor:

    def __init__(self, day, baseline, draft=None):
        self.day = as_date(day)
        self.baseline = sorted(set(baseline))
        self.draft = sorted(set(self.baseline if draft is None else draft))

    @classmethod
    def load(cls, day) -> 'SlotEditor':
        return cls(day, get_slots(day))

    @property
    def has_changes(self) -> bool:
        """Order-insensitive comparison of draft against the loaded set."""
        return set(self.baseline) != set(self.draft)

    def toggle(self, label: str) -> bool:
        """Flip one label on/off. Returns True if it is now on."""
        if label not in configured_universe():
            raise ValidationError(f'"{label}" is not a half-hour label.', field='slots')
        current = set(self.draft)
        enabled = label not in current
        if enabled:
            current.add(label)
        else:
            current.discard(label)
        self.draft = sorted(current)
        return enabled

    def discard(self) -> None:
        self.draft = list(self.baseline)

    def save(self) -> list:
        """Write the draft to the registry and make it the new baseline."""
        stored = set_slots(self.day, self.draft)
        self.baseline = list(stored)
        self.draft = list(stored)
        return stored

    def grid(self) -> list:
        """One cell per label in the universe, for the toggle buttons."""
        draft, baseline = set(self.draft), set(self.baseline)
        return [
            {
                'label': label,
                'enabled': label in draft,
                'changed': (label in draft) != (label in baseline),
            }
            for label in configured_universe()
        ]

    def as_dict(self) -> dict:
        return {'baseline': list(self.baseline), 'draft': list(self.draft)}


# ── Session persistence ──────────────────────────────────────────────────────

def _drafts(session) -> dict:
    drafts = session.get(SESSION_KEY)
    return dict(drafts) if isinstance(drafts, dict) else {}


def _valid_labels(value) -> bool:
    return isinstance(value, list) and all(isinstance(s, str) for s in value)


def load_editor(session, day) -> SlotEditor:
    """Resume an in-progress edit for `day`, or start from the registry."""
    day = as_date(day)
    entry = _drafts(session).get(day.isoformat())
    if (isinstance(entry, dict) and _valid_labels(entry.get('baseline'))
            and _valid_labels(entry.get('draft'))):
        return SlotEditor(day, entry['baseline'], entry['draft'])
    return SlotEditor.load(day)


def store_editor(session, editor: SlotEditor) -> None:
    drafts = _drafts(session)
    drafts[editor.day.isoformat()] = editor.as_dict()
    session[SESSION_KEY] = drafts


def clear_editor(session, day) -> None:
    drafts = _drafts(session)
    drafts.pop(as_date(day).isoformat(), None)
    session[SESSION_KEY] = drafts
