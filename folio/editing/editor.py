"""
Pure edit operations over the portfolio's collections.

None of these functions mutate their inputs; each returns a new list so the
edit session can detect changes by structural comparison.
"""
import threading
import time
from typing import Any, Callable, Iterable, List, Optional, Protocol, Sequence, TypeVar

from ..personal.models import Skill, SkillCategory, resolve_field


class Identified(Protocol):
    """Anything with a numeric `id`."""
    id: int


T = TypeVar("T", bound=Identified)


class DuplicateIdError(ValueError):
    """A new record reuses an id already in the collection."""


def add(sequence: Sequence[T], make_default: Callable[[], T]) -> List[T]:
    """Prepend a new record built by `make_default`.

    Raises:
        DuplicateIdError: if the new record's id is already used
    """
    record = make_default()
    if any(item.id == record.id for item in sequence):
        raise DuplicateIdError(f"id {record.id} already exists")
    return [record, *sequence]


def remove(sequence: Sequence[T], record_id: int) -> List[T]:
    """Drop the record with `record_id`; unknown ids leave the list as is."""
    return [item for item in sequence if item.id != record_id]


def update(sequence: Sequence[T], record_id: int, field: str, value: Any) -> List[T]:
    """Replace one field of the record with `record_id`.

    `field` may be the attribute name or its alias. The updated record is
    validated, so a value of the wrong type raises ValidationError.

    Raises:
        KeyError: if the record type has no such field
    """
    result = []
    for item in sequence:
        if item.id == record_id:
            item = _replace(item, field, value)
        result.append(item)
    return result


def _replace(item, field: str, value: Any):
    model_type = type(item)
    name = resolve_field(model_type, field)
    data = item.model_dump()
    data[name] = value
    return model_type.model_validate(data)


def update_skill(
    skills: Sequence[SkillCategory],
    category_index: int,
    skill_index: int,
    field: str,
    value: Any
) -> List[SkillCategory]:
    """Replace one field of the skill at the given position.

    Out-of-range positions leave the list unchanged.
    """
    result = []
    for c_index, category in enumerate(skills):
        if c_index == category_index:
            category = category.model_copy(update={
                "skills": [
                    _replace(skill, field, value) if s_index == skill_index else skill
                    for s_index, skill in enumerate(category.skills)
                ]
            })
        result.append(category)
    return result


def delete_skill(skills: Sequence[SkillCategory], category_index: int, skill_index: int) -> List[SkillCategory]:
    """Remove the skill at the given position; later skills shift down."""
    result = []
    for c_index, category in enumerate(skills):
        if c_index == category_index:
            category = category.model_copy(update={
                "skills": [s for s_index, s in enumerate(category.skills) if s_index != skill_index]
            })
        result.append(category)
    return result


def add_skill(skills: Sequence[SkillCategory], category_index: int, skill: Skill) -> List[SkillCategory]:
    """Append `skill` to the category at `category_index`."""
    result = []
    for c_index, category in enumerate(skills):
        if c_index == category_index:
            category = category.model_copy(update={"skills": [*category.skills, skill]})
        result.append(category)
    return result


def parse_tags(text: str) -> List[str]:
    """Split a comma separated tag string into trimmed, non-empty tags."""
    return [tag.strip() for tag in text.split(",") if tag.strip()]


def format_tags(tags: Iterable[str]) -> str:
    return ", ".join(tags)


class IdGenerator:
    """Time-derived record ids that never repeat.

    Ids are milliseconds since the epoch, bumped past the last issued id
    and past any id already present in the target collection.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._last = 0
        self._lock = threading.Lock()

    def next_id(self, existing: Optional[Iterable[int]] = None) -> int:
        taken = set(existing or ())
        with self._lock:
            candidate = max(int(self._clock() * 1000), self._last + 1)
            while candidate in taken:
                candidate += 1
            self._last = candidate
            return candidate
