"""
JSON storage implementation for portfolio content.
"""
from datetime import datetime
from enum import Enum
import json
import logging
import random
import shutil
import threading
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

from pydantic import BaseModel, ValidationError

from ..editing.editor import IdGenerator
from ..personal.defaults import NEW_SKILL, RECORD_TEMPLATES, default_portfolio
from ..personal.models import COLLECTION_FIELDS, RECORD_TYPES, SOCIAL_FIELDS, PortfolioModel, Skill
from .backends import CorruptedDataError, KeyValueStorage, StorageError

logger = logging.getLogger(__name__)

PORTFOLIO_KEY = "portfolioData"


class LoadStatus(str, Enum):
    """Outcome of the last load."""
    NOT_LOADED = "not_loaded"
    LOADED = "loaded"
    REPAIRED = "repaired"
    NO_PRIOR_STATE = "no_prior_state"
    CORRUPTED = "corrupted"
    UNAVAILABLE = "unavailable"


def merge_with_defaults(payload: Dict[str, Any], defaults: PortfolioModel) -> PortfolioModel:
    """Reconcile a persisted payload with the current default model.

    See `reconcile`; this variant drops the list of repairs.
    """
    model, _ = reconcile(payload, defaults)
    return model


def reconcile(payload: Dict[str, Any], defaults: PortfolioModel) -> Tuple[PortfolioModel, List[str]]:
    """Reconcile a persisted payload with the current default model.

    Known top-level fields in `payload` override the defaults, `socials` is
    merged per sub-field and collections are taken from the payload only
    when present and not null. Unknown fields are ignored.

    Stored records are repaired one by one: missing or invalid fields are
    filled from the record template, unusable or duplicate ids get fresh
    ids and duplicate skill category titles get a numeric suffix. Only
    entries that are not objects are dropped. A top-level field whose value
    does not validate falls back to its default.

    Args:
        payload: Parsed document, possibly written by an older or newer version
        defaults: Model supplying the complete shape and fallback values

    Returns:
        A complete PortfolioModel and a description of every repair made
    """
    base = defaults.to_document()
    merged = dict(base)
    repairs: List[str] = []

    for key in base:
        if key == "socials" or key in COLLECTION_FIELDS or key == "skills":
            continue
        if key in payload:
            merged[key] = payload[key]

    socials = dict(base["socials"])
    stored_socials = payload.get("socials")
    if isinstance(stored_socials, dict):
        for key in SOCIAL_FIELDS:
            if stored_socials.get(key) is not None:
                socials[key] = stored_socials[key]
    merged["socials"] = socials

    for key in COLLECTION_FIELDS + ("skills",):
        stored = payload.get(key)
        if stored is None:
            continue
        if not isinstance(stored, list):
            repairs.append(f"{key}: not a list, using default")
        elif key == "skills":
            merged[key] = _repair_skills(stored, repairs)
        else:
            merged[key] = _repair_collection(key, stored, repairs)

    model = _validate_with_fallback(merged, base, repairs)
    for repair in repairs:
        logger.warning("Repaired stored portfolio: %s", repair)
    return model, repairs


def _repair_record(
    record_type: type,
    template: Dict[str, Any],
    item: Dict[str, Any],
    where: str,
    repairs: List[str]
) -> Tuple[Optional[BaseModel], bool]:
    """Validate one stored record, taking missing or bad fields from `template`.

    Returns:
        The record (or None if it is beyond repair) and whether it needs a fresh id
    """
    data = dict(item)
    for key, value in template.items():
        if data.get(key) is None:
            data[key] = value
            repairs.append(f"{where}.{key}: missing, using template value")

    needs_id = False
    try:
        return record_type.model_validate(data), needs_id
    except ValidationError as e:
        errors = e.errors()

    for error in errors:
        key = error["loc"][0] if error["loc"] else None
        if key == "id":
            # Placeholder until a fresh id is assigned
            data["id"] = 0
            needs_id = True
        elif key in template:
            data[key] = template[key]
        repairs.append(f"{where}.{key}: {error['msg']}, using template value")

    try:
        return record_type.model_validate(data), needs_id
    except ValidationError as e:
        repairs.append(f"{where}: dropped ({e.error_count()} errors)")
        return None, False


def _repair_collection(collection: str, items: List[Any], repairs: List[str]) -> List[Dict[str, Any]]:
    record_type = RECORD_TYPES[collection]
    template = RECORD_TEMPLATES[collection]

    checked = []
    for position, item in enumerate(items):
        where = f"{collection}[{position}]"
        if not isinstance(item, dict):
            repairs.append(f"{where}: not an object, dropped")
            continue
        record, needs_id = _repair_record(record_type, template, item, where, repairs)
        if record is not None:
            checked.append((record, needs_id))

    # The first record keeps a shared id; later ones are renumbered
    ids = IdGenerator()
    taken = {record.id for record, needs_id in checked if not needs_id}
    seen = set()
    records = []
    for record, needs_id in checked:
        if needs_id or record.id in seen:
            new_id = ids.next_id(taken)
            repairs.append(f"{collection}: id {record.id if not needs_id else 'missing'} reassigned to {new_id}")
            record = record.model_copy(update={"id": new_id})
            taken.add(new_id)
        seen.add(record.id)
        records.append(record.model_dump(mode="json", by_alias=True))
    return records


def _repair_skills(categories: List[Any], repairs: List[str]) -> List[Dict[str, Any]]:
    repaired = []
    titles = set()
    for position, item in enumerate(categories):
        where = f"skills[{position}]"
        if not isinstance(item, dict) or not isinstance(item.get("title"), str):
            repairs.append(f"{where}: category without a title, dropped")
            continue

        stored_skills = item.get("skills")
        if stored_skills is None:
            stored_skills = []
        elif not isinstance(stored_skills, list):
            repairs.append(f"{where}.skills: not a list, emptied")
            stored_skills = []
        skills = []
        for index, skill in enumerate(stored_skills):
            if not isinstance(skill, dict):
                repairs.append(f"{where}.skills[{index}]: not an object, dropped")
                continue
            record, _ = _repair_record(Skill, NEW_SKILL, skill, f"{where}.skills[{index}]", repairs)
            if record is not None:
                skills.append(record.model_dump(mode="json"))

        title = item["title"]
        suffix = 2
        while title in titles:
            title = f"{item['title']} ({suffix})"
            suffix += 1
        if title != item["title"]:
            repairs.append(f"{where}: duplicate title {item['title']!r} renamed to {title!r}")
        titles.add(title)
        repaired.append({"title": title, "skills": skills})
    return repaired


def _validate_with_fallback(merged: Dict[str, Any], base: Dict[str, Any], repairs: List[str]) -> PortfolioModel:
    try:
        return PortfolioModel.model_validate(merged)
    except ValidationError as e:
        errors = e.errors()

    repaired = dict(merged)
    repaired["socials"] = dict(merged["socials"])
    for error in errors:
        loc = error["loc"]
        key = loc[0] if loc else None
        if key not in base:
            repairs.append(f"unrecoverable payload ({error['msg']}), using defaults")
            return PortfolioModel.model_validate(base)
        if key == "socials" and len(loc) > 1 and loc[1] in SOCIAL_FIELDS:
            repaired["socials"][loc[1]] = base["socials"][loc[1]]
        else:
            repaired[key] = base[key]
        repairs.append(f"{'.'.join(map(str, loc))}: {error['msg']}, using default")

    try:
        return PortfolioModel.model_validate(repaired)
    except ValidationError:
        repairs.append("still invalid after repair, using defaults")
        return PortfolioModel.model_validate(base)


class PortfolioStore:
    """Owns the committed portfolio model and its persisted copy."""

    def __init__(
        self,
        storage: KeyValueStorage,
        defaults_factory: Callable[[], PortfolioModel] = default_portfolio,
        key: str = PORTFOLIO_KEY
    ):
        """Initialize the store with the default model.

        Args:
            storage: Durable key/value storage holding the serialized model
            defaults_factory: Builds the default model
            key: Storage key of the portfolio document
        """
        self.storage = storage
        self.key = key
        self._defaults_factory = defaults_factory
        self._current = defaults_factory()
        self._listeners: List[Callable[[PortfolioModel], None]] = []
        self._lock = threading.RLock()
        self.load_status = LoadStatus.NOT_LOADED

    @property
    def current(self) -> PortfolioModel:
        """The committed model. Consumers must treat it as read-only."""
        return self._current

    def subscribe(self, listener: Callable[[PortfolioModel], None]) -> Callable[[], None]:
        """Register a listener called with the model after every load or save.

        Returns:
            Function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)
        return unsubscribe

    def _publish(self, model: PortfolioModel):
        self._current = model
        for listener in list(self._listeners):
            listener(model)

    def load(self) -> PortfolioModel:
        """Load the persisted model, merging it with the defaults.

        Never raises: absent, unreadable or corrupted storage yields the
        default model and is reported through `load_status`. A document
        that needed record-level repair loads as REPAIRED.
        """
        with self._lock:
            defaults = self._defaults_factory()
            try:
                raw = self.storage.get_item(self.key)
            except CorruptedDataError as e:
                logger.error("Saved portfolio is unreadable, using defaults: %s", e)
                self.load_status = LoadStatus.CORRUPTED
                self._publish(defaults)
                return defaults
            except StorageError as e:
                logger.warning("Portfolio storage unavailable, using defaults: %s", e)
                self.load_status = LoadStatus.UNAVAILABLE
                self._publish(defaults)
                return defaults

            if raw is None:
                logger.info("No saved portfolio found, using defaults")
                self.load_status = LoadStatus.NO_PRIOR_STATE
                self._publish(defaults)
                return defaults

            try:
                payload = json.loads(raw)
            except (ValueError, RecursionError) as e:
                logger.error("Failed to parse saved portfolio, using defaults: %s", e)
                payload = None

            if not isinstance(payload, dict):
                self.load_status = LoadStatus.CORRUPTED
                self._publish(defaults)
                return defaults

            model, repairs = reconcile(payload, defaults)
            self.load_status = LoadStatus.REPAIRED if repairs else LoadStatus.LOADED
            self._publish(model)
            return model

    def save(self, model: PortfolioModel):
        """Persist the whole model under a single key and publish it.

        Raises:
            StorageError: if the write failed; the published model is unchanged
        """
        document = json.dumps(model.to_document())
        with self._lock:
            self.storage.set_item(self.key, document)
            self._publish(model.model_copy(deep=True))

    def backup(self, backup_dir: str = "data/backups", max_backups: int = 5) -> Path:
        """Create a backup of the committed model.

        Args:
            backup_dir: Directory to store backups
            max_backups: Maximum number of backups to keep

        Returns:
            Path of the new backup directory
        """
        backup_path = Path(backup_dir)
        backup_path.mkdir(parents=True, exist_ok=True)

        # Timestamped directory with random suffix
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        random_suffix = ''.join(random.choices('0123456789abcdef', k=4))
        target = backup_path / f"backup_{timestamp}_{random_suffix}"
        target.mkdir()

        model = self._current
        with open(target / f"{self.key}.json", 'w', encoding='utf-8') as f:
            json.dump(model.to_document(), f, indent=2)

        backup_info = {
            "timestamp": timestamp,
            "random_suffix": random_suffix,
            "num_experiences": len(model.experiences),
            "num_education": len(model.education),
            "num_projects": len(model.projects),
            "num_certificates": len(model.certificates),
            "num_skill_categories": len(model.skills),
        }
        with open(target / "backup_info.json", 'w', encoding='utf-8') as f:
            json.dump(backup_info, f, indent=2)

        self._cleanup_old_backups(backup_path, max_backups)
        logger.info("Created portfolio backup %s", target)
        return target

    def _cleanup_old_backups(self, backup_dir: Path, max_backups: int):
        """Remove old backups if exceeding max_backups limit."""
        backup_dirs = sorted(
            [d for d in backup_dir.iterdir() if d.is_dir() and d.name.startswith("backup_")],
            key=lambda d: d.name  # Timestamp prefix sorts chronologically
        )

        while len(backup_dirs) > max_backups:
            shutil.rmtree(backup_dirs.pop(0))

    def restore_from_backup(self, backup_dir: str) -> PortfolioModel:
        """Restore and persist the model stored in a backup.

        The backup goes through the same merge as a normal load, so backups
        taken by older versions still produce a complete model.

        Raises:
            ValueError: if the backup directory or document does not exist
            StorageError: if the restored model could not be saved
        """
        backup_path = Path(backup_dir)
        document_path = backup_path / f"{self.key}.json"
        if not backup_path.exists():
            raise ValueError(f"Backup directory not found: {backup_dir}")
        if not document_path.exists():
            raise ValueError(f"Backup has no portfolio document: {backup_dir}")

        with open(document_path, 'r', encoding='utf-8') as f:
            payload = json.load(f)
        if not isinstance(payload, dict):
            raise ValueError(f"Backup document is not an object: {document_path}")

        model = merge_with_defaults(payload, self._defaults_factory())
        self.save(model)
        logger.info("Restored portfolio from %s", backup_path)
        return model
