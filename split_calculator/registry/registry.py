"""
Split Registry

Owns the saved split ratios for one session and keeps the durable store in
step with them.

Rules:
- The registry is never empty once loaded
- Every mutating operation builds the new state, persists exactly that
  state, and returns it. Nothing is persisted from an earlier snapshot
- Storage failures are logged and remembered on `storage_error`; the
  in-memory state stays authoritative for the rest of the session
"""

import json
import math
from collections.abc import Iterable, Mapping, Sequence
from typing import Optional, Union

from pydantic import TypeAdapter
from pydantic import ValidationError as SchemaError

from split_calculator.audit.logger import AuditLogger
from split_calculator.engine.validator import (
    NOT_FINITE_MESSAGE,
    describe_problem,
    validate,
)
from split_calculator.errors import (
    DuplicateName,
    EmptyName,
    InvalidRatio,
    LastEntryError,
    SplitError,
    UnknownSplit,
    ValidationError,
)
from split_calculator.models.split import RatioValidation, SplitRatio, StoredSplit
from split_calculator.services.storage.interface import KeyValueStore, StorageError

DEFAULT_STORAGE_KEY = "splittingCalculatorSplits"

DEFAULT_SPLITS: tuple[SplitRatio, ...] = (
    SplitRatio(name="50-50", components=(50, 50)),
    SplitRatio(name="50-40-10", components=(50, 40, 10)),
)

_stored_splits = TypeAdapter(list[StoredSplit])


# =============================================================================
# SERIALIZATION
# =============================================================================

def serialize_splits(entries: Iterable[SplitRatio]) -> str:
    """Render entries as the stored JSON array of {name, value} objects."""
    return json.dumps([entry.to_stored() for entry in entries])


def deserialize_splits(text: str) -> tuple[SplitRatio, ...]:
    """
    Parse and shape-check stored JSON.
    
    Raises:
        ValueError: On malformed JSON, a wrong shape, an empty list, or
                    two entries sharing a name
    """
    data = json.loads(text)
    stored = _stored_splits.validate_python(data)
    if not stored:
        raise ValueError("Stored split list is empty")
    
    entries = tuple(SplitRatio.from_stored(item) for item in stored)
    seen = set()
    for entry in entries:
        if entry.key in seen:
            raise ValueError(f"Stored splits repeat the name {entry.name!r}")
        seen.add(entry.key)
    return entries


# =============================================================================
# ENTRY CHECKS (shared with the editing buffer)
# =============================================================================

def find_index(entries: Sequence[SplitRatio], name: str) -> Optional[int]:
    """Position of the entry called `name` (case-insensitive), or None."""
    key = name.strip().casefold()
    for index, entry in enumerate(entries):
        if entry.key == key:
            return index
    return None


def build_new_entry(
    name: str,
    components: Sequence[float],
    existing: Sequence[SplitRatio],
) -> SplitRatio:
    """
    Check a prospective new split against `existing`.
    
    Checks run in the order the user sees them: name, percentages,
    then uniqueness.
    
    Raises:
        EmptyName: If the name is blank
        InvalidRatio: If the percentages are not a valid ratio
        DuplicateName: If the name is already taken
    """
    name = (name or "").strip()
    if not name:
        raise EmptyName()
    
    components = [float(value) for value in components]
    problem = describe_problem(components)
    if problem is not None:
        raise InvalidRatio(problem, validate(components))
    
    if find_index(existing, name) is not None:
        raise DuplicateName(name)
    
    return SplitRatio(name=name, components=tuple(components))


# =============================================================================
# REGISTRY
# =============================================================================

class SplitRegistry:
    """
    The session's split ratios, backed by a key-value store.
    
    Construct once per session and call load() before use. Until then the
    registry holds the defaults.
    """
    
    def __init__(
        self,
        store: KeyValueStore,
        storage_key: str = DEFAULT_STORAGE_KEY,
        audit_logger: Optional[AuditLogger] = None,
    ):
        """
        Initialize registry.
        
        Args:
            store: Durable key-value store
            storage_key: Key under which the splits are saved
            audit_logger: Receives change and failure events.
                    A local-only logger is created if omitted.
        """
        self._store = store
        self._key = storage_key
        self._audit_logger = audit_logger or AuditLogger()
        self._entries: tuple[SplitRatio, ...] = DEFAULT_SPLITS
        self.storage_error: Optional[StorageError] = None
    
    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------
    
    @property
    def entries(self) -> tuple[SplitRatio, ...]:
        return self._entries
    
    @property
    def names(self) -> list[str]:
        return [entry.name for entry in self._entries]
    
    def as_mapping(self) -> dict[str, SplitRatio]:
        return {entry.name: entry for entry in self._entries}
    
    def __len__(self) -> int:
        return len(self._entries)
    
    def __iter__(self):
        return iter(self._entries)
    
    def __contains__(self, name: str) -> bool:
        return find_index(self._entries, name) is not None
    
    def get(self, name: str) -> SplitRatio:
        index = find_index(self._entries, name)
        if index is None:
            raise UnknownSplit(name)
        return self._entries[index]
    
    def validation(self, name: str) -> RatioValidation:
        return validate(self.get(name).components)
    
    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------
    
    def load(self) -> dict[str, SplitRatio]:
        """
        Read the saved splits from the store.
        
        Falls back to the defaults when nothing is saved, the store cannot
        be read, or the saved data is malformed. Defaults are written back
        only when nothing was saved, so unreadable data is left for
        inspection until the next change overwrites it.
        """
        try:
            raw = self._store.get_item(self._key)
        except StorageError as e:
            self._storage_failed("read", e)
            self._audit_logger.log_defaults_seeded("store could not be read")
            self._entries = DEFAULT_SPLITS
            return self.as_mapping()
        
        if raw is None:
            self._audit_logger.log_defaults_seeded("no saved splits")
            self._commit(DEFAULT_SPLITS)
            return self.as_mapping()
        
        try:
            entries = deserialize_splits(raw)
        except (ValueError, SchemaError) as e:
            self._audit_logger.log_stored_splits_rejected(str(e))
            self._audit_logger.log_defaults_seeded("saved splits were malformed")
            self._entries = DEFAULT_SPLITS
            return self.as_mapping()
        
        self._entries = entries
        self._audit_logger.log_splits_loaded(self.names)
        return self.as_mapping()
    
    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    
    def add(self, name: str, components: Sequence[float]) -> tuple[SplitRatio, ...]:
        """
        Add a new split and persist.
        
        Raises:
            EmptyName, InvalidRatio, DuplicateName
        """
        try:
            entry = build_new_entry(name, components, self._entries)
        except SplitError as e:
            self._audit_logger.log_user_action_rejected("add", e, name=name)
            raise
        
        new_entries = self._entries + (entry,)
        self._commit(new_entries)
        self._audit_logger.log_split_added(entry.name, list(entry.components))
        return new_entries
    
    def update(self, name: str, components: Sequence[float]) -> tuple[SplitRatio, ...]:
        """
        Replace the percentages of an existing split and persist.
        
        The new percentages are persisted even when invalid; check
        validation(name) to show the user where they stand. save_all()
        is where validity is enforced.
        
        Raises:
            UnknownSplit: If no split has this name
            InvalidRatio: If a percentage is NaN or infinite
        """
        index = self._index_or_raise(name, "update")
        components = [float(value) for value in components]
        if not all(math.isfinite(value) for value in components):
            error = InvalidRatio(NOT_FINITE_MESSAGE, validate(components))
            self._audit_logger.log_user_action_rejected("update", error, name=name)
            raise error
        updated = self._entries[index].with_components(components)
        
        new_entries = self._entries[:index] + (updated,) + self._entries[index + 1:]
        self._commit(new_entries)
        self._audit_logger.log_split_updated(
            updated.name,
            list(updated.components),
            is_valid=validate(updated.components).is_valid,
        )
        return new_entries
    
    def delete(self, name: str) -> tuple[SplitRatio, ...]:
        """
        Remove a split and persist.
        
        Raises:
            UnknownSplit: If no split has this name
            LastEntryError: If it is the only split left
        """
        index = self._index_or_raise(name, "delete")
        if len(self._entries) == 1:
            error = LastEntryError()
            self._audit_logger.log_user_action_rejected("delete", error, name=name)
            raise error
        
        removed = self._entries[index]
        new_entries = self._entries[:index] + self._entries[index + 1:]
        self._commit(new_entries)
        self._audit_logger.log_split_deleted(removed.name)
        return new_entries
    
    def save_all(
        self,
        entries: Union[Mapping[str, SplitRatio], Iterable[SplitRatio]],
    ) -> tuple[SplitRatio, ...]:
        """
        Replace every saved split with `entries`, all or nothing.
        
        Raises:
            ValidationError: If any entry is not a valid ratio (lists each)
            LastEntryError: If `entries` is empty
            DuplicateName: If two entries share a name
        """
        if isinstance(entries, Mapping):
            entries = entries.values()
        new_entries = tuple(entries)
        
        try:
            invalid = []
            for entry in new_entries:
                result = validate(entry.components)
                if not result.is_valid:
                    invalid.append((entry.name, result))
            if invalid:
                raise ValidationError(invalid)
            
            if not new_entries:
                raise LastEntryError()
            
            seen = set()
            for entry in new_entries:
                if entry.key in seen:
                    raise DuplicateName(entry.name)
                seen.add(entry.key)
        except SplitError as e:
            self._audit_logger.log_user_action_rejected("save", e)
            raise
        
        self._commit(new_entries)
        self._audit_logger.log_splits_saved([entry.name for entry in new_entries])
        return new_entries
    
    def reset(self) -> tuple[SplitRatio, ...]:
        """
        Forget every saved split and go back to the defaults.
        
        Destructive and irreversible.
        """
        try:
            self._store.remove_item(self._key)
        except StorageError as e:
            self._storage_failed("remove", e)
        
        self._commit(DEFAULT_SPLITS)
        self._audit_logger.log_splits_reset()
        return DEFAULT_SPLITS
    
    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    
    def _index_or_raise(self, name: str, action: str) -> int:
        index = find_index(self._entries, name)
        if index is None:
            error = UnknownSplit(name)
            self._audit_logger.log_user_action_rejected(action, error, name=name)
            raise error
        return index
    
    def _commit(self, new_entries: tuple[SplitRatio, ...]) -> None:
        self._entries = new_entries
        self._persist(new_entries)
    
    def _persist(self, entries: tuple[SplitRatio, ...]) -> None:
        try:
            self._store.set_item(self._key, serialize_splits(entries))
        except StorageError as e:
            self._storage_failed("write", e)
        else:
            self.storage_error = None
    
    def _storage_failed(self, operation: str, error: StorageError) -> None:
        self.storage_error = error
        self._audit_logger.log_storage_failed(operation, error)
