"""
Editing buffer for the "Manage Split Ratios" dialog.

The user adds, re-types and deletes ratios in a working copy. Nothing is
written until save(), which hands the whole buffer to
SplitRegistry.save_all() and so is all-or-nothing. The buffer may be
temporarily empty or hold invalid ratios; save() refuses both.

Each edit returns the buffer as it stands after the edit.
"""

from split_calculator.engine.parser import parse
from split_calculator.engine.validator import validate
from split_calculator.errors import UnknownSplit
from split_calculator.models.split import RatioValidation, SplitRatio
from split_calculator.registry.registry import (
    SplitRegistry,
    build_new_entry,
    find_index,
)


class SplitEditor:
    """Working copy of a registry's splits."""
    
    def __init__(self, registry: SplitRegistry):
        self._registry = registry
        self._buffer: list[SplitRatio] = list(registry.entries)
    
    @property
    def entries(self) -> tuple[SplitRatio, ...]:
        return tuple(self._buffer)
    
    @property
    def is_empty(self) -> bool:
        return not self._buffer
    
    @property
    def has_changes(self) -> bool:
        return self.entries != self._registry.entries
    
    def preview(self, text: str) -> RatioValidation:
        """Validation of percentages typed for a new split, before adding."""
        return validate(parse(text))
    
    def validations(self) -> list[tuple[SplitRatio, RatioValidation]]:
        """Each buffered split with its current validation."""
        return [(entry, validate(entry.components)) for entry in self._buffer]
    
    def is_changed(self, name: str, text: str) -> bool:
        """
        Whether `text` parses to different percentages than the buffered split.
        
        "60 40" and "60, 40" are the same edit.
        
        Raises:
            UnknownSplit: If the buffer has no split with this name
        """
        index = self._index_or_raise(name)
        return tuple(parse(text)) != self._buffer[index].components
    
    def add(self, name: str, text: str) -> tuple[SplitRatio, ...]:
        """
        Append a new split parsed from `text`.
        
        Raises:
            EmptyName, InvalidRatio, DuplicateName
        """
        entry = build_new_entry(name, parse(text), self._buffer)
        self._buffer = self._buffer + [entry]
        return self.entries
    
    def set_components(self, name: str, text: str) -> tuple[SplitRatio, ...]:
        """
        Re-type the percentages of a buffered split. Invalid input is kept.
        
        Raises:
            UnknownSplit: If the buffer has no split with this name
        """
        index = self._index_or_raise(name)
        updated = self._buffer[index].with_components(parse(text))
        self._buffer = self._buffer[:index] + [updated] + self._buffer[index + 1:]
        return self.entries
    
    def delete(self, name: str) -> tuple[SplitRatio, ...]:
        """
        Drop a split from the buffer. May leave the buffer empty.
        
        Raises:
            UnknownSplit: If the buffer has no split with this name
        """
        index = self._index_or_raise(name)
        self._buffer = self._buffer[:index] + self._buffer[index + 1:]
        return self.entries
    
    def save(self) -> tuple[SplitRatio, ...]:
        """
        Commit the buffer to the registry.
        
        Raises:
            ValidationError, LastEntryError, DuplicateName
        """
        saved = self._registry.save_all(self._buffer)
        self._buffer = list(saved)
        return saved
    
    def discard(self) -> tuple[SplitRatio, ...]:
        """Throw away unsaved edits."""
        self._buffer = list(self._registry.entries)
        return self.entries
    
    def reset(self) -> tuple[SplitRatio, ...]:
        """Reset the registry to its defaults and reload the buffer."""
        self._buffer = list(self._registry.reset())
        return self.entries
    
    def _index_or_raise(self, name: str) -> int:
        index = find_index(self._buffer, name)
        if index is None:
            raise UnknownSplit(name)
        return index
