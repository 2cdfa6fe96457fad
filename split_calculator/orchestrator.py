"""
Main Orchestrator for Split Calculator

Ties the split engine and the registry together for the presentation layer:
1. Calculate (total text + selected ratio -> shares -> reconciliation)
2. Manage ratios (open editor -> edit -> save -> keep the selection valid)

The presentation layer holds one CalculatorFlow per session and calls
nothing else.
"""

from typing import Optional

from split_calculator.audit import AuditLogger, configure_logging
from split_calculator.config import get_settings
from split_calculator.engine.calculator import (
    calculate,
    parse_total,
    resolve_selection,
)
from split_calculator.models.split import SplitCalculation, SplitRatio
from split_calculator.registry import DEFAULT_STORAGE_KEY, SplitEditor, SplitRegistry
from split_calculator.services.storage import (
    InMemoryStore,
    JsonFileStore,
    KeyValueStore,
)


class CalculatorFlow:
    """
    One session of the calculator.
    
    Tracks the selected ratio by name. If that ratio disappears (deleted,
    or the registry was reset) the first remaining ratio is used instead.
    """
    
    def __init__(self, registry: SplitRegistry):
        self._registry = registry
        self._selected_name: Optional[str] = None
        self._selected_name = self.selected.name
    
    @property
    def registry(self) -> SplitRegistry:
        return self._registry
    
    @property
    def selected(self) -> SplitRatio:
        ratio = resolve_selection(self._registry.entries, self._selected_name)
        if ratio is None:
            # load() never leaves the registry empty
            raise RuntimeError("Split registry is empty")
        return ratio
    
    def select(self, name: str) -> SplitRatio:
        """Select a ratio by name; unknown names select the first ratio."""
        self._selected_name = name
        ratio = self.selected
        self._selected_name = ratio.name
        return ratio
    
    def calculate(self, total_text: Optional[str]) -> SplitCalculation:
        """
        Split the entered total across the selected ratio.
        
        Raises:
            InvalidTotal: If the total text is not a usable amount
        """
        total = parse_total(total_text)
        return calculate(total, self.selected)
    
    def open_editor(self) -> SplitEditor:
        return SplitEditor(self._registry)
    
    def save_editor(self, editor: SplitEditor) -> SplitRatio:
        """
        Commit the editor's buffer and return the (possibly new) selection.
        
        Raises:
            ValidationError, LastEntryError, DuplicateName
        """
        editor.save()
        return self.select(self._selected_name)
    
    def reset_splits(self) -> SplitRatio:
        """Restore the default ratios and return the resulting selection."""
        self._registry.reset()
        return self.select(self._selected_name)


def create_store(use_storage: bool = True) -> KeyValueStore:
    """Build the configured key-value store."""
    if not use_storage:
        return InMemoryStore()
    
    settings = get_settings().storage
    if settings.backend == "memory":
        return InMemoryStore()
    return JsonFileStore(settings.resolved_path)


def create_app_components(
    use_storage: bool = True,
) -> tuple[CalculatorFlow, SplitRegistry, AuditLogger]:
    """
    Factory function to create all application components.
    
    Args:
        use_storage: Whether to use the configured durable store.
                    Set to False for an in-memory session.
                    
    Returns:
        (calculator_flow, registry, audit_logger)
    """
    app_settings = get_settings().app
    configure_logging(app_settings.log_level)
    audit_logger = AuditLogger()
    
    try:
        store = create_store(use_storage)
        storage_key = get_settings().storage.key
    except Exception as e:
        # Misconfigured storage: continue with an in-memory session
        audit_logger.log_storage_failed("configure", e)
        store = InMemoryStore()
        storage_key = DEFAULT_STORAGE_KEY
    
    registry = SplitRegistry(
        store=store,
        storage_key=storage_key,
        audit_logger=audit_logger,
    )
    registry.load()
    
    flow = CalculatorFlow(registry=registry)
    return flow, registry, audit_logger
