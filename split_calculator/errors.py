"""
Domain errors for Split Calculator.

Every error carries a message that can be shown to the user as-is.
All of them are recovered at the user action that caused them; none
should end the session.
"""

from split_calculator.models.split import RatioValidation


class SplitError(Exception):
    """Base exception for user-correctable split problems."""
    
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class EmptyName(SplitError):
    """A split ratio needs a non-blank name."""
    
    def __init__(self):
        super().__init__("Please enter a name for the split")


class DuplicateName(SplitError):
    """Another split already uses this name (case-insensitive)."""
    
    def __init__(self, name: str):
        super().__init__(f'A split named "{name}" already exists')
        self.name = name


class InvalidRatio(SplitError):
    """The percentages are not all positive or do not sum to 100."""
    
    def __init__(self, message: str, validation: RatioValidation):
        super().__init__(message)
        self.validation = validation


class LastEntryError(SplitError):
    """The operation would leave no split ratios at all."""
    
    def __init__(self):
        super().__init__("At least one split ratio is required")


class UnknownSplit(SplitError):
    """No split ratio with this name exists."""
    
    def __init__(self, name: str):
        super().__init__(f'No split named "{name}"')
        self.name = name


class ValidationError(SplitError):
    """
    A batch save contained invalid ratios.
    
    `invalid` pairs each offending name with its validation, in batch order.
    """
    
    def __init__(self, invalid: list[tuple[str, RatioValidation]]):
        # engine imports this module, so format_percent is imported late
        from split_calculator.engine.money import format_percent
        
        lines = [
            f'"{name}": sum is {format_percent(result.sum)}% '
            f'(remaining: {format_percent(result.remaining)}%)'
            for name, result in invalid
        ]
        super().__init__(
            "Invalid splits - percentages must sum to 100:\n" + "\n".join(lines)
        )
        self.invalid = invalid


class InvalidTotal(SplitError, ValueError):
    """The entered total is not a usable dollar amount."""
