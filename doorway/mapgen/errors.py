"""Exception types raised by the map generator."""
from __future__ import annotations


class GenerationError(Exception):
    """Base class for generation failures surfaced to callers."""


class IterationBudgetExceeded(GenerationError):
    def __init__(self, iterations: int, budget: int):
        super().__init__(f"iteration limit exceeded ({iterations} > {budget})")
        self.iterations = iterations
        self.budget = budget


class ConfigError(ValueError):
    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class CatalogError(ValueError):
    pass


__all__ = ["GenerationError", "IterationBudgetExceeded", "ConfigError", "CatalogError"]
