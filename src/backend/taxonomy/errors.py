"""
Exceptions for the category taxonomy.

A broken taxonomy is fatal and stops the service from starting.
A lookup miss is not an exception: resolver calls return None.
"""


class CategoryError(Exception):
    """Base exception for category taxonomy errors."""
    pass


class TaxonomyConfigurationError(CategoryError):
    """Raised when the static taxonomy definition is structurally invalid."""

    def __init__(self, problems):
        self.problems = list(problems)
        super().__init__(
            "Invalid category taxonomy: " + "; ".join(self.problems)
        )


class CategoryNotFoundError(CategoryError):
    """Raised by strict lookups when no category matches a reference."""
    pass
