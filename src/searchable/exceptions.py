"""Custom exception hierarchy for searchable.

All errors raised here are configuration or programming errors. They are
raised as early as possible and never retried, so callers can discriminate
error categories and decide what the user sees.
"""

from __future__ import annotations

from typing import Any


def _model_name(model: Any) -> str:
    if isinstance(model, str):
        return model
    return getattr(model, "__qualname__", None) or repr(model)


class SearchableError(Exception):
    """Base class for all searchable exceptions."""


class ConfigError(SearchableError):
    """Raised when configuration loading or validation fails."""


class InvalidSearchable(SearchableError):
    """Raised when an aspect is bound to something that cannot be searched."""

    @classmethod
    def not_a_model(cls, model: Any) -> "InvalidSearchable":
        return cls(f"`{_model_name(model)}` is not a SQLAlchemy mapped class.")

    @classmethod
    def does_not_implement_searchable(cls, model: Any) -> "InvalidSearchable":
        return cls(
            f"Model `{_model_name(model)}` does not implement the Searchable protocol "
            "(missing `get_search_result()`)."
        )


class NoSearchableAttributes(SearchableError):
    """Raised when a model aspect is queried without any searchable attribute."""

    @classmethod
    def for_model(cls, model: Any) -> "NoSearchableAttributes":
        return cls(f"There are no searchable attributes defined for `{_model_name(model)}`.")


class InvalidSearchAspect(SearchableError):
    """Raised when something that is not a SearchAspect is registered."""


class InvalidScope(SearchableError):
    """Raised when a recorded scope cannot be applied to the model query."""


class UnboundAspect(SearchableError):
    """Raised when an aspect needs a registry or session it was never given."""


class InvalidEagerLoad(SearchableError):
    """Raised when an eager-load path does not name a relationship."""
