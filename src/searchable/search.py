"""Search registry: fans one term out to every registered aspect.

Example
-------
    search = (
        Search(session=session)
        .register_model(User, "name", "email")
        .register_aspect(DocsSearchAspect)
    )
    results = search.perform("taylor")
    results.group_by_type()  # {"users": [...], "docs": [...]}
"""

from __future__ import annotations

import asyncio
from typing import Any, List, Optional, Type, Union

from sqlalchemy.orm import Session, sessionmaker

from searchable.aspects.base import SearchAspect
from searchable.aspects.model import ModelSearchAspect, attribute_spec
from searchable.collection import SearchResultCollection
from searchable.config import Settings
from searchable.exceptions import ConfigError, InvalidSearchAspect
from searchable.log import get_logger
from searchable.results import SearchResult

logger = get_logger(__name__)


class Search:
    """Registry of search aspects for one search session.

    Parameters
    ----------
    session: Session | None
        Session shared by every model aspect without a session of its own.
    session_factory: sessionmaker | None
        Used instead of ``session``: each model aspect opens a short-lived
        session per fetch. Required by `perform_async`.
    max_concurrency: int
        Upper bound on aspects running at once in `perform_async`.
    """

    def __init__(
        self,
        *,
        session: Optional[Session] = None,
        session_factory: Optional[sessionmaker[Session]] = None,
        max_concurrency: int = 4,
    ) -> None:
        if max_concurrency < 1:
            raise ConfigError("max_concurrency must be at least 1.")
        self.session = session
        self.session_factory = session_factory
        self.max_concurrency = max_concurrency
        self._aspects: List[SearchAspect] = []

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        session: Optional[Session] = None,
        session_factory: Optional[sessionmaker[Session]] = None,
    ) -> "Search":
        return cls(
            session=session,
            session_factory=session_factory,
            max_concurrency=settings.search.max_concurrency,
        )

    # ----- Registration -----

    def register_aspect(self, aspect: Union[SearchAspect, Type[SearchAspect]]) -> "Search":
        """Register an aspect instance, or an aspect class to default-construct."""
        if isinstance(aspect, type):
            if not issubclass(aspect, SearchAspect):
                raise InvalidSearchAspect(f"`{aspect.__qualname__}` is not a SearchAspect.")
            aspect = aspect()
        if not isinstance(aspect, SearchAspect):
            raise InvalidSearchAspect(f"{aspect!r} is not a SearchAspect.")
        if isinstance(aspect, ModelSearchAspect) and aspect.get_search() is None:
            aspect.set_search(self)
        self._aspects.append(aspect)
        return self

    def register_model(self, model: Any, *attributes: Any) -> "Search":
        """Register a model aspect.

        ``attributes`` are attribute names, a list of names, or one callable
        receiving the new `ModelSearchAspect` to configure it.
        """
        return self.register_aspect(self.configure_model(model, *attributes))

    def configure_model(self, model: Any, *attributes: Any) -> ModelSearchAspect:
        """Return an unregistered model aspect bound to this registry.

        Finish with ``.register()``::

            search.configure_model(User, "name").add_scope("active").register()
        """
        return ModelSearchAspect(model, attribute_spec(attributes)).set_search(self)

    def get_search_aspects(self) -> List[SearchAspect]:
        return list(self._aspects)

    # ----- Searching -----

    def perform(self, term: str) -> SearchResultCollection:
        """Run ``term`` against every aspect in registration order.

        The first failing aspect aborts the whole search.
        """
        logger.debug("Searching %r across %d aspects", term, len(self._aspects))
        results: List[SearchResult] = []
        for aspect in self._aspects:
            results.extend(self._run_aspect(aspect, term))
        return SearchResultCollection(results)

    async def perform_async(self, term: str) -> SearchResultCollection:
        """Run aspects concurrently in worker threads.

        Results keep registration order. When an aspect fails, aspects still
        waiting for a slot are cancelled and the error is raised.
        """
        self._check_thread_safe_sessions()
        logger.debug(
            "Searching %r across %d aspects (max_concurrency=%d)",
            term,
            len(self._aspects),
            self.max_concurrency,
        )
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def _run(aspect: SearchAspect) -> List[SearchResult]:
            async with semaphore:
                return await asyncio.to_thread(self._run_aspect, aspect, term)

        tasks = [asyncio.create_task(_run(aspect)) for aspect in self._aspects]
        try:
            batches = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            # Let cancelled tasks unwind before the error propagates
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
        return SearchResultCollection(result for batch in batches for result in batch)

    def _check_thread_safe_sessions(self) -> None:
        if self.session is not None:
            raise ConfigError(
                "perform_async cannot share one Session across threads; "
                "configure the Search with a session_factory instead."
            )
        seen = set()
        for aspect in self._aspects:
            if not isinstance(aspect, ModelSearchAspect):
                continue
            bound = aspect.get_search()
            session = aspect.session
            if session is None:
                session = getattr(bound, "session", None)
            if session is None:
                continue
            if id(session) in seen:
                raise ConfigError(
                    f"{aspect!r} shares its Session with another aspect; "
                    "perform_async runs aspects in separate threads."
                )
            seen.add(id(session))

    def _run_aspect(self, aspect: SearchAspect, term: str) -> List[SearchResult]:
        search_type = aspect.get_type()
        if isinstance(aspect, ModelSearchAspect):
            hits = aspect.get_results(term, search=self)
        else:
            hits = aspect.get_results(term)
        results = [result.with_type(search_type) for result in hits]
        logger.debug("Aspect %s returned %d results", search_type, len(results))
        return results
