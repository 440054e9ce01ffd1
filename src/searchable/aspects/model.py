"""Search aspect over a SQLAlchemy mapped class.

The aspect is configured once (attributes, eager loads, scopes) and then
turns every search term into a single ``SELECT``:

    SELECT ... FROM <table>
    WHERE <scopes> AND (lower(a) LIKE '%t1%' OR lower(a) LIKE '%t2%' OR b = 't1' ...)

Rows are mapped to `SearchResult` through the model's ``get_search_result()``.
"""

from __future__ import annotations

import importlib
from contextlib import contextmanager
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    Dict,
    Iterable,
    Iterator,
    List,
    Optional,
    Tuple,
    Union,
)

from sqlalchemy import ColumnElement, Select, func, inspect, literal_column, or_, select
from sqlalchemy.orm import Mapper, RelationshipProperty, Session, selectinload

from searchable.aspects.base import SearchAspect
from searchable.attributes import SearchableAttribute, flatten
from searchable.exceptions import (
    InvalidEagerLoad,
    InvalidScope,
    InvalidSearchable,
    NoSearchableAttributes,
    UnboundAspect,
)
from searchable.log import get_logger
from searchable.results import Searchable, SearchResult

if TYPE_CHECKING:
    from searchable.search import Search

logger = get_logger(__name__)

AttributeSpec = Union[None, str, Iterable[Any], Callable[["ModelSearchAspect"], Any]]


def _resolve_model(model: Any) -> Any:
    # Dotted import paths are resolved at runtime, e.g. "app.models.User"
    if not isinstance(model, str):
        return model
    module_name, _, attr = model.rpartition(".")
    if not module_name:
        raise InvalidSearchable.not_a_model(model)
    try:
        return getattr(importlib.import_module(module_name), attr)
    except (ImportError, AttributeError) as exc:
        raise InvalidSearchable.not_a_model(model) from exc


def _is_mapped_class(model: Any) -> bool:
    if not isinstance(model, type):
        return False
    return isinstance(inspect(model, raiseerr=False), Mapper)


def attribute_spec(attributes: Tuple[Any, ...]) -> AttributeSpec:
    """Normalize ``*attributes`` positional arguments to a single spec."""
    if len(attributes) == 1 and callable(attributes[0]):
        return attributes[0]
    return list(attributes)


class ModelSearchAspect(SearchAspect):
    """Searches one mapped model over a set of searchable attributes."""

    def __init__(
        self,
        model: Any,
        attributes: AttributeSpec = None,
        *,
        session: Optional[Session] = None,
    ) -> None:
        model = _resolve_model(model)
        if not _is_mapped_class(model):
            raise InvalidSearchable.not_a_model(model)
        if not issubclass(model, Searchable):
            raise InvalidSearchable.does_not_implement_searchable(model)

        self.model = model
        self.session = session
        self._search: Optional[Search] = None
        self._attributes: List[SearchableAttribute] = []
        self._eager_load: List[str] = []
        self._scopes: Dict[str, Tuple[Any, ...]] = {}

        if isinstance(attributes, str):
            self._attributes = [SearchableAttribute.create(attributes)]
        elif callable(attributes):
            attributes(self)
        elif attributes is not None:
            self._attributes = SearchableAttribute.create_many(attributes)

    @classmethod
    def for_model(
        cls, model: Any, *attributes: Any, session: Optional[Session] = None
    ) -> "ModelSearchAspect":
        return cls(model, attribute_spec(attributes), session=session)

    def __repr__(self) -> str:
        return f"ModelSearchAspect({self.model.__name__}, attributes={self._attributes!r})"

    # ----- Builder -----

    def add_searchable_attribute(self, name: str, partial: bool = True) -> "ModelSearchAspect":
        self._attributes.append(SearchableAttribute.create(name, partial))
        return self

    def add_exact_searchable_attribute(self, name: str) -> "ModelSearchAspect":
        self._attributes.append(SearchableAttribute.create_exact(name))
        return self

    def with_eager_load(self, *relations: Any) -> "ModelSearchAspect":
        """Eager-load relationships of every matched row.

        Accepts names, lists of names, or dotted paths for nested relationships
        (``"comments.author"``).
        """
        self._eager_load.extend(str(r) for r in flatten(relations))
        return self

    def add_scope(self, name: str, *args: Any) -> "ModelSearchAspect":
        """Record a named scope applied to the query with ``args``.

        A scope resolves to the model classmethod ``scope_<name>(stmt, *args)``
        or, failing that, to a method of the ``Select`` itself (``where``,
        ``order_by``, ...). Registering a name again replaces its arguments.
        """
        if name in self._scopes:
            logger.warning(
                "Scope %r on %s registered twice; replacing arguments %r with %r",
                name,
                self.model.__name__,
                self._scopes[name],
                args,
            )
        self._scopes[name] = args
        return self

    def set_search(self, search: "Search") -> "ModelSearchAspect":
        self._search = search
        return self

    def get_search(self) -> Optional["Search"]:
        return self._search

    def register(self) -> "Search":
        """Append this aspect to the registry it was configured from."""
        if self._search is None:
            raise UnboundAspect(f"{self!r} is not bound to a Search registry.")
        return self._search.register_aspect(self)

    @property
    def attributes(self) -> List[SearchableAttribute]:
        return list(self._attributes)

    @property
    def eager_load(self) -> List[str]:
        return list(self._eager_load)

    @property
    def scopes(self) -> Dict[str, Tuple[Any, ...]]:
        return dict(self._scopes)

    # ----- Querying -----

    def get_type(self) -> str:
        searchable_type = getattr(self.model, "searchable_type", None)
        if searchable_type:
            return searchable_type
        return inspect(self.model).local_table.name

    def get_results(self, term: str, *, search: Optional["Search"] = None) -> List[SearchResult]:
        """Fetch the rows matching ``term``.

        ``search`` is the registry running the query; its session is used when
        the aspect has none of its own.
        """
        stmt = self.build_query(term)
        with self._session_scope(search) as session:
            rows = session.scalars(stmt).all()
            logger.debug("%s matched %d rows for %r", self.model.__name__, len(rows), term)
            return [row.get_search_result() for row in rows]

    def build_query(self, term: str) -> Select:
        """Build the statement `get_results` executes for ``term``."""
        if not self._attributes:
            raise NoSearchableAttributes.for_model(self.model)

        stmt = select(self.model).options(*self._eager_load_options())
        stmt = self._apply_scopes(stmt)
        return stmt.where(self._search_conditions(term))

    def _search_conditions(self, term: str) -> ColumnElement[bool]:
        # Literal split: consecutive spaces yield empty sub-terms
        sub_terms = term.split(" ")
        clauses: List[ColumnElement[bool]] = []
        for attribute in self._attributes:
            column = self._column(attribute.name)
            for sub_term in sub_terms:
                if attribute.partial:
                    clauses.append(func.lower(column).like(f"%{sub_term.lower()}%"))
                else:
                    clauses.append(column == sub_term)
        return or_(*clauses)

    def _column(self, name: str) -> Any:
        if name in inspect(self.model).all_orm_descriptors:
            return getattr(self.model, name)
        return literal_column(name)

    def _apply_scopes(self, stmt: Select) -> Select:
        for name, args in self._scopes.items():
            scope = getattr(self.model, f"scope_{name}", None)
            if callable(scope):
                stmt = scope(stmt, *args)
            else:
                method = getattr(stmt, name, None)
                if name.startswith("_") or not callable(method):
                    raise InvalidScope(
                        f"Scope `{name}` is neither `{self.model.__name__}.scope_{name}` "
                        "nor a method of the select statement."
                    )
                stmt = method(*args)
            if not isinstance(stmt, Select):
                raise InvalidScope(f"Scope `{name}` did not return a select statement.")
        return stmt

    def _eager_load_options(self) -> List[Any]:
        options = []
        for path in self._eager_load:
            owner = self.model
            loader = None
            for part in path.split("."):
                attr = getattr(owner, part, None)
                prop = getattr(attr, "property", None)
                if not isinstance(prop, RelationshipProperty):
                    raise InvalidEagerLoad(
                        f"`{part}` in `{path}` is not a relationship of `{owner.__name__}`."
                    )
                loader = selectinload(attr) if loader is None else loader.selectinload(attr)
                owner = prop.mapper.class_
            options.append(loader)
        return options

    @contextmanager
    def _session_scope(self, search: Optional["Search"] = None) -> Iterator[Session]:
        registries = [s for s in (search, self._search) if s is not None]
        session = self.session
        if session is None:
            session = next((r.session for r in registries if r.session is not None), None)
        if session is not None:
            yield session
            return
        factory = next(
            (r.session_factory for r in registries if r.session_factory is not None), None
        )
        if factory is None:
            raise UnboundAspect(
                f"{self!r} has no session: pass `session=` or register it on a Search "
                "with a session or session_factory."
            )
        # Short-lived session per fetch; rows stay usable after it closes
        with factory() as own_session:
            yield own_session
