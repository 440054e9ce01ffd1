"""Mapped classes and aspects shared by the test suite."""

from __future__ import annotations

import time
from typing import List, Optional

from sqlalchemy import Boolean, ForeignKey, Integer, Select, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from searchable import SearchAspect, SearchResult


class Base(DeclarativeBase):
    pass


class SampleModel(Base):
    __tablename__ = "test_models"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[Optional[str]] = mapped_column(String(255), default=None)
    last_name: Mapped[Optional[str]] = mapped_column(String(255), default=None)
    email: Mapped[Optional[str]] = mapped_column(String(255), default=None)
    role: Mapped[Optional[str]] = mapped_column(String(64), default=None)
    active: Mapped[bool] = mapped_column(Boolean, default=False)

    comments: Mapped[List[SampleComment]] = relationship(back_populates="test_model")

    @classmethod
    def scope_active(cls, stmt: Select) -> Select:
        return stmt.where(cls.active.is_(True))

    @classmethod
    def scope_role(cls, stmt: Select, role: str) -> Select:
        return stmt.where(cls.role == role)

    def get_search_result(self) -> SearchResult:
        return SearchResult(self, self.name or "", url=f"/models/{self.id}")


class SampleComment(Base):
    __tablename__ = "test_comments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    test_model_id: Mapped[int] = mapped_column(ForeignKey("test_models.id"))
    body: Mapped[str] = mapped_column(String(255), default="")

    test_model: Mapped[SampleModel] = relationship(back_populates="comments")

    def get_search_result(self) -> SearchResult:
        return SearchResult(self, self.body)


class TypedModel(Base):
    __tablename__ = "typed_models"

    searchable_type = "people"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[Optional[str]] = mapped_column(String(255), default=None)

    def get_search_result(self) -> SearchResult:
        return SearchResult(self, self.name or "")


class UnsearchableModel(Base):
    __tablename__ = "unsearchable_models"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)


class NotAModel:
    def get_search_result(self) -> SearchResult:
        return SearchResult(self, "nope")


class CustomNameSearchAspect(SearchAspect):
    names = ["john doe", "jane doe", "alex"]

    def get_results(self, term: str) -> List[SearchResult]:
        return [SearchResult(name, name) for name in self.names if term in name]


class StaticSearchAspect(SearchAspect):
    """Returns fixed titles after an optional delay, counting calls."""

    def __init__(self, search_type: str, titles: List[str], delay: float = 0.0) -> None:
        self.search_type = search_type
        self.titles = titles
        self.delay = delay
        self.calls = 0

    def get_results(self, term: str) -> List[SearchResult]:
        self.calls += 1
        if self.delay:
            time.sleep(self.delay)
        return [SearchResult(title, title) for title in self.titles]


class FailingSearchAspect(SearchAspect):
    def get_results(self, term: str) -> List[SearchResult]:
        raise RuntimeError("source unavailable")
