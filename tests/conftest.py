from typing import Any, Callable, Iterator

import pytest
from sample_models import Base, SampleModel
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from searchable.storage import get_engine, init_db, make_session_factory


@pytest.fixture
def engine() -> Iterator[Engine]:
    engine = get_engine("sqlite://")
    init_db(engine, Base.metadata)
    yield engine
    engine.dispose()


@pytest.fixture
def file_engine(tmp_path: Any) -> Iterator[Engine]:
    # File-backed so worker threads get their own connections
    engine = get_engine(f"sqlite:///{tmp_path / 'search.db'}")
    init_db(engine, Base.metadata)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine: Engine) -> sessionmaker[Session]:
    return make_session_factory(engine)


@pytest.fixture
def session(session_factory: sessionmaker[Session]) -> Iterator[Session]:
    with session_factory() as session:
        yield session


@pytest.fixture
def create_model(session: Session) -> Callable[..., SampleModel]:
    def _create(**fields: Any) -> SampleModel:
        model = SampleModel(**fields)
        session.add(model)
        session.commit()
        return model

    return _create
