from __future__ import annotations

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from app import create_app
from app.core.config import Config
from app.core.extensions import db
from app.core.models import Demanda, seed_demo_data
from app.demandas.types import DemandaSnapshot, DemandaStatus


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    SECRET_KEY = "test-secret"
    LOG_LEVEL = "WARNING"


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        db.create_all()
        seed_demo_data(db.session)
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def login_admin(client):
    def _login():
        return client.post(
            "/auth/login",
            json={"email": "admin@demandas.local", "password": "admin123"},
        )

    return _login


@pytest.fixture
def demanda_id(app):
    def _lookup(sged: str) -> int:
        return Demanda.query.filter_by(sged=sged).one().id

    return _lookup


@pytest.fixture
def open_demand():
    return DemandaSnapshot(id=1, data_inicial="2024-01-10", status=DemandaStatus.EM_ANDAMENTO)


@pytest.fixture
def finalized_demand():
    return DemandaSnapshot(
        id=1,
        data_inicial="2024-01-10",
        status=DemandaStatus.FINALIZADA,
        data_final="2024-02-01",
    )
