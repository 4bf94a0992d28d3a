from datetime import date, timedelta

import httpx
import pytest
from mongomock_motor import AsyncMongoMockClient

from app.main import app
from app.utils.email_utils import get_mailer
from profesiones.db.database import ensure_indexes, get_db

PASSWORD = "secreto123"

HORARIO_LUNES = {"horarios": [{"dia": "lunes", "horaInicio": "09:00", "horaFin": "12:00"}], "estado": "disponible"}


class Mailbox:
    def __init__(self):
        self.sent = []

    def send(self, to_email, subject, body):
        self.sent.append({"to": to_email, "subject": subject, "body": body})


def upcoming_monday() -> date:
    today = date.today()
    return today + timedelta(days=7 - today.weekday())


@pytest.fixture
async def db():
    database = AsyncMongoMockClient()["profesiones_test"]
    await ensure_indexes(database)
    return database


@pytest.fixture
def mailbox():
    return Mailbox()


@pytest.fixture
async def client(db, mailbox):
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_mailer] = lambda: mailbox.send
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def register_cliente(client):
    async def _register(email="ana@correo.com.uy", **extra):
        payload = {"email": email, "password": PASSWORD, "nombre": "Ana", "apellido": "Pérez", **extra}
        res = await client.post("/api/auth/registro/cliente", json=payload)
        assert res.status_code == 201, res.text
        return res.json()["data"]

    return _register


@pytest.fixture
def register_profesional(client):
    async def _register(email="luis@correo.com.uy", **extra):
        payload = {
            "email": email,
            "password": PASSWORD,
            "nombre": "Luis",
            "apellido": "Suárez",
            "profesion": "Electricista",
            "especialidades": ["instalaciones"],
            "disponibilidad": HORARIO_LUNES,
            **extra,
        }
        res = await client.post("/api/auth/registro/profesional", json=payload)
        assert res.status_code == 201, res.text
        return res.json()["data"]

    return _register


@pytest.fixture
def auth_headers(client):
    async def _headers(email, password=PASSWORD):
        res = await client.post("/api/auth/login", json={"email": email, "password": password})
        assert res.status_code == 200, res.text
        return {"Authorization": f"Bearer {res.json()['data']['token']}"}

    return _headers
