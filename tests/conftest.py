"""
School Dashboard - Test Configuration and Fixtures
"""
import asyncio
import os
from typing import AsyncGenerator, List, Optional

import pytest
from httpx import ASGITransport, AsyncClient

# Set testing environment
os.environ['API_KEY'] = ''
os.environ['SECRET_KEY'] = 'test-secret-key-for-testing-only'

from dashboard import SessionRegistry
from main import app, get_sessions
from schemas import Role, User
from store import SchoolStore


class FakeGenerator:
    """Records prompts and answers with a fixed result; can be held open with a gate."""

    def __init__(self, result: str = "Generated text"):
        self.result = result
        self.prompts: List[str] = []
        self.started = asyncio.Event()
        self.gate: Optional[asyncio.Event] = None

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        self.started.set()
        if self.gate is not None:
            await self.gate.wait()
        return self.result


@pytest.fixture
def admin_user() -> User:
    return User(username="admin@school.edu.np", name="School Administrator", role=Role.admin)


@pytest.fixture
def teacher_user() -> User:
    return User(username="teacher", name="Demo Teacher", role=Role.teacher)


@pytest.fixture
def student_user() -> User:
    return User(username="10", name="Class 10, Roll 7", role=Role.student)


@pytest.fixture
def generator() -> FakeGenerator:
    return FakeGenerator()


@pytest.fixture
def store() -> SchoolStore:
    """Fresh canonical data for each test"""
    return SchoolStore.with_defaults()


@pytest.fixture
def registry(store: SchoolStore, generator: FakeGenerator) -> SessionRegistry:
    return SessionRegistry(store, generator)


@pytest.fixture
async def client(registry: SessionRegistry) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with its own store and generator"""
    app.dependency_overrides[get_sessions] = lambda: registry

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def login(client: AsyncClient):
    """Log in and return the auth headers for that session"""
    async def _login(username: str, password: str, role: str) -> dict:
        response = await client.post(
            "/auth/login",
            json={"username": username, "password": password, "role": role},
        )
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['access_token']}"}

    return _login


@pytest.fixture
async def admin_headers(login) -> dict:
    return await login("admin@school.edu.np", "admin123", "admin")


@pytest.fixture
async def teacher_headers(login) -> dict:
    return await login("teacher", "teacher123", "teacher")


@pytest.fixture
async def student_headers(login) -> dict:
    return await login("10", "7", "student")
