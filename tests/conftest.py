"""Pytest configuration and fixtures for course_service tests."""

from datetime import datetime
from typing import Any, Dict

import httpx
import pytest
from bson import ObjectId
from mongomock_motor import AsyncMongoMockClient

from course_service.auth import create_access_token
from course_service.data_service import CourseDataService
from course_service.main import app, get_data_service


# ============================================================================
# Document helpers
# ============================================================================


def make_course(**overrides: Any) -> Dict[str, Any]:
    """Build a stored course document with sensible defaults."""
    course = {
        "_id": ObjectId(),
        "title": "Intro to Python",
        "description": "Learn Python from scratch",
        "instructor": "Dr. Smith",
        "price": 20,
        "category": "Programming",
        "syllabus": "Variables, loops, functions",
        "duration": "8 weeks",
        "level": "Beginner",
        "batches": [],
        "thumbnail": None,
        "isPublished": False,
        "createdBy": None,
        "createdAt": datetime(2024, 1, 1),
        "updatedAt": datetime(2024, 1, 1),
    }
    course.update(overrides)
    return course


def batch(current: Any = 0, **overrides: Any) -> Dict[str, Any]:
    data = {
        "_id": ObjectId(),
        "name": "Batch",
        "startDate": datetime(2024, 2, 1),
        "endDate": datetime(2024, 5, 1),
        "maxStudents": 30,
        "currentStudents": current,
    }
    data.update(overrides)
    return data


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def mock_db():
    client = AsyncMongoMockClient()
    return client["course_service_test"]


@pytest.fixture
def service(mock_db):
    return CourseDataService(mock_db)


@pytest.fixture
async def owner(mock_db):
    user = {"_id": ObjectId(), "fullName": "Ada Lovelace", "email": "ada@example.com", "password": "hashed"}
    await mock_db.users.insert_one(user)
    return user


@pytest.fixture
def auth_token(owner):
    return create_access_token(str(owner["_id"]))


@pytest.fixture
async def client(service):
    app.dependency_overrides[get_data_service] = lambda: service
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as http_client:
        yield http_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_client(client, auth_token):
    client.cookies.set("token", auth_token)
    return client


@pytest.fixture
def course_payload():
    return {
        "title": "Algorithms",
        "description": "Sorting, searching and graphs",
        "instructor": "Dr. Knuth",
        "price": 49.99,
        "category": "Computer Science",
        "syllabus": "Big-O, sorting, graphs",
        "duration": "10 weeks",
        "level": "Intermediate",
        "batches": [
            {"name": "Spring", "startDate": "2024-03-01T00:00:00", "endDate": "2024-06-01T00:00:00", "maxStudents": 30},
        ],
        "thumbnail": "https://example.com/algo.png",
    }
