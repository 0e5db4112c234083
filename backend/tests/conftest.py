"""Shared fixtures: in-memory store, app client and signed tokens."""
import copy
from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from course_eval.core.security import Role, create_access_token, hash_password
from course_eval.core.store import (
    COURSES,
    PERIODS,
    RATINGS,
    SCHOOLS,
    SUBJECTS,
    USERS,
    StoreError,
    new_row,
)
from course_eval.main import create_app


class MemoryStore:
    """Dict-backed stand-in for SupabaseStore with the same call surface."""

    def __init__(self):
        self.tables: Dict[str, List[Dict[str, Any]]] = {}
        self.fail_bulk_insert = False

    def _rows(self, table: str) -> List[Dict[str, Any]]:
        return self.tables.setdefault(table, [])

    @staticmethod
    def _match(row, eq, in_) -> bool:
        for col, val in (eq or {}).items():
            if row.get(col) != val:
                return False
        for col, vals in (in_ or {}).items():
            if row.get(col) not in vals:
                return False
        return True

    def insert(self, table, row):
        stored = new_row(row)
        self._rows(table).append(stored)
        return copy.deepcopy(stored)

    def insert_many(self, table, rows):
        if self.fail_bulk_insert:
            raise StoreError(f"{table}: simulated failure")
        staged = [new_row(r) for r in rows]
        self._rows(table).extend(staged)
        return copy.deepcopy(staged)

    def update(self, table, entity_id, values):
        for row in self._rows(table):
            if row["id"] == entity_id:
                row.update(values)
                return copy.deepcopy(row)
        return None

    def delete(self, table, entity_id):
        rows = self._rows(table)
        before = len(rows)
        self.tables[table] = [r for r in rows if r["id"] != entity_id]
        return len(self.tables[table]) < before

    def get(self, table, entity_id) -> Optional[Dict[str, Any]]:
        return self.find_one(table, id=entity_id)

    def find_one(self, table, **eq):
        for row in self._rows(table):
            if self._match(row, eq, None):
                return copy.deepcopy(row)
        return None

    def find(self, table, *, eq=None, in_=None, order=None, desc=False, offset=0, limit=None, columns="*"):
        rows = [r for r in self._rows(table) if self._match(r, eq, in_)]
        key = order or "id"
        rows.sort(key=lambda r: (r.get(key) is None, r.get(key) if r.get(key) is not None else ""), reverse=desc)
        rows = rows[offset:]
        if limit is not None:
            rows = rows[:limit]
        return copy.deepcopy(rows)

    def count(self, table, eq=None):
        return len([r for r in self._rows(table) if self._match(r, eq, None)])


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def app(store):
    return create_app(store=store)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def seeded(store):
    """One school, course, period, two subjects and one student."""
    school = store.insert(SCHOOLS, {"id": "school-1", "name": "UNICAP"})
    course = store.insert(COURSES, {"id": "course-1", "name": "Sistemas para Internet", "school_id": school["id"]})
    student = store.insert(
        USERS,
        {
            "id": "user-1",
            "email": "aluno@unicap.br",
            "password": hash_password("secret123"),
            "name": "Ana",
            "surname": "Silva",
            "student_register": "2024001",
            "role": Role.STUDENT.value,
            "school_id": school["id"],
            "created_at": "2024-03-01T12:00:00Z",
        },
    )
    period = store.insert(PERIODS, {"id": "period-1", "order_index": 1, "user_id": student["id"]})
    algorithms = store.insert(
        SUBJECTS, {"id": "subject-1", "name": "Algoritmos", "course_id": course["id"], "period_id": period["id"]}
    )
    databases = store.insert(
        SUBJECTS, {"id": "subject-2", "name": "Banco de Dados", "course_id": course["id"], "period_id": None}
    )
    return {
        "school": school,
        "course": course,
        "student": student,
        "period": period,
        "subjects": [algorithms, databases],
    }


@pytest.fixture
def rate(store):
    """Insert a rating row directly into the store."""

    def _rate(subject_id, sentence, score, created_at="2024-05-10T09:00:00Z", user_id="user-1"):
        return store.insert(
            RATINGS,
            {
                "subject_id": subject_id,
                "sentence": sentence,
                "score": score,
                "user_id": user_id,
                "created_at": created_at,
            },
        )

    return _rate


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {create_access_token('admin-1', Role.ADMIN.value)}"}


@pytest.fixture
def student_headers():
    return {"Authorization": f"Bearer {create_access_token('user-1', Role.STUDENT.value)}"}
