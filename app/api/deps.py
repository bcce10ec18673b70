# app/api/deps.py
"""FastAPI dependencies handing the app-scoped resources to route handlers."""

from typing import Callable

from fastapi import Request

from app.db.engine import Database


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_seeder(request: Request) -> Callable[[], dict]:
    return request.app.state.seeder
