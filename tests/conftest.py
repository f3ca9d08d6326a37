"""Общие фикстуры тестов."""

import pytest

from models import Attribute, FunctionalDependency, Relation
from settings import reset_settings


def build_relation(attributes, *fds, name="R", types=None):
    """
    Собрать отношение из кратких записей: build_relation("ABC", "A->B", "B->C").
    Атрибуты - строка из однобуквенных имен или список имен, ФЗ - "A,B->C".
    """
    types = types or {}
    attrs = [Attribute(a, types[a]) if a in types else Attribute(a) for a in attributes]
    by_name = {attr.name: attr for attr in attrs}

    deps = []
    for text in fds:
        left, right = text.split("->")
        deps.append(FunctionalDependency(
            {by_name[n.strip()] for n in left.split(",") if n.strip()},
            {by_name[n.strip()] for n in right.split(",") if n.strip()},
        ))

    return Relation(name, attrs, deps)


@pytest.fixture
def make_relation():
    return build_relation


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    """Каждый тест видит настройки по умолчанию"""
    for var in (
        "NORMALIZER_MAX_ATTRIBUTES",
        "NORMALIZER_DEFAULT_TABLE_NAME",
        "NORMALIZER_BENCHMARK_OUTPUT_DIR",
    ):
        monkeypatch.delenv(var, raising=False)
    reset_settings()
    yield
    reset_settings()
