"""Тесты входной точки движка."""

import pytest

from decomposition import Decomposer
from engine import analyze, normalize, parse_relation, validate_dependency
from exceptions import (
    InternalInvariantViolation, InvalidDependency, InvalidSchema, TooManyAttributes
)
from models import Attribute


def test_normalize_transitive_chain():
    payload = {
        "table_name": "Employees",
        "attributes": ["A", "B", "C"],
        "dependencies": [
            {"left": ["A"], "right": ["B"]},
            {"left": ["B"], "right": ["C"]},
        ],
    }

    assert normalize(payload) == {
        "normalForms": {"is1NF": True, "is2NF": True, "is3NF": False, "isBCNF": False},
        "candidateKeys": [["A"]],
        "decomposition": [
            {
                "name": "Employees_1",
                "attributes": ["B", "C"],
                "primaryKey": ["B"],
                "dependencies": [{"left": ["B"], "right": ["C"]}],
            },
            {
                "name": "Employees_2",
                "attributes": ["A", "B"],
                "primaryKey": ["A"],
                "dependencies": [{"left": ["A"], "right": ["B"]}],
            },
        ],
    }


def test_normalize_overlapping_keys():
    result = normalize({
        "attributes": ["A", "B", "C"],
        "dependencies": [
            {"left": ["B", "A"], "right": ["C"]},
            {"left": ["C"], "right": ["B"]},
        ],
    })

    assert result["normalForms"] == {"is1NF": True, "is2NF": True, "is3NF": True, "isBCNF": False}
    assert result["candidateKeys"] == [["A", "B"], ["A", "C"]]
    assert [t["attributes"] for t in result["decomposition"]] == [["B", "C"], ["A", "C"]]


def test_normalize_without_dependencies():
    result = normalize({"table_name": "Pairs", "attributes": ["X", "Y"], "dependencies": []})

    assert result == {
        "normalForms": {"is1NF": True, "is2NF": True, "is3NF": True, "isBCNF": True},
        "candidateKeys": [["X", "Y"]],
        "decomposition": [
            {"name": "Pairs", "attributes": ["X", "Y"], "primaryKey": ["X", "Y"], "dependencies": []},
        ],
    }


def test_normalize_empty_schema():
    assert normalize({"attributes": [], "dependencies": []}) == {
        "normalForms": {"is1NF": False, "is2NF": False, "is3NF": False, "isBCNF": False},
        "candidateKeys": [],
        "decomposition": [],
    }


def test_default_table_name_from_settings(monkeypatch):
    from settings import reset_settings

    monkeypatch.setenv("NORMALIZER_DEFAULT_TABLE_NAME", "Orders")
    reset_settings()

    relation = parse_relation({"attributes": ["A"]})
    assert relation.name == "Orders"


def test_attribute_types_are_used_for_1nf():
    as_objects = normalize({
        "attributes": [{"name": "A", "type": "INT"}, {"name": "B", "type": "VARCHAR[]"}],
        "dependencies": [{"left": ["A"], "right": ["B"]}],
    })
    as_mapping = normalize({
        "attributes": ["A", "B"],
        "attribute_types": {"B": "VARCHAR[]"},
        "dependencies": [{"left": ["A"], "right": ["B"]}],
    })

    assert as_objects["normalForms"]["is1NF"] is False
    assert as_objects == as_mapping


def test_parse_relation_keeps_declared_order_and_types():
    relation = parse_relation({
        "table_name": "T",
        "attributes": ["B", {"name": "A", "type": "DATE"}],
        "dependencies": [{"left": ["A"], "right": ["B"]}],
    })

    assert [a.name for a in relation.attributes] == ["B", "A"]
    assert relation.get_attribute_by_name("A").data_type == "DATE"
    assert relation.get_attribute_by_name("B").data_type == "VARCHAR"
    assert len(relation.functional_dependencies) == 1


def test_result_does_not_depend_on_input_order():
    first = normalize({
        "table_name": "R",
        "attributes": ["A", "B", "C", "D"],
        "dependencies": [{"left": ["A"], "right": ["B"]}, {"left": ["C"], "right": ["D"]}],
    })
    second = normalize({
        "table_name": "R",
        "attributes": ["D", "C", "B", "A"],
        "dependencies": [{"left": ["A"], "right": ["B"]}, {"left": ["C"], "right": ["D"]}],
    })

    assert first["candidateKeys"] == second["candidateKeys"] == [["A", "C"]]
    assert first["normalForms"] == second["normalForms"]


@pytest.mark.parametrize("dependency", [
    {"left": ["A"], "right": ["Z"]},
    {"left": ["Z"], "right": ["A"]},
    {"left": [], "right": ["B"]},
    {"left": ["A"], "right": []},
    {"left": "A", "right": ["B"]},
    {"left": ["A"]},
    ["A", "B"],
])
def test_invalid_dependencies_are_rejected(dependency):
    payload = {"attributes": ["A", "B"], "dependencies": [dependency]}

    with pytest.raises(InvalidDependency) as exc_info:
        normalize(payload)

    assert exc_info.value.dependency == dependency


def test_validate_dependency_builds_fd():
    attrs = [Attribute("A"), Attribute("B")]
    fd = validate_dependency({"left": ["A"], "right": ["A", "B"]}, attrs)

    assert fd.determinant == frozenset({attrs[0]})
    assert fd.dependent == frozenset(attrs)


@pytest.mark.parametrize("payload", [
    {"attributes": ["A", "A"]},
    {"attributes": ["A", " "]},
    {"attributes": "AB"},
    {"attributes": [1, 2]},
    {"attributes": [{"type": "INT"}]},
    {"attributes": ["A"], "attribute_types": ["A"]},
    {"attributes": [{"name": "A", "type": 5}]},
    {"attributes": ["A"], "attribute_types": {"A": 5}},
    ["A", "B"],
])
def test_invalid_schemas_are_rejected(payload):
    with pytest.raises(InvalidSchema):
        normalize(payload)


def test_too_many_attributes_are_refused():
    payload = {"attributes": [f"A{i}" for i in range(21)], "dependencies": []}

    with pytest.raises(TooManyAttributes) as exc_info:
        normalize(payload)

    assert exc_info.value.count == 21
    assert exc_info.value.limit == 20


def test_attribute_limit_can_be_lowered():
    relation = parse_relation({"attributes": ["A", "B", "C"]})

    with pytest.raises(TooManyAttributes):
        analyze(relation, max_attributes=2)
    assert analyze(relation, max_attributes=3).report.is_bcnf


def test_internal_errors_propagate(monkeypatch):
    monkeypatch.setattr(Decomposer, "_iteration_limit", staticmethod(lambda attribute_count: 1))

    with pytest.raises(InternalInvariantViolation):
        normalize({
            "attributes": ["A", "B", "C"],
            "dependencies": [{"left": ["A"], "right": ["B"]}, {"left": ["B"], "right": ["C"]}],
        })


def test_normalize_is_repeatable():
    payload = {
        "attributes": ["A", "B", "C", "D", "E"],
        "dependencies": [
            {"left": ["A"], "right": ["B"]},
            {"left": ["B", "C"], "right": ["D"]},
            {"left": ["D"], "right": ["E"]},
            {"left": ["E"], "right": ["A"]},
        ],
    }

    assert normalize(payload) == normalize(payload)
