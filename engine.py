"""
Точка входа движка: проверка входных данных, анализ и сериализация результата
"""
from typing import Any, Dict, List, Mapping, Optional, Sequence

from decomposition import Decomposer
from exceptions import (
    InternalInvariantViolation, InvalidDependency, InvalidSchema, TooManyAttributes
)
from logging_config import get_logger
from models import Attribute, FunctionalDependency, NormalizationResult, Relation
from settings import get_settings

logger = get_logger(__name__)


def _parse_attributes(raw_attributes: Any, attribute_types: Mapping[str, str]) -> List[Attribute]:
    """Атрибуты задаются строками или словарями {"name": ..., "type": ...}"""
    if not isinstance(raw_attributes, (list, tuple)):
        raise InvalidSchema("Поле attributes должно быть списком")

    attributes = []
    seen = set()
    for item in raw_attributes:
        if isinstance(item, str):
            name, data_type = item, attribute_types.get(item)
        elif isinstance(item, Mapping) and isinstance(item.get("name"), str):
            name = item["name"]
            data_type = item.get("type")
            if data_type is None:
                data_type = attribute_types.get(name)
        else:
            raise InvalidSchema(f"Некорректное описание атрибута: {item!r}")

        if data_type is not None and not isinstance(data_type, str):
            raise InvalidSchema(f"Тип атрибута {name} должен быть строкой: {data_type!r}")

        if not name.strip():
            raise InvalidSchema("Имя атрибута не может быть пустым")
        if name in seen:
            raise InvalidSchema(f"Атрибут {name} указан несколько раз")
        seen.add(name)

        attributes.append(Attribute(name, data_type) if data_type else Attribute(name))

    return attributes


def validate_dependency(raw_dependency: Any, attributes: Sequence[Attribute]) -> FunctionalDependency:
    """
    Проверить и построить ФЗ из {"left": [...], "right": [...]}

    Raises:
        InvalidDependency: пустая часть, неизвестный атрибут или неверный формат
    """
    if not isinstance(raw_dependency, Mapping):
        raise InvalidDependency(f"Некорректное описание ФЗ: {raw_dependency!r}", raw_dependency)

    by_name = {attr.name: attr for attr in attributes}
    sides = []
    for side in ("left", "right"):
        names = raw_dependency.get(side)
        if isinstance(names, str) or not isinstance(names, (list, tuple)):
            raise InvalidDependency(f"Часть {side} ФЗ должна быть списком атрибутов", raw_dependency)
        if not names:
            raise InvalidDependency(f"Часть {side} ФЗ не может быть пустой", raw_dependency)

        unknown = [name for name in names if not isinstance(name, str) or name not in by_name]
        if unknown:
            raise InvalidDependency(
                f"ФЗ ссылается на отсутствующие атрибуты: {', '.join(map(str, unknown))}",
                raw_dependency
            )
        sides.append(frozenset(by_name[name] for name in names))

    return FunctionalDependency(sides[0], sides[1])


def parse_relation(payload: Mapping[str, Any]) -> Relation:
    """
    Построить отношение из входного словаря
    {"table_name", "attributes", "attribute_types", "dependencies"}
    """
    if not isinstance(payload, Mapping):
        raise InvalidSchema("Входные данные должны быть словарем")

    attribute_types = payload.get("attribute_types") or {}
    if not isinstance(attribute_types, Mapping):
        raise InvalidSchema("Поле attribute_types должно быть словарем")
    attributes = _parse_attributes(payload.get("attributes", []), attribute_types)
    dependencies = [
        validate_dependency(raw, attributes) for raw in payload.get("dependencies") or []
    ]
    table_name = payload.get("table_name") or get_settings().default_table_name

    return Relation(table_name, attributes, dependencies)


def analyze(relation: Relation, max_attributes: Optional[int] = None) -> NormalizationResult:
    """
    Ключи, нормальные формы и декомпозиция в НФБК для проверенного отношения

    Raises:
        TooManyAttributes: если отношение превышает предел атрибутов
    """
    limit = max_attributes if max_attributes is not None else get_settings().max_attributes
    if len(relation.attributes) > limit:
        raise TooManyAttributes(len(relation.attributes), limit)
    return Decomposer.decompose_to_bcnf(relation, limit)


def normalize(payload: Mapping[str, Any], max_attributes: Optional[int] = None) -> Dict[str, Any]:
    """
    Обработать один запрос: {"attributes", "dependencies"} ->
    {"normalForms", "candidateKeys", "decomposition"}
    """
    try:
        relation = parse_relation(payload)
        logger.info(
            "Анализ отношения %s: %d атрибутов, %d ФЗ",
            relation.name, len(relation.attributes), len(relation.functional_dependencies)
        )
        result = analyze(relation, max_attributes)
    except (InvalidSchema, InvalidDependency, TooManyAttributes) as e:
        logger.warning("Запрос отклонен: %s", e)
        raise
    except InternalInvariantViolation:
        logger.exception("Нарушен внутренний инвариант при нормализации")
        raise

    return result.to_dict()
