"""
Модуль с классами для представления данных реляционной модели
"""
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Tuple
from dataclasses import dataclass, field, replace
from enum import Enum

from exceptions import InternalInvariantViolation

# Признаки неатомарного типа (массивы, составные и вложенные структуры)
NON_ATOMIC_TYPE_MARKERS = ("[]", "array", "composite", "json", "object")


class NormalForm(Enum):
    """Перечисление нормальных форм"""
    UNNORMALIZED = "Ненормализованная"
    FIRST_NF = "1НФ"
    SECOND_NF = "2НФ"
    THIRD_NF = "3НФ"
    BCNF = "НФБК"


def sorted_names(attributes: Iterable["Attribute"]) -> List[str]:
    """Имена атрибутов в лексикографическом порядке"""
    return sorted(attr.name for attr in attributes)


def format_attributes(attributes: Iterable["Attribute"]) -> str:
    return "{" + ", ".join(sorted_names(attributes)) + "}"


@dataclass(frozen=True)
class Attribute:
    """Класс для представления атрибута отношения"""
    name: str
    # Тип не участвует в сравнении: атрибут определяется именем
    data_type: str = field(default="VARCHAR", compare=False)

    def is_atomic(self) -> bool:
        """Проверка, является ли тип атрибута атомарным (требование 1НФ)"""
        type_tag = self.data_type.lower()
        return not any(marker in type_tag for marker in NON_ATOMIC_TYPE_MARKERS)

    def __repr__(self):
        return f"{self.name}"


@dataclass(frozen=True)
class FunctionalDependency:
    """Класс для представления функциональной зависимости"""
    determinant: FrozenSet[Attribute]
    dependent: FrozenSet[Attribute]

    def __post_init__(self):
        object.__setattr__(self, "determinant", frozenset(self.determinant))
        object.__setattr__(self, "dependent", frozenset(self.dependent))

    def __repr__(self):
        return f"{format_attributes(self.determinant)} → {format_attributes(self.dependent)}"

    def is_trivial(self) -> bool:
        """Проверка, является ли ФЗ тривиальной"""
        return self.dependent.issubset(self.determinant)

    def is_degenerate(self) -> bool:
        """ФЗ с пустой левой или правой частью"""
        return not self.determinant or not self.dependent

    def attributes(self) -> FrozenSet[Attribute]:
        return self.determinant | self.dependent

    def to_dict(self) -> Dict[str, List[str]]:
        return {"left": sorted_names(self.determinant), "right": sorted_names(self.dependent)}


@dataclass(frozen=True)
class Relation:
    """Класс для представления отношения (схемы таблицы)"""
    name: str
    attributes: Tuple[Attribute, ...] = ()
    functional_dependencies: Tuple[FunctionalDependency, ...] = ()
    primary_key: FrozenSet[Attribute] = frozenset()

    def __post_init__(self):
        object.__setattr__(self, "attributes", tuple(self.attributes))
        object.__setattr__(self, "functional_dependencies", tuple(self.functional_dependencies))
        object.__setattr__(self, "primary_key", frozenset(self.primary_key))

    def get_attribute_by_name(self, name: str) -> Optional[Attribute]:
        """Получить атрибут по имени"""
        for attr in self.attributes:
            if attr.name == name:
                return attr
        return None

    def get_all_attributes_set(self) -> FrozenSet[Attribute]:
        """Получить все атрибуты как множество"""
        return frozenset(self.attributes)

    def with_primary_key(self, key: Iterable[Attribute]) -> "Relation":
        """Копия отношения с заданным первичным ключом"""
        return replace(self, primary_key=frozenset(key))

    def signature(self) -> Tuple[str, ...]:
        """Отсортированный набор имен атрибутов - идентификатор схемы при декомпозиции"""
        return tuple(sorted_names(self.attributes))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "attributes": [attr.name for attr in self.attributes],
            "primaryKey": sorted_names(self.primary_key),
            "dependencies": [fd.to_dict() for fd in self.functional_dependencies],
        }

    def __repr__(self):
        attrs_str = ", ".join([attr.name for attr in self.attributes])
        return f"{self.name}({attrs_str})"


@dataclass(frozen=True)
class NormalFormReport:
    """Результат проверки нормальных форм"""
    is_1nf: bool
    is_2nf: bool
    is_3nf: bool
    is_bcnf: bool

    def __post_init__(self):
        # Каждая следующая форма возможна только при выполнении предыдущей
        chain = (self.is_1nf, self.is_2nf, self.is_3nf, self.is_bcnf)
        for previous, current in zip(chain, chain[1:]):
            if current and not previous:
                raise InternalInvariantViolation(f"Несогласованный отчет о нормальных формах: {chain}")

    def highest_form(self) -> NormalForm:
        """Наивысшая выполненная нормальная форма"""
        if self.is_bcnf:
            return NormalForm.BCNF
        if self.is_3nf:
            return NormalForm.THIRD_NF
        if self.is_2nf:
            return NormalForm.SECOND_NF
        if self.is_1nf:
            return NormalForm.FIRST_NF
        return NormalForm.UNNORMALIZED

    def to_dict(self) -> Dict[str, bool]:
        return {
            "is1NF": self.is_1nf,
            "is2NF": self.is_2nf,
            "is3NF": self.is_3nf,
            "isBCNF": self.is_bcnf,
        }


@dataclass(frozen=True)
class DecompositionStep:
    """Класс для представления шага декомпозиции"""
    original_relation: Relation
    resulting_relations: Tuple[Relation, ...]
    reason: str
    violated_dependency: Optional[FunctionalDependency] = None

    def __repr__(self):
        result_str = ", ".join([rel.name for rel in self.resulting_relations])
        return f"Декомпозиция {self.original_relation.name} → [{result_str}]: {self.reason}"


@dataclass(frozen=True)
class NormalizationResult:
    """Класс для представления результата нормализации"""
    original_relation: Relation
    report: NormalFormReport
    candidate_keys: Tuple[FrozenSet[Attribute], ...]
    decomposed_relations: Tuple[Relation, ...]
    steps: Tuple[DecompositionStep, ...] = ()
    preserved_dependencies: Tuple[FunctionalDependency, ...] = ()
    lost_dependencies: Tuple[FunctionalDependency, ...] = ()

    def is_dependency_preserving(self) -> bool:
        """Все ли исходные ФЗ выводимы из ФЗ полученных отношений"""
        return len(self.lost_dependencies) == 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "normalForms": self.report.to_dict(),
            "candidateKeys": [sorted_names(key) for key in self.candidate_keys],
            "decomposition": [rel.to_dict() for rel in self.decomposed_relations],
        }
