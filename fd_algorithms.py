"""
Алгоритмы для работы с функциональными зависимостями
"""
from itertools import combinations
from typing import AbstractSet, FrozenSet, Iterable, Iterator, List, Optional, Sequence

from exceptions import InternalInvariantViolation, TooManyAttributes
from logging_config import get_logger
from models import Attribute, FunctionalDependency, Relation
from settings import get_settings

logger = get_logger(__name__)


class FDAlgorithms:
    """Класс с алгоритмами для работы с функциональными зависимостями"""

    @staticmethod
    def _closure_pass_limit(universe_size: int, fd_count: int) -> int:
        """Максимальное число проходов по ФЗ при вычислении замыкания"""
        return universe_size + fd_count + 1

    @staticmethod
    def closure(attributes: Iterable[Attribute], fds: Sequence[FunctionalDependency]) -> FrozenSet[Attribute]:
        """
        Вычисление замыкания множества атрибутов

        Args:
            attributes: Множество атрибутов (может быть пустым)
            fds: Список функциональных зависимостей

        Returns:
            Наименьшее множество, содержащее attributes и замкнутое относительно fds

        Raises:
            InternalInvariantViolation: если итерация не сошлась за допустимое число проходов
        """
        closure = set(attributes)
        universe = set(closure)
        for fd in fds:
            universe.update(fd.determinant, fd.dependent)
        limit = FDAlgorithms._closure_pass_limit(len(universe), len(fds))

        passes = 0
        changed = True
        while changed:
            passes += 1
            if passes > limit:
                raise InternalInvariantViolation(
                    f"Замыкание не сошлось за {limit} проходов по {len(fds)} ФЗ"
                )
            changed = False
            for fd in fds:
                # Если детерминант ФЗ содержится в замыкании
                if fd.determinant.issubset(closure):
                    new_attrs = fd.dependent - closure
                    if new_attrs:
                        closure.update(new_attrs)
                        changed = True

        return frozenset(closure)

    @staticmethod
    def subsets(attributes: Iterable[Attribute], max_attributes: Optional[int] = None) -> Iterator[FrozenSet[Attribute]]:
        """
        Все непустые подмножества в порядке возрастания мощности.
        Внутри одного размера порядок задается сортировкой атрибутов по имени.

        Raises:
            TooManyAttributes: если атрибутов больше допустимого предела
        """
        ordered = sorted(set(attributes), key=lambda attr: attr.name)
        limit = max_attributes if max_attributes is not None else get_settings().max_attributes
        # Проверка выполняется сразу, а не при первой итерации генератора
        if len(ordered) > limit:
            raise TooManyAttributes(len(ordered), limit)
        return FDAlgorithms._iter_subsets(ordered)

    @staticmethod
    def _iter_subsets(ordered: List[Attribute]) -> Iterator[FrozenSet[Attribute]]:
        for r in range(1, len(ordered) + 1):
            for combo in combinations(ordered, r):
                yield frozenset(combo)

    @staticmethod
    def is_superkey(attributes: Iterable[Attribute], relation: Relation) -> bool:
        """
        Проверка, является ли множество атрибутов суперключом

        Args:
            attributes: Множество атрибутов
            relation: Отношение

        Returns:
            True, если замыкание атрибутов покрывает все отношение
        """
        closure = FDAlgorithms.closure(attributes, relation.functional_dependencies)
        return relation.get_all_attributes_set().issubset(closure)

    @staticmethod
    def find_candidate_keys(
            attributes: Iterable[Attribute],
            fds: Sequence[FunctionalDependency],
            max_attributes: Optional[int] = None
    ) -> List[FrozenSet[Attribute]]:
        """
        Найти все потенциальные (минимальные) ключи

        Подмножества перебираются от меньших к большим, поэтому надмножества
        уже найденных ключей пропускаются без вычисления замыкания.

        Returns:
            Список ключей в порядке обнаружения
        """
        universe = frozenset(attributes)
        if not universe:
            return []

        # Без ФЗ ни одно собственное подмножество не может быть суперключом
        if not fds:
            return [universe]

        keys: List[FrozenSet[Attribute]] = []
        for subset in FDAlgorithms.subsets(universe, max_attributes):
            if any(key.issubset(subset) for key in keys):
                continue

            if universe.issubset(FDAlgorithms.closure(subset, fds)):
                # Удаляем ключи, которые являются надмножествами найденного
                keys = [key for key in keys if not subset < key]
                keys.append(subset)

        logger.debug("Найдено потенциальных ключей: %d для %d атрибутов", len(keys), len(universe))
        return keys

    @staticmethod
    def prime_attributes(candidate_keys: Iterable[AbstractSet[Attribute]]) -> FrozenSet[Attribute]:
        """Простые атрибуты (входящие хотя бы в один ключ)"""
        prime_attrs = set()
        for key in candidate_keys:
            prime_attrs.update(key)
        return frozenset(prime_attrs)
