"""
Модуль с алгоритмом декомпозиции отношения в НФБК
"""
from collections import deque
from typing import Iterable, List, Optional, Sequence, Set, Tuple

from analyzer import NormalFormAnalyzer
from exceptions import InternalInvariantViolation
from fd_algorithms import FDAlgorithms
from logging_config import get_logger
from models import (
    Attribute, DecompositionStep, FunctionalDependency, NormalizationResult, Relation
)

logger = get_logger(__name__)


class Decomposer:
    """Класс для выполнения декомпозиции отношений"""

    @staticmethod
    def _iteration_limit(attribute_count: int) -> int:
        """Предел числа извлечений из очереди: различных схем не больше 2^n"""
        return 2 ** (attribute_count + 1) + 1

    @staticmethod
    def decompose(relation: Relation, max_attributes: Optional[int] = None) -> List[Relation]:
        """
        Декомпозиция отношения в НФБК

        Returns:
            Список отношений в НФБК, покрывающих все атрибуты исходного
        """
        relations, _ = Decomposer._decompose_with_steps(relation, max_attributes)
        return relations

    @staticmethod
    def _decompose_with_steps(
            relation: Relation,
            max_attributes: Optional[int] = None
    ) -> Tuple[List[Relation], List[DecompositionStep]]:
        """
        Очередь отношений с множеством уже обработанных сигнатур.
        Первичным ключом становится первый найденный потенциальный ключ.
        """
        if not relation.attributes:
            return [], []

        to_process = deque([relation])
        processed: Set[Tuple[str, ...]] = set()
        final_relations: List[Relation] = []
        steps: List[DecompositionStep] = []
        table_counter = 1
        iterations = 0
        limit = Decomposer._iteration_limit(len(relation.attributes))

        while to_process:
            iterations += 1
            if iterations > limit:
                raise InternalInvariantViolation(
                    f"Декомпозиция {relation.name} не завершилась за {limit} итераций"
                )

            current_rel = to_process.popleft()
            signature = current_rel.signature()
            if signature in processed:
                continue
            processed.add(signature)

            analyzer = NormalFormAnalyzer(current_rel, max_attributes)
            if not current_rel.primary_key and analyzer.candidate_keys:
                current_rel = current_rel.with_primary_key(analyzer.candidate_keys[0])

            violating_fd = analyzer.find_bcnf_violation()
            if violating_fd is None:
                # Отношение в НФБК
                final_relations.append(current_rel)
                continue

            closure = FDAlgorithms.closure(violating_fd.determinant, current_rel.functional_dependencies)
            current_attrs = current_rel.get_all_attributes_set()

            # R1: детерминант и все, что он определяет
            r1_attrs = violating_fd.determinant | (closure & current_attrs)
            r1 = Relation(
                f"{relation.name}_{table_counter}",
                Decomposer._ordered(current_rel.attributes, r1_attrs),
                Decomposer._project_fds(r1_attrs, current_rel.functional_dependencies),
                violating_fd.determinant
            )
            table_counter += 1

            # R2: детерминант и атрибуты вне замыкания
            r2_attrs = violating_fd.determinant | (current_attrs - closure)
            r2 = Relation(
                f"{relation.name}_{table_counter}",
                Decomposer._ordered(current_rel.attributes, r2_attrs),
                Decomposer._project_fds(r2_attrs, current_rel.functional_dependencies)
            )
            table_counter += 1

            step = DecompositionStep(
                original_relation=current_rel,
                resulting_relations=(r1, r2),
                reason=f"Устранение нарушения НФБК: {violating_fd}",
                violated_dependency=violating_fd
            )
            steps.append(step)
            logger.debug("%r", step)

            # Добавляем для дальнейшей обработки
            for new_rel in (r1, r2):
                if new_rel.attributes:
                    to_process.append(new_rel)

        return final_relations, steps

    @staticmethod
    def decompose_to_bcnf(relation: Relation, max_attributes: Optional[int] = None) -> NormalizationResult:
        """
        Полный анализ отношения: нормальные формы, ключи и декомпозиция в НФБК
        """
        analyzer = NormalFormAnalyzer(relation, max_attributes)
        report = analyzer.get_report()

        steps: List[DecompositionStep] = []
        if not relation.attributes:
            decomposed: List[Relation] = []
        elif report.is_bcnf:
            decomposed = [relation.with_primary_key(relation.primary_key or analyzer.candidate_keys[0])]
        else:
            decomposed, steps = Decomposer._decompose_with_steps(relation, max_attributes)

        # Проверяем сохранение зависимостей
        preserved, lost = Decomposer._check_dependency_preservation(
            relation.functional_dependencies,
            decomposed
        )

        logger.debug(
            "Отношение %s: %s, таблиц после декомпозиции: %d, потеряно ФЗ: %d",
            relation.name, report.highest_form().value, len(decomposed), len(lost)
        )

        return NormalizationResult(
            original_relation=relation,
            report=report,
            candidate_keys=tuple(analyzer.candidate_keys),
            decomposed_relations=tuple(decomposed),
            steps=tuple(steps),
            preserved_dependencies=tuple(preserved),
            lost_dependencies=tuple(lost)
        )

    @staticmethod
    def _ordered(attributes: Sequence[Attribute], selected: Iterable[Attribute]) -> Tuple[Attribute, ...]:
        """Атрибуты из selected в порядке их объявления в родительском отношении"""
        selected = set(selected)
        return tuple(attr for attr in attributes if attr in selected)

    @staticmethod
    def _project_fds(attributes: Iterable[Attribute], fds: Sequence[FunctionalDependency]) -> List[FunctionalDependency]:
        """
        ФЗ родителя, целиком лежащие в подмножестве атрибутов (кроме вырожденных)
        """
        attr_set = set(attributes)
        return [
            fd for fd in fds
            if not fd.is_degenerate() and fd.attributes().issubset(attr_set)
        ]

    @staticmethod
    def _check_dependency_preservation(
            original_fds: Sequence[FunctionalDependency],
            decomposed_relations: Sequence[Relation]
    ) -> Tuple[List[FunctionalDependency], List[FunctionalDependency]]:
        """
        Проверить сохранение функциональных зависимостей после декомпозиции
        """
        preserved = []
        lost = []

        # Собираем все ФЗ из декомпозированных отношений
        all_decomposed_fds = []
        for rel in decomposed_relations:
            all_decomposed_fds.extend(rel.functional_dependencies)

        for fd in original_fds:
            closure = FDAlgorithms.closure(fd.determinant, all_decomposed_fds)

            if fd.dependent.issubset(closure):
                preserved.append(fd)
            else:
                lost.append(fd)

        return preserved, lost
