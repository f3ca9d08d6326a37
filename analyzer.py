"""
Модуль для анализа нормальных форм отношений
"""
from typing import FrozenSet, List, Optional, Tuple

from fd_algorithms import FDAlgorithms
from models import (
    Attribute, FunctionalDependency, NormalForm, NormalFormReport, Relation, format_attributes
)


class NormalFormAnalyzer:
    """Класс для анализа нормальных форм"""

    def __init__(self, relation: Relation, max_attributes: Optional[int] = None):
        self.relation = relation
        self.max_attributes = max_attributes
        self.all_attributes = relation.get_all_attributes_set()
        self.candidate_keys = FDAlgorithms.find_candidate_keys(
            relation.attributes, relation.functional_dependencies, max_attributes
        )
        self.prime_attributes = FDAlgorithms.prime_attributes(self.candidate_keys)
        self.non_prime_attributes = self.all_attributes - self.prime_attributes

    def _closure(self, attributes) -> FrozenSet[Attribute]:
        return FDAlgorithms.closure(attributes, self.relation.functional_dependencies)

    def _is_superkey(self, attributes) -> bool:
        return FDAlgorithms.is_superkey(attributes, self.relation)

    def check_1nf(self) -> Tuple[bool, List[str]]:
        """
        Проверка первой нормальной формы

        Тип каждого атрибута должен быть атомарным: без массивов,
        составных и вложенных структур.

        Returns:
            (соответствует_1НФ, список_нарушений)
        """
        violations = []

        if not self.relation.attributes:
            violations.append("Отношение не содержит атрибутов")

        for attr in self.relation.attributes:
            if not attr.is_atomic():
                violations.append(
                    f"Неатомарный атрибут: {attr.name} ({attr.data_type})"
                )

        return len(violations) == 0, violations

    def _partial_dependency_violations(self) -> List[str]:
        """Непростые атрибуты, зависящие от собственной части составного ключа"""
        violations = []

        # Если непростых атрибутов нет, частичных зависимостей быть не может
        if not self.non_prime_attributes:
            return violations

        for key in self.candidate_keys:
            if len(key) <= 1:
                continue

            for part in FDAlgorithms.subsets(key, self.max_attributes):
                if len(part) == len(key):
                    continue
                dependent_non_prime = self._closure(part) & self.non_prime_attributes
                if dependent_non_prime:
                    violations.append(
                        f"Частичная зависимость: {format_attributes(part)} → "
                        f"{format_attributes(dependent_non_prime)} "
                        f"(детерминант - часть ключа {format_attributes(key)})"
                    )

        return violations

    def check_2nf(self) -> Tuple[bool, List[str]]:
        """
        Проверка второй нормальной формы

        Returns:
            (соответствует_2НФ, список_нарушений)
        """
        is_1nf, violations = self.check_1nf()

        if not self.candidate_keys:
            violations.append("Отношение не имеет потенциальных ключей")
            return False, violations

        own_violations = self._partial_dependency_violations()
        violations.extend(own_violations)

        return is_1nf and not own_violations, violations

    def _transitive_dependency_violations(self) -> List[str]:
        """ФЗ с непростыми зависимыми атрибутами, чей детерминант не суперключ и не часть ключа"""
        violations = []

        for fd in self.relation.functional_dependencies:
            if not fd.determinant:
                continue

            non_prime_in_dependent = (fd.dependent - fd.determinant) & self.non_prime_attributes
            if not non_prime_in_dependent:
                continue

            is_part_of_key = any(fd.determinant.issubset(key) for key in self.candidate_keys)
            if not is_part_of_key and not self._is_superkey(fd.determinant):
                violations.append(
                    f"Нарушение 3НФ: {format_attributes(fd.determinant)} → "
                    f"{format_attributes(non_prime_in_dependent)} "
                    f"(детерминант не является суперключом, зависимые непростые атрибуты)"
                )

        return violations

    def check_3nf(self) -> Tuple[bool, List[str]]:
        """
        Проверка третьей нормальной формы

        Returns:
            (соответствует_3НФ, список_нарушений)
        """
        is_2nf, violations = self.check_2nf()

        if not self.candidate_keys:
            return False, violations

        own_violations = self._transitive_dependency_violations()
        violations.extend(own_violations)

        return is_2nf and not own_violations, violations

    def violates_bcnf(self, fd: FunctionalDependency) -> bool:
        """
        Нарушает ли ФЗ НФБК: она нетривиальна, замыкание детерминанта не покрывает
        отношение и детерминант не содержит ни одного потенциального ключа
        """
        if fd.is_trivial():
            return False

        if self._is_superkey(fd.determinant):
            return False

        return not any(key.issubset(fd.determinant) for key in self.candidate_keys)

    def find_bcnf_violation(self) -> Optional[FunctionalDependency]:
        """Первая в порядке объявления ФЗ, нарушающая НФБК"""
        for fd in self.relation.functional_dependencies:
            if self.violates_bcnf(fd):
                return fd
        return None

    def check_bcnf(self) -> Tuple[bool, List[str]]:
        """
        Проверка нормальной формы Бойса-Кодда

        Returns:
            (соответствует_НФБК, список_нарушений)
        """
        is_3nf, violations = self.check_3nf()

        if not self.candidate_keys:
            return False, violations

        own_violations = []
        for fd in self.relation.functional_dependencies:
            if self.violates_bcnf(fd):
                own_violations.append(
                    f"Нарушение НФБК: {fd} (детерминант не является суперключом)"
                )
        violations.extend(own_violations)

        return is_3nf and not own_violations, violations

    def get_report(self) -> NormalFormReport:
        """Сводка по четырем нормальным формам"""
        is_1nf, _ = self.check_1nf()
        # Без ключей классификация 2НФ-НФБК не определена
        has_keys = bool(self.candidate_keys)
        partial = self._partial_dependency_violations()
        transitive = self._transitive_dependency_violations()
        bcnf_violation = self.find_bcnf_violation()

        is_2nf = is_1nf and has_keys and not partial
        is_3nf = is_2nf and not transitive
        is_bcnf = is_3nf and bcnf_violation is None
        return NormalFormReport(is_1nf=is_1nf, is_2nf=is_2nf, is_3nf=is_3nf, is_bcnf=is_bcnf)

    def determine_normal_form(self) -> Tuple[NormalForm, List[str]]:
        """
        Определить текущую нормальную форму отношения

        Returns:
            (нормальная_форма, список_всех_нарушений)
        """
        _, violations = self.check_bcnf()
        return self.get_report().highest_form(), violations
