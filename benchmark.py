#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Замеры времени анализа и декомпозиции на случайных отношениях
"""
import sys
import time
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np

from analyzer import NormalFormAnalyzer
from decomposition import Decomposer
from logging_config import get_logger
from models import Attribute, FunctionalDependency, Relation
from settings import get_settings

logger = get_logger(__name__)


def generate_random_relation(
        n_attributes: int,
        n_dependencies: int,
        rng: np.random.Generator,
        name: str = "R"
) -> Relation:
    """
    Случайное отношение: атрибуты A0..A{n-1}, у каждой ФЗ 1-2 атрибута
    в детерминанте и 1-2 в зависимой части (без пересечения)
    """
    attributes = [Attribute(f"A{i}", "INTEGER") for i in range(n_attributes)]
    fds = []

    if n_attributes >= 2:
        for _ in range(n_dependencies):
            det_size = int(rng.integers(1, min(2, n_attributes - 1) + 1))
            dep_size = int(rng.integers(1, min(2, n_attributes - det_size) + 1))
            chosen = rng.choice(n_attributes, size=det_size + dep_size, replace=False)
            fds.append(FunctionalDependency(
                {attributes[i] for i in chosen[:det_size]},
                {attributes[i] for i in chosen[det_size:]}
            ))

    return Relation(name, attributes, fds)


def _time_call(func, repeats: int) -> float:
    """Среднее время выполнения func в секундах"""
    times = []
    for _ in range(repeats):
        start = time.perf_counter()
        func()
        times.append(time.perf_counter() - start)
    return float(np.mean(times))


def run_benchmark(
        attribute_counts: Sequence[int],
        n_dependencies: int = 5,
        repeats: int = 3,
        seed: int = 7
) -> Dict[int, Dict[str, float]]:
    """
    Измерить время анализа нормальных форм и декомпозиции в НФБК

    Returns:
        {число_атрибутов: {"analysis": с, "decomposition": с, "tables": среднее число таблиц}}
    """
    rng = np.random.default_rng(seed)
    results: Dict[int, Dict[str, float]] = {}

    for n in attribute_counts:
        relation = generate_random_relation(n, n_dependencies, rng)

        analysis_time = _time_call(lambda: NormalFormAnalyzer(relation).get_report(), repeats)
        decomposition_time = _time_call(lambda: Decomposer.decompose(relation), repeats)
        tables = len(Decomposer.decompose(relation))

        results[n] = {
            "analysis": analysis_time,
            "decomposition": decomposition_time,
            "tables": float(tables),
        }
        logger.info(
            "%d атрибутов: анализ %.2f мс, декомпозиция %.2f мс, таблиц %d",
            n, analysis_time * 1000, decomposition_time * 1000, tables
        )

    return results


def plot_benchmark(results: Dict[int, Dict[str, float]], output_path: Path) -> Path:
    """
    Построить график зависимости времени от числа атрибутов и сохранить в PNG
    """
    counts = np.array(sorted(results.keys()))
    analysis = np.array([results[n]["analysis"] * 1000 for n in counts])
    decomposition = np.array([results[n]["decomposition"] * 1000 for n in counts])

    fig, ax = plt.subplots(figsize=(10, 6))
    ax.plot(counts, analysis, "o-", color="#45B7D1", linewidth=2, label="Анализ нормальных форм")
    ax.plot(counts, decomposition, "s-", color="#FF6B6B", linewidth=2, label="Декомпозиция в НФБК")

    ax.set_xlabel("Количество атрибутов", fontsize=12)
    ax.set_ylabel("Время выполнения (мс)", fontsize=12)
    ax.set_title("Производительность нормализации", fontsize=14, fontweight="bold")
    ax.grid(True, alpha=0.3)
    ax.legend()

    # Экспоненциальный рост заметнее в логарифмической шкале
    if len(counts) > 1 and np.all(analysis > 0) and np.all(decomposition > 0):
        ax.set_yscale("log")

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig.tight_layout()
    fig.savefig(output_path)
    plt.close(fig)

    return output_path


def main(argv: Optional[List[str]] = None) -> int:
    """Главная функция"""
    args = sys.argv[1:] if argv is None else argv
    settings = get_settings()
    max_n = min(12, settings.max_attributes)

    if args:
        if args[0] == "--help":
            print("Использование:")
            print("  python benchmark.py            # Замер для 2..12 атрибутов")
            print("  python benchmark.py --max N    # Замер для 2..N атрибутов")
            print("  python benchmark.py --help     # Показать справку")
            return 0
        elif args[0] == "--max" and len(args) == 2 and args[1].isdigit():
            max_n = int(args[1])
        else:
            print(f"Неизвестный параметр: {' '.join(args)}")
            print("Используйте --help для справки")
            return 2

    if max_n > settings.max_attributes:
        print(f"Предел атрибутов {settings.max_attributes}, запрошено {max_n}")
        return 2

    results = run_benchmark(range(2, max_n + 1))

    print(f"{'Атрибутов':<10} {'Анализ (мс)':<14} {'Декомпозиция (мс)':<20} {'Таблиц':<8}")
    print("-" * 56)
    for n, data in results.items():
        print(f"{n:<10} {data['analysis'] * 1000:<14.2f} {data['decomposition'] * 1000:<20.2f} {int(data['tables']):<8}")

    output = plot_benchmark(results, settings.benchmark_output_dir / "normalization_time.png")
    print(f"График сохранен: {output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
