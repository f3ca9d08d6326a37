"""Тесты замеров производительности."""

import numpy as np

from benchmark import generate_random_relation, main, plot_benchmark, run_benchmark
from settings import reset_settings


def test_random_relation_is_reproducible():
    first = generate_random_relation(6, 4, np.random.default_rng(1))
    second = generate_random_relation(6, 4, np.random.default_rng(1))

    assert first == second
    assert len(first.attributes) == 6
    assert len(first.functional_dependencies) == 4


def test_random_dependencies_are_valid():
    relation = generate_random_relation(5, 20, np.random.default_rng(3))
    universe = relation.get_all_attributes_set()

    for fd in relation.functional_dependencies:
        assert not fd.is_degenerate()
        assert not fd.determinant & fd.dependent
        assert fd.attributes() <= universe


def test_single_attribute_relation_has_no_dependencies():
    relation = generate_random_relation(1, 5, np.random.default_rng(0))
    assert relation.functional_dependencies == ()


def test_run_benchmark():
    results = run_benchmark([2, 3, 4], n_dependencies=3, repeats=1, seed=11)

    assert list(results) == [2, 3, 4]
    for data in results.values():
        assert data["analysis"] >= 0
        assert data["decomposition"] >= 0
        assert data["tables"] >= 1


def test_plot_benchmark_writes_png(tmp_path):
    results = run_benchmark([2, 3], n_dependencies=2, repeats=1)
    output = plot_benchmark(results, tmp_path / "plots" / "time.png")

    assert output.exists()
    assert output.read_bytes()[:8] == b"\x89PNG\r\n\x1a\n"


def test_main_arguments(tmp_path, monkeypatch, capsys):
    monkeypatch.setenv("NORMALIZER_BENCHMARK_OUTPUT_DIR", str(tmp_path))
    reset_settings()

    assert main(["--help"]) == 0
    assert main(["--bogus"]) == 2
    assert main(["--max", "99"]) == 2
    assert main(["--max", "3"]) == 0
    assert (tmp_path / "normalization_time.png").exists()
    assert "График сохранен" in capsys.readouterr().out
