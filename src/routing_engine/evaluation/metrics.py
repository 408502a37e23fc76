"""Evaluation metric computation for the Query Routing Engine."""

from __future__ import annotations

from dataclasses import dataclass
from itertools import groupby


@dataclass
class EvalCaseResult:
    """Result of running a single evaluation case."""

    case_id: str
    query: str
    category: str
    tenant: str
    expected_chart_type: str | None
    actual_chart_type: str | None
    expected_file_ids: list[str] | None
    actual_file_ids: list[str]
    expected_answer_contains: list[str]
    actual_answer: str
    latency_ms: float
    chart_correct: bool
    file_ids_correct: bool | None
    keywords_found: list[str]
    keywords_missing: list[str]
    error: str | None = None


def compute_metrics(results: list[EvalCaseResult]) -> dict:
    """Compute routing accuracy, answer quality, latency and error count.

    Cases without ``expected_file_ids`` do not count towards file-id accuracy.
    """
    total = len(results)
    if total == 0:
        return _empty_metrics()

    valid = [r for r in results if r.error is None]
    errors = [r for r in results if r.error is not None]

    # Chart routing: chart produced exactly when expected, with the expected kind
    chart_accuracy = sum(r.chart_correct for r in valid) / len(valid) if valid else 0.0

    # Retrieval: exact file-id list, order included
    with_file_ids = [r for r in valid if r.file_ids_correct is not None]
    file_id_accuracy = (
        sum(bool(r.file_ids_correct) for r in with_file_ids) / len(with_file_ids)
        if with_file_ids
        else 0.0
    )

    # Answer quality: fraction of keyword-bearing cases with ALL keywords found
    with_keywords = [r for r in valid if r.expected_answer_contains]
    if with_keywords:
        answer_quality = sum(1 for r in with_keywords if not r.keywords_missing) / len(
            with_keywords
        )
    else:
        answer_quality = 0.0

    avg_latency = sum(r.latency_ms for r in valid) / len(valid) if valid else 0.0

    return {
        "total_cases": total,
        "valid_cases": len(valid),
        "chart_routing_accuracy": chart_accuracy,
        "file_id_accuracy": file_id_accuracy,
        "answer_quality": answer_quality,
        "avg_latency_ms": avg_latency,
        "error_count": len(errors),
    }


def compute_category_metrics(results: list[EvalCaseResult]) -> dict[str, dict]:
    """Per-category breakdown of routing accuracy and latency."""
    valid = [r for r in results if r.error is None]
    if not valid:
        return {}

    categories: dict[str, dict] = {}
    sorted_results = sorted(valid, key=lambda r: r.category)

    for cat, group in groupby(sorted_results, key=lambda r: r.category):
        cat_results = list(group)
        n = len(cat_results)
        categories[cat] = {
            "count": n,
            "chart_routing_accuracy": sum(r.chart_correct for r in cat_results) / n,
            "avg_latency_ms": sum(r.latency_ms for r in cat_results) / n,
        }

    return categories


def _empty_metrics() -> dict:
    return {
        "total_cases": 0,
        "valid_cases": 0,
        "chart_routing_accuracy": 0.0,
        "file_id_accuracy": 0.0,
        "answer_quality": 0.0,
        "avg_latency_ms": 0.0,
        "error_count": 0,
    }
