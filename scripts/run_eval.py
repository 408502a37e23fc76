"""Run the evaluation harness against a live Query Routing Engine server.

Usage:
    1. Seed data:          python scripts/seed_data.py
    2. Start the server:   python -m routing_engine.main
    3. Run evaluation:     python scripts/run_eval.py [--base-url URL] [--output PATH]
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from dataclasses import asdict
from pathlib import Path

# Add src to path (matching seed_data.py pattern)
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from routing_engine.evaluation.metrics import (
    EvalCaseResult,
    compute_category_metrics,
    compute_metrics,
)
from routing_engine.evaluation.runner import DEFAULT_BASE_URL, run_evaluation


def print_header(title: str) -> None:
    print(f"\n{'=' * 64}")
    print(f"  {title}")
    print(f"{'=' * 64}")


def print_summary(metrics: dict) -> None:
    print_header("EVALUATION SUMMARY")
    print(f"  Total cases:            {metrics['total_cases']}")
    print(f"  Valid cases:            {metrics['valid_cases']}")
    print(f"  Errors:                 {metrics['error_count']}")
    print(f"  Chart routing accuracy: {metrics['chart_routing_accuracy']:.1%}")
    print(f"  File-id accuracy:       {metrics['file_id_accuracy']:.1%}")
    print(f"  Answer quality:         {metrics['answer_quality']:.1%}")
    print(f"  Avg latency:            {metrics['avg_latency_ms']:.0f} ms")


def print_category_breakdown(by_category: dict) -> None:
    print_header("PER-CATEGORY BREAKDOWN")
    print(f"  {'Category':<16} {'Count':>5} {'Chart acc.':>12} {'Latency':>10}")
    print(f"  {'-' * 46}")
    for cat, m in sorted(by_category.items()):
        print(
            f"  {cat:<16} {m['count']:>5} "
            f"{m['chart_routing_accuracy']:>11.1%} "
            f"{m['avg_latency_ms']:>8.0f}ms"
        )


def print_case_details(results: list[EvalCaseResult]) -> None:
    print_header("INDIVIDUAL CASE RESULTS")
    for r in results:
        if r.error:
            status = "ERROR"
        elif r.chart_correct and r.file_ids_correct is not False:
            status = "PASS"
        else:
            status = "FAIL"

        print(
            f"  [{status:>5}] {r.case_id:<16} | tenant={r.tenant:<8} | "
            f"chart={r.actual_chart_type or '-':<8} files={r.actual_file_ids}"
        )
        if r.keywords_missing:
            print(f"         missing keywords: {r.keywords_missing}")
        if r.error:
            print(f"         error: {r.error}")


def save_results(results: list[EvalCaseResult], metrics: dict, output_path: Path) -> None:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    payload = {
        "metrics": metrics,
        "results": [asdict(r) for r in results],
    }
    with open(output_path, "w") as f:
        json.dump(payload, f, indent=2, default=str)
    print(f"\nRaw results saved to {output_path}")


async def main(base_url: str, output_path: Path) -> None:
    print(f"Running evaluation against {base_url} ...")
    print("Dataset: tests/fixtures/eval_dataset.json")

    results = await run_evaluation(base_url=base_url)

    metrics = compute_metrics(results)
    by_category = compute_category_metrics(results)
    metrics["by_category"] = by_category

    print_summary(metrics)
    print_category_breakdown(by_category)
    print_case_details(results)

    save_results(results, metrics, output_path)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Run the routing evaluation harness")
    parser.add_argument(
        "--base-url",
        default=DEFAULT_BASE_URL,
        help=f"Base URL of the running server (default: {DEFAULT_BASE_URL})",
    )
    parser.add_argument(
        "--output",
        default="data/eval_results.json",
        help="Path to save raw results JSON (default: data/eval_results.json)",
    )
    args = parser.parse_args()
    asyncio.run(main(args.base_url, Path(args.output)))
