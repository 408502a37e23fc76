"""Evaluation runner: loads dataset, queries the live API, collects results."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import httpx

from routing_engine.evaluation.metrics import EvalCaseResult

DEFAULT_BASE_URL = "http://localhost:8000"
DEFAULT_TIMEOUT = 60.0
DEFAULT_CONCURRENCY = 3

DATASET_PATH = (
    Path(__file__).parent.parent.parent.parent / "tests" / "fixtures" / "eval_dataset.json"
)


def load_dataset(path: Path | None = None) -> list[dict]:
    """Load evaluation dataset from JSON file."""
    p = path or DATASET_PATH
    with open(p) as f:
        return json.load(f)


def score_case(case: dict, data: dict, latency_ms: float) -> EvalCaseResult:
    """Compare one ``/query`` response body against its case expectations."""
    expected_chart = case.get("expected_chart_type")
    expected_ids = case.get("expected_file_ids")
    expected_keywords = case.get("expected_answer_contains", [])

    chart = data.get("chartConfig")
    actual_chart = chart["type"] if chart else None
    actual_ids = data.get("fileIds", [])
    actual_answer = data.get("answer", "")

    answer_lower = actual_answer.lower()
    found = [kw for kw in expected_keywords if kw.lower() in answer_lower]
    missing = [kw for kw in expected_keywords if kw.lower() not in answer_lower]

    return EvalCaseResult(
        case_id=case["id"],
        query=case["query"],
        category=case["category"],
        tenant=case.get("tenant", ""),
        expected_chart_type=expected_chart,
        actual_chart_type=actual_chart,
        expected_file_ids=expected_ids,
        actual_file_ids=actual_ids,
        expected_answer_contains=expected_keywords,
        actual_answer=actual_answer,
        latency_ms=latency_ms,
        chart_correct=actual_chart == expected_chart,
        file_ids_correct=None if expected_ids is None else actual_ids == expected_ids,
        keywords_found=found,
        keywords_missing=missing,
        error=data.get("error"),
    )


async def run_single_case(
    client: httpx.AsyncClient,
    case: dict,
    semaphore: asyncio.Semaphore,
) -> EvalCaseResult:
    """Run a single evaluation case against the API."""
    async with semaphore:
        payload = {"query": case["query"]}
        if case.get("tenant"):
            payload["tenant"] = case["tenant"]
        try:
            response = await client.post("/query", json=payload)
            response.raise_for_status()
            latency = float(response.headers.get("X-Duration-MS", 0.0))
            return score_case(case, response.json(), latency)
        except Exception as e:
            return EvalCaseResult(
                case_id=case["id"],
                query=case["query"],
                category=case["category"],
                tenant=case.get("tenant", ""),
                expected_chart_type=case.get("expected_chart_type"),
                actual_chart_type=None,
                expected_file_ids=case.get("expected_file_ids"),
                actual_file_ids=[],
                expected_answer_contains=case.get("expected_answer_contains", []),
                actual_answer="",
                latency_ms=0.0,
                chart_correct=False,
                file_ids_correct=None,
                keywords_found=[],
                keywords_missing=case.get("expected_answer_contains", []),
                error=str(e),
            )


async def run_evaluation(
    base_url: str = DEFAULT_BASE_URL,
    dataset_path: Path | None = None,
    timeout: float = DEFAULT_TIMEOUT,
    concurrency: int = DEFAULT_CONCURRENCY,
) -> list[EvalCaseResult]:
    """Run the full evaluation suite against a live server."""
    dataset = load_dataset(dataset_path)
    semaphore = asyncio.Semaphore(concurrency)

    async with httpx.AsyncClient(
        base_url=base_url,
        timeout=httpx.Timeout(timeout),
    ) as client:
        # Verify server is up
        try:
            health = await client.get("/health")
            health.raise_for_status()
            health_data = health.json()
            print(
                f"Server healthy: {len(health_data.get('tenants', []))} tenants, "
                f"{health_data.get('record_count', '?')} records"
            )
        except Exception as e:
            raise ConnectionError(
                f"Cannot reach server at {base_url}/health. Is the server running? Error: {e}"
            ) from e

        tasks = [run_single_case(client, case, semaphore) for case in dataset]
        results = await asyncio.gather(*tasks)

    return list(results)
