"""Combine capability results into the single caller-facing response."""

from __future__ import annotations

from dataclasses import replace
from typing import Literal

from routing_engine.config.constants import (
    CHART_ONLY_ANSWER,
    CHART_SUFFIX,
    PROCESSING_ERROR_ANSWER,
    UNROUTABLE_ANSWER,
)
from routing_engine.exceptions import CapabilityError, DeadlineExceeded
from routing_engine.models.domain import (
    Capability,
    CapabilityResult,
    ChartSpec,
    DirectAnswer,
    RAGAnswer,
    Response,
    TaskOutcome,
)

FailurePolicy = Literal["fail", "degrade"]


def merge(results: list[CapabilityResult]) -> Response:
    """Merge results keyed by capability. Input order does not matter.

    Raises ValueError when a capability appears twice or carries the wrong
    payload type.
    """
    by_tag: dict[Capability, CapabilityResult] = {}
    for result in results:
        if result.capability in by_tag:
            raise ValueError(f"duplicate result for capability {result.capability}")
        by_tag[result.capability] = result

    rag = _payload(by_tag, Capability.RETRIEVAL, RAGAnswer)
    chart = _payload(by_tag, Capability.CHART, ChartSpec)
    direct = _payload(by_tag, Capability.DIRECT, DirectAnswer)

    if rag is not None:
        answer = rag.answer + CHART_SUFFIX if chart is not None else rag.answer
        return Response(
            answer=answer,
            file_ids=rag.file_ids,
            references=rag.references,
            chart_spec=chart,
        )
    if chart is not None:
        return Response(answer=CHART_ONLY_ANSWER, chart_spec=chart)
    if direct is not None:
        return Response(answer=direct.answer)
    return Response(answer=UNROUTABLE_ANSWER)


def _payload(by_tag: dict, capability: Capability, expected: type):
    result = by_tag.get(capability)
    if result is None:
        return None
    if not isinstance(result.payload, expected):
        raise ValueError(
            f"{capability} result carries {type(result.payload).__name__}, "
            f"expected {expected.__name__}"
        )
    return result.payload


def merge_outcomes(outcomes: list[TaskOutcome], policy: FailurePolicy = "fail") -> Response:
    """Apply the partial-failure policy, then merge.

    ``fail`` raises CapabilityError for the failed task that settled first;
    ties keep scheduling order. ``degrade`` merges the successes and records
    the failures in ``Response.error``, unless every task failed. An expired
    deadline is raised as-is under either policy.
    """
    failures = [o for o in outcomes if not o.ok]
    for outcome in failures:
        if isinstance(outcome.error, DeadlineExceeded):
            raise outcome.error

    if failures and (policy == "fail" or len(failures) == len(outcomes)):
        first = min(failures, key=lambda o: o.settled_order)
        raise CapabilityError(str(first.capability), first.error) from first.error

    response = merge([o.result for o in outcomes if o.ok and o.result is not None])
    if failures:
        detail = "; ".join(f"{o.capability}: {o.error}" for o in failures)
        response = replace(response, error=detail)
    return response


def failure_response(exc: BaseException) -> Response:
    return Response(answer=PROCESSING_ERROR_ANSWER, error=str(exc))
