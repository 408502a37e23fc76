"""Core domain objects used throughout the system."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union


class Capability(str, Enum):
    RETRIEVAL = "retrieval"
    CHART = "chart"
    DIRECT = "direct"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class TenantContext:
    tenant_id: str

    def __post_init__(self) -> None:
        if not self.tenant_id or not self.tenant_id.strip():
            raise ValueError("tenant_id must be a non-empty string")


@dataclass(frozen=True)
class Query:
    text: str
    tenant: TenantContext


@dataclass(frozen=True)
class Decision:
    wants_retrieval: bool
    wants_chart: bool
    wants_direct: bool
    rationale: str


@dataclass(frozen=True)
class RetrievedDocument:
    file_id: str
    question: str
    answer: str


@dataclass(frozen=True)
class Reference:
    file_id: str
    question: str
    answer: str

    @classmethod
    def from_document(cls, doc: RetrievedDocument) -> Reference:
        return cls(file_id=doc.file_id, question=doc.question, answer=doc.answer)


@dataclass(frozen=True)
class ChartSpec:
    chart_type: str
    title: str
    labels: tuple[str, ...]
    data: tuple[float, ...]

    def __post_init__(self) -> None:
        if len(self.labels) != len(self.data):
            raise ValueError(
                f"labels ({len(self.labels)}) and data ({len(self.data)}) must be equal length"
            )


@dataclass(frozen=True)
class RetrievalOutcome:
    documents: tuple[RetrievedDocument, ...]
    strategy: str  # "keyword", "full_scan", "empty"


@dataclass(frozen=True)
class RAGAnswer:
    answer: str
    file_ids: tuple[str, ...]
    references: tuple[Reference, ...]
    strategy: str


@dataclass(frozen=True)
class DirectAnswer:
    answer: str


CapabilityPayload = Union[RAGAnswer, ChartSpec, DirectAnswer]


@dataclass(frozen=True)
class CapabilityResult:
    capability: Capability
    payload: CapabilityPayload


@dataclass(frozen=True)
class TaskOutcome:
    """Result-or-error of one scheduled capability task."""

    capability: Capability
    result: CapabilityResult | None = None
    error: Exception | None = None
    # Position in which the task settled among its siblings; 0 settled first.
    settled_order: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class Response:
    answer: str
    file_ids: tuple[str, ...] = ()
    references: tuple[Reference, ...] = ()
    chart_spec: ChartSpec | None = None
    error: str | None = None
