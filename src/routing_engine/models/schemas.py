"""Pydantic models for API request/response serialization."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from routing_engine.models.domain import ChartSpec, Reference, Response


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class QueryRequest(CamelModel):
    query: str = Field(min_length=1)
    tenant: str | None = None


class ReferenceSchema(CamelModel):
    file_id: str
    question: str
    answer: str

    @classmethod
    def from_domain(cls, ref: Reference) -> ReferenceSchema:
        return cls(file_id=ref.file_id, question=ref.question, answer=ref.answer)


class ChartConfig(CamelModel):
    type: str
    title: str
    labels: list[str]
    data: list[float]

    @model_validator(mode="after")
    def _labels_match_data(self) -> ChartConfig:
        if len(self.labels) != len(self.data):
            raise ValueError("labels and data must have the same length")
        return self

    @classmethod
    def from_domain(cls, spec: ChartSpec) -> ChartConfig:
        return cls(
            type=spec.chart_type,
            title=spec.title,
            labels=list(spec.labels),
            data=list(spec.data),
        )

    def to_domain(self) -> ChartSpec:
        return ChartSpec(
            chart_type=self.type,
            title=self.title,
            labels=tuple(self.labels),
            data=tuple(self.data),
        )


class QueryResponse(CamelModel):
    answer: str
    file_ids: list[str]
    references: list[ReferenceSchema]
    chart_config: ChartConfig | None = None
    error: str | None = None

    @classmethod
    def from_domain(cls, response: Response) -> QueryResponse:
        return cls(
            answer=response.answer,
            file_ids=list(response.file_ids),
            references=[ReferenceSchema.from_domain(r) for r in response.references],
            chart_config=(
                ChartConfig.from_domain(response.chart_spec)
                if response.chart_spec is not None
                else None
            ),
            error=response.error,
        )


class HealthResponse(BaseModel):
    status: str
    tenants: list[str]
    record_count: int


class ChartRenderResponse(BaseModel):
    config: dict


class ChartRenderRequest(CamelModel):
    chart_config: ChartConfig
