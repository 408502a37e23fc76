"""Chart parameter extraction from a natural-language request."""

from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from routing_engine.config.constants import (
    DEFAULT_CHART_TITLE,
    DEFAULT_CHART_TYPE,
    PLACEHOLDER_CHART_DATA,
    PLACEHOLDER_CHART_LABELS,
    PLACEHOLDER_CHART_TITLE,
    PLACEHOLDER_CHART_TYPE,
)
from routing_engine.exceptions import GenerationError
from routing_engine.generation.prompt_templates import CHART_EXTRACTION_PROMPT, format_chart_types
from routing_engine.models.domain import ChartSpec
from routing_engine.observability.logger import get_logger
from routing_engine.orchestration.deadline import Deadline
from routing_engine.parsing.json_extract import ParseFailure, extract_json_object
from routing_engine.protocols.llm import LLMProvider

logger = get_logger("chart_extractor")

PLACEHOLDER_CHART = ChartSpec(
    chart_type=PLACEHOLDER_CHART_TYPE,
    title=PLACEHOLDER_CHART_TITLE,
    labels=PLACEHOLDER_CHART_LABELS,
    data=PLACEHOLDER_CHART_DATA,
)


class ChartPayload(BaseModel):
    """Chart fields as the model returns them.

    Numeric labels such as years are kept as text. A missing or blank kind or
    title gets a default rather than rejecting the extraction.
    """

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    chart_type: str = Field(
        default=DEFAULT_CHART_TYPE,
        validation_alias=AliasChoices("chartType", "chart_type", "type"),
    )
    title: str = DEFAULT_CHART_TITLE
    labels: list[str]
    data: list[float]

    @field_validator("chart_type", mode="before")
    @classmethod
    def _default_chart_type(cls, value):
        return value or DEFAULT_CHART_TYPE

    @field_validator("title", mode="before")
    @classmethod
    def _default_title(cls, value):
        return value or DEFAULT_CHART_TITLE


def parse_chart_spec(raw: str) -> ChartSpec | ParseFailure:
    """Parse model output into a ChartSpec.

    Output is rejected only when labels and numeric data cannot be read or
    their lengths differ. The chart type is passed through as given; unknown kinds are left
    to the renderer.
    """
    data = extract_json_object(raw)
    if isinstance(data, ParseFailure):
        return data
    try:
        payload = ChartPayload.model_validate(data)
    except ValidationError as e:
        return ParseFailure(reason=f"schema mismatch: {e.error_count()} error(s)", raw=raw)
    if len(payload.labels) != len(payload.data):
        return ParseFailure(
            reason=f"{len(payload.labels)} labels but {len(payload.data)} data points",
            raw=raw,
        )
    return ChartSpec(
        chart_type=payload.chart_type,
        title=payload.title,
        labels=tuple(payload.labels),
        data=tuple(payload.data),
    )


class ChartSpecExtractor:
    def __init__(
        self, llm: LLMProvider, temperature: float = 0.3, max_tokens: int = 2048
    ) -> None:
        self._llm = llm
        self._temperature = temperature
        self._max_tokens = max_tokens

    async def extract(self, query_text: str, deadline: Deadline) -> ChartSpec:
        prompt = CHART_EXTRACTION_PROMPT.format(
            query=query_text, chart_types=format_chart_types()
        )
        try:
            raw = await deadline.run(
                self._llm.complete(
                    prompt, temperature=self._temperature, max_tokens=self._max_tokens
                ),
                operation="chart extraction",
            )
        except GenerationError as e:
            logger.warning("chart_extraction_failed", error=str(e))
            return PLACEHOLDER_CHART

        spec = parse_chart_spec(raw)
        if isinstance(spec, ParseFailure):
            logger.warning(
                "chart_extraction_unparseable",
                reason=spec.reason,
                raw_preview=raw[:200],
            )
            return PLACEHOLDER_CHART

        logger.info(
            "chart_extracted",
            chart_type=spec.chart_type,
            points=len(spec.data),
        )
        return spec
