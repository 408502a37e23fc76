"""Capability classification: which of retrieval, chart, direct a query needs."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, StrictBool, StrictStr, ValidationError, model_validator

from routing_engine.config.constants import FALLBACK_RATIONALE
from routing_engine.exceptions import GenerationError
from routing_engine.generation.prompt_templates import CLASSIFICATION_PROMPT, format_chart_types
from routing_engine.models.domain import Decision
from routing_engine.observability.logger import get_logger
from routing_engine.orchestration.deadline import Deadline
from routing_engine.parsing.json_extract import ParseFailure, extract_json_object
from routing_engine.protocols.llm import LLMProvider

logger = get_logger("classifier")

FALLBACK_DECISION = Decision(
    wants_retrieval=True,
    wants_chart=False,
    wants_direct=False,
    rationale=FALLBACK_RATIONALE,
)


class DecisionPayload(BaseModel):
    """Shape the model must answer with. Strict: "true" is not a boolean.

    The rationale is informational only, so a missing one does not discard
    otherwise usable flags.
    """

    model_config = ConfigDict(extra="ignore")

    retrieval: StrictBool
    chart: StrictBool
    direct: StrictBool
    rationale: StrictStr = ""

    @model_validator(mode="after")
    def _at_least_one_capability(self) -> DecisionPayload:
        if not (self.retrieval or self.chart or self.direct):
            raise ValueError("at least one capability must be selected")
        return self


def parse_decision(raw: str) -> Decision | ParseFailure:
    data = extract_json_object(raw)
    if isinstance(data, ParseFailure):
        return data
    try:
        payload = DecisionPayload.model_validate(data)
    except ValidationError as e:
        return ParseFailure(reason=f"schema mismatch: {e.error_count()} error(s)", raw=raw)
    return Decision(
        wants_retrieval=payload.retrieval,
        wants_chart=payload.chart,
        wants_direct=payload.direct,
        rationale=payload.rationale,
    )


class CapabilityClassifier:
    def __init__(
        self, llm: LLMProvider, temperature: float = 0.3, max_tokens: int = 2048
    ) -> None:
        self._llm = llm
        self._temperature = temperature
        self._max_tokens = max_tokens

    async def classify(self, query_text: str, deadline: Deadline) -> Decision:
        """Ask the model for a routing decision.

        Gateway failures and unusable output both resolve to FALLBACK_DECISION
        (retrieval only). DeadlineExceeded is not a gateway failure and propagates.
        """
        prompt = CLASSIFICATION_PROMPT.format(
            chart_types=format_chart_types(), query=query_text
        )
        try:
            raw = await deadline.run(
                self._llm.complete(
                    prompt, temperature=self._temperature, max_tokens=self._max_tokens
                ),
                operation="classification",
            )
        except GenerationError as e:
            logger.warning("classification_failed", error=str(e))
            return FALLBACK_DECISION

        parsed = parse_decision(raw)
        if isinstance(parsed, ParseFailure):
            logger.warning(
                "classification_unparseable",
                reason=parsed.reason,
                raw_preview=raw[:200],
            )
            return FALLBACK_DECISION

        logger.info(
            "classified",
            retrieval=parsed.wants_retrieval,
            chart=parsed.wants_chart,
            direct=parsed.wants_direct,
            rationale=parsed.rationale,
        )
        return parsed
