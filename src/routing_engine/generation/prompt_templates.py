"""All prompt templates for the routing engine."""

from __future__ import annotations

from routing_engine.config.constants import CHART_TYPES

CLASSIFICATION_PROMPT = """You are a routing assistant. Decide which capabilities are needed to handle the user's query.

Available capabilities:
1. retrieval - search the knowledge base and answer from stored question/answer records
2. chart - generate a chart specification ({chart_types} charts)
3. direct - answer conversationally without any tools

User query: "{query}"

Rules:
- Set "retrieval" to true if the user asks a question that might be answered by a knowledge base.
- Set "chart" to true if the user wants to visualize data, create a chart, or see a graph.
- Set "direct" to true if the query is a greeting, a thank-you, or small talk.
- "retrieval" and "chart" can both be true when the query needs information and a visualization.
- At least one capability must be true.

Respond ONLY with a JSON object of this exact shape, no other text:
{{"retrieval": true|false, "chart": true|false, "direct": true|false, "rationale": "one short sentence"}}"""

CHART_EXTRACTION_PROMPT = """Extract chart parameters from the user's request.

User request: "{query}"

Respond ONLY with a JSON object of this exact shape, no other text:
{{"chartType": one of {chart_types}, "title": "chart title", "labels": ["label1", "label2"], "data": [number1, number2]}}

Rules:
- "labels" and "data" must have the same number of entries.
- If the request does not give data, invent reasonable example data.
- If the request does not name a chart type, choose the most appropriate one."""

RAG_ANSWER_PROMPT = """You are a helpful assistant. Answer the user's question using the knowledge below.

Knowledge:
{context_block}

User question: {query}

Instructions:
- Base the answer on the knowledge above.
- If it does not answer the question directly, share the most closely related information.
- Be concise but informative.
- Answer naturally. Do not refer to documents, records, or context.

Answer:"""

DIRECT_ANSWER_PROMPT = """You are a helpful assistant. Reply to the user's message in a friendly and concise manner.

User message: {query}

Reply:"""


def format_chart_types() -> str:
    return ", ".join(f'"{t}"' for t in CHART_TYPES)


def format_context_block(documents: list) -> str:
    """Format retrieved Q&A records, in retrieval order, for the synthesis prompt."""
    blocks = []
    for i, doc in enumerate(documents, 1):
        blocks.append(
            f"Entry {i} (File: {doc.file_id}):\n"
            f"Question: {doc.question}\n"
            f"Answer: {doc.answer}"
        )
    return "\n\n".join(blocks)
