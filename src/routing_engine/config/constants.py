"""Fixed values shared across the engine. Tunables live in settings.py."""

from __future__ import annotations

# Document store
MAX_FETCH_ALL = 100

# Chart kinds the prompt offers. Not enforced by the extractor.
CHART_TYPES = ("bar", "line", "pie", "doughnut", "radar")

PLACEHOLDER_CHART_TYPE = "bar"
PLACEHOLDER_CHART_TITLE = "Sample Chart"
PLACEHOLDER_CHART_LABELS = ("A", "B", "C")
PLACEHOLDER_CHART_DATA = (10.0, 20.0, 15.0)

# Substituted when the model omits or blanks these fields
DEFAULT_CHART_TYPE = "bar"
DEFAULT_CHART_TITLE = "Chart Title"

# Canned answer texts
NO_DOCUMENTS_ANSWER = (
    "I could not find any relevant information in the knowledge base to answer your question."
)
CHART_SUFFIX = "\n\nI've also generated a chart visualization for you."
CHART_ONLY_ANSWER = "I've generated the chart visualization as requested."
UNROUTABLE_ANSWER = "I'm not sure how to handle this query. Could you please rephrase it?"
PROCESSING_ERROR_ANSWER = "I encountered an error processing your request. Please try again."

FALLBACK_RATIONALE = "fallback"

STOPWORDS = frozenset(
    {
        "a", "about", "above", "after", "again", "against", "all", "am", "an", "and",
        "any", "are", "as", "at", "be", "because", "been", "before", "being", "below",
        "between", "both", "but", "by", "can", "could", "did", "do", "does", "doing",
        "down", "during", "each", "few", "for", "from", "further", "had", "has", "have",
        "having", "he", "her", "here", "hers", "herself", "him", "himself", "his", "how",
        "i", "if", "in", "into", "is", "it", "its", "itself", "just", "me", "more",
        "most", "my", "myself", "no", "nor", "not", "now", "of", "off", "on", "once",
        "only", "or", "other", "our", "ours", "ourselves", "out", "over", "own", "same",
        "she", "should", "so", "some", "such", "than", "that", "the", "their", "theirs",
        "them", "themselves", "then", "there", "these", "they", "this", "those",
        "through", "to", "too", "under", "until", "up", "very", "was", "we", "were",
        "what", "when", "where", "which", "while", "who", "whom", "why", "will", "with",
        "would", "you", "your", "yours", "yourself", "yourselves",
    }
)
