"""BM25 keyword ranking of Q&A records using rank_bm25."""

from __future__ import annotations

import math

import numpy as np
from rank_bm25 import BM25Okapi

from routing_engine.keyword_search.tokenizer import tokenize
from routing_engine.models.domain import RetrievedDocument


class LuceneBM25(BM25Okapi):
    """BM25Okapi with the Lucene idf, log(1 + (N - n + 0.5) / (n + 0.5)).

    The Okapi idf is zero or negative for a term present in half or more of
    the corpus, which in a tenant of two records hides every match.
    """

    def _calc_idf(self, nd: dict[str, int]) -> None:
        for word, freq in nd.items():
            self.idf[word] = math.log(1 + (self.corpus_size - freq + 0.5) / (freq + 0.5))


def searchable_text(doc: RetrievedDocument) -> str:
    # file_id is a filter key, not searchable text
    return f"{doc.question}\n{doc.answer}"


class BM25Ranker:
    def __init__(self, k1: float = 1.2, b: float = 0.75) -> None:
        self._k1 = k1
        self._b = b

    def rank(
        self,
        query: str,
        documents: list[RetrievedDocument],
        top_k: int = 5,
    ) -> list[tuple[RetrievedDocument, float]]:
        """Return up to ``top_k`` (document, score) pairs with a positive score.

        Ordered by descending score; ties keep the input order.
        """
        if not documents or top_k <= 0:
            return []
        tokenized_query = tokenize(query)
        if not tokenized_query:
            return []
        corpus = [tokenize(searchable_text(d)) for d in documents]
        if not any(corpus):
            return []

        bm25 = LuceneBM25(corpus, k1=self._k1, b=self._b)
        scores = bm25.get_scores(tokenized_query)
        order = np.argsort(-scores, kind="stable")[:top_k]
        return [(documents[i], float(scores[i])) for i in order if scores[i] > 0]
