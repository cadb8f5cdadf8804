#!/usr/bin/env python3
"""
Demo script for the answer cache.

Walks through the flow the chat layer follows for each question: look up
the cache, call the LLM on a miss, record the exchange, count the question
in the learner and promote frequent ones. Uses in-memory storage.
"""

from answer_cache import (
    InMemoryDocumentStorage,
    PatternLearner,
    PromotionPolicy,
    ResponseCache,
    StatsAggregator,
)


def print_section(title: str) -> None:
    """Print a section header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70)


def fake_llm(question: str) -> str:
    """Stand-in for the LLM call."""
    return f"(LLM answer to: {question.strip()})"


def answer(cache: ResponseCache, learner: PatternLearner, question: str, category: str) -> str:
    """Answer one question the way the chat layer does."""
    learner.observe(question, category)

    entry = cache.lookup(question)
    if entry is not None:
        cache.record_hit(question)
        print(f"  ✓ CACHE HIT   {question!r}")
        return entry.answer

    print(f"  ✗ Cache miss  {question!r} -> calling LLM")
    reply = fake_llm(question)
    cache.record(question, reply)
    return reply


def demo_flow() -> None:
    print_section("Question flow")

    cache = ResponseCache.create(InMemoryDocumentStorage())
    learner = PatternLearner.create(InMemoryDocumentStorage())
    policy = PromotionPolicy(threshold=3)

    questions = [
        ("¿Cuál es el horario de la biblioteca?", "horarios"),
        ("  ¿cuál es el horario de la BIBLIOTECA?  ", "horarios"),
        ("¿Dónde queda el bloque 14?", "ubicacion"),
        ("¿Dónde queda el bloque 14?", "ubicacion"),
        ("¿dónde   queda el bloque 14?", "ubicacion"),
    ]
    for question, category in questions:
        answer(cache, learner, question, category)

    print_section("Promotion")
    for pattern in policy.candidates(learner.list_patterns()):
        promoted = learner.promote(pattern.id, "Junto a la biblioteca central.")
        print(f"  ✓ Promoted ({promoted.frequency}x): {promoted.question}")

    print_section("Stats")
    snapshot = StatsAggregator(cache, learner).snapshot(active_users=2, documents=4)
    print(f"  Cached responses: {snapshot.cache.total_entries}")
    print(f"  Hits: {snapshot.cache.total_hits}")
    print(f"  Estimated savings: ${snapshot.cache.estimated_savings.dollars:.3f}")
    print(f"  Patterns: {snapshot.learning.total_patterns} {snapshot.learning.by_category}")
    print(f"  In training: {snapshot.learning.total_in_training}")


if __name__ == "__main__":
    demo_flow()
