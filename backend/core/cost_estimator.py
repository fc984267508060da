# backend/core/cost_estimator.py
"""Display-only token and cost estimates. Nothing here touches the actual request."""

import math

from models.session_models import InputMetrics, OutputMetrics

# Rough approximation: 1 token ~= 4 characters
CHARS_PER_TOKEN = 4
# Gemini bills each inline image at a fixed token count
IMAGE_TOKEN_SURCHARGE = 258

INPUT_RATE_PER_MILLION = 0.10
OUTPUT_RATE_PER_MILLION = 0.30

NEGLIGIBLE_COST = "< $0.0001"
NEGLIGIBLE_THRESHOLD = 0.00001


def estimate_tokens(text: str) -> int:
    return math.ceil(len(text) / CHARS_PER_TOKEN)


def format_cost(cost: float) -> str:
    if cost < NEGLIGIBLE_THRESHOLD:
        return NEGLIGIBLE_COST
    return f"${cost:.5f}"


def estimate_input(idea: str, attachment_count: int = 0) -> InputMetrics:
    """Metrics for the idea box: text tokens plus a flat surcharge per attachment."""
    total_tokens = estimate_tokens(idea) + attachment_count * IMAGE_TOKEN_SURCHARGE
    cost = (total_tokens / 1_000_000) * INPUT_RATE_PER_MILLION
    return InputMetrics(char_count=len(idea), total_tokens=total_tokens, cost=format_cost(cost))


def estimate_output(content: str) -> OutputMetrics:
    """Metrics for whichever output tab is showing."""
    if not content:
        return OutputMetrics(tokens=0, cost="$0.00")
    tokens = estimate_tokens(content)
    cost = (tokens / 1_000_000) * OUTPUT_RATE_PER_MILLION
    return OutputMetrics(tokens=tokens, cost=format_cost(cost))
