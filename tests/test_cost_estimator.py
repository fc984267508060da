import math

import pytest

from core.cost_estimator import (
    IMAGE_TOKEN_SURCHARGE,
    NEGLIGIBLE_COST,
    estimate_input,
    estimate_output,
    estimate_tokens,
    format_cost,
)


@pytest.mark.parametrize("text", ["", "a", "abcd", "abcde", "Write a cold-call script", "x" * 1001])
def test_tokens_are_ceil_of_quarter_length(text):
    assert estimate_tokens(text) == math.ceil(len(text) / 4)


@pytest.mark.parametrize("count", [0, 1, 3])
def test_each_attachment_adds_fixed_surcharge(count):
    idea = "Analyse this chart"
    metrics = estimate_input(idea, count)
    assert metrics.total_tokens == estimate_tokens(idea) + IMAGE_TOKEN_SURCHARGE * count
    assert metrics.char_count == len(idea)


def test_tiny_cost_uses_negligible_sentinel():
    assert estimate_input("hi").cost == NEGLIGIBLE_COST
    assert format_cost(0.0) == NEGLIGIBLE_COST


def test_input_cost_uses_input_rate():
    # 6 text tokens + 258 = 264 tokens at $0.10 / 1M
    assert estimate_input("Write a cold-call script", 1).cost == "$0.00003"


def test_output_cost_uses_output_rate():
    metrics = estimate_output("x" * 400_000)
    assert metrics.tokens == 100_000
    assert metrics.cost == "$0.03000"


def test_empty_output_reports_zero():
    metrics = estimate_output("")
    assert metrics.tokens == 0
    assert metrics.cost == "$0.00"
