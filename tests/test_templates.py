from __future__ import annotations

from openai_pack.common.templates import (
    QUESTION_ANSWER_TEMPLATE,
    SENTIMENT_TEMPLATE,
    render_examples,
    render_prompt,
)


def test_render_prompt_substitution() -> None:
    tpl = "Hello {{input}}!"
    out = render_prompt(tpl, "world")
    assert out == "Hello world!"


def test_question_answer_template_ends_with_open_answer() -> None:
    out = render_prompt(QUESTION_ANSWER_TEMPLATE, "Why is the sky blue?")
    assert out.endswith("Q: Why is the sky blue?\nA: ")
    assert "{{input}}" not in out


def test_sentiment_template() -> None:
    out = render_prompt(SENTIMENT_TEMPLATE, "I loved it")
    assert out.endswith("Text: I loved it\nSentiment: ")


def test_render_examples_joins_pairs_with_separator() -> None:
    out = render_examples("c", ["a", "b"], ["1", "2"])
    assert out == "a\n1```b\n2```c\n"
