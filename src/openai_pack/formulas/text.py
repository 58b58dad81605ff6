"""Text formulas: each one is a fixed prompt recipe over the request router."""
from __future__ import annotations

from openai_pack.client.router import get_chat_completion, get_completion, is_chat_completion_model
from openai_pack.common.config import ExecutionContext
from openai_pack.common.schema import ChatCompletionRequest, ChatMessage, CompletionRequest
from openai_pack.common.templates import (
    KEYWORDS_TEMPLATE,
    MOOD_TO_COLOR_TEMPLATE,
    QUESTION_ANSWER_TEMPLATE,
    SENTIMENT_TEMPLATE,
    SUMMARIZE_TEMPLATE,
    render_examples,
    render_prompt,
)
from openai_pack.formulas.registry import ParamSpec, assert_condition, formula

MODEL_SUGGESTIONS = (
    "text-davinci-003",
    "text-davinci-002",
    "text-curie-001",
    "text-babbage-001",
    "text-ada-001",
    "gpt-3.5-turbo",
    "gpt-3.5-turbo-16k",
    "gpt-4",
    "gpt-4-32k",
)

PROMPT_PARAM = ParamSpec("prompt", "string", "prompt")

MODEL_PARAM = ParamSpec(
    "model",
    "string",
    "The model to process your request. Defaults to the configured default model "
    "(text-ada-001 unless overridden), which is the fastest and lowest cost. For higher "
    "quality generation consider text-davinci-003. See https://platform.openai.com/docs/models/overview.",
    optional=True,
    suggestions=MODEL_SUGGESTIONS,
)

NUM_TOKENS_PARAM = ParamSpec(
    "num_tokens",
    "number",
    "The maximum number of tokens for the completion to output. Maximum of 2,048 for most "
    "models and 4,000 for davinci.",
    optional=True,
)

TEMPERATURE_PARAM = ParamSpec(
    "temperature",
    "number",
    "How creative the model should be with the completion. Must be between 0.0 and 1.0. Defaults to 1.0.",
    optional=True,
)

SYSTEM_PROMPT_PARAM = ParamSpec(
    "system_prompt",
    "string",
    "Optional. Helps to set the behavior of the assistant, e.g. 'You are a helpful assistant.'",
    optional=True,
)

STOP_PARAM = ParamSpec(
    "stop",
    "string_array",
    "Optional. Up to 4 sequences where the API will stop generating further tokens.",
    optional=True,
)


def prompt_params(num_tokens: int) -> tuple[ParamSpec, ...]:
    return (PROMPT_PARAM, MODEL_PARAM, NUM_TOKENS_PARAM.with_default(num_tokens), TEMPERATURE_PARAM, STOP_PARAM)


def _complete(
    context: ExecutionContext,
    prompt: str,
    model: str | None,
    num_tokens: float,
    temperature: float | None,
    stop: list[str] | None,
) -> str:
    return get_completion(
        context,
        CompletionRequest(
            model=context.settings.default_model if model is None else model,
            prompt=prompt,
            max_tokens=int(num_tokens),
            temperature=temperature,
            stop=stop,
        ),
    )


def complete_prompt(
    context: ExecutionContext,
    prompt: str,
    model: str | None,
    num_tokens: float,
    temperature: float | None,
    stop: list[str] | None,
) -> str:
    if not prompt:
        return ""
    return _complete(context, prompt, model, num_tokens, temperature, stop)


prompt_formula = formula("Prompt", "Complete text from a prompt", prompt_params(512))(complete_prompt)

gpt3_prompt = formula(
    "GPT3Prompt",
    "Complete text from a prompt",
    prompt_params(512),
    is_experimental=True,
)(complete_prompt)

answer_prompt = formula(
    "AnswerPrompt",
    "Complete text from a prompt, as an action. Only useful in a table together with a "
    "result column that the output is written to; otherwise it has no effect.",
    prompt_params(512),
    is_action=True,
)(complete_prompt)


@formula(
    "ChatCompletion",
    "Takes a prompt as input and returns a model-generated message as output. Optionally "
    "provide a system message to control the behavior of the chatbot.",
    (
        PROMPT_PARAM,
        SYSTEM_PROMPT_PARAM,
        MODEL_PARAM,
        NUM_TOKENS_PARAM.with_default(512),
        TEMPERATURE_PARAM,
        STOP_PARAM,
    ),
)
def chat_completion(
    context: ExecutionContext,
    prompt: str,
    system_prompt: str | None,
    model: str | None,
    num_tokens: float,
    temperature: float | None,
    stop: list[str] | None,
) -> str:
    if model is None:
        model = context.settings.default_chat_model
    assert_condition(is_chat_completion_model(model), "Must use `gpt-3.5-turbo` or `gpt-4` related models for this formula.")
    if not prompt:
        return ""

    messages: list[ChatMessage] = []
    if system_prompt:
        messages.append(ChatMessage(role="system", content=system_prompt))
    messages.append(ChatMessage(role="user", content=prompt))

    return get_chat_completion(
        context,
        ChatCompletionRequest(
            model=model,
            messages=messages,
            max_tokens=int(num_tokens),
            temperature=temperature,
            stop=stop,
        ),
    )


@formula(
    "GPT3PromptExamples",
    "Complete text from a prompt and a set of examples",
    (
        PROMPT_PARAM,
        ParamSpec(
            "training_prompts",
            "string_array",
            "Example prompts. Should be the same length as `training_responses`",
        ),
        ParamSpec(
            "training_responses",
            "string_array",
            "Example responses corresponding to `training_prompts`. Should be the same length.",
        ),
        MODEL_PARAM,
        NUM_TOKENS_PARAM.with_default(512),
        TEMPERATURE_PARAM,
        STOP_PARAM,
    ),
)
def prompt_examples(
    context: ExecutionContext,
    prompt: str,
    training_prompts: list[str],
    training_responses: list[str],
    model: str | None,
    num_tokens: float,
    temperature: float | None,
    stop: list[str] | None,
) -> str:
    assert_condition(
        len(training_prompts) == len(training_responses),
        "Must have same number of example prompts as example responses",
    )
    if not prompt:
        return ""
    assert_condition(len(training_responses) > 0, "Please provide some training responses")

    full_prompt = render_examples(prompt, training_prompts, training_responses)
    return _complete(context, full_prompt, model, num_tokens, temperature, stop)


def _templated(template: str):
    """Formula body that renders the prompt into ``template`` before completing it."""

    def execute(
        context: ExecutionContext,
        prompt: str,
        model: str | None,
        num_tokens: float,
        temperature: float | None,
        stop: list[str] | None,
    ) -> str:
        if not prompt:
            return ""
        return _complete(context, render_prompt(template, prompt), model, num_tokens, temperature, stop)

    return execute


question_answer = formula(
    "QuestionAnswer",
    "Answer a question, simply provide a natural language question that you might ask Google or Wikipedia",
    prompt_params(128),
)(_templated(QUESTION_ANSWER_TEMPLATE))

summarize = formula("Summarize", "Summarize a large chunk of text", prompt_params(64))(
    _templated(SUMMARIZE_TEMPLATE)
)

keywords = formula("Keywords", "Extract keywords from a large chunk of text", prompt_params(64))(
    _templated(KEYWORDS_TEMPLATE)
)

mood_to_color = formula("MoodToColor", "Generate a color for a mood", prompt_params(6))(
    _templated(MOOD_TO_COLOR_TEMPLATE)
)

sentiment_classifier = formula(
    "SentimentClassifier",
    "Categorizes sentiment of text into positive, neutral, or negative",
    prompt_params(20),
)(_templated(SENTIMENT_TEMPLATE))
