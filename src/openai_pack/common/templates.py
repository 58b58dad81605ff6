"""Prompt templating helpers and the fixed formula templates."""
from __future__ import annotations

from collections.abc import Sequence

QUESTION_ANSWER_TEMPLATE = """I am a highly intelligent question answering bot. If you ask me a question that is rooted in truth, I will give you the answer. If you ask me a question that is nonsense, trickery, or has no clear answer, I will respond with "Unknown".

Q: What is human life expectancy in the United States?
A: Human life expectancy in the United States is 78 years.

Q: Who was president of the United States in 1955?
A: Dwight D. Eisenhower was president of the United States in 1955.

Q: Which party did he belong to?
A: He belonged to the Republican Party.

Q: What is the square root of banana?
A: Unknown

Q: How does a telescope work?
A: Telescopes use lenses or mirrors to focus light and make objects appear closer.

Q: Where were the 1992 Olympics held?
A: The 1992 Olympics were held in Barcelona, Spain.

Q: How many squigs are in a bonk?
A: Unknown

Q: {{input}}
A: """

SUMMARIZE_TEMPLATE = "{{input}}\ntldr;\n"

KEYWORDS_TEMPLATE = "Extract keywords from this text:\n{{input}}"

MOOD_TO_COLOR_TEMPLATE = "The css code for a color like {{input}}:\nbackground-color: #"

SENTIMENT_TEMPLATE = (
    "Decide whether a Text's sentiment is positive, neutral, or negative.\n"
    "Text: {{input}}\n"
    "Sentiment: "
)

EXAMPLE_SEPARATOR = "```"


def render_prompt(template: str, user_input: str) -> str:
    """
    Render user input into the template.

    Args:
        template: Template content containing {{input}}.
        user_input: Input string.

    Returns:
        Rendered prompt.
    """
    return template.replace("{{input}}", user_input)


def render_examples(prompt: str, example_prompts: Sequence[str], example_responses: Sequence[str]) -> str:
    """
    Build a few-shot prompt from example prompt/response pairs.

    Each pair becomes ``"<prompt>\\n<response>"``; pairs and the final query are
    separated by ``EXAMPLE_SEPARATOR`` and the query ends with a newline.
    """
    examples = EXAMPLE_SEPARATOR.join(
        f"{ex_prompt}\n{ex_response}" for ex_prompt, ex_response in zip(example_prompts, example_responses)
    )
    return f"{examples}{EXAMPLE_SEPARATOR}{prompt}\n"
