"""Image generation formula and the named style table."""
from __future__ import annotations

import logging
from types import MappingProxyType

from openai_pack.client.router import IMAGE_GENERATIONS_PATH, post_json
from openai_pack.common.config import ExecutionContext
from openai_pack.common.errors import RemoteError
from openai_pack.common.schema import ImageRequest
from openai_pack.formulas.registry import ParamSpec, formula

LOGGER = logging.getLogger("openai_pack.images")

STYLE_NAME_TO_PROMPT = MappingProxyType(
    {
        "Cave wall": "drawn on a cave wall",
        "Basquiat": "in the style of Basquiat",
        "Digital art": "as digital art",
        "Photorealistic": "in a photorealistic style",
        "Andy Warhol": "in the style of Andy Warhol",
        "Pencil drawing": "as a pencil drawing",
        "1990s Saturday morning cartoon": "as a 1990s Saturday morning cartoon",
        "Steampunk": "in a steampunk style",
        "Solarpunk": "in a solarpunk style",
        "Studio Ghibli": "in the style of Studio Ghibli",
        "Movie poster": "as a movie poster",
        "Book cover": "as a book cover",
        "Album cover": "as an album cover",
        "3D Icon": "as a 3D icon",
        "Ukiyo-e": "in the style of Ukiyo-e",
    }
)

IMAGE_SIZES = ("256x256", "512x512", "1024x1024")


def styled_prompt(prompt: str, style: str | None) -> str:
    """Append the phrase for ``style``; unknown style names are appended as given."""
    if not style:
        return prompt
    return f"{prompt} {STYLE_NAME_TO_PROMPT.get(style, style)}"


@formula(
    "CreateDalleImage",
    "Create image from prompt",
    (
        ParamSpec("prompt", "string", "prompt"),
        ParamSpec("size", "string", "size", optional=True, default="512x512", suggestions=IMAGE_SIZES),
        ParamSpec(
            "style",
            "string",
            "The style to use for your image. If you provide this, you don't need to specify the style in the prompt",
            optional=True,
            suggestions=tuple(STYLE_NAME_TO_PROMPT),
        ),
        ParamSpec(
            "temporary_url",
            "boolean",
            "Return a temporary URL that expires after an hour. Useful for adding the image to an "
            "Image column, because the default data URIs are too long.",
            optional=True,
            default=False,
        ),
    ),
    cache_ttl_secs=60 * 60,
    value_hint="image_reference",
)
def create_image(
    context: ExecutionContext,
    prompt: str,
    size: str | None,
    style: str | None,
    temporary_url: bool | None,
) -> str:
    if not prompt:
        return ""

    request = ImageRequest(
        prompt=styled_prompt(prompt, style),
        size=size or "512x512",
        response_format="url" if temporary_url else "b64_json",
    )
    LOGGER.debug("Image generation size=%s format=%s", request.size, request.response_format)
    data = post_json(context, IMAGE_GENERATIONS_PATH, request.model_dump())

    try:
        image = data["data"][0]
        if temporary_url:
            return image["url"]
        return f"data:image/png;base64,{image['b64_json']}"
    except (KeyError, IndexError, TypeError) as e:
        raise RemoteError(200, message="Malformed image response") from e
