"""Run pack formulas from the command line.

    openai-pack list
    openai-pack run Summarize --arg prompt="long text..." --arg num_tokens=32
    openai-pack run GPT3PromptExamples --arg prompt=dog \
        --arg training_prompts=cat --arg training_responses=meow
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import Any

from openai_pack.common.config import load_settings, make_context
from openai_pack.common.errors import PackError, UserVisibleError
from openai_pack.common.logging_setup import setup_logging
from openai_pack.formulas import FORMULAS, get_formula, run_formula

LOGGER = logging.getLogger("openai_pack.cli")


def parse_args_list(pairs: list[str], array_params: set[str]) -> dict[str, Any]:
    """
    Turn repeated ``key=value`` pairs into formula arguments.

    Values for ``array_params`` are always collected into lists; other keys keep
    their last value.
    """
    out: dict[str, Any] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise UserVisibleError(f"Expected key=value, got {pair!r}")
        if key in array_params:
            out.setdefault(key, []).append(value)
        else:
            out[key] = value
    return out


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="openai-pack", description="Run OpenAI pack formulas")
    ap.add_argument("--cfg", default=None, help="Config path (default: configs/pack.yaml)")
    sub = ap.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="List available formulas")

    run = sub.add_parser("run", help="Run one formula")
    run.add_argument("name", help="Formula name, e.g. Summarize")
    run.add_argument("--arg", action="append", default=[], metavar="KEY=VALUE", help="Formula argument (repeatable)")
    return ap


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = load_settings(args.cfg)
    setup_logging(settings.log_level)

    if args.command == "list":
        for name, spec in FORMULAS.items():
            print(f"{name}\t{spec.description}")
        return 0

    try:
        spec = get_formula(args.name)
    except KeyError:
        LOGGER.error("Unknown formula: %s", args.name)
        return 2

    array_params = {p.name for p in spec.params if p.type == "string_array"}
    try:
        formula_args = parse_args_list(args.arg, array_params)
        context = make_context(settings)
        try:
            result = run_formula(spec.name, formula_args, context)
        finally:
            context.client.close()
    except UserVisibleError as e:
        LOGGER.error("%s", e)
        return 1
    except PackError as e:
        LOGGER.error("Request failed: %s", e)
        return 1

    print(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
