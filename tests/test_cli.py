from __future__ import annotations

import pytest

import openai_pack.cli as cli_mod
from openai_pack.common.errors import UserVisibleError


def test_parse_args_list_collects_arrays() -> None:
    out = cli_mod.parse_args_list(
        ["prompt=dog", "training_prompts=cat", "training_prompts=cow", "num_tokens=5"],
        {"training_prompts"},
    )
    assert out == {"prompt": "dog", "training_prompts": ["cat", "cow"], "num_tokens": "5"}


def test_parse_args_list_rejects_bare_value() -> None:
    with pytest.raises(UserVisibleError):
        cli_mod.parse_args_list(["dog"], set())


def test_list_command(capsys: pytest.CaptureFixture[str]) -> None:
    assert cli_mod.main(["list"]) == 0
    assert "Summarize" in capsys.readouterr().out


def test_run_command(api, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    api.reply("/completions", {"choices": [{"text": " cats, dogs "}]})
    monkeypatch.setattr(cli_mod, "make_context", lambda settings: api.context())

    assert cli_mod.main(["run", "Keywords", "--arg", "prompt=cats and dogs"]) == 0
    assert capsys.readouterr().out.strip().splitlines()[-1] == "cats, dogs"
    assert api.bodies[0]["prompt"] == "Extract keywords from this text:\ncats and dogs"


def test_run_examples_from_cli(api, monkeypatch: pytest.MonkeyPatch) -> None:
    api.reply("/completions", {"choices": [{"text": "woof"}]})
    monkeypatch.setattr(cli_mod, "make_context", lambda settings: api.context())

    code = cli_mod.main(
        ["run", "GPT3PromptExamples", "--arg", "prompt=dog", "--arg", "training_prompts=cat", "--arg", "training_responses=meow"]
    )
    assert code == 0
    assert api.bodies[0]["prompt"] == "cat\nmeow```dog\n"


def test_run_rejected_input_exits_nonzero(api, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli_mod, "make_context", lambda settings: api.context())
    assert cli_mod.main(["run", "ChatCompletion", "--arg", "prompt=hi", "--arg", "model=text-ada-001"]) == 1
    assert api.requests == []


def test_unknown_formula_exits_2() -> None:
    assert cli_mod.main(["run", "Translate"]) == 2
