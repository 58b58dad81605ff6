"""FastAPI surface for the formula catalog.

Endpoints:
- GET  /health
- GET  /formulas
- GET  /formulas/{name}/autocomplete/{param}
- POST /formulas/{name}  { "<param>": <value>, ... }
"""
from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Any

from fastapi import Body, Depends, FastAPI, HTTPException
from pydantic import BaseModel

from openai_pack.common.config import ExecutionContext, load_settings, make_context
from openai_pack.common.errors import NetworkError, RemoteError, UserVisibleError
from openai_pack.common.logging_setup import setup_logging
from openai_pack.formulas import FORMULAS, FormulaSpec, get_formula, run_formula

LOGGER = logging.getLogger("openai_pack.serve.app")

SETTINGS = load_settings()
setup_logging(SETTINGS.log_level)


class FormulaOut(BaseModel):
    formula: str
    result: str


app = FastAPI(title="OpenAI Formula Pack")


def get_context() -> Iterator[ExecutionContext]:
    """Yield a context whose HTTP client lives for one request."""
    try:
        context = make_context(SETTINGS)
    except UserVisibleError as e:
        raise HTTPException(status_code=400, detail=str(e))
    try:
        yield context
    finally:
        context.client.close()


def lookup_formula(name: str) -> FormulaSpec:
    """Resolve the formula named in the path; runs before the execution context is built."""
    try:
        return get_formula(name)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Unknown formula: {name}")


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/formulas")
def list_formulas() -> list[dict[str, Any]]:
    return [spec.describe() for spec in FORMULAS.values()]


@app.get("/formulas/{name}/autocomplete/{param}")
def autocomplete(name: str, param: str) -> list[str]:
    spec = lookup_formula(name)
    try:
        return spec.autocomplete(param)
    except UserVisibleError as e:
        raise HTTPException(status_code=404, detail=str(e))


@app.post("/formulas/{name}", response_model=FormulaOut)
def call_formula(
    args: dict[str, Any] = Body(...),
    spec: FormulaSpec = Depends(lookup_formula),
    context: ExecutionContext = Depends(get_context),
) -> FormulaOut:
    try:
        result = run_formula(spec.name, args, context)
    except UserVisibleError as e:
        LOGGER.info("Formula %s rejected: %s", spec.name, e)
        raise HTTPException(status_code=400, detail=str(e))
    except (RemoteError, NetworkError) as e:
        LOGGER.error("Formula %s failed upstream: %s", spec.name, e)
        raise HTTPException(status_code=502, detail="Upstream API error")
    return FormulaOut(formula=spec.name, result=result)
