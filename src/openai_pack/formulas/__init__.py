"""Formula catalog. Importing this package registers every formula in ``FORMULAS``."""
from openai_pack.formulas import images, text  # noqa: F401
from openai_pack.formulas.registry import FORMULAS, FormulaSpec, ParamSpec, get_formula, run_formula

__all__ = ["FORMULAS", "FormulaSpec", "ParamSpec", "get_formula", "run_formula"]
