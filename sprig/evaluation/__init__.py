"""Evaluation engine for Sprig.

The evaluator walks the tree with an explicit stack and routes finished
calls through two pipelines: definitions (set/let and their markers) and
builtins (print, println, add, mult, sub, div).
"""

from sprig.evaluation.evaluator import Evaluator, Frame, Mode

__all__ = ["Evaluator", "Frame", "Mode"]
