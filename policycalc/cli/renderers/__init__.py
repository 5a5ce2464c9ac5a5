"""Rich renderers for CLI output."""

from .results_renderer import render_federal_taxes, render_policy_results

__all__ = ["render_federal_taxes", "render_policy_results"]
