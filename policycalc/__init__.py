"""Policy Calc - personal impact estimates for federal policy scenarios."""

__version__ = "0.1.0"
