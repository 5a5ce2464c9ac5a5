"""Policy Calc CLI."""
