"""skillbudget CLI entry point.

This package resolves a project's framework, selects backend skill
references that fit a token budget, and installs them for AI coding
agents. See `skillbudget --help` for details.
"""
