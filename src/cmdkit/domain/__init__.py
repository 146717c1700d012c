"""Domain layer: argument kinds, parse results, and the command tree.

This layer depends only on stdlib and pydantic.
It must never import from services, commands, config, or output.
"""
