"""Service layer: dispatch, completion and process-scoped state.

Services may import from domain and config layers.
They must never import from commands or output.
"""
