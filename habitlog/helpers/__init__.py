"""Helper modules for habitlog.

Submodules:
    - log_helpers: Coercion of external log records into LogEntry values
    - options_helpers: voluptuous schema and validation for query options
"""
