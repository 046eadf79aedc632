"""Public SDK layer for py_bankclient.

Exports:
- json: JSON presenter helpers (to_dict, to_json)
- errors: public exceptions, map_exception() and describe_error()
- bootstrap: init_app/AppContext for one-import startup
"""

__all__ = [
    "json",
    "errors",
    "bootstrap",
]
