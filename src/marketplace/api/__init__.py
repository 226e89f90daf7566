__all__ = ["ROUTERS", "create_app"]


def __getattr__(name):
    # Resolved lazily so that importing a submodule (e.g. during domain
    # traversal) does not re-enter ``app`` while that submodule is half-loaded.
    if name in __all__:
        from marketplace.api import app

        return getattr(app, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
