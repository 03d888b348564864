"""Configuration package utilities."""

__all__ = ["ConfigController", "CONFIG_DIR_ENV"]


def __getattr__(name: str):
    if name in __all__:
        from config import controller

        return getattr(controller, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
