from .debouncer import Debouncer

__all__ = ["Debouncer"]
