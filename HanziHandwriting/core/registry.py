"""Service registry.
Simple factory mapping used to select recognition backends by name.
"""
from __future__ import annotations
from typing import Dict, Callable, Any

class Registry:
    def __init__(self) -> None:
        self._factories: Dict[str, Callable[..., Any]] = {}

    def register(self, name: str, factory: Callable[..., Any]) -> None:
        if name in self._factories:
            raise ValueError(f"Factory already registered for {name}")
        self._factories[name] = factory

    def create(self, name: str, *args, **kwargs) -> Any:
        if name not in self._factories:
            raise KeyError(f"No factory registered for {name}")
        return self._factories[name](*args, **kwargs)

    def __contains__(self, name: str) -> bool:
        return name in self._factories

    def list(self) -> Dict[str, Callable[..., Any]]:
        return dict(self._factories)

# name -> callable(config, catalog) returning a RecognitionBackend
BACKEND_REGISTRY = Registry()
