"""Registry of app modules hosted behind the gateway"""

from dataclasses import dataclass
from typing import Dict, List, Optional


@dataclass(frozen=True)
class AppInstance:
    """Metadata for an app module"""
    id: str
    name: str
    description: str


COLLECTION_APP = AppInstance(
    id="collection",
    name="Collection",
    description="Create and manage collections of items, bookmarks, and resources",
)

_registry: Dict[str, AppInstance] = {COLLECTION_APP.id: COLLECTION_APP}


def register_app(app: AppInstance) -> None:
    if app.id in _registry:
        raise ValueError(f"App '{app.id}' already registered")
    _registry[app.id] = app


def get_app(app_id: str) -> Optional[AppInstance]:
    return _registry.get(app_id)


def list_apps() -> List[AppInstance]:
    return list(_registry.values())
