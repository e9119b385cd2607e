from decksmith.api.decks import router as decks_router
from decksmith.api.errors import register_error_handlers
from decksmith.api.health import router as health_router

__all__ = [
    "decks_router",
    "health_router",
    "register_error_handlers",
]
