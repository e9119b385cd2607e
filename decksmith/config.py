from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env")

    app_name: str = "DeckSmith"
    debug: bool = False

    # Remote card service; empty means resolve against the local card cache
    card_service_url: str = ""
    card_database_path: str = ""

    # Callers' timeout on the batch resolver call (seconds)
    resolver_timeout_seconds: float = 5.0

    # When True a resolver outage fails the whole run instead of degrading
    require_card_resolution: bool = False

    # Regulation marks legal in Standard, oldest first
    standard_regulation_marks: list[str] = ["G", "H", "I", "J", "K"]

    # Regulation marks legal in Expanded, oldest first
    expanded_regulation_marks: list[str] = ["D", "E", "F", "G", "H", "I", "J", "K"]

    # Fewer unique names than this raises an advisory warning
    low_unique_cards_threshold: int = 8


settings = Settings()


# =============================================================================
# DECK CONSTRUCTION RULES
# =============================================================================

# Pokémon decks are exactly 60 cards in every supported format
POKEMON_DECK_SIZE = 60

# Riftbound structural slots (40 main + 1 legend + 3 battlefields + 12 runes)
RIFTBOUND_MAIN_DECK_SIZE = 40
RIFTBOUND_LEGEND_COUNT = 1
RIFTBOUND_BATTLEFIELD_COUNT = 3
RIFTBOUND_RUNE_COUNT = 12
RIFTBOUND_DECK_SIZE = (
    RIFTBOUND_MAIN_DECK_SIZE
    + RIFTBOUND_LEGEND_COUNT
    + RIFTBOUND_BATTLEFIELD_COUNT
    + RIFTBOUND_RUNE_COUNT
)

# Per-name copy limits
POKEMON_COPY_LIMIT = 4
RIFTBOUND_COPY_LIMIT = 3
SINGLETON_COPY_LIMIT = 1

# Nominal cap for basic resources; groups of these are reported as unlimited
BASIC_RESOURCE_NOMINAL_LIMIT = 60

# Deck-wide caps on special cards
MAX_ACE_SPECS = 1
MAX_RADIANTS = 1
