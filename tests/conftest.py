import asyncio

import pytest

from decksmith.models import failure as failure_module
from decksmith.models.card import CardHint, CardInfo
from decksmith.models.failure import ResolutionUnavailableError
from decksmith.models.game import Tcg


@pytest.fixture(autouse=True)
def clear_finalized_responses():
    """Clear the finalized responses set between tests.

    This prevents test isolation issues where Python reuses memory
    addresses for new objects, causing id() collisions with previously
    finalized responses.
    """
    failure_module._finalized_responses.clear()
    yield
    failure_module._finalized_responses.clear()


class StaticResolver:
    """Answers from a fixed catalog and records every batch it receives."""

    def __init__(self, catalog: dict[str, CardInfo] | None = None) -> None:
        self.catalog = catalog or {}
        self.calls: list[tuple[list[str], list[CardHint]]] = []

    async def resolve_many(
        self, names: list[str], hints: list[CardHint]
    ) -> dict[str, CardInfo | None]:
        self.calls.append((list(names), list(hints)))
        return {name: self.catalog.get(name) for name in names}


class FailingResolver:
    """Always unavailable."""

    def __init__(self) -> None:
        self.calls = 0

    async def resolve_many(
        self, names: list[str], hints: list[CardHint]
    ) -> dict[str, CardInfo | None]:
        self.calls += 1
        raise ResolutionUnavailableError(detail="card service down")


class HangingResolver:
    """Never answers."""

    async def resolve_many(
        self, names: list[str], hints: list[CardHint]
    ) -> dict[str, CardInfo | None]:
        await asyncio.Event().wait()
        return {}


def pokemon(
    name: str,
    mark: str | None = "G",
    subtypes: tuple[str, ...] = ("Basic",),
    types: tuple[str, ...] = ("Fire",),
) -> CardInfo:
    return CardInfo(
        card_id=f"test-{name.lower().replace(' ', '-')}",
        name=name,
        tcg=Tcg.POKEMON,
        supertype="Pokémon",
        subtypes=subtypes,
        types=types,
        regulation_mark=mark,
    )


def trainer(name: str, mark: str | None = "G", subtypes: tuple[str, ...] = ("Item",)) -> CardInfo:
    return CardInfo(
        card_id=f"test-{name.lower().replace(' ', '-')}",
        name=name,
        tcg=Tcg.POKEMON,
        supertype="Trainer",
        subtypes=subtypes,
        regulation_mark=mark,
    )


def basic_energy(name: str, energy_type: str) -> CardInfo:
    return CardInfo(
        card_id=f"test-{name.lower().replace(' ', '-')}",
        name=name,
        tcg=Tcg.POKEMON,
        supertype="Energy",
        subtypes=("Basic",),
        types=(energy_type,),
    )


@pytest.fixture
def sample_live_export() -> str:
    """A legal 60-card Standard list in Pokémon TCG Live export layout."""
    return """Pokémon: 12
4 Charmander PAF 7
2 Charmeleon OBF 27
3 Charizard ex OBF 125
2 Pidgey OBF 162
1 Pidgeot ex OBF 164

Trainer: 36
4 Arven SVI 166
4 Iono PAL 185
4 Ultra Ball SVI 196
4 Rare Candy SVI 191
4 Nest Ball SVI 181
4 Boss's Orders PAL 172
4 Super Rod PAL 188
4 Buddy-Buddy Poffin TEF 144
3 Counter Catcher PAR 160
1 Prime Catcher TEF 157

Energy: 12
12 Basic {R} Energy SVE 2

Total Cards: 60"""


@pytest.fixture
def pokemon_catalog() -> dict[str, CardInfo]:
    """Resolver answers for every card in sample_live_export."""
    cards = [
        pokemon("Charmander", mark="H"),
        pokemon("Charmeleon", subtypes=("Stage 1",)),
        pokemon("Charizard ex", subtypes=("Stage 2", "ex"), types=("Darkness",)),
        pokemon("Pidgey", types=("Colorless",)),
        pokemon("Pidgeot ex", subtypes=("Stage 2", "ex"), types=("Colorless",)),
        trainer("Arven", subtypes=("Supporter",)),
        trainer("Iono", subtypes=("Supporter",)),
        trainer("Ultra Ball"),
        trainer("Rare Candy"),
        trainer("Nest Ball"),
        trainer("Boss's Orders", subtypes=("Supporter",)),
        trainer("Super Rod"),
        trainer("Buddy-Buddy Poffin", mark="H"),
        trainer("Counter Catcher"),
        trainer("Prime Catcher", mark="H", subtypes=("Item", "ACE SPEC")),
        basic_energy("Basic {R} Energy", "Fire"),
    ]
    return {card.name: card for card in cards}


@pytest.fixture
def sample_riftbound_export() -> str:
    """A complete Riftbound list: 1 Legend, 40 main deck, 3 Battlefields, 12 Runes."""
    return """Legend:
1 Jinx, Loose Cannon

Main Deck:
3 Get Excited!
3 Pouty Poro
3 Flash of Brilliance
3 Noxus Hopeful
3 Brazen Buccaneer
3 Hextech Ray
3 Void Seeker
3 Jinx, Rebel
3 Falling Star
3 Disintegrate
3 Sneaky Deckhand
3 Raging Soul
3 Unlicensed Armory
1 Super Mega Death Rocket

Battlefields:
1 The Grand Plaza
1 Hallowed Tomb
1 Zaun Warrens

Runes:
6 Fury Rune
6 Chaos Rune"""


@pytest.fixture
def sample_pocket_export() -> str:
    """Pokémon TCG Pocket export with trailing multipliers."""
    return """Pikachu ex (A1) x2
Zapdos ex (A1) x2
Voltorb x2
Electrode x2
Poké Ball x2
Professor's Research x2"""


@pytest.fixture
def static_resolver(pokemon_catalog: dict[str, CardInfo]) -> StaticResolver:
    return StaticResolver(pokemon_catalog)


@pytest.fixture
def empty_resolver() -> StaticResolver:
    """Resolver that knows no cards."""
    return StaticResolver()


@pytest.fixture
def failing_resolver() -> FailingResolver:
    return FailingResolver()


@pytest.fixture
def hanging_resolver() -> HangingResolver:
    return HangingResolver()
