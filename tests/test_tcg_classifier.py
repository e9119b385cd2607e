"""Tests for game classification."""

from decksmith.models.card import CardInfo
from decksmith.models.game import Dialect, Tcg
from decksmith.parsers import tokenize_deck
from decksmith.services.tcg_classifier import (
    NO_EVIDENCE_REASON,
    classify_tcg,
    collect_signals,
)


def _classify(text: str, infos: dict[str, CardInfo | None] | None = None):
    deck = tokenize_deck(text)
    return classify_tcg(deck.parsed_lines, deck.dialect, infos)


class TestClassifyTcg:
    """Tests for classify_tcg."""

    def test_live_export_is_pokemon(self, sample_live_export: str) -> None:
        result = _classify(sample_live_export)

        assert result.tcg == Tcg.POKEMON
        assert result.confidence == 100
        assert any("Pokémon TCG Live" in reason for reason in result.reasons)

    def test_riftbound_export_is_riftbound(self, sample_riftbound_export: str) -> None:
        result = _classify(sample_riftbound_export)

        assert result.tcg == Tcg.RIFTBOUND
        assert result.confidence >= 80
        assert any("Riftbound" in reason for reason in result.reasons)

    def test_pocket_export_is_pokemon(self, sample_pocket_export: str) -> None:
        assert _classify(sample_pocket_export).tcg == Tcg.POKEMON

    def test_generic_list_with_pokemon_vocabulary(self) -> None:
        result = _classify("4 Charizard ex\n4 Pidgeot ex\n4 Nest Ball")

        assert result.tcg == Tcg.POKEMON
        assert result.confidence > 0

    def test_generic_list_with_runes(self) -> None:
        result = _classify("1 Jinx, Loose Cannon\n6 Fury Rune\n6 Chaos Rune\n3 Get Excited!")
        assert result.tcg == Tcg.RIFTBOUND

    def test_no_evidence_defaults_to_pokemon(self) -> None:
        result = _classify("4 Iono\n4 Arven")

        assert result.tcg == Tcg.POKEMON
        assert result.confidence == 0
        assert result.reasons == (NO_EVIDENCE_REASON,)

    def test_empty_deck(self) -> None:
        result = classify_tcg([], Dialect.GENERIC_LIST)
        assert result.tcg == Tcg.POKEMON
        assert result.confidence == 0

    def test_confidence_is_bounded(self, sample_riftbound_export: str) -> None:
        result = _classify(sample_riftbound_export)
        assert 0 <= result.confidence <= 100

    def test_resolver_overlap_decides_plain_lists(self) -> None:
        infos = {
            "Iono": None,
            "Get Excited!": CardInfo(card_id="OGN-001", name="Get Excited!", tcg=Tcg.RIFTBOUND),
            "Pouty Poro": CardInfo(card_id="OGN-002", name="Pouty Poro", tcg=Tcg.RIFTBOUND),
        }
        result = _classify("3 Get Excited!\n3 Pouty Poro\n1 Iono", infos)

        assert result.tcg == Tcg.RIFTBOUND
        assert any("known Riftbound cards" in reason for reason in result.reasons)

    def test_resolved_supertypes_count_as_slot_cards(self) -> None:
        infos = {
            "Jinx": CardInfo(
                card_id="OGN-100", name="Jinx", tcg=Tcg.RIFTBOUND, supertype="Legend"
            ),
        }
        signals = collect_signals(tokenize_deck("1 Jinx").parsed_lines, Dialect.GENERIC_LIST, infos)
        assert any("Legends, Battlefields or Runes" in s.reason for s in signals)


class TestCollectSignals:
    """Tests for individual signal sources."""

    def test_resolver_signal_omitted_when_unavailable(self, sample_live_export: str) -> None:
        deck = tokenize_deck(sample_live_export)
        signals = collect_signals(deck.parsed_lines, deck.dialect, None)
        assert not any("known" in s.reason for s in signals)

    def test_deck_size_signal(self, sample_live_export: str) -> None:
        deck = tokenize_deck(sample_live_export)
        signals = collect_signals(deck.parsed_lines, deck.dialect)
        assert any("60 cards" in s.reason for s in signals)

    def test_set_code_signal_strength_is_share(self) -> None:
        deck = tokenize_deck("Pokémon: 2\n1 Pikachu SVI 57\n1 Mystery Card")
        signals = collect_signals(deck.parsed_lines, deck.dialect)
        set_signal = next(s for s in signals if "set codes" in s.reason)

        assert set_signal.strength == 0.5
        assert set_signal.reason == "1 of 2 lines carry Pokémon set codes."

    def test_domain_signal(self) -> None:
        deck = tokenize_deck("6 Fury Rune\n6 Calm Rune")
        signals = collect_signals(deck.parsed_lines, deck.dialect)
        domain = next(s for s in signals if "domains" in s.reason)

        assert domain.hypothesis == Tcg.RIFTBOUND
        assert "calm, fury" in domain.reason
