"""Tests for evidence scoring."""

from decksmith.models.game import Tcg
from decksmith.services.scoring import Signal, clip, decide, score_signals


class TestSignal:
    """Tests for individual signals."""

    def test_points_are_weight_times_strength(self) -> None:
        signal = Signal(Tcg.POKEMON, 30.0, 0.5, "half")
        assert signal.fired
        assert signal.points == 15.0

    def test_strength_is_clipped(self) -> None:
        assert Signal(Tcg.POKEMON, 30.0, 2.0, "over").points == 30.0

    def test_zero_strength_has_not_fired(self) -> None:
        assert not Signal(Tcg.POKEMON, 30.0, 0.0, "nothing").fired


class TestScoreSignals:
    """Tests for score_signals."""

    def test_sums_only_matching_hypothesis(self) -> None:
        signals = [
            Signal(Tcg.POKEMON, 40.0, 1.0, "a"),
            Signal(Tcg.RIFTBOUND, 20.0, 1.0, "b"),
            Signal(Tcg.POKEMON, 10.0, 0.5, "c"),
        ]
        score = score_signals(signals, Tcg.POKEMON)

        assert score.points == 45.0
        assert score.reasons == ("a", "c")

    def test_unfired_signals_contribute_no_reason(self) -> None:
        signals = [Signal(Tcg.POKEMON, 40.0, 0.0, "silent")]
        score = score_signals(signals, Tcg.POKEMON)

        assert score.points == 0.0
        assert score.reasons == ()

    def test_score_is_clipped_to_100(self) -> None:
        signals = [Signal(Tcg.POKEMON, 80.0, 1.0, "a"), Signal(Tcg.POKEMON, 80.0, 1.0, "b")]
        assert score_signals(signals, Tcg.POKEMON).points == 100.0

    def test_clip(self) -> None:
        assert clip(-5) == 0.0
        assert clip(150) == 100.0
        assert clip(0.5, 0.0, 1.0) == 0.5


class TestDecide:
    """Tests for decide."""

    def test_confidence_is_margin(self) -> None:
        signals = [Signal(Tcg.POKEMON, 60.0, 1.0, "p"), Signal(Tcg.RIFTBOUND, 20.0, 1.0, "r")]
        verdict = decide(signals, [Tcg.POKEMON, Tcg.RIFTBOUND], "tie")

        assert verdict.winner == Tcg.POKEMON
        assert verdict.confidence == 40
        assert verdict.reasons == ("p", "r")

    def test_winner_reasons_come_first(self) -> None:
        signals = [Signal(Tcg.POKEMON, 10.0, 1.0, "p"), Signal(Tcg.RIFTBOUND, 50.0, 1.0, "r")]
        verdict = decide(signals, [Tcg.POKEMON, Tcg.RIFTBOUND], "tie")

        assert verdict.winner == Tcg.RIFTBOUND
        assert verdict.reasons == ("r", "p")

    def test_tie_goes_to_first_hypothesis(self) -> None:
        signals = [Signal(Tcg.POKEMON, 20.0, 1.0, "p"), Signal(Tcg.RIFTBOUND, 20.0, 1.0, "r")]
        verdict = decide(signals, [Tcg.POKEMON, Tcg.RIFTBOUND], "tie")

        assert verdict.winner == Tcg.POKEMON
        assert verdict.confidence == 0
        assert verdict.reasons[-1] == "tie"

    def test_reports_every_score(self) -> None:
        signals = [Signal(Tcg.RIFTBOUND, 20.0, 1.0, "r")]
        verdict = decide(signals, [Tcg.POKEMON, Tcg.RIFTBOUND], "tie")

        assert verdict.scores == {Tcg.POKEMON: 0.0, Tcg.RIFTBOUND: 20.0}
