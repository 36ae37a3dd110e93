"""Tests for the hint contract: request validation, masking and repairs."""

import pytest
from pydantic import ValidationError

from wordhunt.ai.schemas import HintCandidate
from wordhunt.hints import (
    HintRequest,
    build_hint_prompt,
    compute_expected_mask,
    expected_mask,
)
from wordhunt.letters import MASK, legal_letters


def _request(word="example", forbidden="xyz", reveal=2, **kwargs) -> HintRequest:
    return HintRequest(word=word, forbidden_letters=forbidden, reveal_count=reveal, **kwargs)


class TestHintRequest:
    def test_word_length_defaults_to_word(self) -> None:
        assert _request().word_length == 7

    def test_forbidden_letters_normalized(self) -> None:
        assert _request(forbidden="XyZ").forbidden_letters == frozenset("xyz")

    def test_accepts_original_field_names(self) -> None:
        req = HintRequest.model_validate(
            {"word": "example", "incorrect_guesses": "xyz", "letters_to_reveal": 2}
        )
        assert req.forbidden_letters == frozenset("xyz")
        assert req.reveal_count == 2

    def test_mismatched_word_length_rejected(self) -> None:
        with pytest.raises(ValidationError, match="does not match"):
            _request(word_length=8)

    def test_zero_reveal_count_rejected(self) -> None:
        with pytest.raises(ValidationError):
            _request(reveal=0)

    def test_reveal_count_above_legal_letters_rejected(self) -> None:
        # example minus x has 5 distinct legal letters
        with pytest.raises(ValidationError, match="exceeds"):
            _request(reveal=6)

    def test_blank_word_rejected(self) -> None:
        with pytest.raises(ValidationError):
            _request(word="   ")


class TestChosenLetters:
    def test_worked_example(self) -> None:
        result, diagnostics = compute_expected_mask(
            _request(), HintCandidate(hint="e_a___e", chosen_letters=["e", "a"])
        )
        assert result.hint == "e_a___e"
        assert result.revealed_letters == ["a", "e"]
        assert diagnostics.chosen_letters_applied
        assert not diagnostics.repaired

    def test_chosen_letters_override_wrong_hint(self) -> None:
        result, diagnostics = compute_expected_mask(
            _request(), HintCandidate(hint="_x_m___", chosen_letters=["E", "A"])
        )
        assert result.hint == "e_a___e"
        assert "chosen_letters" in diagnostics.repairs

    def test_repeated_letter_revealed_everywhere(self) -> None:
        req = _request(word="serendipity", forbidden="", reveal=1)
        result, diagnostics = compute_expected_mask(
            req, HintCandidate(hint="", chosen_letters=["e"])
        )
        assert result.hint == "_e_e_______"
        assert len(result.hint) == 11
        assert [i for i, ch in enumerate(result.hint) if ch != MASK] == [1, 3]
        assert result.revealed_letters == ["e"]
        assert diagnostics.count_ok

    def test_all_legal_letters_reveal_whole_word(self) -> None:
        word = "banana"
        letters = legal_letters(word, "")
        req = _request(word=word, forbidden="", reveal=len(letters))
        result, diagnostics = compute_expected_mask(
            req, HintCandidate(hint="", chosen_letters=letters)
        )
        assert result.hint == "banana"
        assert MASK not in result.hint
        assert diagnostics.count_ok

    def test_every_legal_pair_yields_contract(self) -> None:
        req = _request(word="puzzling", forbidden="gz", reveal=2)
        legal = req.legal_letters
        for i, first in enumerate(legal):
            for second in legal[i + 1 :]:
                result, diagnostics = compute_expected_mask(
                    req, HintCandidate(hint="", chosen_letters=[first, second])
                )
                assert len(result.hint) == req.word_length
                assert result.hint == expected_mask(req.word, [first, second])
                assert set(result.revealed_letters) == {first, second}
                assert not set(result.hint) & req.forbidden_letters
                assert diagnostics.count_ok


class TestRepairs:
    def test_long_hint_truncated(self) -> None:
        result, diagnostics = compute_expected_mask(_request(), "e_a___ee")
        assert result.hint == "e_a___e"
        assert not diagnostics.length_ok
        assert diagnostics.repairs == ["length"]
        assert diagnostics.count_ok

    def test_short_hint_padded(self) -> None:
        result, diagnostics = compute_expected_mask(_request(), "e_a")
        assert result.hint == "e_a____"
        assert not diagnostics.length_ok

    def test_forbidden_letter_removed_and_other_positions_kept(self) -> None:
        req = _request(forbidden="x", reveal=2)
        result, diagnostics = compute_expected_mask(req, "exa___e")
        assert result.hint == "e_a___e"
        assert not diagnostics.forbidden_ok
        assert "forbidden_letters" in diagnostics.repairs

    def test_forbidden_check_applies_after_chosen_letters(self) -> None:
        req = _request(forbidden="x", reveal=2)
        result, diagnostics = compute_expected_mask(
            req, HintCandidate(hint="", chosen_letters=["e", "x"])
        )
        assert result.hint == "e_____e"
        assert not diagnostics.forbidden_ok
        assert not diagnostics.count_ok

    def test_wrong_letters_are_masked(self) -> None:
        result, diagnostics = compute_expected_mask(_request(), "q_a___e")
        assert result.hint == "__a___e"
        assert not diagnostics.letters_match_word
        assert "mismatched_letters" in diagnostics.repairs

    def test_star_placeholders_are_masked(self) -> None:
        result, diagnostics = compute_expected_mask(_request(), "e*a***e")
        assert result.hint == "e_a___e"
        assert result.revealed_letters == ["a", "e"]
        assert not diagnostics.letters_match_word

    def test_spaced_hint_does_not_leak_word_letters(self) -> None:
        result, diagnostics = compute_expected_mask(_request(), "_ _ a _ _ _ e")
        assert len(result.hint) == 7
        assert set(result.hint) <= {MASK, "a", "e"}
        assert not {"m", "l", "p"} & set(result.revealed_letters)
        assert not diagnostics.letters_match_word

    def test_wrong_count_is_reported_not_repaired(self) -> None:
        result, diagnostics = compute_expected_mask(_request(reveal=3), "e_a___e")
        assert result.hint == "e_a___e"
        assert not diagnostics.count_ok
        assert not diagnostics.repaired

    def test_hint_casing_follows_word(self) -> None:
        result, diagnostics = compute_expected_mask(_request(), "E_A___E")
        assert diagnostics.letters_match_word
        assert not diagnostics.repaired
        assert result.hint == "e_a___e"


class TestTotality:
    @pytest.mark.parametrize(
        "candidate",
        [None, "", {}, {"hint": 123}, {"chosen_letters": "ea"}, 42, object(), ["e", "a"]],
    )
    def test_malformed_candidates_never_raise(self, candidate) -> None:
        req = _request()
        result, _ = compute_expected_mask(req, candidate)
        assert len(result.hint) == req.word_length
        assert not set(result.hint.lower()) & req.forbidden_letters

    def test_dict_candidate(self) -> None:
        result, diagnostics = compute_expected_mask(
            _request(), {"hint": "", "chosen_letters": ["e", "a"], "reasoning": "vowels"}
        )
        assert result.hint == "e_a___e"
        assert result.reasoning == "vowels"

    def test_dict_without_hint_keeps_chosen_letters(self) -> None:
        result, diagnostics = compute_expected_mask(_request(), {"chosen_letters": ["e", "a"]})
        assert result.hint == "e_a___e"
        assert diagnostics.chosen_letters_applied

    def test_dict_with_bad_hint_keeps_chosen_letters_and_reasoning(self) -> None:
        result, _ = compute_expected_mask(
            _request(), {"hint": 123, "chosen_letters": ["e", "a"], "reasoning": "vowels"}
        )
        assert result.hint == "e_a___e"
        assert result.reasoning == "vowels"


class TestIdempotence:
    @pytest.mark.parametrize(
        "candidate",
        [
            HintCandidate(hint="e_a___e", chosen_letters=["e", "a"]),
            "exa___ee",
            "e_a",
        ],
    )
    def test_revalidating_a_result_changes_nothing(self, candidate) -> None:
        req = _request(forbidden="x")
        first, _ = compute_expected_mask(req, candidate)
        second, diagnostics = compute_expected_mask(req, first)
        assert second == first
        assert not diagnostics.repaired


class TestHintPrompt:
    def test_embeds_request_and_worked_example(self) -> None:
        system, prompt = build_hint_prompt(_request(word="serendipity", forbidden="qz", reveal=3))
        assert "hint generator" in system
        assert 'WORD: "serendipity"' in prompt
        assert "WORD LENGTH: 11 characters" in prompt
        assert 'FORBIDDEN LETTERS: "qz"' in prompt
        assert "Choose EXACTLY 3 UNIQUE letter(s)" in prompt
        assert 'Result: "e_a___e" (length 7, unique letters: 2)' in prompt
        assert "Available: [e, a, m, p, l]" in prompt

    def test_worked_example_matches_mask(self) -> None:
        assert expected_mask("example", ["e", "a"]) == "e_a___e"
