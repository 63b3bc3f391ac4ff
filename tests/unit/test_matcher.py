import pytest
from unittest.mock import MagicMock

from quizpilot.layers.action import ActionExecutor
from quizpilot.layers.quiz import GroupLocator
from quizpilot.layers.quiz.matcher import AnswerMatcher, MatchResult, MatchTier, answer_words, match_answer


def test_exact_tier_wins_before_partial():
    result = match_answer(["Paris", "Paris, France", "The capital of France is Paris"], "Paris")
    assert result.matched
    assert result.tier is MatchTier.EXACT
    assert result.option_index == 0


def test_exact_is_case_insensitive_on_trimmed_option_text():
    result = match_answer(["Berlin", "  paris\n"], "PARIS")
    assert (result.tier, result.option_index) == (MatchTier.EXACT, 1)


def test_answer_whitespace_is_kept():
    # "paris" is inside "  paris ", so the padded answer still lands on a partial match
    result = match_answer(["Berlin", "paris"], "  PARIS ")
    assert (result.tier, result.option_index) == (MatchTier.PARTIAL, 1)


def test_exact_checked_across_all_options_first():
    # "Paris" is contained in option 0, but option 1 is an exact match
    result = match_answer(["Paris, France", "paris"], "Paris")
    assert (result.tier, result.option_index) == (MatchTier.EXACT, 1)


def test_partial_containment_both_directions():
    result = match_answer(["London (UK)"], "London")
    assert (result.tier, result.option_index) == (MatchTier.PARTIAL, 0)

    result = match_answer(["Rome", "Oslo"], "It is Oslo, Norway")
    assert (result.tier, result.option_index) == (MatchTier.PARTIAL, 1)


def test_empty_option_text_is_contained_in_any_answer():
    result = match_answer(["", "Mercury"], "Venus")
    assert (result.tier, result.option_index) == (MatchTier.PARTIAL, 0)


def test_fuzzy_threshold_rounds_up():
    # tokens {large, ocean, mammal}; 1 of 3 hits, ceil(1.5) = 2 needed
    result = match_answer(["Blue whale lives in ocean"], "large ocean mammal")
    assert not result.matched
    assert result.tier is MatchTier.NONE
    assert result.option_index == -1


def test_fuzzy_accepts_half_of_words():
    result = match_answer(["It is a large marine mammal"], "large ocean mammal")
    assert (result.tier, result.option_index) == (MatchTier.FUZZY, 0)


def test_fuzzy_first_option_meeting_threshold_wins():
    options = ["the great wall", "great wall of china in asia"]
    result = match_answer(options, "great wall china")
    assert (result.tier, result.option_index) == (MatchTier.FUZZY, 0)


def test_short_words_do_not_count():
    assert answer_words("a to of the sea") == ["the", "sea"]


def test_answer_without_long_words_takes_first_option():
    # no counted words means a threshold of zero, met by every option
    result = match_answer(["Yes", "No"], "B")
    assert (result.tier, result.option_index) == (MatchTier.FUZZY, 0)
    assert result.option_text == "Yes"


def test_match_result_to_dict():
    result = match_answer(["Paris"], "Paris")
    assert result.to_dict() == {
        "matched": True,
        "tier": "exact",
        "optionIndex": 0,
        "optionText": "Paris",
        "answer": "Paris",
    }
    assert MatchResult.no_match("x").to_dict()["optionIndex"] == -1


class TestAnswerMatcher:
    """select_answer activates the chosen option and nothing else."""

    def test_radio_activation_sequence(self, quiz_document):
        locator = GroupLocator(quiz_document)
        options = locator.find_options(locator.find_questions()[0])
        result = AnswerMatcher(ActionExecutor(quiz_document)).select_answer(options, "paris")

        assert result.tier is MatchTier.EXACT
        paris = options[1].element
        assert [kind for kind, el in quiz_document.events if el == paris] == ["activate", "click", "change"]
        assert paris.checked

    def test_generic_option_gets_no_change_event(self, quiz_document):
        locator = GroupLocator(quiz_document)
        options = locator.find_options(locator.find_questions()[1])
        AnswerMatcher(ActionExecutor(quiz_document)).select_answer(options, "4")

        assert [kind for kind, _ in quiz_document.events] == ["activate", "click"]
        assert quiz_document.events[0][1] == options[1].element

    def test_no_match_has_no_side_effect(self, quiz_document):
        locator = GroupLocator(quiz_document)
        options = locator.find_options(locator.find_questions()[0])
        result = AnswerMatcher(ActionExecutor(quiz_document)).select_answer(options, "Madrid")

        assert not result.matched
        assert quiz_document.events == []

    def test_short_answer_still_clicks_first_option(self, quiz_document):
        locator = GroupLocator(quiz_document)
        options = locator.find_options(locator.find_questions()[1])
        result = AnswerMatcher(ActionExecutor(quiz_document)).select_answer(options, "x")

        assert (result.tier, result.option_index) == (MatchTier.FUZZY, 0)
        assert quiz_document.events[0] == ("activate", options[0].element)

    def test_empty_options(self):
        executor = MagicMock()
        result = AnswerMatcher(executor).select_answer([], "Paris")
        assert result == MatchResult.no_match("Paris")
        executor.activate.assert_not_called()
