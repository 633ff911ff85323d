"""Tests for candidate filtering and user/assistant character resolution."""

from tavern_logger.models import EntityCandidate, Message, ResolvedCharacters
from tavern_logger.pipeline import (
    DisambiguateStrategy,
    FirstCandidateStrategy,
    LastUserLabelStrategy,
    detect_user_entity,
    filter_candidates,
    normalized_key,
    resolve_characters,
)


def _cands(*names):
    return [EntityCandidate(name=n, message_index=0, start=i, end=i + 1, strategy="tag")
            for i, n in enumerate(names)]


def _user(content):
    return Message(role="user", content=content)


# ── normalized_key / filter_candidates ─────────────────────


def test_normalized_key():
    assert normalized_key("Mx. Foo!") == "mxfoo"
    assert normalized_key("  Nova  ") == "nova"
    assert normalized_key("Jean-Luc") == "jeanluc"
    assert normalized_key("snake_case") == "snakecase"


def test_filter_drops_structural_and_empty():
    assert filter_candidates(_cands("scenario", "Nova", "System", "  ", "/")) == ["Nova"]


def test_filter_dedupes_keeping_first():
    assert filter_candidates(_cands("Nova", "Lumi", "Nova")) == ["Nova", "Lumi"]


# ── user detection ─────────────────────────────────────────


def test_user_label_most_recent_wins():
    messages = [_user("Alice: hi"), Message(role="assistant", content="Hello"), _user("Bob: hey")]
    assert detect_user_entity(messages) == "Bob"


def test_user_label_skips_unlabelled_messages():
    messages = [_user("Alice: hi"), _user("just talking now")]
    assert detect_user_entity(messages) == "Alice"


def test_user_label_only_first_line():
    assert detect_user_entity([_user("Hello there\nAlice: hi")]) is None
    assert detect_user_entity([_user("Alice: hi\nmore text")]) == "Alice"


def test_user_label_ignores_other_roles():
    messages = [Message(role="assistant", content="Nova: hi"), Message(role="system", content="Note: x")]
    assert LastUserLabelStrategy().attempt(messages) is None


def test_user_label_empty_label():
    assert detect_user_entity([_user(" : hi")]) is None


# ── resolve_characters ─────────────────────────────────────


def test_single_entity_no_user_messages():
    resolved = resolve_characters(_cands("Nova"), [Message(role="system", content="<Nova>...</Nova>")])
    assert resolved == ResolvedCharacters(ai_entity="Nova", user_entity=None)


def test_disambiguates_user_from_assistant():
    resolved = resolve_characters(_cands("Alice", "Bob"), [_user("Alice: hello")])
    assert resolved.user_entity == "Alice"
    assert resolved.ai_entity == "Bob"


def test_no_candidates_is_unknown_even_with_user():
    resolved = resolve_characters([], [_user("Sam: hi")])
    assert resolved.ai_entity == "unknown"
    assert resolved.user_entity == "Sam"


def test_single_candidate_wins_even_if_it_is_the_user():
    resolved = resolve_characters(_cands("Alice"), [_user("Alice: hi")])
    assert resolved.ai_entity == "Alice"


def test_superstring_of_user_is_skipped():
    resolved = resolve_characters(_cands("Alice Smith", "Bob"), [_user("Alice: hi")])
    assert resolved.ai_entity == "Bob"


def test_substring_of_user_is_skipped():
    resolved = resolve_characters(_cands("Al", "Bob"), [_user("Alice: hi")])
    assert resolved.ai_entity == "Bob"


def test_all_related_falls_back_to_first():
    resolved = resolve_characters(_cands("Alice", "alice!"), [_user("Alice: hi")])
    assert resolved.ai_entity == "Alice"


def test_no_user_guess_takes_first():
    resolved = resolve_characters(_cands("Nova", "Lumi"), [_user("hello")])
    assert resolved.ai_entity == "Nova"
    assert resolved.user_entity is None


def test_structural_only_candidates_are_unknown():
    assert resolve_characters(_cands("scenario", "system"), []).ai_entity == "unknown"


def test_custom_strategy_order():
    resolved = resolve_characters(
        _cands("Alice", "Bob"),
        [_user("Alice: hi")],
        assistant_strategies=(FirstCandidateStrategy(),),
    )
    assert resolved.ai_entity == "Alice"


def test_disambiguate_strategy_alone():
    strategy = DisambiguateStrategy()
    assert strategy.attempt(["Alice", "Bob"], "Alice") == "Bob"
    assert strategy.attempt(["Alice", "Bob"], None) is None
    assert strategy.attempt(["Alice", "Bob"], "!!!") is None
    assert strategy.attempt(["Alice"], "alice") is None
