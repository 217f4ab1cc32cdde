import pytest

from services.stagecheck.app.config import DEFAULT_FILLER_WORDS, DEFAULT_VAGUE_TERMS, RuleSettings, StagecheckSettings
from services.stagecheck.app.domain.criteria import VagueTermRules, is_vague


@pytest.fixture
def rules() -> VagueTermRules:
    return VagueTermRules.from_lists(DEFAULT_VAGUE_TERMS, DEFAULT_FILLER_WORDS)


@pytest.mark.parametrize(
    "criterion",
    [
        "works",
        "Works",
        "It works!",
        "Everything is done.",
        "Should be ready",
        "LOOKS GOOD",
        "",
        "   ",
        "It's done",
        "Everything's working",
        "It’s ready",
    ],
)
def test_subjective_criteria_are_vague(rules, criterion):
    assert is_vague(criterion, rules) is True


@pytest.mark.parametrize("criterion", ["It isn't done", "It’s done when the smoke suite passes"])
def test_contractions_do_not_hide_concrete_words(rules, criterion):
    assert is_vague(criterion, rules) is False


@pytest.mark.parametrize(
    "criterion",
    ["Migrations pass", "Unit tests >80%", "Config loaded", "x", "Health endpoint returns 200", "all"],
)
def test_verifiable_criteria_are_not_vague(rules, criterion):
    assert is_vague(criterion, rules) is False


def test_rules_from_settings_use_configured_terms():
    settings = StagecheckSettings(rules=RuleSettings(vague_terms=["Signed Off"], filler_words=["is"]))

    rules = VagueTermRules.from_settings(settings)

    assert rules.terms == frozenset({"signed off"})
    assert is_vague("Is signed off", rules) is True
    assert is_vague("works", rules) is False
