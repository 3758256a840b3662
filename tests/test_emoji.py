import pytest

from recipebox.services.emoji import DEFAULT_EMOJI, INGREDIENT_EMOJIS, classify, classify_many


def test_exact_match_is_case_and_space_insensitive():
    assert classify("Poulet") == "🍗"
    assert classify("  POULET  ") == "🍗"


def test_longest_key_wins_over_shorter_substring():
    # "pomme" y "pomme de terre" existen: gana la clave más específica
    assert classify("pomme de terre nouvelle") == "🥔"
    assert classify("pomme golden") == "🍎"
    assert classify("filet de boeuf") == "🥩"  # no "oeuf"
    assert classify("escalope de veau") == "🥩"  # no "eau"


def test_creme_and_creme_fraiche_do_not_collide():
    assert classify("crème") == "🥛"
    assert classify("crème fraîche") == "🍶"
    assert classify("crème fraîche épaisse") == "🍶"
    assert classify("crème liquide") == "🥛"


def test_unknown_and_empty_names_fall_back_to_dish():
    assert classify("quinoa") == DEFAULT_EMOJI
    assert classify("") == DEFAULT_EMOJI
    assert classify("   ") == DEFAULT_EMOJI


@pytest.mark.parametrize("cat, mapping", INGREDIENT_EMOJIS)
def test_every_key_classifies_to_its_own_emoji(cat, mapping):
    for key, emoji in mapping.items():
        assert key == key.strip().lower()
        assert classify(key) == emoji, (cat, key)


def test_classify_many():
    assert classify_many(["Poulet", "xyz"]) == {"Poulet": "🍗", "xyz": DEFAULT_EMOJI}
