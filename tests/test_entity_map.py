"""Tests for the entity value store, tokenizer and substitution engine."""
import pytest

from models.schemas import FilledEntity, MemoryValue
from rendering import tokenizer
from rendering.entity_map import FilledEntityMap, substitute

from conftest import make_entity


# ──────────────────────────────────────────────────────
#  Entity Value Store
# ──────────────────────────────────────────────────────

class TestFilledEntityMap:
    def test_value_as_string(self, coffee_entities):
        assert coffee_entities.value_as_string("size") == "large"
        assert coffee_entities.value_as_string("extras") == "cream, sugar and cinnamon"

    def test_value_as_string_unknown(self, coffee_entities):
        assert coffee_entities.value_as_string("milk") is None

    def test_value_as_list_uses_user_text_only(self):
        store = FilledEntityMap({
            "extras": FilledEntity(values=[
                MemoryValue(user_text="cream", display_text="Cream"),
                MemoryValue(display_text="Sugar"),
                MemoryValue(user_text="cinnamon"),
            ]),
        })
        assert store.value_as_list("extras") == ["cream", "cinnamon"]

    def test_value_as_list_unknown(self, empty_entities):
        assert empty_entities.value_as_list("extras") == []

    def test_display_value_map_skips_empty(self):
        store = FilledEntityMap({
            "size": make_entity("large"),
            "blank": FilledEntity(values=[MemoryValue(user_text="")]),
        })
        assert store.display_value_map() == {"size": "large"}

    def test_display_value_map_by_id(self, coffee_entities):
        assert coffee_entities.display_value_map_by_id() == {
            "e-size": "large",
            "e-topping": "caramel",
            "e-extras": "cream, sugar and cinnamon",
        }

    def test_display_value_map_by_id_skips_entities_without_id(self):
        store = FilledEntityMap({"size": make_entity("large"), "shop": make_entity("downtown", entity_id="e-shop")})
        assert store.display_value_map_by_id() == {"e-shop": "downtown"}

    def test_accepts_wire_dicts(self):
        store = FilledEntityMap({"size": {"entityId": "e1", "values": [{"userText": "small"}]}})
        assert store["size"].entity_id == "e1"
        assert store.value_as_string("size") == "small"

    def test_read_only(self, coffee_entities):
        with pytest.raises(TypeError):
            coffee_entities["size"] = make_entity("small")
        with pytest.raises(TypeError):
            coffee_entities.entities["size"] = make_entity("small")

    def test_mapping_protocol(self, coffee_entities):
        assert "size" in coffee_entities
        assert "milk" not in coffee_entities
        assert len(coffee_entities) == 3
        assert sorted(coffee_entities) == ["extras", "size", "topping"]
        assert coffee_entities.get("milk") is None

    def test_from_filled_entities(self):
        filled = [
            make_entity("large", entity_id="e-size"),
            make_entity("caramel", entity_id="e-topping"),
            make_entity("orphan", entity_id="e-unknown"),
        ]
        store = FilledEntityMap.from_filled_entities(
            filled, {"e-size": "size", "e-topping": "topping"},
        )
        assert sorted(store) == ["size", "topping"]
        assert store.value_as_string("topping") == "caramel"


# ──────────────────────────────────────────────────────
#  Tokenizer
# ──────────────────────────────────────────────────────

class TestTokenizer:
    def test_split_on_punctuation_and_whitespace(self):
        assert tokenizer.split("Hi $name, how are you?") == ["Hi", "$name", "how", "are", "you"]

    def test_split_drops_empty_tokens(self):
        assert tokenizer.split("[, with $topping]") == ["with", "$topping"]
        assert tokenizer.split("") == []

    def test_placeholders_keep_duplicates(self):
        assert tokenizer.placeholders("$a and $b: $a.") == ["$a", "$b", "$a"]

    def test_remove_words(self):
        assert tokenizer.remove_words("set my size to large", 2) == "size to large"
        assert tokenizer.remove_words("set my size", 0) == "set my size"

    def test_remove_words_past_end(self):
        assert tokenizer.remove_words("large", 1) == ""
        assert tokenizer.remove_words("two words", 5) == ""
        assert tokenizer.remove_words("", 3) == ""


# ──────────────────────────────────────────────────────
#  Substitution
# ──────────────────────────────────────────────────────

class TestSubstituteEntities:
    def test_filled_entity(self, coffee_entities):
        assert substitute("I want a $size coffee", coffee_entities) == "I want a large coffee"

    def test_unfilled_entity_left_literal(self, empty_entities):
        assert substitute("I want a $size coffee", empty_entities) == "I want a $size coffee"

    def test_empty_value_treated_as_unfilled(self):
        store = FilledEntityMap({"size": FilledEntity(values=[MemoryValue(user_text="")])})
        assert store.substitute("a $size cup") == "a $size cup"

    def test_adjacent_punctuation_preserved(self, coffee_entities):
        assert coffee_entities.substitute("Make it $size!") == "Make it large!"
        assert coffee_entities.substitute("$size, please") == "large, please"

    def test_list_value(self, coffee_entities):
        assert coffee_entities.substitute("With $extras.") == "With cream, sugar and cinnamon."

    def test_each_occurrence_replaced_in_order(self, coffee_entities):
        assert coffee_entities.substitute("$size or $size") == "large or large"


class TestSubstituteBrackets:
    def test_satisfied_contingency_kept(self, coffee_entities):
        assert substitute("coffee[, with $topping]", coffee_entities) == "coffee, with caramel"

    def test_unsatisfied_contingency_dropped(self, empty_entities):
        assert substitute("coffee[, with $topping]", empty_entities) == "coffee"

    def test_multiple_groups_left_to_right(self):
        store = FilledEntityMap({"topping": make_entity("caramel")})
        text = "coffee[ with $topping][ in a $cup][ to go]"
        assert store.substitute(text) == "coffee with caramel to go"

    def test_nested_brackets_use_first_open_first_close(self):
        assert FilledEntityMap.substitute_brackets("a[b[c]d]") == "abcd"

    def test_unbalanced_brackets_left_literal(self):
        assert FilledEntityMap.substitute_brackets("coffee [oops") == "coffee [oops"
        assert FilledEntityMap.substitute_brackets("a]b[c") == "a]b[c"

    def test_placeholder_at_phrase_start_is_kept(self, empty_entities):
        # only a `$` after the first character marks the phrase as unresolved
        assert empty_entities.substitute("x[$foo]") == "x$foo"

    @pytest.mark.parametrize("text", [
        "Just a plain sentence.",
        "Numbers, colons: and marks?!",
        "",
    ])
    def test_idempotent_on_plain_text(self, coffee_entities, text):
        assert coffee_entities.substitute(text) == text
        assert coffee_entities.substitute(coffee_entities.substitute(text)) == text
