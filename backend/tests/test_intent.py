import asyncio

import pytest

from conftest import FakeLLM
from rentverse.services.intent_service import (
    BASIC_FILTERS_EXPLANATION,
    FALLBACK_EXPLANATION,
    build_system_prompt,
    detect_search_intent,
    matching_need_rules,
    normalize_intent,
)
from rentverse.services.search_service import SEARCH_CATEGORIES


def detect(query, client=None):
    return asyncio.run(detect_search_intent(query, SEARCH_CATEGORIES, client))


class TestBasicIntent:
    @pytest.mark.parametrize("query", ["I need to cut wood", "camera under 100", "x"])
    def test_without_client_uses_raw_query(self, query):
        intent = detect(query)
        assert intent.category is None
        assert intent.min_price is None
        assert intent.max_price is None
        assert intent.keywords == [query]
        assert intent.semantic_query == query
        assert intent.explanation == BASIC_FILTERS_EXPLANATION

    def test_model_error_falls_back(self):
        fake = FakeLLM(RuntimeError("upstream 503"))
        intent = detect("I need to cut wood", fake)
        assert intent.keywords == ["I need to cut wood"]
        assert intent.category is None
        assert intent.explanation == FALLBACK_EXPLANATION

    def test_malformed_json_falls_back(self):
        intent = detect("drone", FakeLLM("this is not json"))
        assert intent.keywords == ["drone"]
        assert intent.explanation == FALLBACK_EXPLANATION

    def test_non_object_json_falls_back(self):
        intent = detect("drone", FakeLLM("[1, 2, 3]"))
        assert intent.explanation == FALLBACK_EXPLANATION


class TestModelIntent:
    def test_need_is_mapped_to_tools(self):
        fake = FakeLLM({
            "category": "Tools",
            "minPrice": None,
            "maxPrice": None,
            "keywords": ["axe", "chainsaw"],
            "semanticQuery": "wood cutting tools",
            "explanation": "Looking for tools to cut wood",
        })
        intent = detect("I need to cut wood", fake)
        assert intent.category == "Tools"
        assert intent.keywords == ["axe", "chainsaw"]
        assert intent.explanation == "Looking for tools to cut wood"

    def test_need_rule_fills_in_forgotten_keywords(self):
        fake = FakeLLM({"category": "Tools", "keywords": []})
        intent = detect("I need to cut wood", fake)
        assert intent.keywords == ["axe", "chainsaw", "saw"]

    def test_model_keywords_are_not_widened_by_trigger_words(self):
        fake = FakeLLM({"category": None, "keywords": ["turntable"]})
        intent = detect("record player", fake)
        assert intent.keywords == ["turntable"]
        assert intent.category is None

    def test_price_ceiling(self):
        fake = FakeLLM({"category": "Tech", "maxPrice": 100, "keywords": ["camera"]})
        intent = detect("camera under 100", fake)
        assert intent.category == "Tech"
        assert intent.max_price == 100
        assert intent.min_price is None
        assert "camera" in intent.keywords

    def test_request_shape(self):
        fake = FakeLLM({"keywords": ["drill"]})
        detect("drill", fake)
        call = fake.calls[0]
        assert call["response_format"] == {"type": "json_object"}
        system, user = call["messages"]
        assert system["role"] == "system"
        assert "Tools" in system["content"]
        assert "chainsaw" in system["content"]
        assert user == {"role": "user", "content": "drill"}

    def test_explanation_defaults_from_semantic_query(self):
        intent = detect("drill", FakeLLM({"keywords": ["drill"], "semanticQuery": "power drill"}))
        assert intent.semantic_query == "power drill"
        assert intent.explanation == "Looking for power drill"


class TestNormalizeIntent:
    def test_unknown_category_dropped(self):
        intent = normalize_intent({"category": "Boats", "keywords": ["kayak"]}, "kayak", SEARCH_CATEGORIES)
        assert intent.category is None

    def test_category_case_is_canonicalised(self):
        intent = normalize_intent({"category": "vehicles"}, "car", SEARCH_CATEGORIES)
        assert intent.category == "Vehicles"

    def test_inverted_prices_swapped(self):
        intent = normalize_intent({"minPrice": 200, "maxPrice": 50}, "bike", SEARCH_CATEGORIES)
        assert intent.min_price == 50
        assert intent.max_price == 200

    def test_bad_prices_dropped(self):
        intent = normalize_intent({"minPrice": -5, "maxPrice": "lots"}, "bike", SEARCH_CATEGORIES)
        assert intent.min_price is None
        assert intent.max_price is None

    def test_out_of_range_prices_dropped(self):
        intent = normalize_intent({"minPrice": 10 ** 400, "maxPrice": "1e400", "keywords": ["yacht"]},
                                  "yacht", SEARCH_CATEGORIES)
        assert intent.min_price is None
        assert intent.max_price is None
        assert intent.keywords == ["yacht"]

    def test_huge_price_keeps_model_answer(self):
        fake = FakeLLM('{"category": "Vehicles", "maxPrice": 1' + "0" * 400 + ', "keywords": ["yacht"]}')
        intent = detect("yacht", fake)
        assert intent.category == "Vehicles"
        assert intent.max_price is None
        assert intent.explanation == "Looking for yacht"

    def test_price_strings_are_parsed(self):
        intent = normalize_intent({"maxPrice": "$1,500"}, "bike", SEARCH_CATEGORIES)
        assert intent.max_price == 1500

    def test_empty_keywords_fall_back_to_query(self):
        intent = normalize_intent({"keywords": "  "}, "kayak", SEARCH_CATEGORIES)
        assert intent.keywords == ["kayak"]

    def test_keyword_string_accepted(self):
        intent = normalize_intent({"keywords": "kayak"}, "boat for the lake", SEARCH_CATEGORIES)
        assert intent.keywords == ["kayak"]


class TestNeedRules:
    def test_matching(self):
        assert [r.category for r in matching_need_rules("I need to cut wood")] == ["Tools"]
        assert [r.category for r in matching_need_rules("want to record a video")] == ["Tech"]
        assert [r.category for r in matching_need_rules("moving my furniture")] == ["Vehicles"]
        assert matching_need_rules("camera") == []

    def test_prompt_lists_every_rule(self):
        prompt = build_system_prompt(SEARCH_CATEGORIES)
        assert '["axe", "chainsaw", "saw"]' in prompt
        assert '["camera", "tripod", "sony", "canon"]' in prompt
        assert '["truck", "van", "pickup"]' in prompt
        assert ", ".join(SEARCH_CATEGORIES) in prompt
