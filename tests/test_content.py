"""
qoracle Content Strategy Tests
"""

import json

import pytest

from qoracle.constants import NO_ENERGIES_TEXT
from qoracle.content import STRATEGIES, build_selector
from qoracle.content.dictionary import DEFAULT_DICTIONARY_PATH, GematriaDictionary
from qoracle.content.numerology import NumerologySelector
from qoracle.content.phrase import PhraseSelector
from qoracle.errors import ConfigError


class TestGematriaDictionary:
    """Tests for GematriaDictionary."""

    def test_key_order_preserved(self):
        dictionary = GematriaDictionary({"b": ["1"], "a": ["2"], "c": []})
        assert dictionary.keys == ("b", "a", "c")
        assert len(dictionary) == 3
        assert dictionary.word_count() == 2

    def test_candidates(self, word_dictionary):
        assert word_dictionary.candidates("18") == ("חי",)
        assert word_dictionary.candidates("missing") == ()
        assert "13" in word_dictionary

    def test_string_value_rejected(self):
        with pytest.raises(ConfigError):
            GematriaDictionary({"a": "word"})

    def test_packaged_dictionary(self):
        dictionary = GematriaDictionary.load()
        assert len(dictionary) == 14
        assert dictionary.keys[0] == "3"
        assert dictionary.word_count() > len(dictionary)

    def test_load_from_file(self, tmp_path):
        path = tmp_path / "words.json"
        path.write_text(json.dumps({"x": ["one", "two"]}), encoding="utf-8")
        dictionary = GematriaDictionary.load(path)
        assert dictionary.candidates("x") == ("one", "two")

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(ConfigError):
            GematriaDictionary.load(tmp_path / "nope.json")

    def test_load_bad_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigError):
            GematriaDictionary.load(path)

    def test_load_non_object(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(ConfigError):
            GematriaDictionary.load(path)

    def test_default_path_exists(self):
        assert DEFAULT_DICTIONARY_PATH.exists()


class TestPhraseSelector:
    """Tests for PhraseSelector."""

    def test_empty_categories_skipped(self, make_buffer, small_dictionary, async_runner):
        """Count 3, middle pair lands on the empty category."""
        buffer = make_buffer([3, 0, 0, 65535, 0, 0, 0])
        selector = PhraseSelector(buffer, small_dictionary)
        assert async_runner(selector.select()) == "x x"
        assert len(buffer) == 0

    def test_consumes_one_plus_two_per_draw(self, make_buffer, word_dictionary, async_runner):
        values = [2, 0, 0, 65535, 65535, 111, 222]
        buffer = make_buffer(values)
        selector = PhraseSelector(buffer, word_dictionary)
        phrase = async_runner(selector.select())
        assert phrase == "אחד אמן"
        assert len(buffer) == 2

    def test_words_from_dictionary(self, mock_source, word_dictionary, async_runner):
        from qoracle.core.buffer import QuantumBuffer
        buffer = QuantumBuffer(mock_source)
        selector = PhraseSelector(buffer, word_dictionary)
        vocabulary = {w for key in word_dictionary.keys for w in word_dictionary.candidates(key)}
        for _ in range(20):
            phrase = async_runner(selector.select())
            words = phrase.split(" ")
            assert 1 <= len(words) <= 9
            assert set(words) <= vocabulary

    def test_all_empty_categories(self, make_buffer, async_runner):
        buffer = make_buffer([5] + [0] * 10)
        selector = PhraseSelector(buffer, GematriaDictionary({"A": []}))
        assert async_runner(selector.select()) == ""

    def test_empty_dictionary(self, make_buffer, async_runner):
        buffer = make_buffer([1, 2, 3])
        selector = PhraseSelector(buffer, GematriaDictionary({}))
        assert async_runner(selector.select()) == ""
        assert buffer.source.fetch_count == 0

    def test_pick(self, word_dictionary, make_buffer):
        selector = PhraseSelector(make_buffer(), word_dictionary)
        assert selector.pick(0, 0) == "אחד"
        assert selector.pick(0, 65535) == "אהבה"
        assert selector.pick(65535, 0) == "אדם"

    def test_render_prompt_passthrough(self, small_dictionary, make_buffer):
        selector = PhraseSelector(make_buffer(), small_dictionary)
        assert selector.render_prompt("x x") == "x x"


class TestNumerologySelector:
    """Tests for NumerologySelector."""

    def test_reading(self, make_buffer, async_runner):
        selector = NumerologySelector(make_buffer([54321]))
        text = async_runner(selector.select())
        assert text == "Dominant 5 (1.00), then 4 (0.80), followed by 3 (0.64), 2 (0.51), 1 (0.41)."

    def test_zero_draw(self, make_buffer, async_runner):
        selector = NumerologySelector(make_buffer([0]))
        assert async_runner(selector.select()) == "Dominant 9 (3.36)."

    def test_custom_decay(self, make_buffer, async_runner):
        selector = NumerologySelector(make_buffer([11112]), decay_factor=1.0)
        assert async_runner(selector.select()) == "Dominant 1 (4.00), then 2 (1.00)."

    def test_ensures_min_available(self, make_buffer, async_runner):
        buffer = make_buffer([100, 200, 300, 400, 500], batch_size=5)
        selector = NumerologySelector(buffer, min_available=4)
        async_runner(selector.select())
        assert len(buffer) == 4

    def test_render_prompt(self, make_buffer):
        selector = NumerologySelector(make_buffer(), prompt_template="Energies: {energies}")
        assert selector.render_prompt("Dominant 1 (1.00).") == "Energies: Dominant 1 (1.00)."

    def test_default_prompt_embeds_description(self, make_buffer):
        prompt = NumerologySelector(make_buffer()).render_prompt(NO_ENERGIES_TEXT)
        assert NO_ENERGIES_TEXT in prompt


class TestBuildSelector:
    """Tests for build_selector."""

    def test_strategies(self, make_buffer):
        assert STRATEGIES == ("phrase", "numerology")

    def test_phrase(self, make_buffer):
        selector = build_selector("phrase", make_buffer())
        assert isinstance(selector, PhraseSelector)
        assert len(selector.dictionary) == 14

    def test_numerology(self, make_buffer):
        selector = build_selector("numerology", make_buffer(), decay_factor=0.5, min_available=4)
        assert isinstance(selector, NumerologySelector)
        assert selector.decay_factor == 0.5
        assert selector.min_available == 4

    def test_unknown(self, make_buffer):
        with pytest.raises(ConfigError):
            build_selector("tarot", make_buffer())
