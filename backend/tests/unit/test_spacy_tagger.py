"""Unit tests for the spaCy tagger adapter, using a fake pipeline."""

from dataclasses import dataclass

import pytest

from pharmagenie.domain.exceptions import TaggerUnavailableError
from pharmagenie.infrastructure.nlp import NullTagger, SpacyTagger


@dataclass
class FakeEnt:
    text: str
    label_: str


@dataclass
class FakeToken:
    text: str
    like_num: bool = False


class FakeDoc:
    def __init__(self, tokens, ents):
        self._tokens = tokens
        self.ents = ents

    def __iter__(self):
        return iter(self._tokens)


def fake_nlp(text: str) -> FakeDoc:
    return FakeDoc(
        tokens=[FakeToken("20", like_num=True), FakeToken("sites"), FakeToken("twelve", like_num=True)],
        ents=[FakeEnt("Boston", "GPE"), FakeEnt("Pfizer", "ORG"), FakeEnt("Alps", "LOC")],
    )


def test_places_keep_location_labels_only():
    assert SpacyTagger(nlp=fake_nlp).extract_places("any") == ["Boston", "Alps"]


def test_numbers_use_like_num():
    assert SpacyTagger(nlp=fake_nlp).extract_numbers("any") == ["20", "twelve"]


def test_pipeline_failure_is_reported_as_unavailable():
    def broken(text):
        raise ValueError("bad input")

    with pytest.raises(TaggerUnavailableError):
        SpacyTagger(nlp=broken).extract_places("any")


def test_missing_model_is_loaded_once(monkeypatch):
    import spacy

    attempts = []

    def failing_load(name):
        attempts.append(name)
        raise OSError(f"Can't find model '{name}'")

    monkeypatch.setattr(spacy, "load", failing_load)
    tagger = SpacyTagger("xx_missing_model")

    for _ in range(3):
        with pytest.raises(TaggerUnavailableError):
            tagger.extract_places("Boston")
    assert attempts == ["xx_missing_model"]


def test_model_is_loaded_lazily(monkeypatch):
    import spacy

    loaded = []

    def load(name):
        loaded.append(name)
        return fake_nlp

    monkeypatch.setattr(spacy, "load", load)
    tagger = SpacyTagger("en_core_web_sm")
    assert loaded == []
    tagger.extract_places("Boston")
    tagger.extract_numbers("20")
    assert loaded == ["en_core_web_sm"]


def test_warm_up_loads_the_model_before_the_first_query(monkeypatch):
    import spacy

    loaded = []

    def load(name):
        loaded.append(name)
        return fake_nlp

    monkeypatch.setattr(spacy, "load", load)
    tagger = SpacyTagger("en_core_web_sm")
    assert tagger.warm_up() is True
    assert loaded == ["en_core_web_sm"]
    tagger.extract_places("Boston")
    assert loaded == ["en_core_web_sm"]


def test_warm_up_with_missing_model_reports_not_ready(monkeypatch):
    import spacy

    def failing_load(name):
        raise OSError(f"Can't find model '{name}'")

    monkeypatch.setattr(spacy, "load", failing_load)
    tagger = SpacyTagger("xx_missing_model")
    assert tagger.warm_up() is False
    with pytest.raises(TaggerUnavailableError):
        tagger.extract_places("Boston")


def test_null_tagger():
    assert NullTagger().extract_places("Boston") == []
    assert NullTagger().extract_numbers("20") == []
    assert NullTagger().warm_up() is True
