"""Unit tests for tokenization and keyword extraction."""

from pharmagenie.application.nlp.lexical import STOPWORDS, extract_keywords, tokenize


def test_tokenize_lowercases_and_splits_punctuation():
    assert tokenize("Show ALL trials, please!") == ["show", "all", "trials", "please"]


def test_tokenize_separates_punctuation_adjacent_tokens():
    assert tokenize("trials?drugs.sites") == ["trials", "drugs", "sites"]


def test_tokenize_breaks_trial_ids_on_hyphens():
    assert tokenize("CT-2024-007") == ["ct", "2024", "007"]


def test_tokenize_empty_string():
    assert tokenize("") == []


def test_tokenize_is_deterministic():
    text = "How many participants are enrolled?"
    assert tokenize(text) == tokenize(text)


def test_extract_keywords_drops_stopwords_short_and_numeric_tokens():
    tokens = tokenize("Show me all the diabetes trials from 2024 in US")
    assert extract_keywords(tokens) == ["diabetes", "trials"]


def test_extract_keywords_preserves_order_and_duplicates():
    tokens = ["cancer", "trials", "cancer"]
    assert extract_keywords(tokens) == ["cancer", "trials", "cancer"]


def test_extract_keywords_keeps_three_letter_words():
    assert extract_keywords(["abc", "ab"]) == ["abc"]


def test_stopwords_cover_query_framing_words():
    for word in ("show", "find", "list", "all", "what", "how", "when"):
        assert word in STOPWORDS
    assert 25 <= len(STOPWORDS) <= 40
