from .spacy_tagger import NullTagger, SpacyTagger

__all__ = ["NullTagger", "SpacyTagger"]
