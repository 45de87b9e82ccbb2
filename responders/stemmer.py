"""
Tokenizing and stemming of trigger terms and chat text.

Text is lowercased, split on non-word characters, stripped of stopwords and
Porter-stemmed, giving an ordered stem sequence.
"""
from __future__ import annotations

from typing import Iterable, List, Optional

from nltk.stem.porter import PorterStemmer
from nltk.tokenize import RegexpTokenizer

STOPWORDS: frozenset[str] = frozenset(
    """
    about above after again all also am an and another any are as at be
    because been before being below between both but by came can cannot
    come could did do does doing during each few for from further get got
    has had he have her here him himself his how if in into is it its
    itself like make many me might more most much must my myself never now
    of on only or other our ours ourselves out over own said same see
    should since so some still such take than that the their theirs them
    themselves then there these they this those through to too under until
    up very was way we well were what where when which while who whom with
    would why you your yours yourself
    """.split()
) | frozenset("abcdefghijklmnopqrstuvwxyz0123456789_$")


class Stemmer:
    """Turns free text into an ordered list of stems."""

    def __init__(self, stopwords: Optional[Iterable[str]] = None) -> None:
        self.tokenizer = RegexpTokenizer(r"\w+")
        self.porter = PorterStemmer()
        self.stopwords = frozenset(stopwords) if stopwords is not None else STOPWORDS

    def tokenize(self, text: str) -> List[str]:
        return self.tokenizer.tokenize(text.lower())

    def tokenize_and_stem(self, text: str) -> List[str]:
        return [
            self.porter.stem(token)
            for token in self.tokenize(text)
            if token not in self.stopwords
        ]
