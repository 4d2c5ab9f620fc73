# -*- coding: utf-8 -*-

"""
quantext library
----------------

Tokenized texts, sparse document-feature matrices and pattern matching
for quantitative text analysis in Python.
"""

__title__ = 'quantext'
__version__ = '1.0.0'
__author__ = 'Fotis Jannidis, Thorsten Vitt'

from quantext.util import Metadata, DocumentDescriber, TableDocumentDescriber, \
        QuantextError, NotFound, MalformedPattern, DimensionMismatch, InvariantViolation
from quantext.vocabulary import TypeTable, PAD
from quantext.patterns import Pattern, FixedPattern, GlobPattern, RegexPattern, \
        PhrasePattern, PhraseMatch, Dictionary, pattern, phrase, \
        resolve_pattern, resolve_phrases
from quantext.tokens import Tokens, Tokenizer, tokenize, TOKEN_PATTERN, \
        WORD_PATTERN, LETTERS_PATTERN
from quantext.matrix import DocumentFeatureMatrix, MatrixNotAbsolute, dfm, \
        weightings, weighting, Weighting
from quantext.config import get_configuration, update_configuration

__all__ = ['Metadata', 'DocumentDescriber', 'TableDocumentDescriber',
           'QuantextError', 'NotFound', 'MalformedPattern', 'DimensionMismatch',
           'InvariantViolation',
           'TypeTable', 'PAD',
           'Pattern', 'FixedPattern', 'GlobPattern', 'RegexPattern',
           'PhrasePattern', 'PhraseMatch', 'Dictionary', 'pattern', 'phrase',
           'resolve_pattern', 'resolve_phrases',
           'Tokens', 'Tokenizer', 'tokenize', 'TOKEN_PATTERN', 'WORD_PATTERN',
           'LETTERS_PATTERN',
           'DocumentFeatureMatrix', 'MatrixNotAbsolute', 'dfm',
           'weightings', 'weighting', 'Weighting',
           'get_configuration', 'update_configuration']
