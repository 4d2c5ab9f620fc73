# -*- coding: utf-8 -*-
"""
The quantext.tokens module contains the tokenized document store,
:class:`Tokens`, and the :class:`Tokenizer` that creates it from raw text.

A token store keeps, for each document, the sequence of its tokens as ids
into a shared :class:`~quantext.vocabulary.TypeTable`. All operations
(selection, compounding, n-grams, …) return a new store; the documents of an
existing store are never modified.
"""

import logging

import numpy as np
import pandas as pd
import regex as re

from .util import Metadata, InvariantViolation, DimensionMismatch, NotFound, \
        make_labels, align_docvars
from .vocabulary import TypeTable, PAD
from .patterns import Pattern, phrase, as_patterns, resolve_phrases

logger = logging.getLogger(__name__)

#: Words (with inner apostrophes or hyphens), numbers, and single
#: punctuation marks or symbols as separate tokens.
TOKEN_PATTERN = re.compile(r"""
      \p{L}[\p{L}\p{M}\p{N}]*(?:['’\-][\p{L}\p{M}\p{N}]+)*
    | \p{N}+(?:[.,:]\p{N}+)*\p{L}*
    | [^\s\p{L}\p{N}]
    """, re.VERBOSE)

#: Words consisting of letters, possibly with inner apostrophes.
WORD_PATTERN = re.compile(r"\b\p{L}+(?:['’]\p{L}+)*\b", re.WORD)

#: Runs of letters only.
LETTERS_PATTERN = re.compile(r"\p{L}+")

PUNCT = re.compile(r"[\p{P}\p{S}]+")
NUMBER = re.compile(r"\p{N}+(?:[.,:]\p{N}+)*")


class Tokenizer(object):

    """
    A **tokenizer** converts raw texts into a :class:`Tokens` store.

    The default tokenizer splits each text into tokens according to a regular
    expression, optionally drops punctuation and numbers, normalizes case and
    removes stop words. To customize tokenization, you have two options:

        1. for simple customizations, create a new Tokenizer and set the
           constructor arguments accordingly.
        2. in more complex cases, create a subclass and override
           :meth:`tokenize` or :meth:`process_text`.
    """

    def __init__(self, lower_case=False, remove_punct=False,
                 remove_numbers=False, remove=None, valuetype='glob',
                 case_insensitive=True, padding=False,
                 token_pattern=TOKEN_PATTERN, max_tokens=None, concatenator='_'):
        """
        Creates a customized tokenizer.

        Args:
            lower_case (bool): if ``True``, normalize all tokens to lower case
            remove_punct (bool): drop tokens consisting of punctuation or
                symbols only
            remove_numbers (bool): drop tokens that are numbers
            remove: patterns (e.g., a stop word list) of types to remove
                after tokenization
            valuetype (str): kind of the `remove` patterns
            case_insensitive (bool): match `remove` patterns ignoring case
            padding (bool): leave a padding marker where tokens have been
                removed, so that no false adjacencies are created
            token_pattern (regex.Pattern): The regular expression used to
                identify tokens.
            max_tokens (int): If set, stop reading each text after that many tokens.
            concatenator (str): default for joining compounds and n-grams
                of the resulting store
        """
        self.lower_case = lower_case
        self.remove_punct = remove_punct
        self.remove_numbers = remove_numbers
        self.remove = remove
        self.valuetype = valuetype
        self.case_insensitive = case_insensitive
        self.padding = padding
        self.token_pattern = token_pattern
        self.max_tokens = max_tokens
        self.concatenator = concatenator
        self.logger = logging.getLogger(__name__)

    @classmethod
    def from_config(cls, config, **kwargs):
        """
        Creates a tokenizer from the ``tokens``, ``patterns`` and ``compound``
        sections of a configuration as returned by
        :func:`quantext.config.get_configuration`. Keyword arguments override
        configured values.
        """
        options = dict(
            lower_case=config['tokens.lower_case'],
            remove_punct=config['tokens.remove_punct'],
            remove_numbers=config['tokens.remove_numbers'],
            padding=config['tokens.padding'],
            max_tokens=config['tokens.max_tokens'] or None,
            valuetype=config['patterns.valuetype'],
            case_insensitive=config['patterns.case_insensitive'],
            concatenator=config['compound.concatenator'])
        options.update(kwargs)
        return cls(**options)

    def __repr__(self):
        return type(self).__name__ + '(' + \
            ', '.join(key+'='+repr(value)
                      for key, value in self.__dict__.items() if key != 'logger') + \
            ')'

    def tokenize(self, lines):
        """
        Tokenizes the given lines.

        The default implementation will return an iterable of all strings in
        the given `lines` that match the :attr:`token_pattern`.

        Args:
            lines: Iterable of strings in which to look for tokens.

        Returns:
            Iterable (default implementation generator) of tokens
        """
        count = 0
        for line in lines:
            for token in self.token_pattern.findall(line):
                count += 1
                yield token
                if self.max_tokens is not None and count >= self.max_tokens:
                    return

    def keep_token(self, token):
        """
        Returns ``False`` if `token` is to be dropped due to the punctuation
        and number settings.
        """
        if self.remove_punct and PUNCT.fullmatch(token):
            return False
        if self.remove_numbers and NUMBER.fullmatch(token):
            return False
        return True

    def process_text(self, text):
        """
        Converts a single text to its list of tokens. Dropped tokens are
        represented by ``None`` if :attr:`padding` is set, and left out
        otherwise.
        """
        result = []
        for token in self.tokenize(text.splitlines()):
            if not self.keep_token(token):
                if self.padding:
                    result.append(None)
                continue
            result.append(token.lower() if self.lower_case else token)
        return result

    def __call__(self, texts, docnames=None, docvars=None):
        """
        Tokenizes the given texts.

        Args:
            texts: a string, a list of strings, a dict mapping document names
                to texts, or a :class:`pandas.Series` (index = document names)
            docnames: document names, if not inferred from `texts`
            docvars (pandas.DataFrame): per-document variables
        Returns:
            Tokens: the new token store with its own type table
        """
        if isinstance(texts, str):
            texts = [texts]
        if isinstance(texts, pd.Series):
            if docnames is None:
                docnames = texts.index
            texts = list(texts.values)
        elif isinstance(texts, dict):
            if docnames is None:
                docnames = list(texts.keys())
            texts = list(texts.values())
        else:
            texts = list(texts)

        self.logger.info("Tokenizing %d documents using %s", len(texts), self)
        types = TypeTable()
        docs = []
        for text in texts:
            tokens = self.process_text(text)
            docs.append(np.array([PAD if token is None else types.intern(token)
                                  for token in tokens], dtype=np.int64))
        result = Tokens(docs, types, docnames=docnames, docvars=docvars,
                        metadata=Metadata(self.metadata, operations=('tokenize',)))
        if self.remove is not None:
            result = result.select(self.remove, selection='remove',
                                   valuetype=self.valuetype,
                                   case_insensitive=self.case_insensitive,
                                   padding=self.padding)
        return result

    @property
    def metadata(self):
        """
        Returns:
            Metadata: metadata record that describes the tokenizer settings
        """
        return Metadata(features='words', lower_case=self.lower_case,
                        remove_punct=self.remove_punct,
                        remove_numbers=self.remove_numbers,
                        padding=self.padding,
                        concatenator=self.concatenator)


def tokenize(texts, docnames=None, docvars=None, **options):
    """
    Tokenizes texts using a :class:`Tokenizer` created with the given options.

    >>> tokenize("It is a killer whale.", remove_punct=True).as_lists()
    [['It', 'is', 'a', 'killer', 'whale']]
    """
    return Tokenizer(**options)(texts, docnames=docnames, docvars=docvars)


class Tokens:
    """
    A tokenized document store: an ordered collection of documents, each a
    sequence of type ids, together with the :class:`TypeTable`, document
    names, document variables and metadata.

    Removed tokens may be represented by :data:`~quantext.vocabulary.PAD`.
    """

    def __init__(self, docs, types, docnames=None, docvars=None, metadata=None):
        """
        Args:
            docs: sequence of integer sequences, the type ids of each document
            types (TypeTable): the type table all ids refer to
            docnames: unique document names (default ``text1``, ``text2``, …)
            docvars (pandas.DataFrame): document variables, one row per document
            metadata (Metadata): metadata to copy into the new store
        Raises:
            InvariantViolation: if an id is not in the type table or document
                names are not unique
        """
        self.types = types
        self._docs = []
        size = len(types)
        for position, doc in enumerate(docs):
            doc = np.array(doc, dtype=np.int64)
            if doc.size and (doc.min() < PAD or doc.max() >= size):
                raise InvariantViolation(
                    "Document {} refers to type ids outside of [0, {})".format(position, size))
            doc.flags.writeable = False
            self._docs.append(doc)
        self.docnames = make_labels(docnames, len(self._docs))
        self.docvars = align_docvars(docvars, self.docnames)
        self.metadata = Metadata(metadata)

    @classmethod
    def from_lists(cls, docs, docnames=None, docvars=None, metadata=None):
        """
        Creates a token store from lists of token strings. Empty strings or
        ``None`` become padding.

        >>> Tokens.from_lists([["it", "is", "a", "killer", "whale"]]).types
        TypeTable(['it', 'is', 'a', 'killer', 'whale'], size=5)
        """
        types = TypeTable()
        ids = [[PAD if not token else types.intern(token) for token in doc]
               for doc in docs]
        return cls(ids, types, docnames=docnames, docvars=docvars, metadata=metadata)

    def _derive(self, docs, types=None, docnames=None, docvars=None, **kwargs):
        """Creates a new store with this store's labels and metadata."""
        return Tokens(docs,
                      self.types if types is None else types,
                      docnames=self.docnames if docnames is None else docnames,
                      docvars=self.docvars if docvars is None else docvars,
                      metadata=Metadata(self.metadata, **kwargs))

    def __len__(self):
        return len(self._docs)

    @property
    def ndoc(self):
        return len(self._docs)

    @property
    def docs(self):
        """The documents as (read-only) integer arrays."""
        return list(self._docs)

    def _position(self, key):
        # integer document names take precedence over positions
        by_position = self.docnames.inferred_type != 'integer'
        if by_position and isinstance(key, (int, np.integer)):
            if -len(self._docs) <= key < len(self._docs):
                return int(key) % len(self._docs)
            raise InvariantViolation("Document index {} out of range for {} documents".format(key, len(self._docs)))
        try:
            return self.docnames.get_loc(key)
        except KeyError:
            raise NotFound(key, "document names") from None

    def __getitem__(self, key):
        """
        Returns the tokens of a document, by position or name, as strings.
        If the document names are integers, integer keys are names.
        """
        return self.types.strings_for(self._docs[self._position(key)])

    def __iter__(self):
        for doc in self._docs:
            yield self.types.strings_for(doc)

    def as_lists(self):
        """Returns all documents as lists of token strings."""
        return list(self)

    def as_dict(self):
        """Maps document names to lists of token strings."""
        return dict(zip(self.docnames, self))

    def __repr__(self):
        return '<{} of {} documents, {} types>'.format(type(self).__name__,
                                                       self.ndoc, len(self.types))

    def ntoken(self) -> pd.Series:
        """Number of tokens by document, padding excluded."""
        return pd.Series([int((doc != PAD).sum()) for doc in self._docs],
                         index=self.docnames, dtype=np.int64)

    def ntype(self) -> pd.Series:
        """Number of different types by document, padding excluded."""
        return pd.Series([np.unique(doc[doc != PAD]).size for doc in self._docs],
                         index=self.docnames, dtype=np.int64)

    def select(self, pattern, selection='keep', valuetype='glob',
               case_insensitive=True, padding=False):
        """
        Keeps or removes tokens matching the given patterns.

        Phrase patterns (see :func:`quantext.patterns.phrase`) select whole
        contiguous runs of tokens. The number of documents never changes, a
        document may become empty.

        Args:
            pattern: pattern or iterable of patterns
            selection (str): ``'keep'`` or ``'remove'``
            valuetype (str): kind for patterns given as strings
            case_insensitive (bool): match ignoring case
            padding (bool): replace unselected tokens by padding instead of
                dropping them
        Returns:
            Tokens: a new store
        """
        if selection not in ('keep', 'remove'):
            raise ValueError("selection must be 'keep' or 'remove', not {!r}".format(selection))
        specs = as_patterns(pattern, valuetype)
        match = resolve_phrases(specs, self.types, valuetype, case_insensitive)
        if len(match) == 0 and specs:
            logger.warning("Patterns %r do not match any type", specs)
        single = np.fromiter(match.single, dtype=np.int64)
        phrases = match.max_length > 1
        docs = []
        for doc in self._docs:
            if phrases:
                matched = np.zeros(doc.size, dtype=bool)
                for start, stop in match.spans(doc):
                    matched[start:stop] = True
            else:
                matched = np.isin(doc, single)
            selected = matched if selection == 'keep' else ~matched
            if padding:
                docs.append(np.where(selected, doc, PAD))
            else:
                docs.append(doc[selected])
        return self._derive(docs, operations=('select_' + selection,))

    def keep(self, pattern, **kwargs):
        """Keeps only the tokens matching the given patterns."""
        return self.select(pattern, selection='keep', **kwargs)

    def remove(self, pattern, **kwargs):
        """Removes the tokens matching the given patterns."""
        return self.select(pattern, selection='remove', **kwargs)

    def _concatenator(self, concatenator):
        if concatenator is None:
            return self.metadata.get('concatenator', '_')
        return concatenator

    def compound(self, pattern, concatenator=None, valuetype='glob',
                 case_insensitive=True):
        """
        Replaces each contiguous run of tokens matching a phrase by a single
        token, the run's types joined by `concatenator`. By default, this is
        the concatenator of the :class:`Tokenizer` that created the store,
        or ``_``.

        Strings in `pattern` are interpreted as whitespace-separated phrases.
        Matching proceeds left to right and prefers the longest phrase;
        padding never matches. The new types are interned into a copy of the
        type table.

        >>> toks = Tokens.from_lists([["it", "is", "a", "killer", "whale"]])
        >>> toks.compound(["killer whale"]).as_lists()
        [['it', 'is', 'a', 'killer_whale']]
        """
        concatenator = self._concatenator(concatenator)
        if isinstance(pattern, (str, Pattern)):
            pattern = [pattern]
        phrases = [phrase(p, valuetype) if isinstance(p, str) else p for p in pattern]
        match = resolve_phrases(phrases, self.types, valuetype, case_insensitive)
        types = self.types.copy()
        compounds = {}
        docs = []
        for doc in self._docs:
            result = []
            last = 0
            for start, stop in match.spans(doc):
                result.extend(doc[last:start])
                run = tuple(int(id_) for id_ in doc[start:stop])
                if run not in compounds:
                    compounds[run] = types.intern(concatenator.join(types.strings_for(run)))
                result.append(compounds[run])
                last = stop
            result.extend(doc[last:])
            docs.append(result)
        logger.info("Compounded %d distinct phrases", sum(1 for run in compounds if len(run) > 1))
        return self._derive(docs, types=types, operations=('compound',))

    def ngrams(self, n=2, concatenator=None):
        """
        Creates a store of n-grams: each run of `n` consecutive tokens becomes
        one token, the types joined by `concatenator`. Runs that include
        padding are skipped.

        Args:
            n (int or list of int): n-gram size(s). For several sizes, each
                document contains all n-grams of the first size, then all of
                the second, etc.
        """
        concatenator = self._concatenator(concatenator)
        sizes = [n] if isinstance(n, (int, np.integer)) else list(n)
        if any(size < 1 for size in sizes):
            raise ValueError("n-gram sizes must be positive: {}".format(sizes))
        types = TypeTable()
        docs = []
        for doc in self._docs:
            strings = self.types.strings_for(doc)
            result = []
            for size in sizes:
                for start in range(len(doc) - size + 1):
                    window = doc[start:start + size]
                    if (window == PAD).any():
                        continue
                    result.append(types.intern(concatenator.join(strings[start:start + size])))
            docs.append(result)
        return self._derive(docs, types=types, operations=('ngrams',), ngrams=sizes)

    def tolower(self):
        """
        Returns a store in which all types are lower case. Types that only
        differ in case are merged.
        """
        types = TypeTable()
        remap = types.intern_all(s.lower() for s in self.types)
        docs = []
        for doc in self._docs:
            if remap.size == 0:
                docs.append(doc)
                continue
            docs.append(np.where(doc == PAD, PAD, remap[np.where(doc == PAD, 0, doc)]))
        return self._derive(docs, types=types, operations=('tolower',), lower_case=True)

    def combine(self, other):
        """
        Appends the documents of another store.

        The type tables are merged, the ids of `other` are remapped.

        Raises:
            DimensionMismatch: if both stores have documents of the same name
        """
        overlap = self.docnames.intersection(other.docnames)
        if len(overlap):
            raise DimensionMismatch("Both token stores contain documents {}".format(list(overlap)))
        types, remap = self.types.merge(other.types)
        docs = list(self._docs)
        for doc in other._docs:
            if remap.size == 0:
                docs.append(doc)
            else:
                docs.append(np.where(doc == PAD, PAD, remap[np.where(doc == PAD, 0, doc)]))
        docvars = pd.concat([self.docvars, other.docvars])
        return Tokens(docs, types, docnames=self.docnames.append(other.docnames),
                      docvars=docvars,
                      metadata=Metadata(self.metadata, operations=('combine',)))

    def dfm(self, features=None):
        """Counts the tokens to a :class:`~quantext.matrix.DocumentFeatureMatrix`."""
        from .matrix import dfm
        return dfm(self, features=features)
