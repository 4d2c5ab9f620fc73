# -*- coding: utf-8 -*-
"""
Resolution of user-supplied patterns to vocabulary ids.

A *pattern* is one of four kinds:

* :class:`FixedPattern` – exact string match
* :class:`GlobPattern` – ``*`` matches any run of characters, ``?`` exactly one
* :class:`RegexPattern` – regular expression, matching anywhere in the type
  unless the expression is anchored
* :class:`PhrasePattern` – a sequence of the above that must match a
  contiguous run of tokens

All kinds are resolved through the same interface, :meth:`Pattern.resolve`,
against a *vocabulary*: a :class:`~quantext.vocabulary.TypeTable`, a
:class:`pandas.Index` of feature names or any sequence of strings. The result
is the ascending list of matching positions (ids) in that vocabulary.

Use :func:`pattern` and :func:`phrase` to build patterns from strings, and
:func:`resolve_pattern` / :func:`resolve_phrases` to resolve whole pattern
sets at once.
"""

import logging
logger = logging.getLogger(__name__)

import itertools
from collections import OrderedDict
from collections.abc import Mapping
from functools import lru_cache
import regex as re

from .util import MalformedPattern
from .vocabulary import TypeTable

valuetypes = ('glob', 'regex', 'fixed')


@lru_cache(maxsize=1024)
def _compile(expression, flags=0):
    try:
        return re.compile(expression, flags)
    except re.error as error:
        raise MalformedPattern(expression, str(error)) from None


def glob_to_regex(glob):
    """
    Translates a glob to an equivalent regular expression that has to match
    the whole string.

    Only ``*`` and ``?`` are wildcards, everything else is taken literally.

    >>> glob_to_regex('wha*')
    'wha.*'
    """
    parts = []
    for char in glob:
        if char == '*':
            parts.append('.*')
        elif char == '?':
            parts.append('.')
        else:
            parts.append(re.escape(char))
    return ''.join(parts)


def _vocabulary_strings(vocabulary):
    if isinstance(vocabulary, TypeTable):
        return vocabulary.strings
    return [str(s) for s in vocabulary]


class Pattern:
    """
    Abstract base class of all pattern kinds.

    Subclasses implement :meth:`matcher`, which returns a predicate on
    single types; :meth:`resolve` scans the vocabulary with it.
    """

    valuetype = None

    def __init__(self, value):
        self.value = value

    def matcher(self, case_insensitive=True):
        raise NotImplementedError("Patterns need to implement matcher()")

    def resolve(self, vocabulary, case_insensitive=True):
        """
        Resolves this pattern against the vocabulary.

        Args:
            vocabulary: TypeTable, pandas.Index or sequence of strings
            case_insensitive (bool): compare ignoring case
        Returns:
            list: ascending positions of the matching vocabulary entries
        """
        match = self.matcher(case_insensitive)
        strings = _vocabulary_strings(vocabulary)
        return [i for i, string in enumerate(strings) if match(string)]

    def __eq__(self, other):
        return type(self) is type(other) and self.value == other.value

    def __hash__(self):
        return hash((type(self).__name__, self.value))

    def __repr__(self):
        return '{}({!r})'.format(type(self).__name__, self.value)


class FixedPattern(Pattern):
    """Matches types that are equal to the given string."""

    valuetype = 'fixed'

    def matcher(self, case_insensitive=True):
        if case_insensitive:
            folded = self.value.casefold()
            return lambda string: string.casefold() == folded
        return lambda string: string == self.value

    def resolve(self, vocabulary, case_insensitive=True):
        if not case_insensitive and isinstance(vocabulary, TypeTable):
            return [vocabulary.lookup(self.value)] if self.value in vocabulary else []
        return super().resolve(vocabulary, case_insensitive)


class GlobPattern(Pattern):
    """Matches types against a glob with ``*`` and ``?`` wildcards."""

    valuetype = 'glob'

    def matcher(self, case_insensitive=True):
        if case_insensitive:
            compiled = _compile(glob_to_regex(self.value.casefold()), re.DOTALL)
            return lambda string: compiled.fullmatch(string.casefold()) is not None
        compiled = _compile(glob_to_regex(self.value), re.DOTALL)
        return lambda string: compiled.fullmatch(string) is not None


class RegexPattern(Pattern):
    """
    Matches types in which the regular expression finds a match. Anchors
    (``^``, ``$``) in the expression restrict this as usual.
    """

    valuetype = 'regex'

    def __init__(self, value):
        super().__init__(value)
        _compile(value)     # fail early on malformed expressions

    def matcher(self, case_insensitive=True):
        compiled = _compile(self.value, re.IGNORECASE if case_insensitive else 0)
        return lambda string: compiled.search(string) is not None


class PhrasePattern(Pattern):
    """
    An ordered sequence of single-word patterns that must match a contiguous
    run of tokens.

    As a plain pattern (e.g. against DFM features), a phrase resolves to the
    union of what its parts match. Use :meth:`resolve_parts` to get the ids
    each token of a matching run may have.
    """

    valuetype = 'phrase'

    def __init__(self, parts, valuetype='glob'):
        if isinstance(parts, str):
            parts = parts.split()
        self.parts = tuple(pattern(part, valuetype) for part in parts)
        for part in self.parts:
            if isinstance(part, PhrasePattern):
                raise ValueError("Phrases cannot be nested: {!r}".format(part))
        super().__init__(' '.join(str(part.value) for part in self.parts))

    def matcher(self, case_insensitive=True):
        matchers = [part.matcher(case_insensitive) for part in self.parts]
        return lambda string: any(match(string) for match in matchers)

    def resolve_parts(self, vocabulary, case_insensitive=True):
        """
        Returns the ids matching each part, one ascending list per part.
        """
        return [part.resolve(vocabulary, case_insensitive) for part in self.parts]

    def sequences(self, vocabulary, case_insensitive=True):
        """
        Returns all id sequences that match this phrase, i.e. the cartesian
        product of the ids matching each part, in lexicographic order. If any
        part matches nothing, there is no sequence.

        The product grows with the power of the phrase length, token matching
        uses :meth:`resolve_parts` instead.
        """
        if not self.parts:
            return []
        candidates = self.resolve_parts(vocabulary, case_insensitive)
        if not all(candidates):
            return []
        return list(itertools.product(*candidates))

    def __len__(self):
        return len(self.parts)

    def __eq__(self, other):
        return isinstance(other, PhrasePattern) and self.parts == other.parts

    def __hash__(self):
        return hash(self.parts)


_pattern_classes = {cls.valuetype: cls for cls in (FixedPattern, GlobPattern, RegexPattern)}


def pattern(value, valuetype='glob'):
    """
    Creates a single-word pattern of the given kind. Patterns are passed
    through unchanged.

    Args:
        value (str or Pattern): the pattern
        valuetype (str): one of ``'glob'``, ``'regex'``, ``'fixed'``
    """
    if isinstance(value, Pattern):
        return value
    try:
        cls = _pattern_classes[valuetype]
    except KeyError:
        raise ValueError("Unknown valuetype {!r}, use one of {}".format(valuetype, ', '.join(valuetypes))) from None
    if not isinstance(value, str):
        raise TypeError("Patterns must be strings, not {!r}".format(value))
    return cls(value)


def phrase(value, valuetype='glob'):
    """
    Creates a phrase pattern from a whitespace-separated string or a sequence
    of sub-patterns.

    >>> phrase("killer whale")
    PhrasePattern('killer whale')
    """
    if isinstance(value, PhrasePattern):
        return value
    return PhrasePattern(value, valuetype)


def as_patterns(value, valuetype='glob'):
    """
    Normalizes a pattern specification (None, a single string or pattern,
    a :class:`Dictionary` or an iterable of those) to a list of patterns.
    """
    if value is None:
        return []
    if isinstance(value, (str, Pattern)):
        return [pattern(value, valuetype)]
    if isinstance(value, Dictionary):
        return [p for entry in value.values() for p in entry]
    return [pattern(item, valuetype) for item in value]


def resolve_pattern(pattern_spec, vocabulary, valuetype='glob', case_insensitive=True):
    """
    Resolves one or more patterns against the vocabulary.

    An empty pattern set resolves to an empty list, patterns that match
    nothing are silently ignored.

    Args:
        pattern_spec: a pattern, a string, or an iterable of those
        vocabulary: TypeTable, pandas.Index or sequence of strings
        valuetype (str): kind for patterns given as strings
        case_insensitive (bool): compare ignoring case

    Returns:
        list: ascending ids of all vocabulary entries matched by any pattern

    Raises:
        MalformedPattern: for invalid regular expressions
    """
    matches = set()
    for p in as_patterns(pattern_spec, valuetype):
        matches.update(p.resolve(vocabulary, case_insensitive))
    return sorted(matches)


class PhraseMatch:
    """
    The id sequences to be found in runs of tokens, as produced by
    :func:`resolve_phrases`. Used by :meth:`Tokens.compound` and by phrase
    selection.

    Each entry is a tuple of id sets, one per token position, so a phrase
    with wildcard parts is never expanded to all of its sequences. All
    single-token entries are merged to one set.

    Args:
        sequences: explicit id sequences
        phrases: sequences of id collections, one per position
    """

    def __init__(self, sequences=(), phrases=()):
        entries = [tuple(frozenset([int(id_)]) for id_ in sequence) for sequence in sequences]
        entries.extend(tuple(frozenset(int(id_) for id_ in part) for part in parts)
                       for parts in phrases)
        entries = [entry for entry in entries if entry and all(entry)]
        self.single = frozenset().union(*(entry[0] for entry in entries if len(entry) == 1))
        longer = list(dict.fromkeys(entry for entry in entries if len(entry) > 1))
        # longest first, so that matching is greedy
        self.entries = sorted(longer, key=len, reverse=True)
        if self.single:
            self.entries.append((self.single,))

    def __len__(self):
        return len(self.entries)

    @property
    def max_length(self):
        """Length of the longest phrase, 0 if there is none."""
        return len(self.entries[0]) if self.entries else 0

    def __contains__(self, sequence):
        sequence = tuple(int(id_) for id_ in sequence)
        return any(len(entry) == len(sequence)
                   and all(id_ in part for id_, part in zip(sequence, entry))
                   for entry in self.entries)

    def __repr__(self):
        return '<{} of {} entries, longest {}>'.format(type(self).__name__,
                                                       len(self), self.max_length)

    def match_at(self, ids, position):
        """
        Returns the length of the longest entry that matches `ids` starting
        at `position`, or 0.
        """
        size = len(ids)
        for entry in self.entries:
            end = position + len(entry)
            if end <= size and all(int(ids[position + offset]) in part
                                   for offset, part in enumerate(entry)):
                return len(entry)
        return 0

    def spans(self, ids):
        """
        Yields ``(start, stop)`` for non-overlapping matches in `ids`,
        scanning left to right and preferring the longest match.
        """
        position = 0
        size = len(ids)
        while position < size:
            length = self.match_at(ids, position)
            if length:
                yield position, position + length
                position += length
            else:
                position += 1


def resolve_phrases(pattern_spec, vocabulary, valuetype='glob', case_insensitive=True):
    """
    Resolves patterns to the id sequences they match. Single-word patterns
    contribute sequences of length one, phrases the ids of each part.

    Returns:
        PhraseMatch
    """
    sequences, phrases = [], []
    for p in as_patterns(pattern_spec, valuetype):
        if isinstance(p, PhrasePattern):
            phrases.append(p.resolve_parts(vocabulary, case_insensitive))
        else:
            sequences.extend((id_,) for id_ in p.resolve(vocabulary, case_insensitive))
    result = PhraseMatch(sequences, phrases)
    logger.debug("Resolved phrases %r to %r", pattern_spec, result)
    return result


class Dictionary(Mapping):
    """
    Maps keys (e.g. categories or seed words) to lists of patterns.

    >>> d = Dictionary({'positive': ['good*', 'nice'], 'negative': 'bad'})
    >>> list(d)
    ['positive', 'negative']
    """

    def __init__(self, mapping, valuetype='glob'):
        self._entries = OrderedDict()
        for key, values in dict(mapping).items():
            if isinstance(values, (str, Pattern)):
                values = [values]
            self._entries[key] = [pattern(value, valuetype) for value in values]

    def __getitem__(self, key):
        return self._entries[key]

    def __iter__(self):
        return iter(self._entries)

    def __len__(self):
        return len(self._entries)

    def __repr__(self):
        return '{}({!r})'.format(type(self).__name__, dict(self._entries))

    def resolve(self, vocabulary, case_insensitive=True):
        """
        Resolves every entry against the vocabulary.

        Returns:
            OrderedDict: key -> ascending list of matching ids
        """
        return OrderedDict(
            (key, resolve_pattern(entries, vocabulary, case_insensitive=case_insensitive))
            for key, entries in self._entries.items())
