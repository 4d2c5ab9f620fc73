# -*- coding: utf-8 -*-
"""
The type table: an append-only, ordered vocabulary that assigns each distinct
word form a dense integer id. Token stores hold only these ids.
"""

import logging
logger = logging.getLogger(__name__)

import numpy as np
import pandas as pd
from .util import NotFound, InvariantViolation

PAD = -1    # marks a removed token whose position is kept


class TypeTable:
    """
    Ordered set of unique strings, each identified by the position of its
    first insertion.

    Ids are dense (``0 .. len(table)-1``) and an id is never reassigned to a
    different string during the table's lifetime.

    >>> types = TypeTable()
    >>> types.intern("whale"), types.intern("killer"), types.intern("whale")
    (0, 1, 0)
    >>> types.lookup(1)
    'killer'
    """

    def __init__(self, strings=()):
        self._strings = []
        self._ids = {}
        for string in strings:
            self.intern(string)

    def intern(self, string):
        """
        Returns the id of `string`, adding it to the table if necessary.
        """
        try:
            return self._ids[string]
        except KeyError:
            if not isinstance(string, str):
                raise TypeError("Only strings can be interned, not {!r}".format(string)) from None
            id_ = len(self._strings)
            self._strings.append(string)
            self._ids[string] = id_
            return id_

    def intern_all(self, strings):
        """
        Interns all strings, returns their ids as an integer array.
        """
        return np.fromiter((self.intern(s) for s in strings), dtype=np.int64)

    def lookup(self, key):
        """
        Looks up a string by id, or an id by string.

        Raises:
            NotFound: if the key is not in the table
        """
        if isinstance(key, str):
            try:
                return self._ids[key]
            except KeyError:
                raise NotFound(key) from None
        try:
            index = int(key)
        except (TypeError, ValueError):
            raise NotFound(key) from None
        if 0 <= index < len(self._strings):
            return self._strings[index]
        raise NotFound(key)

    __getitem__ = lookup

    def strings_for(self, ids):
        """
        Returns the list of strings for a sequence of ids. :data:`PAD` is
        rendered as the empty string.
        """
        size = len(self._strings)
        result = []
        for id_ in ids:
            if id_ == PAD:
                result.append("")
            elif 0 <= id_ < size:
                result.append(self._strings[id_])
            else:
                raise InvariantViolation("Token id {} outside of type table of size {}".format(id_, size))
        return result

    def __contains__(self, string):
        return string in self._ids

    def __len__(self):
        return len(self._strings)

    def __iter__(self):
        return iter(self._strings)

    def __eq__(self, other):
        if not isinstance(other, TypeTable):
            return NotImplemented
        return self._strings == other._strings

    def __repr__(self):
        shown = ', '.join(repr(s) for s in self._strings[:5])
        if len(self._strings) > 5:
            shown += ', ...'
        return '{}([{}], size={})'.format(type(self).__name__, shown, len(self))

    @property
    def strings(self):
        """List of all types, in id order (a copy)."""
        return list(self._strings)

    @property
    def index(self):
        """The types as a :class:`pandas.Index`."""
        return pd.Index(self._strings, dtype=object)

    def copy(self):
        """Returns an independent table with the same ids."""
        return TypeTable(self._strings)

    def merge(self, other):
        """
        Merges another type table into a copy of this one.

        Ids of this table keep their meaning. The strings of `other` are
        interned into the copy, and a remapping array is returned so that
        ``remap[old_id]`` is the id in the merged table of the string that had
        ``old_id`` in `other`.

        Returns:
            (TypeTable, numpy.ndarray): merged table and remapping for `other`
        """
        merged = self.copy()
        remap = merged.intern_all(other)
        logger.debug("Merged %d types into table of %d, now %d types",
                     len(other), len(self), len(merged))
        return merged, remap
