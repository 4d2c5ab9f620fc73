# -*- coding: utf-8 -*-
"""
Contains utility classes and functions: the exception family, metadata
records and document describers.
"""

import json
from collections.abc import Mapping
import pandas as pd


class QuantextError(Exception):
    """
    Common base of all errors raised by quantext itself.
    """


class NotFound(QuantextError, KeyError):
    """
    An unknown identifier or string has been looked up in a type table.
    """

    def __init__(self, key, where="type table"):
        super().__init__("{!r} not found in {}".format(key, where))
        self.key = key

    def __str__(self):
        # KeyError would quote the whole message
        return self.args[0]


class MalformedPattern(QuantextError, ValueError):
    """
    A regular expression (or a glob compiled to one) is not valid.
    """

    def __init__(self, pattern, reason=None):
        message = "Malformed pattern {!r}".format(pattern)
        if reason is not None:
            message += ": {}".format(reason)
        super().__init__(message)
        self.pattern = pattern


class DimensionMismatch(QuantextError, ValueError):
    """
    Two objects that are to be combined have incompatible row or column
    labels.
    """


class InvariantViolation(QuantextError, AssertionError):
    """
    An internal consistency condition does not hold: out-of-range ids,
    duplicate labels where unique ones are required etc. This indicates a
    bug, not a user error, and is never recovered from.
    """


class MetadataException(QuantextError):
    pass


class Metadata(Mapping):
    """
    A metadata record contains information about how a particular object of
    the quantext universe has been constructed, or how it will be
    manipulated.

    Metadata fields are simply attributes, and they can be used as such.
    """

    appendables = ('operations', 'weighting')

    def __init__(self, *args, **kwargs):
        """
        Create a new metadata instance. Arguments will be passed on to :meth:`update`.

        Examples:
            >>> m = Metadata(lower_case=True, padding=False)
            >>> Metadata(m, padding=True, ndoc=5)
            Metadata(lower_case=True, ndoc=5, padding=True)
        """
        self.update(*args, **kwargs)

    def _update_from(self, d):
        """
        Internal helper to update inner dictionary 'with semantics'. This will
        append rather then overwrite existing md fields if they are in
        :attr:`appendables`. Clients should use :meth:`update` or the
        constructor instead.

        Args:
            d (dict): Dictionary to update from.
        """
        d2 = dict(d)
        for field in self.appendables:
            if field in d2 and field in self.__dict__:
                d2[field] = tuple(self.__dict__[field]) + tuple(d2[field])
            elif field in d2:
                d2[field] = tuple(d2[field])
        self.__dict__.update(d2)

    def __getitem__(self, key):
        return self.__dict__[key]

    def __iter__(self):
        return iter(self.__dict__)

    def __len__(self):
        return len(self.__dict__)

    def update(self, *args, **kwargs):
        """
        Updates this metadata record from the arguments. Arguments may be:

        * other :class:`Metadata` instances
        * objects that have ``metadata`` attribute
        * JSON strings
        * stuff that :class:`dict` can update from
        * key-value pairs of new or updated metadata fields
        """
        for arg in args:
            if arg is None:
                continue
            if isinstance(arg, Metadata):
                self._update_from(arg.__dict__)
            elif isinstance(getattr(arg, "metadata", None), Metadata):
                self._update_from(arg.metadata.__dict__)
            elif isinstance(arg, str):
                self._update_from(json.loads(arg))
            else:
                self._update_from(dict(arg))
        self._update_from(kwargs)

    @staticmethod
    def metafilename(filename):
        """
        Returns an appropriate metadata filename for the given filename.

        >>> Metadata.metafilename("foo.csv")
        'foo.csv.meta'
        >>> Metadata.metafilename("foo.csv.meta")
        'foo.csv.meta'
        """
        filename = str(filename)
        if filename.endswith('.meta'):
            return filename
        return filename + '.meta'

    @classmethod
    def load(cls, filename):
        """
        Loads a metadata instance from the filename identified by the argument.

        Args:
            filename (str): The name of the metadata file, or of the file to
                which a sidecar metadata filename exists
        """
        metafilename = cls.metafilename(filename)
        with open(metafilename, "rt", encoding="utf-8") as f:
            d = json.load(f)
            if isinstance(d, dict):
                return cls(**d)
            else:
                raise MetadataException("Could not load metadata from {file}: \n"
                        "The returned type is a {type}".format(file=metafilename, type=type(d)))

    def save(self, filename, **kwargs):
        """
        Saves the metadata instance to a JSON file.

        Args:
            filename (str): Name of the metadata file or the source file
            **kwargs: are passed on to :func:`json.dump`
        """
        metafilename = self.metafilename(filename)
        with open(metafilename, "wt", encoding="utf-8") as f:
            json.dump(self.__dict__, f, **kwargs)

    def __repr__(self):
        return type(self).__name__ + '(' + \
                ', '.join(str(key) + '=' + repr(self.__dict__[key])
                        for key in sorted(self.__dict__.keys())) + ')'

    def to_json(self, **kwargs):
        """
        Returns a JSON string containing this metadata object's contents.

        Args:
            **kwargs: Arguments passed to :func:`json.dumps`
        """
        return json.dumps(self.__dict__, **kwargs)


class DocumentDescriber:
    """
    DocumentDescribers are able to extract grouping information from the
    document names of a token store or a document-feature matrix.

    The idea is that documents carry some sort of name (e.g., original
    filenames), but grouping operations are interested in information
    inferred from it. A DocumentDescriber produces this information from the
    document name, be it by inferring it directly (e.g., using some naming
    policy) or by using an external table.

    This base implementation expects names of the format "Group_Item" and
    returns the part before the first ``_`` as group and the rest as item.
    """

    def group_name(self, document_name):
        """
        Returns the unique name of the group the document belongs to.

        The default implementation returns the part of the document name before
        the first ``_``.
        """
        return str(document_name).split('_')[0]

    def item_name(self, document_name):
        """
        Returns the name of the item within the group.

        The default implementation returns the part of the document name after
        the first ``_``, or the whole name if there is none.
        """
        parts = str(document_name).split('_', 1)
        return parts[1] if len(parts) > 1 else parts[0]

    def label(self, document_name):
        """
        Returns a label for the document (including its group).
        """
        return "{}: {}".format(self.group_name(document_name),
                               self.item_name(document_name))

    def groups(self, documents):
        """
        Returns the names of all groups of the given list of documents.
        """
        return {self.group_name(document) for document in documents}

    def group_names(self, documents):
        """
        Returns the group names for each of the given documents, in order.
        """
        return [self.group_name(document) for document in documents]


class TableDocumentDescriber(DocumentDescriber):
    """
    A document decriber that takes groups and item labels from an external
    table.
    """

    def __init__(self, table, group_col, name_col=None, sep=',', **kwargs):
        """
        Args:
            table (str or pandas.DataFrame):
                A table with metadata that describes the documents, either a
                :class:`pandas.DataFrame` or path or IO to a CSV file. The
                table's index (or first column for CSV files) contains the
                document names. The columns (or first row) contains column
                labels.
            group_col (str):
                Name of the column in the table that contains the names of the
                groups.
            name_col (str):
                Name of the column in the table that contains the names of the
                individual items. If None, the document name is used.
            sep (str): field separator for CSV files
            **kwargs:
                Passed on to :func:`pandas.read_csv`.
        Raises:
            ValueError: when arguments inconsistent
        """
        if isinstance(table, pd.DataFrame):
            self.table = table
        else:
            self.table = pd.read_csv(table, header=0, index_col=0, sep=sep, **kwargs)
        self.group_col = group_col
        self.name_col = name_col

        if group_col not in self.table.columns:
            raise ValueError('Given group column {} is not in the table: {}'.format(group_col, list(self.table.columns)))
        if name_col is not None and name_col not in self.table.columns:
            raise ValueError('Given name column {} is not in the table: {}'.format(name_col, list(self.table.columns)))

    def group_name(self, document_name):
        try:
            return self.table.at[document_name, self.group_col]
        except KeyError:
            raise NotFound(document_name, "document table") from None

    def item_name(self, document_name):
        if self.name_col is None:
            return document_name
        return self.table.at[document_name, self.name_col]


def make_labels(labels, count, prefix='text', what='document'):
    """
    Creates a unique label index for `count` rows or columns.

    Args:
        labels: the labels, or None to generate ``text1``, ``text2``, …
        count (int): required number of labels
        prefix (str): prefix for generated labels
        what (str): what is labeled, for error messages
    Returns:
        pandas.Index
    Raises:
        InvariantViolation: if the labels are not unique or do not fit `count`
    """
    if labels is None:
        return pd.Index(['{}{}'.format(prefix, i + 1) for i in range(count)], dtype=object)
    index = pd.Index(list(labels), dtype=object)
    if len(index) != count:
        raise InvariantViolation("{} {} labels given for {} {}s".format(len(index), what, count, what))
    if not index.is_unique:
        duplicates = list(index[index.duplicated()].unique())
        raise InvariantViolation("Duplicate {} labels: {}".format(what, duplicates))
    return index


def align_docvars(docvars, docnames):
    """
    Returns a copy of the given document variables table indexed by
    `docnames`. If the table is labeled by the same names in a different
    order it is reordered, otherwise rows are taken in order. A default
    :class:`pandas.RangeIndex` never counts as labels, even if the document
    names happen to be integers.

    Raises:
        DimensionMismatch: if the number of rows does not fit
    """
    if docvars is None:
        return pd.DataFrame(index=docnames)
    docvars = pd.DataFrame(docvars)
    if len(docvars) != len(docnames):
        raise DimensionMismatch("docvars have {} rows, but there are {} documents".format(len(docvars), len(docnames)))
    labeled = not isinstance(docvars.index, pd.RangeIndex) \
        and set(docvars.index) == set(docnames)
    if labeled:
        docvars = docvars.reindex(docnames)
    else:
        docvars = docvars.reset_index(drop=True)
    docvars.index = docnames
    return docvars
