# -*- encoding: utf-8 -*-
"""
The quantext.matrix module contains the sparse document-feature matrix,
:class:`DocumentFeatureMatrix`, the function :func:`dfm` that counts a token
store into one, and the weighting schemes.

Document-feature matrices
=========================

Rows are documents, columns are features (usually types), cells are counts or
weights. The data is kept as a :class:`scipy.sparse.csr_matrix` that never
contains explicit zeros or duplicate entries; every operation returns a new
matrix and leaves the original unchanged.

When a matrix is built from tokens, its columns are in order of the features'
first occurrence (document by document, token by token).

Weightings
==========

A *weighting* is a function that works on a :class:`DocumentFeatureMatrix` and
returns a sparse matrix of the same shape with rescaled values. Each weighting
has the following additional attributes:

* name – an identifier for the weighting, usually the function name
* title – an optional, human-readable name for the weighting

Each weighting leaves its name in the 'weighting' field of the matrix'
:class:`~quantext.util.Metadata`. All weightings need to be registered to
the weighting registry, :data:`weightings`, which is done by the
:func:`weighting` decorator.
"""

import logging
logger = logging.getLogger(__name__)

import csv
from math import ceil
from functools import update_wrapper
from textwrap import dedent

import numpy as np
import pandas as pd
import scipy.sparse as sp

from .util import Metadata, QuantextError, InvariantViolation, DimensionMismatch, \
        NotFound, DocumentDescriber, make_labels, align_docvars
from .vocabulary import PAD
from .patterns import Dictionary, resolve_pattern


class MatrixNotAbsolute(QuantextError):
    def __init__(self, operation):
        super().__init__("{} not possible: Absolute frequencies required.".format(operation))


def _canonical(matrix):
    """
    Returns a CSR copy of matrix with duplicates summed, explicit zeros
    removed and indices sorted.
    """
    matrix = sp.csr_matrix(matrix, copy=True)
    matrix.sum_duplicates()
    matrix.eliminate_zeros()
    matrix.sort_indices()
    if matrix.nnz:
        if not np.isfinite(matrix.data).all():
            raise InvariantViolation("Matrix contains non-finite values")
        if matrix.data.min() < 0:
            raise InvariantViolation("Matrix contains negative values")
    return matrix


def _selector(sources, targets, size, width):
    """
    Sparse 0/1 matrix of shape (size, width) with ones at (sources[i], targets[i]).
    Right-multiplying a dfm's data by this moves or sums columns.
    """
    sources = np.asarray(sources, dtype=np.int64)
    targets = np.asarray(targets, dtype=np.int64)
    return sp.csr_matrix((np.ones(sources.size, dtype=np.int64), (sources, targets)),
                         shape=(size, width))


class DocumentFeatureMatrix:
    """
    A sparse document × feature table.

    Args:
        matrix: anything :class:`scipy.sparse.csr_matrix` accepts, shape
            (documents, features)
        docnames: unique row labels (default ``text1``, ``text2``, …)
        features: unique column labels (default ``feat1``, …)
        docvars (pandas.DataFrame): document variables, one row per document
        metadata (Metadata): metadata to copy into the new matrix
        **kwargs: additional metadata fields

    Raises:
        InvariantViolation: on label/shape disagreement, duplicate labels or
            negative values
    """

    def __init__(self, matrix, docnames=None, features=None, docvars=None,
                 metadata=None, **kwargs):
        matrix = _canonical(matrix)
        ndoc, nfeat = matrix.shape
        self.docnames = make_labels(docnames, ndoc)
        self.features = make_labels(features, nfeat, prefix='feat', what='feature')
        self._matrix = matrix
        self.docvars = align_docvars(docvars, self.docnames)
        self.metadata = Metadata(metadata, **kwargs)

    def _derive(self, matrix, docnames=None, features=None, docvars=None, **kwargs):
        return DocumentFeatureMatrix(
            matrix,
            docnames=self.docnames if docnames is None else docnames,
            features=self.features if features is None else features,
            docvars=self.docvars if docvars is None else docvars,
            metadata=self.metadata, **kwargs)

    @property
    def matrix(self):
        """A copy of the underlying CSR matrix."""
        return self._matrix.copy()

    @property
    def shape(self):
        return self._matrix.shape

    @property
    def ndoc(self):
        return self._matrix.shape[0]

    @property
    def nfeat(self):
        return self._matrix.shape[1]

    @property
    def nnz(self):
        return self._matrix.nnz

    def sparsity(self):
        """Proportion of cells that are zero."""
        cells = self.ndoc * self.nfeat
        return 1 - self.nnz / cells if cells else 0.0

    def __len__(self):
        return self.ndoc

    def __repr__(self):
        return '<{} of {} documents, {} features ({:.1%} sparse)>'.format(
            type(self).__name__, self.ndoc, self.nfeat, self.sparsity())

    def is_absolute(self) -> bool:
        """
        Returns:
            bool: ``True`` if this matrix contains absolute frequencies
        """
        return not self.metadata.get('frequencies', False)

    ## summaries

    def featfreq(self) -> pd.Series:
        """Total value of each feature across all documents."""
        return pd.Series(np.asarray(self._matrix.sum(axis=0)).ravel(),
                         index=self.features)

    def docfreq(self) -> pd.Series:
        """Number of documents in which each feature occurs."""
        return pd.Series(np.bincount(self._matrix.indices, minlength=self.nfeat),
                         index=self.features)

    def ntoken(self) -> pd.Series:
        """Number of tokens by document"""
        if self.is_absolute():
            return pd.Series(np.asarray(self._matrix.sum(axis=1)).ravel(),
                             index=self.docnames)
        else:
            raise MatrixNotAbsolute('Calculation on absolute numbers')

    def ntype(self) -> pd.Series:
        """Number of different features by document"""
        if self.is_absolute():
            return pd.Series(np.diff(self._matrix.indptr), index=self.docnames)
        else:
            raise MatrixNotAbsolute('Calculation on absolute numbers')

    def ttr(self) -> float:
        """
        Type/token ratio for the whole matrix.

        See also:
            https://en.wikipedia.org/wiki/Lexical_density
        """
        return self.ntype().sum() / self.ntoken().sum()

    def ttr_by_doc(self) -> pd.Series:
        """
        Type/token ratio for each document.
        """
        return self.ntype() / self.ntoken()

    def topfeatures(self, n=10) -> pd.Series:
        """
        The `n` features with the highest totals, descending. Ties keep the
        column order.
        """
        return self.featfreq().sort_values(ascending=False, kind='mergesort').head(n)

    def most_frequent(self, n=0):
        """
        Reorders the columns by descending total frequency and shortens the
        matrix to the `n` most frequent features.

        Args:
            n (int): number of features to keep, 0 means all
        Returns:
            DocumentFeatureMatrix: a new matrix
        """
        order = np.argsort(-self.featfreq().values, kind='mergesort')
        if n > 0:
            order = order[:n]
        return self._columns(order, operations=('most_frequent',))

    ## conversion

    def to_triplets(self):
        """
        Exports the non-zero cells in coordinate-list form.

        Returns:
            (pandas.Index, pandas.Index, numpy.ndarray, numpy.ndarray, numpy.ndarray):
                docnames, features, row indices, column indices and values,
                ordered by row, then column
        """
        coo = self._matrix.tocoo()
        return (self.docnames, self.features, coo.row.astype(np.int64),
                coo.col.astype(np.int64), coo.data)

    @classmethod
    def from_triplets(cls, docnames, features, rows, cols, values, **kwargs):
        """
        Creates a matrix from a coordinate list, e.g. as returned by
        :meth:`to_triplets` or by an external routine. Duplicate coordinates
        are summed.

        Raises:
            InvariantViolation: for coordinates outside of the labels
        """
        docnames = make_labels(docnames, len(docnames))
        features = make_labels(features, len(features), what='feature')
        rows = np.asarray(rows, dtype=np.int64)
        cols = np.asarray(cols, dtype=np.int64)
        values = np.asarray(values)
        if not rows.size == cols.size == values.size:
            raise InvariantViolation("Triplet arrays differ in length: {}, {}, {}".format(
                rows.size, cols.size, values.size))
        if rows.size:
            if rows.min() < 0 or rows.max() >= len(docnames):
                raise InvariantViolation("Row index out of range for {} documents".format(len(docnames)))
            if cols.min() < 0 or cols.max() >= len(features):
                raise InvariantViolation("Column index out of range for {} features".format(len(features)))
        matrix = sp.coo_matrix((values, (rows, cols)), shape=(len(docnames), len(features)))
        return cls(matrix, docnames=docnames, features=features, **kwargs)

    def to_frame(self, sparse=False) -> pd.DataFrame:
        """
        Converts to a :class:`pandas.DataFrame` (documents × features), dense
        or with sparse columns.
        """
        if sparse:
            return pd.DataFrame.sparse.from_spmatrix(self._matrix, index=self.docnames,
                                                     columns=self.features)
        return pd.DataFrame(self._matrix.toarray(), index=self.docnames,
                            columns=self.features)

    @classmethod
    def from_frame(cls, df, **kwargs):
        """
        Creates a matrix from a documents × features data frame. Missing values
        count as zero.
        """
        return cls(sp.csr_matrix(df.fillna(0).to_numpy()), docnames=df.index,
                   features=df.columns, **kwargs)

    def save(self, filename="dfm.csv"):
        """
        Saves the matrix to a CSV file.

        The file contains one line per non-zero cell with the columns
        ``document``, ``feature`` and ``value``. A metadata file will be saved
        alongside the file, it also records the full label lists so that
        empty rows and columns survive.

        Args:
            filename (str): The target file.
        """
        logger.info("Saving %r to %s ...", self, filename)
        docnames, features, rows, cols, values = self.to_triplets()
        table = pd.DataFrame({'document': docnames[rows], 'feature': features[cols],
                              'value': values})
        table.to_csv(filename, index=False, encoding="utf-8",
                     quoting=csv.QUOTE_NONNUMERIC)
        Metadata(self.metadata, docnames=list(self.docnames),
                 features=list(self.features)).save(filename, default=str)

    @classmethod
    def load(cls, filename):
        """
        Loads a matrix saved by :meth:`save`.
        """
        logger.info("Loading document-feature matrix from %s ...", filename)
        stored = Metadata.load(filename)
        docnames = pd.Index(stored.docnames, dtype=object)
        features = pd.Index(stored.features, dtype=object)
        metadata = Metadata({key: value for key, value in stored.items()
                             if key not in ('docnames', 'features')})
        table = pd.read_csv(filename, encoding="utf-8", keep_default_na=False,
                            dtype={'document': str, 'feature': str})
        rows = docnames.get_indexer(table['document'].astype(object))
        cols = features.get_indexer(table['feature'].astype(object))
        values = np.zeros(0) if table.empty else table['value'].to_numpy()
        return cls.from_triplets(docnames, features, rows, cols, values,
                                 metadata=metadata)

    ## selection and transformation

    def _columns(self, positions, **kwargs):
        positions = np.asarray(positions, dtype=np.int64)
        selector = _selector(positions, np.arange(positions.size), self.nfeat, positions.size)
        return self._derive(self._matrix @ selector, features=self.features[positions], **kwargs)

    def select(self, pattern, selection='keep', valuetype='glob', case_insensitive=True):
        """
        Keeps or removes the features matching the given patterns.

        Args:
            pattern: pattern or iterable of patterns
            selection (str): ``'keep'`` or ``'remove'``
            valuetype (str): kind for patterns given as strings
            case_insensitive (bool): match ignoring case
        Returns:
            DocumentFeatureMatrix: a new matrix with the same documents and
                the selected features in their original order
        """
        if selection not in ('keep', 'remove'):
            raise ValueError("selection must be 'keep' or 'remove', not {!r}".format(selection))
        matched = np.zeros(self.nfeat, dtype=bool)
        matched[resolve_pattern(pattern, self.features, valuetype, case_insensitive)] = True
        selected = matched if selection == 'keep' else ~matched
        logger.debug("%s %d of %d features", selection, matched.sum(), self.nfeat)
        return self._columns(np.flatnonzero(selected), operations=('select_' + selection,))

    def keep(self, pattern, **kwargs):
        """Keeps only the features matching the given patterns."""
        return self.select(pattern, selection='keep', **kwargs)

    def remove(self, pattern, **kwargs):
        """Removes the features matching the given patterns."""
        return self.select(pattern, selection='remove', **kwargs)

    def trim(self, min_termfreq=None, max_termfreq=None, min_docfreq=None,
             max_docfreq=None, docfreq_type='count'):
        """
        Removes features by their frequency. Aggregates are calculated from
        the current data.

        Args:
            min_termfreq: minimum total of a feature across all documents
            max_termfreq: maximum total of a feature
            min_docfreq: minimum number of documents a feature must occur in
            max_docfreq: maximum number of documents a feature may occur in
            docfreq_type (str): ``'count'``, or ``'prop'`` to give the document
                frequencies as a proportion of the number of documents. Note
                that we're always rounding towards the ceiling for the
                minimum, i.e. if the matrix contains 10 documents and
                min_docfreq=1/3, a feature must occur in at least *4* documents.
        Returns:
            DocumentFeatureMatrix: A new matrix with the features removed. The
                original matrix is left unchanged.
        """
        if docfreq_type == 'prop':
            if min_docfreq is not None:
                min_docfreq = ceil(min_docfreq * self.ndoc)
            if max_docfreq is not None:
                max_docfreq = max_docfreq * self.ndoc
        elif docfreq_type != 'count':
            raise ValueError("docfreq_type must be 'count' or 'prop', not {!r}".format(docfreq_type))

        termfreq = self.featfreq().values
        docfreq = self.docfreq().values
        retained = np.ones(self.nfeat, dtype=bool)
        if min_termfreq is not None:
            retained &= termfreq >= min_termfreq
        if max_termfreq is not None:
            retained &= termfreq <= max_termfreq
        if min_docfreq is not None:
            retained &= docfreq >= min_docfreq
        if max_docfreq is not None:
            retained &= docfreq <= max_docfreq

        removed = self.nfeat - int(retained.sum())
        if removed and removed == self.nfeat:
            logger.warning("Trimming removes all %d features", removed)
        else:
            logger.info("Trimming removes %d of %d features", removed, self.nfeat)
        return self._columns(np.flatnonzero(retained), operations=('trim',))

    def group(self, groups):
        """
        Sums the rows of documents that share a grouping key.

        Args:
            groups: a sequence of keys (one per document), the name of a
                document variable, or a :class:`~quantext.util.DocumentDescriber`
        Returns:
            DocumentFeatureMatrix: one row per distinct key, in order of first
                occurrence, named by the key. Document variables that are
                constant within each group are kept.
        Raises:
            DimensionMismatch: if the number of keys does not fit
            KeyError: for an unknown document variable
        """
        if isinstance(groups, DocumentDescriber):
            keys = groups.group_names(self.docnames)
        elif isinstance(groups, str):
            if groups not in self.docvars.columns:
                raise KeyError("No document variable {!r}, available: {}".format(
                    groups, list(self.docvars.columns)))
            keys = list(self.docvars[groups])
        else:
            keys = list(groups)
            if len(keys) != self.ndoc:
                raise DimensionMismatch("{} grouping keys given for {} documents".format(
                    len(keys), self.ndoc))

        codes, uniques = pd.factorize(pd.Series(keys, dtype=object), sort=False,
                                      use_na_sentinel=False)
        ngroups = len(uniques)
        indicator = _selector(np.arange(self.ndoc), codes, self.ndoc, ngroups).T
        matrix = indicator @ self._matrix

        docvars = None
        if self.ndoc and len(self.docvars.columns):
            grouped = self.docvars.groupby(codes, sort=True)
            constant = [column for column in self.docvars.columns
                        if (grouped[column].nunique(dropna=False) <= 1).all()]
            if constant:
                docvars = grouped[constant].first()
                docvars.index = pd.Index(list(uniques), dtype=object)
        logger.info("Grouped %d documents into %d groups", self.ndoc, ngroups)
        return DocumentFeatureMatrix(matrix, docnames=list(uniques),
                                     features=self.features, docvars=docvars,
                                     metadata=self.metadata, operations=('group',))

    def weight(self, scheme='prop', **kwargs):
        """
        Applies the registered weighting `scheme`. Cells whose weight is
        exactly zero are dropped.

        Args:
            scheme (str): name of the weighting, see :data:`weightings`
            **kwargs: passed on to the weighting
        Raises:
            KeyError: for unknown schemes
        """
        return weightings.weighting(scheme)(self, **kwargs)

    def tfidf(self, scheme_tf='count', base=10):
        """Weights by term frequency × inverse document frequency."""
        return self.weight('tfidf', scheme_tf=scheme_tf, base=base)

    def match(self, features):
        """
        Conforms the columns to the given features: features not in the list
        are dropped, listed features that are missing become empty columns.

        Raises:
            InvariantViolation: if `features` contains duplicates
        """
        features = make_labels(features, len(features), what='feature')
        positions = self.features.get_indexer(features)
        present = positions >= 0
        selector = _selector(positions[present], np.flatnonzero(present),
                             self.nfeat, len(features))
        return self._derive(self._matrix @ selector, features=features,
                            operations=('match',))

    def lookup(self, dictionary, valuetype='glob', case_insensitive=True):
        """
        Sums the features matched by each entry of a dictionary into one
        column per dictionary key.

        Args:
            dictionary (Dictionary or dict): key -> patterns
        """
        if not isinstance(dictionary, Dictionary):
            dictionary = Dictionary(dictionary, valuetype)
        resolved = dictionary.resolve(self.features, case_insensitive)
        sources, targets = [], []
        for target, ids in enumerate(resolved.values()):
            sources.extend(ids)
            targets.extend([target] * len(ids))
        selector = _selector(sources, targets, self.nfeat, len(resolved))
        return self._derive(self._matrix @ selector, features=list(resolved.keys()),
                            operations=('lookup',))

    def subset(self, documents, by='auto'):
        """
        Keeps the given documents, in the given order.

        Integers are row positions, unless the document names are integers
        themselves (e.g. after grouping by an integer class label): then they
        are document names. Pass ``by='position'`` or ``by='name'`` to decide
        explicitly.

        Args:
            documents: document names, positions, or a boolean mask
            by (str): ``'auto'``, ``'name'`` or ``'position'``
        Raises:
            NotFound: for unknown document names
            InvariantViolation: for positions out of range
            DimensionMismatch: for a mask of the wrong length
        """
        if by not in ('auto', 'name', 'position'):
            raise ValueError("by must be 'auto', 'name' or 'position', not {!r}".format(by))
        documents = np.asarray(list(documents))
        if by == 'auto':
            integer_names = self.docnames.inferred_type == 'integer'
            by = 'name' if integer_names else 'position'
        if documents.dtype == bool:
            if documents.size != self.ndoc:
                raise DimensionMismatch("Mask of length {} for {} documents".format(
                    documents.size, self.ndoc))
            positions = np.flatnonzero(documents)
        elif by == 'position' and documents.size and np.issubdtype(documents.dtype, np.integer):
            positions = documents.astype(np.int64)
            if positions.min() < 0 or positions.max() >= self.ndoc:
                raise InvariantViolation("Document index out of range for {} documents".format(self.ndoc))
        else:
            positions = self.docnames.get_indexer(documents.astype(object))
            if (positions < 0).any():
                raise NotFound(list(documents[positions < 0]), "document names")
        return self._derive(self._matrix[positions], docnames=self.docnames[positions],
                            docvars=self.docvars.iloc[positions],
                            operations=('subset',))

    def rbind(self, other):
        """
        Appends the documents of another matrix. The columns are the union of
        both feature sets, this matrix' features first.

        Raises:
            DimensionMismatch: if both matrices contain documents of the same name
        """
        overlap = self.docnames.intersection(other.docnames)
        if len(overlap):
            raise DimensionMismatch("Both matrices contain documents {}".format(list(overlap)))
        features = self.features.append(other.features[~other.features.isin(self.features)])
        matrix = sp.vstack([self.match(features)._matrix, other.match(features)._matrix])
        return DocumentFeatureMatrix(matrix, docnames=self.docnames.append(other.docnames),
                                     features=features,
                                     docvars=pd.concat([self.docvars, other.docvars]),
                                     metadata=self.metadata, operations=('rbind',))

    def add(self, other):
        """
        Cell-wise sum with a matrix that has the same documents and features,
        possibly in a different order.

        Raises:
            DimensionMismatch: if the label sets differ
        """
        if set(self.docnames) != set(other.docnames):
            raise DimensionMismatch("Document labels differ: {}".format(
                sorted(map(str, set(self.docnames) ^ set(other.docnames)))))
        if set(self.features) != set(other.features):
            raise DimensionMismatch("Feature labels differ: {}".format(
                sorted(map(str, set(self.features) ^ set(other.features)))))
        rows = other.docnames.get_indexer(self.docnames)
        aligned = other.match(self.features)._matrix[rows]
        return self._derive(self._matrix + aligned, operations=('add',))

    __add__ = add


def dfm(tokens, features=None):
    """
    Counts each (document, type) pair of a token store, skipping padding.

    Args:
        tokens (Tokens): the token store
        features: if given, the exact list of columns; types not in this
            list are not counted, listed features that do not occur are empty
            columns. Otherwise one column per type that occurs, in order of
            first occurrence.
    Returns:
        DocumentFeatureMatrix: one row per document, including empty ones
    """
    types = tokens.types
    rows, cols = [], []
    for position, doc in enumerate(tokens.docs):
        doc = doc[doc != PAD]
        rows.append(np.full(doc.size, position, dtype=np.int64))
        cols.append(doc)
    rows = np.concatenate(rows) if rows else np.zeros(0, dtype=np.int64)
    cols = np.concatenate(cols) if cols else np.zeros(0, dtype=np.int64)

    column_of = np.full(len(types), -1, dtype=np.int64)
    if features is None:
        observed, first = np.unique(cols, return_index=True)
        order = observed[np.argsort(first, kind='mergesort')]
        column_of[order] = np.arange(order.size)
        features = types.strings_for(order)
    else:
        features = make_labels(features, len(features), what='feature')
        for position, feature in enumerate(features):
            if feature in types:
                column_of[types.lookup(feature)] = position
        counted = column_of[cols] >= 0
        rows, cols = rows[counted], cols[counted]

    matrix = sp.coo_matrix((np.ones(rows.size, dtype=np.int64), (rows, column_of[cols])),
                           shape=(tokens.ndoc, len(features)))
    result = DocumentFeatureMatrix(matrix, docnames=tokens.docnames,
                                   features=features, docvars=tokens.docvars,
                                   metadata=tokens.metadata,
                                   operations=('dfm',), frequencies=False)
    logger.info("Created %r", result)
    return result


class _WeightingRegistry:
    """
    The registry of weighting schemes. Weightings register themselves when
    they are created using the :func:`weighting` decorator.
    """

    def __init__(self):
        self.weightings = {}    # name -> Weighting

    def add_weighting(self, f):
        """
        Registers the weighting _f_.
        """
        if f.name in self.weightings:
            logger.warning("Registering %s as %s, replacing existing function with this name", f, f.name)
        self.weightings[f.name] = f

    def weighting(self, name):
        """
        Returns the weighting identified by the name.

        Raises:
            KeyError: if it has not been registered
        """
        try:
            return self.weightings[name]
        except KeyError:
            raise KeyError("Unknown weighting scheme {!r}, available: {}".format(
                name, ', '.join(self.weightings))) from None

    __getitem__ = weighting

    def __contains__(self, name):
        return name in self.weightings

    def __iter__(self):
        return iter(self.weightings)

    def __str__(self):
        return dedent(
            """
            {} Weightings:
            -------------
            {}
            """).format(len(self.weightings),
                        '\n'.join(str(w) for w in self.weightings.values()))


weightings = _WeightingRegistry()


class Weighting:
    """
    Wrapper for weighting schemes.
    """

    def __init__(self, f, name=None, title=None, absolute=False, register=True):
        self.weigh = f
        if name is None:
            name = f.__name__
        if title is None:
            title = name
        self.name = name
        self.title = title
        self.absolute = absolute
        update_wrapper(self, f)

        if register:
            weightings.add_weighting(self)

    def __call__(self, dfm, *args, **kwargs):
        matrix = self.weigh(dfm, *args, **kwargs)
        if matrix.shape != dfm.shape:
            raise InvariantViolation("Weighting {} changed the shape from {} to {}".format(
                self.name, dfm.shape, matrix.shape))
        return dfm._derive(matrix, weighting=(self.name,),
                           frequencies=dfm.metadata.get('frequencies', False) or not self.absolute)

    def __str__(self):
        result = self.name
        if self.title != self.name:
            result += ' (' + self.title + ')'
        return result


def weighting(*args, **kwargs):
    """
    Decorator that creates a :class:`Weighting` from a function. Can be used
    without or with keyword arguments:

        name (str): Name (identifier) for the weighting. By default, the function's name is used.
        title (str): Human-readable title for the weighting.
        absolute (bool): The result still contains absolute frequencies.
    """
    name = kwargs.get('name')
    title = kwargs.get('title')
    absolute = kwargs.get('absolute', False)

    def create_weighting(f):
        return Weighting(f, name=name, title=title, absolute=absolute)
    if args and callable(args[0]):
        return create_weighting(args[0])
    else:
        return create_weighting


def _scale_rows(matrix, factors):
    return sp.diags(factors, format='csr') @ matrix if factors.size else matrix.copy()


def _scale_columns(matrix, factors):
    return matrix @ sp.diags(factors, format='csr') if factors.size else matrix.copy()


def _row_maxima(matrix):
    if matrix.nnz == 0:
        return np.zeros(matrix.shape[0])
    return matrix.max(axis=1).toarray().ravel().astype(float)


def _inverse(values):
    values = np.asarray(values, dtype=float)
    result = np.zeros_like(values)
    np.divide(1.0, values, out=result, where=values != 0)
    return result


################# The weighting schemes

@weighting(absolute=True)
def count(dfm):
    """Leaves the counts unchanged."""
    return dfm.matrix


@weighting(title="Proportions")
def prop(dfm):
    """Divides each cell by its document's total."""
    matrix = dfm.matrix
    return _scale_rows(matrix, _inverse(np.asarray(matrix.sum(axis=1)).ravel()))


@weighting(title="Proportion of maximum")
def propmax(dfm):
    """Divides each cell by its document's maximum."""
    matrix = dfm.matrix
    return _scale_rows(matrix, _inverse(_row_maxima(matrix)))


@weighting(title="Boolean")
def boolean(dfm):
    """1 where the feature occurs, 0 otherwise."""
    matrix = dfm.matrix.astype(np.int64)
    matrix.data[:] = 1
    return matrix


@weighting(title="Logarithmic count")
def logcount(dfm, base=10):
    """
    Replaces each count n by 1 + log(n).
    """
    if not dfm.is_absolute():
        raise MatrixNotAbsolute('Logarithmic weighting')
    matrix = dfm.matrix.astype(float)
    matrix.data = 1 + np.log(matrix.data) / np.log(base)
    return matrix


@weighting(title="Augmented frequency")
def augmented(dfm, k=0.5):
    """
    Replaces each non-zero cell by k + (1 - k) × its proportion of the
    document's maximum.
    """
    scaled = propmax(dfm).matrix.astype(float)
    scaled.data = k + (1 - k) * scaled.data
    return scaled


def inverse_document_frequency(dfm, base=10):
    """
    log(N / df) per feature; features occurring in every document get 0.
    """
    docfreq = dfm.docfreq().to_numpy().astype(float)
    result = np.zeros_like(docfreq)
    present = docfreq > 0
    result[present] = np.log(dfm.ndoc / docfreq[present]) / np.log(base)
    return result


@weighting(title="Inverse document frequency")
def idf(dfm, base=10):
    """
    Multiplies each column by the feature's inverse document frequency.
    Cells of features that occur in every document become 0 and are dropped.
    """
    return _scale_columns(dfm.matrix.astype(float), inverse_document_frequency(dfm, base))


@weighting(title="TF-IDF")
def tfidf(dfm, scheme_tf='count', base=10):
    """
    Applies the term frequency weighting `scheme_tf`, then multiplies by the
    inverse document frequency (calculated from the unweighted matrix).
    """
    tf = weightings.weighting(scheme_tf)(dfm)
    return _scale_columns(tf.matrix.astype(float), inverse_document_frequency(dfm, base))
