import pandas as pd
import pytest
import quantext as q
from quantext.util import make_labels, align_docvars


class Metadata_Test:

    def test_fields(self):
        m = q.Metadata(lower_case=True, padding=False)
        assert m.lower_case
        assert m['padding'] is False
        assert set(m) == {'lower_case', 'padding'}

    def test_update_overwrites(self):
        m = q.Metadata(q.Metadata(padding=False), padding=True)
        assert m.padding

    def test_appendables(self):
        m = q.Metadata(operations=['tokenize'], weighting=('prop',))
        m2 = q.Metadata(m, operations=('dfm',))
        assert m2.operations == ('tokenize', 'dfm')
        assert m.operations == ('tokenize',)
        assert m2.weighting == ('prop',)

    def test_from_object_and_json(self):
        class Holder:
            metadata = q.Metadata(ndoc=3)
        assert q.Metadata(Holder()).ndoc == 3
        assert q.Metadata('{"ndoc": 4}').ndoc == 4

    def test_save_load(self, tmp_path):
        filename = str(tmp_path / "tokens.csv")
        m = q.Metadata(lower_case=True, operations=('tokenize', 'dfm'))
        m.save(filename)
        loaded = q.Metadata.load(filename)
        assert loaded.lower_case
        assert loaded.operations == ('tokenize', 'dfm')

    def test_load_no_dict(self, tmp_path):
        filename = tmp_path / "broken.meta"
        filename.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(q.util.MetadataException):
            q.Metadata.load(str(filename))


class DocumentDescriber_Test:

    def setup_method(self):
        self.describer = q.DocumentDescriber()

    def test_names(self):
        assert self.describer.group_name("Melville_Moby-Dick") == "Melville"
        assert self.describer.item_name("Melville_Moby-Dick") == "Moby-Dick"
        assert self.describer.item_name("Anonymous") == "Anonymous"
        assert self.describer.label("Melville_Moby-Dick") == "Melville: Moby-Dick"

    def test_groups(self):
        docs = ["Melville_Pierre", "Hawthorne_Fanshawe", "Melville_Typee"]
        assert self.describer.groups(docs) == {"Melville", "Hawthorne"}
        assert self.describer.group_names(docs) == ["Melville", "Hawthorne", "Melville"]

    def test_table(self):
        table = pd.DataFrame({"author": ["Melville", "Hawthorne"],
                              "title": ["Pierre", "Fanshawe"]},
                             index=["d1", "d2"])
        describer = q.TableDocumentDescriber(table, "author", "title")
        assert describer.group_name("d2") == "Hawthorne"
        assert describer.item_name("d1") == "Pierre"
        with pytest.raises(q.NotFound):
            describer.group_name("d3")

    def test_table_csv(self, tmp_path):
        filename = tmp_path / "authors.csv"
        filename.write_text("doc,author\nd1,Melville\nd2,Hawthorne\n", encoding="utf-8")
        describer = q.TableDocumentDescriber(str(filename), "author")
        assert describer.group_names(["d2", "d1"]) == ["Hawthorne", "Melville"]
        assert describer.item_name("d1") == "d1"

    def test_table_bad_column(self):
        with pytest.raises(ValueError):
            q.TableDocumentDescriber(pd.DataFrame({"author": []}), "year")


class Labels_Test:

    def test_generated(self):
        assert list(make_labels(None, 3)) == ["text1", "text2", "text3"]
        assert list(make_labels(None, 1, prefix='feat')) == ["feat1"]

    def test_given(self):
        assert list(make_labels(("a", "b"), 2)) == ["a", "b"]

    def test_duplicates(self):
        with pytest.raises(q.InvariantViolation):
            make_labels(["a", "a"], 2)

    def test_length(self):
        with pytest.raises(q.InvariantViolation):
            make_labels(["a"], 2)

    def test_align_docvars(self):
        docnames = pd.Index(["d1", "d2"], dtype=object)
        assert align_docvars(None, docnames).index.equals(docnames)
        reordered = align_docvars(pd.DataFrame({"year": [2, 1]}, index=["d2", "d1"]), docnames)
        assert list(reordered.year) == [1, 2]
        positional = align_docvars(pd.DataFrame({"year": [1, 2]}), docnames)
        assert list(positional.index) == ["d1", "d2"]
        with pytest.raises(q.DimensionMismatch):
            align_docvars(pd.DataFrame({"year": [1]}), docnames)

    def test_error_family(self):
        assert issubclass(q.NotFound, KeyError)
        assert issubclass(q.MalformedPattern, ValueError)
        assert issubclass(q.DimensionMismatch, q.QuantextError)
        assert str(q.NotFound("orca")) == "'orca' not found in type table"

    def test_align_docvars_integer_names(self):
        docnames = pd.Index([1, 0], dtype=object)
        aligned = align_docvars(pd.DataFrame({"who": ["first", "second"]}), docnames)
        assert list(aligned.index) == [1, 0]
        assert list(aligned.who) == ["first", "second"]
        labeled = align_docvars(pd.DataFrame({"who": ["zero", "one"]}, index=pd.Index([0, 1], dtype=object)),
                                docnames)
        assert list(labeled.who) == ["one", "zero"]
