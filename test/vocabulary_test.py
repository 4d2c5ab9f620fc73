import numpy as np
import pytest
import quantext as q


class TypeTable_Test:

    def setup_method(self):
        self.types = q.TypeTable(["what", "whale", "is", "a"])

    def test_intern_lookup(self):
        for word in ["killer", "whale", "", "Whale"]:
            id_ = self.types.intern(word)
            assert self.types.lookup(id_) == word
            assert self.types.intern(word) == id_

    def test_ids_are_dense(self):
        self.types.intern("killer")
        self.types.intern("what")
        assert [self.types.lookup(s) for s in self.types] == list(range(5))
        assert len(self.types) == 5

    def test_lookup_unknown(self):
        with pytest.raises(q.NotFound):
            self.types.lookup("orca")
        with pytest.raises(q.NotFound):
            self.types.lookup(4)
        with pytest.raises(KeyError):
            self.types["orca"]

    def test_only_strings(self):
        with pytest.raises(TypeError):
            self.types.intern(42)

    def test_strings_for_pad(self):
        assert self.types.strings_for([0, q.PAD, 1]) == ["what", "", "whale"]
        with pytest.raises(q.InvariantViolation):
            self.types.strings_for([17])

    def test_copy_is_independent(self):
        copy = self.types.copy()
        copy.intern("killer")
        assert "killer" not in self.types
        assert copy.lookup("killer") == 4

    def test_merge(self):
        other = q.TypeTable(["killer", "whale", "orca"])
        merged, remap = self.types.merge(other)
        assert list(remap) == [4, 1, 5]
        assert merged.strings == ["what", "whale", "is", "a", "killer", "orca"]
        for old_id, word in enumerate(other):
            assert merged.lookup(int(remap[old_id])) == word
        # the original is untouched
        assert len(self.types) == 4

    def test_merge_empty(self):
        merged, remap = self.types.merge(q.TypeTable())
        assert merged == self.types
        assert remap.size == 0
        assert remap.dtype == np.int64
