import numpy as np
import pandas as pd
import pytest
import quantext as q


class Tokenizer_Test:

    def setup_method(self):
        self.tokenizer = q.Tokenizer()

    def test_tokenize(self):
        assert list(self.tokenizer.tokenize(["This is a", "simple test."])) \
            == ["This", "is", "a", "simple", "test", "."]

    def test_tokenize_letters(self):
        t1 = q.Tokenizer(token_pattern=q.LETTERS_PATTERN)
        assert list(t1.tokenize(["I don't like mondays."])) \
            == ["I", "don", "t", "like", "mondays"]

    def test_tokenize_words(self):
        t1 = q.Tokenizer(token_pattern=q.WORD_PATTERN)
        assert list(t1.tokenize(["I don't like mondays."])) \
            == ["I", "don't", "like", "mondays"]

    def test_max_tokens(self):
        t1 = q.Tokenizer(max_tokens=3)
        assert list(t1.tokenize(["one two", "three four"])) == ["one", "two", "three"]

    def test_remove_punct_and_numbers(self):
        t1 = q.Tokenizer(remove_punct=True, remove_numbers=True)
        toks = t1("In 1851, Melville wrote: \"Call me Ishmael!\"")
        assert toks[0] == ["In", "Melville", "wrote", "Call", "me", "Ishmael"]

    def test_padding(self):
        t1 = q.Tokenizer(remove_punct=True, padding=True)
        toks = t1("killer, whale")
        assert toks[0] == ["killer", "", "whale"]
        assert toks.ntoken().iloc[0] == 2

    def test_lower_case(self):
        toks = q.tokenize("The whale. THE WHALE!", lower_case=True, remove_punct=True)
        assert toks[0] == ["the", "whale", "the", "whale"]
        assert len(toks.types) == 2

    def test_stopwords(self):
        toks = q.tokenize(["It is a killer whale", "a whale is a whale"],
                          remove=["is", "a", "it"])
        assert toks.as_lists() == [["killer", "whale"], ["whale", "whale"]]

    def test_docnames(self):
        assert list(q.tokenize(["a", "b"]).docnames) == ["text1", "text2"]
        assert list(q.tokenize({"moby": "a", "ahab": "b"}).docnames) == ["moby", "ahab"]
        series = pd.Series(["a b", "c"], index=["x", "y"])
        assert q.tokenize(series).as_dict() == {"x": ["a", "b"], "y": ["c"]}

    def test_duplicate_docnames(self):
        with pytest.raises(q.InvariantViolation):
            q.tokenize(["a", "b"], docnames=["x", "x"])

    def test_docvars(self):
        toks = q.tokenize(["a", "b"], docvars=pd.DataFrame({"author": ["M", "H"]}))
        assert list(toks.docvars.index) == ["text1", "text2"]
        assert list(toks.docvars.author) == ["M", "H"]
        with pytest.raises(q.DimensionMismatch):
            q.tokenize(["a", "b"], docvars=pd.DataFrame({"author": ["M"]}))

    def test_from_config(self):
        config = q.get_configuration()
        config['tokens.remove_punct'] = True
        tokenizer = q.Tokenizer.from_config(config, lower_case=True)
        assert tokenizer.remove_punct
        assert tokenizer.lower_case
        assert tokenizer.max_tokens is None
        assert tokenizer("A whale.")[0] == ["a", "whale"]

    def test_docvars_with_integer_names(self):
        toks = q.tokenize(["a", "b"], docnames=[1, 0],
                          docvars={"who": ["first", "second"]})
        assert list(toks.docvars.index) == [1, 0]
        assert list(toks.docvars.who) == ["first", "second"]
        assert toks[0] == ["b"]

    def test_concatenator_from_config(self):
        config = q.get_configuration()
        q.update_configuration(config, ["compound.concatenator:+"])
        toks = q.Tokenizer.from_config(config)("a killer whale")
        assert toks.metadata.concatenator == "+"
        assert toks.compound("killer whale")[0] == ["a", "killer+whale"]
        assert toks.ngrams(2)[0] == ["a+killer", "killer+whale"]
        assert toks.compound("killer whale", concatenator=" ")[0] == ["a", "killer whale"]

    def test_metadata(self):
        toks = q.tokenize("a", lower_case=True)
        assert toks.metadata.lower_case
        assert toks.metadata.operations == ('tokenize',)


class Tokens_Test:

    def setup_method(self):
        self.toks = q.Tokens.from_lists([["it", "is", "a", "killer", "whale"],
                                         ["a", "whale", "is", "a", "whale"],
                                         []],
                                        docnames=["d1", "d2", "d3"])

    def test_invariants(self):
        with pytest.raises(q.InvariantViolation):
            q.Tokens([[0, 1, 2]], q.TypeTable(["a", "b"]))
        with pytest.raises(q.InvariantViolation):
            q.Tokens([[-2]], q.TypeTable(["a"]))
        q.Tokens([[q.PAD, 0]], q.TypeTable(["a"]))

    def test_documents_are_read_only(self):
        with pytest.raises(ValueError):
            self.toks.docs[0][0] = 1

    def test_access(self):
        assert len(self.toks) == 3
        assert self.toks["d2"] == ["a", "whale", "is", "a", "whale"]
        assert self.toks[-1] == []
        with pytest.raises(q.InvariantViolation):
            self.toks[3]
        with pytest.raises(q.NotFound):
            self.toks["d4"]

    def test_counts(self):
        assert list(self.toks.ntoken()) == [5, 5, 0]
        assert list(self.toks.ntype()) == [5, 3, 0]

    def test_select_keep_remove(self):
        kept = self.toks.select(["whale", "a"], selection='keep')
        removed = self.toks.select(["whale", "a"], selection='remove')
        assert kept.as_lists() == [["a", "whale"], ["a", "whale", "a", "whale"], []]
        assert removed.as_lists() == [["it", "is", "killer"], ["is"], []]
        assert len(kept) == len(removed) == 3
        # the original is unchanged
        assert self.toks[0] == ["it", "is", "a", "killer", "whale"]

    def test_select_everything_removed(self):
        removed = self.toks.remove("*")
        assert removed.as_lists() == [[], [], []]
        assert list(removed.docnames) == ["d1", "d2", "d3"]

    def test_select_padding(self):
        removed = self.toks.remove("is", padding=True)
        assert removed[0] == ["it", "", "a", "killer", "whale"]
        assert list(removed.ntoken()) == [4, 4, 0]

    def test_padding_prevents_adjacency(self):
        toks = q.Tokens.from_lists([["killer", "the", "whale"]])
        padded = toks.remove("the", padding=True)
        assert padded.compound("killer whale")[0] == ["killer", "", "whale"]
        unpadded = toks.remove("the")
        assert unpadded.compound("killer whale")[0] == ["killer_whale"]

    def test_select_phrase(self):
        kept = self.toks.keep(q.phrase("a whale"))
        assert kept.as_lists() == [[], ["a", "whale", "a", "whale"], []]
        removed = self.toks.remove(q.phrase("killer whale"))
        assert removed[0] == ["it", "is", "a"]

    def test_select_invalid(self):
        with pytest.raises(ValueError):
            self.toks.select("a", selection='drop')

    def test_compound(self):
        toks = q.Tokens.from_lists([["it", "is", "a", "killer", "whale"]])
        compounded = toks.compound(["killer whale"])
        assert compounded.as_lists() == [["it", "is", "a", "killer_whale"]]
        assert "killer_whale" in compounded.types
        assert compounded.types.lookup("killer_whale") == 5
        assert "killer_whale" not in toks.types

    def test_compound_longest_first(self):
        toks = q.Tokens.from_lists([["the", "killer", "whale", "song", "killer", "whale"]])
        compounded = toks.compound(["killer whale", "killer whale song"], concatenator=" ")
        assert compounded[0] == ["the", "killer whale song", "killer whale"]

    def test_compound_glob(self):
        compounded = self.toks.compound("a wha*")
        assert compounded[1] == ["a_whale", "is", "a_whale"]
        assert compounded[0] == ["it", "is", "a", "killer", "whale"]

    def test_compound_no_match(self):
        compounded = self.toks.compound("orca whale")
        assert compounded.as_lists() == self.toks.as_lists()

    def test_ngrams(self):
        bigrams = self.toks.ngrams(2)
        assert bigrams[0] == ["it_is", "is_a", "a_killer", "killer_whale"]
        assert bigrams[2] == []
        assert self.toks.ngrams([1, 3])[1] == ["a", "whale", "is", "a", "whale",
                                               "a_whale_is", "whale_is_a", "is_a_whale"]

    def test_ngrams_skip_padding(self):
        padded = self.toks.remove("a", padding=True)
        assert padded.ngrams(2)[0] == ["it_is", "killer_whale"]

    def test_tolower(self):
        toks = q.Tokens.from_lists([["Whale", "whale", "WHALE", "a"]])
        lowered = toks.tolower()
        assert lowered[0] == ["whale", "whale", "whale", "a"]
        assert lowered.types.strings == ["whale", "a"]

    def test_combine(self):
        other = q.Tokens.from_lists([["orca", "whale"]], docnames=["d4"])
        combined = self.toks.combine(other)
        assert list(combined.docnames) == ["d1", "d2", "d3", "d4"]
        assert combined["d4"] == ["orca", "whale"]
        assert combined["d1"] == self.toks["d1"]
        with pytest.raises(q.DimensionMismatch):
            self.toks.combine(self.toks)

    def test_select_with_index(self):
        assert self.toks.keep(pd.Index(["zzz"])).as_lists() == [[], [], []]
        assert self.toks.remove(np.array(["zzz"])).as_lists() == self.toks.as_lists()
        assert self.toks.keep(pd.Index(["killer"]))["d1"] == ["killer"]

    def test_wildcard_phrase(self):
        toks = q.Tokens.from_lists([["w{}".format(i) for i in range(500)]])
        compounded = toks.compound("* *")
        assert len(compounded[0]) == 250
        assert compounded[0][0] == "w0_w1"

    def test_empty_store(self):
        empty = q.tokenize([])
        assert len(empty) == 0
        assert empty.remove("a").as_lists() == []
        assert empty.compound("a b").as_lists() == []

    def test_operations_recorded(self):
        derived = self.toks.remove("a").compound("killer whale")
        assert derived.metadata.operations == ('select_remove', 'compound')
