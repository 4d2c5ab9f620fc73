import os

import pytest
import quantext as q


class Configuration_Test:

    def setup_method(self):
        self.config = q.get_configuration()

    def test_defaults(self):
        assert self.config['tokens.lower_case'] is False
        assert self.config['tokens.max_tokens'] == 0
        assert self.config['patterns.valuetype'] == 'glob'
        assert self.config['patterns.case_insensitive'] is True
        assert self.config['compound.concatenator'] == '_'

    def test_update(self):
        q.update_configuration(self.config, ["tokens.lower_case:yes",
                                             "tokens.max_tokens:5",
                                             "patterns.valuetype:regex"])
        assert self.config['tokens.lower_case'] is True
        assert self.config['tokens.max_tokens'] == 5
        assert self.config['patterns.valuetype'] == 'regex'

    def test_update_false(self):
        q.update_configuration(self.config, ["patterns.case_insensitive:false"])
        assert self.config['patterns.case_insensitive'] is False

    def test_update_nothing(self):
        assert q.update_configuration(self.config, None) is self.config

    def test_malformed_option(self):
        with pytest.raises(ValueError):
            q.update_configuration(self.config, ["tokens.lower_case"])

    def test_unknown_option(self):
        with pytest.raises(KeyError):
            q.update_configuration(self.config, ["tokens.stem:true"])

    def test_sync(self, tmp_path):
        filename = str(tmp_path / "quantext.ini")
        config = q.get_configuration(filename)
        assert os.path.exists(filename)
        config['tokens.lower_case'] = True
        config['tokens.max_tokens'] = 100
        config.sync()
        again = q.get_configuration(filename)
        assert again['tokens.lower_case'] is True
        assert again['tokens.max_tokens'] == 100
        assert again['patterns.valuetype'] == 'glob'

    def test_tokenizer_from_config(self):
        q.update_configuration(self.config, ["tokens.lower_case:true",
                                             "tokens.remove_punct:true"])
        toks = q.Tokenizer.from_config(self.config)("Call me Ishmael.")
        assert toks[0] == ["call", "me", "ishmael"]
