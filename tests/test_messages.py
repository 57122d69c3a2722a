import pytest
import json

import covannotate as ca


def test_default_messages():
    for key in ca.MESSAGE_KEYS:
        assert ca.default_messages(key) != key

    assert "Warning! Not covered statement" == ca.default_messages('notCoveredStatementMessage')
    assert 'unknownKey' == ca.default_messages('unknownKey')


class TestMessageCatalog:
    def test_english_by_default(self):
        catalog = ca.MessageCatalog()

        assert 'en' == catalog.locale
        for key in ca.MESSAGE_KEYS:
            assert ca.default_messages(key) == catalog(key)

    def test_unknown_key(self):
        assert 'noSuchKey' == ca.MessageCatalog()('noSuchKey')

    def test_falls_back_to_english(self):
        catalog = ca.MessageCatalog('de')
        catalog.update({'notCoveredBranchTitle': 'Zweig nicht abgedeckt'})

        assert 'Zweig nicht abgedeckt' == catalog('notCoveredBranchTitle')
        assert ca.default_messages('notCoveredBranchMessage') == catalog('notCoveredBranchMessage')

    def test_falls_back_to_language(self):
        catalog = ca.MessageCatalog('pt-BR')
        catalog.update({'notCoveredFunctionTitle': 'Função não coberta'}, 'pt')

        assert 'Função não coberta' == catalog('notCoveredFunctionTitle')

    def test_other_locale_unused(self):
        catalog = ca.MessageCatalog('en')
        catalog.update({'notCoveredFunctionTitle': 'Função não coberta'}, 'pt')

        assert ca.default_messages('notCoveredFunctionTitle') == catalog('notCoveredFunctionTitle')

    def test_load_flat(self, tmp_path):
        f = tmp_path / "messages.json"
        f.write_text(json.dumps({'notCoveredStatementTitle': 'Not run'}), encoding='utf-8')

        catalog = ca.MessageCatalog()
        catalog.load(f)
        assert 'Not run' == catalog('notCoveredStatementTitle')

    def test_load_by_locale(self, tmp_path):
        f = tmp_path / "messages.json"
        f.write_text(json.dumps({'es': {'notCoveredStatementTitle': 'Sentencia no cubierta'},
                                 'en': {'notCoveredStatementMessage': 'Never ran'}}), encoding='utf-8')

        catalog = ca.MessageCatalog('es')
        catalog.load(f)
        assert 'Sentencia no cubierta' == catalog('notCoveredStatementTitle')
        assert 'Never ran' == catalog('notCoveredStatementMessage')

    @pytest.mark.parametrize("content", ['[1, 2]', '{"es": 3}', '{"en": {"notCoveredStatementTitle": 5}}'])
    def test_load_invalid(self, tmp_path, content):
        f = tmp_path / "messages.json"
        f.write_text(content, encoding='utf-8')

        with pytest.raises(ValueError):
            ca.MessageCatalog().load(f)

    def test_as_annotation_messages(self):
        catalog = ca.MessageCatalog('fr')
        catalog.update({'notCoveredStatementTitle': 'Instruction non couverte'})

        cov = {'/project/a.js': {
            'statementMap': {'0': {'start': {'line': 1}, 'end': {'line': 1}}},
            's': {'0': 0}, 'branchMap': {}, 'b': {}, 'fnMap': {}, 'f': {},
        }}

        [annotation] = ca.create_coverage_annotations(cov, cwd='/project', messages=catalog)
        assert 'Instruction non couverte' == annotation['title']
        assert ca.default_messages('notCoveredStatementMessage') == annotation['message']
