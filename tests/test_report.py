import pytest
import io
import json

import covannotate as ca


COVERAGE_MAP = {
    '/project/src/math.js': {
        'path': '/project/src/math.js',
        'statementMap': {'0': {'start': {'line': 1, 'column': 0}, 'end': {'line': 1, 'column': 20}}},
        's': {'0': 0},
        'branchMap': {},
        'b': {},
        'fnMap': {},
        'f': {},
    }
}


def test_extract_coverage_map():
    assert COVERAGE_MAP is ca.extract_coverage_map(COVERAGE_MAP)


def test_extract_from_jest_report():
    report = {'success': True, 'numTotalTests': 3, 'coverageMap': COVERAGE_MAP}
    assert COVERAGE_MAP is ca.extract_coverage_map(report)


@pytest.mark.parametrize("report", [[], "x", None, {'coverageMap': []}])
def test_extract_invalid(report):
    with pytest.raises(ca.CoverageFormatError):
        ca.extract_coverage_map(report)


def test_load_coverage_map(tmp_path):
    f = tmp_path / "coverage-final.json"
    f.write_text(json.dumps(COVERAGE_MAP), encoding='utf-8')

    assert COVERAGE_MAP == ca.load_coverage_map(f)
    assert COVERAGE_MAP == ca.load_coverage_map(str(f))


def test_load_coverage_map_stdin(monkeypatch):
    monkeypatch.setattr('sys.stdin', io.StringIO(json.dumps({'coverageMap': COVERAGE_MAP})))
    assert COVERAGE_MAP == ca.load_coverage_map('-')


def test_load_invalid_json(tmp_path):
    f = tmp_path / "coverage-final.json"
    f.write_text('{"oops', encoding='utf-8')

    with pytest.raises(json.JSONDecodeError):
        ca.load_coverage_map(f)


def test_load_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        ca.load_coverage_map(tmp_path / "nope.json")
