import sys
import os
import logging
import pytest
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
from core.config import DiffOptions
from core.errors import InvalidOptionsError, MismatchedIgnoreMarkersError, MismatchedModuleMarkersError
from core.markup_diff import MarkupDiff, compare

SOURCE_A = '<!--module:X--><div class="a"><img class="b" src="1.jpg"></div><!--/module-->'
SOURCE_B = '<!--module:X--><div class="a"><img class="b" src="2.jpg"></div><!--/module-->'
SOURCE_C = '<!--module:X--><div class="a"><img class="c" src="2.jpg"></div><!--/module-->'

QUIET = {'attributes': ['class'], 'console_out': False}


class RecordingReporter:
    def __init__(self):
        self.calls = []

    def report(self, result, options):
        self.calls.append(result)


def write_sources(tmp_path, *contents):
    paths = []
    for i, content in enumerate(contents):
        path = tmp_path / f'page{i}.html'
        path.write_text(content, encoding='utf-8')
        paths.append(str(path))
    return paths


def test_different_image_paths_match(tmp_path):
    sources = write_sources(tmp_path, SOURCE_A, SOURCE_B)
    result = compare(sources, QUIET)
    assert result.results.errors == {}
    assert result.results.warnings == {}
    assert set(result.modules['X']) == set(sources)


def test_changed_class_is_one_mismatch(tmp_path):
    sources = write_sources(tmp_path, SOURCE_A, SOURCE_C)
    result = compare(sources, QUIET)
    errors = result.results.errors['X']
    assert list(errors) == [2]
    main, test = errors[2]
    assert main.src == '<img class="b">'
    assert test.src == '<img class="c">'
    assert (main.path, test.path) == (sources[0], sources[1])


def test_deleted_element_mismatches_to_the_end(tmp_path):
    longer = '<!--module:X--><div><span></span><em></em></div><!--/module-->'
    shorter = '<!--module:X--><div><em></em></div><!--/module-->'
    sources = write_sources(tmp_path, longer, shorter)
    result = compare(sources, QUIET)
    assert sorted(result.results.errors['X']) == [2, 3, 4, 5, 6]


def test_module_in_one_source_warns(tmp_path):
    other = '<!--module:Y--><p></p><!--/module-->'
    sources = write_sources(tmp_path, SOURCE_A, other)
    result = compare(sources, QUIET)
    assert result.results.errors == {}
    assert set(result.results.warnings) == {'X', 'Y'}


def test_ignore_regions_excluded(tmp_path):
    with_ignore = ('<!--module:X--><div class="a">'
                   '<!--module!ignore--><span>ad</span><!--/module!ignore-->'
                   '<img class="b"></div><!--/module-->')
    sources = write_sources(tmp_path, SOURCE_A, with_ignore)
    result = compare(sources, QUIET)
    assert result.results.errors == {}
    assert '<span>' not in result.modules['X'][sources[1]]


def test_modules_inside_full_documents(tmp_path):
    page = ('<!DOCTYPE html><html><head><title>{}</title></head><body>'
            '<header>{}</header>{}<footer></footer></body></html>')
    sources = write_sources(
        tmp_path,
        page.format('one', 'Site one', SOURCE_A),
        page.format('two', '', SOURCE_B),
    )
    result = compare(sources, QUIET)
    assert list(result.modules) == ['X']
    assert result.results.errors == {}


def test_unbalanced_modules_abort_without_report(tmp_path):
    broken = '<!--module:X--><div></div>'
    sources = write_sources(tmp_path, SOURCE_A, broken)
    reporter = RecordingReporter()
    with pytest.raises(MismatchedModuleMarkersError) as excinfo:
        compare(sources, QUIET, reporter=reporter)
    assert excinfo.value.source == sources[1]
    assert reporter.calls == []


def test_unbalanced_ignores_abort(tmp_path):
    broken = '<!--module:X--><!--module!ignore--><div></div><!--/module-->'
    sources = write_sources(tmp_path, broken, SOURCE_A)
    with pytest.raises(MismatchedIgnoreMarkersError):
        compare(sources, QUIET)


def test_reporter_receives_result(tmp_path):
    sources = write_sources(tmp_path, SOURCE_A, SOURCE_C)
    reporter = RecordingReporter()
    result = compare(sources, QUIET, reporter=reporter)
    assert reporter.calls == [result]


def test_sources_loaded_in_order(tmp_path):
    sources = write_sources(tmp_path, SOURCE_A, SOURCE_B, SOURCE_C)
    result = compare(list(reversed(sources)), QUIET)
    assert list(result.modules['X']) == list(reversed(sources))


def test_same_source_twice_overwrites(tmp_path):
    sources = write_sources(tmp_path, SOURCE_A)
    result = compare(sources * 2, QUIET)
    assert list(result.modules['X']) == sources
    assert 'X' in result.results.warnings


def test_glob_source_expands(tmp_path):
    write_sources(tmp_path, SOURCE_A, SOURCE_C)
    result = compare([str(tmp_path / '*.html')], QUIET)
    assert list(result.results.errors['X']) == [2]


def test_without_allow_list_src_differs(tmp_path):
    sources = write_sources(tmp_path, SOURCE_A, SOURCE_B)
    result = compare(sources, {'console_out': False})
    assert list(result.results.errors['X']) == [2]


def test_options_object_accepted(tmp_path):
    sources = write_sources(tmp_path, SOURCE_A, SOURCE_B)
    result = MarkupDiff(DiffOptions(attributes=['class'], console_out=False)).compare(sources)
    assert result.results.errors == {}


def test_sources_must_be_a_list():
    with pytest.raises(TypeError):
        compare('page.html', QUIET)


def test_unknown_option_rejected():
    with pytest.raises(InvalidOptionsError):
        compare([], {'colour': True})


def test_to_dict_shape(tmp_path):
    sources = write_sources(tmp_path, SOURCE_A, SOURCE_C)
    data = compare(sources, QUIET).to_dict()
    assert data['modules']['X'][sources[0]][1] == '<img class="b">'
    assert data['results']['errors']['X']['2'][1]['src'] == '<img class="c">'


def test_same_page_on_two_ports_compared(monkeypatch):
    import requests

    class Response:
        def __init__(self, text):
            self.text = text
            self.encoding = None

        def raise_for_status(self):
            pass

    pages = {
        'http://localhost:3000/p.html': '<!--module:X--><div class="a"></div><!--/module-->',
        'http://localhost:4000/p.html': '<!--module:X--><div class="b"></div><!--/module-->',
    }
    monkeypatch.setattr(requests, 'get', lambda url, timeout=None: Response(pages[url]))
    result = compare(['http://localhost:3000/p.html', 'http://localhost:4000/p.html'], QUIET)
    assert list(result.modules['X']) == ['localhost:3000/p.html', 'localhost:4000/p.html']
    assert result.results.warnings == {}
    assert list(result.results.errors['X']) == [1]


@pytest.mark.parametrize('overrides', [
    {'attributes': 5},
    {'attributes': [5]},
    {'process_inner_text': 'no'},
    {'request_timeout': 'soon'},
])
def test_badly_typed_option_rejected(overrides):
    with pytest.raises(InvalidOptionsError):
        compare([], overrides)


def test_fatal_error_logged_with_traceback(tmp_path, caplog):
    sources = write_sources(tmp_path, '<!--module:X--><div></div>')
    with caplog.at_level(logging.ERROR, logger='core.markup_diff'):
        with pytest.raises(MismatchedModuleMarkersError):
            compare(sources, QUIET)
    records = [r for r in caplog.records if r.name == 'core.markup_diff']
    assert len(records) == 1
    assert records[0].exc_info is not None
