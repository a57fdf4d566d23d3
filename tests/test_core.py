import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

import io

import utils
from results import format_results, print_results


def test_log_with_time_and_vlog(monkeypatch):
    utils.start_time = 0
    out = io.StringIO()
    monkeypatch.setattr('sys.stdout', out)
    utils.log_with_time('Test message', color='')
    assert 'Test message' in out.getvalue()


def test_utils_vlog_verbose(monkeypatch):
    monkeypatch.setattr(utils, 'VERBOSE', True)
    utils.start_time = 0
    out = io.StringIO()
    monkeypatch.setattr('sys.stdout', out)
    utils.vlog('Verbose message', t0=0)
    assert 'Verbose message' in out.getvalue()
    assert 'took' in out.getvalue()


def test_utils_vlog_quiet(monkeypatch):
    monkeypatch.setattr(utils, 'VERBOSE', False)
    out = io.StringIO()
    monkeypatch.setattr('sys.stdout', out)
    utils.vlog('Hidden message')
    assert out.getvalue() == ''


def test_num_format():
    assert utils.num_format(7) == '7'
    assert utils.num_format(1234567) == '1,234,567'
    assert utils.num_format_sigdig(0, 2) == '0'
    assert utils.num_format_sigdig(0.000123456, 2) == '0.00012'
    assert utils.num_format_sigdig(1234.5, 2) == '1,200'
    assert utils.num_format_sigdig(0.5, 2) == '0.5'


def test_format_results_columns():
    lines = format_results(['store', 'crane', 'stare'], width=14)
    assert lines == ['3 words found', 'crane  stare', 'store']


def test_format_results_single_column_without_width():
    lines = format_results(['b', 'a'], width=0)
    assert lines == ['2 words found', 'a', 'b']


def test_format_results_counts():
    assert format_results(['crane'], width=80) == ['1 word found', 'crane']
    assert format_results([], width=80) == ['0 words found']
    assert format_results(['abc'] * 1234, width=0)[0] == '1,234 words found'


def test_print_results(capsys):
    print_results(['slate', 'crane'], width=80)
    out = capsys.readouterr().out
    assert out.splitlines() == ['2 words found', 'crane  slate']
