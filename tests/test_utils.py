import io

import pytest

from score.resourcehandler.utils import (
    file_mask_matches, format_date_header, format_locale, is_gzip_accepted,
    parse_date_header, pipe_bytes, trim_slashes)


@pytest.mark.parametrize('value,expected', [
    ('', ''),
    ('/', ''),
    ('///', ''),
    ('css', 'css'),
    ('/css/', 'css'),
    ('//a/b//', 'a/b'),
])
def test_trim_slashes(value, expected):
    assert trim_slashes(value) == expected
    assert trim_slashes(trim_slashes(value)) == trim_slashes(value)


def test_trim_slashes_none():
    assert trim_slashes(None) is None


@pytest.mark.parametrize('header', [
    'gzip,deflate',
    'gzip, deflate',
    'gzip;q=0.001',
    'gzip;q=1.0, identity; q=0.5, *;q=0',
    '*',
    '*;q=0.1',
    'deflate, *;q=0.0001',
])
def test_gzip_accepted(header):
    assert is_gzip_accepted(header)


@pytest.mark.parametrize('header', [
    None,
    '',
    'deflate',
    'gzip;q=0',
    'gzip;q=0.',
    'gzip;q=0.000',
    '*;q=0',
    '*;q=0.000',
    'gzip;q=0, *',
])
def test_gzip_denied(header):
    assert not is_gzip_accepted(header)


def test_format_date_header():
    assert format_date_header(784111777000) == \
        'Sun, 06 Nov 1994 08:49:37 GMT'


@pytest.mark.parametrize('value', [
    'Sun, 06 Nov 1994 08:49:37 GMT',
    'Sunday, 06-Nov-94 08:49:37 GMT',
    'Sun Nov  6 08:49:37 1994',
])
def test_parse_date_header(value):
    assert parse_date_header(value) == 784111777000


@pytest.mark.parametrize('value', [None, '', 'yesterday', '06.11.1994'])
def test_parse_invalid_date_header(value):
    assert parse_date_header(value) is None


def test_date_header_precision():
    assert parse_date_header(format_date_header(784111777999)) == \
        784111777000


@pytest.mark.parametrize('mask,name,expected', [
    ('*.css', 'main.css', True),
    ('*.css', 'sub/main.css', True),
    ('*.css', 'main.css.map', False),
    ('main.*', 'main.js', True),
    ('*', 'anything', True),
    ('m?in.css', 'main.css', False),
    ('m?in.css', 'm?in.css', True),
    ('[ab].css', 'a.css', False),
    ('theme-*-dark.css', 'theme-blue-dark.css', True),
])
def test_file_mask_matches(mask, name, expected):
    assert file_mask_matches(mask, name) is expected


@pytest.mark.parametrize('value,expected', [
    (None, None),
    ('', None),
    ('de', 'de'),
    ('DE', 'de'),
    ('de_AT', 'de_AT'),
    ('de-at', 'de_AT'),
])
def test_format_locale(value, expected):
    assert format_locale(value) == expected


def test_pipe_bytes():
    content = bytes(range(256)) * 20
    target = io.BytesIO()
    pipe_bytes(io.BytesIO(content), target, 100)
    assert target.getvalue() == content
