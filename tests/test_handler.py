import gzip

import pytest

from score.resourcehandler import RequestContext, ResourceNotFound


class RecordingFallback:

    def __init__(self):
        self.calls = []

    def create_resource(self, ctx, resource_name, library_name=None,
                        content_type=None):
        self.calls.append((resource_name, library_name))
        return 'fallback'


@pytest.fixture
def fallback():
    return RecordingFallback()


@pytest.fixture
def resources(classpath_dir, write_file):
    write_file(classpath_dir, 'META-INF/resources/de/css/b.css', 'de')
    write_file(classpath_dir, 'META-INF/resources/css/c.css', 'plain ' * 50)


def test_create_resource(handler, resources):
    ctx = RequestContext(view_locale='de_AT')
    resource = handler.create_resource(ctx, 'b.css', 'css')
    assert resource.initialized
    assert resource.get_resource_file_path() == 'de/css/b.css'
    assert resource.get_request_path(ctx) == \
        '/faces/_resources/1/de_AT/css/b.css'
    assert handler.create_resource(ctx, 'b.css', '/css/') is resource


def test_fallback_for_unknown_library(make_handler, fallback, resources):
    handler = make_handler(fallback=fallback)
    ctx = RequestContext()
    assert handler.create_resource(ctx, 'x.css', 'unknown') == 'fallback'
    assert fallback.calls == [('x.css', 'unknown')]


def test_fallback_for_missing_resource(make_handler, fallback, resources):
    handler = make_handler(fallback=fallback)
    assert handler.create_resource(
        RequestContext(), 'missing.css', 'css') == 'fallback'


def test_fallback_for_unknown_request_path(make_handler, fallback,
                                           resources):
    handler = make_handler(fallback=fallback)
    ctx = RequestContext()
    with ctx.resource_request():
        assert handler.create_resource(ctx, '1/de/unknown/x.css') == \
            'fallback'
    assert fallback.calls == [('1/de/unknown/x.css', None)]


def test_without_fallback(handler, resources):
    assert handler.create_resource(RequestContext(), 'x.css', 'js') is None


def test_request_path_parsed_in_resource_requests(handler, resources):
    ctx = RequestContext()
    with ctx.resource_request():
        resource = handler.create_resource(ctx, '1/de_CH/css/b.css')
        assert ctx.requested_locale_prefix == 'de_CH'
        assert resource.get_resource_file_path() == 'de/css/b.css'
        assert resource.get_request_path(ctx) == \
            '/faces/_resources/1/de_CH/css/b.css'
    assert not ctx.handling_resource_request


def test_request_locale_prefix(make_handler):
    handler = make_handler(default_locale='de-at')
    assert handler.request_locale_prefix(RequestContext()) == 'de_AT'
    assert handler.request_locale_prefix(
        RequestContext(view_locale='fr-ch')) == 'fr_CH'
    ctx = RequestContext()
    ctx.requested_locale_prefix = 'it'
    assert handler.request_locale_prefix(ctx) == 'it'


def test_url_rewriter(handler, resources):
    ctx = RequestContext(view_locale='de',
                         url_rewriter=lambda path: '/app' + path)
    resource = handler.create_resource(ctx, 'b.css', 'css')
    assert resource.get_request_path(ctx) == \
        '/app/faces/_resources/1/de/css/b.css'


def test_custom_prefixes(make_handler, resources):
    handler = make_handler(servlet_prefix='/static', resource_root='/res')
    ctx = RequestContext(view_locale='de')
    resource = handler.create_resource(ctx, 'b.css', 'css')
    assert resource.get_request_path(ctx) == '/static/res/1/de/css/b.css'
    assert handler.resource_url_prefix == '/static/res'


class TestHandleResourceRequest:

    def test_ok(self, handler, resources):
        ctx = RequestContext()
        status, headers, stream = handler.handle_resource_request(
            ctx, '1/en/css/c.css')
        with stream:
            assert stream.read() == b'plain ' * 50
        assert status == 200
        assert headers['Content-Type'] == 'text/css'
        assert 'Last-Modified' in headers
        assert 'Expires' in headers
        assert 'Content-Encoding' not in headers
        assert not ctx.handling_resource_request

    def test_gzip(self, handler, resources):
        ctx = RequestContext({'accept-encoding': 'gzip, deflate'})
        status, headers, stream = handler.handle_resource_request(
            ctx, '1/en/css/c.css')
        with stream:
            assert gzip.decompress(stream.read()) == b'plain ' * 50
        assert headers['Content-Encoding'] == 'gzip'

    def test_not_modified(self, handler, resources):
        ctx = RequestContext()
        _, headers, stream = handler.handle_resource_request(
            ctx, '1/en/css/c.css')
        stream.close()
        ctx = RequestContext({'If-Modified-Since': headers['Last-Modified']})
        assert handler.handle_resource_request(ctx, '1/en/css/c.css') == \
            (304, {}, None)

    def test_not_found(self, handler, resources):
        with pytest.raises(ResourceNotFound) as excinfo:
            handler.handle_resource_request(
                RequestContext(), '1/en/css/missing.css')
        assert excinfo.value.path == '1/en/css/missing.css'
        with pytest.raises(ResourceNotFound):
            handler.handle_resource_request(
                RequestContext(), '1/en/unknown/c.css')
