import gzip
import io
import os

import pytest

from score.resourcehandler import TransformationStore


class FailingStream(io.RawIOBase):

    def __init__(self):
        self.reads = 0

    def readable(self):
        return True

    def read(self, size=-1):
        self.reads += 1
        if self.reads > 1:
            raise OSError('read failed')
        return b'x' * size


@pytest.fixture
def store(tmp_path):
    return TransformationStore(str(tmp_path))


def test_layout(store, tmp_path):
    base = tmp_path / 'relative-resource-handler-cache'
    assert base.is_dir()
    assert (base / 'README.txt').is_file()
    assert store.evaluated_file('de/css/main.css') == \
        str(base / 'de' / 'css' / 'main.css.evaluated')
    assert store.compressed_file('css/main.css') == \
        str(base / 'css' / 'main.css.gzip')


def test_write(store):
    target = store.evaluated_file('css/sub/main.css')
    store.write(target, io.BytesIO(b'body { color: red }'))
    with open(target, 'rb') as fp:
        assert fp.read() == b'body { color: red }'


def test_write_replaces_existing_file(store):
    target = store.evaluated_file('css/main.css')
    store.write(target, io.BytesIO(b'a much longer previous content'))
    store.write(target, io.BytesIO(b'new'))
    with open(target, 'rb') as fp:
        assert fp.read() == b'new'


def test_write_compressed(store):
    content = b'var x = 1;\n' * 1000
    target = store.compressed_file('js/main.js')
    store.write_compressed(target, io.BytesIO(content))
    with open(target, 'rb') as fp:
        assert gzip.decompress(fp.read()) == content


def test_failed_write_leaves_no_file(store):
    target = store.evaluated_file('css/main.css')
    with pytest.raises(OSError):
        store.write(target, FailingStream())
    assert not os.path.exists(target)
    target = store.compressed_file('css/main.css')
    with pytest.raises(OSError):
        store.write_compressed(target, FailingStream())
    assert not os.path.exists(target)
