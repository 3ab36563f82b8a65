import pytest

from score.resourcehandler import (
    ClassPath, DefaultExpressionEvaluator, HandlerConfig, IdentifierResolver,
    Library, LocationType, ResourceHandler, TransformationStore)


CONFIG = '''\
<?xml version="1.0" encoding="UTF-8"?>
<relative-resources>
    <url-version>1</url-version>
    <library name="css">
        <el-evaluation>
            <file-mask>*.css</file-mask>
        </el-evaluation>
    </library>
    <library name="js"/>
    <library name="images">
        <location type="WEBAPP">/static/images</location>
    </library>
    <library name="cdn">
        <location type="EXTERNAL">https://cdn.example.com/assets</location>
    </library>
</relative-resources>
'''


@pytest.fixture
def classpath_dir(tmp_path):
    folder = tmp_path / 'classpath'
    folder.mkdir()
    return folder


@pytest.fixture
def webapp_dir(tmp_path):
    folder = tmp_path / 'webapp'
    folder.mkdir()
    return folder


@pytest.fixture
def write_file():
    def write_file(folder, path, content):
        file = folder.joinpath(*path.split('/'))
        file.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, str):
            content = content.encode('UTF-8')
        file.write_bytes(content)
        return file
    return write_file


@pytest.fixture
def config():
    config = HandlerConfig()
    config.add_library(Library('css', el_evaluation_file_masks=['*.css']))
    config.add_library(Library('js'))
    config.add_library(Library(
        'images', LocationType.WEBAPP, '/static/images'))
    config.add_library(Library(
        'cdn', LocationType.EXTERNAL, 'https://cdn.example.com/assets'))
    return config


@pytest.fixture
def make_handler(tmp_path, classpath_dir, webapp_dir, config):
    classpaths = []

    def make_handler(resolver=None, **kwargs):
        kwargs.setdefault('webapp_root', str(webapp_dir))
        classpath = ClassPath([str(classpath_dir)])
        classpaths.append(classpath)
        handler = ResourceHandler(
            kwargs.pop('config', config),
            resolver or IdentifierResolver(),
            TransformationStore(str(tmp_path / 'tmp')),
            classpath,
            **kwargs)
        if handler.evaluator is None:
            handler.evaluator = DefaultExpressionEvaluator(handler)
        return handler
    yield make_handler
    for classpath in classpaths:
        classpath.close()


@pytest.fixture
def handler(make_handler):
    return make_handler()
