import threading

import pytest

from score.resourcehandler import HandlerConfig, Library, LocationType
from score.resourcehandler.provider import ExternalResourceProvider


class TestLibrary:

    def test_surrounding_slashes_removed(self):
        assert Library('/css/').name == 'css'
        assert Library('//css').name == 'css'

    @pytest.mark.parametrize('name', ['', '/', 'a/b', '/a/b/'])
    def test_invalid_name(self, name):
        with pytest.raises(ValueError):
            Library(name)

    def test_default_location_type(self):
        library = Library('css')
        assert library.location_type == LocationType.UNSET
        assert library.el_evaluation_file_masks == []

    def test_external_without_evaluation(self):
        with pytest.raises(ValueError):
            Library('cdn', LocationType.EXTERNAL, 'https://cdn.example.com',
                    ['*.css'])

    def test_equality_by_name(self):
        assert Library('css') == Library('/css', LocationType.WEBAPP, '/x')
        assert Library('css') != Library('js')
        assert len({Library('css'), Library('css/')}) == 1

    def test_resource_provider_set_once(self):
        library = Library('css')
        provider = ExternalResourceProvider()
        library.resource_provider = provider
        library.resource_provider = provider
        with pytest.raises(ValueError):
            library.resource_provider = ExternalResourceProvider()

    def test_bind_resource_provider(self):
        library = Library('css')
        first = ExternalResourceProvider()
        assert library.bind_resource_provider(first) is first
        assert library.bind_resource_provider(
            ExternalResourceProvider()) is first
        assert library.resource_provider is first


class TestHandlerConfig:

    def test_defaults(self):
        config = HandlerConfig()
        assert config.url_version == '1'
        assert config.gzip_enabled is True
        assert config.locale_support_enabled is True
        assert config.libraries == []

    def test_add_library(self):
        config = HandlerConfig()
        library = Library('css')
        config.add_library(library)
        assert config.has_library('css')
        assert config.has_library('/css/')
        assert not config.has_library('js')
        assert not config.has_library(None)
        assert config.get_library('/css') is library
        assert config.get_library('js') is None
        assert config.get_library(None) is None

    def test_duplicate_library(self):
        config = HandlerConfig()
        config.add_library(Library('css'))
        with pytest.raises(ValueError):
            config.add_library(Library('/css/'))

    @pytest.mark.parametrize('attribute,value,other', [
        ('url_version', '2', '3'),
        ('gzip_enabled', False, True),
        ('locale_support_enabled', False, True),
    ])
    def test_single_set(self, attribute, value, other):
        config = HandlerConfig()
        setattr(config, attribute, value)
        setattr(config, attribute, value)
        assert getattr(config, attribute) == value
        with pytest.raises(ValueError):
            setattr(config, attribute, other)
        assert getattr(config, attribute) == value

    def test_default_value_can_be_set_explicitly(self):
        config = HandlerConfig()
        config.gzip_enabled = True
        with pytest.raises(ValueError):
            config.gzip_enabled = False

    @pytest.mark.parametrize('value', ['', '1/2', '1 2', '1\t', '/'])
    def test_invalid_url_version(self, value):
        config = HandlerConfig()
        with pytest.raises(ValueError):
            config.url_version = value
        assert config.url_version == '1'

    def test_concurrent_registration(self):
        config = HandlerConfig()

        def register(offset):
            for i in range(50):
                config.add_library(Library('lib%d' % (offset + i)))
        threads = [threading.Thread(target=register, args=(n * 50,))
                   for n in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        assert len(config.libraries) == 200
