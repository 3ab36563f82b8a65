# Copyright © 2015-2018 STRG.AT GmbH, Vienna, Austria
#
# This file is part of the The SCORE Framework.
#
# The SCORE Framework and all its parts are free software: you can redistribute
# them and/or modify them under the terms of the GNU Lesser General Public
# License version 3 as published by the Free Software Foundation which is in the
# file named COPYING.LESSER.txt.
#
# The SCORE Framework and all its parts are distributed without any WARRANTY;
# without even the implied warranty of MERCHANTABILITY or FITNESS FOR A
# PARTICULAR PURPOSE. For more details see the GNU Lesser General Public
# License.
#
# If you have not received a copy of the GNU Lesser General Public License see
# http://www.gnu.org/licenses/.
#
# The License-Agreement realised between you as Licensee and STRG.AT GmbH as
# Licenser including the issue of its valid conclusion and its pre- and
# post-contractual effects is governed by the laws of Austria. Any disputes
# concerning this License-Agreement including the issue of its valid conclusion
# and its pre- and post-contractual effects are exclusively decided by the
# competent court, in whose district STRG.AT GmbH has its registered seat, at
# the discretion of STRG.AT GmbH also the competent court, in whose district the
# Licensee has his registered seat, an establishment or assets.

"""
Reads the :class:`HandlerConfig <score.resourcehandler.config.HandlerConfig>`
from XML files. A configuration file looks like the following::

    <relative-resources>
        <url-version>2.1</url-version>
        <gzip-enabled>true</gzip-enabled>
        <locale-support-enabled>true</locale-support-enabled>
        <library name="css">
            <el-evaluation>
                <file-mask>*.css</file-mask>
            </el-evaluation>
        </library>
        <library name="images">
            <location type="WEBAPP">/static/images</location>
        </library>
        <library name="cdn">
            <location type="EXTERNAL">https://cdn.example.com/assets</location>
        </library>
    </relative-resources>

All elements are optional. Multiple files may be parsed into the same
configuration object, but libraries must still be unique and the flags must
not contradict each other.
"""

import abc
import logging
import xml.sax

from score.init import ConfigurationError

from .config import HandlerConfig, Library, LocationType
from .utils import url_to_path


log = logging.getLogger(__name__)

ROOT_ELEMENT = 'relative-resources'
DEFAULT_CONFIG_RESOURCE = 'META-INF/relative-resources.xml'

# allowed children of each element in the order they must appear, with the
# maximum number of occurrences (None = unbounded)
_CHILDREN = {
    None: ((ROOT_ELEMENT, 1),),
    ROOT_ELEMENT: (
        ('url-version', 1),
        ('gzip-enabled', 1),
        ('locale-support-enabled', 1),
        ('library', None),
    ),
    'url-version': (),
    'gzip-enabled': (),
    'locale-support-enabled': (),
    'library': (
        ('location', 1),
        ('el-evaluation', 1),
    ),
    'location': (),
    'el-evaluation': (
        ('file-mask', None),
    ),
    'file-mask': (),
}

_REQUIRED_CHILDREN = {
    'el-evaluation': ('file-mask',),
}

_BOOLEAN_VALUES = ('true', 'false')


class _LibraryDefinition:

    def __init__(self, name, line):
        self.name = name
        self.line = line
        self.location_type = LocationType.UNSET
        self.location = None
        self.file_masks = []


class _ConfigHandler(xml.sax.ContentHandler):
    """
    Collects the content of a configuration file while checking its
    structure. Each violation is raised as a :class:`xml.sax.SAXParseException`
    pointing to the offending position.
    """

    def __init__(self, strict):
        super().__init__()
        self.strict = strict
        self.values = []
        self.libraries = []
        self._locator = None
        # stack of (element name, list of child element names seen so far)
        self._stack = [(None, [])]
        self._text = []

    def setDocumentLocator(self, locator):
        self._locator = locator

    def _error(self, message):
        raise xml.sax.SAXParseException(message, None, self._locator)

    def startElement(self, name, attrs):
        parent, seen = self._stack[-1]
        allowed = dict(_CHILDREN[parent])
        if name not in allowed:
            if parent is None:
                self._error('Invalid root element <%s>' % name)
            self._error('Invalid child element <%s> of <%s>' % (name, parent))
        if self.strict:
            if allowed[name] is not None and seen.count(name) >= allowed[name]:
                self._error('Element <%s> may only occur once in <%s>' %
                            (name, parent))
            order = [child for child, _ in _CHILDREN[parent]]
            if seen and order.index(seen[-1]) > order.index(name):
                self._error('Element <%s> must not appear after <%s>' %
                            (name, seen[-1]))
        seen.append(name)
        if name == 'library':
            if 'name' not in attrs:
                self._error('<library> element without name attribute')
            self.libraries.append(_LibraryDefinition(
                attrs['name'], self._locator.getLineNumber()))
        elif name == 'location':
            if 'type' not in attrs:
                self._error('<location> element without type attribute')
            try:
                location_type = LocationType[attrs['type'].strip().upper()]
            except KeyError:
                location_type = LocationType.UNSET
            if location_type == LocationType.UNSET:
                self._error('Invalid location type attribute %s' %
                            attrs['type'])
            self.libraries[-1].location_type = location_type
        self._stack.append((name, []))
        self._text = []

    def characters(self, content):
        self._text.append(content)

    def endElement(self, name):
        _, seen = self._stack.pop()
        for required in _REQUIRED_CHILDREN.get(name, ()):
            if required not in seen:
                self._error('Element <%s> requires at least one <%s>' %
                            (name, required))
        text = ''.join(self._text).strip()
        self._text = []
        if _CHILDREN[name]:
            if text and self.strict:
                self._error('Element <%s> must not contain text' % name)
            return
        if name in ('gzip-enabled', 'locale-support-enabled'):
            if self.strict and text not in _BOOLEAN_VALUES:
                self._error('Invalid boolean value "%s" in <%s>' %
                            (text, name))
            self.values.append((name, text.lower() == 'true',
                                self._locator.getLineNumber()))
        elif name == 'url-version':
            if self.strict and (not text or any(
                    char.isspace() or char == '/' for char in text)):
                self._error('Invalid url version "%s"' % text)
            self.values.append((name, text, self._locator.getLineNumber()))
        elif name == 'location':
            self.libraries[-1].location = text or None
        elif name == 'file-mask':
            self.libraries[-1].file_masks.append(text)


class ConfigParser:
    """
    Parses configuration files into a :class:`HandlerConfig
    <score.resourcehandler.config.HandlerConfig>`. If *validate* is `True`,
    the files are checked against the full grammar of the configuration
    format before they are applied, otherwise only those violations are
    reported, that prevent reading the file.

    All errors are raised as :class:`score.init.ConfigurationError`.
    """

    def __init__(self, validate=True):
        self.validate = validate

    def parse_classpath_resource(self, classpath, resource, config):
        """
        Parses all files named *resource* found in the :class:`ClassPath
        <score.resourcehandler.classpath.ClassPath>`, in the order of the
        classpath entries.
        """
        urls = classpath.get_resources(resource)
        if not urls:
            log.info('No config file %s found in classpath', resource)
        for url in urls:
            self.parse_url(url, config)

    def parse_url(self, url, config):
        self.parse_file(url_to_path(url), config)

    def parse_file(self, file, config):
        """
        Parses a single configuration *file* into *config*.
        """
        handler = _ConfigHandler(self.validate)
        try:
            with open(file, 'rb') as fp:
                xml.sax.parse(fp, handler)
        except xml.sax.SAXParseException as e:
            raise ConfigurationError(
                'score.resourcehandler',
                'Config file %s violates the schema definition at line %d in '
                'column %d: %s' % (file, e.getLineNumber(),
                                   e.getColumnNumber(), e.getMessage()))
        except OSError as e:
            raise ConfigurationError(
                'score.resourcehandler',
                'Could not read config file %s: %s' % (file, e))
        self._apply(file, handler, config)
        log.info('Parsed config file %s', file)

    def _apply(self, file, handler, config):
        for name, value, line in handler.values:
            try:
                if name == 'url-version':
                    config.url_version = value
                elif name == 'gzip-enabled':
                    config.gzip_enabled = value
                elif name == 'locale-support-enabled':
                    config.locale_support_enabled = value
            except ValueError as e:
                raise ConfigurationError(
                    'score.resourcehandler',
                    'Invalid <%s> in config file %s at line %d: %s' %
                    (name, file, line, e))
        for definition in handler.libraries:
            try:
                config.add_library(Library(
                    definition.name,
                    definition.location_type,
                    definition.location,
                    definition.file_masks))
            except ValueError as e:
                raise ConfigurationError(
                    'score.resourcehandler',
                    'Invalid <library> in config file %s at line %d: %s' %
                    (file, definition.line, e))


class ConfigProvider(abc.ABC):
    """
    Creates the :class:`HandlerConfig
    <score.resourcehandler.config.HandlerConfig>` of the resource handler.
    Alternative implementations can be registered in the entry point group
    ``score.resourcehandler.config_provider``.
    """

    @abc.abstractmethod
    def get_config(self, classpath):
        """
        Returns the configuration, *classpath* is the :class:`ClassPath
        <score.resourcehandler.classpath.ClassPath>` of the handler.
        """


class XmlConfigProvider(ConfigProvider):
    """
    The default :class:`ConfigProvider`, which merges all XML files named
    *resource* found in the classpath.
    """

    def __init__(self, resource=DEFAULT_CONFIG_RESOURCE, validate=True):
        self.resource = resource
        self.validate = validate

    def get_config(self, classpath):
        config = HandlerConfig()
        ConfigParser(self.validate).parse_classpath_resource(
            classpath, self.resource, config)
        return config
