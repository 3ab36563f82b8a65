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

import abc
import os
from pathlib import Path


class ResourceProvider(abc.ABC):
    """
    Locates the file behind a :class:`ResourceDescriptor
    <score.resourcehandler.descriptor.ResourceDescriptor>`. Both methods
    receive the :class:`ResourceHandler
    <score.resourcehandler.handler.ResourceHandler>` providing access to the
    configured locations, and must return `None` if the resource cannot be
    found.
    """

    @abc.abstractmethod
    def get_url(self, handler, descriptor):
        """
        Returns the URL of the resource as a string.
        """

    @abc.abstractmethod
    def get_stream(self, handler, descriptor):
        """
        Returns a binary stream with the content of the resource.
        """


class ClassPathResourceProvider(ResourceProvider):
    """
    Looks up resources in the handler's :class:`ClassPath
    <score.resourcehandler.classpath.ClassPath>` beneath *base_dir*. If
    *include_library_name* is `True`, the library name is part of the path,
    i.e. ``<base_dir>/<locale>/<library>/<name>`` instead of
    ``<base_dir>/<locale>/<name>``.
    """

    CLASSPATH_META_INF_RESOURCES = 'META-INF/resources/'

    def __init__(self, base_dir, include_library_name=False):
        base_dir = base_dir.strip().lstrip('/')
        if not base_dir.endswith('/'):
            base_dir += '/'
        self.base_dir = base_dir
        self.include_library_name = include_library_name

    def _path(self, descriptor):
        return self.base_dir + descriptor.get_resource_file_path(
            self.include_library_name)

    def get_url(self, handler, descriptor):
        try:
            return handler.classpath.get_resource(self._path(descriptor))
        except (OSError, ValueError):
            return None

    def get_stream(self, handler, descriptor):
        try:
            return handler.classpath.open_resource(self._path(descriptor))
        except (OSError, ValueError):
            return None

    def __repr__(self):
        return '<ClassPathResourceProvider %s>' % self.base_dir


class WebappResourceProvider(ResourceProvider):
    """
    Looks up resources in the document root of the web application (the
    handler's *webapp_root*) beneath *base_dir*. See
    :class:`ClassPathResourceProvider` for the meaning of
    *include_library_name*.
    """

    WEBAPP_RESOURCES = '/resources/'
    WEBAPP_META_INF_RESOURCES = '/META-INF/resources/'

    def __init__(self, base_dir, include_library_name=False):
        base_dir = base_dir.strip()
        if not base_dir.startswith('/'):
            base_dir = '/' + base_dir
        if not base_dir.endswith('/'):
            base_dir += '/'
        self.base_dir = base_dir
        self.include_library_name = include_library_name

    def _file(self, handler, descriptor):
        if not handler.webapp_root:
            return None
        root = os.path.realpath(handler.webapp_root)
        path = self.base_dir + descriptor.get_resource_file_path(
            self.include_library_name)
        file = os.path.realpath(os.path.join(root, path.lstrip('/')))
        if os.path.commonpath((root, file)) != root:
            raise ValueError('Path outside of webapp root: %s' % path)
        if not os.path.isfile(file):
            return None
        return file

    def get_url(self, handler, descriptor):
        try:
            file = self._file(handler, descriptor)
        except ValueError:
            return None
        if file is None:
            return None
        return Path(file).as_uri()

    def get_stream(self, handler, descriptor):
        try:
            file = self._file(handler, descriptor)
            if file is None:
                return None
            return open(file, 'rb')
        except (OSError, ValueError):
            return None

    def __repr__(self):
        return '<WebappResourceProvider %s>' % self.base_dir


class ExternalResourceProvider(ResourceProvider):
    """
    Provider of libraries located on another server. External resources are
    never read by this package, their request path points to the external
    location directly.
    """

    def get_url(self, handler, descriptor):
        return None

    def get_stream(self, handler, descriptor):
        return None


class ResourceProviderChain(ResourceProvider):
    """
    Combines multiple *providers*: each method returns the first non-`None`
    result of the providers in the given order.
    """

    def __init__(self, providers):
        self.providers = list(providers)

    def get_url(self, handler, descriptor):
        for provider in self.providers:
            url = provider.get_url(handler, descriptor)
            if url is not None:
                return url
        return None

    def get_stream(self, handler, descriptor):
        for provider in self.providers:
            stream = provider.get_stream(handler, descriptor)
            if stream is not None:
                return stream
        return None


DEFAULT_RESOURCE_PROVIDER = ResourceProviderChain([
    ClassPathResourceProvider(
        ClassPathResourceProvider.CLASSPATH_META_INF_RESOURCES, True),
    WebappResourceProvider(
        WebappResourceProvider.WEBAPP_META_INF_RESOURCES, True),
    WebappResourceProvider(WebappResourceProvider.WEBAPP_RESOURCES, True),
])
