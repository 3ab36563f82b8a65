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
The in-memory configuration of the resource handler: the registry of
:class:`libraries <Library>` and the handler-wide feature flags, bundled in a
:class:`HandlerConfig`.
"""

from enum import Enum
import threading

from .utils import trim_slashes


class LocationType(Enum):
    """
    The kind of location a :class:`Library` loads its resources from.
    """
    CLASSPATH = 'classpath'
    WEBAPP = 'webapp'
    EXTERNAL = 'external'
    UNSET = None


class Library:
    """
    A named collection of resources. A library either has an explicit
    location--a directory on the :class:`classpath
    <score.resourcehandler.classpath.ClassPath>`, a directory in the web
    application, or an external URL prefix--or uses the default lookup chain
    if its *location_type* is :attr:`LocationType.UNSET`.

    The *name* may be surrounded by slashes, which will be removed, but must
    not contain any further slashes.

    The *el_evaluation_file_masks* list the resources, which contain
    expressions that need to be evaluated before the resource is served. Each
    mask may contain asterisks as wildcards, e.g. ``*.css``.
    """

    def __init__(self, name, location_type=LocationType.UNSET, location=None,
                 el_evaluation_file_masks=None):
        name = trim_slashes(name)
        if not name:
            raise ValueError('Library name must not be empty')
        if '/' in name:
            raise ValueError(
                'Library name must not contain a slash: %s' % name)
        if location_type is None:
            location_type = LocationType.UNSET
        if el_evaluation_file_masks is None:
            el_evaluation_file_masks = []
        if location_type == LocationType.EXTERNAL and el_evaluation_file_masks:
            raise ValueError(
                'El-evaluation is not available for external library %s' %
                name)
        self.name = name
        self.location_type = location_type
        self.location = location
        self.el_evaluation_file_masks = list(el_evaluation_file_masks)
        self._resource_provider = None
        self._provider_lock = threading.Lock()

    @property
    def resource_provider(self):
        """
        The :class:`ResourceProvider
        <score.resourcehandler.provider.ResourceProvider>` of this library, or
        `None` if it was not determined yet. Can only be assigned once.
        """
        return self._resource_provider

    @resource_provider.setter
    def resource_provider(self, provider):
        with self._provider_lock:
            if self._resource_provider is not None and \
                    self._resource_provider is not provider:
                raise ValueError(
                    'Resource provider of library %s is already set' %
                    self.name)
            self._resource_provider = provider

    def bind_resource_provider(self, provider):
        """
        Assigns *provider* unless this library already has a resource
        provider. Returns the provider, that is bound to the library after the
        call.
        """
        with self._provider_lock:
            if self._resource_provider is None:
                self._resource_provider = provider
            return self._resource_provider

    def __eq__(self, other):
        if not isinstance(other, Library):
            return False
        return self.name == other.name

    def __hash__(self):
        return hash(self.name)

    def __repr__(self):
        return '<Library %s (%s)>' % (self.name, self.location_type.name)


class HandlerConfig:
    """
    Holds all :class:`libraries <Library>` handled by this package and the
    feature flags of the handler. All flags may be written once, writing the
    same value again is allowed, but attempting to change a value that has
    already been set raises a :class:`ValueError`.
    """

    URL_VERSION_DEFAULT = '1'
    GZIP_ENABLED_DEFAULT = True
    LOCALE_SUPPORT_ENABLED_DEFAULT = True

    def __init__(self):
        # requests may read libraries while others are still being registered
        self._lock = threading.Lock()
        self._libraries = {}
        self._url_version = None
        self._gzip_enabled = None
        self._locale_support_enabled = None

    def add_library(self, library):
        """
        Registers a :class:`Library`. Raises :class:`ValueError` if the
        configuration already contains a library with the same name.
        """
        with self._lock:
            if library.name in self._libraries:
                raise ValueError(
                    'Config already contains a library named %s' %
                    library.name)
            self._libraries[library.name] = library

    def has_library(self, name):
        """
        Whether a library with given *name* was registered. Surrounding slashes
        in *name* are ignored.
        """
        if name is None:
            return False
        with self._lock:
            return trim_slashes(name) in self._libraries

    def get_library(self, name):
        """
        Returns the :class:`Library` with given *name* or `None`.
        """
        if name is None:
            return None
        with self._lock:
            return self._libraries.get(trim_slashes(name))

    @property
    def libraries(self):
        with self._lock:
            return list(self._libraries.values())

    @property
    def url_version(self):
        """
        The version string that is part of each request path. Changing it
        forces clients to reload all resources.
        """
        if self._url_version is None:
            return self.URL_VERSION_DEFAULT
        return self._url_version

    @url_version.setter
    def url_version(self, url_version):
        if self._url_version is not None and self._url_version != url_version:
            raise ValueError(
                'url_version has already been set to a different value')
        if not url_version:
            raise ValueError('url_version must not be empty')
        if '/' in url_version:
            raise ValueError('url_version may not contain slashes')
        if any(char.isspace() for char in url_version):
            raise ValueError('url_version may not contain white spaces')
        self._url_version = url_version

    @property
    def gzip_enabled(self):
        if self._gzip_enabled is None:
            return self.GZIP_ENABLED_DEFAULT
        return self._gzip_enabled

    @gzip_enabled.setter
    def gzip_enabled(self, gzip_enabled):
        gzip_enabled = bool(gzip_enabled)
        if self._gzip_enabled is not None and \
                self._gzip_enabled != gzip_enabled:
            raise ValueError(
                'gzip_enabled has already been set to a different value')
        self._gzip_enabled = gzip_enabled

    @property
    def locale_support_enabled(self):
        if self._locale_support_enabled is None:
            return self.LOCALE_SUPPORT_ENABLED_DEFAULT
        return self._locale_support_enabled

    @locale_support_enabled.setter
    def locale_support_enabled(self, locale_support_enabled):
        locale_support_enabled = bool(locale_support_enabled)
        if self._locale_support_enabled is not None and \
                self._locale_support_enabled != locale_support_enabled:
            raise ValueError(
                'locale_support_enabled has already been set to a different '
                'value')
        self._locale_support_enabled = locale_support_enabled
