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
A :class:`ResourceDescriptor` represents a single resource, that can be served
by the :class:`ResourceHandler <score.resourcehandler.handler.ResourceHandler>`.

Descriptors are created lazily and stored in the :class:`DescriptorCache
<score.resourcehandler.cache.DescriptorCache>`. Before a descriptor is served
for the first time, it must be :meth:`initialized
<ResourceDescriptor.initialize>`, which determines the locale variant of the
resource and creates the transformed versions of the resource file:

- the version with all expressions evaluated (``.evaluated``) if the
  resource's name matches one of the library's ``el_evaluation_file_masks``,
- and the gzip compressed version (``.gzip``) of local css and javascript
  files, unless running in development mode.
"""

import logging
import mimetypes
import os
import threading
import time

from .config import LocationType
from .evaluator import ExpressionEvaluationStream
from .provider import (
    DEFAULT_RESOURCE_PROVIDER, ClassPathResourceProvider,
    ExternalResourceProvider, WebappResourceProvider)
from .utils import (
    format_date_header, is_gzip_accepted, last_modified, parse_date_header,
    trim_slashes, file_mask_matches)


log = logging.getLogger(__name__)


class ResourceDescriptor:
    """
    Describes the resource *resource_name* in the :class:`Library
    <score.resourcehandler.config.Library>` *library*. The *content_type* is
    guessed from the resource name if it is omitted. The
    *requested_locale_prefix* is the locale prefix found in the request path,
    or `None`.

    All other settings are read from the *handler* at construction time.
    """

    COMPRESSIBLE_SUFFIXES = ('.css', '.js')

    def __init__(self, handler, resource_name, library, content_type=None,
                 requested_locale_prefix=None):
        self.handler = handler
        self.resource_name = trim_slashes(resource_name)
        self.library = library
        self.library_name = library.name
        # the library folder on disk, might differ from the one in the url
        self.file_library_name = library.name
        if content_type is None:
            content_type = mimetypes.guess_type(self.resource_name)[0]
        self.content_type = content_type
        self.locale_prefix = requested_locale_prefix
        self.gzip_enabled = handler.config.gzip_enabled
        self.locale_support_enabled = handler.config.locale_support_enabled
        self.url_version = handler.config.url_version
        self.development = handler.development
        self._evaluate_expressions = None
        self._cached_url = None
        self._initialized = False
        self._initializing = False
        self._lock = threading.RLock()

    def __repr__(self):
        return '<ResourceDescriptor %s>' % self.get_resource_file_path()

    @property
    def initialized(self):
        return self._initialized

    def initialize(self, ctx):
        """
        Resolves the locale prefix and creates the transformed versions of the
        resource. Subsequent calls have no effect. Failures while creating the
        transformed versions are logged and the original file is served.

        The initialization of a resource includes the initialization of all
        resources referenced by its expressions. Two resources referencing each
        other must therefore not be initialized concurrently in different
        threads for the first time, since both threads would wait for each
        other's lock.
        """
        if self._initialized:
            return
        with self._lock:
            # resources referencing themselves
            if self._initialized or self._initializing:
                return
            self._initializing = True
            try:
                self._initialize(ctx)
            finally:
                self._initializing = False

    def _initialize(self, ctx):
        self._resolve_locale(ctx)
        # expressions must be evaluated before compressing
        if self._should_evaluate_expressions() and \
                not self._is_evaluated_version_available():
            try:
                self._create_evaluated_version(ctx)
            except (OSError, ValueError):
                log.warning('Could not create evaluated version of %r',
                            self, exc_info=True)
        if self.gzip_enabled and not self.development and \
                self._is_compressible() and \
                not self._is_compressed_version_available():
            try:
                self._create_compressed_version(ctx)
            except (OSError, ValueError):
                log.warning('Could not create compressed version of %r',
                            self, exc_info=True)
        self._initialized = True

    def _resolve_locale(self, ctx):
        if not self.locale_support_enabled:
            self.locale_prefix = None
            return
        if self.locale_prefix is None:
            self.locale_prefix = self.handler.request_locale_prefix(ctx)
        if self.resource_exists():
            return
        if self.locale_prefix and '_' in self.locale_prefix:
            self.locale_prefix = self.locale_prefix.split('_', 1)[0]
            if self.resource_exists():
                return
        # serve the file without locale prefix. the request path still
        # contains the locale of the current request.
        self.locale_prefix = None

    def resource_exists(self):
        """
        Whether the resource file can be found. Resources of external
        libraries always exist.
        """
        return self.library.location_type == LocationType.EXTERNAL or \
            self.get_url() is not None

    def get_url(self):
        """
        The URL of the resource file, as provided by the library's
        :class:`ResourceProvider
        <score.resourcehandler.provider.ResourceProvider>`.
        """
        if self._cached_url is None:
            self._cached_url = self._get_resource_provider().get_url(
                self.handler, self)
        return self._cached_url

    def get_resource_file_path(self, include_library_name=True):
        """
        The path of the resource file relative to its provider's base folder:
        ``[<locale>/][<library>/]<name>``.
        """
        parts = []
        if self.locale_prefix is not None:
            parts.append(self.locale_prefix)
        if include_library_name:
            parts.append(self.file_library_name)
        parts.append(self.resource_name)
        return '/'.join(parts)

    def get_relative_path(self, ctx):
        """
        The part of the request path following the resource root:
        ``<version>/[<locale>/]<library>/<name>``. The locale is always the one
        of the current request, which might differ from the locale of the
        served file.
        """
        parts = [self.url_version]
        if self.locale_support_enabled:
            parts.append(self.handler.request_locale_prefix(ctx))
        parts.append(self.library_name)
        parts.append(self.resource_name)
        return '/'.join(parts)

    def get_request_path(self, ctx):
        """
        The path clients must request to retrieve this resource.
        """
        if self.library.location_type == LocationType.EXTERNAL:
            return '%s/%s' % (self.library.location, self.resource_name)
        return ctx.rewrite_url('%s%s/%s' % (
            self.handler.servlet_prefix, self.handler.resource_root,
            self.get_relative_path(ctx)))

    def get_input_stream(self, ctx):
        """
        Opens the best variant of the resource for the current request: the
        compressed version if the client accepts it, the version with
        evaluated expressions, or the original resource file.
        """
        if self.should_serve_compressed_version(ctx):
            return open(self._compressed_file(), 'rb')
        return self._get_uncompressed_stream()

    def get_response_headers(self, ctx):
        """
        The HTTP headers to send along with the content of this resource. The
        result is empty unless *ctx* is serving a resource request.
        """
        if not ctx.handling_resource_request:
            return {}
        headers = {}
        modified = self._last_modified()
        if modified >= 0:
            headers['Last-Modified'] = format_date_header(modified)
            now = int(time.time() * 1000)
            if self.development:
                expires = now
            else:
                expires = now + self.handler.max_expires
            headers['Expires'] = format_date_header(expires)
        if self.should_serve_compressed_version(ctx):
            headers['Content-Encoding'] = 'gzip'
        return headers

    def user_agent_needs_update(self, ctx):
        """
        Whether the client must receive the content of the resource, or if a
        ``304 - Not Modified`` response is sufficient.
        """
        if self.development:
            return True
        if_modified_since = parse_date_header(
            ctx.get_header('If-Modified-Since'))
        if if_modified_since is None:
            return True
        modified = self._last_modified()
        if modified >= 0:
            # If-Modified-Since only has a precision of seconds
            if modified - modified % 1000 <= if_modified_since:
                return False
        return True

    def should_serve_compressed_version(self, ctx):
        return self.gzip_enabled and \
            not self.development and \
            self._is_compressed_version_available() and \
            is_gzip_accepted(ctx.get_header('Accept-Encoding'))

    def _last_modified(self):
        url = self.get_url()
        if url is None:
            return -1
        try:
            return last_modified(url)
        except OSError:
            return -1

    def _is_compressible(self):
        return self.library.location_type != LocationType.EXTERNAL and \
            self.resource_name.endswith(self.COMPRESSIBLE_SUFFIXES)

    def _should_evaluate_expressions(self):
        if self._evaluate_expressions is None:
            self._evaluate_expressions = any(
                file_mask_matches(mask, self.resource_name)
                for mask in self.library.el_evaluation_file_masks)
        return self._evaluate_expressions

    def _evaluated_file(self):
        return self.handler.store.evaluated_file(
            self.get_resource_file_path())

    def _compressed_file(self):
        return self.handler.store.compressed_file(
            self.get_resource_file_path())

    def _is_evaluated_version_available(self):
        return os.path.isfile(self._evaluated_file())

    def _is_compressed_version_available(self):
        return os.path.isfile(self._compressed_file())

    def _get_uncompressed_stream(self):
        if self._is_evaluated_version_available():
            return open(self._evaluated_file(), 'rb')
        return self._get_source_stream()

    def _get_source_stream(self):
        stream = self._get_resource_provider().get_stream(self.handler, self)
        if stream is None:
            raise FileNotFoundError(
                'Resource file not found: %s' % self.get_resource_file_path())
        return stream

    def _create_evaluated_version(self, ctx):
        with ctx.expression_evaluation():
            source = ExpressionEvaluationStream(
                ctx, self._get_source_stream(), self.handler.evaluator)
            with source:
                self.handler.store.write(self._evaluated_file(), source)

    def _create_compressed_version(self, ctx):
        with self._get_uncompressed_stream() as source:
            self.handler.store.write_compressed(
                self._compressed_file(), source)

    def _get_resource_provider(self):
        provider = self.library.resource_provider
        if provider is not None:
            return provider
        location_type = self.library.location_type
        if location_type == LocationType.CLASSPATH:
            provider = ClassPathResourceProvider(
                self.library.location or '')
        elif location_type == LocationType.WEBAPP:
            provider = WebappResourceProvider(self.library.location or '')
        elif location_type == LocationType.EXTERNAL:
            provider = ExternalResourceProvider()
        else:
            provider = DEFAULT_RESOURCE_PROVIDER
        return self.library.bind_resource_provider(provider)
