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

import logging

from .cache import DescriptorCache
from .utils import format_locale


log = logging.getLogger(__name__)


class ResourceNotFound(Exception):
    """
    Thrown when a resource was requested, but not found. Web applications
    might want to return the HTTP status code 404 in this case.
    """

    def __init__(self, path):
        self.path = path
        super().__init__(path)


class NullFallback:
    """
    The default upstream handler, which does not know any resources.
    """

    def create_resource(self, ctx, resource_name, library_name=None,
                        content_type=None):
        return None


class ResourceHandler:
    """
    Creates the resources of all libraries listed in the :class:`HandlerConfig
    <score.resourcehandler.config.HandlerConfig>` *config*. Requests for any
    other resources are passed to the *fallback* handler, which must provide
    the same :meth:`create_resource` method.
    """

    def __init__(self, config, resolver, store, classpath, *,
                 evaluator=None, fallback=None, webapp_root=None,
                 development=False, default_locale='en',
                 max_expires=604800000, servlet_prefix='/faces',
                 resource_root='/_resources',
                 max_cache_size=DescriptorCache.DEFAULT_MAX_SIZE):
        self.config = config
        self.resolver = resolver
        self.store = store
        self.classpath = classpath
        self.evaluator = evaluator
        if fallback is None:
            fallback = NullFallback()
        self.fallback = fallback
        self.webapp_root = webapp_root
        self.development = development
        self.default_locale = format_locale(default_locale) or 'en'
        self.max_expires = max_expires
        self.servlet_prefix = servlet_prefix
        self.resource_root = resource_root
        self.cache = DescriptorCache(max_cache_size)

    @property
    def resource_url_prefix(self):
        """
        The path prefix of all request paths served by this handler.
        """
        return self.servlet_prefix + self.resource_root

    def create_resource(self, ctx, resource_name, library_name=None,
                        content_type=None):
        """
        Returns the resource *resource_name* of the library *library_name*,
        or whatever the fallback handler returns if this handler is not
        responsible for the resource.

        While serving a resource request, the *resource_name* may also be the
        complete path below the resource root, if no *library_name* is given.
        """
        if library_name is None and ctx.handling_resource_request and \
                not ctx.evaluating_expressions:
            identifier = self.resolver.calculate_id_from_path(
                ctx, resource_name, self.config)
            # referenced resources will use the same locale
            if identifier is not None and \
                    identifier.requested_locale_prefix is not None:
                ctx.requested_locale_prefix = \
                    identifier.requested_locale_prefix
        else:
            identifier = self.resolver.calculate_id(
                ctx, resource_name, library_name, None, self.config)
        if identifier is not None:
            descriptor = self.cache.get(
                identifier, lambda: self.resolver.create_descriptor(
                    ctx, identifier, content_type, self))
            if not descriptor.initialized:
                descriptor.initialize(ctx)
            if descriptor.resource_exists():
                return descriptor
        log.debug('Delegating %s (library %s) to %r',
                  resource_name, library_name, self.fallback)
        return self.fallback.create_resource(
            ctx, resource_name, library_name, content_type)

    def handle_resource_request(self, ctx, path):
        """
        Serves the resource at *path* (relative to the
        :attr:`resource_url_prefix`). Returns a 3-tuple ``(status, headers,
        stream)``, where the stream is `None` unless the status is 200. Raises
        :class:`ResourceNotFound` if there is no such resource.
        """
        with ctx.resource_request():
            resource = self.create_resource(ctx, path)
            if resource is None:
                raise ResourceNotFound(path)
            if not resource.user_agent_needs_update(ctx):
                return 304, {}, None
            headers = {}
            if resource.content_type:
                headers['Content-Type'] = resource.content_type
            headers.update(resource.get_response_headers(ctx))
            return 200, headers, resource.get_input_stream(ctx)

    def request_locale_prefix(self, ctx):
        """
        The locale prefix to use in request paths: the locale of the current
        view, the locale requested while serving a resource, or the configured
        default locale (in that order).
        """
        if ctx.view_locale is None:
            if ctx.requested_locale_prefix:
                return ctx.requested_locale_prefix
            return self.default_locale
        return format_locale(ctx.view_locale) or self.default_locale
