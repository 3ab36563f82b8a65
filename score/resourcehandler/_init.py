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

from score.init import (
    ConfiguredModule, ConfigurationError, parse_list, parse_bool)
from collections import namedtuple
from importlib.metadata import entry_points
import logging
import tempfile

from .cache import DescriptorCache
from .classpath import ClassPath
from .context import RequestContext
from .evaluator import DefaultExpressionEvaluator
from .handler import ResourceHandler, ResourceNotFound
from .parser import DEFAULT_CONFIG_RESOURCE, XmlConfigProvider
from .resolver import DefaultResolverProvider
from .store import TransformationStore


log = logging.getLogger(__name__)

Request = namedtuple('Request', ('path', 'headers'))

CONFIG_PROVIDER_GROUP = 'score.resourcehandler.config_provider'
RESOLVER_PROVIDER_GROUP = 'score.resourcehandler.resolver_provider'

DEFAULT_SERVLET_PREFIX = '/faces'

defaults = {
    'config': DEFAULT_CONFIG_RESOURCE,
    'classpath': [],
    'webapp_root': None,
    'tmpdir': None,
    'development': False,
    'default_locale': 'en',
    'max_expires': 604800000,
    'servlet_prefix': DEFAULT_SERVLET_PREFIX,
    'resource_root': '/_resources',
    'max_cache_size': DescriptorCache.DEFAULT_MAX_SIZE,
    'validate': True,
}


def init(confdict, config_provider=None, resolver_provider=None,
         fallback=None, evaluator=None):
    """
    Initializes this module acoording to :ref:`our module initialization
    guidelines <module_initialization>` with the following configuration keys:

    :confkey:`config` :confdefault:`META-INF/relative-resources.xml`
        Path of the XML files configuring the libraries, relative to the
        entries of the :confkey:`classpath`. All files found are merged.

    :confkey:`classpath` :confdefault:`[]`
        A list of folders containing resources. Entries starting with
        ``package:`` are names of python packages, whose folders will be used.

    :confkey:`webapp_root` :confdefault:`None`
        The document root of the web application. Libraries with a location of
        type ``WEBAPP`` are looked up in this folder, as well as libraries
        without a location in the sub-folders ``resources`` and
        ``META-INF/resources``.

    :confkey:`tmpdir` :confdefault:`None`
        The folder where the transformed versions of the resources will be
        stored. A fresh temporary folder is created if this value is omitted.

    :confkey:`development` :confdefault:`False`
        In development mode resources are never compressed and clients are
        advised to reload each resource on every request.

    :confkey:`default_locale` :confdefault:`en`
        The locale to put into request paths, if the locale of the current
        view is unknown.

    :confkey:`max_expires` :confdefault:`604800000`
        The number of milliseconds clients may cache a resource.

    :confkey:`servlet_prefix` :confdefault:`/faces`
        The path prefix under which the resources are served.

    :confkey:`resource_root` :confdefault:`/_resources`
        The path segment following the :confkey:`servlet_prefix` in all
        request paths.

    :confkey:`max_cache_size` :confdefault:`1000`
        Maximum number of resource descriptors held in memory.

    :confkey:`validate` :confdefault:`True`
        Whether the configuration files should be validated against the full
        grammar of the configuration format.

    The optional *config_provider* (a :class:`ConfigProvider
    <score.resourcehandler.parser.ConfigProvider>`) and *resolver_provider* (a
    :class:`ResolverProvider
    <score.resourcehandler.resolver.ResolverProvider>`) replace the default
    implementations. If they are omitted, the providers registered in the
    entry point groups ``score.resourcehandler.config_provider`` and
    ``score.resourcehandler.resolver_provider`` are used, if present.

    Requests for resources outside of the configured libraries are passed to
    the *fallback* handler, which must provide the same ``create_resource``
    method as the :class:`ResourceHandler
    <score.resourcehandler.handler.ResourceHandler>`. The *evaluator* is the
    :class:`ExpressionEvaluator
    <score.resourcehandler.evaluator.ExpressionEvaluator>` to use for
    resources with expressions.
    """
    conf = dict(defaults.items())
    conf.update(confdict)
    validate = parse_bool(conf['validate'])
    if config_provider is None:
        config_provider = _discover_provider(
            CONFIG_PROVIDER_GROUP,
            lambda: XmlConfigProvider(conf['config'], validate))
    if resolver_provider is None:
        resolver_provider = _discover_provider(
            RESOLVER_PROVIDER_GROUP, DefaultResolverProvider)
    try:
        max_expires = int(conf['max_expires'])
    except (TypeError, ValueError):
        raise ConfigurationError(
            'score.resourcehandler',
            'Invalid max_expires value: %s' % conf['max_expires'])
    if max_expires < 0:
        raise ConfigurationError(
            'score.resourcehandler',
            'Negative max_expires value: %d' % max_expires)
    tmpdir = conf['tmpdir']
    if not tmpdir:
        tmpdir = tempfile.mkdtemp(prefix='score.resourcehandler-')
    classpath = ClassPath(parse_list(conf['classpath']))
    config = config_provider.get_config(classpath)
    handler = ResourceHandler(
        config,
        resolver_provider.get_resolver(),
        TransformationStore(tmpdir),
        classpath,
        fallback=fallback,
        webapp_root=conf['webapp_root'] or None,
        development=parse_bool(conf['development']),
        default_locale=conf['default_locale'],
        max_expires=max_expires,
        servlet_prefix=_parse_servlet_prefix(conf['servlet_prefix']),
        resource_root=_normalize_prefix(conf['resource_root']),
        max_cache_size=_parse_max_cache_size(conf['max_cache_size']))
    if evaluator is None:
        evaluator = DefaultExpressionEvaluator(handler)
    handler.evaluator = evaluator
    return ConfiguredResourceHandlerModule(handler)


def _discover_provider(group, default):
    found = list(entry_points(group=group))
    if len(found) > 1:
        raise ConfigurationError(
            'score.resourcehandler',
            'Found more than one implementation for %s: %s' % (
                group, ', '.join(entry.value for entry in found)))
    if not found:
        log.debug('No implementation for %s found, using default', group)
        return default()
    log.info('Using %s for %s', found[0].value, group)
    return found[0].load()()


def _normalize_prefix(prefix):
    prefix = (prefix or '').strip().strip('/')
    if not prefix:
        return ''
    return '/' + prefix


def _parse_servlet_prefix(value):
    prefix = _normalize_prefix(value)
    if not prefix:
        log.warning('No servlet prefix configured, using %s',
                    DEFAULT_SERVLET_PREFIX)
        return DEFAULT_SERVLET_PREFIX
    log.info('Using servlet prefix %s', prefix)
    return prefix


def _parse_max_cache_size(value):
    try:
        size = int(value)
    except (TypeError, ValueError):
        size = 0
    if size < 1:
        log.error('Invalid max_cache_size %r, using %d',
                  value, DescriptorCache.DEFAULT_MAX_SIZE)
        return DescriptorCache.DEFAULT_MAX_SIZE
    return size


class ConfiguredResourceHandlerModule(ConfiguredModule):
    """
    This module's :class:`configuration class
    <score.init.ConfiguredModule>`.
    """

    def __init__(self, handler):
        super().__init__(__package__)
        self.handler = handler
        self.config = handler.config

    @property
    def resource_url_prefix(self):
        return self.handler.resource_url_prefix

    def create_resource(self, resource_name, library_name=None,
                        content_type=None, *, ctx=None):
        """
        Returns the :class:`ResourceDescriptor
        <score.resourcehandler.descriptor.ResourceDescriptor>` of a resource,
        or whatever the fallback handler returns for resources outside of the
        configured libraries.
        """
        if ctx is None:
            ctx = RequestContext()
        return self.handler.create_resource(
            ctx, resource_name, library_name, content_type)

    def get_request_path(self, resource_name, library_name, locale=None,
                         url_rewriter=None):
        """
        Returns the path clients must request to retrieve given resource in
        given *locale*, or `None` if the resource does not exist.
        """
        ctx = RequestContext(view_locale=locale, url_rewriter=url_rewriter)
        resource = self.handler.create_resource(
            ctx, resource_name, library_name)
        if resource is None:
            return None
        return resource.get_request_path(ctx)

    def resolve(self, path, headers=None):
        """
        Returns the resource that would be served for the request *path*
        (relative to the :attr:`resource_url_prefix`), or `None`.
        """
        ctx = RequestContext(headers)
        with ctx.resource_request():
            return self.handler.create_resource(ctx, path)

    def get_request_response(self, request):
        """
        Provides the response to an HTTP :class:`Request` for a resource. The
        *path* of the request must start with the :attr:`resource_url_prefix`.
        The return value is 3-tuple ``(status, headers, body)`` containing an
        HTTP status code, a `dict` of HTTP headers and the response body as
        `bytes`.

        .. code-block:: python

            status, headers, body = resourcehandler.get_request_response(
                Request('/faces/_resources/1/en/css/main.css',
                        {'Accept-Encoding': 'gzip,deflate'}))
        """
        prefix = self.resource_url_prefix + '/'
        if not request.path.startswith(prefix):
            return 404, {}, b''
        ctx = RequestContext(request.headers)
        try:
            status, headers, stream = self.handler.handle_resource_request(
                ctx, request.path[len(prefix):])
        except ResourceNotFound:
            return 404, {}, b''
        if stream is None:
            return status, headers, b''
        with stream:
            return status, headers, stream.read()
