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

from .descriptor import ResourceDescriptor
from .identifier import ResourceIdentifier
from .utils import trim_slashes


class IdentifierResolver:
    """
    Converts resource requests into :class:`ResourceIdentifier
    <score.resourcehandler.identifier.ResourceIdentifier>` objects and creates
    :class:`ResourceDescriptor
    <score.resourcehandler.descriptor.ResourceDescriptor>` objects for them.

    The behaviour can be customized without sub-classing:

    - Each of the *middlewares* is a callable receiving the current
      :class:`RequestContext <score.resourcehandler.context.RequestContext>`
      and a calculated identifier. It must return an identifier, which is
      passed to the next middleware. This can be used to replace identifiers
      with instances of sub-classes carrying additional information.
    - The *descriptor_factory* is invoked with the arguments of
      :meth:`create_descriptor` and must return a descriptor.
    """

    def __init__(self, middlewares=(), descriptor_factory=None):
        self.middlewares = list(middlewares)
        self.descriptor_factory = descriptor_factory

    def calculate_id_from_path(self, ctx, path, config):
        """
        Extracts the identifier from a request *path* relative to the resource
        root, i.e. ``<version>/[<locale>/]<library>/<name>``. The locale part
        is only expected if locale support is enabled in the *config*.

        Returns `None` if the path does not point to a resource in one of the
        configured libraries.
        """
        library_name = None
        locale_prefix = None
        resource_name = trim_slashes(path)
        version, slash, rest = resource_name.partition('/')
        if slash:
            if config.locale_support_enabled:
                locale, slash, remainder = rest.partition('/')
                if slash:
                    locale_prefix = locale
                    rest = remainder
            library, slash, remainder = rest.partition('/')
            if slash:
                library_name = library
                rest = remainder
            resource_name = rest
        return self.calculate_id(
            ctx, resource_name, library_name, locale_prefix, config)

    def calculate_id(self, ctx, resource_name, library_name,
                     requested_locale_prefix, config):
        """
        Creates the identifier of the resource *resource_name* in given
        library. Returns `None` if the library is not configured.
        """
        if library_name is None:
            return None
        library_name = trim_slashes(library_name)
        if '/' in library_name or not config.has_library(library_name):
            return None
        resource_name = trim_slashes(resource_name)
        if not resource_name:
            return None
        identifier = ResourceIdentifier(
            resource_name, library_name, requested_locale_prefix)
        for middleware in self.middlewares:
            identifier = middleware(ctx, identifier)
        return identifier

    def create_descriptor(self, ctx, identifier, content_type, handler):
        """
        Creates the descriptor for the resource with given *identifier*.
        """
        if self.descriptor_factory is not None:
            return self.descriptor_factory(
                ctx, identifier, content_type, handler)
        return ResourceDescriptor(
            handler,
            identifier.resource_name,
            handler.config.get_library(identifier.library_name),
            content_type,
            identifier.requested_locale_prefix)


class ResolverProvider(abc.ABC):
    """
    Creates the :class:`IdentifierResolver` of the resource handler.
    Alternative implementations can be registered in the entry point group
    ``score.resourcehandler.resolver_provider``.
    """

    @abc.abstractmethod
    def get_resolver(self):
        pass


class DefaultResolverProvider(ResolverProvider):

    def get_resolver(self):
        return IdentifierResolver()
