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
This module serves static resources--stylesheets, scripts, images--of a web
application. Resources are organized in named :term:`libraries <library>` and
addressed through request paths of the form::

    <servlet-prefix><resource-root>/<version>[/<locale>]/<library>/<name>

The module looks up locale specific variants of each resource, evaluates
expressions in configured files, compresses stylesheets and scripts with gzip
and answers conditional requests. Each resource is transformed only once,
the results are stored in a temporary folder.

Framework integration is available for pyramid in
:mod:`score.resourcehandler.pyramid`.
"""

from ._init import init, ConfiguredResourceHandlerModule, Request
from .cache import CacheError, DescriptorCache
from .classpath import ClassPath
from .config import HandlerConfig, Library, LocationType
from .context import RequestContext
from .descriptor import ResourceDescriptor
from .evaluator import (
    DefaultExpressionEvaluator, ExpressionEvaluator,
    ExpressionEvaluationStream)
from .handler import ResourceHandler, ResourceNotFound
from .identifier import ResourceIdentifier
from .parser import ConfigParser, ConfigProvider, XmlConfigProvider
from .provider import (
    ResourceProvider, ResourceProviderChain, ClassPathResourceProvider,
    WebappResourceProvider, ExternalResourceProvider)
from .resolver import (
    IdentifierResolver, ResolverProvider, DefaultResolverProvider)
from .store import TransformationStore


__all__ = (
    'init', 'ConfiguredResourceHandlerModule', 'Request', 'CacheError',
    'DescriptorCache', 'ClassPath', 'HandlerConfig', 'Library',
    'LocationType', 'RequestContext', 'ResourceDescriptor',
    'DefaultExpressionEvaluator', 'ExpressionEvaluator',
    'ExpressionEvaluationStream', 'ResourceHandler', 'ResourceNotFound',
    'ResourceIdentifier', 'ConfigParser', 'ConfigProvider',
    'XmlConfigProvider', 'ResourceProvider', 'ResourceProviderChain',
    'ClassPathResourceProvider', 'WebappResourceProvider',
    'ExternalResourceProvider', 'IdentifierResolver', 'ResolverProvider',
    'DefaultResolverProvider', 'TransformationStore',)
