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
This package :ref:`integrates <framework_integration>` the module with
pyramid.

It registers a route serving all resources below the configured resource
prefix, and a handler for the exception :exc:`ResourceNotFound
<score.resourcehandler.ResourceNotFound>`, which returns the HTTP status code
``404 - Not found``. Templates can generate the URL of a resource with the
request method ``resourcehandler_url``::

    <link rel="stylesheet"
          href="${request.resourcehandler_url('main.css', 'css')}">
"""

from pyramid.response import FileIter
import score.resourcehandler
from score.resourcehandler import RequestContext, ResourceNotFound

from .utils import BUFFER_SIZE


ROUTE_NAME = 'score.resourcehandler'


def resourcenotfound(exc, request):
    """
    Returns an HTTP response with status code 404. This method is registered
    in the pyramid-specific :func:`init` function.
    """
    request.response.status = 404
    return request.response


def init(confdict, configurator, **kwargs):
    """
    Initializes the module via the generic :func:`initializer function
    <score.resourcehandler.init>`, passing all keyword arguments, and
    performs the following steps:

    - Registers the route ``score.resourcehandler`` matching all paths below
      ``<servlet_prefix><resource_root>``, and a view serving the resources.
    - Registers the view resourcenotfound for a handler to the
      :exc:`ResourceNotFound` Exception.
    - Adds the method ``resourcehandler_url(name, library)`` to all requests.
    """
    rhconf = score.resourcehandler.init(confdict, **kwargs)
    configurator.add_route(
        ROUTE_NAME, rhconf.resource_url_prefix + '/*subpath')
    configurator.add_view(
        lambda request: serve_resource(rhconf, request),
        route_name=ROUTE_NAME)
    configurator.add_view(resourcenotfound, context=ResourceNotFound)
    configurator.add_request_method(
        lambda request, resource_name, library_name=None:
            resource_url(rhconf, request, resource_name, library_name),
        'resourcehandler_url')
    return rhconf


def create_context(request):
    """
    Creates the :class:`RequestContext
    <score.resourcehandler.RequestContext>` of a pyramid *request*. Generated
    paths are prefixed with the script name of the application.
    """
    return RequestContext(
        dict(request.headers),
        view_locale=getattr(request, 'locale_name', None),
        url_rewriter=lambda path: request.script_name + path)


def serve_resource(rhconf, request):
    """
    Populates the :attr:`response <pyramid.request.Request.response>` of the
    *request* with the resource found at the request's sub-path. Raises
    :exc:`ResourceNotFound` if there is no such resource.
    """
    ctx = RequestContext(dict(request.headers))
    path = '/'.join(request.matchdict['subpath'])
    status, headers, stream = rhconf.handler.handle_resource_request(
        ctx, path)
    response = request.response
    response.status = status
    for header, value in headers.items():
        response.headers[header] = value
    if stream is not None:
        response.app_iter = FileIter(stream, BUFFER_SIZE)
    return response


def resource_url(rhconf, request, resource_name, library_name=None):
    """
    Returns the path to request the given resource in the locale of the
    *request*, or `None` if the resource does not exist.
    """
    ctx = create_context(request)
    resource = rhconf.handler.create_resource(
        ctx, resource_name, library_name)
    if resource is None:
        return None
    return resource.get_request_path(ctx)
