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

from contextlib import contextmanager


class RequestContext:
    """
    State of a single request, passed explicitly through all layers of the
    resource handler.

    *headers* are the HTTP request headers, their names are treated
    case-insensitively. The *view_locale* is the locale of the page currently
    being rendered (e.g. ``de_AT``), it is `None` while serving a resource. The
    optional *url_rewriter* receives each generated request path and may
    return a modified one, e.g. one containing the application's mount point.
    """

    def __init__(self, headers=None, view_locale=None, url_rewriter=None):
        self.headers = dict((key.lower(), value)
                            for key, value in (headers or {}).items())
        self.view_locale = view_locale
        self.url_rewriter = url_rewriter
        self.handling_resource_request = False
        self.evaluating_expressions = False
        self.requested_locale_prefix = None

    def get_header(self, name, default=None):
        return self.headers.get(name.lower(), default)

    def rewrite_url(self, path):
        if self.url_rewriter is None:
            return path
        return self.url_rewriter(path)

    @contextmanager
    def resource_request(self):
        """
        Marks this context as serving a resource for the duration of the
        with-block.
        """
        self.handling_resource_request = True
        try:
            yield self
        finally:
            self.handling_resource_request = False

    @contextmanager
    def expression_evaluation(self):
        """
        Marks this context as evaluating the expressions of a resource for the
        duration of the with-block. Resources looked up in the meantime are
        never parsed as request paths.
        """
        self.evaluating_expressions = True
        try:
            yield self
        finally:
            self.evaluating_expressions = False
