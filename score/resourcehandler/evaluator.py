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
Resources listed in the ``<el-evaluation>`` section of a library may contain
expressions of the form ``#{...}``, that are replaced before the resource is
served. A typical use case is a stylesheet referencing images of the same
library::

    .logo {
        background-image: url(#{resource['images:logo.png']});
    }

The actual evaluation is delegated to an :class:`ExpressionEvaluator`.
"""

import abc
import codecs
import io
import logging
import re

from .utils import BUFFER_SIZE


log = logging.getLogger(__name__)


class ExpressionEvaluator(abc.ABC):
    """
    Converts the content of a single ``#{...}`` expression into the string it
    should be replaced with.
    """

    @abc.abstractmethod
    def evaluate(self, ctx, expression):
        """
        Returns the value of *expression* (the text between ``#{`` and ``}``)
        in the :class:`RequestContext
        <score.resourcehandler.context.RequestContext>` *ctx*.
        """


class DefaultExpressionEvaluator(ExpressionEvaluator):
    """
    Understands two kinds of expressions:

    - ``resource['library:name']`` (or ``resource['name']``) evaluates to the
      request path of another resource, looked up through the *handler*.
    - dotted names like ``theme.color`` are looked up in the *variables*
      mapping (attributes are accepted, too).

    Expressions that cannot be resolved are replaced with an empty string.
    """

    resource_regex = re.compile(
        r'''resource\[\s*(?P<quote>['"])(?P<reference>.*?)(?P=quote)\s*\]''')

    def __init__(self, handler, variables=None):
        self.handler = handler
        self.variables = variables or {}

    def evaluate(self, ctx, expression):
        expression = expression.strip()
        match = self.resource_regex.fullmatch(expression)
        if match:
            return self._evaluate_resource(ctx, match.group('reference'))
        value = self.variables
        for part in expression.split('.'):
            try:
                value = value[part]
            except (KeyError, TypeError):
                try:
                    value = getattr(value, part)
                except AttributeError:
                    log.warning('Could not evaluate expression #{%s}',
                                expression)
                    return ''
        return str(value)

    def _evaluate_resource(self, ctx, reference):
        if ':' in reference:
            library, name = reference.split(':', 1)
        else:
            library, name = None, reference
        resource = self.handler.create_resource(ctx, name, library)
        if resource is None:
            log.warning('Referenced resource %s not found', reference)
            return ''
        return resource.get_request_path(ctx)


class ExpressionEvaluationStream(io.RawIOBase):
    """
    A readable binary stream providing the content of the *source* stream with
    all expressions replaced by the values calculated by the *evaluator*.
    Expressions may span chunk boundaries of the *source*. Bytes that are not
    valid in the given *encoding* are passed through unchanged.
    """

    START = '#{'
    END = '}'

    def __init__(self, ctx, source, evaluator, encoding='UTF-8'):
        super().__init__()
        self.ctx = ctx
        self.source = source
        self.evaluator = evaluator
        self.encoding = encoding
        self._decoder = codecs.getincrementaldecoder(encoding)(
            errors='surrogateescape')
        self._text = ''
        self._output = b''
        self._exhausted = False

    def readable(self):
        return True

    def readinto(self, buffer):
        while not self._output and not self._exhausted:
            self._fill()
        length = min(len(buffer), len(self._output))
        buffer[:length] = self._output[:length]
        self._output = self._output[length:]
        return length

    def close(self):
        if not self.closed:
            self.source.close()
        super().close()

    def _fill(self):
        chunk = self.source.read(BUFFER_SIZE)
        if chunk:
            self._text += self._decoder.decode(chunk)
        else:
            self._text += self._decoder.decode(b'', final=True)
            self._exhausted = True
        self._output += self._process().encode(
            self.encoding, errors='surrogateescape')

    def _process(self):
        parts = []
        while True:
            start = self._text.find(self.START)
            if start == -1:
                # a trailing '#' might be the beginning of an expression
                keep = 0
                if not self._exhausted and self._text.endswith('#'):
                    keep = 1
                cut = len(self._text) - keep
                parts.append(self._text[:cut])
                self._text = self._text[cut:]
                break
            end = self._text.find(self.END, start + len(self.START))
            if end == -1:
                parts.append(self._text[:start])
                self._text = self._text[start:]
                if self._exhausted:
                    parts.append(self._text)
                    self._text = ''
                break
            parts.append(self._text[:start])
            parts.append(self.evaluator.evaluate(
                self.ctx, self._text[start + len(self.START):end]))
            self._text = self._text[end + len(self.END):]
        return ''.join(parts)
