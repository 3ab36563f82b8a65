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
Helper functions shared by the rest of the package: slash handling, HTTP date
headers, content negotiation and access to resource URLs.
"""

import calendar
import email.utils
import os
import re
import time
import urllib.parse
import urllib.request


BUFFER_SIZE = 2048

_REQUEST_DATE_FORMATS = (
    # RFC 1123
    '%a, %d %b %Y %H:%M:%S %Z',
    # RFC 850
    '%A, %d-%b-%y %H:%M:%S %Z',
    # asctime(), with full and abbreviated month names
    '%a %B %d %H:%M:%S %Y',
    '%a %b %d %H:%M:%S %Y',
)

_qvalue_zero_regex = re.compile(r'^q=0(\.0{0,3})?$')


def trim_slashes(s):
    """
    Removes all leading and trailing slashes from *s*. Slashes inside the
    string are kept, so ``//a/b/`` becomes ``a/b``. An empty string or a
    string consisting of slashes only results in an empty string, `None` is
    passed through.
    """
    if s is None:
        return None
    return s.strip('/')


def format_date_header(ms):
    """
    Formats a timestamp given in milliseconds for use in an HTTP header, i.e.
    ``Sun, 06 Nov 1994 08:49:37 GMT``.
    """
    return email.utils.formatdate(ms / 1000, usegmt=True)


def parse_date_header(value):
    """
    Parses the value of an HTTP date header and returns the timestamp in
    milliseconds. All three formats allowed by RFC 2616 are accepted, the
    time is always interpreted as GMT. Returns `None` if *value* could not be
    parsed.
    """
    if not value:
        return None
    value = value.strip()
    for format in _REQUEST_DATE_FORMATS:
        try:
            parsed = time.strptime(value, format)
        except ValueError:
            continue
        return calendar.timegm(parsed) * 1000
    return None


def is_gzip_accepted(accept_encoding):
    """
    Checks whether the user agent accepts gzip compressed content according
    to its ``Accept-Encoding`` header as described in RFC 2616, section 14.3.
    Some examples of headers this function understands::

        Accept-Encoding: gzip, deflate
        Accept-Encoding:
        Accept-Encoding: *
        Accept-Encoding: compress;q=0.5, gzip;q=1.0
        Accept-Encoding: gzip;q=1.0, identity; q=0.5, *;q=0

    A missing header means that gzip is not supported.
    """
    if accept_encoding is None:
        return False
    index = accept_encoding.find('gzip')
    if index == -1:
        index = accept_encoding.find('*')
    if index == -1:
        return False
    return not _is_qvalue_zero(accept_encoding, index)


def _is_qvalue_zero(accept_encoding, start):
    definition = accept_encoding[start:].split(',', 1)[0]
    index = definition.find('q=0')
    if index == -1:
        return False
    # at most three digits after the decimal point (RFC 2616, section 3.9)
    return bool(_qvalue_zero_regex.match(definition[index:].strip()))


def file_mask_matches(mask, name):
    """
    Tests if the resource *name* matches the file *mask*. Any asterisk in the
    mask matches an arbitrary sequence of characters, all other characters
    must match literally.
    """
    pattern = '.*'.join(re.escape(part) for part in mask.split('*'))
    return re.fullmatch(pattern, name, re.DOTALL) is not None


def format_locale(locale):
    """
    Converts a locale string into the form used inside resource paths:
    ``de`` or ``de_AT``.
    """
    if not locale:
        return None
    parts = locale.replace('-', '_').split('_')
    language = parts[0].lower()
    if len(parts) > 1 and parts[1]:
        return '%s_%s' % (language, parts[1].upper())
    return language


def url_to_path(url):
    """
    Returns the file system path of a ``file:`` *url*.
    """
    parsed = urllib.parse.urlparse(url)
    if parsed.scheme != 'file':
        raise ValueError('Not a file URL: %s' % url)
    return urllib.request.url2pathname(parsed.path)


def open_url(url):
    """
    Opens a binary stream to the resource located at *url*.
    """
    if url.startswith('file:'):
        return open(url_to_path(url), 'rb')
    return urllib.request.urlopen(url)


def last_modified(url):
    """
    Returns the last modification time of the resource at *url* in
    milliseconds, or -1 if it is unknown. Raises an `OSError` if the resource
    cannot be accessed.
    """
    if url.startswith('file:'):
        return int(os.path.getmtime(url_to_path(url)) * 1000)
    with urllib.request.urlopen(url) as response:
        modified = parse_date_header(response.headers.get('Last-Modified'))
    if modified is None:
        return -1
    return modified


def pipe_bytes(source, target, buffer_size=BUFFER_SIZE):
    """
    Copies everything readable from *source* to *target*, *buffer_size* bytes
    at a time.
    """
    while True:
        chunk = source.read(buffer_size)
        if not chunk:
            break
        target.write(chunk)
