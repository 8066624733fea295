"""
Contains general tools useful when accessing storage services: the
request URL and header builders, metadata header naming, and response
helpers.

None of the builders escape anything; names and values are inserted
verbatim, so any reserved characters must already be URL encoded by the
caller.
"""
"""
Copyright 2011-2013 Gregory Holt

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at

    http://www.apache.org/licenses/LICENSE-2.0

Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and
limitations under the License.
"""
from urllib import parse

from ucloudstorage.client.errors import ProtocolError


#: Request headers whose values are never written to verbose output.
SECRET_HEADERS = ('x-auth-key', 'x-auth-admin-key', 'x-auth-user-key')


def _to_str(value):
    if isinstance(value, bool):
        return 'true' if value else 'false'
    return str(value)


def _values(value):
    if isinstance(value, (list, tuple)):
        return value
    return [value]


def query_string(query):
    """
    Returns the ``?key=value&key=value`` string for the query mapping,
    or an empty str if there is nothing to send.

    Keys keep the mapping's iteration order and a list or tuple value
    produces one ``key=value`` pair per item.
    """
    if not query:
        return ''
    pairs = [
        '%s=%s' % (key, _to_str(value))
        for key, values in query.items() for value in _values(values)]
    if not pairs:
        return ''
    return '?' + '&'.join(pairs)


def build_url(base, *segments, **kwargs):
    """
    Returns base with each segment appended after a ``/`` and then the
    query string for the ``query`` keyword argument, if any.
    """
    url = base
    for segment in segments:
        url += '/' + str(segment)
    return url + query_string(kwargs.get('query'))


def storage_request_url(storage_url, query=None):
    return build_url(storage_url, query=query)


def container_request_url(storage_url, container, query=None):
    return build_url(storage_url, container, query=query)


def object_request_url(storage_url, container, obj, query=None):
    return build_url(storage_url, container, obj, query=query)


def user_request_url(account_url, user, query=None):
    return build_url(account_url, user, query=query)


def groups_request_url(account_url, query=None):
    return build_url(account_url, '.groups', query=query)


def account_url(storage_url, account_name):
    """
    Returns the admin endpoint for the account, which lives on the same
    host as the storage URL: ``{scheme}://{netloc}/auth/v2/{account}``.
    """
    parsed = parse.urlsplit(storage_url)
    if not parsed.scheme or not parsed.netloc:
        raise ProtocolError(
            'Cannot derive an account URL from storage URL %r' % storage_url)
    return '%s://%s/auth/v2/%s' % (parsed.scheme, parsed.netloc, account_name)


def replace_headers(headers, replacements):
    """
    Returns a copy of headers with the replacements applied, dropping
    any existing header that matches a replacement name in any letter
    case.
    """
    lowered = set(name.lower() for name in replacements)
    result = dict(
        (name, value) for name, value in (headers or {}).items()
        if name.lower() not in lowered)
    result.update(replacements)
    return result


def token_headers(headers, token):
    """
    Returns a copy of headers with X-Auth-Token set to token, replacing
    any value the caller gave for that header in any letter case.
    """
    return replace_headers(headers, {'X-Auth-Token': token})


def admin_headers(headers, user, key):
    """
    Returns a copy of headers carrying the admin credentials used by
    the account and user management calls.
    """
    return replace_headers(
        headers, {'X-Auth-Admin-User': user, 'X-Auth-Admin-Key': key})


def header_pairs(headers):
    """
    Flattens a header mapping into a list of (name, value) str tuples;
    a list or tuple value yields the header once per item.
    """
    pairs = []
    for name, values in (headers or {}).items():
        for value in _values(values):
            pairs.append((name, _to_str(value)))
    return pairs


def headers_to_dict(headers):
    """
    Converts a sequence of (name, value) tuples into a dict where if
    a given name occurs more than once its value in the dict will be
    a list of values.
    """
    hdrs = {}
    for h, v in headers:
        h = h.lower()
        if h in hdrs:
            if isinstance(hdrs[h], list):
                hdrs[h].append(v)
            else:
                hdrs[h] = [hdrs[h], v]
        else:
            hdrs[h] = v
    return hdrs


def capitalize(token):
    """
    Returns token with its first letter upper cased and the rest lower
    cased.
    """
    if not token:
        return token
    return token[:1].upper() + token[1:].lower()


def capitalize_and_join(*tokens):
    """
    Splits each token on ``-``, capitalizes every piece and joins them
    all back with ``-``; ``('content', 'TYPE-x')`` gives
    ``'Content-Type-X'``.
    """
    return '-'.join(
        capitalize(piece) for token in tokens for piece in token.split('-'))


def meta_header(remove, scope, *tokens):
    """
    Returns the metadata header name for the scope (Account, Container
    or Object) built from tokens, such as ``X-Container-Meta-Color`` or,
    with remove set, ``X-Remove-Container-Meta-Color``.
    """
    return 'X%s-%s-Meta-%s' % (
        '-Remove' if remove else '', scope, capitalize_and_join(*tokens))


def account_meta_header(remove, *tokens):
    return meta_header(remove, 'Account', *tokens)


def container_meta_header(remove, *tokens):
    return meta_header(remove, 'Container', *tokens)


def object_meta_header(remove, *tokens):
    return meta_header(remove, 'Object', *tokens)


def read_response(response):
    """
    The default response function: reads the whole body and returns a
    tuple of (status, reason, headers, contents).

        :status: An int for the HTTP status code.
        :reason: The str for the HTTP status (ex: "OK").
        :headers: A dict with all lowercase keys of the HTTP headers;
            if a header has multiple values, it will be a list.
        :contents: The bytes of the HTTP body.
    """
    return (response.status, response.reason,
            headers_to_dict(response.getheaders()), response.read())


def status_code(response):
    """
    A response function that just returns the HTTP status code.
    """
    return response.status


def response_lines(response):
    """
    Yields the non-empty lines of a text/plain listing response as str.
    Nothing is yielded for a response that is not a 2xx.
    """
    if response.status // 100 != 2:
        return
    for line in response:
        if isinstance(line, bytes):
            line = line.decode('utf8')
        line = line.rstrip('\r\n')
        if line:
            yield line
