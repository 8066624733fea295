"""
Provides the standard client for accessing storage services.
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

from ucloudstorage.client import utils
from ucloudstorage.client.client import Client
from ucloudstorage.client.errors import TransportError


class BodyWriter(object):
    """
    Handed to a ``func(writer)`` request body so it can stream the
    body without knowing its size up front. With chunked set, each
    write is sent as one HTTP/1.1 chunk.
    """

    def __init__(self, conn, chunked):
        self.conn = conn
        self.chunked = chunked
        self.bytes_written = 0

    def write(self, data):
        if isinstance(data, str):
            data = data.encode('utf8')
        if not data:
            return
        if self.chunked:
            self.conn.send(b'%x\r\n' % len(data) + data + b'\r\n')
        else:
            self.conn.send(data)
        self.bytes_written += len(data)

    def close(self):
        if self.chunked:
            self.conn.send(b'0\r\n\r\n')


class StandardClient(Client):
    """
    The standard client for accessing storage services, built on
    http.client connections. A new connection is made for each request
    and closed before the request call returns.

    :param auth_url: The URL to the auth system.
    :param auth_user: The user to authenticate as, usually
        ``account:user``.
    :param auth_key: The key to use when authenticating.
    :param eventlet: Default: None. If True, Eventlet will be used if
        installed. If False, Eventlet will not be used even if
        installed. If None, the default, Eventlet will be used if
        installed.
    :param chunk_size: Maximum size to read or write at one time.
    :param http_proxy: The URL to the tunnelling HTTP proxy to use.
        Default: None.
    :param verbose: Set to a ``func(msg, *args)`` that will be called
        with debug messages. Constructing a string for output can be
        done with msg % args.
    :param verbose_id: Set to a string you wish verbose messages to
        be prepended with; can help in identifying output when
        multiple Clients are in use.
    """

    def __init__(self, auth_url=None, auth_user=None, auth_key=None,
                 eventlet=None, chunk_size=65536, http_proxy=None,
                 verbose=None, verbose_id=''):
        super(StandardClient, self).__init__(
            auth_url=auth_url, auth_user=auth_user, auth_key=auth_key,
            verbose=verbose, verbose_id=verbose_id)
        self.chunk_size = chunk_size
        self.http_proxy = http_proxy
        #: These HTTP methods do not allow contents
        self.no_content_methods = ['COPY', 'DELETE', 'GET', 'HEAD']
        if eventlet is None:
            try:
                import eventlet
                eventlet = True
            except ImportError:
                pass
        if eventlet:
            try:
                import eventlet.green.http.client
                self.HTTPConnection = eventlet.green.http.client.HTTPConnection
                self.HTTPSConnection = \
                    eventlet.green.http.client.HTTPSConnection
                self.HTTPException = eventlet.green.http.client.HTTPException
            except ImportError:
                eventlet = False
        if not eventlet:
            import http.client
            self.HTTPConnection = http.client.HTTPConnection
            self.HTTPSConnection = http.client.HTTPSConnection
            self.HTTPException = http.client.HTTPException
        self.transport_errors = (OSError, self.HTTPException)

    def _connect(self, url):
        parsed = parse.urlsplit(url)
        http_proxy_parsed = \
            parse.urlsplit(self.http_proxy) if self.http_proxy else None
        netloc = (http_proxy_parsed if self.http_proxy else parsed).netloc
        if parsed.scheme == 'http':
            self.verbose('Establishing HTTP connection to %s', netloc)
            conn = self.HTTPConnection(netloc)
        elif parsed.scheme == 'https':
            self.verbose('Establishing HTTPS connection to %s', netloc)
            conn = self.HTTPSConnection(netloc)
        else:
            raise TransportError(
                'Cannot handle protocol scheme %s for url %s' %
                (parsed.scheme, repr(url)))
        if self.http_proxy:
            self.verbose(
                'Setting tunnelling to %s:%s', parsed.hostname, parsed.port)
            conn.set_tunnel(parsed.hostname, parsed.port)
        return parsed, conn

    def _verbose_headers(self, titled_headers):
        return '  '.join(
            '%s: %s' % (k, '<masked>' if k.lower() in utils.SECRET_HEADERS
                        else v)
            for k, v in sorted(utils.header_pairs(titled_headers)))

    def _send_file(self, contents, writer):
        chunk = contents.read(self.chunk_size)
        while chunk:
            writer.write(chunk)
            chunk = contents.read(self.chunk_size)

    def request(self, method, url, headers, contents=None, func=None):
        """
        See :py:func:`ucloudstorage.client.client.Client.request`
        """
        func = func or self._guarded(utils.read_response)
        parsed, conn = self._connect(url)
        path = parsed.path or '/'
        if parsed.query:
            path += '?' + parsed.query
        titled_headers = {'User-Agent': self.user_agent}
        if headers:
            titled_headers.update(
                (k.title(), v) for k, v in headers.items())
        if isinstance(contents, str):
            contents = contents.encode('utf8')
        body = None
        write_func = None
        if isinstance(contents, bytes):
            body = contents
            if method not in self.no_content_methods or body:
                titled_headers['Content-Length'] = str(len(body))
        elif hasattr(contents, 'read'):
            write_func = lambda writer: self._send_file(contents, writer)
        elif callable(contents):
            write_func = contents
        chunked = False
        if write_func and 'Content-Length' not in titled_headers:
            chunked = True
            titled_headers['Transfer-Encoding'] = 'chunked'
        self.verbose(
            '> %s %s %s', method, url, self._verbose_headers(titled_headers))
        try:
            conn.putrequest(method, path)
            for h, v in sorted(utils.header_pairs(titled_headers)):
                conn.putheader(h, v)
            if write_func:
                conn.endheaders()
                writer = BodyWriter(conn, chunked)
                write_func(writer)
                writer.close()
            else:
                conn.endheaders(body or None)
            resp = conn.getresponse()
        except (OSError, self.HTTPException) as err:
            conn.close()
            raise TransportError(
                '%s %s failed: %s %s' % (method, url, type(err), err)) \
                from err
        except Exception:
            conn.close()
            raise
        self.verbose('< %s %s', resp.status, resp.reason)
        try:
            return func(resp)
        finally:
            resp.close()
            conn.close()
