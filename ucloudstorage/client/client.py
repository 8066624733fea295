"""
Contains the base Client class for accessing storage services.
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
import collections
import http.client
from time import time

from ucloudstorage import VERSION
from ucloudstorage.client import utils
from ucloudstorage.client.errors import AuthenticationError, ListingStop, \
    MissingExpiryError, NotAuthenticatedError, ProtocolError, TransportError


AUTH_URL_STANDARD_KOR_CENTER = \
    'https://api.ucloudbiz.olleh.com/storage/v1/auth'
AUTH_URL_STANDARD_JPN = 'https://api.ucloudbiz.olleh.com/storage/v1/authjp'
AUTH_URL_LITE_KOR_HA = 'https://api.ucloudbiz.olleh.com/storage/v1/authlite'

QUERY_PARAM_LIMIT = 'limit'
QUERY_PARAM_MARKER = 'marker'
QUERY_PARAM_FORMAT = 'format'

HEADER_X_AUTH_USER = 'X-Auth-User'
HEADER_X_AUTH_KEY = 'X-Auth-Key'
HEADER_X_AUTH_NEW_TOKEN = 'X-Auth-New-Token'
HEADER_X_AUTH_TOKEN = 'X-Auth-Token'
HEADER_X_AUTH_TOKEN_EXPIRES = 'X-Auth-Token-Expires'
HEADER_X_STORAGE_URL = 'X-Storage-Url'
HEADER_X_AUTH_ADMIN_USER = 'X-Auth-Admin-User'
HEADER_X_AUTH_ADMIN_KEY = 'X-Auth-Admin-Key'
HEADER_X_AUTH_USER_KEY = 'X-Auth-User-Key'
HEADER_X_AUTH_USER_ADMIN = 'X-Auth-User-Admin'

#: The page size the listing helpers ask for unless told otherwise.
DEFAULT_LISTING_LIMIT = 512


#: What a successful authenticate established.
SessionInfo = collections.namedtuple(
    'SessionInfo', 'storage_url auth_token auth_token_expires')


class Client(object):
    """
    The base class for accessing storage services.

    The client holds the credentials it was created with and the
    session a successful :py:func:`authenticate` establishes. Every
    other operation needs that session and sends exactly one request,
    handing the raw response to the ``func`` given and returning
    whatever ``func`` returns. Without a ``func`` the operations return
    a tuple of (status, reason, headers, contents); see
    :py:func:`ucloudstorage.client.utils.read_response`.

    Status codes are never interpreted by the operations themselves;
    that is up to ``func`` or the caller.

    A client is not safe to share between threads; use one per thread,
    for instance with :py:class:`ucloudstorage.client.manager.ClientManager`.

    For a concrete example, see
    :py:class:`ucloudstorage.client.standardclient.StandardClient`.

    To form a new concrete subclass, you would need to implement
    :py:func:`request`.

    :param auth_url: The URL to the auth system.
    :param auth_user: The user to authenticate as. If given as
        ``account:user`` the account part also names the account for
        the account and user management calls.
    :param auth_key: The key to use when authenticating.
    :param verbose: Set to a ``func(msg, *args)`` that will be called
        with debug messages. Constructing a string for output can be
        done with msg % args.
    :param verbose_id: Set to a string you wish verbose messages to
        be prepended with; can help in identifying output when
        multiple Clients are in use.
    """

    #: The exceptions that mean the network failed while a response
    #: was read; concrete clients add their own transport's classes.
    transport_errors = (OSError, http.client.HTTPException)

    def __init__(self, auth_url=None, auth_user=None, auth_key=None,
                 verbose=None, verbose_id=''):
        if not auth_url:
            raise ValueError('No Auth URL has been provided.')
        if not auth_user:
            raise ValueError('No Auth User has been provided.')
        if not auth_key:
            raise ValueError('No Auth Key has been provided.')
        #: The string to use for the User-Agent request header.
        self.user_agent = 'ucloudstorage v%s' % VERSION
        self.auth_url = auth_url
        self.auth_user = auth_user
        self.auth_key = auth_key
        self.account_name = None
        if ':' in auth_user:
            self.account_name = auth_user.split(':', 1)[0]
        if verbose:
            self.verbose = lambda m, *a, **k: verbose(
                self._verbose_id + m, *a, **k)
        else:
            self.verbose = lambda *a, **k: None
        self.verbose_id = verbose_id
        self._verbose_id = self.verbose_id
        if self._verbose_id:
            self._verbose_id += ' '
        self.storage_url = None
        self.account_url = None
        self.auth_token = None
        self.auth_token_expires = None

    def request(self, method, url, headers, contents=None, func=None):
        """
        Performs a single HTTP request.

        :param method: The request method ('GET', 'HEAD', etc.)
        :param url: The full URL, query string included.
        :param headers: A dict of request headers and values; a list
            value sends the header once per item.
        :param contents: The body of the request. May be a bytes or str,
            a file-like object, or a ``func(writer)`` that writes the
            body with ``writer.write(data)`` and returns when done.
        :param func: Called with the response; its return value is
            returned. Default:
            :py:func:`ucloudstorage.client.utils.read_response`, with
            network failures while reading the body raised as
            TransportError. A func given is called as is.
        :returns: Whatever func returned.
        :raises ucloudstorage.client.errors.TransportError: if the
            request could not be sent or no response was received.
        """
        raise Exception('request method not implemented')

    def _read_failure(self, response, err):
        return TransportError(
            'Reading %s %s response failed: %s %s' %
            (response.status, response.reason, type(err), err))

    def _guarded(self, func):
        """
        Wraps one of the library's own response functions so that
        network failures while it reads the body raise TransportError.
        """
        def guarded(response):
            try:
                return func(response)
            except self.transport_errors as err:
                raise self._read_failure(response, err) from err
        return guarded

    def _response_lines(self, response):
        try:
            for line in utils.response_lines(response):
                yield line
        except self.transport_errors as err:
            raise self._read_failure(response, err) from err

    def authenticate(self, new_token=False):
        """
        Exchanges the credentials for a token and storage URL.

        The session is replaced only once the whole response has been
        accepted; on any failure it is left as it was.

        :param new_token: If set True, asks the auth system to issue a
            fresh token instead of returning a still valid one.
        :returns: A :py:data:`SessionInfo`.
        :raises ucloudstorage.client.errors.AuthenticationError: on a
            non-2xx response or when the storage URL or token is
            missing.
        :raises ucloudstorage.client.errors.ProtocolError: when the
            token lifetime is missing or not a whole number of
            seconds. A missing one raises
            :py:class:`ucloudstorage.client.errors.MissingExpiryError`,
            which is an AuthenticationError too.
        :raises ucloudstorage.client.errors.TransportError: if the
            network failed, reading the response included.
        """
        headers = {
            HEADER_X_AUTH_USER: self.auth_user,
            HEADER_X_AUTH_KEY: self.auth_key}
        if new_token:
            headers[HEADER_X_AUTH_NEW_TOKEN] = 'true'
        self.verbose('Attempting auth with %s', self.auth_url)
        storage_url, auth_token, auth_token_expires = self.request(
            'GET', self.auth_url, headers,
            func=self._guarded(self._auth_response))
        account_url = None
        if self.account_name:
            account_url = utils.account_url(storage_url, self.account_name)
        (self.storage_url, self.account_url, self.auth_token,
         self.auth_token_expires) = (
            storage_url, account_url, auth_token, auth_token_expires)
        return SessionInfo(storage_url, auth_token, auth_token_expires)

    def _auth_response(self, response):
        status = response.status
        reason = response.reason
        if status // 100 != 2:
            raise AuthenticationError(
                'Auth failure %s %s' % (status, reason), status, reason)
        hdrs = utils.headers_to_dict(response.getheaders())
        response.read()
        storage_url = hdrs.get('x-storage-url')
        if not storage_url:
            raise AuthenticationError(
                'No x-storage-url header in auth response', status, reason)
        auth_token = hdrs.get('x-auth-token')
        if not auth_token:
            raise AuthenticationError(
                'No x-auth-token header in auth response', status, reason)
        expires = hdrs.get('x-auth-token-expires')
        if expires is None:
            raise MissingExpiryError(
                'No x-auth-token-expires header in auth response',
                status, reason)
        try:
            seconds = int(expires)
        except (TypeError, ValueError):
            raise ProtocolError(
                'Invalid x-auth-token-expires header %r' % (expires,))
        if seconds < 0:
            raise ProtocolError(
                'Negative x-auth-token-expires header %r' % (expires,))
        return storage_url, auth_token, time() + seconds

    def session_info(self):
        """
        Returns the current :py:data:`SessionInfo` or None if there is
        no session.
        """
        if self.storage_url is None:
            return None
        return SessionInfo(
            self.storage_url, self.auth_token, self.auth_token_expires)

    def is_valid(self, until=None):
        """
        Returns True if there is a session whose token does not expire
        before the until time (seconds since the epoch, default: now).
        """
        if until is None:
            until = time()
        return (self.storage_url is not None and
                self.auth_token is not None and
                self.auth_token_expires is not None and
                self.auth_token_expires >= until)

    def is_valid_for(self, seconds):
        """
        Returns True if the session stays valid for at least the given
        number of seconds from now.
        """
        return self.is_valid(time() + seconds)

    def invalidate(self):
        """
        Discards the session; the credentials are kept so
        :py:func:`authenticate` can be called again.
        """
        self.storage_url = None
        self.account_url = None
        self.auth_token = None
        self.auth_token_expires = None

    def refresh(self, within=0, new_token=False):
        """
        Authenticates only if the session will not be valid for another
        within seconds. Nothing calls this automatically; call it
        before a burst of requests.

        :returns: The new :py:data:`SessionInfo`, or None if the
            session was already good.
        """
        if self.is_valid(time() + within):
            return None
        self.verbose('Session expiring within %ss; refreshing.', within)
        return self.authenticate(new_token=new_token)

    def _require(self, value, what):
        if not value:
            raise ValueError('No %s name was given.' % what)

    def _storage_request(self, method, url_func, args, query, headers,
                         contents=None, func=None):
        if not self.storage_url or not self.auth_token:
            raise NotAuthenticatedError(
                'Not authenticated; %s needs a storage URL and token.' %
                method)
        url = url_func(self.storage_url, *args, query=query)
        return self.request(
            method, url, utils.token_headers(headers, self.auth_token),
            contents=contents, func=func)

    def _account_request(self, method, url_func, args, query, headers,
                         contents=None, func=None):
        if not self.storage_url or not self.auth_token:
            raise NotAuthenticatedError(
                'Not authenticated; %s needs an account URL.' % method)
        if not self.account_url:
            raise ValueError(
                'No account name in auth user %r; expected account:user.' %
                self.auth_user)
        url = url_func(self.account_url, *args, query=query)
        return self.request(
            method, url,
            utils.admin_headers(headers, self.auth_user, self.auth_key),
            contents=contents, func=func)

    def peek_storage(self, query=None, headers=None, func=None):
        """
        HEADs the storage account. Useful response headers are
        x-account-bytes-used, x-account-container-count,
        x-account-object-count and any x-account-meta- headers.

        :param query: A dict of query values to send on the query
            string of the request.
        :param headers: Additional headers to send with the request.
        :param func: Called with the response; see :py:func:`request`.
        """
        return self._storage_request(
            'HEAD', utils.storage_request_url, (),
            query, headers, func=func)

    def read_storage(self, query=None, headers=None, func=None):
        """
        GETs the storage account, which lists its containers. Send
        ``Accept: text/plain`` for one name per line, or application/json
        or application/xml for the detailed formats.

        See :py:func:`peek_storage` for the parameters.
        """
        return self._storage_request(
            'GET', utils.storage_request_url, (),
            query, headers, func=func)

    def configure_storage(self, query=None, headers=None, func=None):
        """
        POSTs the storage account, usually to set X-Account-Meta-xxx
        headers or remove them with X-Remove-Account-Meta-xxx headers.
        Metadata not mentioned is left untouched.

        See :py:func:`peek_storage` for the parameters.
        """
        return self._storage_request(
            'POST', utils.storage_request_url, (),
            query, headers, contents=b'', func=func)

    def peek_container(self, container, query=None, headers=None,
                       func=None):
        """
        HEADs the container. Useful response headers are
        x-container-bytes-used, x-container-object-count and any
        x-container-meta- headers.

        :param container: The name of the container.
        :param query: A dict of query values to send on the query
            string of the request.
        :param headers: Additional headers to send with the request.
        :param func: Called with the response; see :py:func:`request`.
        """
        self._require(container, 'container')
        return self._storage_request(
            'HEAD', utils.container_request_url, (container,),
            query, headers, func=func)

    def read_container(self, container, query=None, headers=None,
                       func=None):
        """
        GETs the container, which lists its objects.

        See :py:func:`peek_container` for the parameters.
        """
        self._require(container, 'container')
        return self._storage_request(
            'GET', utils.container_request_url, (container,),
            query, headers, func=func)

    def update_container(self, container, query=None, headers=None,
                         func=None):
        """
        PUTs the container, creating it if needed. Existing metadata
        not mentioned in the headers is left untouched, so this is safe
        to repeat.

        See :py:func:`peek_container` for the parameters.
        """
        self._require(container, 'container')
        return self._storage_request(
            'PUT', utils.container_request_url, (container,),
            query, headers, contents=b'', func=func)

    def configure_container(self, container, query=None, headers=None,
                            func=None):
        """
        POSTs the container, usually to set X-Container-Meta-xxx,
        X-Container-Read or X-Container-Write headers or remove them
        with their X-Remove- counterparts.

        See :py:func:`peek_container` for the parameters.
        """
        self._require(container, 'container')
        return self._storage_request(
            'POST', utils.container_request_url, (container,),
            query, headers, contents=b'', func=func)

    def delete_container(self, container, query=None, headers=None,
                         func=None):
        """
        DELETEs the container. The service refuses to delete a
        container that still holds objects.

        See :py:func:`peek_container` for the parameters.
        """
        self._require(container, 'container')
        return self._storage_request(
            'DELETE', utils.container_request_url, (container,),
            query, headers, func=func)

    def delete_container_status(self, container):
        """
        DELETEs the container and returns just the status code.
        """
        return self.delete_container(container, func=utils.status_code)

    def peek_object(self, container, obj, query=None, headers=None,
                    func=None):
        """
        HEADs the object.

        :param container: The name of the container.
        :param obj: The name of the object.
        :param query: A dict of query values to send on the query
            string of the request.
        :param headers: Additional headers to send with the request.
        :param func: Called with the response; see :py:func:`request`.
        """
        self._require(container, 'container')
        self._require(obj, 'object')
        return self._storage_request(
            'HEAD', utils.object_request_url, (container, obj),
            query, headers, func=func)

    def read_object(self, container, obj, query=None, headers=None,
                    func=None):
        """
        GETs the object. To stream the contents rather than have them
        read into memory, give a func that reads from the response.

        See :py:func:`peek_object` for the parameters.
        """
        self._require(container, 'container')
        self._require(obj, 'object')
        return self._storage_request(
            'GET', utils.object_request_url, (container, obj),
            query, headers, func=func)

    def update_object(self, container, obj, contents, query=None,
                      headers=None, func=None):
        """
        PUTs the object, creating or overwriting it. X-Object-Meta-xxx,
        Content-Type and ETag headers can be sent along.

        :param container: The name of the container.
        :param obj: The name of the object.
        :param contents: The contents of the object: a bytes or str, a
            file-like object with a read function, or a
            ``func(writer)`` that writes the contents with
            ``writer.write(data)``. The latter two are sent with
            chunked transfer encoding unless a Content-Length header
            is given.
        :param query: A dict of query values to send on the query
            string of the request.
        :param headers: Additional headers to send with the request.
        :param func: Called with the response; see :py:func:`request`.
        """
        self._require(container, 'container')
        self._require(obj, 'object')
        if contents is None:
            contents = b''
        return self._storage_request(
            'PUT', utils.object_request_url, (container, obj),
            query, headers, contents=contents, func=func)

    def configure_object(self, container, obj, query=None, headers=None,
                         func=None):
        """
        POSTs the object to replace its metadata. Unlike with storage
        and container POSTs, any metadata not sent is removed.

        See :py:func:`peek_object` for the parameters.
        """
        self._require(container, 'container')
        self._require(obj, 'object')
        return self._storage_request(
            'POST', utils.object_request_url, (container, obj),
            query, headers, contents=b'', func=func)

    def delete_object(self, container, obj, query=None, headers=None,
                      func=None):
        """
        DELETEs the object.

        See :py:func:`peek_object` for the parameters.
        """
        self._require(container, 'container')
        self._require(obj, 'object')
        return self._storage_request(
            'DELETE', utils.object_request_url, (container, obj),
            query, headers, func=func)

    def read_account(self, query=None, headers=None, func=None):
        """
        GETs the account from the admin endpoint, listing its users.
        The auth user and key are sent as the admin credentials.

        :param query: A dict of query values to send on the query
            string of the request.
        :param headers: Additional headers to send with the request.
        :param func: Called with the response; see :py:func:`request`.
        """
        return self._account_request(
            'GET', utils.build_url, (),
            query, headers, func=func)

    def read_user(self, user, query=None, headers=None, func=None):
        """
        GETs a user of the account.

        :param user: The name of the user.

        See :py:func:`read_account` for the other parameters.
        """
        self._require(user, 'user')
        return self._account_request(
            'GET', utils.user_request_url, (user,),
            query, headers, func=func)

    def update_user(self, user, user_key, user_admin=False, query=None,
                    headers=None, func=None):
        """
        PUTs a user of the account, creating it or changing its key.

        :param user: The name of the user.
        :param user_key: The key the user will authenticate with.
        :param user_admin: If set True, the user is made an account
            admin.

        See :py:func:`read_account` for the other parameters.
        """
        self._require(user, 'user')
        if not user_key:
            raise ValueError('No user key was given.')
        headers = dict(headers or {})
        headers[HEADER_X_AUTH_USER_KEY] = user_key
        if user_admin:
            headers[HEADER_X_AUTH_USER_ADMIN] = 'true'
        return self._account_request(
            'PUT', utils.user_request_url, (user,),
            query, headers, contents=b'', func=func)

    def delete_user(self, user, query=None, headers=None, func=None):
        """
        DELETEs a user of the account.

        See :py:func:`read_user` for the parameters.
        """
        self._require(user, 'user')
        return self._account_request(
            'DELETE', utils.user_request_url, (user,),
            query, headers, func=func)

    def read_groups(self, query=None, headers=None, func=None):
        """
        GETs the account's groups.

        See :py:func:`read_account` for the parameters.
        """
        return self._account_request(
            'GET', utils.groups_request_url, (),
            query, headers, func=func)

    def read_storage_container_names(self, callback, query=None,
                                     headers=None, func=None, more=None,
                                     max_pages=None):
        """
        Lists every container name in the storage account, calling
        callback(name) for each, following markers page by page.

        :param callback: Called with each name, in listing order.
            Raise :py:class:`ucloudstorage.client.errors.ListingStop`
            to end the listing early.
        :param query: A dict of query values; limit defaults to 512 and
            a marker, if given, is where the listing starts.
        :param headers: Additional headers to send; Accept is always
            text/plain.
        :param func: Turns a page response into an iterable of names.
            Default: :py:func:`ucloudstorage.client.utils.response_lines`,
            which yields nothing for a non-2xx response.
        :param more: Called with each page response once its names are
            consumed; the listing continues only while it returns
            True. Default: always continue.
        :param max_pages: The most pages to request. Default: no limit.
        :returns: A tuple of (status, reason) of the last page
            requested.
        :raises ucloudstorage.client.errors.ProtocolError: if a page
            does not advance past the marker it was asked for.
        """
        return self._read_names(
            lambda q, h, f: self.read_storage(query=q, headers=h, func=f),
            callback, query, headers, func, more, max_pages)

    def read_container_object_names(self, container, callback, query=None,
                                    headers=None, func=None, more=None,
                                    max_pages=None):
        """
        Lists every object name in the container, calling
        callback(name) for each, following markers page by page.

        :param container: The name of the container.

        See :py:func:`read_storage_container_names` for the rest.
        """
        self._require(container, 'container')
        return self._read_names(
            lambda q, h, f: self.read_container(
                container, query=q, headers=h, func=f),
            callback, query, headers, func, more, max_pages)

    def _read_names(self, read, callback, query, headers, func, more,
                    max_pages):
        query = dict(query or {})
        query.setdefault(QUERY_PARAM_LIMIT, DEFAULT_LISTING_LIMIT)
        headers = utils.replace_headers(headers, {'Accept': 'text/plain'})
        func = func or self._response_lines
        marker = query.get(QUERY_PARAM_MARKER)
        if isinstance(marker, (list, tuple)):
            marker = marker[0] if marker else None
        if marker is not None:
            marker = str(marker)

        def page(response):
            last = None
            try:
                for name in func(response):
                    last = name
                    callback(name)
                proceed = last is not None and (
                    more is None or bool(more(response)))
            except ListingStop:
                return response.status, response.reason, last, False
            return response.status, response.reason, last, proceed

        pages = 0
        while True:
            if marker is not None:
                query[QUERY_PARAM_MARKER] = marker
            self.verbose('Listing page %s after marker %r', pages + 1, marker)
            status, reason, last, proceed = read(query, headers, page)
            pages += 1
            if not proceed:
                break
            if last == marker:
                raise ProtocolError(
                    'Listing did not advance past marker %r' % marker)
            if max_pages and pages >= max_pages:
                self.verbose('Stopping listing after %s pages', pages)
                break
            marker = last
        return status, reason
