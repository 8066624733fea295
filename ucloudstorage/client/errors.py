"""
Contains the exceptions raised by the storage clients.
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


class StorageClientError(Exception):
    """
    Base class for every error the storage clients raise themselves.
    """


class TransportError(StorageClientError):
    """
    The request could not be sent or its response could not be
    obtained; the underlying exception is available as
    ``__cause__``.
    """


class AuthenticationError(StorageClientError):
    """
    The auth service refused the credentials or answered without the
    headers needed to establish a session.

    :param msg: The text describing the failure.
    :param status: The HTTP status of the auth response, if any.
    :param reason: The HTTP reason of the auth response, if any.
    """

    def __init__(self, msg, status=None, reason=None):
        super(AuthenticationError, self).__init__(msg)
        self.status = status
        self.reason = reason


class NotAuthenticatedError(StorageClientError):
    """
    An operation needing a session was called before a successful
    authenticate, or after invalidate.
    """


class ProtocolError(StorageClientError):
    """
    The service answered with a header or listing that breaks the
    protocol, such as an unparsable token lifetime.
    """


class MissingExpiryError(ProtocolError, AuthenticationError):
    """
    The auth service answered without an X-Auth-Token-Expires header,
    so no session could be established; either base class catches it.
    """


class ListingStop(Exception):
    """
    Raise this from a listing callback to stop the listing early.

    This is a control signal rather than a failure, so it is not a
    :py:class:`StorageClientError`; the listing helpers swallow it and
    return normally.
    """
