"""
Contains tools for connecting to storage services.

For convenience, the following names are imported from submodules:

=====================  ====================================================
Client                 :py:class:`ucloudstorage.client.client.Client`
StandardClient         :py:class:`ucloudstorage.client.standardclient.StandardClient`
ClientManager          :py:class:`ucloudstorage.client.manager.ClientManager`
SessionInfo            :py:data:`ucloudstorage.client.client.SessionInfo`
StorageClientError     :py:class:`ucloudstorage.client.errors.StorageClientError`
TransportError         :py:class:`ucloudstorage.client.errors.TransportError`
AuthenticationError    :py:class:`ucloudstorage.client.errors.AuthenticationError`
NotAuthenticatedError  :py:class:`ucloudstorage.client.errors.NotAuthenticatedError`
ProtocolError          :py:class:`ucloudstorage.client.errors.ProtocolError`
MissingExpiryError     :py:class:`ucloudstorage.client.errors.MissingExpiryError`
ListingStop            :py:class:`ucloudstorage.client.errors.ListingStop`
=====================  ====================================================

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
# flake8: noqa
from ucloudstorage.client.client import Client, SessionInfo
from ucloudstorage.client.errors import AuthenticationError, ListingStop, \
    MissingExpiryError, NotAuthenticatedError, ProtocolError, \
    StorageClientError, TransportError
from ucloudstorage.client.manager import ClientManager
from ucloudstorage.client.standardclient import StandardClient
