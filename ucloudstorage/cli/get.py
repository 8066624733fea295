"""
Contains a CLICommand that can issue GET requests.

Uses the following from :py:class:`ucloudstorage.cli.context.CLIContext`:

=======================  ============================================
client_manager           For connecting to the storage service.
headers                  A dict of headers to send.
ignore_404               True if 404s should be silently ignored.
io_manager               For directing output.
limit                    The most listing items to output.
marker                   The listing starts after this item name.
output                   The path to write object contents to; by
                         default they go to standard output.
query                    A dict of query parameters to send.
refresh_within           Authenticate first if the token expires
                         sooner than this many seconds.
=======================  ============================================
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
from ucloudstorage.cli.command import CLICommand, ReturnCode, \
    split_path, with_session
from ucloudstorage.client.errors import ListingStop


def _listing_query(context):
    query = dict(context.query or {})
    if context.marker:
        query['marker'] = context.marker
    if context.limit:
        query['limit'] = min(context.limit, 512)
    return query


def _listing_callback(context, fp):
    written = [0]

    def callback(name):
        fp.write(name)
        fp.write('\n')
        written[0] += 1
        if context.limit and written[0] >= context.limit:
            raise ListingStop()

    return callback


def cli_get_account_listing(context):
    """
    Outputs the container names of the storage account, one per line,
    following listing markers until the listing is exhausted or the
    limit reached.

    See :py:mod:`ucloudstorage.cli.get` for context usage information.

    See :py:class:`CLIGet` for more information.
    """
    with context.io_manager.with_stdout() as fp:
        with with_session(context) as client:
            status, reason = client.read_storage_container_names(
                _listing_callback(context, fp), query=_listing_query(context),
                headers=context.headers)
        fp.flush()
    if status // 100 != 2:
        if status == 404 and context.ignore_404:
            return
        raise ReturnCode('listing account: %s %s' % (status, reason))


def cli_get_container_listing(context, container):
    """
    Outputs the object names of the container, one per line, following
    listing markers until the listing is exhausted or the limit
    reached.

    See :py:mod:`ucloudstorage.cli.get` for context usage information.

    See :py:class:`CLIGet` for more information.
    """
    with context.io_manager.with_stdout() as fp:
        with with_session(context) as client:
            status, reason = client.read_container_object_names(
                container, _listing_callback(context, fp),
                query=_listing_query(context), headers=context.headers)
        fp.flush()
    if status // 100 != 2:
        if status == 404 and context.ignore_404:
            return
        raise ReturnCode(
            'listing container %r: %s %s' % (container, status, reason))


def cli_get(context, path=None):
    """
    Performs a GET on the item (storage account, container, or object).
    Listings are output one name per line; object contents are copied
    to the output as they arrive.

    See :py:mod:`ucloudstorage.cli.get` for context usage information.

    See :py:class:`CLIGet` for more information.
    """
    container, obj = split_path(path)
    if not container:
        return cli_get_account_listing(context)
    if not obj:
        return cli_get_container_listing(context, container)

    def copy_contents(response):
        if response.status // 100 != 2:
            response.read()
            return response.status, response.reason
        with context.io_manager.with_binary_stdout(context.output) as fp:
            chunk = response.read(65536)
            while chunk:
                fp.write(chunk)
                chunk = response.read(65536)
        return response.status, response.reason

    with with_session(context) as client:
        status, reason = client.read_object(
            container, obj, headers=context.headers, query=context.query,
            func=copy_contents)
    if status // 100 != 2:
        if status == 404 and context.ignore_404:
            return
        raise ReturnCode(
            'getting object %r: %s %s' %
            ('%s/%s' % (container, obj), status, reason))


class CLIGet(CLICommand):
    """
    A CLICommand that can issue GET requests.

    See the output of ``ucloudstorage help get`` for more information.
    """

    def __init__(self, cli):
        super(CLIGet, self).__init__(
            cli, 'get', max_args=1, usage="""
Usage: %prog [main_options] get [options] [path]

For help on [main_options] run %prog with no args.

Outputs the resulting contents from a GET request of the [path] given. If no
[path] is given, the container names of the storage account are listed;
for a container, its object names are listed. Listings follow markers
until every name is output.""".strip())
        self.add_header_and_query_options()
        self.option_parser.add_option(
            '-l', '--limit', dest='limit', type='int',
            help='For listings, the most names to output. Without this '
                 'option, all names are output, even if it requires several '
                 'requests to gather them.')
        self.option_parser.add_option(
            '-m', '--marker', dest='marker',
            help='For listings, the names output will begin with the name '
                 'just after the MARKER given (note: the marker does not '
                 'have to actually exist).')
        self.option_parser.add_option(
            '-o', '--output', dest='output', metavar='PATH',
            help='For objects, indicates where to send the contents; '
                 'default is standard output.')
        self.option_parser.add_option(
            '--ignore-404', dest='ignore_404', action='store_true',
            help='Ignores 404 Not Found responses. Nothing will be output, '
                 'but the exit code will be 0 instead of 1.')

    def __call__(self, args):
        options, args, context = self.parse_args_and_create_context(args)
        context.limit = options.limit
        context.marker = options.marker
        context.output = options.output
        context.ignore_404 = options.ignore_404
        path = args.pop(0) if args else None
        return cli_get(context, path)
