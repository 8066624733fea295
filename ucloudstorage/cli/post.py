"""
Contains a CLICommand that can issue POST requests, usually to set or
remove metadata.

Uses the following from :py:class:`ucloudstorage.cli.context.CLIContext`:

===============  ====================================================
client_manager   For connecting to the storage service.
headers          A dict of headers to send.
meta             A list of (name, value) metadata items to set.
query            A dict of query parameters to send.
refresh_within   Authenticate first if the token expires sooner than
                 this many seconds.
remove_meta      A list of metadata names to remove.
===============  ====================================================
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
from ucloudstorage.client import utils


def meta_headers(header_func, meta, remove_meta):
    """
    Returns a dict of the metadata headers header_func names for the
    (name, value) items in meta and the names in remove_meta. Names may
    use dashes or underscores between words, as in ``color`` or
    ``last-backup``.
    """
    headers = {}
    for name, value in meta or []:
        headers[header_func(False, *name.replace('_', '-').split('-'))] = \
            value
    for name in remove_meta or []:
        headers[header_func(True, *name.replace('_', '-').split('-'))] = ''
    return headers


def cli_post(context, path=None):
    """
    Performs a POST on the item (storage account, container, or
    object).

    See :py:mod:`ucloudstorage.cli.post` for context usage information.

    See :py:class:`CLIPost` for more information.
    """
    container, obj = split_path(path)
    if not container:
        header_func = utils.account_meta_header
    elif not obj:
        header_func = utils.container_meta_header
    else:
        header_func = utils.object_meta_header
    headers = dict(context.headers or {})
    headers.update(
        meta_headers(header_func, context.meta, context.remove_meta))
    with with_session(context) as client:
        if not container:
            status, reason, hdrs, contents = client.configure_storage(
                headers=headers, query=context.query)
            what = 'posting account'
        elif not obj:
            status, reason, hdrs, contents = client.configure_container(
                container, headers=headers, query=context.query)
            what = 'posting container %r' % container
        else:
            status, reason, hdrs, contents = client.configure_object(
                container, obj, headers=headers, query=context.query)
            what = 'posting object %r' % ('%s/%s' % (container, obj))
    if status // 100 != 2:
        raise ReturnCode('%s: %s %s' % (what, status, reason))


class CLIPost(CLICommand):
    """
    A CLICommand that can issue POST requests.

    See the output of ``ucloudstorage help post`` for more information.
    """

    def __init__(self, cli):
        super(CLIPost, self).__init__(
            cli, 'post', max_args=1, usage="""
Usage: %prog [main_options] post [options] [path]

For help on [main_options] run %prog with no args.

Issues a POST request of the [path] given. If no [path] is given, a POST
request on the storage account is performed. Note that an object POST
replaces all of the object's metadata.""".strip())
        self.add_header_and_query_options()
        self.option_parser.add_option(
            '-m', '--meta', dest='meta', action='append',
            metavar='NAME:VALUE',
            help='Sets a metadata item, sending the X-Account-Meta-, '
                 'X-Container-Meta- or X-Object-Meta- header that matches '
                 'the [path]. This can be used multiple times. Example: '
                 '-m color:blue')
        self.option_parser.add_option(
            '-r', '--remove-meta', dest='remove_meta', action='append',
            metavar='NAME',
            help='Removes a metadata item from the storage account or '
                 'container. This can be used multiple times. Example: '
                 '-r color')

    def __call__(self, args):
        options, args, context = self.parse_args_and_create_context(args)
        context.meta = list(
            self.options_list_to_lowered_dict(options.meta).items())
        context.remove_meta = options.remove_meta
        path = args.pop(0) if args else None
        return cli_post(context, path)
