"""
Contains a CLICommand for authenticating and outputting the session
that results.

Uses the following from :py:class:`ucloudstorage.cli.context.CLIContext`:

===============  ===================================================
client_manager   For connecting to the storage service.
io_manager       For directing output.
new_token        True if a fresh token should be asked for.
===============  ===================================================
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
import time

from ucloudstorage.cli.command import NO_CREDENTIALS, CLICommand, ReturnCode


def cli_auth(context):
    """
    Authenticates and then outputs the resulting information.

    See :py:mod:`ucloudstorage.cli.auth` for context usage information.

    See :py:class:`CLIAuth` for more information.
    """
    if not context.client_manager:
        raise ReturnCode(NO_CREDENTIALS)
    with context.client_manager.with_client() as client:
        session = client.authenticate(new_token=bool(context.new_token))
        info = [
            ('Auth URL', client.auth_url),
            ('Auth User', client.auth_user)]
        if client.account_name:
            info.append(('Account', client.account_name))
        info.append(('Storage URL', session.storage_url))
        if client.account_url:
            info.append(('Account URL', client.account_url))
        info.append(('Auth Token', session.auth_token))
        info.append((
            'Token Expires',
            time.strftime(
                '%Y-%m-%d %H:%M:%S UTC',
                time.gmtime(session.auth_token_expires))))
    with context.io_manager.with_stdout() as fp:
        fmt = '%%-%ds %%s\n' % (max(len(t) for t, v in info) + 1)
        for t, v in info:
            fp.write(fmt % (t + ':', v))
        fp.flush()


class CLIAuth(CLICommand):
    """
    A CLICommand that authenticates and then outputs the resulting
    information.

    See the output of ``ucloudstorage help auth`` for more information.
    """

    def __init__(self, cli):
        super(CLIAuth, self).__init__(
            cli, 'auth', max_args=0, usage="""
Usage: %prog [main_options] auth [options]

For help on [main_options] run %prog with no args.

Authenticates and then outputs the resulting information.

Possible Output Values:

    Auth URL       The URL of the auth service.
    Auth User      The user authenticated as.
    Account        The account part of an account:user auth user.
    Storage URL    The URL to use for storage as reported by the auth
                   service.
    Account URL    The URL used for account and user management, derived
                   from the storage URL and the account.
    Auth Token     The auth token to use as reported by the auth service.
    Token Expires  When the auth token stops being accepted.

Example Output:

Auth URL:      https://api.ucloudbiz.olleh.com/storage/v1/auth
Auth User:     myaccount:myuser
Account:       myaccount
Storage URL:   https://ssproxy.ucloudbiz.olleh.com/v1/AUTH_0123abcd
Account URL:   https://ssproxy.ucloudbiz.olleh.com/auth/v2/myaccount
Auth Token:    AUTH_tk0123456789abcdef0123456789abcdef
Token Expires: 2013-06-01 12:00:00 UTC
            """.strip())
        self.option_parser.add_option(
            '--new-token', dest='new_token', action='store_true',
            help='Asks the auth service for a new token instead of any '
                 'still valid one it may have issued already.')

    def __call__(self, args):
        options, args, context = self.parse_args_and_create_context(args)
        context.new_token = options.new_token
        return cli_auth(context)
