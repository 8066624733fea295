"""
Contains the CLI class that handles the ``ucloudstorage`` command line.
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
import importlib
import os
import sys
import textwrap

from ucloudstorage import VERSION
from ucloudstorage.cli.command import ReturnCode
from ucloudstorage.cli.context import CLIContext
from ucloudstorage.cli.iomanager import IOManager
from ucloudstorage.cli.optionparser import OptionParser
from ucloudstorage.client.client import AUTH_URL_LITE_KOR_HA, \
    AUTH_URL_STANDARD_JPN, AUTH_URL_STANDARD_KOR_CENTER
from ucloudstorage.client.errors import StorageClientError
from ucloudstorage.client.manager import ClientManager
from ucloudstorage.client.standardclient import StandardClient


#: The list of CLICommand classes the CLI offers, as module.Class
#: paths.
COMMANDS = [
    'ucloudstorage.cli.account.CLIAccount',
    'ucloudstorage.cli.auth.CLIAuth',
    'ucloudstorage.cli.delete.CLIDelete',
    'ucloudstorage.cli.get.CLIGet',
    'ucloudstorage.cli.head.CLIHead',
    'ucloudstorage.cli.help.CLIHelp',
    'ucloudstorage.cli.post.CLIPost',
    'ucloudstorage.cli.put.CLIPut']

#: Short names accepted in place of a full auth URL.
AUTH_URL_ALIASES = {
    'kor': AUTH_URL_STANDARD_KOR_CENTER,
    'jpn': AUTH_URL_STANDARD_JPN,
    'lite': AUTH_URL_LITE_KOR_HA}


def _import_command(path):
    module_name, class_name = path.rsplit('.', 1)
    return getattr(importlib.import_module(module_name), class_name)


class CLI(object):
    """
    Handles the ``ucloudstorage`` command line. After construction,
    calling the instance with the command line args runs it and returns
    the exit code.

    The commands are built from :py:data:`COMMANDS` unless a different
    list is given.

    :param commands: A list of CLICommand classes or module.Class
        paths.
    """

    def __init__(self, commands=None):
        #: The :py:class:`ucloudstorage.cli.context.CLIContext` each
        #: command's context is copied from.
        self.context = CLIContext()
        self.context.io_manager = IOManager()
        #: The main :py:class:`ucloudstorage.cli.optionparser.OptionParser`.
        self.option_parser = OptionParser(
            version='%prog ' + VERSION,
            usage="""
Usage: %prog [options] <command> [command_options] [args]

NOTE: Be sure any names given are url encoded if necessary. For instance, an
object named 4&4.txt must be given as 4%264.txt.""".strip(),
            io_manager=self.context.io_manager)
        self.option_parser.add_option(
            '-A', '--auth-url', dest='auth_url',
            default=os.environ.get('UCLOUDSTORAGE_AUTH_URL', 'kor'),
            metavar='URL',
            help='URL to auth system, or one of the short names kor '
                 '(standard, Korea central), jpn (standard, Japan) or lite '
                 '(lite, Korea). Default: kor. You can also set this with '
                 'the environment variable UCLOUDSTORAGE_AUTH_URL.')
        self.option_parser.add_option(
            '-U', '--auth-user', dest='auth_user',
            default=os.environ.get('UCLOUDSTORAGE_AUTH_USER', ''),
            metavar='USER',
            help='User name for auth system, example: user@example.com '
                 'You can also set this with the environment variable '
                 'UCLOUDSTORAGE_AUTH_USER.')
        self.option_parser.add_option(
            '-K', '--auth-key', dest='auth_key',
            default=os.environ.get('UCLOUDSTORAGE_AUTH_KEY', ''),
            metavar='KEY',
            help='Key for auth system. You can also set this with the '
                 'environment variable UCLOUDSTORAGE_AUTH_KEY.')
        self.option_parser.add_option(
            '-P', '--proxy', dest='proxy',
            default=os.environ.get('UCLOUDSTORAGE_PROXY', ''),
            metavar='URL',
            help='Uses the given tunnelling HTTP proxy URL. You can also set '
                 'this with the environment variable UCLOUDSTORAGE_PROXY.')
        self.option_parser.add_option(
            '--refresh-within', dest='refresh_within', type='int',
            default=60, metavar='SECONDS',
            help='Authenticates again before a command if the token would '
                 'expire within this many seconds. Default: 60')
        self.option_parser.add_option(
            '--eventlet', dest='eventlet', action='store_true',
            help='Uses Eventlet, if installed. This is disabled by default.')
        self.option_parser.add_option(
            '-v', '--verbose', dest='verbose', action='store_true',
            help='Causes output to standard error indicating actions being '
                 'taken. The auth key is never output.')
        #: A dict of command names to CLICommand instances.
        self.commands = {}
        for command in commands or COMMANDS:
            if isinstance(command, str):
                command = _import_command(command)
            command = command(self)
            self.commands[command.name] = command
        self.option_parser.raw_epilog = self._commands_epilog()

    def _commands_epilog(self):
        epilog = 'Commands:\n'
        for name in sorted(self.commands):
            lines = self.commands[name].option_parser.get_usage().split('\n')
            main_line = '  ' + lines[0].split(']', 1)[1].strip()
            lines = lines[4:]
            for index, line in enumerate(lines):
                if not line:
                    lines = lines[:index]
                    break
            if len(main_line) < 24:
                initial_indent = main_line + ' ' * (24 - len(main_line))
            else:
                epilog += main_line + '\n'
                initial_indent = ' ' * 24
            epilog += textwrap.fill(
                ' '.join(lines), width=79, initial_indent=initial_indent,
                subsequent_indent=' ' * 24) + '\n'
        return epilog

    def __call__(self, args=None, stdin=None, stdout=None, stderr=None):
        """
        Runs the command line given and returns the exit code.

        :param args: The command line args, not including the program
            name. Default: sys.argv[1:]
        :param stdin: The file-like object to read input from.
        :param stdout: The file-like object to send output to.
        :param stderr: The file-like object to send error output to.
        """
        if args is None:
            args = sys.argv[1:]
        self.context.io_manager = IOManager(
            stdin=stdin, stdout=stdout, stderr=stderr)
        self.option_parser.io_manager = self.context.io_manager
        for command in self.commands.values():
            command.option_parser.io_manager = self.context.io_manager
        self.option_parser.disable_interspersed_args()
        try:
            options, args = self.option_parser.parse_args(args)
        finally:
            self.option_parser.enable_interspersed_args()
        if self.option_parser.error_encountered:
            return 1
        if options.version:
            self.option_parser.print_version()
            return 1
        if not args or options.help:
            self.option_parser.print_help()
            return 1
        if options.verbose:
            self.context.verbose = self._verbose
        else:
            self.context.verbose = None
        self.context.refresh_within = options.refresh_within
        self.context.client_manager = None
        if options.auth_user and options.auth_key:
            self.context.client_manager = ClientManager(
                StandardClient,
                auth_url=AUTH_URL_ALIASES.get(
                    options.auth_url, options.auth_url),
                auth_user=options.auth_user,
                auth_key=options.auth_key,
                http_proxy=options.proxy or None,
                eventlet=bool(options.eventlet),
                verbose=self.context.verbose)
        command_name = args.pop(0)
        command = self.commands.get(command_name)
        if not command:
            self.option_parser.print_help()
            return 1
        try:
            command(args)
        except ReturnCode as err:
            if err.text:
                with self.context.io_manager.with_stderr() as fp:
                    fp.write(command.name)
                    fp.write(': ')
                    fp.write(str(err.text))
                    fp.write('\n')
                    fp.flush()
            return err.code
        except (StorageClientError, OSError) as err:
            with self.context.io_manager.with_stderr() as fp:
                fp.write('%s: %s\n' % (command.name, err))
                fp.flush()
            return 1
        return 0

    def _verbose(self, msg, *args):
        with self.context.io_manager.with_stderr() as fp:
            fp.write('VERBOSE ')
            fp.write(msg % args if args else msg)
            fp.write('\n')
            fp.flush()


def main():
    """
    Runs the ``ucloudstorage`` command line and exits with its code.
    """
    sys.exit(CLI()())
