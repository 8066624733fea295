"""
Contains an extended optparse.OptionParser that writes to the
streams the CLI was given and never exits the process on its own.
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
import optparse


class OptionParser(optparse.OptionParser):
    """
    Extended optparse.OptionParser that outputs through an
    io_manager, supports raw_epilog output and an error prefix, and
    instead of exiting on error sets error_encountered.

    :param io_manager: The
        :py:class:`ucloudstorage.cli.iomanager.IOManager` whose stdout
        and stderr receive help and error output.
    :param raw_epilog: Output just after the standard print_help
        output, unformatted.
    :param error_prefix: Output just before any error, to tell apart
        the main parser from the command parsers.
    """

    def __init__(self, usage=None, option_list=None,
                 option_class=optparse.Option, version=None,
                 conflict_handler='error', description=None, formatter=None,
                 add_help_option=True, prog=None, epilog=None,
                 io_manager=None, raw_epilog='', error_prefix=''):
        super(OptionParser, self).__init__(
            usage, option_list, option_class, version, conflict_handler,
            description, formatter, False, prog, epilog)
        if add_help_option:
            self.add_option(
                '-?', '--help', dest='help', action='store_true',
                help='Shows this help text.')
        if version:
            self.remove_option('--version')
            self.add_option(
                '--version', dest='version', action='store_true',
                help='Shows the version of this tool.')
        self.io_manager = io_manager
        self.raw_epilog = raw_epilog
        self.error_prefix = error_prefix
        #: True if an error was encountered while parsing.
        self.error_encountered = False

    def error(self, msg):
        """
        Records that parsing failed and outputs the msg to stderr.
        """
        self.error_encountered = True
        with self.io_manager.with_stderr() as fp:
            fp.write(self.error_prefix)
            fp.write(msg)
            fp.write('\n')
            fp.flush()

    def exit(self, status=0, msg=None):
        """
        Outputs the msg, if any, as an error; unlike the base class
        this does not exit the process.
        """
        if msg:
            self.error(msg)

    def print_help(self, file=None):
        """
        Outputs help information to the file if specified, or to the
        io_manager's stdout.
        """
        if file:
            self._print_help(file)
        else:
            with self.io_manager.with_stdout() as fp:
                self._print_help(fp)

    def _print_help(self, fp):
        optparse.OptionParser.print_help(self, fp)
        if self.raw_epilog:
            fp.write(self.raw_epilog)
        fp.flush()

    def print_usage(self, file=None):
        with self.io_manager.with_stdout() as fp:
            optparse.OptionParser.print_usage(self, file or fp)
            (file or fp).flush()

    def print_version(self, file=None):
        with self.io_manager.with_stdout() as fp:
            optparse.OptionParser.print_version(self, file or fp)
            (file or fp).flush()
