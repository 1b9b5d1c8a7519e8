#!/usr/bin/env python

from __future__ import annotations

from cleo import Application as BaseApplication
from clikit.api.args.format.argument import Argument
from clikit.api.args.format.option import Option
from clikit.api.event import PRE_HANDLE, PRE_RESOLVE
from clikit.api.io.output_stream import OutputStream
from clikit.config import DefaultApplicationConfig
from clikit.handler.help import HelpTextHandler
from clikit.io.console_io import ConsoleIO
from clikit.resolver.help_resolver import HelpResolver

from xapi import __version__
from xapi.cli.command.statements import StatementsCommand
from xapi.cli.command.validate import ValidateCommand
from xapi.log import configure_logger, level_from_verbosity

LOG_FORMAT = "<info>%(asctime)s</info> | <c1>%(levelname)-7s</c1> | <c2>%(name)s</c2> | %(message)s"


class Application(BaseApplication):

    def __init__(self):
        super().__init__(config=ApplicationConfig())
        self.add(StatementsCommand())
        self.add(ValidateCommand())


def verbosity_of(io: ConsoleIO) -> int:
    """Number of `-v` flags given, as already applied to the IO."""
    if io.is_debug():
        return 3
    if io.is_very_verbose():
        return 2
    if io.is_verbose():
        return 1
    return 0


class ApplicationConfig(DefaultApplicationConfig):
    """Like cleo's default, but without a global `--quiet` (commands define their own)
    and with a `--config` file option shared by all commands."""

    def __init__(self):
        super().__init__(name="xapi", version=__version__)

    def configure(self):
        self.set_io_factory(self.create_io)
        self.add_event_listener(PRE_RESOLVE, self.resolve_help_command)
        self.add_event_listener(PRE_HANDLE, self.print_version)

        self.add_option("help", "h", Option.NO_VALUE, "Display this help message")
        self.add_option("verbose", "v", Option.NO_VALUE,
                        "Increase the verbosity of log messages: '-v' warnings, '-vv' info, '-vvv' debug")
        self.add_option("version", None, Option.NO_VALUE, "Display this application version")
        self.add_option("ansi", None, Option.NO_VALUE, "Force ANSI output")
        self.add_option("no-ansi", None, Option.NO_VALUE, "Disable ANSI output")
        self.add_option("config", "c", Option.REQUIRED_VALUE, "Path to a YAML configuration file")

        with self.command("help") as c:
            c.default()
            c.set_description("Display the manual of a command")
            c.add_argument("command", Argument.OPTIONAL | Argument.MULTI_VALUED, "The command name")
            c.set_handler(HelpTextHandler(HelpResolver()))

    def create_io(self,
                  application,
                  args,
                  input_stream=None,
                  output_stream: OutputStream = None,
                  error_stream: OutputStream = None) -> ConsoleIO:
        # formatters and verbosity are set up by the default implementation,
        # log records then follow the same verbosity
        io = super().create_io(application, args, input_stream, output_stream, error_stream)
        configure_logger(level_from_verbosity(verbosity_of(io)), LOG_FORMAT, io.output, io.error_output)
        return io


def main():
    Application().run()


if __name__ == '__main__':
    main()
