"""
DNS Manager Main Entry Point

This script provides the command line entry point for the DNS record
management console. With a command it runs that command once; without one it
reads commands interactively.
"""

import argparse
import shlex
import sys
from dataclasses import replace
from typing import List, Optional

import yaml

from dns_manager.commands import CommandOutcome, DNSRecordCommands
from dns_manager.config.loader import ConfigLoader
from dns_manager.core.errors import ServiceError
from dns_manager.core.parsers import DNSRecordParser
from dns_manager.dns_logging import get_logger, log_exception, setup_logging
from dns_manager.store import create_store

PROMPT = "dns-manager> "
EXIT_WORDS = ("exit", "quit")


class DNSManagerApp:
    """DNS Manager Application"""

    def __init__(
        self, config_path: Optional[str] = None, store_path: Optional[str] = None
    ):
        self.config_path = config_path
        self.store_path = store_path
        self.config = None
        self.store = None
        self.commands = None
        self.logger = None

    def initialize(self) -> None:
        """Load configuration, configure logging and open the record store"""
        self.config = ConfigLoader(self.config_path).load_config()
        if self.store_path:
            self.config.store = replace(
                self.config.store, backend="file", path=self.store_path
            )

        setup_logging(self.config.logging)
        self.logger = get_logger("dns_manager_app")

        self.store = create_store(self.config.store)
        records = self.config.records
        parser = DNSRecordParser(
            default_ttl=records.default_ttl,
            soa_refresh=records.soa_refresh,
            soa_retry=records.soa_retry,
            soa_expire=records.soa_expire,
            soa_minimum=records.soa_minimum,
        )
        self.commands = DNSRecordCommands(self.store, parser=parser)

        self.logger.debug(
            "DNS manager initialized",
            store_backend=self.config.store.backend,
            store_path=self.config.store.path,
        )

    def help_text(self, name: Optional[str] = None) -> str:
        if name:
            command = self.commands.get_command(name)
            if command is None:
                return f"Unknown command: {name}"
            return f"{command.name}\n{command.usage}"

        lines = ["Available commands (case-insensitive):"]
        lines.extend(f"  {command}" for command in self.commands.command_names())
        lines.append("Type 'help <command>' for usage.")
        return "\n".join(lines)

    def run_command(self, name: str, args: List[str]) -> CommandOutcome:
        return self.commands.run(name, args)

    def report(self, outcome: CommandOutcome) -> None:
        stream = sys.stdout if outcome.ok else sys.stderr
        if outcome.message:
            print(outcome.message, file=stream)

    def run_interactive(self) -> None:
        """Read and run commands until exit, quit or end of input"""
        print("DNS Record Management Console. Type 'help' for commands.")
        while True:
            try:
                line = input(PROMPT)
            except EOFError:
                print()
                break

            try:
                words = shlex.split(line)
            except ValueError as e:
                print(f"Invalid input: {e}", file=sys.stderr)
                continue

            if not words:
                continue
            if words[0].lower() in EXIT_WORDS:
                break
            if words[0].lower() == "help":
                print(self.help_text(words[1] if len(words) > 1 else None))
                continue

            self.report(self.run_command(words[0], words[1:]))

        print("Shutting down DNS manager console")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(description="DNS record management console")
    parser.add_argument(
        "--config", "-c", default=None, help="Configuration file path (YAML or JSON)"
    )
    parser.add_argument(
        "--store",
        "-s",
        default=None,
        help="Record store file (overrides configuration)",
    )
    parser.add_argument(
        "command", nargs="?", help="Command to run; omit for interactive mode"
    )
    parser.add_argument("args", nargs=argparse.REMAINDER, help="Command arguments")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Main function"""
    args = parse_args(argv)
    app = DNSManagerApp(args.config, args.store)

    try:
        app.initialize()
    except (FileNotFoundError, ValueError, yaml.YAMLError) as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 1
    except ServiceError as e:
        log_exception(app.logger, "Failed to open record store", e)
        print(f"Failed to open record store: {e}", file=sys.stderr)
        return 1

    if not args.command:
        app.run_interactive()
        return 0

    if args.command.lower() == "help":
        print(app.help_text(args.args[0] if args.args else None))
        return 0

    outcome = app.run_command(args.command, args.args)
    app.report(outcome)
    return outcome.exit_code


def run() -> None:
    """Console script entry point"""
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\nDNS manager interrupted")
        sys.exit(1)


if __name__ == "__main__":
    run()
