"""
Command line entry point tests
"""

import io
import logging

import dns.rrset
import pytest
import structlog

from dns_manager.dns_logging import logger as logger_module
from dns_manager.main import DNSManagerApp, main, parse_args


@pytest.fixture(autouse=True)
def reset_logging(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    yield
    logging.getLogger().handlers.clear()
    structlog.reset_defaults()
    logger_module._active_config = None


@pytest.fixture
def store_path(tmp_path):
    return str(tmp_path / "records.yaml")


def write_mx(path):
    rrset = dns.rrset.from_text(
        "example.com.", 3600, "IN", "MX", "10 mail.example.com."
    )
    buffer = io.BytesIO()
    rrset.to_wire(buffer)
    path.write_bytes(buffer.getvalue())
    return str(path)


class TestParseArgs:
    """Test command line parsing"""

    def test_command_and_arguments(self):
        args = parse_args(["-s", "r.yaml", "Dns_MX_Add", "example.com", "10", "mx"])

        assert args.store == "r.yaml"
        assert args.command == "Dns_MX_Add"
        assert args.args == ["example.com", "10", "mx"]

    def test_no_command(self):
        args = parse_args(["--config", "dns.yaml"])

        assert args.config == "dns.yaml"
        assert args.command is None


class TestMain:
    """Test single command runs"""

    def test_add_and_list(self, capsys, store_path):
        """Test records persist between invocations"""
        argv = ["--store", store_path, "Dns_ANAME_Add", "www.example.com", "192.0.2.1"]
        assert main(argv) == 0
        assert "Record added successfully." in capsys.readouterr().out

        assert main(["--store", store_path, "Dns_Get_All"]) == 0
        out = capsys.readouterr().out
        assert "www.example.com." in out
        assert "192.0.2.1" in out

    def test_import_then_ensure(self, capsys, store_path, tmp_path):
        """Test ensure after import reports the existing record"""
        record_file = write_mx(tmp_path / "record-A")

        assert main(["-s", store_path, "Dns_MX_Import", record_file]) == 0
        ensure = ["dns_mx_ensure", "example.com", "10", "mail.example.com"]
        assert main(["-s", store_path, *ensure]) == 0

        assert "Record already exists" in capsys.readouterr().out

    def test_no_records_is_success(self, capsys, store_path):
        """Test an empty result exits zero"""
        assert main(["-s", store_path, "Dns_Match", "example"]) == 0
        assert "No records found" in capsys.readouterr().out

    def test_failure_exit_code(self, capsys, store_path):
        """Test failures exit non-zero and report on stderr"""
        assert main(["-s", store_path, "Dns_MX_Remove", "9"]) == 1

        captured = capsys.readouterr()
        assert "Error accessing configuration service" in captured.err
        assert captured.out == ""

    def test_unknown_command(self, capsys, store_path):
        assert main(["-s", store_path, "Dns_Bogus"]) == 1
        assert "Unknown command: Dns_Bogus" in capsys.readouterr().err

    def test_help(self, capsys, store_path):
        """Test help lists commands and shows usage"""
        assert main(["-s", store_path, "help"]) == 0
        assert "Dns_Get_SOA_Contacts" in capsys.readouterr().out

        assert main(["-s", store_path, "help", "dns_soa_add"]) == 0
        assert "admincontact" in capsys.readouterr().out

    def test_invalid_config(self, capsys, tmp_path):
        """Test configuration errors exit non-zero"""
        config_file = tmp_path / "dns.yaml"
        config_file.write_text("records:\n  default_ttl: -1\n")

        assert main(["-c", str(config_file), "Dns_Get_All"]) == 1
        assert "Invalid configuration" in capsys.readouterr().err

    def test_missing_config(self, capsys):
        assert main(["-c", "absent.yaml", "Dns_Get_All"]) == 1
        assert "Invalid configuration" in capsys.readouterr().err

    def test_unreadable_store(self, capsys, store_path):
        """Test a broken store file exits non-zero"""
        with open(store_path, "w") as f:
            f.write("records: [unclosed")

        assert main(["-s", store_path, "Dns_Get_All"]) == 1
        assert "Failed to open record store" in capsys.readouterr().err

    def test_config_selects_defaults(self, capsys, tmp_path, store_path):
        """Test the configured default TTL is used for added records"""
        config_file = tmp_path / "dns.yaml"
        config_file.write_text(
            f"store:\n  path: {store_path}\nrecords:\n  default_ttl: 120\n"
        )

        main(["-c", str(config_file), "Dns_TXT_Add", "example.com", "hello"])
        main(["-c", str(config_file), "Dns_Get_All"])

        assert "TTL:   120" in capsys.readouterr().out


class TestInteractive:
    """Test the interactive console"""

    def test_session(self, capsys, monkeypatch, store_path):
        """Test commands run until exit"""
        lines = iter(
            [
                "Dns_NS_Add example.com ns1.example.com",
                "",
                "help Dns_NS_Add",
                "Dns_NS_Match example.com",
                "exit",
                "Dns_Get_All",
            ]
        )
        monkeypatch.setattr("builtins.input", lambda prompt="": next(lines))

        assert main(["-s", store_path]) == 0

        out = capsys.readouterr().out
        assert "Record added successfully." in out
        assert "nameserver" in out
        assert "ns1.example.com." in out
        assert "Shutting down DNS manager console" in out
        assert next(lines) == "Dns_Get_All"

    def test_end_of_input(self, capsys, monkeypatch, store_path):
        """Test end of input closes the console"""

        def no_input(prompt=""):
            raise EOFError

        monkeypatch.setattr("builtins.input", no_input)
        app = DNSManagerApp(store_path=store_path)
        app.initialize()

        app.run_interactive()

        assert "Shutting down" in capsys.readouterr().out

    def test_unbalanced_quotes(self, capsys, monkeypatch, store_path):
        """Test unparseable input is reported and skipped"""
        lines = iter(['Dns_TXT_Add example.com "unterminated', "quit"])
        monkeypatch.setattr("builtins.input", lambda prompt="": next(lines))

        assert main(["-s", store_path]) == 0
        assert "Invalid input" in capsys.readouterr().err
