"""
DNS Record Command Tests

Tests for the import, add, ensure, remove and query commands against an
in-memory record store.
"""

import io
from unittest.mock import Mock

import dns.rrset
import pytest

from dns_manager.commands import DNSRecordCommands, OutcomeStatus, RecordPrinter
from dns_manager.core.errors import ServiceError, TypeMismatchError
from dns_manager.core.parsers import DNSRecordParser
from dns_manager.core.record import DNSRecordType
from dns_manager.store import FileRecordStore, InMemoryRecordStore


def write_record(path, name, ttl, rdtype, text):
    rrset = dns.rrset.from_text(name, ttl, "IN", rdtype, text)
    buffer = io.BytesIO()
    rrset.to_wire(buffer)
    path.write_bytes(buffer.getvalue())
    return str(path)


@pytest.fixture
def store():
    return InMemoryRecordStore()


@pytest.fixture
def commands(store):
    return DNSRecordCommands(store, parser=DNSRecordParser(default_ttl=3600))


@pytest.fixture
def mx_file(tmp_path):
    return write_record(
        tmp_path / "record-A", "example.com.", 3600, "MX", "10 mail.example.com."
    )


@pytest.fixture
def soa_file(tmp_path):
    return write_record(
        tmp_path / "zone.soa",
        "example.com.",
        3600,
        "SOA",
        "ns1.example.com. hostmaster.example.com. 1 3600 600 604800 3600",
    )


class TestImport:
    """Test importing records from wire-format files"""

    def test_import_mx(self, commands, store, mx_file):
        """Test a valid MX file is added"""
        outcome = commands.run("Dns_MX_Import", [mx_file])

        assert outcome.status is OutcomeStatus.SUCCESS
        assert outcome.message == "Record added successfully."
        assert outcome.records[0].id == 1
        assert len(store) == 1

    def test_import_then_ensure_is_duplicate(self, commands, store, mx_file):
        """Test ensure finds the imported record from equivalent fields"""
        commands.run("Dns_MX_Import", [mx_file])

        outcome = commands.run(
            "Dns_MX_Ensure", ["example.com", "10", "MAIL.example.com.", "3600"]
        )

        assert outcome.status is OutcomeStatus.SUCCESS
        assert outcome.message.startswith("Record already exists")
        assert outcome.records[0].id == 1
        assert len(store.query_records(DNSRecordType.MX)) == 1

    def test_type_mismatch_makes_no_store_call(self, soa_file):
        """Test importing an SOA file as A fails before touching the store"""
        store = Mock(wraps=InMemoryRecordStore())
        commands = DNSRecordCommands(store)

        with pytest.raises(TypeMismatchError) as excinfo:
            commands.import_record([soa_file], rtype=DNSRecordType.A)

        assert excinfo.value.expected == DNSRecordType.A
        assert excinfo.value.actual == DNSRecordType.SOA
        assert store.method_calls == []

    def test_type_mismatch_outcome(self, commands, store, soa_file):
        """Test the mismatch is reported as a failure"""
        outcome = commands.run("Dns_ANAME_Import", [soa_file])

        assert outcome.status is OutcomeStatus.FAILURE
        assert "does not contain the requested record type" in outcome.message
        assert len(store) == 0

    def test_missing_file(self, commands, tmp_path):
        """Test a missing file is a usage failure"""
        outcome = commands.run("Dns_SOA_Import", [str(tmp_path / "absent")])

        assert outcome.status is OutcomeStatus.FAILURE
        assert "not found" in outcome.message
        assert "Usage: Dns_SOA_Import" in outcome.message

    def test_malformed_file(self, commands, store, tmp_path):
        """Test undecodable bytes are a failure"""
        path = tmp_path / "garbage"
        path.write_bytes(b"\x07example\x03com\x00\x00\x01")

        outcome = commands.run("Dns_MX_Import", [str(path)])

        assert outcome.status is OutcomeStatus.FAILURE
        assert "Error reading file" in outcome.message
        assert len(store) == 0

    def test_missing_argument(self, commands):
        """Test import without a path reports usage"""
        outcome = commands.run("Dns_MX_Import", [])

        assert outcome.status is OutcomeStatus.FAILURE
        assert "filepath" in outcome.message


class TestAddAndEnsure:
    """Test adding records from fields"""

    @pytest.mark.parametrize(
        "command,args,rtype",
        [
            ("Dns_MX_Add", ["example.com", "10", "mail.example.com"], DNSRecordType.MX),
            ("Dns_NS_Add", ["example.com", "ns1.example.com"], DNSRecordType.NS),
            ("Dns_TXT_Add", ["example.com", "v=spf1 -all"], DNSRecordType.TXT),
            ("Dns_CNAME_Add", ["www.example.com", "example.com"], DNSRecordType.CNAME),
            (
                "Dns_SOA_Add",
                ["example.com", "ns1.example.com", "admin@example.com", "1"],
                DNSRecordType.SOA,
            ),
            ("Dns_ANAME_Add", ["example.com", "192.0.2.1"], DNSRecordType.A),
        ],
    )
    def test_add(self, commands, store, command, args, rtype):
        """Test each add command stores one record of its type"""
        outcome = commands.run(command, args)

        assert outcome.status is OutcomeStatus.SUCCESS
        assert [r.rtype for r in store.query_records(DNSRecordType.ANY)] == [rtype]

    def test_add_allows_duplicates(self, commands, store):
        """Test add does not check for existing records"""
        args = ["example.com", "192.0.2.1"]
        commands.run("Dns_ANAME_Add", args)
        commands.run("Dns_ANAME_Add", args)

        assert len(store) == 2

    def test_ensure_adds_when_absent(self, commands, store):
        """Test ensure adds a record not yet present"""
        commands.run("Dns_MX_Add", ["example.com", "10", "mx1.example.com"])

        outcome = commands.run(
            "Dns_MX_Ensure", ["example.com", "20", "mx2.example.com"]
        )

        assert outcome.message == "Record added successfully."
        assert len(store.query_records(DNSRecordType.MX, "example.com")) == 2

    def test_ensure_store_failure(self):
        """Test a failing lookup aborts ensure without adding"""
        store = Mock()
        store.query_records.side_effect = ServiceError("unreachable")
        commands = DNSRecordCommands(store)

        outcome = commands.run("Dns_NS_Ensure", ["example.com", "ns1.example.com"])

        assert outcome.status is OutcomeStatus.FAILURE
        assert outcome.message.startswith("Error accessing configuration service")
        store.add_record.assert_not_called()

    def test_add_store_failure(self):
        """Test a failing add is reported"""
        store = Mock()
        store.add_record.side_effect = ServiceError("rejected")
        commands = DNSRecordCommands(store)

        outcome = commands.run("Dns_TXT_Add", ["example.com", "hello"])

        assert outcome.status is OutcomeStatus.FAILURE
        assert "Error adding DNS record" in outcome.message

    def test_bad_fields_show_usage(self, commands, store):
        """Test invalid fields report the command usage"""
        outcome = commands.run("Dns_MX_Add", ["example.com", "high", "mx.example.com"])

        assert outcome.status is OutcomeStatus.FAILURE
        assert "Usage: Dns_MX_Add" in outcome.message
        assert "priority" in outcome.message
        assert len(store) == 0

    def test_text_too_long_shows_usage(self, commands, store):
        """Test oversized text is reported with the command usage"""
        outcome = commands.run("Dns_TXT_Add", ["example.com", "x" * 70000])

        assert outcome.status is OutcomeStatus.FAILURE
        assert "Usage: Dns_TXT_Add" in outcome.message
        assert len(store) == 0

    def test_ensure_after_failed_write(self, tmp_path):
        """Test a record whose write failed is not reported as existing"""
        commands = DNSRecordCommands(FileRecordStore(str(tmp_path / "records.yaml")))
        (tmp_path / "records.yaml.tmp").mkdir()
        args = ["example.com", "10", "mail.example.com"]

        assert commands.run("Dns_MX_Add", args).status is OutcomeStatus.FAILURE

        (tmp_path / "records.yaml.tmp").rmdir()
        outcome = commands.run("Dns_MX_Ensure", args)

        assert outcome.message == "Record added successfully."


class TestRemove:
    """Test record removal"""

    def test_remove(self, commands, store):
        """Test removing an existing record"""
        commands.run("Dns_ANAME_Add", ["example.com", "192.0.2.1"])

        outcome = commands.run("Dns_ANAME_Remove", ["1"])

        assert outcome.message == "Record removed successfully."
        assert len(store) == 0

    def test_remove_unknown_id(self, commands):
        """Test removing an unknown id fails"""
        outcome = commands.run("Dns_MX_Remove", ["5"])

        assert outcome.status is OutcomeStatus.FAILURE
        assert "not found" in outcome.message

    def test_remove_non_numeric_id(self, commands):
        """Test a non-numeric id is a usage failure"""
        outcome = commands.run("Dns_SOA_Remove", ["abc"])

        assert outcome.status is OutcomeStatus.FAILURE
        assert "Invalid record id" in outcome.message


class TestQueries:
    """Test listing and matching commands"""

    @pytest.fixture
    def populated(self, commands):
        commands.run("Dns_ANAME_Add", ["www.example.com", "192.0.2.1"])
        commands.run("Dns_MX_Add", ["example.com", "10", "mail.example.com"])
        commands.run(
            "Dns_SOA_Add",
            ["example.com", "ns1.example.com", "hostmaster.example.com", "1"],
        )
        commands.run(
            "Dns_SOA_Add",
            ["example.org", "ns1.example.org", "hostmaster@example.com", "1"],
        )
        return commands

    def test_get_all(self, populated):
        """Test every record is printed"""
        outcome = populated.run("Dns_Get_All", [])

        assert outcome.status is OutcomeStatus.SUCCESS
        assert len(outcome.records) == 4
        assert "RecordID: 1" in outcome.message
        assert "10 mail.example.com." in outcome.message

    def test_get_all_empty(self, commands):
        """Test an empty store reports no records"""
        outcome = commands.run("Dns_Get_All", [])

        assert outcome.status is OutcomeStatus.EMPTY
        assert outcome.message == "No records found"
        assert outcome.ok

    def test_get_all_rejects_arguments(self, commands):
        """Test extra arguments are rejected"""
        assert commands.run("Dns_Get_All", ["x"]).status is OutcomeStatus.FAILURE

    def test_get_soa_contacts(self, populated):
        """Test distinct contacts are listed"""
        outcome = populated.run("Dns_Get_SOA_Contacts", [])

        assert outcome.message == "Contact: hostmaster.example.com."

    def test_get_soa_contacts_empty(self, commands):
        """Test no SOA records reports no records"""
        assert commands.run("Dns_Get_SOA_Contacts", []).status is OutcomeStatus.EMPTY

    def test_match_regex(self, populated):
        """Test regex match over names"""
        outcome = populated.run("Dns_Match", [r"\.org\.$"])

        assert [r.name for r in outcome.records] == ["example.org."]

    def test_match_invalid_regex(self, populated):
        """Test an invalid pattern is a usage failure"""
        outcome = populated.run("Dns_Match", ["("])

        assert outcome.status is OutcomeStatus.FAILURE
        assert "Invalid name pattern" in outcome.message

    def test_match_type(self, populated):
        """Test exact match with and without trailing dot"""
        relative = populated.run("Dns_MX_Match", ["example.com"])
        absolute = populated.run("Dns_MX_Match", ["example.com."])

        assert relative.records == absolute.records
        assert [r.id for r in relative.records] == [2]

    def test_match_type_no_records(self, populated):
        """Test exact match does not search subdomains"""
        outcome = populated.run("Dns_ANAME_Match", ["example.com"])

        assert outcome.status is OutcomeStatus.EMPTY

    def test_query_failure(self):
        """Test a store failure is reported with the service prefix"""
        store = Mock()
        store.query_records.side_effect = ServiceError("timeout")
        commands = DNSRecordCommands(store)

        outcome = commands.run("Dns_SOA_Match", ["example.com"])

        assert outcome.status is OutcomeStatus.FAILURE
        assert outcome.message == "Error accessing configuration service: timeout"


class TestDispatch:
    """Test command lookup"""

    def test_case_insensitive(self, commands, store):
        """Test command names ignore case"""
        outcome = commands.run("dns_aname_add", ["example.com", "192.0.2.1"])

        assert outcome.ok
        assert len(store) == 1

    def test_unknown_command(self, commands):
        """Test unknown commands fail"""
        outcome = commands.run("Dns_AAAA_Add", [])

        assert outcome.status is OutcomeStatus.FAILURE
        assert outcome.exit_code == 1

    def test_command_names(self, commands):
        """Test the full command set is registered"""
        names = set(commands.command_names())

        assert {
            "Dns_MX_Import",
            "Dns_SOA_Import",
            "Dns_ANAME_Import",
            "Dns_TXT_Ensure",
            "Dns_ANAME_Remove",
            "Dns_Get_All",
            "Dns_Get_SOA_Contacts",
            "Dns_Match",
            "Dns_SOA_Match",
        } <= names
        assert len(names) == 24


class TestRecordPrinter:
    """Test record formatting"""

    def test_unrenderable_data_falls_back_to_hex(self, store):
        """Test rdata dnspython cannot parse is shown as hex"""
        record = DNSRecordParser().parse_aname(["host.example.com", "192.0.2.1"])
        broken = type(record)(record.name, record.rtype, record.dclass, 1, b"\xab")

        text = RecordPrinter().format(broken)

        assert "Data:  ab" in text
        assert "RecordID: -" in text
