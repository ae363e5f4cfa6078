"""Unit tests for named and typed sections."""

from src.cbi import NamedSection, SectionPresence, TypedSection, Value
from src.observability import BindMetrics
from src.uci import MemoryStore
from tests.helpers.cbi import make_map, make_store


def _no_spaces(name: str) -> str | None:
    return None if " " in name else name


class TestNamedSection:
    """Tests for NamedSection."""

    def setup_method(self) -> None:
        """Reset metrics before each test."""
        BindMetrics.reset()

    def test_absent_section_is_not_parsed(self) -> None:
        """Values of a missing section ignore the form."""
        store = make_store({})
        m = make_map(store, {"cbid.network.wan.proto": "dhcp"})
        s = m.section(NamedSection, "wan", "interface")
        s.option(Value, "proto")

        assert m.parse()
        assert s.presence() is SectionPresence.ABSENT
        assert m.changes == []

    def test_create_writes_defaults(self) -> None:
        """Creating a section writes every non-None default."""
        store = make_store({})
        m = make_map(store, {"cbi.cns.network.wan": "Create"}, submit=False)
        s = m.section(NamedSection, "wan", "interface")
        s.addremove = True
        s.option(Value, "proto").default = "dhcp"
        s.option(Value, "metric")

        assert m.parse()
        assert store.show("network", "wan") == {".type": "interface", "proto": "dhcp"}
        assert BindMetrics.get_instance().sections_created_total == 1

    def test_created_section_is_parsed_in_same_request(self) -> None:
        """Values submitted with the create request are applied."""
        store = make_store({})
        m = make_map(
            store,
            {"cbi.cns.network.wan": "Create", "cbid.network.wan.proto": "pppoe"},
        )
        s = m.section(NamedSection, "wan", "interface")
        s.addremove = True
        s.option(Value, "proto").default = "dhcp"

        assert m.parse()
        assert store.get("network", "wan", "proto") == "pppoe"

    def test_create_present_section_is_not_attempted(self) -> None:
        """A create request for an existing section is ignored."""
        store = make_store({"wan": {".type": "interface", "proto": "dhcp"}})
        m = make_map(store, {"cbi.cns.network.wan": "Create"}, submit=False)
        s = m.section(NamedSection, "wan", "interface")
        s.addremove = True
        s.option(Value, "proto").default = "static"

        assert m.parse()
        assert m.changes == []
        assert store.get("network", "wan", "proto") == "dhcp"

    def test_create_ignored_without_addremove(self) -> None:
        """Sections are only created when addremove is set."""
        store = make_store({})
        m = make_map(store, {"cbi.cns.network.wan": "Create"})
        m.section(NamedSection, "wan", "interface")

        assert m.parse()
        assert store.show("network", "wan") is None

    def test_remove(self) -> None:
        """A removal request deletes the section and skips its values."""
        store = make_store({"wan": {".type": "interface", "proto": "dhcp"}})
        m = make_map(
            store, {"cbi.rns.network.wan": "Delete", "cbid.network.wan.proto": "x"}
        )
        s = m.section(NamedSection, "wan", "interface")
        s.addremove = True
        s.option(Value, "proto")

        assert m.parse()
        assert store.show("network", "wan") is None
        assert [c.op.value for c in m.changes] == ["delete"]

    def test_remove_absent_section_is_noop(self) -> None:
        """Removing a missing section changes nothing."""
        store = make_store({})
        m = make_map(store, {"cbi.rns.network.wan": "Delete"})
        s = m.section(NamedSection, "wan", "interface")
        s.addremove = True

        assert m.parse()
        assert m.changes == []

    def test_values_parse_with_section_name(self) -> None:
        """Values of a present section read their own form keys."""
        store = make_store({"lan": {".type": "interface", "proto": "static"}})
        m = make_map(store, {"cbid.network.lan.proto": "dhcp"})
        s = m.section(NamedSection, "lan", "interface")
        s.option(Value, "proto")

        assert m.parse()
        assert store.get("network", "lan", "proto") == "dhcp"


class TestTypedSection:
    """Tests for TypedSection."""

    def setup_method(self) -> None:
        """Reset metrics before each test."""
        BindMetrics.reset()

    def _store(self) -> MemoryStore:
        return make_store(
            {
                "a": {".type": "host", "name": "alpha"},
                "b": {".type": "host", "name": "beta"},
                "lan": {".type": "interface"},
            }
        )

    def test_ucisections_filters_type(self) -> None:
        """Only sections of the bound type are listed."""
        m = make_map(self._store(), {})
        s = m.section(TypedSection, "host")
        assert list(s.ucisections()) == ["a", "b"]

    def test_scope_filters_names(self) -> None:
        """scope restricts the sections shown and edited."""
        m = make_map(self._store(), {})
        s = m.section(TypedSection, "host")
        s.scope = ["b"]
        assert list(s.ucisections()) == ["b"]

    def test_values_parse_for_every_section(self) -> None:
        """Each section of the type applies its own submission."""
        store = self._store()
        m = make_map(
            store, {"cbid.network.a.name": "one", "cbid.network.b.name": "two"}
        )
        s = m.section(TypedSection, "host")
        s.option(Value, "name")

        assert m.parse()
        assert store.get("network", "a", "name") == "one"
        assert store.get("network", "b", "name") == "two"

    def test_anonymous_create(self) -> None:
        """Anonymous sections are created with generated names and defaults."""
        store = self._store()
        m = make_map(store, {"cbi.cts.network.host": "Add"}, submit=False)
        s = m.section(TypedSection, "host")
        s.anonymous = True
        name = s.option(Value, "name")
        name.default = "new"

        assert m.parse()
        created = [n for n in store.show("network") if n not in ("a", "b", "lan")]
        assert len(created) == 1
        assert store.show("network", created[0]) == {".type": "host", "name": "new"}

    def test_named_create(self) -> None:
        """A valid requested name is created."""
        store = self._store()
        m = make_map(store, {"cbi.cts.network.host": "myname"})
        s = m.section(TypedSection, "host")
        s.valid = _no_spaces

        assert m.parse()
        assert store.get("network", "myname") == "host"
        assert not s.err_invalid

    def test_named_create_rejected(self) -> None:
        """A rejected name flags the section instead of creating it."""
        store = self._store()
        m = make_map(store, {"cbi.cts.network.host": "my name"})
        s = m.section(TypedSection, "host")
        s.valid = _no_spaces

        assert m.parse()
        assert s.err_invalid
        assert ("host", "") in m.invalid_fields()
        assert m.changes == []

    def test_empty_name_is_ignored(self) -> None:
        """An empty create field does nothing."""
        store = self._store()
        m = make_map(store, {"cbi.cts.network.host": ""})
        s = m.section(TypedSection, "host")

        assert m.parse()
        assert m.changes == []
        assert not s.err_invalid

    def test_remove(self) -> None:
        """Sections named in removal requests are deleted."""
        store = self._store()
        m = make_map(store, {"cbi.rts.network.a": "Delete"})
        m.section(TypedSection, "host")

        assert m.parse()
        assert store.show("network", "a") is None
        assert BindMetrics.get_instance().sections_removed_total == 1

    def test_remove_skips_other_types(self) -> None:
        """Sections of another type are not removed."""
        store = self._store()
        m = make_map(store, {"cbi.rts.network.lan": "Delete"})
        m.section(TypedSection, "host")

        assert m.parse()
        assert store.get("network", "lan") == "interface"

    def test_remove_rejected_name_is_skipped_silently(self) -> None:
        """Names failing valid are kept without flagging the section."""
        store = self._store()
        m = make_map(store, {"cbi.rts.network.a": "Delete"})
        s = m.section(TypedSection, "host")
        s.valid = ["b"]

        assert m.parse()
        assert store.get("network", "a") == "host"
        assert not s.err_invalid

    def test_addremove_disabled(self) -> None:
        """Create and remove requests are ignored without addremove."""
        store = self._store()
        m = make_map(
            store, {"cbi.cts.network.host": "c", "cbi.rts.network.a": "Delete"}
        )
        s = m.section(TypedSection, "host")
        s.addremove = False

        assert m.parse()
        assert store.get("network", "a") == "host"
        assert store.get("network", "c") is None
