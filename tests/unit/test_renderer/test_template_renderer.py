"""Unit tests for the Jinja2 template renderer."""

from pathlib import Path

import pytest

from src.cbi import Flag, ListValue, Map, MultiValue, NamedSection, TypedSection, Value
from src.renderer import TemplateRenderer
from tests.helpers.cbi import make_map, make_store


@pytest.fixture
def renderer() -> TemplateRenderer:
    """Renderer using the packaged templates."""
    return TemplateRenderer()


def _network_map(renderer: TemplateRenderer, form: dict | None = None) -> Map:
    store = make_store(
        {
            "lan": {
                ".type": "interface",
                "proto": "static",
                "ipaddr": "192.168.1.1",
                "auto": "1",
                "dns": "a c",
            },
            "a": {".type": "host", "name": "alpha"},
        }
    )
    return make_map(store, form, submit=form is not None, renderer=renderer)


class TestTemplateRenderer:
    """Tests for TemplateRenderer."""

    def test_map_form(self, renderer: TemplateRenderer) -> None:
        """The map draws a form carrying the submit indicator."""
        m = _network_map(renderer)
        html = m.render()
        assert '<form method="post" class="cbi-map" id="cbi-network">' in html
        assert 'name="cbi.submit"' in html
        assert "<h2>Network</h2>" in html

    def test_value_input(self, renderer: TemplateRenderer) -> None:
        """Values draw an input named by their form key."""
        m = _network_map(renderer)
        s = m.section(NamedSection, "lan", "interface", "LAN")
        v = s.option(Value, "ipaddr", "IPv4 address")
        v.maxlength = 15

        html = m.render()
        assert 'name="cbid.network.lan.ipaddr"' in html
        assert 'value="192.168.1.1"' in html
        assert 'maxlength="15"' in html
        assert "<legend>LAN</legend>" in html

    def test_text_is_escaped(self, renderer: TemplateRenderer) -> None:
        """Titles and values cannot inject markup."""
        m = _network_map(renderer)
        s = m.section(NamedSection, "lan", "interface", "<b>LAN</b>")
        s.option(Value, "proto")

        html = m.render()
        assert "&lt;b&gt;LAN&lt;/b&gt;" in html
        assert "<b>LAN</b>" not in html

    def test_optional_absent_value_is_hidden(self, renderer: TemplateRenderer) -> None:
        """Optional values are drawn only when present, and offered otherwise."""
        m = _network_map(renderer)
        s = m.section(NamedSection, "lan", "interface")
        mtu = s.option(Value, "mtu", "MTU")
        mtu.optional = True

        html = m.render()
        assert 'name="cbid.network.lan.mtu"' not in html
        assert 'name="cbi.opt.network.lan"' in html
        assert '<option value="mtu">MTU</option>' in html

    def test_invalid_value_is_marked(self, renderer: TemplateRenderer) -> None:
        """Rejected submissions are highlighted."""
        m = _network_map(renderer, {"cbid.network.lan.ipaddr": "x" * 20})
        s = m.section(NamedSection, "lan", "interface")
        s.option(Value, "ipaddr").maxlength = 15

        m.parse()
        assert "cbi-value-error" in m.render()

    def test_flag_checkbox(self, renderer: TemplateRenderer) -> None:
        """Enabled flags are checked."""
        m = _network_map(renderer)
        s = m.section(NamedSection, "lan", "interface")
        s.option(Flag, "auto")

        html = m.render()
        assert 'type="checkbox" name="cbid.network.lan.auto"' in html
        assert 'checked="checked"' in html

    def test_list_value_select(self, renderer: TemplateRenderer) -> None:
        """The stored key is selected."""
        m = _network_map(renderer)
        s = m.section(NamedSection, "lan", "interface")
        proto = s.option(ListValue, "proto")
        proto.add_value("static", "Static")
        proto.add_value("dhcp", "DHCP")

        html = m.render()
        assert '<option value="static" selected="selected">Static</option>' in html
        assert '<option value="dhcp">DHCP</option>' in html

    def test_multi_value_checkboxes(self, renderer: TemplateRenderer) -> None:
        """Every stored key is checked."""
        m = _network_map(renderer)
        s = m.section(NamedSection, "lan", "interface")
        dns = s.option(MultiValue, "dns")
        for key in ("a", "b", "c"):
            dns.add_value(key)

        html = m.render()
        assert html.count('checked="checked"') == 2

    def test_typed_section(self, renderer: TemplateRenderer) -> None:
        """Typed sections draw every section with remove and create controls."""
        m = _network_map(renderer)
        hosts = m.section(TypedSection, "host", "Hosts")
        hosts.anonymous = True
        hosts.option(Value, "name")

        html = m.render()
        assert 'name="cbid.network.a.name"' in html
        assert 'name="cbi.rts.network.a"' in html
        assert 'name="cbi.cts.network.host"' in html

    def test_named_section_create_button(self, renderer: TemplateRenderer) -> None:
        """Absent removable sections offer creation."""
        m = _network_map(renderer)
        wan = m.section(NamedSection, "wan", "interface")
        wan.addremove = True

        assert 'name="cbi.cns.network.wan"' in m.render()

    def test_template_override(self, tmp_path: Path) -> None:
        """Templates in the override directory take precedence."""
        (tmp_path / "cbi").mkdir()
        (tmp_path / "cbi" / "value.html").write_text(
            "CUSTOM {{ node.option }}@{{ section }}", encoding="utf-8"
        )
        m = _network_map(TemplateRenderer(template_dir=tmp_path))
        s = m.section(NamedSection, "lan", "interface")
        s.option(Value, "proto")

        html = m.render()
        assert "CUSTOM proto@lan" in html
        assert 'name="cbi.submit"' in html
