"""Loading of map scripts.

A map script is a Python file that builds a binding tree with the node
constructors found in its namespace and binds the resulting Map to the
module-level name ``m``::

    m = Map("network", translate("Network"))
    lan = m.section(NamedSection, "lan", "interface", "LAN")
    lan.option(Value, "ipaddr", "IPv4 address")
"""

import functools
from pathlib import Path
from typing import Any

import structlog

from src.cbi.constants import COMPONENT_LOADER
from src.cbi.errors import InvalidMapError, LoadError
from src.cbi.map import Map
from src.cbi.models import BindContext
from src.cbi.section import AbstractSection, NamedSection, TypedSection
from src.cbi.value import AbstractValue, Flag, ListValue, MultiValue, Value
from src.settings import get_settings


logger = structlog.get_logger()

RESULT_NAME = "m"


def translate(text: str, default: str | None = None) -> str:
    """Return text unchanged; message catalogs are not handled here."""
    return text if text else (default or "")


def _script_namespace(context: BindContext, path: Path) -> dict[str, Any]:
    return {
        "__name__": f"cbi_map_{path.stem}",
        "__file__": str(path),
        "Map": functools.partial(Map, context=context),
        "AbstractSection": AbstractSection,
        "NamedSection": NamedSection,
        "TypedSection": TypedSection,
        "AbstractValue": AbstractValue,
        "Value": Value,
        "Flag": Flag,
        "ListValue": ListValue,
        "MultiValue": MultiValue,
        "translate": translate,
    }


def load(name: str, context: BindContext, map_dir: Path | str | None = None) -> Map:
    """Load a map script and return the Map it builds.

    Args:
        name: Script name without the ``.py`` suffix.
        context: Collaborators of the current request.
        map_dir: Directory holding map scripts (defaults to settings).

    Returns:
        The built Map.

    Raises:
        LoadError: If the script is missing, does not compile or raises.
        InvalidMapError: If the script does not bind a Map to ``m``.
    """
    base = Path(map_dir) if map_dir is not None else get_settings().map_dir
    path = base / f"{name}.py"
    log = logger.bind(
        component=COMPONENT_LOADER,
        request_id=context.request_id,
        map_name=name,
        path=str(path),
    )

    if "/" in name or "\\" in name or name.startswith("."):
        raise LoadError(name, "invalid map name")
    if not path.is_file():
        log.warning("map_script_missing")
        raise LoadError(name, f"no such file: {path}")

    try:
        code = compile(path.read_text(encoding="utf-8"), str(path), "exec")
    except (OSError, SyntaxError, ValueError) as e:
        log.warning("map_script_invalid", error=f"{type(e).__name__}: {e}")
        raise LoadError(name, str(e)) from e

    namespace = _script_namespace(context, path)
    try:
        exec(code, namespace)  # noqa: S102
    except Exception as e:
        log.warning("map_script_failed", error=f"{type(e).__name__}: {e}")
        raise LoadError(name, f"{type(e).__name__}: {e}") from e

    result = namespace.get(RESULT_NAME)
    if not isinstance(result, Map):
        log.warning("map_script_no_map", result_type=type(result).__name__)
        raise InvalidMapError(name, result)

    log.info(
        "map_loaded",
        config=result.config,
        section_count=len(result.children),
    )
    return result
