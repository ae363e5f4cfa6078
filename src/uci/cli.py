"""Configuration store backed by the uci command line tool."""

import shlex
import shutil
import subprocess
from collections.abc import Callable
from pathlib import Path

import structlog

from src.uci.errors import UciBinaryNotFoundError
from src.uci.protocols import ConfigData


logger = structlog.get_logger()

Runner = Callable[[list[str]], subprocess.CompletedProcess[str]]


def _run(args: list[str]) -> subprocess.CompletedProcess[str]:
    return subprocess.run(  # noqa: S603
        args,
        capture_output=True,
        text=True,
        check=False,
    )


def _path(config: str, section: str, option: str | None) -> str:
    if option is None:
        return f"{config}.{section}"
    return f"{config}.{section}.{option}"


def parse_show_output(output: str, config: str) -> ConfigData:
    """Parse ``uci -X show`` output into section tables.

    Lines look like ``network.lan=interface`` for a section and
    ``network.lan.proto='static'`` for an option. List options are joined
    with single spaces.

    Args:
        output: Raw stdout of the show command.
        config: Namespace the output belongs to.

    Returns:
        Ordered section name -> option table mapping.
    """
    sections: ConfigData = {}
    for line in output.splitlines():
        key, sep, raw_value = line.partition("=")
        if not sep:
            continue

        parts = key.split(".")
        if len(parts) < 2 or parts[0] != config:  # noqa: PLR2004
            continue

        try:
            value = " ".join(shlex.split(raw_value))
        except ValueError:
            value = raw_value.strip("'")

        if len(parts) == 2:  # noqa: PLR2004
            sections.setdefault(parts[1], {})[".type"] = value
        else:
            sections.setdefault(parts[1], {})[parts[2]] = value
    return sections


class UciCliStore:
    """Store session that shells out to ``uci``.

    Changes are staged by uci itself; committing them is left to the caller.
    """

    def __init__(
        self,
        binary: str = "uci",
        confdir: Path | str | None = None,
        runner: Runner | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            binary: Name or path of the uci executable.
            confdir: Optional configuration directory (``uci -c``).
            runner: Command runner, replaced in tests.

        Raises:
            UciBinaryNotFoundError: If no runner is given and the binary is
                not on PATH.
        """
        if runner is None and shutil.which(binary) is None:
            raise UciBinaryNotFoundError(binary)

        self._base = [binary, "-q"]
        if confdir is not None:
            self._base.extend(["-c", str(confdir)])
        self._runner = runner or _run
        self._log = logger.bind(component="uci", backend="cli")

    def _call(self, *args: str) -> subprocess.CompletedProcess[str]:
        result = self._runner([*self._base, *args])
        if result.returncode != 0:
            self._log.debug(
                "uci_command_failed",
                args=list(args),
                returncode=result.returncode,
                stderr=(result.stderr or "").strip(),
            )
        return result

    def show(
        self, config: str, section: str | None = None
    ) -> ConfigData | dict[str, str] | None:
        result = self._call("-X", "show", config)
        if result.returncode != 0:
            return None
        sections = parse_show_output(result.stdout, config)
        if section is None:
            return sections
        return sections.get(section)

    def get(self, config: str, section: str, option: str | None = None) -> str | None:
        path = _path(config, section, option)
        result = self._call("get", path)
        if result.returncode != 0:
            return None
        return result.stdout.rstrip("\n")

    def set(
        self, config: str, section: str, option: str | None, value: str
    ) -> bool:
        path = _path(config, section, option)
        return self._call("set", f"{path}={value}").returncode == 0

    def add(self, config: str, sectiontype: str) -> str | None:
        result = self._call("add", config, sectiontype)
        name = result.stdout.strip()
        if result.returncode != 0 or not name:
            return None
        return name

    def delete(self, config: str, section: str, option: str | None = None) -> bool:
        path = _path(config, section, option)
        return self._call("delete", path).returncode == 0
