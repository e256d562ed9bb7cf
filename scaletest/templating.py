"""Render scenario templates into generated YAML config files."""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from scaletest.pkgpath import get_package_path
from scaletest.workflow import Step, Workflow

logger = logging.getLogger(__name__)

GENERATED_NOTICE = "# This file was generated from the corresponding config module, do not edit directly.\n"
OUTPUT_FILENAME = "config_generated.yaml"

_ACTION = re.compile(r"\{\{(.*?)\}\}", re.DOTALL)
_FIELD = re.compile(r"\s*\.([A-Za-z_][A-Za-z0-9_]*)\s*")
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


class Template(ABC):
    """A config object that carries its own template text."""

    @abstractmethod
    def get_template(self) -> str:
        """Return the template text with {{ .Field }} placeholders."""


def _snake_case(name: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def _lookup(data: Any, name: str) -> Any:
    for candidate in dict.fromkeys((name, _snake_case(name))):
        if isinstance(data, Mapping):
            if candidate in data:
                return data[candidate]
        elif hasattr(data, candidate):
            return getattr(data, candidate)
    raise ValueError(f"failed to execute template: can't evaluate field {name} in {type(data).__name__}")


def _format(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "<no value>"
    return str(value)


def render_template(template: str, data: Any) -> str:
    """Substitute every {{ .Field }} in template with the matching value from data."""
    parts: list[str] = []
    position = 0
    for match in _ACTION.finditer(template):
        field = _FIELD.fullmatch(match.group(1))
        if field is None:
            raise ValueError(f"failed to parse template: unsupported action {match.group(0)!r}")
        parts.append(template[position:match.start()])
        parts.append(_format(_lookup(data, field.group(1))))
        position = match.end()
    rest = template[position:]
    if "{{" in rest:
        raise ValueError("failed to parse template: unclosed action")
    parts.append(rest)
    return "".join(parts)


def create_yaml_file(data: Template) -> Path:
    """Render data's template into config_generated.yaml beside its module; return the path."""
    output = get_package_path(data) / OUTPUT_FILENAME
    rendered = render_template(data.get_template(), data)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(GENERATED_NOTICE + rendered, encoding="utf-8")
    return output


@dataclass(eq=False)
class CreateYaml(Step):
    """Step that writes the generated config for a template."""

    input_config: Template
    output_config: Path | None = None

    def do(self) -> None:
        path = create_yaml_file(self.input_config)
        scenario = type(self.input_config).__module__.rpartition(".")[2]
        logger.info("config generated: scenario=%s path=%s", scenario, path)
        self.output_config = path


def generate_yaml(template_config: Template) -> Workflow:
    """Return a workflow that generates the config for template_config."""
    return Workflow().add(CreateYaml(template_config))