"""
CLI commands driving a single resource through its lifecycle.

Each command reads a resource conf (YAML or JSON) with ``workflowId``,
``resourceId``, ``instanceId``, ``resourceType`` and ``resourceSpec`` keys.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from orchard.cli.ux import console, header, print_json, print_key_value, success
from orchard.core.errors import (
    ConfigurationError,
    ExitCode,
    SpecDecodeError,
    main_with_error_handling,
)
from orchard.domain.models import ResourceConf
from orchard.resources import decode_resource


def load_resource_conf(path: str | Path) -> ResourceConf:
    conf_path = Path(path)
    if not conf_path.exists():
        raise ConfigurationError(f"Resource conf not found: {conf_path}")

    try:
        raw = yaml.safe_load(conf_path.read_text())
    except yaml.YAMLError as exc:
        raise SpecDecodeError(f"Resource conf is not valid YAML/JSON: {conf_path}") from exc

    if not isinstance(raw, dict):
        raise SpecDecodeError(f"Resource conf must be a mapping: {conf_path}")

    try:
        return ResourceConf.model_validate(raw)
    except ValidationError as exc:
        raise SpecDecodeError.from_validation_error("resource conf", exc) from exc


def parse_instance_spec(raw: str) -> Any:
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise SpecDecodeError(f"Instance spec is not valid JSON: {exc.msg}") from exc


@main_with_error_handling()
def plan_command(conf_path: str) -> int:
    """Show the launch request ``create`` would send, without calling the backend."""
    resource = decode_resource(load_resource_conf(conf_path))
    build_request = getattr(resource, "build_request", None)
    if build_request is None:
        raise ConfigurationError(f"Resource '{resource.name}' does not support plan")

    header(f"Plan: {resource.name}")
    print_json(build_request())
    return ExitCode.SUCCESS


@main_with_error_handling()
def create_command(conf_path: str) -> int:
    resource = decode_resource(load_resource_conf(conf_path))
    inst_spec = resource.create()
    success(f"Created {resource.name}")
    print_json(inst_spec)
    return ExitCode.SUCCESS


@main_with_error_handling()
def status_command(conf_path: str, instance_spec: str) -> int:
    resource = decode_resource(load_resource_conf(conf_path))
    status = resource.get_status(parse_instance_spec(instance_spec))
    print_key_value({"resource": resource.name, "status": str(status)})
    return ExitCode.SUCCESS


@main_with_error_handling()
def terminate_command(conf_path: str, instance_spec: str) -> int:
    resource = decode_resource(load_resource_conf(conf_path))
    status = resource.terminate(parse_instance_spec(instance_spec))
    success(f"Termination requested for {resource.name}")
    console.print(f"[muted]status:[/muted] {status}")
    return ExitCode.SUCCESS
