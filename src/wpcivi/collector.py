#!/usr/bin/env python3
"""
Configuration collector.

Two mutually exclusive acquisition paths produce the same ConfigRecord:

- interactive: prompt each field until it validates, then show a numbered
  review summary where any field can be edited before confirming.
- unattended: read pre-set values (environment, optionally layered over a
  TOML values file) and fail fast on the first missing or invalid field.

Nothing here touches the filesystem beyond reading the values file, so a
rejected or aborted collection never leaves partial provisioning behind.
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Callable, Dict, Mapping, Optional

from .commands import CommandRunner
from .console import warn
from .errors import AbortedByUser, ConfigurationError
from .record import ConfigRecord
from .validation import FIELDS, FieldSpec

logger = logging.getLogger(__name__)

InputFn = Callable[[str], str]
OutputFn = Callable[[str], None]

AFFIRMATIVE = {'Y', 'YES', ''}
NEGATIVE = {'N', 'NO'}
FIELD_NUMBERS = {str(number): spec for number, spec in enumerate(FIELDS, start=1)}


def prompt_field(spec: FieldSpec, input_fn: InputFn = input, output: OutputFn = print) -> str:
    """
    Ask for one field until a non-empty, valid answer is given.

    There is no retry limit. EOFError from input_fn propagates so a closed
    terminal ends the run instead of spinning.
    """
    while True:
        answer = input_fn(f"{spec.question}: ").strip()
        if not answer:
            output(f"Input required. {spec.hint}")
            continue
        if not spec.matches(answer):
            output(f"Invalid value: '{answer}'. {spec.hint}")
            continue
        return answer


def collect_interactive(input_fn: InputFn = input, output: OutputFn = print) -> Dict[str, str]:
    output("Please provide the required values. Examples are only hints; fields are mandatory.")
    values: Dict[str, str] = {}
    for spec in FIELDS:
        values[spec.name] = prompt_field(spec, input_fn, output)
    return values


def collect_unattended(preset: Mapping[str, str]) -> Dict[str, str]:
    """
    Validate pre-set values for every field.

    Raises:
        ConfigurationError: On the first missing or invalid field
    """
    values: Dict[str, str] = {}
    for spec in FIELDS:
        raw = preset.get(spec.name)
        if raw is None or not str(raw).strip():
            raise ConfigurationError(
                f"Variable '{spec.name}' is not set in NONINTERACTIVE mode. "
                "Set it via environment variable before running this script.",
                field=spec.name,
            )
        value = str(raw).strip()
        if not spec.matches(value):
            raise ConfigurationError(
                f"Variable '{spec.name}' has invalid value '{value}' in NONINTERACTIVE mode. {spec.hint}",
                field=spec.name,
            )
        values[spec.name] = value
    return values


def build_summary_lines(values: Mapping[str, str]) -> list[str]:
    lines = ["", "================= Review your values ================="]
    for number, spec in enumerate(FIELDS, start=1):
        lines.append(f"{number:>3}) {spec.name:<18}: {values.get(spec.name, '')}")
    lines.append("======================================================")
    return lines


def review_and_confirm(
    values: Dict[str, str],
    input_fn: InputFn = input,
    output: OutputFn = print,
) -> Dict[str, str]:
    """
    Show the numbered summary until the operator confirms.

    A field number re-prompts that single field and shows the summary again.

    Raises:
        AbortedByUser: On a negative answer
    """
    while True:
        for line in build_summary_lines(values):
            output(line)
        output("Confirm? [Y]es / [N]o / enter a number to edit (e.g. 3)")
        answer = input_fn("> ").strip().upper()

        if answer in AFFIRMATIVE:
            return values
        if answer in NEGATIVE:
            raise AbortedByUser("Aborted by user.")
        if answer in FIELD_NUMBERS:
            spec = FIELD_NUMBERS[answer]
            values[spec.name] = prompt_field(spec, input_fn, output)
            continue
        output(f"Please enter 'Y', 'N' or a number (1–{len(FIELDS)}).")


def check_timezone(tz: str, runner: CommandRunner) -> bool:
    """
    Advisory check against `timedatectl list-timezones`.

    Only ever warns. Returns False when the zone is known to be missing.
    """
    if runner.dry_run or not runner.which('timedatectl'):
        return True
    result = runner.run(['timedatectl', 'list-timezones'])
    if not result.ok:
        logger.debug("timedatectl list-timezones failed, skipping timezone check")
        return True
    if tz in result.stdout.splitlines():
        return True
    warn(f"Timezone '{tz}' not found by 'timedatectl list-timezones'. Will try to set it anyway.")
    return False


def load_values_file(path: Path) -> Dict[str, str]:
    """
    Read pre-set values from TOML.

    Keys are the field names, either at the top level or under [deploy].
    """
    if not path.exists():
        raise ConfigurationError(f"Values file not found: {path}")
    try:
        with open(path, 'rb') as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Failed to parse TOML from {path}: {e}") from e

    section = data.get('deploy', data)
    if not isinstance(section, dict):
        raise ConfigurationError(f"[deploy] in {path} must be a table")
    return {
        key: str(value)
        for key, value in section.items()
        if not isinstance(value, dict)
    }


def load_preset_values(env: Mapping[str, str], values_file: Optional[Path] = None) -> Dict[str, str]:
    """Environment values override the values file."""
    preset: Dict[str, str] = {}
    if values_file is not None:
        preset.update(load_values_file(values_file))
    for spec in FIELDS:
        if env.get(spec.name):
            preset[spec.name] = env[spec.name]
    return preset


def collect_configuration(
    interactive: bool,
    runner: CommandRunner,
    env: Mapping[str, str],
    values_file: Optional[Path] = None,
    input_fn: InputFn = input,
    output: OutputFn = print,
) -> ConfigRecord:
    if interactive:
        values = collect_interactive(input_fn, output)
        check_timezone(values['TZ'], runner)
        values = review_and_confirm(values, input_fn, output)
    else:
        values = collect_unattended(load_preset_values(env, values_file))
        check_timezone(values['TZ'], runner)

    record = ConfigRecord.from_mapping(values)
    logger.debug(f"Configuration confirmed for {record.domain} (base: {record.base})")
    return record
