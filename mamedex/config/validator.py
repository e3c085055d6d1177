"""Configuration validation."""

import logging
from typing import Dict, Any, List

from ..export import EXPORT_FORMATS
from ..filters import FILTER_NAMES
from ..readers.sources import SOURCES_BY_NAME

logger = logging.getLogger(__name__)


class ValidationError(Exception):
    """Configuration validation errors."""
    pass


def validate_config(config: Dict[str, Any]) -> None:
    """
    Validate configuration structure and values.

    Every section is optional. All problems are collected and reported
    together.

    Args:
        config: Configuration dictionary from loader

    Raises:
        ValidationError: If configuration is invalid
    """
    errors = []

    for section_name, validate in (
        ('paths', _validate_paths),
        ('sources', _validate_sources),
        ('export', _validate_export),
        ('logging', _validate_logging),
    ):
        section = config.get(section_name) or {}
        if not isinstance(section, dict):
            errors.append(f"{section_name} must be a mapping")
            continue
        errors.extend(validate(section))

    errors.extend(_validate_filters(config.get('filters') or []))

    if errors:
        raise ValidationError(
            "Configuration validation failed:\n  - " + "\n  - ".join(errors)
        )


def _validate_paths(section: Dict[str, Any]) -> List[str]:
    """Validate paths section."""
    errors = []

    for path_key in ('data_dir', 'export_dir'):
        value = section.get(path_key)
        if value is not None and not isinstance(value, str):
            errors.append(f"paths.{path_key} must be a string path")

    return errors


def _validate_sources(section: Dict[str, Any]) -> List[str]:
    """Validate explicit per-source file overrides."""
    errors = []

    for name, path in section.items():
        if name not in SOURCES_BY_NAME:
            errors.append(
                f"sources.{name} is not a known source "
                f"(expected one of: {', '.join(SOURCES_BY_NAME)})"
            )
        elif not isinstance(path, str):
            errors.append(f"sources.{name} must be a string path")

    return errors


def _validate_filters(filters: Any) -> List[str]:
    """Validate the ordered filter list."""
    if not isinstance(filters, list):
        return ["filters must be a list"]

    errors = []
    for name in filters:
        if name not in FILTER_NAMES:
            errors.append(
                f"filters entry '{name}' must be one of: {', '.join(FILTER_NAMES)}"
            )
    return errors


def _validate_export(section: Dict[str, Any]) -> List[str]:
    """Validate export options section."""
    errors = []

    formats = section.get('formats', list(EXPORT_FORMATS))
    if not isinstance(formats, list):
        errors.append("export.formats must be a list")
    else:
        for fmt in formats:
            if fmt not in EXPORT_FORMATS:
                errors.append(f"export.formats entry '{fmt}' must be one of: {', '.join(EXPORT_FORMATS)}")

    if 'batch_size' in section:
        batch_size = section['batch_size']
        if isinstance(batch_size, bool) or not isinstance(batch_size, int) or batch_size < 1:
            errors.append("export.batch_size must be a positive integer")

    return errors


def _validate_logging(section: Dict[str, Any]) -> List[str]:
    """Validate logging options section."""
    errors = []

    level = section.get('level', 'INFO')
    valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR']
    if not isinstance(level, str) or level.upper() not in valid_levels:
        errors.append(f"logging.level must be one of: {', '.join(valid_levels)}")

    console = section.get('console', True)
    if not isinstance(console, bool):
        errors.append("logging.console must be a boolean")

    if 'file' in section and section['file'] is not None:
        if not isinstance(section['file'], str):
            errors.append("logging.file must be a string path or null")

    return errors
