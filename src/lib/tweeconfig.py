"""
twee-config macro dictionary loader

Projects can describe their custom macros in *.twee-config.yml (or .json)
files at the workspace root:

    sugarcube-2:
      macros:
        menu:
          container: true
          children:
            - option
            - divider

Children of container macros are mid-block macros: inside <<menu>> ...
<</menu>> an <<option>> tag is rendered at the level of <<menu>> itself.

Broken or unreadable files never stop formatting; they are logged and
contribute nothing.
"""

import json
from pathlib import Path
from typing import Any

import yaml

from ..config.settings import appsettings
from ..models.result import TweeConfigResult
from .log import LOG


def tweeConfig_extract(config: Any) -> TweeConfigResult:
    """
    Collect container children from a parsed twee-config document.

    Args:
        config: Parsed YAML/JSON value (anything; non-mappings yield nothing)

    Returns:
        TweeConfigResult with the children of every container macro
    """
    result = TweeConfigResult()
    if not isinstance(config, dict):
        return result

    for format_config in config.values():
        if not isinstance(format_config, dict):
            continue
        macros = format_config.get("macros")
        if not isinstance(macros, dict):
            continue

        for definition in macros.values():
            if not isinstance(definition, dict) or not definition.get("container"):
                continue
            children = definition.get("children")
            if not isinstance(children, list):
                continue
            result.merge(TweeConfigResult(
                custom_mid_block_macros=[child for child in children if isinstance(child, str)]
            ))

    return result


def tweeConfig_parse(content: str, fmt: str) -> TweeConfigResult:
    """
    Parse twee-config text and extract mid-block macros.

    Args:
        content: File contents
        fmt: "yaml" or "json"

    Returns:
        TweeConfigResult; empty if the content cannot be parsed
    """
    try:
        config = yaml.safe_load(content) if fmt == "yaml" else json.loads(content)
    except (yaml.YAMLError, ValueError) as e:
        LOG(f"Error parsing twee-config: {e}", level=1)
        return TweeConfigResult()

    return tweeConfig_extract(config)


def tweeConfig_load(root_dir: Path) -> TweeConfigResult:
    """
    Load every twee-config file directly inside ``root_dir``.

    Args:
        root_dir: Workspace root

    Returns:
        Merged TweeConfigResult over all files (sorted by name)
    """
    result = TweeConfigResult()
    root_dir = Path(root_dir)

    try:
        entries = sorted(root_dir.iterdir())
    except OSError as e:
        LOG(f"Error reading twee-config files in {root_dir}: {e}", level=1)
        return result

    for path in entries:
        fmt = appsettings.tweeConfig_kind(path.name)
        if fmt is None or not path.is_file():
            continue
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            LOG(f"Error reading {path}: {e}", level=1)
            continue

        parsed = tweeConfig_parse(content, fmt)
        LOG(f"{path.name}: {len(parsed.custom_mid_block_macros)} mid-block macros", level=2)
        result.merge(parsed)

    return result
