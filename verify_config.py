#!/usr/bin/env python3
"""Simple script to verify config.example.yaml structure without loading the app."""

import yaml
from pathlib import Path


def verify_config_structure(config_file: Path = Path("config.example.yaml")) -> bool:
    """Verify a config file has the expected structure."""
    if not config_file.exists():
        print(f"✗ {config_file} not found")
        return False

    try:
        with open(config_file, 'r') as f:
            config = yaml.safe_load(f)
    except Exception as e:
        print(f"✗ Failed to parse {config_file}: {e}")
        return False

    if not isinstance(config, dict):
        print(f"✗ {config_file} must contain a mapping")
        return False

    errors = []

    # dmphub is the only required section
    dmphub = config.get('dmphub')
    if dmphub is None:
        errors.append("Missing required key: dmphub")
    elif not isinstance(dmphub, dict):
        errors.append("'dmphub' must be a dictionary")
    else:
        base_path = dmphub.get('base_path')
        if not base_path:
            errors.append("dmphub missing key: base_path")
        elif not str(base_path).startswith(('http://', 'https://')):
            errors.append(f"dmphub.base_path must be an http(s) URL: {base_path}")

    nsf = config.get('nsf')
    if nsf is not None and not isinstance(nsf, dict):
        errors.append("'nsf' must be a dictionary")

    only_dois = config.get('only_dois')
    if only_dois is not None and not isinstance(only_dois, list):
        errors.append("'only_dois' must be a list")

    optional_checks = {
        'scan_interval': str,
        'dry_run': bool,
        'logging': dict,
        'advanced': dict,
    }

    for key, expected_type in optional_checks.items():
        if key in config and not isinstance(config[key], expected_type):
            errors.append(f"'{key}' must be of type {expected_type.__name__}")

    if errors:
        print(f"✗ {config_file} validation failed:")
        for error in errors:
            print(f"  - {error}")
        return False

    print(f"✓ {config_file} structure is valid")
    print(f"  - DMPHub: {dmphub.get('base_path')}")
    print(f"  - NSF: {(nsf or {}).get('base_path', 'default')}")
    print(f"  - Scan interval: {config.get('scan_interval', 'not set')}")
    print(f"  - {len(only_dois or [])} DOIs in allow-list")
    print(f"  - Dry run: {'yes' if config.get('dry_run') else 'no'}")
    return True


if __name__ == "__main__":
    import sys
    path = Path(sys.argv[1]) if len(sys.argv) > 1 else Path("config.example.yaml")
    success = verify_config_structure(path)
    sys.exit(0 if success else 1)
