"""
CLI command to initialize the router configuration
"""

from pathlib import Path
from typing import Optional

from ..core.config import RouterConfig
from .config_discovery import LOCAL_CONFIG_NAME

CONFIG_HEADER = """\
# connector-router configuration
#
# Values may reference environment variables: ${VAR} or ${VAR:-default}
"""


def run_init_command(force: bool = False, path: Optional[str] = None) -> int:
    """
    Write the default configuration to ./connector_router.yaml or a custom path

    Args:
        force: If True, overwrite existing config file
        path: Custom path for config file

    Returns:
        Exit code (0 = success, 1 = error)
    """
    config_path = Path(path or LOCAL_CONFIG_NAME).resolve()

    if config_path.exists() and not force:
        print(f"❌ Config already exists: {config_path}")
        print("   Use --force to overwrite")
        return 1

    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(CONFIG_HEADER + RouterConfig.default().to_yaml(), encoding='utf-8')
    except OSError as e:
        print(f"❌ Failed to write config file: {config_path}")
        print(f"   Error: {e}")
        return 1

    print(f"✅ Config created: {config_path}")
    print("\nNext steps:")
    print(f"  1. Adjust clearances and snapping in {config_path}")
    print("  2. Route a scene:")
    print("     connector-router route scene.yaml")
    return 0
