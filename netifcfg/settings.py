# This file is part of netifcfg. See LICENSE file for license information.

import os

# Set and read for overriding the template directory
TEMPLATES_ENV_NAME = "NETIFCFG_TEMPLATES"

# Templates shipped with the package
DEFAULT_TEMPLATES_DIR = os.path.join(
    os.path.dirname(os.path.abspath(__file__)), "templates"
)

# What u get if no config is provided
CFG_BUILTIN = {
    "version": 1,
    # NetworkManager fights with the legacy network service over ifcfg files
    "disable_network_manager": True,
    "network_service_restart": True,
    "templates_dir": None,
    "interfaces": [],
}


def get_templates_dir(cfg=None):
    """Return the template directory, honouring env and config overrides."""
    env_dir = os.environ.get(TEMPLATES_ENV_NAME)
    if env_dir:
        return env_dir
    if cfg and cfg.get("templates_dir"):
        return cfg["templates_dir"]
    return DEFAULT_TEMPLATES_DIR
