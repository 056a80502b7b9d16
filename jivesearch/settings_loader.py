# SPDX-License-Identifier: AGPL-3.0-or-later
"""Loading the configuration from YAML files.

The default configuration is loaded from :origin:`DEFAULT_SETTINGS_FILE
<jivesearch/settings.yml>`.  Local customizations are looked up by
:py:obj:`get_user_cfg_folder`, the ``JIVESEARCH_SETTINGS_PATH`` environment
variable can be used to point to a file or a folder.
"""

import typing as t
import os.path
from collections.abc import MutableMapping
from pathlib import Path

import yaml

from jivesearch.exceptions import JiveSettingsException

JSONType: t.TypeAlias = dict[str, "JSONType"] | list["JSONType"] | str | int | float | bool | None
SettingsType: t.TypeAlias = dict[str, JSONType]

jive_dir = os.path.abspath(os.path.dirname(__file__))

SETTINGS_YAML = Path("settings.yml")
DEFAULT_SETTINGS_FILE = Path(jive_dir) / SETTINGS_YAML
"""The :origin:`jivesearch/settings.yml` file with all the default settings."""


def load_yaml(file_name: str | Path) -> SettingsType:
    """Load YAML config from a file."""
    try:
        with open(file_name, 'r', encoding='utf-8') as settings_yaml:
            return yaml.safe_load(settings_yaml) or {}
    except IOError as e:
        raise JiveSettingsException(e, str(file_name)) from e
    except yaml.YAMLError as e:
        raise JiveSettingsException(e, str(file_name)) from e


def get_user_cfg_folder() -> Path | None:
    """Returns folder where the local configurations are located.

    1. ``JIVESEARCH_SETTINGS_PATH`` points to a folder (e.g.
       ``/etc/myjive/``): the settings are expected in ``settings.yml`` of this
       folder.

    2. ``JIVESEARCH_SETTINGS_PATH`` points to a file (e.g.
       ``/etc/myjive/frontend.yml``): this file holds the settings, the folder
       of the file is the configuration folder.

    3. If folder ``/etc/jivesearch`` exists, it is used.

    ``None`` is returned when none of the above exists.  If the environment is
    set but the path does not exist, a :py:obj:`EnvironmentError` is raised.
    """

    folder = None
    settings_path = os.environ.get("JIVESEARCH_SETTINGS_PATH")

    # intended exclusively for the tests
    disable_etc = os.environ.get('JIVESEARCH_DISABLE_ETC_SETTINGS', '').lower() in ('1', 'true')

    if settings_path:
        settings_path = Path(settings_path)
        if settings_path.is_dir():
            folder = settings_path
        elif settings_path.is_file():
            folder = settings_path.parent
        else:
            raise EnvironmentError(1, f"{settings_path} not exists!", settings_path)

    if not folder and not disable_etc:
        folder = Path("/etc/jivesearch")
        if not folder.is_dir():
            folder = None

    return folder


def update_dict(default_dict: MutableMapping[str, t.Any], user_dict: MutableMapping[str, t.Any]):
    for k, v in user_dict.items():
        if isinstance(v, MutableMapping):
            default_dict[k] = update_dict(default_dict.get(k, {}), v)  # type: ignore
        else:
            default_dict[k] = v
    return default_dict


def update_settings(default_settings: MutableMapping[str, t.Any], user_settings: MutableMapping[str, t.Any]):
    """Merge ``user_settings`` into ``default_settings``.  Nested sections are
    merged key by key, lists and scalars of the user replace the defaults."""

    for k, v in user_settings.items():
        if k == 'use_default_settings':
            continue
        if k in default_settings and isinstance(v, MutableMapping):
            update_dict(default_settings[k], v)  # type: ignore
        else:
            default_settings[k] = v
    return default_settings


def is_use_default_settings(user_settings: SettingsType) -> bool:

    use_default_settings: bool | JSONType = user_settings.get('use_default_settings')
    if use_default_settings is True:
        return True
    if use_default_settings is False or use_default_settings is None:
        return False
    raise ValueError('Invalid value for use_default_settings')


def load_settings(load_user_settings: bool = True) -> tuple[SettingsType, str]:
    """Load the settings of the frontend (:origin:`jivesearch/settings.yml`),
    returns the settings and a message describing what has been loaded."""

    msg = f"load the default settings from {DEFAULT_SETTINGS_FILE}"
    cfg = load_yaml(DEFAULT_SETTINGS_FILE)
    cfg_folder = get_user_cfg_folder()

    if not load_user_settings or not cfg_folder:
        return cfg, msg

    settings_yml = os.environ.get("JIVESEARCH_SETTINGS_PATH")
    if settings_yml and Path(settings_yml).is_file():
        settings_yml = Path(settings_yml).name
    else:
        settings_yml = SETTINGS_YAML

    cfg_file = cfg_folder / settings_yml
    if not cfg_file.exists():
        return cfg, msg

    msg = f"load the user settings from {cfg_file}"
    user_cfg = load_yaml(cfg_file)

    if is_use_default_settings(user_cfg):
        msg = f"merge the default settings ( {DEFAULT_SETTINGS_FILE} ) and the user settings ( {cfg_file} )"
        update_settings(cfg, user_cfg)
    else:
        cfg = user_cfg

    return cfg, msg
