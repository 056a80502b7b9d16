# SPDX-License-Identifier: AGPL-3.0-or-later
"""Implementation of the default settings."""
from __future__ import annotations

import typing as t
import numbers
import os
import logging

import msgspec

from typing_extensions import override

logger = logging.getLogger('jivesearch')

STR_TO_BOOL = {
    '0': False,
    'false': False,
    'off': False,
    '1': True,
    'true': True,
    'on': True,
}
_UNDEFINED = object()

TypeDefinition: t.TypeAlias = (  # pylint: disable=invalid-name
    tuple[None, bool, type]
    | tuple[None, type, type]
    | tuple[None, type]
    | tuple[bool, type]
    | tuple[type, type]
    | tuple[type]
    | tuple[str | int, ...]
)

TypeDefinitionArg: t.TypeAlias = type | TypeDefinition  # pylint: disable=invalid-name


class SettingsValue:
    """Check and update a setting value"""

    def __init__(
        self,
        type_definition_arg: TypeDefinitionArg,
        default: t.Any = None,
        environ_name: str | None = None,
    ):
        self.type_definition: TypeDefinition = (
            type_definition_arg if isinstance(type_definition_arg, tuple) else (type_definition_arg,)
        )
        self.default: t.Any = default
        self.environ_name: str | None = environ_name

    @property
    def type_definition_repr(self):
        types_str = [td.__name__ if isinstance(td, type) else repr(td) for td in self.type_definition]
        return ', '.join(types_str)

    def check_type_definition(self, value: t.Any) -> None:
        if value in self.type_definition:
            return
        type_list = tuple(t for t in self.type_definition if isinstance(t, type))
        if not isinstance(value, type_list):
            raise ValueError('The value has to be one of these types/values: {}'.format(self.type_definition_repr))

    def __call__(self, value: t.Any) -> t.Any:
        if value == _UNDEFINED:
            value = self.default
        # override existing value with environ
        if self.environ_name and self.environ_name in os.environ:
            value = os.environ[self.environ_name]
            if self.type_definition == (bool,):
                value = STR_TO_BOOL[value.lower()]

        self.check_type_definition(value)
        return value


class SettingsPortValue(SettingsValue):
    """A TCP port, a string from the environment is converted to ``int``."""

    @override
    def __call__(self, value: t.Any) -> t.Any:
        value = super().__call__(value)
        return int(value)


class SettingsBangs(msgspec.Struct, kw_only=True, forbid_unknown_fields=True):
    """Options of the bang dispatcher and its suggester.

    .. code:: yaml

       bangs:
         suggester: valkey
         index: jivesearch_bangs
         suggest_size: 10
         encode_term: false
         recreate_index: true
    """

    suggester: t.Literal["memory", "valkey"] = "memory"
    """Backend of the bang autocomplete, ``valkey`` needs ``valkey.url``."""

    index: str = "jivesearch_bangs"
    """Name of the index (valkey key) the triggers are stored in."""

    suggest_size: int = 10
    """Default (and maximum) number of suggestions returned."""

    encode_term: bool = False
    """Percent-encode the term before it is substituted into the URL
    templates.  Off by default: the templates get the literal term."""

    recreate_index: bool = True
    """Delete and rebuild the suggester index at boot to pick up changes of the
    bangs."""


class SettingsStock(msgspec.Struct, kw_only=True, forbid_unknown_fields=True):
    """Stock quote provider (IEX batch API)."""

    url: str = "https://api.iextrading.com/1.0"
    token: str = ""
    history_range: str = "5y"


class SettingsInstant(msgspec.Struct, kw_only=True, forbid_unknown_fields=True):
    """Options of the instant answers.

    .. code:: yaml

       instant:
         stock:
           url: https://api.iextrading.com/1.0
           token: ""
    """

    stock: SettingsStock = msgspec.field(default_factory=SettingsStock)


def apply_schema(settings: dict[str, t.Any], schema: dict[str, t.Any], path_list: list[str]):
    error = False
    for key, value in schema.items():
        if isinstance(value, type) and issubclass(value, msgspec.Struct):
            try:
                # Type Validation at runtime:
                # https://jcristharif.com/msgspec/structs.html#type-validation
                cfg_dict = settings.get(key) or {}
                cfg_json = msgspec.json.encode(cfg_dict)
                settings[key] = msgspec.json.decode(cfg_json, type=value)
            except msgspec.ValidationError as e:
                # replace `$` by the (doted) name space:
                #     Expected `str`, got `int` - at `$.index`
                # is converted to:
                #     Expected `str`, got `int` - at `bangs.index`
                msg = str(e)
                msg = msg.replace("`$.", "`" + ".".join([*path_list, key]) + ".")
                logger.error(msg)
                error = True
        elif isinstance(value, SettingsValue):
            try:
                settings[key] = value(settings.get(key, _UNDEFINED))
            except Exception as e:  # pylint: disable=broad-except
                # don't stop now: check other values
                msg = ".".join([*path_list, key]) + f": {e}"
                logger.error(msg)
                error = True
        elif isinstance(value, dict):
            error = apply_schema(settings.setdefault(key, {}), schema[key], [*path_list, key]) or error
        else:
            settings.setdefault(key, value)
    if len(path_list) == 0 and error:
        raise ValueError("Invalid settings.yml")
    return error


SCHEMA: dict[str, t.Any] = {
    'general': {
        'debug': SettingsValue(bool, False, 'JIVESEARCH_DEBUG'),
        'instance_name': SettingsValue(str, 'Jive Search'),
    },
    'server': {
        'port': SettingsPortValue((int, str), 8000, 'JIVESEARCH_PORT'),
        'bind_address': SettingsValue(str, '127.0.0.1', 'JIVESEARCH_BIND_ADDRESS'),
        'secret_key': SettingsValue(str, environ_name='JIVESEARCH_SECRET'),
    },
    'search': {
        'query_var': SettingsValue(str, 'q'),
        'default_lang': SettingsValue(str, 'en'),
        'timeout': SettingsValue(numbers.Real, 5.0),
    },
    'bangs': SettingsBangs,
    'instant': SettingsInstant,
    'valkey': {
        'url': SettingsValue((None, False, str), False, 'JIVESEARCH_VALKEY_URL'),
    },
    'outgoing': {
        'useragent': SettingsValue(str, 'jivesearch'),
        'request_timeout': SettingsValue(numbers.Real, 3.0),
        'verify': SettingsValue((bool, str), True),
        'pool_connections': SettingsValue(int, 100),
        'pool_maxsize': SettingsValue(int, 10),
        'keepalive_expiry': SettingsValue(numbers.Real, 5.0),
        'max_redirects': SettingsValue(int, 30),
    },
}
