""" Base class shared by the configuration objects. """
from __future__ import annotations

from typing import Any

import attrs


class CommonBase:
    """ Provide a readable summary of the configuration values when printed. """

    def _values_for_str(self) -> dict[str, Any]:
        if attrs.has(type(self)):
            values = {f.name: getattr(self, f.name, None) for f in attrs.fields(type(self))}
        else:
            values = {}
        # Attributes which are set outside of the attrs fields (ie. in __attrs_post_init__)
        values.update(getattr(self, "__dict__", {}))
        return values

    def __str__(self) -> str:
        s = [f"{k} = {v}" for k, v in self._values_for_str().items()]
        return "[i] {} with \n .  {}".format(self.__class__.__name__, "\n .  ".join(s))
