"""
Process-wide settings.

.. code-block:: python

   from jsonapi_assoc import configure

   configure(include_data_default="if_requested")

Settings are read when a :py:class:`Reflection` is declared, so they need to be
in place before serializer classes are defined.
"""
import contextlib
import dataclasses
import typing

from .models import IncludeData


@dataclasses.dataclass
class Config:
    include_data_default: IncludeData = IncludeData.ALWAYS
    """
    The inclusion policy of relationships that do not specify one.
    """

    collection_serializer: typing.Optional[type] = None
    """
    The serializer type used for sequences of related objects.  When left
    :py:const:`None`, :py:class:`jsonapi_assoc.serializer.CollectionSerializer` is used.
    """


config = Config()


def configure(**kwargs: typing.Any) -> Config:
    """
    Updates the process-wide :py:data:`config`.

    :raises TypeError: if an unknown setting is given.
    :raises UnknownIncludeDataSettingError: if ``include_data_default`` is invalid.
    """
    names = {f.name for f in dataclasses.fields(Config)}
    values = {}
    for k, v in kwargs.items():
        if k not in names:
            raise TypeError(f"unknown setting: {k}")
        if k == "include_data_default":
            v = IncludeData.coerce(v)
        values[k] = v
    for k, v in values.items():
        setattr(config, k, v)
    return config


@contextlib.contextmanager
def override(**kwargs: typing.Any) -> typing.Iterator[Config]:
    """
    Temporarily applies the given settings.
    """
    saved = {f.name: getattr(config, f.name) for f in dataclasses.fields(config)}
    try:
        yield configure(**kwargs)
    finally:
        for k, v in saved.items():
            setattr(config, k, v)
