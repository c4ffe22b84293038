import dataclasses
import typing


def as_json(value: typing.Any) -> typing.Any:
    """
    Returns the plain external representation of ``value``.

    Objects providing an ``as_json()`` method are asked for it first, dataclass
    instances are turned into dictionaries, and everything else is returned as is.
    """
    to_json = getattr(value, "as_json", None)
    if callable(to_json):
        result = to_json()
        if result is not None and result is not False:
            return result
    elif dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    return value
