import typing

from .exceptions import InvalidDeclarationError
from .interfaces import SerializerOwner

Condition = typing.Union[str, typing.Callable[[SerializerOwner], bool]]


class Field:
    """
    A :py:class:`Field` is a named declaration on a serializer type, carrying an
    optional resolver and a bag of options.

    :param str name: The name of the field.
    :param Optional[Callable] resolver: A callable computing the field's value.
    :param Optional[str] key: The externally visible name, if it differs from ``name``.
    :param Optional[Condition] if_: The field is serialized only when the condition holds.
    :param Optional[Condition] unless: The field is serialized only when the condition does not hold.
    """

    name: str
    resolver: typing.Optional[typing.Callable[..., typing.Any]]
    options: typing.Dict[str, typing.Any]
    _key: typing.Optional[str]
    _condition: typing.Optional[Condition] = None
    _condition_negated: bool = False

    @property
    def key(self) -> str:
        return self._key if self._key is not None else self.name

    def _evaluate_condition(self, serializer: SerializerOwner) -> bool:
        assert self._condition is not None
        if isinstance(self._condition, str):
            return bool(getattr(serializer, self._condition)())
        else:
            return bool(self._condition(serializer))

    def excluded(self, serializer: SerializerOwner) -> bool:
        """
        Tells whether the field should be left out when serializing with ``serializer``.
        """
        if self._condition is None:
            return False
        return self._evaluate_condition(serializer) is self._condition_negated

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"

    def __init__(
        self,
        name: str,
        resolver: typing.Optional[typing.Callable[..., typing.Any]] = None,
        *,
        key: typing.Optional[str] = None,
        if_: typing.Optional[Condition] = None,
        unless: typing.Optional[Condition] = None,
        **options: typing.Any,
    ):
        if if_ is not None and unless is not None:
            raise InvalidDeclarationError(f"field {name} specifies both if_ and unless")
        self.name = name
        self.resolver = resolver
        self.options = dict(options)
        self._key = key
        if if_ is not None:
            self._condition = if_
        elif unless is not None:
            self._condition = unless
            self._condition_negated = True
