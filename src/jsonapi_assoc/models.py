"""
Classes in :py:mod:`jsonapi_assoc.models` describe the values that flow between
relationship declarations, serializers and the renderer.

Three tagged results are defined here:

* :py:data:`Resolved` is what a resolver returns: either :py:data:`UNSET` (the resolver
  only registered links or meta) or a :py:class:`Value` wrapping the related object(s).
* :py:data:`Instantiation` is what :py:meth:`SerializerFactory.instantiate` returns: either
  :py:class:`Built` or :py:data:`DECLINE`.
* :py:data:`Resolution` is what an :py:class:`Association` carries: a
  :py:class:`NestedSerializer`, a :py:class:`VirtualValue`, or :py:data:`ABSENT`.
"""

import dataclasses
import enum
import typing
from collections import OrderedDict

T = typing.TypeVar("T")


class _Singleton:
    _singleton: typing.ClassVar[typing.Optional["_Singleton"]] = None
    _name: typing.ClassVar[str]

    def __bool__(self):
        return False

    def __repr__(self) -> str:
        return self._name

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self

    def __new__(cls):
        if cls.__dict__.get("_singleton") is None:
            cls._singleton = object.__new__(cls)
        return cls._singleton


class UnsetType(_Singleton):
    _name = "UNSET"


UNSET = UnsetType()
"""
Returned by resolvers that ran for their side effects only.
"""


@dataclasses.dataclass(frozen=True)
class Value(typing.Generic[T]):
    """
    A value computed by a resolver. ``Value(None)`` is a legitimate result and
    differs from :py:data:`UNSET`.
    """

    value: T


Resolved = typing.Union[UnsetType, Value[typing.Any]]


class DeclineType(_Singleton):
    _name = "DECLINE"


DECLINE = DeclineType()
"""
Returned by :py:meth:`SerializerFactory.instantiate` when the serializer type refuses
to serialize the given value.
"""


@dataclasses.dataclass(frozen=True)
class Built(typing.Generic[T]):
    serializer: T


Instantiation = typing.Union[Built[typing.Any], DeclineType]


class AbsentType(_Singleton):
    _name = "ABSENT"


ABSENT = AbsentType()
"""
Denotes a relationship that has no value to render, either because it is not
included or because there is nothing on the other side.
"""


@dataclasses.dataclass(frozen=True)
class NestedSerializer:
    serializer: typing.Any


@dataclasses.dataclass(frozen=True)
class VirtualValue:
    value: typing.Any


Resolution = typing.Union[NestedSerializer, VirtualValue, AbsentType]


class IncludeData(enum.Enum):
    ALWAYS = "always"
    """The related data is always included."""
    NEVER = "never"
    """The related data is never included; only links and meta are rendered."""
    IF_REQUESTED = "if_requested"
    """The related data is included when the relationship name appears in the include slice."""

    @classmethod
    def coerce(cls, value: typing.Any) -> "IncludeData":
        """
        Converts ``value`` into an :py:class:`IncludeData`. ``True`` and ``False``
        stand for ``ALWAYS`` and ``NEVER``, and strings are matched against the member values.

        :raises UnknownIncludeDataSettingError: if ``value`` denotes none of the members.
        """
        from .exceptions import UnknownIncludeDataSettingError

        if isinstance(value, IncludeData):
            return value
        elif value is True:
            return cls.ALWAYS
        elif value is False:
            return cls.NEVER
        elif isinstance(value, str):
            for e in cls:
                if e.value == value:
                    return e
        raise UnknownIncludeDataSettingError(value)


@dataclasses.dataclass(frozen=True)
class RenderOptions:
    """
    Ambient options of a render pass. Instances are never mutated; nested
    serializers receive a copy derived with :py:func:`dataclasses.replace`.
    """

    namespace: typing.Optional[str] = None
    """
    The namespace in which serializer classes are looked up.
    """

    serializer: typing.Optional[typing.Any] = None
    """
    An explicit serializer type. Collection serializers use it for their elements.
    """

    serializer_context_class: typing.Optional[type] = None
    """
    The type of the serializer whose relationship produced these options.
    """

    scope: typing.Any = None
    """
    The render scope (typically the current user) exposed to resolvers.
    """

    extra: typing.Mapping[str, typing.Any] = dataclasses.field(default_factory=dict)
    """
    Arbitrary options that are carried over to nested serializers.
    """


@dataclasses.dataclass(frozen=True)
class Directives:
    """
    The directive set of a relationship: the declaration's option bag merged with
    the values computed while resolving it.
    """

    namespace: typing.Optional[str] = None
    serializer: typing.Optional[typing.Any] = None
    include_data: typing.Optional[bool] = None
    """
    ``None`` until the inclusion decision has been made.
    """
    links: typing.Mapping[str, typing.Any] = dataclasses.field(default_factory=OrderedDict)
    meta: typing.Any = None
    options: typing.Mapping[str, typing.Any] = dataclasses.field(default_factory=dict)
    """
    Options of the declaration that the core does not interpret itself.
    """


@dataclasses.dataclass(frozen=True)
class Association:
    """
    An :py:class:`Association` is the outcome of resolving a single relationship
    declaration against a concrete parent serializer.
    """

    name: str
    """
    The externally visible name of the relationship.
    """

    reflection: "Reflection"
    directives: Directives
    resolution: Resolution

    @property
    def key(self) -> str:
        return self.name

    @property
    def serializer(self) -> typing.Optional[typing.Any]:
        """
        The nested serializer instance, or :py:const:`None` if the relationship
        is not resolved into one.
        """
        if isinstance(self.resolution, NestedSerializer):
            return self.resolution.serializer
        else:
            return None

    @property
    def virtual_value(self) -> typing.Optional[typing.Any]:
        """
        The raw value attached to the relationship, or :py:const:`None` if the
        relationship is not resolved into one.
        """
        if isinstance(self.resolution, VirtualValue):
            return self.resolution.value
        else:
            return None

    @property
    def absent(self) -> bool:
        return self.resolution is ABSENT

    @property
    def include_data(self) -> bool:
        return bool(self.directives.include_data)

    @property
    def links(self) -> typing.Mapping[str, typing.Any]:
        return self.directives.links

    @property
    def meta(self) -> typing.Any:
        return self.directives.meta

    @property
    def namespace(self) -> typing.Optional[str]:
        return self.directives.namespace


if typing.TYPE_CHECKING:
    from .reflection import Reflection  # noqa: E402
