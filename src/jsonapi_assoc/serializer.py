import dataclasses
import logging
import typing

from .exceptions import InvalidDeclarationError, SerializerNotFoundError
from .interfaces import SerializerFactory, SerializerFactoryType, SerializerOwner
from .models import (
    DECLINE,
    Association,
    Built,
    Directives,
    Instantiation,
    RenderOptions,
)
from .reflection import IncludeSlice, Reflection
from .registry import SerializerRegistry, default_registry

logger = logging.getLogger(__name__)


class Serializer(SerializerOwner, SerializerFactory):
    """
    The base class of serializers.

    Subclasses list their relationships in :py:attr:`reflections`.  An attribute is read
    from a method or attribute of the same name defined on the serializer subclass if there
    is one, and from the serialized object otherwise.

    :param Any object: The object to serialize.
    :param Optional[RenderOptions] options: The render options.
    """

    reflections: typing.ClassVar[typing.Sequence[Reflection]] = ()
    registry: typing.ClassVar[SerializerRegistry] = default_registry

    _object: typing.Any
    options: RenderOptions

    @property
    def object(self) -> typing.Any:
        return self._object

    @property
    def scope(self) -> typing.Any:
        return self.options.scope

    def read_attribute_for_serialization(self, name: str) -> typing.Any:
        # members of the base class, such as registry, always belong to the object
        if not hasattr(Serializer, name):
            for c in type(self).__mro__:
                if c is Serializer:
                    break
                if name in vars(c):
                    value = getattr(self, name)
                    return value() if callable(value) else value
        return getattr(self._object, name)

    @classmethod
    def serializer_for(
        cls, value: typing.Any, directives: Directives
    ) -> typing.Optional[SerializerFactoryType]:
        return cls.registry.lookup(value, directives.serializer, directives.namespace)

    @classmethod
    def instantiate(cls, value: typing.Any, options: RenderOptions) -> Instantiation:
        return Built(cls(value, options))

    @classmethod
    def get_reflection(cls, key: str) -> Reflection:
        for reflection in cls.reflections:
            if reflection.key == key:
                return reflection
        raise KeyError(key)

    def associations(self, include_slice: IncludeSlice = None) -> typing.Iterator[Association]:
        """
        Resolves every relationship declared on the serializer that is not excluded by
        its condition.

        :param include_slice: The relationships requested for inclusion.
        :return: An iterator of :py:class:`Association`.
        """
        for reflection in self.reflections:
            if reflection.excluded(self):
                continue
            yield reflection.build_association(self, self.options, include_slice)

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        keys: typing.Set[str] = set()
        for reflection in cls.reflections:
            if reflection.key in keys:
                raise InvalidDeclarationError(
                    f"relationship {reflection.key} is declared twice in {cls.__name__}"
                )
            keys.add(reflection.key)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._object!r})"

    def __init__(self, object: typing.Any, options: typing.Optional[RenderOptions] = None):
        self._object = object
        self.options = options if options is not None else RenderOptions()


class CollectionSerializer(Serializer):
    """
    A :py:class:`CollectionSerializer` serializes a sequence of objects with one serializer
    per element.  The element serializer is the one given in the render options, or the one
    found in the registry.  It declines the sequence when any element has no serializer.
    """

    serializers: typing.Sequence[Serializer]

    def __iter__(self) -> typing.Iterator[Serializer]:
        return iter(self.serializers)

    def __len__(self) -> int:
        return len(self.serializers)

    @classmethod
    def instantiate(cls, value: typing.Any, options: RenderOptions) -> Instantiation:
        element_options = dataclasses.replace(options, serializer=None)
        serializers: typing.List[Serializer] = []
        for element in value:
            serializer_type = cls.registry.lookup(element, options.serializer, options.namespace)
            if serializer_type is None:
                logger.debug("no serializer for %s in collection", type(element).__name__)
                return DECLINE
            instantiation = serializer_type.instantiate(element, element_options)
            if instantiation is DECLINE:
                return DECLINE
            serializers.append(typing.cast(Built, instantiation).serializer)
        return Built(cls(value, options, serializers))

    def __init__(
        self,
        object: typing.Any,
        options: typing.Optional[RenderOptions] = None,
        serializers: typing.Sequence[Serializer] = (),
    ):
        super().__init__(object, options)
        self.serializers = serializers


def build_serializer(
    value: typing.Any,
    options: typing.Optional[RenderOptions] = None,
    registry: typing.Optional[SerializerRegistry] = None,
) -> typing.Any:
    """
    Builds the root serializer of a render pass.

    :param Any value: The object(s) to serialize.
    :param Optional[RenderOptions] options: The render options.
    :param Optional[SerializerRegistry] registry: The registry to use; defaults to the
                                                  process-wide one.
    :raises SerializerNotFoundError: if no serializer is found or the serializer declines.
    """
    registry = registry if registry is not None else default_registry
    options = options if options is not None else RenderOptions()
    serializer_type = registry.lookup(value, options.serializer, options.namespace)
    if serializer_type is None:
        raise SerializerNotFoundError(value, options.namespace)
    instantiation = serializer_type.instantiate(value, options)
    if instantiation is DECLINE:
        raise SerializerNotFoundError(value, options.namespace)
    return typing.cast(Built, instantiation).serializer
