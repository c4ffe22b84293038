import collections.abc
import typing

from .config import config
from .deferred import resolve_deferred
from .interfaces import SerializerFactoryType

SerializerKey = typing.Tuple[typing.Optional[str], typing.Type]


class SerializerRegistry:
    """
    A :py:class:`SerializerRegistry` maps classes of resource objects to serializer types.

    Serializers can be registered under a namespace; a lookup in a namespace prefers the
    serializers registered there and falls back to the ones registered without any.
    """

    _serializers: typing.MutableMapping[SerializerKey, SerializerFactoryType]
    _collection_serializer: typing.Optional[SerializerFactoryType]

    def register(
        self,
        class_: typing.Type,
        serializer_type: SerializerFactoryType,
        namespace: typing.Optional[str] = None,
    ) -> None:
        """
        Registers ``serializer_type`` as the serializer for instances of ``class_``
        and its subclasses.
        """
        self._serializers[(namespace, class_)] = serializer_type

    def unregister(self, class_: typing.Type, namespace: typing.Optional[str] = None) -> None:
        del self._serializers[(namespace, class_)]

    def get(
        self, class_: typing.Type, namespace: typing.Optional[str] = None
    ) -> typing.Optional[SerializerFactoryType]:
        """
        Returns the serializer registered for exactly ``class_``, preferring ``namespace``.
        """
        if namespace is not None:
            serializer_type = self._serializers.get((namespace, class_))
            if serializer_type is not None:
                return serializer_type
        return self._serializers.get((None, class_))

    def query_serializer_by_class(
        self, class_: typing.Type, namespace: typing.Optional[str] = None
    ) -> typing.Optional[SerializerFactoryType]:
        for c in class_.__mro__:
            serializer_type = self.get(c, namespace)
            if serializer_type is not None:
                return serializer_type
        return None

    def query_serializer_by_value(
        self, value: typing.Any, namespace: typing.Optional[str] = None
    ) -> typing.Optional[SerializerFactoryType]:
        return self.query_serializer_by_class(type(value), namespace)

    def is_collection(self, value: typing.Any) -> bool:
        return isinstance(value, collections.abc.Sequence) and not isinstance(
            value, (str, bytes, bytearray)
        )

    def collection_serializer(self) -> SerializerFactoryType:
        """
        Returns the serializer type for collections.  Unless one is configured, it is a
        :py:class:`CollectionSerializer` that looks its elements up in this registry.
        """
        if config.collection_serializer is not None:
            return typing.cast(SerializerFactoryType, config.collection_serializer)
        if self._collection_serializer is None:
            from .serializer import CollectionSerializer

            self._collection_serializer = type(
                CollectionSerializer.__name__, (CollectionSerializer,), {"registry": self}
            )
        return self._collection_serializer

    def lookup(
        self,
        value: typing.Any,
        serializer: typing.Optional[typing.Any] = None,
        namespace: typing.Optional[str] = None,
    ) -> typing.Optional[SerializerFactoryType]:
        """
        Finds the serializer type for ``value``.

        A ``serializer_class`` attribute of the value wins over everything else.  Collections
        are given the collection serializer, which applies ``serializer`` to each element.
        Otherwise ``serializer`` is returned if given, and the registry is consulted if not.

        :param Any value: The object(s) to serialize.
        :param serializer: An explicit serializer type, or a :py:class:`Deferred` yielding one.
        :param Optional[str] namespace: The namespace to look the serializer up in.
        :return: A serializer type or :py:const:`None`.
        """
        serializer_class = getattr(value, "serializer_class", None)
        if serializer_class is not None:
            return typing.cast(SerializerFactoryType, serializer_class)
        elif self.is_collection(value):
            return self.collection_serializer()
        serializer = resolve_deferred(serializer)
        if serializer is not None:
            return typing.cast(SerializerFactoryType, serializer)
        return self.query_serializer_by_value(value, namespace)

    def __init__(self):
        self._serializers = {}
        self._collection_serializer = None


default_registry = SerializerRegistry()
