"""
This module contains the interfaces that relationship resolution consumes from
the serializers it works with.  :py:class:`jsonapi_assoc.serializer.Serializer`
implements all of them, but any class that does can take part in resolution.

"""
import abc
import typing

from .models import Directives, Instantiation, RenderOptions


class SerializerOwner(metaclass=abc.ABCMeta):
    """
    A :py:class:`SerializerOwner` is a serializer instance that owns relationship
    declarations, i.e. the parent side of a relationship.
    """

    @property
    @abc.abstractmethod
    def object(self) -> typing.Any:
        """
        Returns the resource object being serialized.
        """
        ...  # pragma: nocover

    @property
    @abc.abstractmethod
    def scope(self) -> typing.Any:
        """
        Returns the scope of the current render pass.
        """
        ...  # pragma: nocover

    @abc.abstractmethod
    def read_attribute_for_serialization(self, name: str) -> typing.Any:
        """
        Reads the attribute ``name`` in the form it should be serialized.

        :param str name: The name of the attribute.
        :return: The attribute's value.
        """
        ...  # pragma: nocover

    @classmethod
    @abc.abstractmethod
    def serializer_for(
        cls, value: typing.Any, directives: Directives
    ) -> typing.Optional["SerializerFactoryType"]:
        """
        Finds the serializer type that is able to serialize ``value``.

        :param Any value: The related object(s).
        :param Directives directives: The directives of the relationship being resolved.
        :return: A serializer type or :py:const:`None` if no serializer is known for the value.
        """
        ...  # pragma: nocover


class SerializerFactory(metaclass=abc.ABCMeta):
    """
    A :py:class:`SerializerFactory` is a serializer type as seen by relationship resolution.
    """

    @classmethod
    @abc.abstractmethod
    def instantiate(cls, value: typing.Any, options: RenderOptions) -> Instantiation:
        """
        Builds a serializer for ``value``.

        Implementations return :py:data:`DECLINE` when they decide not to serialize the value,
        in which case the value is attached to the relationship as is.  Errors must be raised,
        not turned into a decline.

        :param Any value: The object(s) to serialize.
        :param RenderOptions options: The options for the new serializer.
        :return: Either :py:class:`Built` or :py:data:`DECLINE`.
        """
        ...  # pragma: nocover


SerializerFactoryType = typing.Type[SerializerFactory]
