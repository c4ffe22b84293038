import collections.abc
import logging
import typing

from sqlalchemy import orm  # type: ignore

from ...interfaces import SerializerFactoryType
from ...registry import SerializerRegistry

logger = logging.getLogger(__name__)


def object_mapper_or_none(value: typing.Any) -> typing.Optional[orm.Mapper]:
    if value is None or isinstance(value, type):
        return None
    try:
        return orm.object_mapper(value)
    except orm.exc.UnmappedInstanceError:
        return None


class SQLASerializerRegistry(SerializerRegistry):
    """
    A :py:class:`SQLASerializerRegistry` looks mapped instances up by their SQLAlchemy mapper.
    The mapper hierarchy is walked up to the root mapper, so that instances of a polymorphic
    subclass are serialized by the serializer of the entity they inherit from unless one
    is registered for the subclass itself.

    Besides sequences, the collections SQLAlchemy hands out for to-many relationships are
    given the collection serializer: sets (``collection_class=set``) and queries
    (``lazy="dynamic"``).
    """

    def query_serializer_by_mapper(
        self, sa_mapper: orm.Mapper, namespace: typing.Optional[str] = None
    ) -> typing.Optional[SerializerFactoryType]:
        for m in sa_mapper.iterate_to_root():
            serializer_type = self.get(m.class_, namespace)
            if serializer_type is not None:
                return serializer_type
        return None

    def query_serializer_by_value(
        self, value: typing.Any, namespace: typing.Optional[str] = None
    ) -> typing.Optional[SerializerFactoryType]:
        sa_mapper = object_mapper_or_none(value)
        if sa_mapper is not None:
            serializer_type = self.query_serializer_by_mapper(sa_mapper, namespace)
            if serializer_type is not None:
                return serializer_type
            logger.debug("no serializer registered along the mapper hierarchy of %s", sa_mapper)
        return super().query_serializer_by_value(value, namespace)

    def is_collection(self, value: typing.Any) -> bool:
        if isinstance(value, (collections.abc.Set, orm.Query)):
            return True
        return super().is_collection(value)
