from .core import SQLASerializerRegistry, object_mapper_or_none  # noqa
