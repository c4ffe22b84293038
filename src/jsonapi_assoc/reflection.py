"""
:py:mod:`jsonapi_assoc.reflection` holds the declaration of a relationship and the
algorithm that resolves it against a concrete serializer.

Synopsis
--------

.. code-block:: python

   def last_comments(ctx):
       ctx.register_link("related", f"/posts/{ctx.object.id}/comments")
       return Value(ctx.object.comments[-1:])

   class PostSerializer(Serializer):
       reflections = [
           Reflection("author", serializer=Deferred(lambda: AuthorSerializer)),
           Reflection("comments"),
           Reflection("comments", last_comments, key="last_comments"),
           Reflection("blog", include_data="if_requested"),
       ]

   post_serializer = PostSerializer(post, RenderOptions(namespace="v2"))
   for association in post_serializer.associations({"blog": {}}):
       ...

Every call to :py:meth:`Reflection.value` runs the resolver against a fresh
:py:class:`ResolutionContext`, so a declaration can be shared by concurrent render passes.
"""
import copy
import dataclasses
import logging
import typing
from collections import OrderedDict

from .config import config
from .deferred import resolve_deferred
from .exceptions import InvalidResolverResultError, UnknownIncludeDataSettingError
from .fields import Field
from .interfaces import SerializerFactoryType, SerializerOwner
from .models import (
    ABSENT,
    DECLINE,
    UNSET,
    Association,
    Directives,
    IncludeData,
    NestedSerializer,
    RenderOptions,
    Resolution,
    Resolved,
    UnsetType,
    Value,
    VirtualValue,
)
from .utils import as_json

logger = logging.getLogger(__name__)

IncludeSlice = typing.Optional[typing.Mapping[str, typing.Any]]


class DirectiveRecorder:
    """
    Stores the link, meta and inclusion directives of a relationship.  Every setter
    returns :py:data:`UNSET`, so that a resolver can end with one of them and still
    fall back to the default attribute lookup.
    """

    links: "OrderedDict[str, typing.Any]"
    meta: typing.Any
    include_data_setting: IncludeData

    def register_link(self, name: str, value: typing.Any) -> UnsetType:
        """
        Registers a link.  ``value`` is either the link itself or a callable that
        the renderer evaluates to produce it.
        """
        self.links[name] = value
        return UNSET

    def set_meta(self, value: typing.Any) -> UnsetType:
        """
        Sets the relationship's meta, either as a value or as a callable producing it.
        """
        self.meta = value
        return UNSET

    def set_include_data(self, value: typing.Any = True) -> UnsetType:
        self.include_data_setting = IncludeData.coerce(value)
        return UNSET


class ResolutionContext(DirectiveRecorder):
    """
    A :py:class:`ResolutionContext` is handed to a resolver.  It exposes the object and
    scope of the serializer that owns the relationship, and records the directives the
    resolver registers.  A new context is made for every resolution.
    """

    serializer: SerializerOwner

    @property
    def object(self) -> typing.Any:
        return self.serializer.object

    @property
    def scope(self) -> typing.Any:
        return self.serializer.scope

    def __init__(
        self,
        serializer: SerializerOwner,
        links: typing.Mapping[str, typing.Any],
        meta: typing.Any,
        include_data_setting: IncludeData,
    ):
        self.serializer = serializer
        self.links = OrderedDict(links)
        self.meta = copy.copy(meta) if isinstance(meta, (dict, list)) else meta
        self.include_data_setting = include_data_setting


Resolver = typing.Callable[[ResolutionContext], Resolved]


class Reflection(Field, DirectiveRecorder):
    """
    A :py:class:`Reflection` declares a relationship of a serializer type.

    :param str name: The name of the relationship; also the attribute read by default.
    :param Optional[Resolver] resolver: A callable that takes a :py:class:`ResolutionContext`
                                        and returns :py:data:`UNSET` or a :py:class:`Value`.
    :param Optional[str] key: The externally visible name of the relationship.
    :param serializer: A serializer type (or a :py:class:`Deferred` yielding one) to use
                       instead of the one looked up by the value's type.
    :param Optional[str] namespace: The namespace for the serializer lookup.  Inherited from
                                    the parent's render options when omitted.
    :param include_data: The inclusion policy.  Defaults to ``config.include_data_default``.
    :param Optional[Mapping] links: Links to register up front.
    :param meta: Meta to set up front.
    """

    @property
    def serializer_override(self) -> typing.Optional[SerializerFactoryType]:
        return resolve_deferred(self.options.get("serializer"))

    def new_context(self, serializer: SerializerOwner) -> ResolutionContext:
        return ResolutionContext(
            serializer=serializer,
            links=self.links,
            meta=self.meta,
            include_data_setting=self.include_data_setting,
        )

    def included(
        self, include_slice: IncludeSlice, ctx: typing.Optional[ResolutionContext] = None
    ) -> bool:
        """
        Decides whether the related data is to be included.

        :param include_slice: The relationships requested for inclusion; only the keys matter.
        :param Optional[ResolutionContext] ctx: The context of the ongoing resolution, whose
                                                setting takes precedence over the declared one.
        :raises UnknownIncludeDataSettingError: if the setting is not an :py:class:`IncludeData`.
        """
        setting = (ctx if ctx is not None else self).include_data_setting
        if setting is IncludeData.ALWAYS:
            return True
        elif setting is IncludeData.NEVER:
            return False
        elif setting is IncludeData.IF_REQUESTED:
            return include_slice is not None and self.name in include_slice
        else:
            raise UnknownIncludeDataSettingError(setting)

    def value(
        self,
        serializer: SerializerOwner,
        include_slice: IncludeSlice = None,
        ctx: typing.Optional[ResolutionContext] = None,
    ) -> typing.Any:
        """
        Computes the related object(s) for the object of ``serializer``.

        The resolver, if any, always runs.  When the relationship is not included the result
        is :py:data:`ABSENT` whatever the resolver returned.  Otherwise the resolver's value is
        used, or the attribute named after the relationship if the resolver returned
        :py:data:`UNSET`.

        :param SerializerOwner serializer: The serializer owning the relationship.
        :param include_slice: The relationships requested for inclusion.
        :param Optional[ResolutionContext] ctx: The context to run the resolver with.
        :return: The related object(s) or :py:data:`ABSENT`.
        """
        if ctx is None:
            ctx = self.new_context(serializer)

        result: Resolved = UNSET
        if self.resolver is not None:
            result = self.resolver(ctx)
            if not isinstance(result, (UnsetType, Value)):
                raise InvalidResolverResultError(self, result)

        if not self.included(include_slice, ctx):
            return ABSENT

        if isinstance(result, Value):
            return result.value
        else:
            return serializer.read_attribute_for_serialization(self.name)

    def nested_options(
        self,
        parent_serializer: SerializerOwner,
        parent_options: RenderOptions,
        directives: Directives,
    ) -> RenderOptions:
        return dataclasses.replace(
            parent_options,
            serializer=directives.serializer,
            serializer_context_class=type(parent_serializer),
            extra=dict(parent_options.extra),
        )

    def _resolve(
        self,
        value: typing.Any,
        serializer_type: typing.Optional[SerializerFactoryType],
        nested_options: typing.Callable[[], RenderOptions],
    ) -> Resolution:
        if value is ABSENT:
            return ABSENT
        if serializer_type is not None:
            instantiation = serializer_type.instantiate(value, nested_options())
            if instantiation is DECLINE:
                logger.debug(
                    "%s declined %r for relationship %s; attaching it as a virtual value",
                    serializer_type.__name__,
                    value,
                    self.name,
                )
                if value is None:
                    return ABSENT
                return VirtualValue(as_json(value))
            return NestedSerializer(instantiation.serializer)  # type: ignore
        elif value is not None and type(value) is not object:
            logger.debug(
                "no serializer for %s in relationship %s; attaching it as a virtual value",
                type(value).__name__,
                self.name,
            )
            return VirtualValue(value)
        else:
            logger.debug("relationship %s has nothing to render", self.name)
            return ABSENT

    def build_association(
        self,
        parent_serializer: SerializerOwner,
        parent_options: RenderOptions,
        include_slice: IncludeSlice = None,
    ) -> Association:
        """
        Resolves the relationship against ``parent_serializer``.

        :param SerializerOwner parent_serializer: The serializer owning the relationship.
        :param RenderOptions parent_options: The render options of ``parent_serializer``.
        :param include_slice: The relationships requested for inclusion.
        :return: A new :py:class:`Association`.
        """
        directives = Directives(
            namespace=(
                self.options.get("namespace")
                if self.options.get("namespace") is not None
                else parent_options.namespace
            ),
            serializer=self.serializer_override,
            options={
                k: v for k, v in self.options.items() if k not in ("namespace", "serializer")
            },
        )

        ctx = self.new_context(parent_serializer)
        value = self.value(parent_serializer, include_slice, ctx)
        serializer_type: typing.Optional[SerializerFactoryType] = None
        if value is not ABSENT:
            serializer_type = type(parent_serializer).serializer_for(value, directives)

        directives = dataclasses.replace(
            directives,
            include_data=self.included(include_slice, ctx),
            links=OrderedDict(ctx.links),
            meta=ctx.meta,
        )

        resolution = self._resolve(
            value,
            serializer_type,
            lambda: self.nested_options(parent_serializer, parent_options, directives),
        )
        return Association(
            name=self.key,
            reflection=self,
            directives=directives,
            resolution=resolution,
        )

    def __init__(
        self,
        name: str,
        resolver: typing.Optional[Resolver] = None,
        *,
        include_data: typing.Any = None,
        links: typing.Optional[typing.Mapping[str, typing.Any]] = None,
        meta: typing.Any = None,
        **options: typing.Any,
    ):
        super().__init__(name, resolver, **options)
        self.links = OrderedDict(links if links is not None else ())
        self.meta = meta
        self.include_data_setting = IncludeData.coerce(
            include_data if include_data is not None else config.include_data_default
        )
