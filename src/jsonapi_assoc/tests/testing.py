import dataclasses
import typing

from ..models import DECLINE, Instantiation, RenderOptions
from ..reflection import Reflection
from ..registry import SerializerRegistry
from ..serializer import Serializer


@dataclasses.dataclass
class Author:
    name: str
    id: typing.Optional[int] = None


@dataclasses.dataclass
class Comment:
    body: str
    author: typing.Optional[Author] = None
    id: typing.Optional[int] = None


@dataclasses.dataclass
class Post:
    title: str
    author: typing.Optional[Author] = None
    comments: typing.Sequence[Comment] = dataclasses.field(default_factory=list)
    blog: typing.Any = None
    id: typing.Optional[int] = None


class Money:
    amount: int
    currency: str

    def as_json(self) -> typing.Dict[str, typing.Any]:
        return {"amount": self.amount, "currency": self.currency}

    def __init__(self, amount: int, currency: str):
        self.amount = amount
        self.currency = currency


plain_registry = SerializerRegistry()


class PlainSerializer(Serializer):
    registry = plain_registry


class AuthorSerializer(PlainSerializer):
    pass


class CommentSerializer(PlainSerializer):
    reflections = [Reflection("author")]


class PostSerializer(PlainSerializer):
    reflections = [Reflection("author"), Reflection("comments")]


class DecliningSerializer(PlainSerializer):
    @classmethod
    def instantiate(cls, value: typing.Any, options: RenderOptions) -> Instantiation:
        return DECLINE


plain_registry.register(Author, AuthorSerializer)
plain_registry.register(Comment, CommentSerializer)
plain_registry.register(Post, PostSerializer)
