import pytest
import sqlalchemy as sa  # type: ignore
from sqlalchemy import orm  # type: ignore

from ....models import RenderOptions, VirtualValue
from ....reflection import Reflection
from ....serializer import CollectionSerializer, Serializer, build_serializer
from ..core import SQLASerializerRegistry, object_mapper_or_none


class Entity:
    def __init__(self, **kwargs):
        for k, v in kwargs.items():
            setattr(self, k, v)


class TestSQLASerializerRegistry:
    @pytest.fixture
    def metadata(self):
        yield sa.MetaData()

    @pytest.fixture
    def table_author(self, metadata):
        return sa.Table(
            "author",
            metadata,
            sa.Column("id", sa.Integer(), autoincrement=True, primary_key=True),
            sa.Column("name", sa.String(255), nullable=False),
        )

    @pytest.fixture
    def table_post(self, metadata, table_author):
        return sa.Table(
            "post",
            metadata,
            sa.Column("id", sa.Integer(), autoincrement=True, primary_key=True),
            sa.Column("type", sa.String(32), nullable=False),
            sa.Column("title", sa.String(255), nullable=False),
            sa.Column("author_id", sa.Integer(), sa.ForeignKey(table_author.c.id)),
        )

    @pytest.fixture
    def table_comment(self, metadata, table_post):
        return sa.Table(
            "comment",
            metadata,
            sa.Column("id", sa.Integer(), autoincrement=True, primary_key=True),
            sa.Column("body", sa.String(255), nullable=False),
            sa.Column("post_id", sa.Integer(), sa.ForeignKey(table_post.c.id)),
        )

    @pytest.fixture
    def engine(self):
        yield sa.create_engine("sqlite:///")

    @pytest.fixture
    def Author(self):
        class Author(Entity):
            pass

        return Author

    @pytest.fixture
    def Post(self):
        class Post(Entity):
            pass

        return Post

    @pytest.fixture
    def FeaturedPost(self, Post):
        class FeaturedPost(Post):
            pass

        return FeaturedPost

    @pytest.fixture
    def Comment(self):
        class Comment(Entity):
            pass

        return Comment

    @pytest.fixture
    def sa_registry(
        self, table_author, table_post, table_comment, Author, Post, FeaturedPost, Comment
    ):
        sa_registry = orm.registry()
        sa_registry.map_imperatively(Author, table_author)
        sa_registry.map_imperatively(Comment, table_comment)
        post_sa_mapper = sa_registry.map_imperatively(
            Post,
            table_post,
            polymorphic_on=table_post.c.type,
            polymorphic_identity="post",
            properties={
                "author": orm.relationship(Author),
                "comments": orm.relationship(Comment, collection_class=set),
            },
        )
        sa_registry.map_imperatively(
            FeaturedPost, inherits=post_sa_mapper, polymorphic_identity="featured"
        )
        yield sa_registry
        sa_registry.dispose()

    @pytest.fixture
    def registry(self):
        return SQLASerializerRegistry()

    @pytest.fixture
    def SQLASerializer(self, registry):
        class SQLASerializer(Serializer):
            pass

        SQLASerializer.registry = registry
        return SQLASerializer

    @pytest.fixture
    def AuthorSerializer(self, registry, SQLASerializer, Author):
        class AuthorSerializer(SQLASerializer):
            pass

        registry.register(Author, AuthorSerializer)
        return AuthorSerializer

    @pytest.fixture
    def CommentSerializer(self, registry, SQLASerializer, Comment):
        class CommentSerializer(SQLASerializer):
            pass

        registry.register(Comment, CommentSerializer)
        return CommentSerializer

    @pytest.fixture
    def PostSerializer(self, registry, SQLASerializer, Post):
        class PostSerializer(SQLASerializer):
            reflections = [Reflection("author"), Reflection("comments"), Reflection("title")]

        registry.register(Post, PostSerializer)
        return PostSerializer

    @pytest.fixture
    def session(self, engine, metadata, sa_registry):
        metadata.create_all(bind=engine)
        session = orm.Session(bind=engine)
        yield session
        session.close()

    @pytest.mark.usefixtures("sa_registry")
    def test_object_mapper_or_none(self, Author, FeaturedPost):
        assert object_mapper_or_none(Author(name="alice")) is orm.class_mapper(Author)
        assert object_mapper_or_none(FeaturedPost(title="x")) is orm.class_mapper(FeaturedPost)
        assert object_mapper_or_none(Author) is None
        assert object_mapper_or_none(None) is None
        assert object_mapper_or_none(Entity()) is None
        assert object_mapper_or_none([]) is None

    @pytest.mark.usefixtures("sa_registry")
    def test_lookup_along_mapper_hierarchy(
        self, registry, PostSerializer, SQLASerializer, Post, FeaturedPost
    ):
        featured_post = FeaturedPost(title="x")
        assert registry.lookup(featured_post) is PostSerializer
        assert registry.query_serializer_by_mapper(orm.class_mapper(FeaturedPost)) is (
            PostSerializer
        )

        class FeaturedPostSerializer(SQLASerializer):
            pass

        registry.register(FeaturedPost, FeaturedPostSerializer)
        assert registry.lookup(featured_post) is FeaturedPostSerializer
        assert registry.lookup(Post(title="y")) is PostSerializer

    @pytest.mark.usefixtures("sa_registry")
    def test_lookup_in_namespace(self, registry, PostSerializer, SQLASerializer, Post, FeaturedPost):
        class V2PostSerializer(SQLASerializer):
            pass

        registry.register(Post, V2PostSerializer, namespace="v2")
        assert registry.lookup(FeaturedPost(title="x"), namespace="v2") is V2PostSerializer
        assert registry.lookup(FeaturedPost(title="x"), namespace="v3") is PostSerializer

    @pytest.mark.usefixtures("sa_registry")
    def test_unmapped_value(self, registry, SQLASerializer):
        class Tag(Entity):
            pass

        class SpecialTag(Tag):
            pass

        class TagSerializer(SQLASerializer):
            pass

        registry.register(Tag, TagSerializer)
        assert registry.lookup(SpecialTag()) is TagSerializer
        assert registry.lookup(1) is None

    def test_is_collection(self, registry, session, Comment):
        assert registry.is_collection(set())
        assert registry.is_collection(frozenset())
        assert registry.is_collection([])
        assert registry.is_collection(session.query(Comment))
        assert not registry.is_collection("comment")
        assert not registry.is_collection({})

    @pytest.mark.usefixtures("AuthorSerializer", "CommentSerializer")
    def test_associations(
        self, registry, session, PostSerializer, CommentSerializer, Author, FeaturedPost, Comment
    ):
        session.add(
            FeaturedPost(
                title="hello",
                author=Author(name="alice"),
                comments={Comment(body="first"), Comment(body="second")},
            )
        )
        session.commit()

        post = session.query(FeaturedPost).one()
        post_serializer = build_serializer(post, RenderOptions(namespace="v2"), registry=registry)
        assert type(post_serializer) is PostSerializer

        associations = {a.name: a for a in post_serializer.associations()}
        author_serializer = associations["author"].serializer
        assert author_serializer.object is post.author
        assert author_serializer.options.namespace == "v2"
        assert author_serializer.options.serializer_context_class is PostSerializer

        comments_serializer = associations["comments"].serializer
        assert isinstance(comments_serializer, CollectionSerializer)
        assert comments_serializer.registry is registry
        assert sorted(s.object.body for s in comments_serializer) == ["first", "second"]
        assert {type(s) for s in comments_serializer} == {CommentSerializer}

        assert associations["title"].resolution == VirtualValue("hello")

    def test_query(self, registry, session, CommentSerializer, Comment):
        session.add_all([Comment(body="first"), Comment(body="second")])
        session.commit()

        serializer = build_serializer(
            session.query(Comment).order_by(Comment.id), registry=registry
        )
        assert isinstance(serializer, CollectionSerializer)
        assert [s.object.body for s in serializer] == ["first", "second"]
        assert {type(s) for s in serializer} == {CommentSerializer}
