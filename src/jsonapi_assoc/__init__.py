from .config import Config, configure, override  # noqa
from .deferred import Deferred  # noqa
from .exceptions import (  # noqa
    InvalidDeclarationError,
    InvalidResolverResultError,
    JSONAPIAssocException,
    ResolutionError,
    SerializerNotFoundError,
    UnknownIncludeDataSettingError,
)
from .models import (  # noqa
    ABSENT,
    DECLINE,
    UNSET,
    Association,
    Built,
    Directives,
    IncludeData,
    NestedSerializer,
    RenderOptions,
    Value,
    VirtualValue,
)
from .reflection import Reflection, ResolutionContext  # noqa
from .registry import SerializerRegistry, default_registry  # noqa
from .serializer import CollectionSerializer, Serializer, build_serializer  # noqa
