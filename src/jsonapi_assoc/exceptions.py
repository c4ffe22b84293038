import abc
import typing


class JSONAPIAssocException(Exception, metaclass=abc.ABCMeta):
    pass


class InvalidDeclarationError(JSONAPIAssocException):
    message: str

    def __str__(self):
        return self.message

    def __init__(self, message: str):
        self.message = message


class UnknownIncludeDataSettingError(InvalidDeclarationError):
    setting: typing.Any

    def __init__(self, setting: typing.Any):
        super().__init__(f"unknown include_data setting {setting!r}")
        self.setting = setting


class ResolutionError(JSONAPIAssocException, metaclass=abc.ABCMeta):
    @property
    @abc.abstractmethod
    def message(self) -> str:
        ...  # pragma: nocover

    def __str__(self):
        return self.message


class InvalidResolverResultError(ResolutionError):
    reflection: "reflection.Reflection"
    result: typing.Any

    @property
    def message(self) -> str:
        return (
            f'resolver of relationship "{self.reflection.name}" must return UNSET or a Value, '
            f"got {self.result!r}"
        )

    def __init__(self, reflection: "reflection.Reflection", result: typing.Any):
        self.reflection = reflection
        self.result = result


class SerializerNotFoundError(ResolutionError):
    value: typing.Any
    namespace: typing.Optional[str]

    @property
    def message(self) -> str:
        if self.namespace is None:
            return f"no serializer found for {type(self.value).__name__}"
        else:
            return f'no serializer found for {type(self.value).__name__} in namespace "{self.namespace}"'

    def __init__(self, value: typing.Any, namespace: typing.Optional[str] = None):
        self.value = value
        self.namespace = namespace


if typing.TYPE_CHECKING:
    from . import reflection  # noqa: E402
