from .json import as_json  # noqa
