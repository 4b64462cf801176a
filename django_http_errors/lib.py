import dataclasses
import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol
from warnings import warn

from typing_extensions import TypedDict, NotRequired

from django.conf import settings as djangoSettings

DEFAULT_FILTERED_PARAMS = ('password', 'tax_id')
DEFAULT_REDACTED_PARAMS = ('token',)
REDACTION_STRATEGIES = ('text', 'structure')

TEST_ENVIRONMENT = 'test'


def jsonDumpDefault(target: Any):
    if isinstance(target, (set, frozenset)):
        return list(target)

    return f'{target}'


def jsonDumps(target) -> str:
    return json.dumps(
        target, default=jsonDumpDefault,
        ensure_ascii=False, separators=(',', ':'),
    )


jsonLoads = json.loads


class ResponsePayload(TypedDict):
    code: str | None
    status: int
    message: str


class LogPayload(TypedDict):
    params: NotRequired[dict]
    query: NotRequired[dict]
    body: NotRequired[Any]
    cookies: NotRequired[dict]
    context: NotRequired[dict]


class ErrorLoggerType(Protocol):
    def error(self, message: str, payload: LogPayload) -> None:
        ...


class ErrorLogger:
    """
    Default logger collaborator, payloads are written as JSON after the message.
    """

    def __init__(self, logger: logging.Logger | logging.LoggerAdapter = None):
        self.logger = logger or logging.getLogger('django_http_errors')

    def error(self, message: str, payload: LogPayload) -> None:
        self.logger.error('%s %s', message, jsonDumps(payload))


class ConfigProvider(Protocol):
    def get(self, key: str, default=None):
        ...


class StoreConfig:
    """
    Accessor style sources, anything exposing get(name) like an nconf store.
    """

    def __init__(self, source):
        self.source = source

    def get(self, key: str, default=None):
        value = self.source.get(key)
        return default if value is None else value


class MappingConfig:
    """
    Plain sources read by direct field access, a dict or django.conf.settings.
    """

    def __init__(self, source):
        self.source = source

    def get(self, key: str, default=None):
        if isinstance(self.source, Mapping):
            return self.source.get(key, default)
        return getattr(self.source, key, default)


def configProvider(source=None) -> ConfigProvider:
    if source is None:
        return MappingConfig(djangoSettings)
    if isinstance(source, (StoreConfig, MappingConfig)):
        return source
    # nconf-style stores are recognised by their marker field
    if hasattr(source, 'stores'):
        return StoreConfig(source)
    return MappingConfig(source)


def paramList(value, default: tuple[str, ...]) -> tuple[str, ...]:
    if not value:
        return default
    if isinstance(value, str):
        value = [item.strip() for item in value.split(',')]
    return tuple(item for item in value if item)


@dataclasses.dataclass(frozen=True)
class ErrorSettings:
    filteredParams: tuple[str, ...] = DEFAULT_FILTERED_PARAMS
    redactedParams: tuple[str, ...] = DEFAULT_REDACTED_PARAMS
    environment: str | None = None
    strategy: str = 'text'
    logger: ErrorLoggerType = dataclasses.field(default_factory=ErrorLogger)

    @property
    def isTest(self) -> bool:
        return self.environment == TEST_ENVIRONMENT


def loadSettings(configSource=None, logger: ErrorLoggerType = None) -> ErrorSettings:
    config = configProvider(configSource)

    strategy = config.get('LOG_REDACTION_STRATEGY') or 'text'
    if strategy not in REDACTION_STRATEGIES:
        warn(f'Unknown LOG_REDACTION_STRATEGY {strategy!r}, falling back to text.')
        strategy = 'text'

    # stdlib loggers would take the payload as %-format args
    if isinstance(logger, (logging.Logger, logging.LoggerAdapter)):
        logger = ErrorLogger(logger)

    return ErrorSettings(
        filteredParams=paramList(config.get('LOG_FILTERED_PARAMS'), DEFAULT_FILTERED_PARAMS),
        redactedParams=paramList(config.get('LOG_REDACTED_PARAMS'), DEFAULT_REDACTED_PARAMS),
        environment=config.get('NODE_ENV'),
        strategy=strategy,
        logger=logger or ErrorLogger(),
    )


_settings: ErrorSettings | None = None


def configure(configSource=None, logger: ErrorLoggerType = None) -> ErrorSettings:
    """
    Initialization hook, call once at startup (an AppConfig.ready for instance).
    Without it the settings are loaded from django.conf.settings on first use.
    """
    global _settings
    _settings = loadSettings(configSource, logger)
    return _settings


def getSettings() -> ErrorSettings:
    global _settings
    if _settings is None:
        _settings = loadSettings()
    return _settings


def resetSettings() -> None:
    global _settings
    _settings = None
