from http.client import responses
from pathlib import Path

from django.utils import timezone

from .lib import ResponsePayload

PUBLIC_DIR = Path(__file__).resolve().parent / 'public'

FALLBACK_MESSAGE = 'An unexpected error occurred'


class HttpError(Exception):
    """
    Base of every HTTP status carrying exception.
    Variants only set the class level defaults below, construction is shared.

    raise HttpForbidden("You didn't say the magic word!", userId=user.pk)
    """
    status: int = 500
    defaultMessage: str | None = None
    headers: dict[str, str] | None = None
    template: str | None = None

    def __init__(self, message: str = None, **options):
        # status first, the default code depends on it
        status = options.pop('status', None)
        if status:
            self.status = status

        self.code: str | None = responses.get(self.status)
        code = options.pop('code', None)
        if code:
            self.code = code

        self.message: str = message or self.defaultMessage or FALLBACK_MESSAGE
        self.context: dict = options  # Only for the logs, never rendered.
        self.timestamp = timezone.now()

        if self.headers is not None:
            self.headers = dict(self.headers)

        super().__init__(self.message)

    def __str__(self):
        return self.toDisplayString()

    def toDisplayString(self) -> str:
        return f'[{self.status}] {self.message}'

    def toResponsePayload(self) -> ResponsePayload:
        return {
            'code': self.code,
            'status': self.status,
            'message': self.message,
        }


class HttpRedirect(HttpError):
    status = 302

    def __init__(self, location: str, message: str = None, **options):
        if options.get('permanent'):
            self.status = 301
        self.location = location
        self.defaultMessage = f'Redirecting you to {location}'
        self.headers = {'Location': location}
        super().__init__(message, **options)


class HttpBadRequest(HttpError):
    status = 400
    defaultMessage = 'The server was unable to understand your request.'


class HttpUnauthorized(HttpError):
    status = 401
    defaultMessage = 'You must be logged in as an authorized user to access this endpoint.'
    headers = {'WWW-Authenticate': 'Basic realm="Login Required"'}


class HttpPaymentRequired(HttpError):
    status = 402
    defaultMessage = 'An authorized payment is required to use this endpoint.'


class HttpForbidden(HttpError):
    status = 403
    defaultMessage = 'You are not allowed to use this endpoint.'
    template = str(PUBLIC_DIR / 'access-forbidden.html')


class HttpNotFound(HttpError):
    status = 404
    defaultMessage = 'The resource you requested was not found.'
    template = str(PUBLIC_DIR / 'not-found.html')


class HttpRequestTimeout(HttpError):
    status = 408
    defaultMessage = 'The request you made has timed out.'


class HttpConflict(HttpError):
    status = 409
    defaultMessage = 'The server was not able to fulfill your request with the data provided.'


class HttpInternalError(HttpError):
    status = 500
