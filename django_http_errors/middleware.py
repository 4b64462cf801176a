from django.core.exceptions import SuspiciousOperation
from django.http import HttpRequest, HttpResponse, FileResponse, RawPostDataException
from django.http.response import HttpResponseBase
from django.utils.datastructures import MultiValueDict
from django.utils.deprecation import MiddlewareMixin
from django.utils.html import format_html

from .exception import HttpError
from .lib import jsonDumps, jsonLoads, getSettings, ErrorSettings, LogPayload
from .redaction import redactPayload

REDIRECT_STATUSES = (301, 302)


def facetDict(facet) -> dict:
    """
    QueryDict -> dict, single values are unwrapped, repeated keys stay lists.
    """
    if isinstance(facet, MultiValueDict):
        return {
            key: values[0] if len(values) == 1 else values
            for key, values in facet.lists()
        }
    return dict(facet)


def requestBody(request: HttpRequest):
    try:
        if request.content_type == 'application/json':
            return jsonLoads(request.body) if request.body else None
        return request.POST
    except (ValueError, RawPostDataException, SuspiciousOperation):
        return None  # unreadable bodies are left out of the logs


def collectLogPayload(error: HttpError, request: HttpRequest) -> LogPayload:
    resolverMatch = getattr(request, 'resolver_match', None)
    facets = {
        'params': resolverMatch.kwargs if resolverMatch else None,
        'query': request.GET,
        'body': requestBody(request),
        'cookies': request.COOKIES,
    }

    payload: LogPayload = {}
    for name, facet in facets.items():
        if facet is None:
            continue
        payload[name] = facetDict(facet) if isinstance(facet, dict) else facet
    if error.context is not None:
        payload['context'] = error.context
    return payload


def logError(error: HttpError, request: HttpRequest, settings: ErrorSettings) -> None:
    payload = redactPayload(
        collectLogPayload(error, request),
        settings.filteredParams, settings.redactedParams,
        strategy=settings.strategy,
    )
    settings.logger.error(error.toDisplayString(), payload)


def renderResponse(error: HttpError, request: HttpRequest) -> HttpResponseBase:
    callback = request.GET.get('callback')

    # Return redirects as text regardless of request type
    if error.status in REDIRECT_STATUSES:
        response = HttpResponse(error.message, content_type='text/plain; charset=utf-8')

    # HTML responses stream the template if present, otherwise a simple html page
    elif request.accepts('text/html') and not callback:
        if error.template:
            response = FileResponse(open(error.template, 'rb'), content_type='text/html; charset=utf-8')
            # served as the page itself, not as a named file
            response.headers.pop('Content-Disposition', None)
        else:
            response = HttpResponse(
                format_html('<h2>{}</h2><p>{}</p>', error.code, error.message),
                content_type='text/html; charset=utf-8',
            )

    elif request.accepts('application/json') or callback:
        response = HttpResponse(jsonDumps(error.toResponsePayload()), content_type='application/json')

    # Everything else is treated as plaintext.
    else:
        response = HttpResponse(error.toDisplayString(), content_type='text/plain; charset=utf-8')

    response.status_code = error.status
    for headerName, headerValue in (error.headers or {}).items():
        response[headerName] = headerValue
    return response


class HttpErrorMiddleware(MiddlewareMixin):
    @staticmethod
    def process_exception(request: HttpRequest, exception: Exception) -> HttpResponseBase | None:
        """
        Log and render HttpError exceptions.
        Anything else returns None, django re-raises it untouched.
        """
        if not isinstance(exception, HttpError):
            return None

        settings = getSettings()
        # don't log HttpErrors in test mode
        if not settings.isTest:
            logError(exception, request, settings)
        return renderResponse(exception, request)
