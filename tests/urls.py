import json

from django.http import HttpResponse
from django.urls import path

from django_http_errors.exception import HttpBadRequest, HttpForbidden, HttpNotFound, HttpRedirect


def ok(request):
    return HttpResponse('ok')


def missing(request, slug: str):
    raise HttpNotFound(f'No article named {slug}', slug=slug)


def forbidden(request):
    raise HttpForbidden('nope', password=request.GET.get('password'))


def moved(request):
    raise HttpRedirect('/ok/', permanent=True)


def broken(request):
    raise RuntimeError('kaboom')


def streamed(request):
    data = json.load(request)
    raise HttpBadRequest('Missing name', received=sorted(data))


urlpatterns = [
    path('ok/', ok),
    path('articles/<slug:slug>/', missing),
    path('forbidden/', forbidden),
    path('moved/', moved),
    path('broken/', broken),
    path('streamed/', streamed),
]
