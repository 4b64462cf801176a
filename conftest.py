import django
from django.conf import settings


def pytest_configure():
    settings.configure(
        DEBUG=False,
        SECRET_KEY='django-http-errors-tests',
        ALLOWED_HOSTS=['testserver'],
        ROOT_URLCONF='tests.urls',
        INSTALLED_APPS=[],
        MIDDLEWARE=[
            'django_http_errors.middleware.HttpErrorMiddleware',
        ],
        USE_TZ=True,
        NODE_ENV='development',
    )
    django.setup()
