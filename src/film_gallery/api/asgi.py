"""ASGI entrypoint for the film gallery API."""

from film_gallery.api.app import create_app
from film_gallery.containers import build_container

app = create_app(build_container())
