"""ASGI entrypoint for the album maker bot."""

from album_maker.api.app import create_app
from album_maker.containers import build_container

app = create_app(build_container())
