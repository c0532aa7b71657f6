"""ASGI entrypoint for the photo describe API."""

from photo_describe.api.app import create_app
from photo_describe.containers import build_container

app = create_app(build_container())
