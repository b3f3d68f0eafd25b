"""ASGI entrypoint for the nutrient mapping API."""

from nutrient_mapping.api.app import create_app
from nutrient_mapping.containers import build_container

app = create_app(build_container())
