"""ASGI entrypoint for the food facts API."""

from food_facts.api.app import create_app
from food_facts.containers import build_container

app = create_app(build_container())
