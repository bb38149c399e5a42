"""Checkout use case."""

import json

from ..infrastructure.db import Database


class Checkout:
    def run(self, order: object) -> str:
        return json.dumps(Database().save(order))
