"""Order entity; reaches into the application layer on purpose."""

from shop.application.checkout import Checkout


class Order:
    def submit(self) -> str:
        return Checkout().run(self)
