from __future__ import annotations

import json

from genro_rest import Dispatcher, HandlerRegistry, RestConfig, RestController
from genro_rest.serializers import JSON_SERIALIZER, Serializer

BOOKS = {
    "1": {"title": "Dune", "author": "Frank Herbert"},
    "2": {"title": "Solaris", "author": "Stanislaw Lem"},
}
REVIEWS = {"1": [{"id": "10", "stars": 5}], "2": []}

registry = HandlerRegistry()


@registry.handler(JSON_SERIALIZER)
class JsonSerializer(Serializer):
    content_type = "application/json"

    def serialize(self, obj):
        return json.dumps(obj)


@registry.handler("bookstore.api.BookController")
class BookController(RestController):
    """/books and /books/<id>"""

    def index(self):
        books = [{"id": key, **book} for key, book in BOOKS.items()]
        return self.serialize(books) if self.serializer else books

    def show(self):
        book = BOOKS.get(self.get_id())
        return self.serialize(book) if self.serializer else book


@registry.handler("bookstore.api.ReviewController")
class ReviewController(RestController):
    """Reviews are nested below books: /books/<id>/reviews"""

    def index(self):
        return REVIEWS.get(self.get_id("books"), [])


if __name__ == "__main__":
    dispatcher = Dispatcher(RestConfig(main_package="bookstore.api"), registry).plug("logging", print=True)

    print("--- Convention-based dispatch ---")
    print(f"GET /books        -> {dispatcher.dispatch('/books')}")
    print(f"GET /books/1.json -> {dispatcher.dispatch('/books/1.json')}")
    print(f"GET /books/1/reviews -> {dispatcher.dispatch('/books/1/reviews')}")

    ctx = dispatcher.build_context("/books/2/reviews", content_type="application/json")
    print("\nResolved context:")
    print(f" - chain:      {ctx.chain.to_list()}")
    print(f" - controller: {ctx.controller}")
    print(f" - serializer: {ctx.serializer}")
    print(f" - action:     {ctx.action}")
