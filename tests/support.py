"""Resource controllers and credentials shared by the test suite."""

from typing import Any

from restcore.rest.controllers.base import Controller

# Minimum bcrypt cost keeps hashing fast in tests
TEST_BCRYPT_ROUNDS = 4
TEST_USERNAME = "alice"
TEST_PASSWORD = "s3cret:with:colons"


class UserProfile(Controller):
    """Read-only collection of profiles."""

    methods = frozenset({"GET"})

    def action_get_collection(self) -> list[dict[str, Any]]:
        assert self.user is not None
        return [{"username": self.user.username}]


class User(Controller):
    """Single users that can be read and replaced."""

    methods = frozenset({"GET", "PUT"})

    def action_get(self) -> dict[str, Any]:
        return {"id": self.request.resource_id}

    def action_get_email(self) -> dict[str, Any]:
        return {"id": self.request.resource_id, "email": "alice@example.com"}

    def action_put(self) -> dict[str, Any]:
        return {"id": self.request.resource_id, "data": self.data}


class Order(Controller):
    """Accepts every method; records hook calls."""

    methods = frozenset({"GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"})

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.calls: list[str] = []

    def before(self) -> None:
        self.calls.append("before")

    def after(self) -> None:
        self.calls.append("after")

    def action_get_collection(self) -> list[Any]:
        self.calls.append("get_collection")
        return []

    def action_post(self) -> dict[str, Any]:
        self.response.status_code = 201
        return {"created": self.data}

    def action_patch(self) -> dict[str, Any]:
        return {"id": self.request.resource_id, "patched": self.data}

    def action_delete(self) -> None:
        self.response.status_code = 204

    def action_get(self) -> None:
        raise RuntimeError("order storage unavailable")
