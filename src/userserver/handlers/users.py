"""
=============================================================================
USER HANDLERS
=============================================================================

The five CRUD operations on /users. Every handler is a function of the
request alone: it parses what it needs, runs one store session, and
returns an HTTPResponse. Handlers NEVER raise; every failure becomes a
response right here.

=============================================================================
RESPONSE TABLE
=============================================================================

    ┌──────────┬────────────────────────┬──────────────────────────────────┐
    │ Handler  │ Success                │ Failure                          │
    ├──────────┼────────────────────────┼──────────────────────────────────┤
    │ create   │ 200 "User created"     │ 500 "Internal error"             │
    │ read_one │ 200 {user}             │ 500 "Internal error" (bad id,    │
    │          │                        │     no connection)               │
    │          │                        │ 500 "User not found" (no row,    │
    │          │                        │     query error)                 │
    │ read_all │ 200 [users]            │ 500 "Internal error"             │
    │ update   │ 200 "User updated"     │ 500 "Internal error"             │
    │ delete   │ 200 "User deleted"     │ 404 "User not found" (0 rows)    │
    │          │                        │ 500 "Internal error"             │
    └──────────┴────────────────────────┴──────────────────────────────────┘

Two behaviors are kept on purpose:

- read_one answers a missing row with 500, not 404. Delete is the only
  operation that reports 404 for an unknown id.
- update answers 200 whether or not a row matched the id.

Malformed ids, malformed bodies and store failures all produce the same
generic 500 body; the client cannot tell them apart. The cause is
logged server-side.

=============================================================================
"""

import logging

from ..codec import CodecError, decode_user, encode_user, encode_users
from ..http.request import HTTPRequest, InvalidIdError
from ..http.response import HTTPResponse, internal_error, not_found, ok, ok_json
from ..http.router import Router
from ..store import StoreError, UserStore


logger = logging.getLogger(__name__)


USER_CREATED = "User created"
USER_UPDATED = "User updated"
USER_DELETED = "User deleted"
USER_NOT_FOUND = "User not found"


class UserHandlers:
    """
    CRUD handlers bound to one UserStore.

    Usage:
        handlers = UserHandlers(UserStore("sqlite:///users.db"))
        router = Router()
        handlers.register(router)
    """

    def __init__(self, store: UserStore):
        self.store = store

    def register(self, router: Router) -> Router:
        """
        Install the five routes in priority order.

        "GET /users/" has to come before "GET /users": the second is a
        prefix of the first.
        """
        router.post("/users", name="create")(self.create)
        router.get("/users/", name="read_one")(self.read_one)
        router.get("/users", name="read_all")(self.read_all)
        router.put("/users", name="update")(self.update)
        router.delete("/users", name="delete")(self.delete)
        return router

    # =========================================================================
    # CREATE: POST /users
    # =========================================================================

    def create(self, request: HTTPRequest) -> HTTPResponse:
        """Insert the user described by the body. The id is left to the store."""
        try:
            user = decode_user(request.body)
            with self.store.session() as db:
                db.insert(user)
        except (CodecError, StoreError) as e:
            logger.warning(f"Create failed: {e}")
            return internal_error()

        return ok(USER_CREATED)

    # =========================================================================
    # READ ONE: GET /users/<id>
    # =========================================================================

    def read_one(self, request: HTTPRequest) -> HTTPResponse:
        """Return one user as JSON."""
        try:
            user_id = request.user_id
            session = self.store.session()
        except (InvalidIdError, StoreError) as e:
            logger.warning(f"Read failed: {e}")
            return internal_error()

        try:
            with session as db:
                user = db.fetch_one(user_id)
        except StoreError as e:
            logger.warning(f"Read of user {user_id} failed: {e}")
            user = None

        if user is None:
            # 500 rather than 404, see module docstring
            return internal_error(USER_NOT_FOUND)

        return ok_json(encode_user(user))

    # =========================================================================
    # READ ALL: GET /users
    # =========================================================================

    def read_all(self, request: HTTPRequest) -> HTTPResponse:
        """Return every user as a JSON array, possibly empty."""
        try:
            with self.store.session() as db:
                users = db.fetch_all()
        except StoreError as e:
            logger.warning(f"List failed: {e}")
            return internal_error()

        return ok_json(encode_users(users))

    # =========================================================================
    # UPDATE: PUT /users/<id>
    # =========================================================================

    def update(self, request: HTTPRequest) -> HTTPResponse:
        """
        Overwrite name and email of the addressed user.

        No existence check: an unknown id still answers 200.
        """
        try:
            user_id = request.user_id
            user = decode_user(request.body)
            with self.store.session() as db:
                changed = db.update(user_id, user)
        except (InvalidIdError, CodecError, StoreError) as e:
            logger.warning(f"Update failed: {e}")
            return internal_error()

        if not changed:
            logger.info(f"Update of user {user_id} matched no row")
        return ok(USER_UPDATED)

    # =========================================================================
    # DELETE: DELETE /users/<id>
    # =========================================================================

    def delete(self, request: HTTPRequest) -> HTTPResponse:
        """Remove the addressed user; 404 when nothing was deleted."""
        try:
            user_id = request.user_id
            with self.store.session() as db:
                deleted = db.delete(user_id)
        except (InvalidIdError, StoreError) as e:
            logger.warning(f"Delete failed: {e}")
            return internal_error()

        if deleted == 0:
            return not_found(USER_NOT_FOUND)

        return ok(USER_DELETED)


def build_router(store: UserStore) -> Router:
    """A Router with the user routes installed, ready to serve."""
    return UserHandlers(store).register(Router())
