#!/usr/bin/env python3

# The MIT License (MIT)
#
# Copyright (c) 2016 Benedikt Schmitt
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in all
# copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

"""
blogapi.auth
============

Personal access token authentication.

Users register or log in with their e-mail address and password and receive a
*plain text token*, which is sent in the ``Authorization: Bearer <token>``
header of all later requests. The token carries the names of the user's
permissions as *abilities*.

A plain text token has the form ``<token pk>|<random string>``. Only the
SHA-256 hash of the random part is stored, so a leaked store does not leak
usable tokens.
"""

__all__ = [
    "hash_password",
    "verify_password",
    "issue_token",
    "find_token",
    "authenticate",
    "RegisterHandler",
    "LoginHandler",
    "LogoutHandler"
]

# std
import base64
import collections
import collections.abc
import datetime
import hashlib
import hmac
import logging
import secrets
import string

# local
from .errors import Error, ErrorList, BadRequest, InvalidValue, ValidationError
from .handler import Handler
from .models import User, PersonalAccessToken
from .response import Response
from .schema import fields
from .utilities import ensure_pointer


LOG = logging.getLogger(__name__)

#: The characters of the random part of a plain text token.
TOKEN_ALPHABET = string.ascii_letters + string.digits


# Passwords
# ---------

def hash_password(password, iterations=260000):
    """
    Hashes the *password* with PBKDF2-SHA256 and a random salt::

        >>> hash_password("secret")
        'pbkdf2_sha256$260000$...$...'
    """
    salt = secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac(
        "sha256", password.encode("utf-8"), salt.encode("ascii"), iterations
    )
    digest = base64.b64encode(digest).decode("ascii")
    return "pbkdf2_sha256${}${}${}".format(iterations, salt, digest)


def verify_password(password, encoded):
    """
    Returns true, if *password* matches the *encoded* hash created by
    :func:`hash_password`.
    """
    try:
        algorithm, iterations, salt, expected = encoded.split("$", 3)
        iterations = int(iterations)
    except (AttributeError, ValueError):
        return False
    if algorithm != "pbkdf2_sha256":
        return False

    digest = hashlib.pbkdf2_hmac(
        "sha256", password.encode("utf-8"), salt.encode("ascii"), iterations
    )
    digest = base64.b64encode(digest).decode("ascii")
    return hmac.compare_digest(digest, expected)


# Tokens
# ------

def _hash_token(plain):
    return hashlib.sha256(plain.encode("utf-8")).hexdigest()


def issue_token(store, user, name, abilities=None, length=40):
    """
    Creates a new :class:`~blogapi.models.PersonalAccessToken` for the *user*.

    :arg ~blogapi.store.Store store:
    :arg ~blogapi.models.User user:
        The owner of the token.
    :arg str name:
        The name of the token (usually the device name).
    :arg list abilities:
        The granted abilities. Defaults to ``["*"]``.
    :arg int length:
        The length of the random part.
    :returns:
        A two tuple with the token entity and the plain text token. The plain
        text token can not be recovered later.
    """
    secret = "".join(secrets.choice(TOKEN_ALPHABET) for i in range(length))
    token = PersonalAccessToken(
        tokenable=user, name=name, token_hash=_hash_token(secret),
        abilities=abilities
    )
    store.add(token)
    LOG.info("Issued token %s for user %s.", token.pk, user.pk)
    return (token, "{}|{}".format(token.pk, secret))


def find_token(store, plain):
    """
    Returns the :class:`~blogapi.models.PersonalAccessToken` for the plain
    text token *plain* or *None*.
    """
    if not plain:
        return None

    if "|" not in plain:
        return store.first(PersonalAccessToken, token_hash=_hash_token(plain))

    pk, _, secret = plain.partition("|")
    try:
        token = store.get(PersonalAccessToken, int(pk))
    except ValueError:
        return None

    if token is None:
        return None
    if not hmac.compare_digest(token.token_hash, _hash_token(secret)):
        return None
    return token


def authenticate(store, request):
    """
    Resolves the bearer token of the *request* and returns the two tuple
    ``(user, token)``. Both are *None*, if the request has no valid token.
    """
    token = find_token(store, request.bearer_token)
    if token is None:
        return (None, None)

    token.last_used_at = datetime.datetime.now(datetime.timezone.utc)
    return (token.tokenable, token)


# Handlers
# --------

class Required(object):
    """
    Wraps a field and marks the input member as required.
    """

    def __init__(self, field):
        self.field = field
        return None


class AuthHandler(Handler):
    """
    Base class for the authentication endpoints. The endpoints consume and
    produce plain JSON, not JSON API documents.

    :arg ~blogapi.store.Store store:
    """

    #: Maps the name of an input member to a (:class:`Required` wrapped)
    #: field, which validates it.
    rules = collections.OrderedDict()

    def __init__(self, store, **kargs):
        super().__init__(**kargs)
        self.store = store
        return None

    @property
    def settings(self):
        return self.api.settings

    def json_response(self, obj, status=200):
        return Response(
            status=status,
            headers={"Content-Type": "application/json"},
            body=self.api.dump_json(obj)
        )

    def token_response(self, user, device_name):
        """
        Issues a token with the user's permissions as abilities and returns
        the ``{"plain-text-token": ...}`` response.
        """
        token, plain = issue_token(
            self.store, user, device_name,
            abilities=user.permission_names,
            length=self.settings.get("token_length", 40)
        )
        return self.json_response({"plain-text-token": plain})

    def validate_input(self):
        """
        Validates the JSON body against :attr:`rules` and returns it. All
        problems are reported together.

        :raises ~blogapi.errors.ErrorList:
        """
        data = self.request.json
        if data is None:
            data = dict()
        if not isinstance(data, collections.abc.Mapping):
            raise BadRequest(detail="The body must be a JSON object.")

        errors = ErrorList()
        for name, rule in self.rules.items():
            required = isinstance(rule, Required)
            field = rule.field if required else rule
            sp = ensure_pointer("/" + name)
            value = data.get(name)

            if value is None or value == "":
                if required:
                    detail = "The {} field is required."\
                        .format(name.replace("_", " "))
                    errors.append(InvalidValue(detail=detail, source_pointer=sp))
                continue

            try:
                field.validate_pre_decode(None, value, sp, "creation")
            except (Error, ErrorList) as err:
                errors.append(err)

        if errors:
            raise errors
        return data


class RegisterHandler(AuthHandler):
    """
    ``POST /register``

    Creates a new user and responds with a plain text token. Authenticated
    clients receive an empty response.
    """

    rules = collections.OrderedDict([
        ("name", Required(fields.String(min_length=1))),
        ("email", Required(fields.EMail())),
        ("password", Required(fields.String())),
        ("device_name", Required(fields.String()))
    ])

    @staticmethod
    def email_taken():
        return ValidationError(
            detail="The email has already been taken.",
            source_pointer="/email"
        )

    def post(self):
        if self.request.user is not None:
            return Response(status=204)

        data = self.validate_input()

        errors = ErrorList()
        if self.store.first(User, email=data["email"]) is not None:
            errors.append(self.email_taken())
        if data.get("password_confirmation") != data["password"]:
            errors.append(ValidationError(
                detail="The password confirmation does not match.",
                source_pointer="/password"
            ))
        if errors:
            raise errors

        user = User(
            name=data["name"],
            email=data["email"],
            password=hash_password(
                data["password"],
                self.settings.get("password_iterations", 260000)
            )
        )
        self.store.add_unique(user, self.email_taken(), email=user.email)
        LOG.info("Registered user %s.", user.pk)
        return self.token_response(user, data["device_name"])


class LoginHandler(AuthHandler):
    """
    ``POST /login``

    Checks the credentials and responds with a plain text token, whose
    abilities are the user's permissions. Authenticated clients receive an
    empty response and no new token.
    """

    rules = collections.OrderedDict([
        ("email", Required(fields.EMail())),
        ("password", Required(fields.String())),
        ("device_name", Required(fields.String()))
    ])

    def post(self):
        if self.request.user is not None:
            return Response(status=204)

        data = self.validate_input()

        user = self.store.first(User, email=data["email"])
        if user is None or not verify_password(data["password"], user.password):
            LOG.info("Failed login attempt.")
            raise ValidationError(
                detail="These credentials do not match our records.",
                source_pointer="/email"
            )
        return self.token_response(user, data["device_name"])


class LogoutHandler(AuthHandler):
    """
    ``POST /logout``

    Revokes the token used to authenticate the request.
    """

    def post(self):
        self.require_user()
        self.store.delete(self.request.token)
        LOG.info("Revoked token %s.", self.request.token.pk)
        return Response(status=204)
