#!/usr/bin/env python3

"""
blogapi
=======

A JSON API backend for a small blog (articles, categories and users) with
personal access token authentication and compound documents
(``?include=category``).
"""

# local
from . import version
from .api import API
from .app import create_api
from .request import Request
from .response import Response
