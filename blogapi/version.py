#!/usr/bin/env python3

#: The version of *blogapi*.
version = "0.1.0"

#: The implemented JSON API specification version.
jsonapi_version = "1.0"
