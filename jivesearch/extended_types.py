# SPDX-License-Identifier: AGPL-3.0-or-later
"""Type extensions of the webapp:

- :py:obj:`flask.request` is replaced by :py:obj:`jive_request`
- :py:obj:`flask.Request` is replaced by :py:obj:`JiveRequest`

----

.. py:attribute:: jive_request
   :type: JiveRequest

   A replacement for :py:obj:`flask.request` with type cast :py:obj:`JiveRequest`.

.. autoclass:: JiveRequest
   :members:
"""
# pylint: disable=invalid-name

__all__ = ["JiveRequest", "jive_request"]

import typing
import flask


class JiveRequest(flask.Request):
    """The webapp extends the class :py:obj:`flask.Request` with properties
    from *this* class definition, see type cast :py:obj:`jive_request`.
    """

    start_time: float
    """Start time of the request, :py:obj:`timeit.default_timer` added by
    :py:obj:`jivesearch.webapp` to calculate the total time of the request."""

    remote_addr: str


#: A replacement for :py:obj:`flask.request` with type cast :py:obj:`JiveRequest`.
jive_request = typing.cast(JiveRequest, flask.request)
