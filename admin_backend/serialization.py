"""
JSON provider for arbitrary table rows.
"""

from datetime import date, datetime, time

from flask.json.provider import DefaultJSONProvider


class AdminJSONProvider(DefaultJSONProvider):
    """Dates and times as ISO-8601 instead of HTTP dates; bytes as hex."""

    @staticmethod
    def default(o):
        if isinstance(o, (datetime, date, time)):
            return o.isoformat()
        if isinstance(o, (bytes, bytearray, memoryview)):
            return bytes(o).hex()
        return DefaultJSONProvider.default(o)
