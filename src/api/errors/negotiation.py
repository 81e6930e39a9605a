"""
Accept-header content negotiation for error bodies.

Only the media types the error pipeline can render are considered. When
nothing in the header matches, HTML is used.
"""

JSON = "application/json"
XML = "application/xml"
TEXT_XML = "text/xml"
HTML = "text/html"

KNOWN_CONTENT_TYPES = (JSON, XML, TEXT_XML, HTML)


class AcceptNegotiator:
    """Picks the error body media type from an Accept header."""

    default = HTML

    def negotiate(self, accept_header: str | None) -> str:
        """
        Pick the best renderable media type.

        Entries are ranked by their q parameter (header order breaks ties).
        Structured-syntax suffixes such as application/problem+json map to
        their base type.
        """
        for media_type in self._ranked(accept_header or ""):
            if media_type in KNOWN_CONTENT_TYPES:
                return media_type
            if media_type.endswith("+json"):
                return JSON
            if media_type.endswith("+xml"):
                return XML
        return self.default

    @staticmethod
    def _ranked(accept_header: str) -> list[str]:
        entries = []
        for position, part in enumerate(accept_header.split(",")):
            media_type, _, params = part.partition(";")
            media_type = media_type.strip().lower()
            if not media_type:
                continue
            quality = 1.0
            for param in params.split(";"):
                key, _, value = param.partition("=")
                if key.strip() == "q":
                    try:
                        quality = float(value)
                    except ValueError:
                        quality = 0.0
            if quality > 0:
                entries.append((-quality, position, media_type))
        return [media_type for _, _, media_type in sorted(entries)]
