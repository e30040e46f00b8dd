"""Maintenance-mode gate.

While ``AppConfig.maintenance`` is on, only clients from
``AppConfig.maintenance_allowed_ips`` get through; everyone else
receives a 503. The allow-list is checked against the socket peer,
not ``X-Forwarded-For``.
"""

from roost.config import AppConfig
from roost.http.request import Request
from roost.http.response import Response

MAINTENANCE_HTML = (
    "<h1>Maintenance in progress</h1>\n"
    "<p>The site is temporarily unavailable. Please try again later.</p>\n"
    "<p>Estimated recovery time: {eta}</p>"
)


class MaintenanceMiddleware:
    """Answer 503 while the app is in maintenance mode.

    ``eta`` is shown to visitors; JSON clients get it as
    ``estimated_recovery_time``.
    """

    __slots__ = ("config", "eta")

    def __init__(self, config: AppConfig | None = None, *, eta: str = "1 hour") -> None:
        self.config = config or AppConfig()
        self.eta = eta

    def handle(self, request: Request) -> bool:
        if not self.config.maintenance:
            return True
        # Socket peer only; forwarding headers are client-controlled.
        peer = request.client[0] if request.client else ""
        return peer in self.config.maintenance_allowed_ips

    def on_failure(self, request: Request) -> Response:
        if request.wants_json:
            return Response.json(
                {
                    "error": "Maintenance mode",
                    "message": "The site is temporarily unavailable due to maintenance work.",
                    "estimated_recovery_time": self.eta,
                },
                status=503,
            )
        return Response(body=MAINTENANCE_HTML.format(eta=self.eta), status=503)
