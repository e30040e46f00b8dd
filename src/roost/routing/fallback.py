"""Convention-based routing for paths no registered route matched.

``/user/edit-profile/7`` resolves to ``UserController.editProfile("7")``.
The dispatcher then accepts the snake_case spelling of the action too,
so the controller method may be written ``edit_profile``.
"""

from dataclasses import dataclass

from roost.config import AppConfig
from roost.http.query import split_target


@dataclass(frozen=True, slots=True)
class FallbackTarget:
    """Controller, action and positional params derived from a path."""

    controller: str
    action: str
    params: tuple[str, ...] = ()


def camelize(segment: str) -> str:
    """``bar-baz`` -> ``barBaz``. Empty pieces are dropped."""
    head, *rest = segment.split("-")
    return head + "".join(part[:1].upper() + part[1:] for part in rest if part)


class FallbackResolver:
    """Derives a dispatch target from raw path segments.

    An empty path resolves to ``default_controller/default_action``
    (``home/index`` unless configured otherwise).
    """

    __slots__ = ("default_action", "default_controller", "suffix")

    def __init__(
        self,
        *,
        default_controller: str = "home",
        default_action: str = "index",
        suffix: str = "Controller",
    ) -> None:
        self.default_controller = default_controller
        self.default_action = default_action
        self.suffix = suffix

    @classmethod
    def from_config(cls, config: AppConfig) -> "FallbackResolver":
        return cls(
            default_controller=config.default_controller,
            default_action=config.default_action,
            suffix=config.controller_suffix,
        )

    def resolve(self, path: str) -> FallbackTarget:
        path = split_target(path)[0].strip("/")
        if not path:
            path = f"{self.default_controller}/{self.default_action}"

        segments = path.split("/")
        name = segments[0]
        controller = name[:1].upper() + name[1:] + self.suffix
        action = self.default_action
        if len(segments) > 1 and segments[1]:
            action = camelize(segments[1])
        return FallbackTarget(controller, action, tuple(segments[2:]))
