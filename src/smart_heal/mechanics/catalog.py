"""Which color each status effect is and which heal button cures it."""
from __future__ import annotations

from enum import Enum
from typing import Any, Iterable


class StatusEffect(str, Enum):
    STASIS = "stasis"
    ASLEEP = "asleep"
    BURNING = "burning"
    POISONED = "poisoned"
    FROZEN = "frozen"


class StatusEffectColor(str, Enum):
    BLACK = "black"
    BLUE = "blue"
    GREEN = "green"


class HealButton(str, Enum):
    TRICOLOR = "tricolor"
    RED = "red"
    GREEN = "green"
    BLUE = "blue"


DEFAULT_STATUS_EFFECTS: dict[str, str] = {
    StatusEffect.STASIS.value: StatusEffectColor.BLACK.value,
    StatusEffect.ASLEEP.value: StatusEffectColor.BLUE.value,
    StatusEffect.BURNING.value: StatusEffectColor.GREEN.value,
    StatusEffect.POISONED.value: StatusEffectColor.GREEN.value,
    StatusEffect.FROZEN.value: StatusEffectColor.BLUE.value,
}

# Status-effect buttons only. Tricolor and Red are handled separately.
DEFAULT_BUTTON_CURES: dict[str, str] = {
    HealButton.GREEN.value: StatusEffectColor.GREEN.value,
    HealButton.BLUE.value: StatusEffectColor.BLUE.value,
}

DEFAULT_UNHEALABLE = frozenset({StatusEffect.STASIS.value})

# Black only carries Stasis, which is removed by non-heal means.
DEFAULT_UNCURABLE_COLORS = frozenset({StatusEffectColor.BLACK.value})


class CatalogError(ValueError):
    """Base class for catalog configuration errors."""


class UnregisteredEffect(CatalogError):
    def __init__(self, kind: str) -> None:
        super().__init__(f"Status effect '{kind}' has no catalog entry")
        self.kind = kind


class UnregisteredColor(CatalogError):
    def __init__(self, color: str) -> None:
        super().__init__(f"Heal button color '{color}' has no catalog entry")
        self.color = color


class IncompleteCatalog(CatalogError):
    """Raised by validate() when the registry is inconsistent."""


def as_tag(value: str) -> str:
    """Normalize an enum member or string to its lowercase tag."""
    return str(value.value if isinstance(value, Enum) else value).lower()


class StatusEffectCatalog:
    """Read-only registry mapping effects to colors and colors to buttons.

    This is the only place that knows which effects and colors exist. Kinds,
    colors and buttons are plain lowercase strings; the built-in enums above
    are ``str`` subclasses so they can be passed anywhere a string is expected.
    """

    def __init__(
        self,
        status_effects: dict[str, str] | None = None,
        button_cures: dict[str, str] | None = None,
        universal_button: str = HealButton.TRICOLOR.value,
        health_button: str = HealButton.RED.value,
        unhealable: Iterable[str] = DEFAULT_UNHEALABLE,
        uncurable_colors: Iterable[str] = DEFAULT_UNCURABLE_COLORS,
    ) -> None:
        effects = DEFAULT_STATUS_EFFECTS if status_effects is None else status_effects
        cures = DEFAULT_BUTTON_CURES if button_cures is None else button_cures
        self._effect_colors = {as_tag(k): as_tag(v) for k, v in effects.items()}
        self._button_cures = {as_tag(k): as_tag(v) for k, v in cures.items()}
        self._color_buttons: dict[str, str] = {}
        for button, color in self._button_cures.items():
            self._color_buttons.setdefault(color, button)
        self.universal_button = as_tag(universal_button)
        self.health_button = as_tag(health_button)
        self._unhealable = frozenset(as_tag(k) for k in unhealable)
        self._uncurable_colors = frozenset(as_tag(c) for c in uncurable_colors)

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> StatusEffectCatalog:
        """Build from the ``[catalog]`` table of config.toml. Missing keys use defaults."""
        return cls(
            status_effects=config.get("status_effects"),
            button_cures=config.get("buttons"),
            universal_button=config.get("universal_button", HealButton.TRICOLOR.value),
            health_button=config.get("health_button", HealButton.RED.value),
            unhealable=config.get("unhealable", DEFAULT_UNHEALABLE),
            uncurable_colors=config.get("uncurable_colors", DEFAULT_UNCURABLE_COLORS),
        )

    # -- Lookups --

    @property
    def kinds(self) -> list[str]:
        return list(self._effect_colors)

    @property
    def colors(self) -> set[str]:
        return set(self._effect_colors.values())

    @property
    def buttons(self) -> list[str]:
        """All heal buttons, universal first."""
        return [self.universal_button, self.health_button, *self._button_cures]

    def color_of(self, kind: str) -> str:
        try:
            return self._effect_colors[as_tag(kind)]
        except KeyError:
            raise UnregisteredEffect(as_tag(kind)) from None

    def heal_button_for(self, color: str) -> str | None:
        """The status-effect button that cures *color*, or None if nothing does."""
        return self._color_buttons.get(as_tag(color))

    def cures_color(self, button: str) -> str:
        """The status-effect color a non-universal, non-health button cures."""
        try:
            return self._button_cures[as_tag(button)]
        except KeyError:
            raise UnregisteredColor(as_tag(button)) from None

    def is_registered_button(self, button: str) -> bool:
        return as_tag(button) in self.buttons

    def is_universal(self, button: str) -> bool:
        return as_tag(button) == self.universal_button

    def is_health_button(self, button: str) -> bool:
        return as_tag(button) == self.health_button

    def is_unhealable(self, kind: str) -> bool:
        return as_tag(kind) in self._unhealable

    @property
    def unhealable_kinds(self) -> frozenset[str]:
        return self._unhealable

    # -- Startup validation --

    def validate(self) -> None:
        """Check the registry once for completeness. Raises IncompleteCatalog."""
        problems: list[str] = []
        if self.universal_button == self.health_button:
            problems.append("universal and health buttons must differ")
        for special in (self.universal_button, self.health_button):
            if special in self._button_cures:
                problems.append(f"'{special}' cannot also be a status-effect button")
        for color in sorted(self.colors):
            if color not in self._color_buttons and color not in self._uncurable_colors:
                problems.append(
                    f"color '{color}' has no curing button and is not listed as uncurable"
                )
        for button, color in self._button_cures.items():
            if color not in self.colors:
                problems.append(f"button '{button}' cures '{color}', which no status effect uses")
        for kind in sorted(self._unhealable):
            if kind not in self._effect_colors:
                problems.append(f"un-healable effect '{kind}' is not registered")
        if problems:
            raise IncompleteCatalog("; ".join(problems))
