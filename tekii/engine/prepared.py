"""Flattened, per-run lookup tables derived from a ThreatConfig."""

from dataclasses import dataclass, field

from tekii.engine.types import (
    AuraModifier,
    ClassThreatConfig,
    ThreatConfig,
    ThreatFormula,
    ThreatModifier,
)


@dataclass(frozen=True)
class PreparedConfig:
    config: ThreatConfig
    abilities_by_class: dict[str, dict[int, ThreatFormula]] = field(default_factory=dict)
    aura_modifiers: dict[int, AuraModifier] = field(default_factory=dict)
    class_modifiers: dict[str, ThreatModifier] = field(default_factory=dict)
    exclusive_groups: tuple[frozenset[int], ...] = ()
    fixate_spells: frozenset[int] = frozenset()
    aggro_loss_spells: frozenset[int] = frozenset()
    invulnerable_spells: frozenset[int] = frozenset()

    def class_config(self, wow_class: str | None) -> ClassThreatConfig | None:
        if wow_class is None:
            return None
        return self.config.classes.get(wow_class)

    def abilities_for(self, wow_class: str | None) -> dict[int, ThreatFormula]:
        """Global abilities merged with the class table; class entries win."""
        if wow_class is None or wow_class not in self.abilities_by_class:
            return dict(self.config.abilities)
        return self.abilities_by_class[wow_class]


def prepare_config(config: ThreatConfig) -> PreparedConfig:
    abilities_by_class = {
        wow_class: {**config.abilities, **class_config.abilities}
        for wow_class, class_config in config.classes.items()
    }

    # Global + every class table: a modifier applies to any actor carrying its aura.
    aura_modifiers: dict[int, AuraModifier] = dict(config.aura_modifiers)
    for class_config in config.classes.values():
        aura_modifiers.update(class_config.aura_modifiers)

    class_modifiers = {
        wow_class: ThreatModifier(
            source="class",
            name=wow_class.capitalize(),
            value=class_config.base_threat_factor,
        )
        for wow_class, class_config in config.classes.items()
        if class_config.base_threat_factor != 1
    }

    exclusive_groups = list(config.exclusive_auras)
    fixate = set(config.fixate_buffs)
    aggro_loss = set(config.aggro_loss_buffs)
    invulnerable = set(config.invulnerability_buffs)
    for class_config in config.classes.values():
        exclusive_groups.extend(class_config.exclusive_auras)
        fixate |= class_config.fixate_buffs
        aggro_loss |= class_config.aggro_loss_buffs
        invulnerable |= class_config.invulnerability_buffs

    return PreparedConfig(
        config=config,
        abilities_by_class=abilities_by_class,
        aura_modifiers=aura_modifiers,
        class_modifiers=class_modifiers,
        exclusive_groups=tuple(exclusive_groups),
        fixate_spells=frozenset(fixate),
        aggro_loss_spells=frozenset(aggro_loss),
        invulnerable_spells=frozenset(invulnerable),
    )
