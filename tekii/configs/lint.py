"""Consistency checks over the static rule tables."""

from collections import defaultdict

from tekii.engine.types import ThreatConfig


def find_duplicate_spell_ids(config: ThreatConfig) -> dict[int, list[str]]:
    """Spell ids defined by more than one table (global or class).

    Ability and aura-modifier tables are checked separately; a spell id may
    legitimately be both an ability and an aura. Returns {spell id: [table names]}.
    """
    duplicates: dict[int, list[str]] = {}
    for table_name in ("abilities", "aura_modifiers"):
        owners: dict[int, list[str]] = defaultdict(list)
        for spell_id in getattr(config, table_name):
            owners[spell_id].append(f"global.{table_name}")
        for wow_class, class_config in config.classes.items():
            for spell_id in getattr(class_config, table_name):
                owners[spell_id].append(f"{wow_class}.{table_name}")
        for spell_id, tables in owners.items():
            if len(tables) > 1:
                duplicates.setdefault(spell_id, []).extend(tables)
    return dict(sorted(duplicates.items()))
