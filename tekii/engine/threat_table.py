"""Cumulative threat per (actor, enemy, enemy instance)."""

EnemyKey = tuple[int, int]


class ThreatTable:
    """Running threat totals. Values are clamped at zero."""

    def __init__(self):
        self._threat: dict[EnemyKey, dict[int, float]] = {}

    def get(self, actor_id: int, enemy_id: int, enemy_instance: int = 0) -> float:
        return self._threat.get((enemy_id, enemy_instance), {}).get(actor_id, 0.0)

    def add(self, actor_id: int, enemy_id: int, enemy_instance: int, amount: float) -> float:
        current = self.get(actor_id, enemy_id, enemy_instance)
        return self.set(actor_id, enemy_id, enemy_instance, current + amount)

    def set(self, actor_id: int, enemy_id: int, enemy_instance: int, amount: float) -> float:
        total = max(0.0, amount)
        self._threat.setdefault((enemy_id, enemy_instance), {})[actor_id] = total
        return total

    def actors_on(self, enemy_id: int, enemy_instance: int = 0) -> dict[int, float]:
        return dict(sorted(self._threat.get((enemy_id, enemy_instance), {}).items()))

    def enemies_for(self, actor_id: int) -> list[tuple[EnemyKey, float]]:
        return [
            (key, table[actor_id])
            for key, table in sorted(self._threat.items())
            if actor_id in table
        ]

    def top_actors(
        self, enemy_id: int, enemy_instance: int = 0, count: int = 1,
    ) -> list[tuple[int, float]]:
        """Highest-threat actors first; ties broken by lower actor id."""
        table = self._threat.get((enemy_id, enemy_instance), {})
        ranked = sorted(table.items(), key=lambda item: (-item[1], item[0]))
        return ranked[:count]

    def snapshot(self) -> list[dict]:
        return [
            {
                "enemyId": enemy_id,
                "enemyInstance": enemy_instance,
                "threat": {str(actor_id): total for actor_id, total in sorted(table.items())},
            }
            for (enemy_id, enemy_instance), table in sorted(self._threat.items())
        ]
