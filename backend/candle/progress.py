"""Progress record: the serializable snapshot of a player's economy.

Payloads pushed by the game client are stored verbatim. Defaults are only
filled in when a record is read back, and keys the server does not know about
are passed through untouched.
"""
import copy
import math
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List


@dataclass
class FireCount:
    fireType: str = ''
    count: float = 0


@dataclass
class UnlockedArtifact:
    artifactType: str = ''
    isUnlocked: bool = False


@dataclass
class ProgressRecord:
    upgradeCost: float = 200
    upgradeLevel: int = 1
    currentFireType: str = 'Basic'
    clickBonus: float = 0
    adRewardMultiplier: float = 1.75
    offlineRewardMultiplier: float = 46
    fireCounts: List[FireCount] = field(default_factory=list)
    unlockedArtifacts: List[UnlockedArtifact] = field(default_factory=list)
    equippedArtifacts: List[str] = field(default_factory=list)

    NUMERIC_FIELDS = ('upgradeCost', 'upgradeLevel', 'clickBonus',
                      'adRewardMultiplier', 'offlineRewardMultiplier')

    @classmethod
    def defaults(cls) -> Dict[str, Any]:
        return asdict(cls())

    @classmethod
    def with_defaults(cls, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Return a copy of ``payload`` with missing top-level fields defaulted.

        Unknown keys are kept. The stored payload itself is never modified.
        """
        merged = cls.defaults()
        merged.update(copy.deepcopy(payload))
        return merged

    @classmethod
    def validate(cls, payload: Dict[str, Any]) -> List[str]:
        """List problems with the numeric fields of ``payload``.

        Advisory only: the server keeps whatever the client sends, this is
        used for logging suspicious pushes.
        """
        problems = []
        for name in cls.NUMERIC_FIELDS:
            if name not in payload:
                continue
            value = payload[name]
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                problems.append(f'{name} is not a number')
            elif not math.isfinite(value) or value < 0:
                problems.append(f'{name} must be finite and non-negative')
        fire_counts = payload.get('fireCounts')
        if not isinstance(fire_counts, list):
            return problems
        for entry in fire_counts:
            count = entry.get('count') if isinstance(entry, dict) else None
            if isinstance(count, (int, float)) and not isinstance(count, bool):
                if not math.isfinite(count) or count < 0:
                    problems.append('fireCounts.count must be finite and non-negative')
        return problems
