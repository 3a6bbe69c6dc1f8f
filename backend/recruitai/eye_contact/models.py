from dataclasses import dataclass, asdict


@dataclass
class EyeContactStats:
    good_frames: int = 0
    total_frames: int = 0
    percent: int = 0
    average: int = 0
    max: int = 0
    # starts high so the first sample sets it; reset() restores this
    min: int = 100
    samples: int = 0

    def to_dict(self) -> dict:
        return asdict(self)
