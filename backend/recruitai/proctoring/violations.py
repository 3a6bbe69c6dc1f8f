from dataclasses import dataclass, asdict


@dataclass
class ViolationState:
    """
    Per-session violation counters. Counters only grow; reset() is the only
    way back to zero.
    """
    no_face: int = 0
    multi_face: int = 0
    tab_switch: int = 0
    attention: int = 0
    warning_message: str = ""

    def register_no_face(self) -> int:
        self.no_face += 1
        return self.no_face

    def register_multi_face(self) -> int:
        self.multi_face += 1
        return self.multi_face

    def register_tab_switch(self) -> int:
        self.tab_switch += 1
        return self.tab_switch

    def register_attention(self) -> int:
        self.attention += 1
        return self.attention

    def warn(self, message: str) -> None:
        self.warning_message = str(message or "")

    def total(self) -> int:
        return self.no_face + self.multi_face + self.tab_switch + self.attention

    def reset(self) -> None:
        self.no_face = 0
        self.multi_face = 0
        self.tab_switch = 0
        self.attention = 0
        self.warning_message = ""

    def to_dict(self) -> dict:
        return asdict(self)
